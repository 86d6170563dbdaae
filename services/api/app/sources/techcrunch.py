from __future__ import annotations

from .base import FeedConfig, RssSource

_LOGO = 'https://techcrunch.com/wp-content/uploads/2015/02/cropped-cropped-favicon-gradient.png'

STARTUPS = RssSource(FeedConfig(
    id='techcrunch-startups',
    name='TechCrunch Startups',
    url='https://techcrunch.com/category/startups/feed/',
    description='Startup news, funding announcements, and innovation stories from TechCrunch',
    logo_url=_LOGO,
))

AI = RssSource(FeedConfig(
    id='techcrunch-ai',
    name='TechCrunch AI',
    url='https://techcrunch.com/category/artificial-intelligence/feed/',
    description='Artificial intelligence news and developments from TechCrunch',
    logo_url=_LOGO,
))
