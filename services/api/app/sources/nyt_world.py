from __future__ import annotations

from .base import FeedConfig, RssSource

PARSER = RssSource(FeedConfig(
    id='nyt-world',
    name='New York Times World News',
    url='https://rss.nytimes.com/services/xml/rss/nyt/World.xml',
    description='World news from The New York Times',
    logo_url='https://static01.nyt.com/images/misc/NYT_logo_rss_250x40.png',
))
