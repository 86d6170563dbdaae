from __future__ import annotations

from .base import FeedConfig, RssSource

PARSER = RssSource(FeedConfig(
    id='bbc-news',
    name='BBC News',
    url='https://feeds.bbci.co.uk/news/rss.xml',
    description='The latest stories from the BBC',
    logo_url='https://news.bbcimg.co.uk/nol/shared/img/bbc_news_120x60.gif',
))
