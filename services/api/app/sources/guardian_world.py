from __future__ import annotations

from .base import FeedConfig, RssSource

PARSER = RssSource(FeedConfig(
    id='guardian-world',
    name='The Guardian World News',
    url='https://www.theguardian.com/world/rss',
    description='Latest World news, comment and analysis from the Guardian',
    logo_url='https://assets.guim.co.uk/images/guardian-logo-rss.c45beb1bafa34b347ac333af2e6fe23f.png',
))
