from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional

from .base import FeedConfig, SourceParser
from .bbc_news import PARSER as bbc_news
from .guardian_world import PARSER as guardian_world
from .nyt_world import PARSER as nyt_world
from .techcrunch import STARTUPS as techcrunch_startups, AI as techcrunch_ai
from .colombia_one import PARSER as colombia_one

# Registry keyed by feed id, in display order. Read-only after import.
REGISTRY: Mapping[str, SourceParser] = MappingProxyType({
    p.config.id: p
    for p in (
        bbc_news,
        guardian_world,
        nyt_world,
        techcrunch_startups,
        techcrunch_ai,
        colombia_one,
    )
})

def list_feed_ids() -> List[str]:
    return list(REGISTRY.keys())

def list_feeds() -> List[FeedConfig]:
    return [p.config for p in REGISTRY.values()]

def get_parser(feed_id: str) -> Optional[SourceParser]:
    return REGISTRY.get(feed_id)

def get_feed_by_id(feed_id: str) -> Optional[FeedConfig]:
    parser = REGISTRY.get(feed_id)
    return parser.config if parser is not None else None
