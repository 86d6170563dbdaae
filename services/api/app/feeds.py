from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import settings
from .errors import FetchError, NotFoundError, ValidationError
from .models import Feed
from .sources import REGISTRY, get_parser
from .sources.base import SourceParser, fetch_single_rss_feed

logger = logging.getLogger(__name__)

__all__ = ["FeedResult", "fetch_rss_feed", "fetch_feed_by_id", "fetch_single_rss_feed"]


@dataclass
class FeedResult:
    """Outcome of fetching one registry entry: either ``feed`` or ``error``."""

    feed_id: str
    feed: Optional[Feed] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.feed is not None


def _fetch_one(parser: SourceParser) -> FeedResult:
    feed_id = parser.config.id
    try:
        return FeedResult(feed_id=feed_id, feed=parser.fetch_feed())
    except FetchError as e:
        logger.warning("feed %s failed: %s", feed_id, e.reason)
        return FeedResult(feed_id=feed_id, error=e)
    except Exception as e:
        logger.exception("feed %s unexpected error", feed_id)
        return FeedResult(feed_id=feed_id, error=FetchError(feed_id, f"unexpected error: {e}"))


def fetch_rss_feed() -> List[FeedResult]:
    """Fetch every registered source; one result per source, in registry order.

    Sources are fetched concurrently and independently: a failing or slow
    source never cancels the others.
    """
    parsers = list(REGISTRY.values())
    if not parsers:
        return []

    workers = max(1, min(int(settings.fetch_concurrency), len(parsers)))
    results: Dict[str, FeedResult] = {}
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futs = {ex.submit(_fetch_one, p): p.config.id for p in parsers}
        for fut in as_completed(futs):
            results[futs[fut]] = fut.result()

    ordered = [results[p.config.id] for p in parsers]
    failed = [r.feed_id for r in ordered if not r.ok]
    if failed:
        logger.info("aggregate fetch: %d/%d sources failed (%s)", len(failed), len(ordered), ", ".join(failed))
    return ordered


def fetch_feed_by_id(feed_id: Optional[str]) -> Feed:
    """Fetch one registered source by id.

    Raises ValidationError for a blank id, NotFoundError for an unknown one and
    FetchError when an RSS source fails. Custom (scraped) sources never raise.
    """
    feed_id = (feed_id or "").strip()
    if not feed_id:
        raise ValidationError("id", "Feed ID is required")
    parser = get_parser(feed_id)
    if parser is None:
        raise NotFoundError(f"unknown feed id: {feed_id}")
    return parser.fetch_feed()
