from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

import httpx

from ..errors import FetchError
from ..extractors import fetch_rss
from ..models import Feed, FeedSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedConfig:
    id: str
    name: str
    url: str
    description: str = ""
    logo_url: Optional[str] = None
    custom_processor: bool = False  # HTML scraper instead of RSS

    def summary(self) -> FeedSummary:
        return FeedSummary(
            id=self.id,
            name=self.name,
            description=self.description,
            logo_url=self.logo_url,
            custom_processor=self.custom_processor,
        )


def fetch_single_rss_feed(config: FeedConfig) -> Feed:
    """Fetch and parse one RSS/Atom source.

    Raises FetchError (carrying ``config.id``) when the host is unreachable,
    answers non-2xx, or the document is not well-formed feed XML.
    """
    try:
        parsed = fetch_rss(config.url)
    except httpx.HTTPStatusError as e:
        raise FetchError(config.id, f"HTTP {e.response.status_code} from {config.url}") from e
    except httpx.HTTPError as e:
        raise FetchError(config.id, f"could not reach {config.url}: {e}") from e
    except ET.ParseError as e:
        raise FetchError(config.id, f"malformed XML: {e}") from e
    except ValueError as e:
        raise FetchError(config.id, str(e)) from e

    if parsed.skipped:
        logger.info("feed %s: skipped %d entries without guid/title/link", config.id, parsed.skipped)

    return Feed(
        id=config.id,
        title=parsed.title or config.name,
        description=parsed.description or config.description,
        logo_url=config.logo_url,
        items=parsed.items,
    )


class SourceParser:
    config: FeedConfig

    def __init__(self, config: FeedConfig):
        self.config = config

    def fetch_feed(self) -> Feed:
        raise NotImplementedError


class RssSource(SourceParser):
    def fetch_feed(self) -> Feed:
        return fetch_single_rss_feed(self.config)


class HtmlSource(SourceParser):
    """Source without a feed; subclasses scrape a listing page.

    Scrapers are best-effort: on failure they return the feed with no items
    instead of raising.
    """

    def empty_feed(self, description: Optional[str] = None) -> Feed:
        return Feed(
            id=self.config.id,
            title=self.config.name,
            description=description if description is not None else self.config.description,
            logo_url=self.config.logo_url,
            items=[],
        )
