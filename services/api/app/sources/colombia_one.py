from __future__ import annotations

"""Colombia One

Colombia One publishes no RSS feed, so the listing page is scraped. The site
runs a tagDiv (Newspaper) WordPress theme: article teasers are
``.td_module_wrap`` blocks with an ``.entry-title`` link, a lazy-loaded
thumbnail and a ``time[datetime]``. When the theme markup changes and no
teaser block yields an article, we fall back to scanning headline elements.
"""

import datetime as dt
import logging
import re
from typing import Dict, List, Optional, Set
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from dateutil import parser as dtparser

from .base import FeedConfig, HtmlSource
from ..extractors import http_fetch, to_iso
from ..models import Feed, FeedItem
from ..utils import ensure_complete_url, normalize_whitespace

logger = logging.getLogger(__name__)

BASE_URL = "https://colombiaone.com"
SITE_HOST = "colombiaone.com"
SCRAPER_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; Pocket/1.0)"}

_BG_RE = re.compile(r"background-image:\s*url\(['\"]?(.+?)['\"]?\)", re.IGNORECASE)

IMAGE_SELECTORS = [
    ".td-image-wrap img",
    ".entry-thumb",
    ".td-module-thumb img",
    "img[class*='wp-image']",
    "img",
    "a.td-image-wrap",
    ".td_block_wrap img",
    ".td-module-image img",
]

FALLBACK_IMAGE_SELECTORS = [
    "img",
    ".entry-thumb",
    "a.td-image-wrap",
    ".td-module-thumb img",
    ".td-image-container img",
    "[style*='background-image']",
]

DATE_SELECTORS = [".td-post-date time", "time", ".td-post-date", ".entry-date"]

EXCERPT_SELECTORS = [".td-excerpt", ".entry-summary", ".td-post-content p", "p"]


def _image_url(node: Tag) -> str:
    for attr in ("src", "data-src", "data-lazy-src", "data-retina", "data-img-url"):
        val = (node.get(attr) or "").strip()
        if val:
            return val
    m = _BG_RE.search(node.get("style") or "")
    return m.group(1) if m else ""


def _find_image(container: Tag, selectors: List[str]) -> str:
    for sel in selectors:
        node = container.select_one(sel)
        if node is None:
            continue
        url = _image_url(node)
        if url:
            return url

    parent_bg = container.find_parent(style=_BG_RE)
    if parent_bg is not None:
        m = _BG_RE.search(parent_bg.get("style") or "")
        if m:
            return m.group(1)

    data_img = container.select_one("[data-img]")
    if data_img is not None:
        return (data_img.get("data-img") or "").strip()
    return ""


def _parse_date_text(text: str) -> Optional[str]:
    text = normalize_whitespace(text)
    if not text:
        return None
    try:
        parsed = dtparser.parse(text)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return to_iso(parsed)


def _find_date(container: Tag, selectors: List[str], default: str) -> str:
    for sel in selectors:
        node = container.select_one(sel)
        if node is None:
            continue
        if node.get("datetime"):
            return node["datetime"].strip()
        parsed = _parse_date_text(node.get_text(" ", strip=True))
        if parsed:
            return parsed
    return default


def _find_excerpt(container: Tag, selectors: List[str]) -> str:
    for sel in selectors:
        node = container.select_one(sel)
        if node is None:
            continue
        txt = normalize_whitespace(node.get_text(" ", strip=True))
        if txt:
            return txt
    return ""


def _article_link(href: str) -> str:
    href = (href or "").strip()
    if not href or href.startswith(("javascript:", "#")):
        return ""
    if href.startswith("/"):
        href = BASE_URL + href
    try:
        host = (urlparse(href).hostname or "").lower()
    except ValueError:
        return ""
    if host != SITE_HOST and not host.endswith("." + SITE_HOST):
        return ""
    return href


def _extract_from_modules(soup: BeautifulSoup, now_iso: str) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    for node in soup.select(".td_module_wrap"):
        link_node = node.select_one(".entry-title a") or node.select_one("a[href]")
        if link_node is None:
            continue
        link = _article_link(link_node.get("href") or "")
        if not link:
            continue
        title_node = node.select_one(".entry-title")
        title = normalize_whitespace(title_node.get_text(" ", strip=True)) if title_node else ""
        if not title:
            continue
        out.append({
            "title": title,
            "link": link,
            "image": _find_image(node, IMAGE_SELECTORS),
            "pub_date": _find_date(node, DATE_SELECTORS, now_iso),
            "snippet": _find_excerpt(node, EXCERPT_SELECTORS),
        })
    return out


def _extract_from_headlines(soup: BeautifulSoup, now_iso: str) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    for title_node in soup.select("h2, h3, .entry-title, .tdb-title-text"):
        title = normalize_whitespace(title_node.get_text(" ", strip=True))
        if not title:
            continue

        if title_node.name == "a":
            link_node = title_node
        else:
            link_node = title_node.find("a", href=True)
            if link_node is None and title_node.parent is not None:
                link_node = title_node.parent.find("a", href=True)
        if link_node is None:
            continue
        link = _article_link(link_node.get("href") or "")
        if not link:
            continue

        container = (
            title_node.find_parent("article")
            or title_node.find_parent(class_="td_module_wrap")
            or title_node.find_parent(class_="tdb_module_loop")
            or (title_node.parent.parent if title_node.parent is not None else None)
        )

        image = ""
        snippet = ""
        pub_date = now_iso
        if container is not None:
            image = _find_image(container, FALLBACK_IMAGE_SELECTORS)
            snippet = _find_excerpt(container, ["p", ".td-excerpt", ".entry-summary"])
            time_node = container.select_one("time[datetime]")
            if time_node is not None:
                pub_date = time_node["datetime"].strip() or now_iso

        out.append({"title": title, "link": link, "image": image, "pub_date": pub_date, "snippet": snippet})
    return out


def extract_articles(html: str, *, now: Optional[dt.datetime] = None) -> List[FeedItem]:
    """Map the listing page onto FeedItems, in page order, one per link."""
    now_iso = to_iso(now or dt.datetime.now(dt.timezone.utc))
    soup = BeautifulSoup(html, "lxml")

    raw = _extract_from_modules(soup, now_iso)
    if not raw:
        logger.info("colombia-one: no .td_module_wrap articles, trying headline fallback")
        raw = _extract_from_headlines(soup, now_iso)

    seen: Set[str] = set()
    items: List[FeedItem] = []
    for art in raw:
        # page order is preserved; the same story often appears in several blocks
        if art["link"] in seen:
            continue
        seen.add(art["link"])
        iso_date = _parse_date_text(art["pub_date"]) or now_iso
        items.append(FeedItem(
            guid=art["link"],
            title=art["title"],
            link=art["link"],
            pub_date=art["pub_date"],
            content=art["snippet"],
            content_snippet=art["snippet"],
            iso_date=iso_date,
            image_url=ensure_complete_url(art["image"], BASE_URL) or None,
        ))
    return items


class ColombiaOneSource(HtmlSource):
    def fetch_feed(self) -> Feed:
        try:
            html = http_fetch(self.config.url, headers=SCRAPER_HEADERS)
            items = extract_articles(html)
        except httpx.HTTPError as e:
            logger.warning("colombia-one fetch failed url=%s: %s", self.config.url, e)
            return self.empty_feed("Failed to fetch articles from Colombia One")
        except Exception:
            logger.exception("colombia-one scrape failed url=%s", self.config.url)
            return self.empty_feed("Failed to fetch articles from Colombia One")

        logger.info("colombia-one: found %d articles", len(items))
        return Feed(
            id=self.config.id,
            title=self.config.name,
            description="Latest articles from Colombia One",
            logo_url=self.config.logo_url,
            items=items,
        )


def scrape_colombia_one(url: str = "https://colombiaone.com/culture/") -> Feed:
    if url == PARSER.config.url:
        return PARSER.fetch_feed()
    return ColombiaOneSource(FeedConfig(
        id=PARSER.config.id,
        name=PARSER.config.name,
        url=url,
        description=PARSER.config.description,
        logo_url=PARSER.config.logo_url,
        custom_processor=True,
    )).fetch_feed()


PARSER = ColombiaOneSource(FeedConfig(
    id="colombia-one",
    name="Colombia One",
    url="https://colombiaone.com/culture/",
    description="News and stories from Colombia One",
    logo_url="https://colombiaone.com/wp-content/uploads/2023/08/Co1ombia-one-1.png",
    custom_processor=True,
))
