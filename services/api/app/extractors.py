import logging
import datetime as dt
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

import httpx
from dateutil import parser as dtparser
from newspaper import Article as NewspaperArticle
from typing import Dict, List, Optional, Any, Tuple
from .config import settings
from .errors import ValidationError
from .models import Article, FeedItem
from .processors import process_article
from .utils import canonicalize_url, is_http_url, normalize_whitespace, strip_html

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,es;q=0.8",
}

MEDIA_NS = "http://search.yahoo.com/mrss/"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
DC_NS = "http://purl.org/dc/elements/1.1/"


def _client(headers: Optional[Dict[str, str]] = None) -> httpx.Client:
    req_headers = {"User-Agent": settings.user_agent, **DEFAULT_HEADERS}
    if headers:
        req_headers.update(headers)
    return httpx.Client(
        headers=req_headers,
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def http_get(url: str, *, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    """GET ``url`` and return the response.

    Raises httpx errors as-is (including HTTPStatusError for non-2xx); the
    caller decides what a failure means for its source.
    """
    with _client(headers) as c:
        r = c.get(url)
        r.raise_for_status()
        return r


def http_fetch(url: str, *, headers: Optional[Dict[str, str]] = None) -> str:
    return http_get(url, headers=headers).text


# ---------------------------------------------------------------------------
# RSS / Atom
# ---------------------------------------------------------------------------


@dataclass
class ParsedFeed:
    """Result of parsing an RSS/Atom document."""

    title: str
    description: str
    items: List[FeedItem] = field(default_factory=list)
    skipped: int = 0


def _split_tag(tag: str) -> Tuple[str, str]:
    if tag.startswith("{") and "}" in tag:
        ns, local = tag[1:].split("}", 1)
        return ns, local
    return "", tag


def _local(el: ET.Element) -> str:
    return _split_tag(el.tag)[1]


def _text(node: Optional[ET.Element]) -> str:
    if node is None:
        return ""
    return normalize_whitespace("".join(node.itertext()))


def _raw_text(node: Optional[ET.Element]) -> str:
    if node is None:
        return ""
    return ("".join(node.itertext())).strip()


def _child(parent: ET.Element, name: str, ns: Optional[str] = None) -> Optional[ET.Element]:
    """First direct child with local name ``name``.

    ``ns=None`` matches any namespace except Media RSS, whose ``content`` and
    ``title`` elements would otherwise shadow the entry's own.
    """
    for ch in list(parent):
        ch_ns, ch_local = _split_tag(ch.tag)
        if ch_local != name:
            continue
        if ns is None and ch_ns == MEDIA_NS:
            continue
        if ns is not None and ch_ns != ns:
            continue
        return ch
    return None


def _children(parent: ET.Element, name: str, ns: Optional[str] = None) -> List[ET.Element]:
    out: List[ET.Element] = []
    for ch in list(parent):
        ch_ns, ch_local = _split_tag(ch.tag)
        if ch_local == name and (ns is None or ch_ns == ns):
            out.append(ch)
    return out


def _parse_datetime(raw: str) -> Optional[dt.datetime]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        parsed = dtparser.parse(raw)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(dt.timezone.utc)


def to_iso(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _entry_link(e: ET.Element) -> str:
    links = _children(e, "link")
    # Atom: prefer rel="alternate" (or no rel) over enclosure/self links
    for link_el in links:
        href = (link_el.attrib.get("href") or "").strip()
        rel = (link_el.attrib.get("rel") or "alternate").strip()
        if href and rel == "alternate":
            return href
    for link_el in links:
        href = (link_el.attrib.get("href") or "").strip()
        txt = _text(link_el)
        if href or txt:
            return href or txt
    return ""


def _entry_image(e: ET.Element) -> str:
    for thumb in _children(e, "thumbnail", MEDIA_NS):
        url = (thumb.attrib.get("url") or "").strip()
        if url:
            return url
    contents = _children(e, "content", MEDIA_NS)
    for group in _children(e, "group", MEDIA_NS):
        contents.extend(_children(group, "content", MEDIA_NS))
        for thumb in _children(group, "thumbnail", MEDIA_NS):
            url = (thumb.attrib.get("url") or "").strip()
            if url:
                return url
    for mc in contents:
        url = (mc.attrib.get("url") or "").strip()
        medium = (mc.attrib.get("medium") or "").lower()
        mime = (mc.attrib.get("type") or "").lower()
        if url and (medium == "image" or mime.startswith("image/")):
            return url
    for enc in _children(e, "enclosure"):
        url = (enc.attrib.get("url") or "").strip()
        if url and (enc.attrib.get("type") or "").lower().startswith("image/"):
            return url
    return ""


def _entry_creator(e: ET.Element) -> str:
    creator = _text(_child(e, "creator", DC_NS))
    if creator:
        return creator
    author = _child(e, "author")
    if author is None:
        return ""
    name = _child(author, "name")
    return _text(name) if name is not None else _text(author)


def _entry_categories(e: ET.Element) -> List[str]:
    tags: List[str] = []
    for ch in list(e):
        if _local(ch) in ("category", "subject"):
            term = (ch.attrib.get("term") or ch.attrib.get("label") or "").strip()
            txt = term or _text(ch)
            if txt:
                tags.append(txt)
    seen: set = set()
    return [x for x in tags if not (x in seen or seen.add(x))]


def parse_rss(data: bytes, *, fetched_at: Optional[dt.datetime] = None) -> ParsedFeed:
    """Parse an RSS 2.0 / RSS 1.0 / Atom document into FeedItems.

    Items missing a guid (after falling back to the link), a title or a link
    are dropped and counted in ``skipped``. Items come back newest-first when
    every kept item has a parseable date, otherwise in document order.

    Raises ET.ParseError for malformed XML and ValueError when the document
    is not a feed.
    """
    fetched_at = fetched_at or dt.datetime.now(dt.timezone.utc)
    root = ET.fromstring(data)
    root_tag = _local(root)

    channel: Optional[ET.Element] = None
    entries: List[ET.Element] = []
    if root_tag == "rss":
        channel = _child(root, "channel")
        if channel is None:
            raise ValueError("RSS document has no channel")
        entries = _children(channel, "item")
    elif root_tag == "feed":
        channel = root
        entries = _children(root, "entry")
    elif root_tag == "RDF":
        channel = _child(root, "channel")
        entries = _children(root, "item")
    else:
        raise ValueError(f"not a feed document: <{root_tag}>")

    feed_title = _text(_child(channel, "title")) if channel is not None else ""
    feed_description = ""
    if channel is not None:
        feed_description = _text(_child(channel, "description")) or _text(_child(channel, "subtitle"))

    items: List[FeedItem] = []
    dates: List[Optional[dt.datetime]] = []
    skipped = 0
    for e in entries:
        title = _text(_child(e, "title"))
        link = _entry_link(e)
        guid = _text(_child(e, "guid")) or _text(_child(e, "id")) or link
        if not (guid and title and link):
            skipped += 1
            logger.debug("skipping feed entry without guid/title/link: %r", title or link)
            continue

        description = _raw_text(_child(e, "description")) or _raw_text(_child(e, "summary"))
        encoded = _raw_text(_child(e, "encoded", CONTENT_NS))
        atom_content = _raw_text(_child(e, "content")) if root_tag == "feed" else ""
        content = encoded or atom_content or description

        pub_raw = ""
        for name, ns in (("pubDate", None), ("published", None), ("updated", None), ("date", DC_NS)):
            v = _text(_child(e, name, ns))
            if v:
                pub_raw = v
                break
        published = _parse_datetime(pub_raw)

        categories = _entry_categories(e)
        items.append(FeedItem(
            guid=guid,
            title=title,
            link=link,
            pub_date=pub_raw,
            creator=_entry_creator(e) or None,
            content=content,
            content_snippet=strip_html(description or content),
            categories=categories or None,
            iso_date=to_iso(published or fetched_at),
            image_url=_entry_image(e) or None,
        ))
        dates.append(published)

    if items and all(d is not None for d in dates):
        order = sorted(range(len(items)), key=lambda i: dates[i], reverse=True)
        items = [items[i] for i in order]

    return ParsedFeed(title=feed_title, description=feed_description, items=items, skipped=skipped)


def fetch_rss(url: str) -> ParsedFeed:
    r = http_get(url)
    return parse_rss(r.content)


# ---------------------------------------------------------------------------
# Article extraction
# ---------------------------------------------------------------------------


def _site_name(doc: NewspaperArticle) -> str:
    name = (getattr(doc, "meta_site_name", None) or "").strip()
    if name:
        return name
    meta = getattr(doc, "meta_data", None) or {}
    og = meta.get("og") if isinstance(meta, dict) else None
    if isinstance(og, dict):
        return str(og.get("site_name") or "")
    return ""


def _readability(url: str, html: str) -> Optional[Dict[str, Any]]:
    """Run the newspaper readability pass over already-fetched HTML."""
    doc = NewspaperArticle(url, keep_article_html=True, fetch_images=False)
    doc.download(input_html=html)
    doc.parse()

    content = (doc.article_html or "").strip()
    text = (doc.text or "").strip()
    if not content and not text:
        return None
    published = doc.publish_date
    if isinstance(published, str):
        published = _parse_datetime(published)
    return {
        "title": normalize_whitespace(doc.title or ""),
        "content": content or "".join(f"<p>{p}</p>" for p in text.split("\n\n") if p.strip()),
        "text_content": text,
        "byline": ", ".join(a for a in (doc.authors or []) if a),
        "image": doc.top_image or getattr(doc, "meta_img", "") or "",
        "published": published,
        "excerpt": normalize_whitespace(doc.meta_description or ""),
        "lang": doc.meta_lang or "",
        "site_name": _site_name(doc),
    }


def validate_article_url(url: Optional[str]) -> str:
    url = (url or "").strip()
    if not url:
        raise ValidationError("url", "URL parameter is required")
    if not is_http_url(url):
        raise ValidationError("url", "Invalid URL: expected an absolute http(s) URL")
    return url


def fetch_and_parse_article(url: Optional[str]) -> Optional[Article]:
    """Fetch ``url`` and extract its readable article.

    Raises ValidationError for a missing or non-http(s) URL before any network
    call. Returns None when the page cannot be fetched or does not yield an
    article with both a title and content.
    """
    url = validate_article_url(url)
    try:
        html = http_fetch(url)
        parsed = _readability(url, html)
    except httpx.HTTPError as e:
        logger.warning("article fetch failed url=%s: %s", url, e)
        return None
    except Exception:
        logger.exception("article extraction failed url=%s", url)
        return None

    if not parsed or not parsed["title"] or not parsed["content"]:
        logger.info("no readable article at url=%s", url)
        return None

    processed = process_article(url, parsed["content"], thumbnail_url=parsed["image"] or None)
    if not strip_html(processed.content):
        logger.info("article content empty after processing url=%s", url)
        return None

    published = parsed["published"]
    iso_date = to_iso(published) if isinstance(published, dt.datetime) else None
    return Article(
        guid=canonicalize_url(url),
        title=parsed["title"],
        link=url,
        pub_date=iso_date or "",
        iso_date=iso_date,
        creator=parsed["byline"] or None,
        content=processed.content,
        content_snippet=parsed["excerpt"] or None,
        image_url=parsed["image"] or None,
        text_content=parsed["text_content"] or None,
        excerpt=parsed["excerpt"] or None,
        site_name=parsed["site_name"] or None,
        lang=parsed["lang"] or None,
        author_image=processed.author_image,
    )
