from __future__ import annotations

"""Site-specific clean-up of extracted article HTML.

The readability pass leaves behind page chrome that differs per publisher
(share bars, "see also" blocks, bylines with avatars). Each processor knows
one publisher; the default processor applies only the generic removals and is
always tried last.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    content: str
    author_image: Optional[str] = None


AD_SELECTORS = [
    ".ad-unit",
    '[class*="ad-unit"]',
    '[id*="ad-unit"]',
    '[class*="advertisement"]',
    '[id*="advertisement"]',
    '[class*="googlead"]',
    '[id*="googlead"]',
    "[data-ad-unit]",
]

NEWSLETTER_SELECTORS = [
    '[class*="newsletter"]',
    '[id*="newsletter"]',
    '[class*="subscribe"]',
    '[id*="subscribe"]',
    '[class*="signup"]',
    '[id*="signup"]',
]

SOCIAL_SELECTORS = [
    '[class*="social"]',
    '[id*="social"]',
    '[class*="share"]',
    '[id*="share"]',
    ".twitter",
    ".facebook",
    ".linkedin",
]

COMMENT_SELECTORS = [
    '[class*="comment"]',
    '[id*="comment"]',
    '[class*="disqus"]',
    '[id*="disqus"]',
]

RELATED_SELECTORS = [
    '[class*="related"]',
    '[id*="related"]',
    '[class*="read-more"]',
    '[id*="read-more"]',
    '[class*="recommendations"]',
    '[id*="recommendations"]',
]

PLACEHOLDER_IMAGES = 'img[src*="placeholder"], img[width="1"], img[height="1"]'

AUTHOR_SRC_HINTS = ("author", "profile", "avatar", "headshot")


def _remove(soup: BeautifulSoup, selectors: Iterable[str], keep=None) -> int:
    """Extract every element matching ``selectors`` unless ``keep(el)``."""
    n = 0
    for sel in selectors:
        for el in soup.select(sel):
            if keep is not None and keep(el):
                continue
            el.extract()
            n += 1
    return n


def _class_str(el: Tag) -> str:
    cls = el.get("class") or []
    return " ".join(cls) if isinstance(cls, list) else str(cls)


def remove_common_unwanted_elements(soup: BeautifulSoup) -> None:
    _remove(soup, AD_SELECTORS)
    _remove(soup, NEWSLETTER_SELECTORS)

    # Only widgets: an article *about* social media keeps its paragraphs.
    def not_a_widget(el: Tag) -> bool:
        return not (el.select("svg, button, a") and len(el.get_text(strip=True)) < 100)

    _remove(soup, SOCIAL_SELECTORS, keep=not_a_widget)
    _remove(soup, [PLACEHOLDER_IMAGES])

    def not_a_comment_section(el: Tag) -> bool:
        if el.select("form, textarea, input"):
            return False
        cls = _class_str(el)
        return not ("comment-section" in cls or "comments-area" in cls)

    _remove(soup, COMMENT_SELECTORS, keep=not_a_comment_section)
    _remove(soup, RELATED_SELECTORS, keep=lambda el: len(el.select("a")) <= 1)


def _img_src(img: Tag) -> str:
    for attr in ("src", "data-src", "data-lazy-src"):
        val = (img.get(attr) or "").strip()
        if val:
            return val
    return ""


def _take_author_image(soup: BeautifulSoup, selectors: List[str]) -> Optional[str]:
    """Pop the first image inside ``selectors`` (or matching them) out of the body."""
    for sel in selectors:
        for el in soup.select(sel):
            img = el if el.name == "img" else el.find("img")
            if img is None:
                continue
            src = _img_src(img)
            if src:
                img.extract()
                return src
    return None


def _take_author_image_by_src(soup: BeautifulSoup) -> Optional[str]:
    for img in soup.find_all("img"):
        src = _img_src(img)
        if src and any(h in src.lower() for h in AUTHOR_SRC_HINTS):
            img.extract()
            return src
    return None


def _ensure_hero(soup: BeautifulSoup, thumbnail_url: Optional[str]) -> None:
    """Prepend the feed thumbnail when the extracted body lost every image."""
    if not thumbnail_url or soup.find("img") is not None:
        return
    figure = soup.new_tag("figure")
    figure.append(soup.new_tag("img", src=thumbnail_url, alt=""))
    container = soup.body or soup
    if container.contents:
        container.contents[0].insert_before(figure)
    else:
        container.append(figure)


class ArticleProcessor:
    name = "default"
    hosts: Tuple[str, ...] = ()
    remove_selectors: Tuple[str, ...] = ()
    author_selectors: Tuple[str, ...] = ('[class*="byline"]', '[class*="author"]', '[id*="author"]')
    ensure_hero: bool = False

    def can_process(self, url: str) -> bool:
        return any(h in (url or "") for h in self.hosts)

    def process(self, url: str, html: str, thumbnail_url: Optional[str] = None) -> ProcessingResult:
        soup = BeautifulSoup(html, "lxml")
        author_image = _take_author_image(soup, list(self.author_selectors))
        if author_image is None:
            author_image = _take_author_image_by_src(soup)

        if self.remove_selectors:
            _remove(soup, self.remove_selectors)
        remove_common_unwanted_elements(soup)
        self.site_specific(soup)
        if self.ensure_hero:
            _ensure_hero(soup, thumbnail_url)

        return ProcessingResult(content=_inner_html(soup), author_image=author_image)

    def site_specific(self, soup: BeautifulSoup) -> None:
        pass


class DefaultProcessor(ArticleProcessor):
    def can_process(self, url: str) -> bool:
        return True


class BbcProcessor(ArticleProcessor):
    name = "bbc"
    hosts = ("bbc.co.uk", "bbc.com")
    remove_selectors = (
        ".share",
        '[data-component="share-tools"]',
        ".social-embed",
        '[data-component="links-block"]',
        '[data-component="tag-list"]',
        '[data-component="see-alsos"]',
        'div[data-testid="byline-new"]',
        'div[data-component="byline-block"]',
    )
    author_selectors = ('[class*="contributor"]', ".article__author-image")
    ensure_hero = True

    def site_specific(self, soup: BeautifulSoup) -> None:
        # ichef serves a 240px rendition by default; ask for a readable width
        for img in soup.select('img[src*="ichef.bbci.co.uk"]'):
            src = img.get("src") or ""
            img["src"] = re.sub(r"/standard/\d+/", "/standard/800/", src)


class GuardianProcessor(ArticleProcessor):
    name = "guardian"
    hosts = ("theguardian.com", "guardian.co.uk")
    remove_selectors = (
        ".js-most-viewed-footer",
        ".js-components-container",
        ".content-footer",
        ".meta__social",
    )
    author_selectors = (".avatar", ".rounded-img", '[data-gu-name="author-image"]')

    def site_specific(self, soup: BeautifulSoup) -> None:
        for img in soup.select('img[src*="guim.co.uk"]'):
            src = img.get("src") or ""
            img["src"] = re.sub(r"width=\d+", "width=1000", src)


class NytProcessor(ArticleProcessor):
    name = "nyt"
    hosts = ("nytimes.com", "nyt.com")
    remove_selectors = (
        "#top-wrapper",
        "#bottom-wrapper",
        '[data-testid="ad-container"]',
        '[data-testid="share-tools"]',
        '[class*="social-tools"]',
        '[id*="optimistic-truncator"]',
    )
    author_selectors = ('[class*="byline-author"]',)
    ensure_hero = True


class TechCrunchProcessor(ArticleProcessor):
    name = "techcrunch"
    hosts = ("techcrunch.com",)
    remove_selectors = (".wp-block-tc23-post-relevant-terms",)
    author_selectors = (".post-authors-list__author-thumb", 'img[src*="headshot"]')


class PaulGrahamProcessor(ArticleProcessor):
    name = "paulgraham"
    hosts = ("paulgraham.com",)
    remove_selectors = (
        'img[src*="bel-7.gif"]',
        'img[src*="bel-8.gif"]',
        "img[usemap]",
        "map",
        'img[width="0"]',
        'img[height="0"]',
    )
    author_selectors = ()

    def site_specific(self, soup: BeautifulSoup) -> None:
        # Essays are <br><br>-separated text without paragraph markup
        if soup.find("p") is not None:
            return
        container = soup.body or soup
        html = _inner_html(container)
        parts = [p.strip() for p in re.split(r"(?:<br\s*/?>\s*){2,}", html) if p.strip()]
        if len(parts) < 2:
            return
        container.clear()
        for part in parts:
            p = soup.new_tag("p")
            for node in list(BeautifulSoup(part, "html.parser").contents):
                p.append(node)
            container.append(p)


def _inner_html(soup) -> str:
    body = soup.body if isinstance(soup, BeautifulSoup) else None
    node = body if body is not None else soup
    return "".join(str(c) for c in node.contents).strip()


# In order of preference; DefaultProcessor must stay last.
PROCESSORS: List[ArticleProcessor] = [
    TechCrunchProcessor(),
    BbcProcessor(),
    GuardianProcessor(),
    NytProcessor(),
    PaulGrahamProcessor(),
    DefaultProcessor(),
]


def select_processor(url: str) -> ArticleProcessor:
    for p in PROCESSORS:
        if p.can_process(url):
            return p
    return PROCESSORS[-1]


def process_article(url: str, html: str, thumbnail_url: Optional[str] = None) -> ProcessingResult:
    if not url or not html:
        return ProcessingResult(content=html or "")
    processor = select_processor(url)
    logger.debug("processing url=%s with %s processor", url, processor.name)
    try:
        return processor.process(url, html, thumbnail_url=thumbnail_url)
    except Exception:
        logger.exception("%s processor failed url=%s; using unprocessed content", processor.name, url)
        return ProcessingResult(content=html)
