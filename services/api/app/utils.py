import re
from urllib.parse import urljoin, urlparse, urlunparse, parse_qsl, urlencode

from bs4 import BeautifulSoup

def canonicalize_url(url: str) -> str:
    try:
        p = urlparse(url)
        q = [(k, v) for k, v in parse_qsl(p.query, keep_blank_values=True)
             if not k.lower().startswith("utm_") and k.lower() not in ("yclid", "gclid", "fbclid")]
        new = p._replace(query=urlencode(q, doseq=True), fragment="")
        return urlunparse(new)
    except ValueError:
        return url

def is_http_url(url: str) -> bool:
    try:
        p = urlparse((url or "").strip())
    except ValueError:
        return False
    return p.scheme in ("http", "https") and bool(p.netloc) and bool(p.hostname)

def ensure_complete_url(url: str, base: str) -> str:
    """Resolve protocol-relative and relative URLs against ``base``."""
    url = (url or "").strip()
    if not url:
        return ""
    if url.startswith(("http://", "https://")):
        return url
    if url.startswith("//"):
        return "https:" + url
    return urljoin(base.rstrip("/") + "/", url.lstrip("/"))

def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()

def strip_html(html: str) -> str:
    if not html:
        return ""
    if "<" not in html:
        return normalize_whitespace(html)
    return normalize_whitespace(BeautifulSoup(html, "lxml").get_text(" ", strip=True))
