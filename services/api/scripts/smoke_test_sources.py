#!/usr/bin/env python3
"""Quick smoke test for feed sources and the article extractor.

Usage (from repo root):
  python -m services.api.scripts.smoke_test_sources --source bbc-news
  python -m services.api.scripts.smoke_test_sources --source colombia-one --article

This script performs live HTTP requests.
"""

from __future__ import annotations

import argparse

from services.api.app.errors import FetchError
from services.api.app.extractors import fetch_and_parse_article
from services.api.app.sources import get_parser, list_feed_ids


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--source", default="bbc-news", help="Feed id from the registry")
    ap.add_argument("--show", type=int, default=3, help="How many items to print")
    ap.add_argument("--article", action="store_true", help="Also run the extractor on the first item")
    args = ap.parse_args()

    parser = get_parser(args.source)
    if parser is None:
        print("Unknown source. Available:")
        for n in list_feed_ids():
            print(" -", n)
        return 2

    kind = "html" if parser.config.custom_processor else "rss"
    print(f"Source: {parser.config.name} ({kind})")
    print(f"Listing URL: {parser.config.url}")

    try:
        feed = parser.fetch_feed()
    except FetchError as e:
        print(f"[FAIL] {e}")
        return 1
    print(f"Fetched items: {len(feed.items)}")

    for i, it in enumerate(feed.items[: max(0, args.show)], 1):
        print("\n---")
        print(f"#{i}: {it.title}")
        print(it.link)
        print(f"date={it.iso_date} image={'yes' if it.image_url else 'no'}")
        snippet = (it.content_snippet or "").replace("\n", " ")
        print(snippet[:300])
        if not snippet:
            print("[WARN] empty snippet")

    if args.article and feed.items:
        link = feed.items[0].link
        print(f"\n=== extracting {link}")
        art = fetch_and_parse_article(link)
        if art is None:
            print("[FAIL] extractor returned nothing")
            return 1
        text = art.text_content or ""
        print(f"title={art.title}")
        print(f"byline={art.creator} image={art.image_url}")
        print(f"text_len={len(text)}")
        print(text[:500].replace("\n", " "))
        if len(text) < 200:
            print("[WARN] text is very short; likely paywall or extraction failure")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
