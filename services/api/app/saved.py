from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .errors import AppError, ValidationError
from .models import Article
from .supabase_client import get_supabase

logger = logging.getLogger(__name__)

TABLE = "articles"


def article_to_row(article: Article, user_id: str) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "user_id": user_id,
        "title": article.title,
        "link": article.link,
        "pub_date": article.pub_date or "",
        "content": article.content or "",
        "content_snippet": article.content_snippet or "",
        "guid": article.guid,
        "iso_date": article.iso_date or "",
        "thumbnail": article.image_url,
    }
    if article.id:
        row["id"] = article.id
    return row


def row_to_article(row: Dict[str, Any]) -> Optional[Article]:
    if not row.get("title") or not row.get("link") or not row.get("guid"):
        logger.warning("skipping invalid saved article row id=%s", row.get("id"))
        return None
    return Article(
        id=str(row["id"]) if row.get("id") is not None else None,
        guid=row["guid"],
        title=row["title"],
        link=row["link"],
        pub_date=row.get("pub_date") or "",
        content=row.get("content") or "",
        content_snippet=row.get("content_snippet") or None,
        iso_date=row.get("iso_date") or None,
        image_url=row.get("thumbnail") or None,
        created_at=row.get("created_at"),
        user_id=row.get("user_id"),
    )


def list_saved_articles(user_id: str, access_token: Optional[str] = None) -> List[Article]:
    client = get_supabase(access_token)
    try:
        res = (
            client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.exception("fetching saved articles failed user=%s", user_id)
        raise AppError(str(e), public_message="Failed to fetch saved articles") from e
    articles = [row_to_article(r) for r in (res.data or [])]
    return [a for a in articles if a is not None]


def validate_article(article: Article) -> None:
    if not article.guid or not article.title or not article.link:
        raise ValidationError("article", "Article guid, title and link are required")


def save_article(user_id: str, article: Article, access_token: Optional[str] = None) -> Article:
    validate_article(article)
    client = get_supabase(access_token)
    try:
        existing = (
            client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("guid", article.guid)
            .execute()
        )
        if existing.data:
            saved = row_to_article(existing.data[0])
            if saved is not None:
                return saved
        res = client.table(TABLE).insert(article_to_row(article, user_id)).execute()
    except Exception as e:
        logger.exception("saving article failed user=%s guid=%s", user_id, article.guid)
        raise AppError(str(e), public_message="Failed to save article") from e
    rows = res.data or []
    saved = row_to_article(rows[0]) if rows else None
    return saved or article.model_copy(update={"user_id": user_id})


def delete_saved_article(user_id: str, guid: str, access_token: Optional[str] = None) -> int:
    if not guid:
        raise ValidationError("guid", "Article guid is required")
    client = get_supabase(access_token)
    try:
        res = client.table(TABLE).delete().eq("user_id", user_id).eq("guid", guid).execute()
    except Exception as e:
        logger.exception("deleting saved article failed user=%s guid=%s", user_id, guid)
        raise AppError(str(e), public_message="Failed to delete article") from e
    return len(res.data or [])
