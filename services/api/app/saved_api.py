from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Header

from . import auth, saved
from .models import Article

router = APIRouter(prefix="/api/saved", tags=["saved"])


def _session(authorization: Optional[str]) -> tuple[str, str]:
    token = auth.bearer_token(authorization)
    return auth.get_user_id(token), token


@router.get("", response_model=List[Article])
def list_saved(authorization: Optional[str] = Header(None)):
    user_id, token = _session(authorization)
    return saved.list_saved_articles(user_id, access_token=token)


@router.post("", response_model=Article, status_code=201)
def save(article: Article, authorization: Optional[str] = Header(None)):
    saved.validate_article(article)
    user_id, token = _session(authorization)
    return saved.save_article(user_id, article, access_token=token)


@router.delete("/{guid:path}")
def delete(guid: str, authorization: Optional[str] = Header(None)):
    user_id, token = _session(authorization)
    n = saved.delete_saved_article(user_id, guid, access_token=token)
    return {"deleted": n, "guid": guid}
