from __future__ import annotations

"""Wire models shared by the feed, article and saved-articles routes.

Fields are snake_case in Python and camelCase on the wire (the frontend
contract); construct with field names, dump with ``by_alias=True``.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FeedItem(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    guid: str
    title: str
    link: str
    pub_date: str = ""
    creator: Optional[str] = None
    content: Optional[str] = None
    content_snippet: Optional[str] = None
    categories: Optional[List[str]] = None
    iso_date: Optional[str] = None
    image_url: Optional[str] = None


class Feed(_WireModel):
    id: str
    title: str
    description: str = ""
    logo_url: Optional[str] = None
    items: List[FeedItem] = Field(default_factory=list)


class Article(_WireModel):
    """Reading view of one article; superset of FeedItem."""

    id: Optional[str] = None
    guid: str
    title: str
    link: str
    pub_date: str = ""
    creator: Optional[str] = None
    content: str = ""
    content_snippet: Optional[str] = None
    categories: Optional[List[str]] = None
    iso_date: Optional[str] = None
    image_url: Optional[str] = None

    # extractor extras
    text_content: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    author_image: Optional[str] = None

    # saved-articles bookkeeping, stored snake_case
    user_id: Optional[str] = Field(default=None, alias="user_id")
    created_at: Optional[str] = Field(default=None, alias="created_at")


class FeedSummary(_WireModel):
    id: str
    name: str
    description: str = ""
    logo_url: Optional[str] = None
    custom_processor: bool = False
