"""Pydantic models representing core domain entities."""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_resource_id() -> str:
    return uuid.uuid4().hex


class ResourceType(str, Enum):
    """Kind of bookmarked content."""

    ARTICLE = "ARTICLE"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    TWEET = "TWEET"  # short-form posts such as X or Weibo


class _CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Resource(_CamelModel):
    """A single bookmarked item with AI-derived metadata and user notes."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_resource_id)
    title: str
    url: str
    type: ResourceType
    platform: str
    content_raw: Optional[str] = None
    summary: str = ""
    tags: List[str] = Field(default_factory=list)
    user_notes: str = ""
    created_at: int = Field(default_factory=now_ms)


class ResourceDraft(_CamelModel):
    """User input for a new resource; missing fields get defaults on create."""

    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[ResourceType] = None
    platform: Optional[str] = None
    content_raw: Optional[str] = None


class AnnotationResult(_CamelModel):
    """Summary and tags returned by the annotation service."""

    summary: str
    suggested_tags: List[str]
    # Set on the fallback value only; never persisted with a resource
    is_fallback: bool = Field(default=False, exclude=True)


__all__ = [
    "ResourceType",
    "Resource",
    "ResourceDraft",
    "AnnotationResult",
    "now_ms",
    "new_resource_id",
]
