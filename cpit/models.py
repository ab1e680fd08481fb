"""
Data models for Cockpit content.

These are passive shapes for decoding API responses. Every model ignores
unknown fields and keeps them available through ``model_extra`` so custom
collection fields are never lost.
"""

from enum import IntEnum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class State(IntEnum):
    """Publication state of a content item."""
    ARCHIVED = -1
    DRAFT = 0
    PUBLISHED = 1


class CockpitModel(BaseModel):
    """Common system fields present on every Cockpit item."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(default="", alias="_id")
    state: int = Field(default=State.DRAFT, alias="_state")
    modified: int = Field(default=0, alias="_modified")
    modified_by: str = Field(default="", alias="_mby")
    created: int = Field(default=0, alias="_created")
    created_by: str = Field(default="", alias="_cby")

    @property
    def is_published(self) -> bool:
        return self.state == State.PUBLISHED


class File(CockpitModel):
    """An uploaded asset with its metadata."""

    hash: str = Field(default="", alias="_hash")
    thumbhash: str = ""
    path: str = ""
    title: str = ""
    mime: str = ""
    type: str = ""
    description: str = ""
    tags: List[Any] = Field(default_factory=list)
    size: int = 0
    colors: List[str] = Field(default_factory=list)
    width: int = 0
    height: int = 0
    folder: str = ""


class Meta(BaseModel):
    # None when the server answered with a bare list
    total: Optional[int] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Result of listing items of a model.

    Cockpit only wraps the list in ``{"data": [...], "meta": {...}}`` when
    both skip and limit are sent. Without them the plain list is wrapped
    here so callers always get the same shape.
    """

    data: List[T] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)

    @property
    def total(self) -> Optional[int]:
        return self.meta.total
