"""Shared schemas - actor, request metadata, pagination."""

from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Actor(BaseModel):
    """Who performed an administrative action. None means system-triggered."""

    actor_id: str
    name: str | None = None
    role: str | None = None


class RequestMetadata(BaseModel):
    """Caller details recorded alongside audit entries."""

    ip_address: str | None = Field(default=None, max_length=50)
    user_agent: str | None = Field(default=None, max_length=255)


class Page(BaseModel, Generic[T]):
    """One page of a larger result set."""

    items: list[T] = Field(default_factory=list)
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    @classmethod
    def build(cls, items: list[T], page: int, page_size: int, total_items: int) -> "Page[T]":
        total_pages = ceil(total_items / page_size) if total_items else 0
        return cls(
            items=items,
            page=page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_previous_page=page > 1,
            has_next_page=page < total_pages,
        )


def clamp_paging(page: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    """Pages start at 1; sizes fall back to 10 and never exceed the maximum."""
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = 10
    return page, min(page_size, max_page_size)
