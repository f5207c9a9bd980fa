import math
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

import settings
from errors import InvalidPaginationParameterError

T = TypeVar("T")


class RequestParameters(BaseModel):
    """Query parameters shared by every list endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    order_by: Optional[str] = Field(None, alias="orderBy")
    fields: Optional[str] = None
    page_number: int = Field(1, alias="pageNumber")
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, alias="pageSize")
    search_query: Optional[str] = Field(None, alias="searchQuery")
    include_metadata: bool = Field(False, alias="includeMetadata")

    @field_validator("page_size")
    @classmethod
    def cap_page_size(cls, value: int) -> int:
        return min(value, settings.MAX_PAGE_SIZE)


class PaginationMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(..., alias="totalCount")
    page_size: int = Field(..., alias="pageSize")
    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    previous_page_link: Optional[str] = Field(None, alias="previousPageLink")
    next_page_link: Optional[str] = Field(None, alias="nextPageLink")


class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    items: List[T]
    total_count: int
    page_size: int
    current_page: int

    @classmethod
    def create(cls, source: Sequence[Any], page_number: int, page_size: int) -> "Page":
        if page_number < 1:
            raise InvalidPaginationParameterError("pageNumber", page_number)
        if page_size < 1:
            raise InvalidPaginationParameterError("pageSize", page_size)
        start = (page_number - 1) * page_size
        return cls(
            items=list(source[start:start + page_size]),
            total_count=len(source),
            page_size=page_size,
            current_page=page_number,
        )

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def metadata(self, previous_page_link: Optional[str] = None, next_page_link: Optional[str] = None) -> PaginationMetadata:
        return PaginationMetadata(
            total_count=self.total_count,
            page_size=self.page_size,
            current_page=self.current_page,
            total_pages=self.total_pages,
            previous_page_link=previous_page_link,
            next_page_link=next_page_link,
        )
