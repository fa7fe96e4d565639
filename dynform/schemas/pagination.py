from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    model_config = ConfigDict(populate_by_name=True)

    total: int
    page: int
    total_pages: int = Field(alias="totalPages")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper"""
    success: bool = True
    data: list[T]
    meta: PaginationMeta
