"""Common schemas for standard API responses."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata schema.

    ``page`` follows the convention of the endpoint that produced it
    (1-based for filter listings, 0-based for grid listings).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"total": 45, "page": 2, "page_size": 20, "total_pages": 3}
        }
    )

    total: int = Field(..., description="Total number of items", ge=0)
    page: int = Field(..., description="Current page number", ge=0)
    page_size: int = Field(..., description="Number of items per page", ge=1)
    total_pages: int = Field(..., description="Total number of pages", ge=0)

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "PaginationMeta":
        """Build metadata, deriving ``total_pages`` from ``total``."""
        total_pages = (total + page_size - 1) // page_size if total > 0 else 0
        return cls(total=total, page=page, page_size=page_size, total_pages=total_pages)


class GridPage(BaseModel, Generic[T]):
    """A page of items plus the total count ignoring pagination."""

    items: list[T] = Field(default_factory=list, description="Items on this page")
    total_items: int = Field(0, description="Total matching items", ge=0)


class StandardResponse(BaseModel, Generic[T]):
    """Standard response wrapper for single resources."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"data": {}, "meta": None, "error": None}}
    )

    data: T = Field(..., description="Response data")
    meta: dict | None = Field(None, description="Optional metadata")
    error: None = Field(None, description="Error object (null on success)")


class StandardListResponse(BaseModel, Generic[T]):
    """Standard response wrapper for collections with pagination."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": [],
                "meta": {"total": 45, "page": 1, "page_size": 20, "total_pages": 3},
                "error": None,
            }
        }
    )

    data: list[T] = Field(..., description="List of items")
    meta: PaginationMeta = Field(..., description="Pagination metadata")
    error: None = Field(None, description="Error object (null on success)")


class ErrorDetail(BaseModel):
    """Error detail schema."""

    code: str = Field(..., description="Error code (e.g., 'AUTH_INVALID_TOKEN')")
    message: str = Field(..., description="Human-readable error message")
    details: dict | None = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: ErrorDetail = Field(..., description="Error information")
    data: None = Field(None, description="Data object (null on error)")
