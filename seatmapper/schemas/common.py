from typing import List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper, used by all list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error responses
class ErrorResponse(BaseModel):
    error: str
    message: str


class FieldErrorItem(BaseModel):
    path: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: List[FieldErrorItem]


# Background upload result
class BackgroundUploadResponse(BaseModel):
    url: str
    width: int
    height: int
    aspect_ratio: float
