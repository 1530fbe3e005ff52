from seatmapper.schemas.common import (
    PaginatedResponse, ErrorResponse, FieldErrorItem, ValidationErrorResponse,
    BackgroundUploadResponse,
)
from seatmapper.schemas.seatmap import (
    SCHEMA_VERSION, SeatStatus, ElementType, ElementIcon, Theme,
    Seat, Category, Zone, DecorativeElement, SeatSize, GridConfig,
    SeatMapSettings, Background, SeatMap, SeatMapSummary, SeatMapCreate,
)
