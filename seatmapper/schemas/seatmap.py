import enum
from typing import Annotated, Any, Dict, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = "1.0"


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("label must not be blank")
    return v


def _empty_or_absolute(v: str) -> str:
    if v and not urlparse(v).scheme:
        raise ValueError("url must be empty or an absolute URL")
    return v


# Constraints live on the types so single-field patches are checked the same way
SeatLabel = Annotated[str, Field(min_length=1, max_length=20), AfterValidator(_not_blank)]
ImageUrl = Annotated[str, AfterValidator(_empty_or_absolute)]


# Attributes are snake_case in Python, camelCase on the wire
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SeatStatus(str, enum.Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    BLOCKED = "blocked"


class ElementType(str, enum.Enum):
    TEXT_LABEL = "text-label"
    ICON = "icon"
    DIVIDER = "divider"
    ROW_NUMBER = "row-number"
    COLUMN_HEADER = "column-header"


class ElementIcon(str, enum.Enum):
    RESTROOM = "restroom"
    CAFE = "cafe"
    EXIT = "exit"
    STAIRS = "stairs"
    ELEVATOR = "elevator"
    INFO = "info"
    FOOD = "food"
    BAR = "bar"
    VIP = "vip"


class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"


# Seat: (x, y) is the top-left corner in normalized canvas space
class Seat(CamelModel):
    id: str = Field(min_length=1)
    label: SeatLabel
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    w: float = Field(ge=0.005, le=0.5)
    h: float = Field(ge=0.005, le=0.5)
    r: Optional[float] = None
    row: Optional[int] = None
    column: Optional[int] = None
    zone_id: Optional[str] = None
    category_id: Optional[str] = None
    status: SeatStatus = SeatStatus.AVAILABLE
    metadata: Optional[Dict[str, Any]] = None

    @property
    def center(self):
        return (self.x + self.w / 2, self.y + self.h / 2)


class Category(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: str = Field(min_length=1)
    border_color: Optional[str] = None
    text_color: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    order: Optional[int] = Field(default=None, ge=0)


# Zone bounds are derived from the seats that reference it, never stored
class Zone(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: str = Field(min_length=1)
    price: Optional[float] = Field(default=None, ge=0)


class DecorativeElement(CamelModel):
    id: str = Field(min_length=1)
    type: ElementType
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    w: float = Field(ge=0, le=1)
    h: float = Field(ge=0, le=1)
    r: Optional[float] = None
    label: Optional[str] = None
    icon: Optional[ElementIcon] = None
    font_size: Optional[float] = Field(default=None, gt=0)
    color: Optional[str] = None


class SeatSize(CamelModel):
    w: float = Field(ge=0.005, le=0.5)
    h: float = Field(ge=0.005, le=0.5)


class GridConfig(CamelModel):
    column_labels: Optional[List[str]] = None
    aisle_after_columns: Optional[List[Annotated[int, Field(ge=0)]]] = None
    aisle_width: Optional[float] = Field(default=None, gt=0)
    row_numbers_visible: Optional[bool] = None
    column_headers_visible: Optional[bool] = None


class SeatMapSettings(CamelModel):
    allow_multi_select: bool = True
    max_selectable: Optional[int] = Field(default=None, gt=0)
    show_labels: bool = True
    show_legend: Optional[bool] = None
    show_row_numbers: Optional[bool] = None
    show_column_headers: Optional[bool] = None
    theme: Optional[Theme] = None
    default_seat_size: Optional[SeatSize] = None


# Background image reference (natural pixel size) plus its placement on the canvas
class Background(CamelModel):
    url: ImageUrl = ""
    width: float = Field(default=0, ge=0)
    height: float = Field(default=0, ge=0)
    aspect_ratio: Optional[float] = Field(default=None, gt=0)
    x: Optional[float] = None
    y: Optional[float] = None
    scale: Optional[float] = Field(default=None, gt=0)
    locked: Optional[bool] = None


# The seat map document
class SeatMap(CamelModel):
    id: str = Field(min_length=1)
    version: Literal["1.0"] = SCHEMA_VERSION
    name: str = Field(min_length=1)
    created_at: str
    updated_at: str
    background: Background
    seats: List[Seat]
    zones: List[Zone] = []
    categories: List[Category] = []
    elements: List[DecorativeElement] = []
    grid_config: Optional[GridConfig] = None
    settings: Optional[SeatMapSettings] = None

    @field_validator("seats")
    @classmethod
    def seat_ids_unique(cls, seats: List[Seat]) -> List[Seat]:
        seen = set()
        for seat in seats:
            if seat.id in seen:
                raise ValueError(f"duplicate seat id '{seat.id}'")
            seen.add(seat.id)
        return seats


# Compact listing entry for the storage API
class SeatMapSummary(CamelModel):
    id: str
    name: str
    seat_count: int
    updated_at: str


class SeatMapCreate(BaseModel):
    name: Optional[str] = None
