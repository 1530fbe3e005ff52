"""
Pure operations over the seat map document.

Every function takes a SeatMap and returns a new SeatMap; the argument is
never modified. Ids that match nothing are ignored, so repeating an update
or delete is harmless. Each result carries a fresh ``updated_at`` stamp.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, TypeAdapter

from seatmapper.core.config import settings
from seatmapper.schemas.seatmap import (
    Background,
    Category,
    DecorativeElement,
    GridConfig,
    Seat,
    SeatMap,
    SeatMapSettings,
    Theme,
)


@dataclass(frozen=True)
class SeatChange:
    """A per-seat patch produced by the transform engine."""
    id: str
    patch: Dict[str, Any]


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    w: float
    h: float


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_seat_map(name: Optional[str] = None) -> SeatMap:
    stamp = now_iso()
    return SeatMap(
        id=str(uuid.uuid4()),
        name=name or "Untitled Map",
        created_at=stamp,
        updated_at=stamp,
        background=Background(url="", width=800, height=600),
        seats=[],
        zones=[],
        settings=SeatMapSettings(allow_multi_select=True, show_labels=True, theme=Theme.LIGHT),
    )


# Seat positions may leave the unit square while the operator drags or aligns
UNBOUNDED_SEAT_FIELDS = ("x", "y")


@lru_cache(maxsize=None)
def _field_adapter(model_type: type, key: str, bounded: bool) -> TypeAdapter:
    field = model_type.model_fields[key]
    metadata = field.metadata if bounded else []
    annotation = Annotated[(field.annotation, *metadata)] if metadata else field.annotation
    return TypeAdapter(annotation)


def _patched(model: BaseModel, changes: Dict[str, Any], unbounded: Iterable[str] = ()) -> BaseModel:
    """
    Copy ``model`` with ``changes`` applied. Each value is validated against
    its field's type and constraints, so nested models arrive as models and
    invalid values raise ``ValidationError``. Fields in ``unbounded`` are
    type-checked only.
    """
    model_type = type(model)
    update = {}
    for key, value in changes.items():
        if key not in model_type.model_fields:
            raise ValueError(f"Unknown {model_type.__name__} field: {key}")
        update[key] = _field_adapter(model_type, key, key not in unbounded).validate_python(value)
    return model.model_copy(update=update, deep=True)


def _stamp(doc: SeatMap, **parts) -> SeatMap:
    parts["updated_at"] = now_iso()
    return doc.model_copy(update=parts)


# ---------------------------------------------------------------------------
# Seats
# ---------------------------------------------------------------------------


def add_seats(doc: SeatMap, seats: Iterable[Seat]) -> SeatMap:
    """Append seats; incoming seats whose id already exists are skipped."""
    existing = {s.id for s in doc.seats}
    added = []
    for seat in seats:
        if seat.id in existing:
            continue
        existing.add(seat.id)
        added.append(seat.model_copy(deep=True))
    return _stamp(doc, seats=[*doc.seats, *added])


def update_seats(doc: SeatMap, ids: Iterable[str], changes: Dict[str, Any]) -> SeatMap:
    """Apply the same partial patch to every seat in ``ids``."""
    id_set = set(ids)
    seats = [
        _patched(s, changes, UNBOUNDED_SEAT_FIELDS) if s.id in id_set else s
        for s in doc.seats
    ]
    return _stamp(doc, seats=seats)


def apply_seat_changes(doc: SeatMap, changes: Iterable[SeatChange]) -> SeatMap:
    """Apply a batch of per-seat patches as one new document version."""
    by_id: Dict[str, Dict[str, Any]] = {}
    for change in changes:
        by_id.setdefault(change.id, {}).update(change.patch)
    seats = [
        _patched(s, by_id[s.id], UNBOUNDED_SEAT_FIELDS) if s.id in by_id else s
        for s in doc.seats
    ]
    return _stamp(doc, seats=seats)


def delete_seats(doc: SeatMap, ids: Iterable[str]) -> SeatMap:
    id_set = set(ids)
    return _stamp(doc, seats=[s for s in doc.seats if s.id not in id_set])


def find_seat(doc: SeatMap, seat_id: str) -> Optional[Seat]:
    for seat in doc.seats:
        if seat.id == seat_id:
            return seat
    return None


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def add_category(doc: SeatMap, category: Category) -> SeatMap:
    return _stamp(doc, categories=[*doc.categories, category.model_copy(deep=True)])


def update_category(doc: SeatMap, category_id: str, changes: Dict[str, Any]) -> SeatMap:
    categories = [_patched(c, changes) if c.id == category_id else c for c in doc.categories]
    return _stamp(doc, categories=categories)


def delete_category(doc: SeatMap, category_id: str) -> SeatMap:
    """Remove a category and unassign every seat that referenced it."""
    categories = [c for c in doc.categories if c.id != category_id]
    seats = [
        _patched(s, {"category_id": None}) if s.category_id == category_id else s
        for s in doc.seats
    ]
    return _stamp(doc, categories=categories, seats=seats)


def sorted_categories(doc: SeatMap) -> List[Category]:
    """Legend order: by ``order``, unordered last; sorted() keeps insertion order on ties."""
    return sorted(
        doc.categories,
        key=lambda c: (c.order is None, c.order if c.order is not None else 0),
    )


# ---------------------------------------------------------------------------
# Decorative elements
# ---------------------------------------------------------------------------


def add_element(doc: SeatMap, element: DecorativeElement) -> SeatMap:
    return _stamp(doc, elements=[*doc.elements, element.model_copy(deep=True)])


def update_element(doc: SeatMap, element_id: str, changes: Dict[str, Any]) -> SeatMap:
    elements = [_patched(e, changes) if e.id == element_id else e for e in doc.elements]
    return _stamp(doc, elements=elements)


def delete_element(doc: SeatMap, element_id: str) -> SeatMap:
    return _stamp(doc, elements=[e for e in doc.elements if e.id != element_id])


# ---------------------------------------------------------------------------
# Grid config, settings, background
# ---------------------------------------------------------------------------


def update_grid_config(doc: SeatMap, changes: Dict[str, Any]) -> SeatMap:
    current = doc.grid_config or GridConfig()
    return _stamp(doc, grid_config=_patched(current, changes))


def update_settings(doc: SeatMap, changes: Dict[str, Any]) -> SeatMap:
    current = doc.settings or SeatMapSettings(allow_multi_select=True, show_labels=True)
    return _stamp(doc, settings=_patched(current, changes))


def update_background(doc: SeatMap, changes: Dict[str, Any]) -> SeatMap:
    return _stamp(doc, background=_patched(doc.background, changes))


# ---------------------------------------------------------------------------
# Derived geometry
# ---------------------------------------------------------------------------


def seat_bounds(seats: Iterable[Seat]) -> Optional[Bounds]:
    seats = list(seats)
    if not seats:
        return None
    min_x = min(s.x for s in seats)
    min_y = min(s.y for s in seats)
    max_x = max(s.x + s.w for s in seats)
    max_y = max(s.y + s.h for s in seats)
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)


def zone_bounds(doc: SeatMap, zone_id: str, margin: Optional[float] = None) -> Optional[Bounds]:
    """Bounding box of the zone's seats grown by ``margin`` on every side."""
    if margin is None:
        margin = settings.ZONE_MARGIN
    box = seat_bounds(s for s in doc.seats if s.zone_id == zone_id)
    if box is None:
        return None
    return Bounds(box.x - margin, box.y - margin, box.w + 2 * margin, box.h + 2 * margin)
