"""
Spatial selection over normalized seat coordinates: lasso hit-testing,
arrow-key neighbour lookup and the row-then-column reading order used for
accessible seat lists.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from seatmapper.core.config import settings
from seatmapper.schemas.seatmap import Category, Seat, SeatMap, SeatStatus, Zone


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Selection:
    """Ordered set of selected seat ids. Never part of the undo history."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: List[str] = []
        self.replace(ids)

    def __contains__(self, seat_id: str) -> bool:
        return seat_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(list(self._ids))

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def select(self, seat_id: str) -> None:
        if seat_id not in self._ids:
            self._ids.append(seat_id)

    def deselect(self, seat_id: str) -> None:
        if seat_id in self._ids:
            self._ids.remove(seat_id)

    def toggle(self, seat_id: str) -> None:
        if seat_id in self._ids:
            self._ids.remove(seat_id)
        else:
            self._ids.append(seat_id)

    def replace(self, ids: Iterable[str]) -> None:
        self._ids = list(dict.fromkeys(ids))

    def clear(self) -> None:
        self._ids = []

    def prune(self, doc: SeatMap) -> None:
        """Drop ids that no longer exist in ``doc``."""
        present = {s.id for s in doc.seats}
        self._ids = [i for i in self._ids if i in present]


# ---------------------------------------------------------------------------
# Lasso
# ---------------------------------------------------------------------------


def _rect(p1: Tuple[float, float], p2: Tuple[float, float]):
    (x1, y1), (x2, y2) = p1, p2
    return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)


def is_lasso_drag(p1: Tuple[float, float], p2: Tuple[float, float],
                  threshold: Optional[float] = None) -> bool:
    """False for a click-sized rectangle (both extents under ``threshold``)."""
    if threshold is None:
        threshold = settings.LASSO_MIN_DRAG
    min_x, min_y, max_x, max_y = _rect(p1, p2)
    return not (max_x - min_x < threshold and max_y - min_y < threshold)


def lasso_hit(seats: Iterable[Seat], p1: Tuple[float, float], p2: Tuple[float, float]) -> List[str]:
    """Ids of seats whose center lies inside the rectangle, edges included."""
    min_x, min_y, max_x, max_y = _rect(p1, p2)
    hits = []
    for seat in seats:
        cx, cy = seat.center
        if min_x <= cx <= max_x and min_y <= cy <= max_y:
            hits.append(seat.id)
    return hits


def merge_selection(current: Sequence[str], hits: Sequence[str], additive: bool) -> List[str]:
    if not additive:
        return list(dict.fromkeys(hits))
    return list(dict.fromkeys([*current, *hits]))


# ---------------------------------------------------------------------------
# Keyboard navigation
# ---------------------------------------------------------------------------


def find_neighbor(seats: Sequence[Seat], current_id: str, direction: Direction,
                  tolerance: Optional[float] = None) -> Optional[str]:
    """
    Closest seat (Euclidean, by top-left corner) lying in ``direction`` from
    the current seat. Offsets within ``tolerance`` on the travel axis do not
    count, so seats in the same row are not "above" each other. No wraparound.
    """
    if tolerance is None:
        tolerance = settings.SPATIAL_TOLERANCE

    current = next((s for s in seats if s.id == current_id), None)
    if current is None:
        return None

    direction = Direction(direction)
    best_id = None
    best_dist = float("inf")
    for seat in seats:
        if seat.id == current_id:
            continue
        dx = seat.x - current.x
        dy = seat.y - current.y

        if direction == Direction.LEFT:
            in_direction = dx < -tolerance
        elif direction == Direction.RIGHT:
            in_direction = dx > tolerance
        elif direction == Direction.UP:
            in_direction = dy < -tolerance
        else:
            in_direction = dy > tolerance
        if not in_direction:
            continue

        dist = (dx * dx + dy * dy) ** 0.5
        if dist < best_dist:
            best_dist = dist
            best_id = seat.id
    return best_id


def reading_order(seats: Iterable[Seat], tolerance: Optional[float] = None) -> List[Seat]:
    """
    Row-then-column order. Seats are walked by ``y``; each one joins the
    current row while it sits within ``tolerance`` of the row's first seat,
    and every row is ordered by ``x``.
    """
    if tolerance is None:
        tolerance = settings.SPATIAL_TOLERANCE

    rows: List[List[Seat]] = []
    for seat in sorted(seats, key=lambda s: s.y):
        if rows and seat.y - rows[-1][0].y <= tolerance:
            rows[-1].append(seat)
        else:
            rows.append([seat])

    ordered = []
    for row in rows:
        ordered.extend(sorted(row, key=lambda s: s.x))
    return ordered


def describe_seat(seat: Seat, categories: Iterable[Category] = (), zones: Iterable[Zone] = ()) -> str:
    """Screen-reader label, e.g. 'Seat A1, available, VIP, Balcony, Row 1, $25'."""
    category_map: Dict[str, Category] = {c.id: c for c in categories}
    zone_map: Dict[str, Zone] = {z.id: z for z in zones}
    category = category_map.get(seat.category_id) if seat.category_id else None
    zone = zone_map.get(seat.zone_id) if seat.zone_id else None

    parts = [f"Seat {seat.label}", SeatStatus(seat.status).value]
    if category:
        parts.append(category.name)
    if zone:
        parts.append(zone.name)
    if seat.row is not None:
        parts.append(f"Row {seat.row}")

    price = category.price if category and category.price is not None else (zone.price if zone else None)
    if price is not None:
        parts.append(f"${price:g}")
    return ", ".join(parts)
