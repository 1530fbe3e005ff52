"""
Batch geometric transforms over seats.

Every operation takes the seat list plus an explicit id set and returns the
changes to apply, so a whole transform lands in the document (and in the
history) as one step. Nothing here clamps to the unit square; keeping seats
on the canvas is left to the caller.
"""

import logging
import math
import string
import uuid
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from seatmapper.core.config import settings
from seatmapper.editor.document import SeatChange
from seatmapper.schemas.seatmap import Seat, SeatStatus

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_LABELS = list(string.ascii_uppercase)
DUPLICATE_SUFFIX = " copy"
MAX_LABEL_LENGTH = 20
MIN_DISTRIBUTE_COUNT = 3


class Edge(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def _pick(seats: Iterable[Seat], ids: Iterable[str]) -> List[Seat]:
    id_set = set(ids)
    return [s for s in seats if s.id in id_set]


def _same(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=0, abs_tol=1e-9)


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------


def align(seats: Sequence[Seat], ids: Iterable[str], edge: Edge) -> List[SeatChange]:
    """Line seats up on the outermost edge; seats already there are left alone."""
    picked = _pick(seats, ids)
    if not picked:
        return []

    edge = Edge(edge)
    if edge == Edge.LEFT:
        target = min(s.x for s in picked)
        return [SeatChange(s.id, {"x": target}) for s in picked if not _same(s.x, target)]
    if edge == Edge.RIGHT:
        target = max(s.x + s.w for s in picked)
        return [SeatChange(s.id, {"x": target - s.w}) for s in picked if not _same(s.x + s.w, target)]
    if edge == Edge.TOP:
        target = min(s.y for s in picked)
        return [SeatChange(s.id, {"y": target}) for s in picked if not _same(s.y, target)]

    target = max(s.y + s.h for s in picked)
    return [SeatChange(s.id, {"y": target - s.h}) for s in picked if not _same(s.y + s.h, target)]


def center(seats: Sequence[Seat], ids: Iterable[str], axis: Axis) -> List[SeatChange]:
    """Move every seat so its center sits on the mean center along ``axis``."""
    picked = _pick(seats, ids)
    if not picked:
        return []

    if Axis(axis) == Axis.HORIZONTAL:
        mean = sum(s.x + s.w / 2 for s in picked) / len(picked)
        return [SeatChange(s.id, {"x": mean - s.w / 2}) for s in picked]

    mean = sum(s.y + s.h / 2 for s in picked) / len(picked)
    return [SeatChange(s.id, {"y": mean - s.h / 2}) for s in picked]


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------


def can_distribute(seats: Sequence[Seat], ids: Iterable[str]) -> bool:
    return len(_pick(seats, ids)) >= MIN_DISTRIBUTE_COUNT


def distribute(seats: Sequence[Seat], ids: Iterable[str], axis: Axis) -> List[SeatChange]:
    """
    Spread seats so the gaps between neighbours are equal.

    The outermost seats stay put. Seats wider than the available span end up
    overlapping (negative gap); that is kept as is.
    """
    picked = _pick(seats, ids)
    if len(picked) < MIN_DISTRIBUTE_COUNT:
        return []

    horizontal = Axis(axis) == Axis.HORIZONTAL
    pos_field, size_field = ("x", "w") if horizontal else ("y", "h")

    ordered = sorted(picked, key=lambda s: getattr(s, pos_field))
    first, last = ordered[0], ordered[-1]
    start = getattr(first, pos_field)
    span = getattr(last, pos_field) + getattr(last, size_field) - start
    total_size = sum(getattr(s, size_field) for s in ordered)
    gap = (span - total_size) / (len(ordered) - 1)

    changes = []
    cursor = start
    for seat in ordered:
        changes.append(SeatChange(seat.id, {pos_field: cursor}))
        cursor += getattr(seat, size_field) + gap
    return changes


# ---------------------------------------------------------------------------
# Bulk property changes
# ---------------------------------------------------------------------------


def set_size(seats: Sequence[Seat], ids: Iterable[str], w: Optional[float] = None,
             h: Optional[float] = None) -> List[SeatChange]:
    patch = {}
    if w is not None:
        patch["w"] = w
    if h is not None:
        patch["h"] = h
    if not patch:
        return []
    return [SeatChange(s.id, dict(patch)) for s in _pick(seats, ids)]


def set_status(seats: Sequence[Seat], ids: Iterable[str], status: SeatStatus) -> List[SeatChange]:
    status = SeatStatus(status)
    return [SeatChange(s.id, {"status": status}) for s in _pick(seats, ids)]


def set_category(seats: Sequence[Seat], ids: Iterable[str], category_id: Optional[str]) -> List[SeatChange]:
    return [SeatChange(s.id, {"category_id": category_id}) for s in _pick(seats, ids)]


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------


def move(seats: Sequence[Seat], ids: Iterable[str], delta_x: float, delta_y: float) -> List[SeatChange]:
    if delta_x == 0 and delta_y == 0:
        return []
    return [
        SeatChange(s.id, {"x": s.x + delta_x, "y": s.y + delta_y})
        for s in _pick(seats, ids)
    ]


def nudge(seats: Sequence[Seat], ids: Iterable[str], dx: int = 0, dy: int = 0,
          coarse: bool = False) -> List[SeatChange]:
    """Arrow-key move: ``dx``/``dy`` are directions (-1, 0, 1), step is fine or coarse."""
    step = settings.NUDGE_COARSE if coarse else settings.NUDGE_FINE
    return move(seats, ids, dx * step, dy * step)


# ---------------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------------


def duplicate_label(label: str) -> str:
    """Append the copy suffix, trimming the original so the result stays within 20 chars."""
    keep = MAX_LABEL_LENGTH - len(DUPLICATE_SUFFIX)
    return label[:keep].rstrip() + DUPLICATE_SUFFIX


def duplicate(seats: Sequence[Seat], ids: Iterable[str], offset: Optional[float] = None) -> List[Seat]:
    if offset is None:
        offset = settings.DUPLICATE_OFFSET
    copies = []
    for seat in _pick(seats, ids):
        copies.append(seat.model_copy(
            update={
                "id": str(uuid.uuid4()),
                "label": duplicate_label(seat.label),
                "x": seat.x + offset,
                "status": SeatStatus.AVAILABLE,
            },
            deep=True,
        ))
    return copies


# ---------------------------------------------------------------------------
# Grid generation
# ---------------------------------------------------------------------------


class GridOptions(BaseModel):
    rows: int = Field(10, ge=1)
    pattern: str = "3-3"
    columns: int = Field(6, ge=1)  # used when the pattern yields no groups
    start_x: float = 0.1
    start_y: float = 0.1
    spacing_x: float = 0.03
    spacing_y: float = 0.04
    aisle_width: float = Field(default_factory=lambda: settings.DEFAULT_AISLE_WIDTH)
    seat_w: float = Field(default_factory=lambda: settings.DEFAULT_SEAT_W)
    seat_h: float = Field(default_factory=lambda: settings.DEFAULT_SEAT_H)
    start_row_number: int = 1
    skip_row_13: bool = False
    category_id: Optional[str] = "standard"
    first_row_category_id: Optional[str] = None
    column_labels: Optional[List[str]] = None


def parse_layout_pattern(pattern: str) -> List[int]:
    """'2-4-2' -> [2, 4, 2]; blank, non-numeric and non-positive parts are dropped."""
    groups = []
    for part in pattern.split("-"):
        part = part.strip()
        if part.isdigit() and int(part) > 0:
            groups.append(int(part))
    return groups


def aisle_after_columns(groups: Sequence[int]) -> List[int]:
    """Zero-based index of the last column before each aisle."""
    result = []
    total = 0
    for size in groups[:-1]:
        total += size
        result.append(total - 1)
    return result


def column_groups(options: GridOptions) -> List[int]:
    return parse_layout_pattern(options.pattern) or [options.columns]


def generate_grid(options: GridOptions) -> List[Seat]:
    """
    Build a block of seats row by row, left to right within each column group,
    with ``aisle_width`` of extra space between groups. Labels combine the
    column label and the row number ("A1", "B1", ...).
    """
    groups = column_groups(options)
    labels = options.column_labels or DEFAULT_COLUMN_LABELS

    seats = []
    row_number = options.start_row_number
    for row in range(options.rows):
        if options.skip_row_13 and row_number == 13:
            row_number += 1

        category_id = options.category_id
        if row == 0 and options.first_row_category_id:
            category_id = options.first_row_category_id

        col_index = 0
        x = options.start_x
        for group_index, group_size in enumerate(groups):
            if group_index > 0:
                x += options.aisle_width
            for col in range(group_size):
                col_label = labels[col_index] if col_index < len(labels) else str(col_index + 1)
                seats.append(Seat.model_construct(
                    id=str(uuid.uuid4()),
                    label=f"{col_label}{row_number}",
                    x=x + col * options.spacing_x,
                    y=options.start_y + row * options.spacing_y,
                    w=options.seat_w,
                    h=options.seat_h,
                    r=None,
                    row=row_number,
                    column=col_index,
                    zone_id=None,
                    category_id=category_id or None,
                    status=SeatStatus.AVAILABLE,
                    metadata=None,
                ))
                col_index += 1
            x += group_size * options.spacing_x

        row_number += 1

    logger.debug("Generated %d seats in %d rows (%s)", len(seats), options.rows, options.pattern)
    return seats
