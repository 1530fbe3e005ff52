"""
EditorSession: one operator's editing session.

Owns the current document, its undo history, the selection and the active
tool. Presentation code calls these methods instead of touching the
document; every call that changes the document records exactly one history
entry, and calls that change nothing record none.
"""

import logging
import uuid
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from seatmapper.core.config import settings
from seatmapper.editor import document, io, selection as spatial, transforms
from seatmapper.editor.document import SeatChange
from seatmapper.editor.history import HistoryManager
from seatmapper.editor.selection import Direction, Selection
from seatmapper.editor.transforms import Axis, Edge, GridOptions
from seatmapper.schemas.seatmap import (
    Category,
    DecorativeElement,
    Seat,
    SeatMap,
    SeatStatus,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

DEFAULT_CATEGORIES = [
    Category(id="standard", name="Standard", color="#E8E8E8", border_color="#BDBDBD",
             text_color="#424242", order=0),
    Category(id="premium", name="Premium", color="#BBDEFB", border_color="#1E88E5",
             text_color="#0D47A1", order=1),
    Category(id="vip", name="VIP", color="#FFE082", border_color="#FFA000",
             text_color="#5D4037", order=2),
]


class EditorTool(str, Enum):
    SELECT = "select"
    ADD = "add"
    PAN = "pan"
    GRID = "grid"
    ELEMENT = "element"


class EditorSession:
    def __init__(self, doc: Optional[SeatMap] = None, history_limit: Optional[int] = None):
        self.history = HistoryManager(history_limit)
        self.selection = Selection()
        self.active_tool = EditorTool.SELECT
        self.is_dirty = False
        self._doc: SeatMap = None
        self.load(doc if doc is not None else document.new_seat_map())

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    @property
    def document(self) -> SeatMap:
        """Current version. Read only: change it through the session."""
        return self._doc

    def load(self, doc: SeatMap) -> None:
        self._doc = doc.model_copy(deep=True)
        self.history.reset(self._doc)
        self.selection.clear()
        self.is_dirty = False
        logger.info("Loaded seat map %s (%d seats)", doc.id, len(doc.seats))

    def import_json(self, payload: Union[str, bytes]) -> SeatMap:
        """Replace the document with an imported one. On failure nothing changes."""
        doc = io.parse_seat_map(payload)
        self.load(doc)
        return self._doc

    def export_json(self) -> str:
        return io.dump_seat_map(self._doc)

    def _commit(self, doc: SeatMap) -> None:
        self._doc = doc
        self.history.commit(doc)
        self.selection.prune(doc)
        self.is_dirty = True

    def _apply(self, changes: Sequence[SeatChange]) -> bool:
        if not changes:
            return False
        self._commit(document.apply_seat_changes(self._doc, changes))
        return True

    def _has_seat(self, ids: Iterable[str]) -> bool:
        id_set = set(ids)
        return any(s.id in id_set for s in self._doc.seats)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        restored = self.history.undo()
        if restored is None:
            return False
        self._doc = restored
        self.selection.clear()
        self.is_dirty = True
        return True

    def redo(self) -> bool:
        restored = self.history.redo()
        if restored is None:
            return False
        self._doc = restored
        self.selection.clear()
        self.is_dirty = True
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # ------------------------------------------------------------------
    # Seats
    # ------------------------------------------------------------------

    def add_seat(self, seat: Seat) -> bool:
        return self.add_seats([seat])

    def add_seats(self, seats: Iterable[Seat]) -> bool:
        before = len(self._doc.seats)
        updated = document.add_seats(self._doc, seats)
        if len(updated.seats) == before:
            return False
        self._commit(updated)
        return True

    def add_seat_at(self, x: float, y: float) -> Seat:
        """Place a default-sized seat with its top-left corner at (x, y)."""
        size = self._doc.settings.default_seat_size if self._doc.settings else None
        w = size.w if size else settings.DEFAULT_SEAT_W
        h = size.h if size else settings.DEFAULT_SEAT_H
        seat = Seat(
            id=str(uuid.uuid4()),
            label=f"S{len(self._doc.seats) + 1}",
            x=x, y=y, w=w, h=h,
            status=SeatStatus.AVAILABLE,
        )
        self.add_seats([seat])
        return seat

    def update_seats(self, ids: Iterable[str], **changes) -> bool:
        ids = list(ids)
        if not changes or not self._has_seat(ids):
            return False
        self._commit(document.update_seats(self._doc, ids, changes))
        return True

    def update_seat(self, seat_id: str, **changes) -> bool:
        return self.update_seats([seat_id], **changes)

    def move_seats(self, ids: Iterable[str], delta_x: float, delta_y: float) -> bool:
        return self._apply(transforms.move(self._doc.seats, ids, delta_x, delta_y))

    def delete_seats(self, ids: Iterable[str]) -> bool:
        ids = list(ids)
        if not self._has_seat(ids):
            return False
        self._commit(document.delete_seats(self._doc, ids))
        return True

    def delete_selected(self) -> bool:
        return self.delete_seats(self.selection.ids)

    # ------------------------------------------------------------------
    # Selection (never recorded in history)
    # ------------------------------------------------------------------

    def selected_seats(self) -> List[Seat]:
        chosen = set(self.selection.ids)
        return [s for s in self._doc.seats if s.id in chosen]

    def select(self, seat_id: str) -> None:
        self.selection.select(seat_id)

    def deselect(self, seat_id: str) -> None:
        self.selection.deselect(seat_id)

    def toggle(self, seat_id: str) -> None:
        self.selection.toggle(seat_id)

    def select_only(self, ids: Iterable[str]) -> None:
        self.selection.replace(ids)

    def clear_selection(self) -> None:
        self.selection.clear()

    def lasso(self, start: Point, end: Point, additive: bool = False) -> bool:
        """Select seats whose centers fall inside the dragged rectangle."""
        if not spatial.is_lasso_drag(start, end):
            return False
        hits = spatial.lasso_hit(self._doc.seats, start, end)
        self.selection.replace(spatial.merge_selection(self.selection.ids, hits, additive))
        return True

    def neighbor(self, seat_id: str, direction: Direction) -> Optional[str]:
        return spatial.find_neighbor(self._doc.seats, seat_id, direction)

    def reading_order(self) -> List[Seat]:
        return spatial.reading_order(self._doc.seats)

    # ------------------------------------------------------------------
    # Transforms on the selection
    # ------------------------------------------------------------------

    def align_selected(self, edge: Edge) -> bool:
        return self._apply(transforms.align(self._doc.seats, self.selection.ids, edge))

    def center_selected(self, axis: Axis) -> bool:
        return self._apply(transforms.center(self._doc.seats, self.selection.ids, axis))

    def can_distribute_selected(self) -> bool:
        return transforms.can_distribute(self._doc.seats, self.selection.ids)

    def distribute_selected(self, axis: Axis) -> bool:
        return self._apply(transforms.distribute(self._doc.seats, self.selection.ids, axis))

    def set_size_selected(self, w: Optional[float] = None, h: Optional[float] = None) -> bool:
        return self._apply(transforms.set_size(self._doc.seats, self.selection.ids, w, h))

    def set_status_selected(self, status: SeatStatus) -> bool:
        return self._apply(transforms.set_status(self._doc.seats, self.selection.ids, status))

    def set_category_selected(self, category_id: Optional[str]) -> bool:
        return self._apply(transforms.set_category(self._doc.seats, self.selection.ids, category_id))

    def move_selected(self, delta_x: float, delta_y: float) -> bool:
        return self.move_seats(self.selection.ids, delta_x, delta_y)

    def nudge_selected(self, dx: int = 0, dy: int = 0, coarse: bool = False) -> bool:
        return self._apply(transforms.nudge(self._doc.seats, self.selection.ids, dx, dy, coarse))

    def duplicate_selected(self) -> List[str]:
        """Copy the selected seats; the copies become the selection."""
        copies = transforms.duplicate(self._doc.seats, self.selection.ids)
        if not copies:
            return []
        self._commit(document.add_seats(self._doc, copies))
        new_ids = [c.id for c in copies]
        self.selection.replace(new_ids)
        return new_ids

    def generate_grid(self, options: GridOptions) -> List[str]:
        """
        Add a generated block of seats. On a map without categories the default
        categories the grid uses are added too, and the grid layout is recorded
        in the grid config, all as a single history entry.
        """
        seats = transforms.generate_grid(options)
        if not seats:
            return []

        doc = self._doc
        if not doc.categories:
            used = {options.category_id, options.first_row_category_id} - {None, ""}
            defaults = [c for c in DEFAULT_CATEGORIES if c.id in used]
            if defaults:
                for category in defaults:
                    doc = document.add_category(doc, category)
                groups = transforms.column_groups(options)
                total_columns = sum(groups)
                labels = (options.column_labels or transforms.DEFAULT_COLUMN_LABELS)[:total_columns]
                doc = document.update_grid_config(doc, {
                    "column_labels": list(labels),
                    "aisle_after_columns": transforms.aisle_after_columns(groups),
                    "aisle_width": options.aisle_width,
                    "row_numbers_visible": True,
                    "column_headers_visible": True,
                })
                doc = document.update_settings(doc, {
                    "show_row_numbers": True,
                    "show_column_headers": True,
                    "show_legend": True,
                })

        self._commit(document.add_seats(doc, seats))
        logger.info("Grid added %d seats to %s", len(seats), doc.id)
        return [s.id for s in seats]

    # ------------------------------------------------------------------
    # Categories and decorative elements
    # ------------------------------------------------------------------

    def add_category(self, category: Category) -> None:
        self._commit(document.add_category(self._doc, category))

    def update_category(self, category_id: str, **changes) -> bool:
        if not changes or not any(c.id == category_id for c in self._doc.categories):
            return False
        self._commit(document.update_category(self._doc, category_id, changes))
        return True

    def delete_category(self, category_id: str) -> bool:
        if not any(c.id == category_id for c in self._doc.categories):
            return False
        self._commit(document.delete_category(self._doc, category_id))
        return True

    def load_default_categories(self) -> bool:
        existing = {c.id for c in self._doc.categories}
        missing = [c for c in DEFAULT_CATEGORIES if c.id not in existing]
        if not missing:
            return False
        doc = self._doc
        for category in missing:
            doc = document.add_category(doc, category)
        self._commit(doc)
        return True

    def add_element(self, element: DecorativeElement) -> None:
        self._commit(document.add_element(self._doc, element))

    def update_element(self, element_id: str, **changes) -> bool:
        if not changes or not any(e.id == element_id for e in self._doc.elements):
            return False
        self._commit(document.update_element(self._doc, element_id, changes))
        return True

    def delete_element(self, element_id: str) -> bool:
        if not any(e.id == element_id for e in self._doc.elements):
            return False
        self._commit(document.delete_element(self._doc, element_id))
        return True

    # ------------------------------------------------------------------
    # Grid config, settings, background
    # ------------------------------------------------------------------

    def update_grid_config(self, **changes) -> None:
        self._commit(document.update_grid_config(self._doc, changes))

    def update_settings(self, **changes) -> None:
        self._commit(document.update_settings(self._doc, changes))

    def update_background(self, **changes) -> None:
        self._commit(document.update_background(self._doc, changes))

    def set_background_image(self, content_type: Optional[str], size: int, url: str,
                             width: int, height: int) -> None:
        """Swap in a new background image; a rejected upload leaves the document as is."""
        background = io.accept_background(content_type, size, url, width, height)
        self.update_background(
            url=background.url,
            width=background.width,
            height=background.height,
            aspect_ratio=background.aspect_ratio,
        )

    def set_active_tool(self, tool: EditorTool) -> None:
        self.active_tool = EditorTool(tool)
