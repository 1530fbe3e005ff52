"""
Host-command channel for the embedded, read-mostly seat map viewer.

A host page pushes commands (set statuses, select, clear, theme) and
listens for events (ready, selected, deselected, error). Commands arrive as
plain dicts and are parsed into a pydantic discriminated union.
"""

import logging
from typing import Annotated, Any, Callable, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from seatmapper.editor import document
from seatmapper.schemas.seatmap import Seat, SeatMap, SeatStatus, Theme

logger = logging.getLogger(__name__)

EVENT_READY = "seatmap:ready"
EVENT_SELECTED = "seatmap:selected"
EVENT_DESELECTED = "seatmap:deselected"
EVENT_ERROR = "seatmap:error"


# --- Commands (host -> viewer) ---

class StatusAssignment(BaseModel):
    seat_id: str = Field(alias="seatId")
    status: SeatStatus


class SetStatusCommand(BaseModel):
    type: Literal["seatmap:setStatus"]
    payload: List[StatusAssignment]


class ClearSelectionCommand(BaseModel):
    type: Literal["seatmap:clearSelection"]


class SelectSeatsPayload(BaseModel):
    seat_ids: List[str] = Field(alias="seatIds")


class SelectSeatsCommand(BaseModel):
    type: Literal["seatmap:selectSeats"]
    payload: SelectSeatsPayload


class ThemePayload(BaseModel):
    theme: Theme


class SetThemeCommand(BaseModel):
    type: Literal["seatmap:setTheme"]
    payload: ThemePayload


HostCommand = Annotated[
    Union[SetStatusCommand, ClearSelectionCommand, SelectSeatsCommand, SetThemeCommand],
    Field(discriminator="type"),
]
_command_adapter = TypeAdapter(HostCommand)


# --- Events (viewer -> host) ---

class EmbedEvent(BaseModel):
    type: str
    payload: Optional[Dict[str, Any]] = None


Listener = Callable[[EmbedEvent], None]


class EmbedController:
    """Viewer-side state: the displayed document and the viewer's selection."""

    def __init__(self, doc: SeatMap):
        self.doc = doc
        self.selected_ids: List[str] = []
        self._listeners: List[Listener] = []

    @property
    def theme(self) -> Theme:
        if self.doc.settings and self.doc.settings.theme:
            return self.doc.settings.theme
        return Theme.LIGHT

    # -- events ------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> None:
        event = EmbedEvent(type=event_type, payload=payload)
        for listener in list(self._listeners):
            listener(event)

    def ready(self) -> None:
        self.emit(EVENT_READY)

    def error(self, code: str, message: str) -> None:
        logger.warning("Embed error %s: %s", code, message)
        self.emit(EVENT_ERROR, {"code": code, "message": message})

    # -- selection ---------------------------------------------------------

    def selected_seats(self) -> List[Seat]:
        chosen = set(self.selected_ids)
        return [s for s in self.doc.seats if s.id in chosen]

    def _set_selection(self, ids: Iterable[str]) -> None:
        """Replace the selection and report the difference to the host."""
        previous = self.selected_ids
        self.selected_ids = list(dict.fromkeys(ids))

        added = [i for i in self.selected_ids if i not in previous]
        removed = [i for i in previous if i not in self.selected_ids]
        if added or removed:
            self.emit(EVENT_SELECTED, {
                "seats": [
                    s.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for s in self.selected_seats()
                ]
            })
        for seat_id in removed:
            self.emit(EVENT_DESELECTED, {"seatId": seat_id})

    def toggle_seat(self, seat_id: str) -> None:
        """Viewer click on a seat, honouring the map's selection settings."""
        if seat_id in self.selected_ids:
            self._set_selection(i for i in self.selected_ids if i != seat_id)
            return

        seat = document.find_seat(self.doc, seat_id)
        if seat is None or seat.status in (SeatStatus.SOLD, SeatStatus.BLOCKED):
            return

        opts = self.doc.settings
        if not opts or not opts.allow_multi_select:
            self._set_selection([seat_id])
        elif opts.max_selectable and len(self.selected_ids) >= opts.max_selectable:
            return
        else:
            self._set_selection([*self.selected_ids, seat_id])

    # -- commands ----------------------------------------------------------

    def handle(self, message: Any) -> None:
        """Dispatch one host message; anything outside the seatmap: namespace is ignored."""
        if not isinstance(message, dict) or not str(message.get("type", "")).startswith("seatmap:"):
            return

        try:
            command = _command_adapter.validate_python(message)
        except ValidationError as e:
            self.error("INVALID_COMMAND", f"Unsupported command {message.get('type')!r} ({e.error_count()} error(s))")
            return

        if isinstance(command, SetStatusCommand):
            # first assignment for a seat wins
            statuses = {}
            for item in command.payload:
                statuses.setdefault(item.seat_id, item.status)
            doc = self.doc
            for seat_id, status in statuses.items():
                doc = document.update_seats(doc, [seat_id], {"status": status})
            self.doc = doc
        elif isinstance(command, ClearSelectionCommand):
            self._set_selection([])
        elif isinstance(command, SelectSeatsCommand):
            self._set_selection(command.payload.seat_ids)
        elif isinstance(command, SetThemeCommand):
            self.doc = document.update_settings(self.doc, {"theme": command.payload.theme})
