import json

import pytest
from pydantic import ValidationError

from seatmapper.core.exceptions import BackgroundRejectedError, SeatMapValidationError
from seatmapper.editor import EditorSession
from seatmapper.editor.session import DEFAULT_CATEGORIES, EditorTool
from seatmapper.editor.selection import Direction
from seatmapper.editor.transforms import Axis, Edge, GridOptions
from seatmapper.schemas.seatmap import DecorativeElement, ElementType, SeatStatus


@pytest.fixture
def session(seat_map):
    return EditorSession(seat_map)


def _seat(session, seat_id):
    return next(s for s in session.document.seats if s.id == seat_id)


def test_new_session_starts_clean():
    session = EditorSession()
    assert session.document.seats == []
    assert not session.can_undo() and not session.can_redo()
    assert session.is_dirty is False
    assert session.active_tool == EditorTool.SELECT


def test_load_copies_the_document(seat_map):
    session = EditorSession(seat_map)
    session.update_seat("a", label="Z9")
    assert seat_map.seats[0].label == "A"


def test_each_action_is_one_undo_step(session):
    session.update_seat("a", x=0.5)
    session.delete_seats(["b"])
    assert len(session.history) == 3

    assert session.undo()
    assert len(session.document.seats) == 3
    assert session.undo()
    assert _seat(session, "a").x == 0.1
    assert session.undo() is False

    assert session.redo()
    assert _seat(session, "a").x == 0.5
    assert session.can_redo()


def test_no_op_actions_record_nothing(session):
    assert session.align_selected(Edge.LEFT) is False
    assert session.update_seats(["missing"], x=0.2) is False
    assert session.delete_seats(["missing"]) is False
    assert session.delete_category("missing") is False
    assert session.move_selected(0.1, 0.1) is False
    assert session.duplicate_selected() == []
    assert session.can_undo() is False
    assert session.is_dirty is False


def test_category_delete_is_a_single_step(session):
    session.delete_category("vip")
    assert all(s.category_id is None for s in session.document.seats)
    assert len(session.history) == 2

    session.undo()
    assert [s.category_id for s in session.document.seats] == ["vip", "vip", None]


def test_undo_clears_selection(session):
    session.select_only(["a", "b"])
    assert session.align_selected(Edge.LEFT)
    session.select("c")
    session.undo()
    assert session.selection.ids == []


def test_deleted_seats_leave_the_selection(session):
    session.select_only(["a", "c"])
    session.delete_seats(["a"])
    assert session.selection.ids == ["c"]

    session.delete_selected()
    assert [s.id for s in session.document.seats] == ["b"]
    assert session.selection.ids == []


def test_align_selection_in_one_step(session):
    session.select_only(["a", "b", "c"])
    assert session.align_selected(Edge.LEFT)
    assert {s.x for s in session.document.seats} == {0.1}
    assert len(session.history) == 2


def test_distribute_selected(session):
    session.select_only(["a", "b"])
    assert session.can_distribute_selected() is False
    assert session.distribute_selected(Axis.HORIZONTAL) is False

    session.select("c")
    assert session.can_distribute_selected()
    assert session.distribute_selected(Axis.VERTICAL)


def test_bulk_property_changes(session):
    session.select_only(["a", "b"])
    session.set_status_selected(SeatStatus.RESERVED)
    session.set_size_selected(w=0.03)
    session.set_category_selected(None)
    session.nudge_selected(dx=1, coarse=True)

    a = _seat(session, "a")
    assert a.status == SeatStatus.RESERVED
    assert a.w == 0.03
    assert a.category_id is None
    assert a.x == pytest.approx(0.11)
    assert _seat(session, "c").status == SeatStatus.AVAILABLE
    assert len(session.history) == 5


def test_duplicate_selects_the_copies(session):
    session.select_only(["a"])
    new_ids = session.duplicate_selected()

    assert len(new_ids) == 1
    assert session.selection.ids == new_ids
    assert _seat(session, new_ids[0]).label == "A copy"
    assert len(session.document.seats) == 4


def test_add_seat_at_uses_default_size_and_next_label(session):
    seat = session.add_seat_at(0.5, 0.6)
    assert seat.label == "S4"
    assert (seat.w, seat.h) == (0.02, 0.02)
    assert _seat(session, seat.id).x == 0.5


def test_add_seat_at_after_default_size_change(session):
    session.update_settings(default_seat_size={"w": 0.03, "h": 0.04})
    seat = session.add_seat_at(0.5, 0.5)
    assert (seat.w, seat.h) == (0.03, 0.04)


def test_invalid_seat_update_is_refused(session):
    with pytest.raises(ValidationError):
        session.update_seat("a", label="")
    with pytest.raises(ValidationError):
        session.update_seat("b", w=0.9)

    assert session.can_undo() is False
    assert session.import_json(session.export_json()).seats[0].label == "A"


def test_lasso_selects_and_extends(session):
    assert session.lasso((0, 0), (0.2, 0.2))
    assert session.selection.ids == ["a"]

    session.lasso((0.25, 0), (0.4, 0.2), additive=True)
    assert session.selection.ids == ["a", "b"]

    assert session.lasso((0.5, 0.5), (0.501, 0.501)) is False
    assert session.selection.ids == ["a", "b"]
    assert session.can_undo() is False


def test_neighbor_and_reading_order(session):
    assert session.neighbor("a", Direction.RIGHT) == "b"
    assert [s.id for s in session.reading_order()] == ["a", "b", "c"]


def test_generate_grid_on_bare_map_adds_defaults():
    session = EditorSession()
    ids = session.generate_grid(GridOptions(rows=2, pattern="2-2", first_row_category_id="vip"))

    doc = session.document
    assert len(ids) == 8
    assert {c.id for c in doc.categories} == {"standard", "vip"}
    assert doc.grid_config.aisle_after_columns == [1]
    assert doc.grid_config.column_labels == ["A", "B", "C", "D"]
    assert doc.settings.show_legend is True
    assert len(session.history) == 2

    session.undo()
    assert session.document.seats == [] and session.document.categories == []


def test_generate_grid_keeps_existing_categories(session):
    session.generate_grid(GridOptions(rows=1, pattern="3", category_id="vip"))
    assert [c.id for c in session.document.categories] == ["vip"]
    assert session.document.grid_config is None


def test_load_default_categories_once(session):
    assert session.load_default_categories()
    assert {c.id for c in session.document.categories} == {"vip", "standard", "premium"}
    assert session.load_default_categories() is False
    assert len(DEFAULT_CATEGORIES) == 3


def test_element_lifecycle(session):
    session.add_element(DecorativeElement(id="exit", type=ElementType.ICON, x=0.9, y=0.9, w=0.05, h=0.05, icon="exit"))
    assert session.update_element("exit", x=0.8)
    assert session.document.elements[0].x == 0.8
    assert session.delete_element("exit")
    assert session.delete_element("exit") is False


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


def test_export_then_import_round_trips(session):
    payload = session.export_json()
    other = EditorSession()
    other.import_json(payload)
    assert other.export_json() == payload
    assert other.can_undo() is False


def test_failed_import_changes_nothing(session):
    session.update_seat("a", x=0.4)
    before = session.document

    data = json.loads(session.export_json())
    del data["seats"]
    with pytest.raises(SeatMapValidationError):
        session.import_json(json.dumps(data))

    assert session.document is before
    assert session.can_undo() is True
    assert len(session.history) == 2


def test_background_image_is_undoable(session):
    session.set_background_image("image/png", 2048, "data:image/png;base64,AAAA", 1000, 500)
    assert session.document.background.aspect_ratio == 2
    session.undo()
    assert session.document.background.url == ""


def test_rejected_background_leaves_document(session):
    with pytest.raises(BackgroundRejectedError):
        session.set_background_image("text/plain", 10, "data:text/plain,hi", 0, 0)
    assert session.can_undo() is False


def test_active_tool_is_not_history(session):
    session.set_active_tool("grid")
    assert session.active_tool == EditorTool.GRID
    assert session.can_undo() is False
