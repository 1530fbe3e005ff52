import pytest

from seatmapper.core.config import settings
from seatmapper.editor import document, transforms
from seatmapper.editor.transforms import Axis, Edge, GridOptions
from seatmapper.schemas.seatmap import SeatStatus


def _apply(doc, changes):
    return document.apply_seat_changes(doc, changes)


def _xs(doc):
    return {s.id: s.x for s in doc.seats}


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------


def test_align_left_moves_every_seat_to_leftmost_x(seat_map):
    changes = transforms.align(seat_map.seats, ["a", "b", "c"], Edge.LEFT)
    doc = _apply(seat_map, changes)
    assert all(x == pytest.approx(0.1) for x in _xs(doc).values())
    # the seat already on the edge produces no change
    assert {c.id for c in changes} == {"b", "c"}


def test_align_right_and_bottom_use_far_edges(make_seat, seat_map):
    doc = seat_map.model_copy(update={"seats": [
        make_seat("a", 0.1, 0.1, w=0.05, h=0.05),
        make_seat("b", 0.3, 0.2, w=0.1, h=0.1),
    ]})
    doc = _apply(doc, transforms.align(doc.seats, ["a", "b"], Edge.RIGHT))
    doc = _apply(doc, transforms.align(doc.seats, ["a", "b"], "bottom"))

    a, b = doc.seats
    assert a.x + a.w == pytest.approx(0.4)
    assert b.x + b.w == pytest.approx(0.4)
    assert a.y + a.h == pytest.approx(0.3)
    assert b.y == pytest.approx(0.2)


def test_center_horizontal_uses_mean_center(seat_map):
    doc = _apply(seat_map, transforms.center(seat_map.seats, ["a", "b"], Axis.HORIZONTAL))
    a, b = doc.seats[0], doc.seats[1]
    assert a.x == pytest.approx(0.2)
    assert b.x == pytest.approx(0.2)


def test_empty_selection_produces_no_changes(seat_map):
    assert transforms.align(seat_map.seats, [], Edge.TOP) == []
    assert transforms.center(seat_map.seats, ["missing"], Axis.VERTICAL) == []
    assert transforms.set_size(seat_map.seats, [], w=0.03) == []
    assert transforms.move(seat_map.seats, ["a"], 0, 0) == []


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------


def test_distribute_horizontal_equalizes_gaps(make_seat, seat_map):
    doc = seat_map.model_copy(update={"seats": [
        make_seat("a", 0.1, 0.5),
        make_seat("b", 0.2, 0.5),
        make_seat("c", 0.9, 0.5),
    ]})
    doc = _apply(doc, transforms.distribute(doc.seats, ["a", "b", "c"], Axis.HORIZONTAL))

    xs = _xs(doc)
    assert xs["a"] == pytest.approx(0.1)
    assert xs["c"] == pytest.approx(0.9)
    gap_ab = xs["b"] - (xs["a"] + 0.05)
    gap_bc = xs["c"] - (xs["b"] + 0.05)
    assert gap_ab == pytest.approx(gap_bc)
    assert xs["b"] == pytest.approx(0.5)


def test_distribute_needs_three_seats(seat_map):
    assert transforms.can_distribute(seat_map.seats, ["a", "b"]) is False
    assert transforms.distribute(seat_map.seats, ["a", "b"], Axis.VERTICAL) == []
    assert transforms.can_distribute(seat_map.seats, ["a", "b", "c"]) is True


def test_distribute_keeps_negative_gap(make_seat, seat_map):
    doc = seat_map.model_copy(update={"seats": [
        make_seat("a", 0.1, 0.1, w=0.2),
        make_seat("b", 0.15, 0.1, w=0.2),
        make_seat("c", 0.2, 0.1, w=0.2),
    ]})
    doc = _apply(doc, transforms.distribute(doc.seats, ["a", "b", "c"], Axis.HORIZONTAL))
    xs = _xs(doc)
    # span 0.3 holds 0.6 of seats: gap is -0.15 and seats overlap
    assert xs["b"] == pytest.approx(0.15)
    assert xs["c"] == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# Bulk properties and movement
# ---------------------------------------------------------------------------


def test_set_status_and_category(seat_map):
    doc = _apply(seat_map, transforms.set_status(seat_map.seats, ["a", "c"], "reserved"))
    doc = _apply(doc, transforms.set_category(doc.seats, ["c"], "vip"))
    assert [s.status for s in doc.seats] == [SeatStatus.RESERVED, SeatStatus.AVAILABLE, SeatStatus.RESERVED]
    assert document.find_seat(doc, "c").category_id == "vip"


def test_set_size_only_touches_given_dimension(seat_map):
    doc = _apply(seat_map, transforms.set_size(seat_map.seats, ["a"], w=0.03))
    a = document.find_seat(doc, "a")
    assert (a.w, a.h) == (0.03, 0.05)


def test_nudge_steps(seat_map):
    fine = _apply(seat_map, transforms.nudge(seat_map.seats, ["a"], dx=1))
    coarse = _apply(seat_map, transforms.nudge(seat_map.seats, ["a"], dy=-1, coarse=True))
    assert document.find_seat(fine, "a").x == pytest.approx(0.1 + settings.NUDGE_FINE)
    assert document.find_seat(coarse, "a").y == pytest.approx(0.1 - settings.NUDGE_COARSE)


def test_move_is_not_clamped(seat_map):
    doc = _apply(seat_map, transforms.move(seat_map.seats, ["b"], 0.8, 0))
    assert document.find_seat(doc, "b").x == pytest.approx(1.1)


# ---------------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------------


def test_duplicate_makes_available_offset_copies(seat_map):
    sold = _apply(seat_map, transforms.set_status(seat_map.seats, ["a"], SeatStatus.SOLD))
    copies = transforms.duplicate(sold.seats, ["a"])

    assert len(copies) == 1
    copy = copies[0]
    assert copy.id != "a"
    assert copy.label == "A copy"
    assert copy.x == pytest.approx(0.1 + settings.DUPLICATE_OFFSET)
    assert copy.y == 0.1
    assert copy.status == SeatStatus.AVAILABLE
    assert copy.category_id == "vip"


def test_duplicate_label_stays_within_limit():
    label = transforms.duplicate_label("Orchestra Left 12345")
    assert len(label) <= 20
    assert label.endswith(" copy")


# ---------------------------------------------------------------------------
# Grid generation
# ---------------------------------------------------------------------------


def test_parse_layout_pattern():
    assert transforms.parse_layout_pattern("2-4-2") == [2, 4, 2]
    assert transforms.parse_layout_pattern("3--x-0-1") == [3, 1]
    assert transforms.parse_layout_pattern("") == []
    assert transforms.aisle_after_columns([2, 4, 2]) == [1, 5]


def test_grid_places_aisle_between_groups():
    opts = GridOptions(rows=2, pattern="1-1", start_x=0.1, start_y=0.1,
                       spacing_x=0.03, spacing_y=0.04, aisle_width=0.04)
    seats = transforms.generate_grid(opts)

    assert len(seats) == 4
    first_row = [s for s in seats if s.row == 1]
    assert [s.label for s in first_row] == ["A1", "B1"]
    assert first_row[0].x == pytest.approx(0.1)
    assert first_row[1].x == pytest.approx(0.17)
    assert [s.y for s in seats if s.row == 2] == [pytest.approx(0.14)] * 2
    assert len({s.id for s in seats}) == 4


def test_grid_skips_row_thirteen():
    seats = transforms.generate_grid(GridOptions(rows=3, pattern="2", start_row_number=12, skip_row_13=True))
    assert sorted({s.row for s in seats}) == [12, 14, 15]
    assert "A14" in {s.label for s in seats}


def test_grid_first_row_category_and_column_fallback():
    opts = GridOptions(rows=2, pattern="", columns=3, category_id="standard", first_row_category_id="vip")
    seats = transforms.generate_grid(opts)
    assert len(seats) == 6
    assert {s.category_id for s in seats if s.row == 1} == {"vip"}
    assert {s.category_id for s in seats if s.row == 2} == {"standard"}
    assert all(s.status == SeatStatus.AVAILABLE for s in seats)


def test_grid_labels_fall_back_to_numbers():
    seats = transforms.generate_grid(GridOptions(rows=1, pattern="3", column_labels=["L"]))
    assert [s.label for s in seats] == ["L1", "21", "31"]
