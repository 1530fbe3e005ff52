from seatmapper.editor.coordinates import (
    Point, FitResult, to_pixel, to_normalized, to_pixel_point, to_normalized_point,
    clamp01, aspect_ratio, aspect_fit, uniform_scale, seat_pixel_rect,
)
from seatmapper.editor.document import SeatChange, Bounds, new_seat_map
from seatmapper.editor.history import HistoryManager
from seatmapper.editor.transforms import Edge, Axis, GridOptions
from seatmapper.editor.selection import Direction, Selection
from seatmapper.editor.io import parse_seat_map, dump_seat_map, accept_background
from seatmapper.editor.embed import EmbedController, EmbedEvent
from seatmapper.editor.session import EditorSession, EditorTool, DEFAULT_CATEGORIES
