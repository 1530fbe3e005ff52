"""
Conversions between normalized canvas space and on-screen pixels.

Positions are stored as fractions of the unit square so a seat map renders
the same on any container. X is measured against the container width and Y
against the container height; seat *sizes* use a single uniform scale so
seats keep their proportions on non-square canvases.
"""

from typing import NamedTuple, Tuple

from seatmapper.schemas.seatmap import Seat


class Point(NamedTuple):
    x: float
    y: float


class FitResult(NamedTuple):
    width: float
    height: float
    scale: float


def to_pixel(normalized: float, container_size: float) -> float:
    return normalized * container_size


def to_normalized(pixel: float, container_size: float) -> float:
    if container_size == 0:
        return 0
    return pixel / container_size


def to_pixel_point(point: Tuple[float, float], container_width: float, container_height: float) -> Point:
    x, y = point
    return Point(to_pixel(x, container_width), to_pixel(y, container_height))


def to_normalized_point(point: Tuple[float, float], container_width: float, container_height: float) -> Point:
    x, y = point
    return Point(to_normalized(x, container_width), to_normalized(y, container_height))


def clamp01(value: float) -> float:
    return min(1, max(0, value))


def aspect_ratio(width: float, height: float) -> float:
    if height == 0:
        return 0
    return width / height


def aspect_fit(content_width: float, content_height: float, box_width: float, box_height: float) -> FitResult:
    """
    Largest size that fits the content inside the box without distortion.
    Returns all zeros when the content has no area.
    """
    if content_width == 0 or content_height == 0:
        return FitResult(0, 0, 0)

    scale = min(box_width / content_width, box_height / content_height)
    return FitResult(content_width * scale, content_height * scale, scale)


def uniform_scale(container_width: float, container_height: float) -> float:
    return min(container_width, container_height)


def seat_pixel_rect(seat: Seat, container_width: float, container_height: float) -> Tuple[float, float, float, float]:
    """Pixel (x, y, width, height) of a seat: position per axis, size uniform."""
    scale = uniform_scale(container_width, container_height)
    return (
        to_pixel(seat.x, container_width),
        to_pixel(seat.y, container_height),
        seat.w * scale,
        seat.h * scale,
    )
