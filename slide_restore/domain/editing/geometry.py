# slide_restore/domain/editing/geometry.py
"""
Coordinate helpers for region drawing and for describing regions to the model.

Canvas space is the intrinsic pixel space of the displayed image; the
widget may show it scaled and offset inside its own rectangle.
"""
import math
from typing import Tuple

from slide_restore.domain.models.region_model import Point, Region

NORMALIZED_GRID = 1000
WIDE_ASPECT_THRESHOLD = 1.2

# (left, top, width, height) of the displayed image inside the widget
DisplayRect = Tuple[float, float, float, float]


def to_canvas_coords(pointer: Point, display_rect: DisplayRect,
                     canvas_size: Tuple[int, int]) -> Point:
    """
    Map a widget-space pointer position to canvas pixel space.

    Args:
        pointer: (x, y) in widget coordinates
        display_rect: Where the canvas is drawn inside the widget
        canvas_size: Intrinsic (width, height) of the canvas

    Returns:
        (x, y) in canvas pixels, unrounded and clamped to the canvas
    """
    left, top, display_w, display_h = display_rect
    canvas_w, canvas_h = canvas_size
    if display_w <= 0 or display_h <= 0:
        return 0.0, 0.0

    x = (pointer[0] - left) * canvas_w / display_w
    y = (pointer[1] - top) * canvas_h / display_h
    return min(max(x, 0.0), canvas_w), min(max(y, 0.0), canvas_h)


def contains(display_rect: DisplayRect, pointer: Point) -> bool:
    """Check whether a widget-space pointer lies on the displayed canvas."""
    left, top, display_w, display_h = display_rect
    return left <= pointer[0] <= left + display_w and top <= pointer[1] <= top + display_h


def bounding_box(start: Point, current: Point) -> Tuple[float, float, float, float]:
    """Axis-aligned (x, y, w, h) between two drag points, whatever the drag direction."""
    x = min(start[0], current[0])
    y = min(start[1], current[1])
    w = abs(current[0] - start[0])
    h = abs(current[1] - start[1])
    return x, y, w, h


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize(region: Region, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
    """
    Scale a region onto the 0-1000 integer grid used in model instructions.

    Raises:
        ValueError: If the image dimensions are not positive
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size {image_width}x{image_height}")

    return (
        _round_half_up(region.x / image_width * NORMALIZED_GRID),
        _round_half_up(region.y / image_height * NORMALIZED_GRID),
        _round_half_up(region.w / image_width * NORMALIZED_GRID),
        _round_half_up(region.h / image_height * NORMALIZED_GRID),
    )


def aspect_ratio_hint(width: int, height: int) -> str:
    """Aspect ratio the model is asked to produce for a source of this size."""
    if height > 0 and width / height > WIDE_ASPECT_THRESHOLD:
        return "16:9"
    return "4:3"


def pixel_bounds(region: Region, width: int, height: int) -> Tuple[int, int, int, int]:
    """
    Integer (left, top, right, bottom) of every pixel the region touches,
    clamped to a width x height image. Right and bottom are exclusive.
    """
    left = max(0, min(width, int(math.floor(region.x))))
    top = max(0, min(height, int(math.floor(region.y))))
    right = max(left, min(width, int(math.ceil(region.x + region.w))))
    bottom = max(top, min(height, int(math.ceil(region.y + region.h))))
    return left, top, right, bottom
