"""Background geometry: the rounded frame ring and the hanging backplate.

Both shapes are evaluated cell by cell with inclusion predicates over the
sign's ``width x height`` face. Cell centres sit at ``(x + 0.5, y + 0.5)``
when tested against the rounding circles.
"""

from __future__ import annotations

import logging
from typing import Iterator, Tuple

from voxsign.grid import VoxelGrid
from voxsign.palette import BACKPLATE_INDEX, FRAME_INDEX

logger = logging.getLogger(__name__)

FACE_PLANE = 15
BACKPLATE_START = 16
BACKPLATE_CORNER_RADIUS = 4


def corner_cutout(x: int, y: int, cx: int, cy: int, radius: int) -> bool:
    """True when ``(x, y)`` lies in the corner square around ``(cx, cy)`` but
    outside its rounding circle."""
    inside_square = abs(x - cx) < radius and abs(y - cy) < radius
    return inside_square and (x - cx + 0.5) ** 2 + (y - cy + 0.5) ** 2 > radius ** 2


def frame_corner_centers(width: int, height: int, radius: int) -> Tuple[Tuple[int, int], ...]:
    return (
        (radius, radius),
        (width - 1 - radius, radius),
        (radius, height - 1 - radius),
        (width - 1 - radius, height - 1 - radius),
    )


def is_frame_cell(x: int, y: int, width: int, height: int, frame_width: int) -> bool:
    """Frame ring membership with rounded corners carved out.

    The carve radius is ``2 * frame_width``. Nothing guards against radii
    larger than half the sign; the predicates are applied as they are.
    """
    on_edge = (
        y < frame_width or y >= height - frame_width
        or x < frame_width or x >= width - frame_width
    )
    if not on_edge:
        return False
    radius = frame_width * 2
    for cx, cy in frame_corner_centers(width, height, radius):
        if corner_cutout(x, y, cx, cy, radius):
            return False
    return True


def frame_cells(width: int, height: int, frame_width: int) -> Iterator[Tuple[int, int]]:
    for y in range(height):
        for x in range(width):
            if is_frame_cell(x, y, width, height, frame_width):
                yield x, y


def is_backplate_cell(x: int, y: int, width: int, height: int,
                      radius: int = BACKPLATE_CORNER_RADIUS) -> bool:
    """Rounded-rectangle membership for the hanging sign cross-section."""
    if radius <= x < width - radius:
        return True
    if radius <= y < height - radius:
        return True
    r2 = radius ** 2
    for cx, cy in ((radius, radius), (width - radius, radius),
                   (radius, height - radius), (width - radius, height - radius)):
        if (x + 0.5 - cx) ** 2 + (y + 0.5 - cy) ** 2 <= r2:
            return True
    return False


def draw_frame(grid: VoxelGrid, width: int, height: int, frame_width: int,
               plane: int = FACE_PLANE, index: int = FRAME_INDEX) -> int:
    """Write the frame ring into ``grid`` on depth ``plane``; returns voxels written."""
    written = 0
    for x, y in frame_cells(width, height, frame_width):
        grid.set(x, y, plane, index)
        written += 1
    logger.debug("frame %dx%d (width %d): %d voxels", width, height, frame_width, written)
    return written


def draw_backplate(grid: VoxelGrid, width: int, height: int, thickness: int,
                   z_start: int = BACKPLATE_START, index: int = BACKPLATE_INDEX) -> int:
    """Extrude the rounded backplate over ``thickness`` slices from ``z_start``."""
    cells = [(x, y) for y in range(height) for x in range(width)
             if is_backplate_cell(x, y, width, height)]
    for dz in range(thickness):
        for x, y in cells:
            grid.set(x, y, z_start + dz, index)
    written = len(cells) * thickness
    logger.debug("backplate %dx%d, %d slices: %d voxels", width, height, thickness, written)
    return written
