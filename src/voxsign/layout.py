"""Content layout: arranging the icon and text blocks on the sign face.

Items are laid out left to right, centred as a group inside the padded
content area, and each item is centred vertically. Painting flips the
vertical axis so that bitmap row 0 lands at the top of the sign.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional

from voxsign.grid import VoxelGrid
from voxsign.palette import FRAME_INDEX, STICKER_INDEX
from voxsign.params import IconPosition, PixelBitmap, SignSpecification
from voxsign.shapes import FACE_PLANE
from voxsign.text import LINE_SPACING, TextRaster, TextRasterizer, rasterize_text

logger = logging.getLogger(__name__)

ITEM_SPACING = 4


class ItemKind(Enum):
    ICON = "icon"
    TEXT = "text"


@dataclass(frozen=True)
class ContentItem:
    """A bitmap block placed on the sign face.

    Attributes:
        bitmap: Occupancy bitmap of the block.
        offset_x: Horizontal nudge applied after layout.
        offset_y: Vertical nudge applied after centring (rows, downwards).
    """

    kind: ClassVar[ItemKind]

    bitmap: PixelBitmap
    offset_x: int = 0
    offset_y: float = 0

    @property
    def effective_width(self) -> int:
        """Width this item consumes when the row of items is centred."""
        return self.bitmap.width


@dataclass(frozen=True)
class IconItem(ContentItem):
    kind = ItemKind.ICON


@dataclass(frozen=True)
class TextItem(ContentItem):
    """Text block spanning the full content width.

    ``reserved_width`` is the room already claimed by an icon sharing the
    row (icon width plus spacing). It is subtracted from the block width so
    the icon space is not counted twice.
    """

    kind = ItemKind.TEXT
    reserved_width: int = 0

    @property
    def effective_width(self) -> int:
        return self.bitmap.width - self.reserved_width


@dataclass(frozen=True)
class Placement:
    item: ContentItem
    x: int
    y: float


def compose_text_block(raster: TextRaster, width: int) -> PixelBitmap:
    """Stack rasterized lines into one ``width``-wide bitmap, centring each line.

    Lines are separated by a single blank row. Pixels that fall outside the
    block are dropped.
    """
    width = max(width, 0)
    height = raster.total_height
    pixels = [False] * (width * height)
    row = 0
    for line in raster.lines:
        x_offset = (width - line.width) // 2
        for x, y in line.occupied():
            px, py = x_offset + x, row + y
            if 0 <= px < width and py < height:
                pixels[py * width + px] = True
        row += line.height + LINE_SPACING
    return PixelBitmap(width=width, height=height, pixels=tuple(pixels))


def build_content_items(spec: SignSpecification,
                        text_rasterizer: TextRasterizer = rasterize_text) -> List[ContentItem]:
    """Create the icon and text items for ``spec`` in placement order.

    The text rasterizer is called at most once, with the upper-cased text
    and the available content width.
    """
    items: List[ContentItem] = []
    icon: Optional[PixelBitmap] = spec.icon if spec.has_icon else None

    if icon is not None:
        items.append(IconItem(
            bitmap=icon,
            offset_x=spec.icon_offset_x if spec.is_hanging else 0,
            offset_y=0 if spec.is_hanging else spec.icon_offset_y,
        ))

    if spec.has_text:
        raster = text_rasterizer(spec.text.upper(), spec.available_width)
        block = compose_text_block(raster, spec.available_width)
        reserved = icon.width + ITEM_SPACING if (icon is not None and spec.is_hanging) else 0
        items.append(TextItem(
            bitmap=block,
            offset_x=spec.text_offset_x if spec.is_hanging else 0,
            offset_y=0 if spec.is_hanging else spec.text_offset_y,
            reserved_width=reserved,
        ))

    if spec.is_hanging and spec.icon_position is IconPosition.RIGHT:
        items.reverse()
    return items


def total_content_width(items: List[ContentItem], spacing: int = ITEM_SPACING) -> int:
    total = sum(item.effective_width for item in items)
    if len(items) > 1:
        total += spacing * (len(items) - 1)
    return total


def layout_items(items: List[ContentItem], spec: SignSpecification,
                 spacing: int = ITEM_SPACING) -> List[Placement]:
    """Compute the top-left bitmap position of every item (rows grow downwards)."""
    pad = spec.padding
    cursor = pad + (spec.available_width - total_content_width(items, spacing)) // 2
    placements = []
    for item in items:
        base_y = pad + (spec.available_height - item.bitmap.height) // 2
        placements.append(Placement(item, cursor + item.offset_x, base_y + item.offset_y))
        cursor += item.effective_width + spacing
    return placements


def content_index(spec: SignSpecification) -> int:
    """Standard signs share the frame colour; hanging signs use the sticker colour."""
    return STICKER_INDEX if spec.is_hanging else FRAME_INDEX


def paint_items(grid: VoxelGrid, placements: List[Placement], sign_height: int,
                index: int, plane: int = FACE_PLANE) -> int:
    written = 0
    for placement in placements:
        for x, y in placement.item.bitmap.occupied():
            grid.set(placement.x + x, sign_height - 1 - (y + placement.y), plane, index)
            written += 1
    return written


def composite_content(grid: VoxelGrid, spec: SignSpecification,
                      text_rasterizer: TextRasterizer = rasterize_text) -> List[Placement]:
    """Lay out and paint the icon and text of ``spec`` into ``grid``."""
    items = build_content_items(spec, text_rasterizer)
    placements = layout_items(items, spec)
    for placement in placements:
        logger.debug("%s %dx%d at (%d, %d)", placement.item.kind.value,
                     placement.item.bitmap.width, placement.item.bitmap.height,
                     placement.x, placement.y)
    written = paint_items(grid, placements, spec.sign_height, content_index(spec))
    logger.debug("content: %d voxels", written)
    return placements
