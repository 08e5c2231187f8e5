"""Sign request data model.

A :class:`SignSpecification` describes one sign: its type, the dimensions
of the active variant, and the content (icon bitmap and text) to place on
its face. Instances are normally produced by
:func:`voxsign.validation.validate_request`, which guarantees the field
constraints the geometry code relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

HANGING_SIGN_HEIGHT = 16
HANGING_SIGN_PADDING = 2
HANGING_WIDTHS = (48, 64, 80)
MIN_SIGN_SIZE = 16


class SignType(Enum):
    """Supported sign variants."""

    STANDARD = "standard"
    HANGING = "hanging"


class IconPosition(Enum):
    """Side of the text the icon is placed on (hanging signs only)."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class PixelBitmap:
    """Row-major boolean occupancy bitmap.

    ``pixels[y * width + x]`` is true when the pixel at column ``x`` of row
    ``y`` is occupied. Row 0 is the top row.
    """

    width: int
    height: int
    pixels: Tuple[bool, ...] = ()
    offset_y: Optional[int] = None

    @classmethod
    def from_rows(cls, rows: Sequence[str], occupied: str = "#") -> "PixelBitmap":
        """Build a bitmap from text rows, e.g. ``["#.#", ".#."]``."""
        width = max((len(row) for row in rows), default=0)
        pixels = []
        for row in rows:
            padded = row.ljust(width, ".")
            pixels.extend(ch == occupied for ch in padded)
        return cls(width=width, height=len(rows), pixels=tuple(pixels))

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBitmap":
        return cls(width=width, height=height, pixels=(False,) * (width * height))

    @property
    def is_empty(self) -> bool:
        return len(self.pixels) == 0

    def occupied(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(x, y)`` for every occupied pixel in row-major order."""
        for y in range(self.height):
            base = y * self.width
            for x in range(self.width):
                if self.pixels[base + x]:
                    yield x, y

    def to_rows(self, occupied: str = "#", empty: str = ".") -> list:
        return [
            "".join(occupied if self.pixels[y * self.width + x] else empty
                    for x in range(self.width))
            for y in range(self.height)
        ]


@dataclass(frozen=True)
class SignSpecification:
    """Validated sign parameters.

    Only one dimension group is active: ``width``/``height``/``frame``/
    ``frame_width`` for standard signs, ``hanging_width``/``icon_position``/
    ``thickness`` and the horizontal offsets for hanging signs. The
    remaining fields are shared.

    Attributes:
        sign_type: Which sign variant to build.
        width: Standard sign width in voxels (>= 16).
        height: Standard sign height in voxels (>= 16).
        frame: Whether a standard sign gets a rounded frame ring.
        frame_width: Frame ring width in voxels (>= 1).
        hanging_width: Hanging sign width, one of 48, 64 or 80.
        icon_position: Icon side for hanging signs.
        thickness: Backplate thickness in depth slices (>= 1).
        icon_offset_x: Horizontal icon nudge (hanging signs).
        text_offset_x: Horizontal text nudge (hanging signs).
        icon: Optional icon bitmap.
        text: Text to rasterize; blank text produces no text item.
        icon_scale: Icon width as a percentage of the content width. Used
            when converting an image into ``icon``.
        icon_offset_y: Vertical icon nudge (standard signs).
        text_offset_y: Vertical text nudge (standard signs).
        with_icon: Whether the icon is placed at all.
    """

    sign_type: SignType = SignType.STANDARD
    # Standard sign
    width: int = 48
    height: int = 40
    frame: bool = True
    frame_width: int = 2
    # Hanging sign
    hanging_width: int = 64
    icon_position: IconPosition = IconPosition.LEFT
    thickness: int = 4
    icon_offset_x: int = 0
    text_offset_x: int = 0
    # Common
    icon: Optional[PixelBitmap] = None
    text: str = ""
    icon_scale: float = 50
    icon_offset_y: float = 0
    text_offset_y: float = 0
    with_icon: bool = True

    @property
    def is_hanging(self) -> bool:
        return self.sign_type is SignType.HANGING

    @property
    def sign_width(self) -> int:
        return self.hanging_width if self.is_hanging else self.width

    @property
    def sign_height(self) -> int:
        return HANGING_SIGN_HEIGHT if self.is_hanging else self.height

    @property
    def padding(self) -> int:
        """Interior padding between the sign edge and its content area."""
        if self.is_hanging:
            return HANGING_SIGN_PADDING
        if self.frame:
            return self.frame_width
        return 0

    @property
    def available_width(self) -> int:
        return self.sign_width - 2 * self.padding

    @property
    def available_height(self) -> int:
        return self.sign_height - 2 * self.padding

    @property
    def has_icon(self) -> bool:
        return self.icon is not None and not self.icon.is_empty and self.with_icon

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())
