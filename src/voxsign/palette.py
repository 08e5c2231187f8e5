"""Fixed 256-entry RGBA palette shared by every generated sign."""

from __future__ import annotations

from typing import Tuple

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)

BACKPLATE_INDEX = 1   # hanging sign backplate
ANCHOR_INDEX = 2      # anchor voxel, standard sign frame and content
FRAME_INDEX = ANCHOR_INDEX
STICKER_INDEX = 3     # hanging sign icon and text

PALETTE: Tuple[RGBA, ...] = (
    TRANSPARENT,
    (10, 10, 10, 255),
    (200, 164, 100, 255),
    (220, 220, 220, 255),
) + (TRANSPARENT,) * 252
