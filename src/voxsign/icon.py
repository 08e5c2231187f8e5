"""Icon image conversion.

Uploaded icons are scaled to a fraction of the sign's content width and
thresholded on alpha: a pixel is occupied when its alpha exceeds
:data:`ALPHA_THRESHOLD`.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from voxsign.params import PixelBitmap, SignSpecification

logger = logging.getLogger(__name__)

ALPHA_THRESHOLD = 128


def icon_target_width(spec: SignSpecification) -> int:
    """Icon width in pixels: ``icon_scale`` percent of the content width."""
    return math.floor(spec.available_width * (spec.icon_scale / 100))


def image_to_bitmap(image: Image.Image, target_width: int,
                    threshold: int = ALPHA_THRESHOLD) -> PixelBitmap:
    """Scale ``image`` to ``target_width`` (keeping its aspect ratio) and threshold alpha."""
    if target_width < 1:
        raise ValueError(f"icon target width must be positive, got {target_width}")
    src_width, src_height = image.size
    if src_width == 0 or src_height == 0:
        raise ValueError("icon image is empty")
    # Round half up, matching browser canvas sizing.
    target_height = math.floor(target_width * src_height / src_width + 0.5)
    if target_height < 1:
        raise ValueError(f"icon too flat to scale to width {target_width}")

    scaled = image.convert("RGBA").resize((target_width, target_height), Image.Resampling.BILINEAR)
    alpha = np.asarray(scaled.getchannel("A"))
    mask = alpha > threshold
    logger.debug("icon %dx%d -> %dx%d, %d occupied", src_width, src_height,
                 target_width, target_height, int(mask.sum()))
    return PixelBitmap(width=target_width, height=target_height,
                       pixels=tuple(bool(p) for p in mask.ravel()))


def load_icon(path: Union[str, Path], target_width: int,
              threshold: int = ALPHA_THRESHOLD) -> PixelBitmap:
    """Open an image file and convert it with :func:`image_to_bitmap`."""
    with Image.open(path) as image:
        image.load()
        return image_to_bitmap(image, target_width, threshold)


def load_icon_for(spec: SignSpecification, path: Union[str, Path]) -> PixelBitmap:
    return load_icon(path, icon_target_width(spec))
