"""Sign generation pipeline.

:func:`generate_sign` is a pure function of its request: it validates the
parameters, rasterizes the background shape, composites the icon and text,
writes the anchor voxel and encodes the grid as a ``.vox`` payload. Nothing
is cached or shared between calls.

Write order matters because the grid keeps the last value written to a
coordinate: shape first, then content, then the anchor at ``(0, 0, 0)``.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union

from voxsign.grid import Voxel, VoxelGrid
from voxsign.io.vox import Size, container_size, encode_grid
from voxsign.layout import composite_content
from voxsign.palette import ANCHOR_INDEX, PALETTE, RGBA
from voxsign.params import SignSpecification
from voxsign.shapes import draw_backplate, draw_frame
from voxsign.text import TextRasterizer, rasterize_text
from voxsign.validation import validate_request, validate_specification

logger = logging.getLogger(__name__)

MODEL_DEPTH = 32
MODEL_NAME = "VOX Sign"


@dataclass(frozen=True)
class SignModel:
    """Generated sign: logical dimensions, voxels and the encoded payload.

    Attributes:
        label: Human-readable description, e.g. ``Schematic: VOX Sign (48x40x32)``.
        width: Logical width (x).
        height: Logical height (y, up).
        depth: Logical depth (z).
        voxels: Grid contents in enumeration order, logical axes, anchor included.
        palette: The 256-entry palette the payload was encoded with.
        total_voxels: Voxel count excluding the anchor.
        vox_size: Model size in container axis order ``(x, y, z)``.
        payload: The encoded ``.vox`` bytes.
    """

    label: str
    width: int
    height: int
    depth: int
    voxels: Tuple[Voxel, ...]
    palette: Tuple[RGBA, ...]
    total_voxels: int
    vox_size: Size
    payload: bytes

    @property
    def payload_b64(self) -> str:
        return base64.b64encode(self.payload).decode('ascii')

    def to_dict(self) -> Dict[str, Any]:
        """Response mapping in the web form's field naming."""
        x, y, z = self.vox_size
        return {
            "schematicData": self.label,
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "isVox": True,
            "voxData": self.payload_b64,
            "voxSize": {"x": x, "y": y, "z": z},
            "totalVoxels": self.total_voxels,
        }


def schematic_label(name: str, width: int, height: int, depth: int = 0) -> str:
    depth_info = f"x{depth}" if depth else ""
    return f"Schematic: {name} ({width}x{height}{depth_info})"


def build_grid(spec: SignSpecification,
               text_rasterizer: TextRasterizer = rasterize_text) -> VoxelGrid:
    """Rasterize shape and content of ``spec`` and add the anchor voxel."""
    grid = VoxelGrid()
    width, height = spec.sign_width, spec.sign_height

    if spec.is_hanging:
        draw_backplate(grid, width, height, spec.thickness)
    elif spec.frame:
        draw_frame(grid, width, height, spec.frame_width)

    composite_content(grid, spec, text_rasterizer)

    # Anchor goes last so nothing can overwrite it.
    grid.set(0, 0, 0, ANCHOR_INDEX)
    return grid


def generate_sign(request: Union[SignSpecification, Mapping[str, Any]],
                  text_rasterizer: TextRasterizer = rasterize_text) -> SignModel:
    """Build a sign model from a request mapping or a :class:`SignSpecification`.

    Raises:
        ValidationError: if the request is malformed; raised before any
            geometry is produced.

    Errors raised by ``text_rasterizer`` propagate unchanged.
    """
    if isinstance(request, SignSpecification):
        spec = validate_specification(request)
    else:
        spec = validate_request(request)

    logger.info("generating %s sign %dx%d", spec.sign_type.value,
                spec.sign_width, spec.sign_height)
    grid = build_grid(spec, text_rasterizer)

    width, height, depth = spec.sign_width, spec.sign_height, MODEL_DEPTH
    payload = encode_grid(grid, width, height, depth, PALETTE)
    model = SignModel(
        label=schematic_label(MODEL_NAME, width, height, depth),
        width=width,
        height=height,
        depth=depth,
        voxels=tuple(grid),
        palette=PALETTE,
        total_voxels=len(grid) - 1,
        vox_size=container_size(width, height, depth),
        payload=payload,
    )
    logger.info("%s: %d voxels, %d bytes", model.label, model.total_voxels, len(payload))
    return model
