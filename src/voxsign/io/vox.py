"""MagicaVoxel ``.vox`` export and import.

Only the chunks needed for a single model are handled: ``SIZE``, ``XYZI``
and ``RGBA``, nested under ``MAIN``. All integers are little-endian.

The format is z-up while sign grids are y-up, so coordinates are permuted
``(x, y, z) -> (x, z, y)`` on export. In the ``RGBA`` chunk the entry at
position ``k`` is the colour of voxel index ``k + 1``; the logical palette
slot ``i`` is therefore stored at position ``(i - 1) % 256``.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from voxsign.grid import Voxel, VoxelGrid
from voxsign.palette import PALETTE, RGBA

logger = logging.getLogger(__name__)

VOX_MAGIC = b'VOX '
VOX_VERSION = 150
PALETTE_SIZE = 256

_STRUCT_CHUNK_HEADER = struct.Struct('<4sII')
_STRUCT_SIZE = struct.Struct('<III')
_STRUCT_COUNT = struct.Struct('<I')
_STRUCT_VOXEL = struct.Struct('<BBBB')

Size = Tuple[int, int, int]


@dataclass
class VoxData:
    """Decoded single-model ``.vox`` content (container axes)."""

    version: int
    size: Size
    voxels: List[Voxel]
    palette: Optional[Tuple[RGBA, ...]]

    @property
    def num_voxels(self) -> int:
        return len(self.voxels)


def to_container_axes(x: int, y: int, z: int) -> Tuple[int, int, int]:
    """Swap the depth and vertical axes for the z-up container."""
    return x, z, y


def container_size(width: int, height: int, depth: int) -> Size:
    return to_container_axes(width, height, depth)


def _chunk(chunk_id: bytes, content: bytes, children: bytes = b'') -> bytes:
    return _STRUCT_CHUNK_HEADER.pack(chunk_id, len(content), len(children)) + content + children


def _size_content(size: Size) -> bytes:
    return _STRUCT_SIZE.pack(*size)


def _xyzi_content(voxels: Sequence[Voxel]) -> bytes:
    parts = [_STRUCT_COUNT.pack(len(voxels))]
    for x, y, z, index in voxels:
        # Components are single bytes in the container.
        parts.append(_STRUCT_VOXEL.pack(x & 0xFF, y & 0xFF, z & 0xFF, index & 0xFF))
    return b''.join(parts)


def _rgba_content(palette: Sequence[RGBA]) -> bytes:
    if len(palette) != PALETTE_SIZE:
        raise ValueError(f"palette must have {PALETTE_SIZE} entries, got {len(palette)}")
    return b''.join(
        _STRUCT_VOXEL.pack(*palette[(k + 1) % PALETTE_SIZE]) for k in range(PALETTE_SIZE)
    )


def encode_vox(voxels: Iterable[Voxel], size: Size,
               palette: Sequence[RGBA] = PALETTE) -> bytes:
    """Encode voxels already expressed in container axes."""
    voxels = [Voxel(*v) for v in voxels]
    children = (
        _chunk(b'SIZE', _size_content(size))
        + _chunk(b'XYZI', _xyzi_content(voxels))
        + _chunk(b'RGBA', _rgba_content(palette))
    )
    data = VOX_MAGIC + _STRUCT_COUNT.pack(VOX_VERSION) + _chunk(b'MAIN', b'', children)
    logger.debug("encoded %d voxels, size %s: %d bytes", len(voxels), size, len(data))
    return data


def grid_to_container(grid: VoxelGrid) -> List[Voxel]:
    """Grid voxels in enumeration order, permuted into container axes."""
    return [Voxel(*to_container_axes(v.x, v.y, v.z), v.index) for v in grid]


def encode_grid(grid: VoxelGrid, width: int, height: int, depth: int,
                palette: Sequence[RGBA] = PALETTE) -> bytes:
    """Encode a y-up sign grid of the given logical extents."""
    return encode_vox(grid_to_container(grid), container_size(width, height, depth), palette)


def write_vox(grid: VoxelGrid, path_or_file, width: int, height: int, depth: int,
              palette: Sequence[RGBA] = PALETTE) -> None:
    """Write ``grid`` to a path or an open binary stream."""
    data = encode_grid(grid, width, height, depth, palette)
    if hasattr(path_or_file, 'write'):
        path_or_file.write(data)
    else:
        with open(path_or_file, 'wb') as stream:
            stream.write(data)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _iter_chunks(data: bytes, offset: int, end: int):
    while offset < end:
        if offset + _STRUCT_CHUNK_HEADER.size > end:
            raise ValueError("Invalid VOX data: truncated chunk header")
        chunk_id, content_len, children_len = _STRUCT_CHUNK_HEADER.unpack_from(data, offset)
        content_start = offset + _STRUCT_CHUNK_HEADER.size
        children_end = content_start + content_len + children_len
        if children_end > end:
            raise ValueError(f"Invalid VOX data: chunk {chunk_id!r} overruns its parent")
        yield chunk_id, content_start, content_len, children_len
        offset = children_end


def _parse_xyzi(data: bytes, start: int, length: int) -> List[Voxel]:
    (count,) = _STRUCT_COUNT.unpack_from(data, start)
    if _STRUCT_COUNT.size + count * _STRUCT_VOXEL.size > length:
        raise ValueError(f"Invalid VOX data: XYZI declares {count} voxels beyond its content")
    base = start + _STRUCT_COUNT.size
    return [Voxel(*_STRUCT_VOXEL.unpack_from(data, base + i * _STRUCT_VOXEL.size))
            for i in range(count)]


def _parse_rgba(data: bytes, start: int) -> Tuple[RGBA, ...]:
    stored = [_STRUCT_VOXEL.unpack_from(data, start + k * _STRUCT_VOXEL.size)
              for k in range(PALETTE_SIZE)]
    return tuple(stored[(i - 1) % PALETTE_SIZE] for i in range(PALETTE_SIZE))


def decode_vox(data: bytes) -> VoxData:
    """Decode the first model of a ``.vox`` payload."""
    if len(data) < 8 or data[:4] != VOX_MAGIC:
        raise ValueError("Invalid VOX data: missing 'VOX ' header")
    (version,) = _STRUCT_COUNT.unpack_from(data, 4)

    chunks = list(_iter_chunks(data, 8, len(data)))
    if not chunks or chunks[0][0] != b'MAIN':
        raise ValueError("Invalid VOX data: missing MAIN chunk")
    _, main_start, main_content, main_children = chunks[0]
    children_start = main_start + main_content

    size = None
    voxels = None
    palette = None
    for chunk_id, start, content_len, _ in _iter_chunks(
            data, children_start, children_start + main_children):
        if chunk_id == b'SIZE' and size is None:
            if content_len < _STRUCT_SIZE.size:
                raise ValueError("Invalid VOX data: short SIZE chunk")
            size = _STRUCT_SIZE.unpack_from(data, start)
        elif chunk_id == b'XYZI' and voxels is None:
            if content_len < _STRUCT_COUNT.size:
                raise ValueError("Invalid VOX data: short XYZI chunk")
            voxels = _parse_xyzi(data, start, content_len)
        elif chunk_id == b'RGBA':
            if content_len < PALETTE_SIZE * _STRUCT_VOXEL.size:
                raise ValueError("Invalid VOX data: short RGBA chunk")
            palette = _parse_rgba(data, start)

    if size is None or voxels is None:
        raise ValueError("Invalid VOX data: SIZE and XYZI chunks are required")
    return VoxData(version=version, size=tuple(size), voxels=voxels,
                   palette=palette)


def read_vox(source) -> VoxData:
    """Read a ``.vox`` file from a path, raw bytes or an open binary stream."""
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    elif hasattr(source, 'read'):
        data = source.read()
    else:
        with open(source, 'rb') as stream:
            data = stream.read()
    return decode_vox(data)
