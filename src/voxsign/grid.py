"""Sparse voxel grid with last-write-wins semantics."""

from __future__ import annotations

from typing import Dict, Iterator, NamedTuple, Optional, Tuple

import numpy as np

Coord = Tuple[int, int, int]


class Voxel(NamedTuple):
    x: int
    y: int
    z: int
    index: int


class VoxelGrid:
    """Mapping from integer ``(x, y, z)`` coordinates to palette indices.

    :meth:`set` overwrites whatever was stored at the coordinate before, so
    the order of writes decides the final colour of overlapping cells.
    Iteration follows first-insertion order of each coordinate, which keeps
    encoded output stable for identical write sequences.
    """

    def __init__(self) -> None:
        self._cells: Dict[Coord, int] = {}

    def set(self, x: int, y: int, z: int, index: int) -> None:
        """Store palette ``index`` (1..255) at ``(x, y, z)``, replacing any prior entry."""
        if not 1 <= index <= 255:
            raise ValueError(f"palette index must be in 1..255, got {index}")
        self._cells[(int(x), int(y), int(z))] = index

    def get(self, x: int, y: int, z: int) -> Optional[int]:
        return self._cells.get((int(x), int(y), int(z)))

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord) -> bool:
        return tuple(coord) in self._cells

    def __iter__(self) -> Iterator[Voxel]:
        for (x, y, z), index in self._cells.items():
            yield Voxel(x, y, z, index)

    def count(self, index: int) -> int:
        return sum(1 for value in self._cells.values() if value == index)

    def plane(self, z: int) -> Dict[Tuple[int, int], int]:
        """Return ``{(x, y): index}`` for every voxel in depth plane ``z``."""
        return {(x, y): index for (x, y, vz), index in self._cells.items() if vz == z}

    def bounds(self) -> Optional[Tuple[Coord, Coord]]:
        """Inclusive ``(min, max)`` corners of the occupied cells, or None if empty."""
        if not self._cells:
            return None
        xs, ys, zs = zip(*self._cells)
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def to_array(self, shape: Coord) -> np.ndarray:
        """Dense ``uint8`` array indexed ``[x, y, z]``; 0 marks empty cells.

        Voxels outside ``shape`` are skipped.
        """
        dense = np.zeros(shape, dtype=np.uint8)
        for (x, y, z), index in self._cells.items():
            if 0 <= x < shape[0] and 0 <= y < shape[1] and 0 <= z < shape[2]:
                dense[x, y, z] = index
        return dense
