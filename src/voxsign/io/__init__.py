"""I/O utilities for voxsign."""

from .vox import decode_vox, encode_grid, read_vox, write_vox

__all__ = ['decode_vox', 'encode_grid', 'read_vox', 'write_vox']
