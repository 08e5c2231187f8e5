# -*- coding: utf-8 -*-
"""Voxel sign generation.

Typical use::

    from voxsign.sign import generate_sign

    model = generate_sign({"signType": "standard", "text": "HI"})
    with open("sign.vox", "wb") as fp:
        fp.write(model.payload)
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("voxsign")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
