# src/geostar/store/__init__.py
#
# Copyright (c) The geostar project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
The store subpackage provides the named-array container rasters live in:
the abstract store interface and its HDF5 implementation.
"""

from .base import (
    RasterStore
)

from .h5 import (
    StoreConfig,
    H5Store
)

__all__ = [
    "RasterStore",
    "StoreConfig",
    "H5Store"
]
