# src/geostar/__init__.py
#
# Copyright (c) The geostar project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
geostar manages raster imagery kept in chunked HDF5 containers and provides
the image processing operations that run on it, one slice at a time.
"""

__version__ = "0.1.0"

from .exceptions import (
    RasterError,
    RasterSizeError,
    SliceSizeError,
    ParameterError
)
from .logging_config import setup_logging
from .store import H5Store, RasterStore, StoreConfig
from .raster import Raster, RasterType, Slice

__all__ = [
    "__version__",
    "RasterError",
    "RasterSizeError",
    "SliceSizeError",
    "ParameterError",
    "setup_logging",
    "H5Store",
    "RasterStore",
    "StoreConfig",
    "Raster",
    "RasterType",
    "Slice"
]
