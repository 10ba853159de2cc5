# src/geostar/raster/__init__.py
#
# Copyright (c) The geostar project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
The raster subpackage provides the Raster data structure and its slice I/O,
together with the per-pixel, region, convolution, pyramid, spectral and
drawing operations built on it.
"""
# Core data structure
from .layer import (
    Raster,
    OBJECT_TYPE,
    OBJECT_TYPE_ATTR
)

# Element types
from .types import (
    RasterType,
    ElementKind,
    element_kind
)

# Slice addressing
from .slices import (
    Slice,
    as_slice,
    iter_rows,
    iter_columns,
    iter_tiles
)

# Numeric policies
from .pixel import (
    DIVIDE_BY_ZERO_VALUE,
    SALT_VALUE
)
from .region import (
    MAX_PARTITIONS
)
from .spectral import (
    INVERSE_FFT_SCALE
)
from .convolution import (
    GAUSSIAN_KERNEL,
    BLUR_KERNEL,
    GRADIENT_MASKS
)

__all__ = [
    "Raster",
    "OBJECT_TYPE",
    "OBJECT_TYPE_ATTR",
    "RasterType",
    "ElementKind",
    "element_kind",
    "Slice",
    "as_slice",
    "iter_rows",
    "iter_columns",
    "iter_tiles",
    "DIVIDE_BY_ZERO_VALUE",
    "SALT_VALUE",
    "MAX_PARTITIONS",
    "INVERSE_FFT_SCALE",
    "GAUSSIAN_KERNEL",
    "BLUR_KERNEL",
    "GRADIENT_MASKS"
]
