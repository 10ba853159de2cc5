# src/geostar/raster/types.py

"""
This module maps numeric element kinds to the primitive types understood by the store.

Two closed sets are defined:
- RasterType: the element types a new raster may be created with (INT8U, INT16U, REAL32).
- ElementKind: every numeric type a caller may read into or write from.
"""

import logging
from enum import Enum
from typing import Any, Union

import numpy as np

from geostar.exceptions import RasterCreationError

log = logging.getLogger(__name__)

__all__ = [
    "RasterType",
    "ElementKind",
    "element_kind",
    "raster_type_of"
]

class RasterType(Enum):
    """
    Element types accepted when creating a raster.

    Options:
        INT8U: 8-bit unsigned integer samples.
        INT16U: 16-bit unsigned integer samples.
        REAL32: 32-bit floating point samples.
    """
    INT8U = "uint8"
    INT16U = "uint16"
    REAL32 = "float32"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @classmethod
    def coerce(cls, value: Union['RasterType', str, Any]) -> 'RasterType':
        """
        Resolve a RasterType from an enum member, its name, or a numpy dtype.

        Raises:
            RasterCreationError: If the value does not name a supported creation type.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        try:
            dtype = np.dtype(value)
        except TypeError:
            raise RasterCreationError(f"Unsupported raster type: {value!r}")
        for member in cls:
            if member.dtype == dtype:
                return member
        raise RasterCreationError(
            f"Unsupported raster type: {value!r}. "
            f"Must be one of: {[m.name for m in cls]}"
        )

class ElementKind(Enum):
    """Store-level primitive type tags for typed slice I/O."""
    UINT8 = "uint8"
    INT8 = "int8"
    UINT16 = "uint16"
    INT16 = "int16"
    UINT32 = "uint32"
    INT32 = "int32"
    UINT64 = "uint64"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

def element_kind(dtype: Any) -> ElementKind:
    """
    Resolve the store type tag for a numeric buffer type.

    Args:
        dtype: Anything numpy accepts as a dtype (np.float32, 'uint16', an array's dtype, ...).

    Returns:
        ElementKind: The matching tag.

    Raises:
        TypeError: If the type is not one of the supported numeric kinds.
    """
    try:
        return ElementKind(np.dtype(dtype).name)
    except ValueError:
        raise TypeError(f"No store element kind for dtype {np.dtype(dtype)}")

def raster_type_of(dtype: Any) -> RasterType:
    """Return the RasterType of a stored array dtype."""
    return RasterType.coerce(np.dtype(dtype))
