# src/geostar/raster/utils.py

"""
This module provides shared checks and helpers for raster operations.

Functions include dimension validation between rasters, range validation
for numeric parameters, and unique naming of auxiliary rasters.
"""
import logging
import uuid
from typing import TYPE_CHECKING, Tuple, Type

from geostar.exceptions import ParameterError, RasterSizeError

if TYPE_CHECKING:
    from geostar.store.base import RasterStore
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "require_same_dimensions",
    "require_dimensions",
    "require_range",
    "require_odd_window",
    "unique_name"
]

MIN_WINDOW = 3
MAX_WINDOW = 11

def require_same_dimensions(reference: 'Raster', *others: 'Raster') -> Tuple[int, int]:
    """
    Ensure every raster in 'others' has the dimensions of 'reference'.

    Returns:
        Tuple[int, int]: The shared (nx, ny).

    Raises:
        RasterSizeError: On the first mismatch.
    """
    nx, ny = reference.dimensions()
    for other in others:
        if other.dimensions() != (nx, ny):
            raise RasterSizeError(
                f"Raster '{other.name}' is {other.nx}x{other.ny}, "
                f"expected {nx}x{ny} to match '{reference.name}'"
            )
    return nx, ny

def require_dimensions(raster: 'Raster', nx: int, ny: int):
    """Raise RasterSizeError unless 'raster' is exactly nx by ny."""
    if raster.dimensions() != (nx, ny):
        raise RasterSizeError(
            f"Raster '{raster.name}' is {raster.nx}x{raster.ny}, expected {nx}x{ny}"
        )

def require_range(
    value,
    low,
    high,
    label: str,
    error: Type[ParameterError] = ParameterError
):
    """Raise 'error' unless low <= value <= high."""
    if value < low or value > high:
        raise error(f"{label} must be within [{low}, {high}], got {value}")
    return value

def require_odd_window(n: int, error: Type[ParameterError]) -> int:
    """Validate a local window size: odd and within [MIN_WINDOW, MAX_WINDOW]."""
    require_range(n, MIN_WINDOW, MAX_WINDOW, "Window size", error)
    if n % 2 == 0:
        raise error(f"Window size must be odd, got {n}")
    return n

def unique_name(store: 'RasterStore', base: str) -> str:
    """Return 'base' suffixed with a short random token not yet used in 'store'."""
    while True:
        name = f"{base}_{uuid.uuid4().hex[:8]}"
        if not store.exists(name):
            return name
