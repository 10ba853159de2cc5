# src/geostar/raster/pyramid.py

"""
This module builds multi-resolution image pyramids.

A Gaussian pyramid halves the raster at every level through repeated
downsampling; a Laplacian pyramid doubles it through repeated upsampling.
Every generated level is a new REAL32 raster in the source raster's store.
"""

import logging
from typing import TYPE_CHECKING, Callable, List, Tuple

from geostar.exceptions import IntegerParameterError, RasterSizeError
from .types import RasterType
from . import convolution

if TYPE_CHECKING:
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "level_name",
    "gaussian_pyramid",
    "laplacian_pyramid"
]

def level_name(base: str, kind: str, level: int) -> str:
    """Name of pyramid level 'level' built from raster 'base' ('GPyramid' or 'LPyramid')."""
    return f"{base}_{kind}{level}"

def _build(
    raster: 'Raster',
    n: int,
    kind: str,
    size_of: Callable[[int, int, int], Tuple[int, int]],
    step: Callable[['Raster', 'Raster'], None]
) -> List['Raster']:
    if n < 1:
        raise IntegerParameterError(f"Pyramid depth must be at least 1, got {n}")

    nx, ny = raster.dimensions()
    sizes = [size_of(nx, ny, k) for k in range(1, n + 1)]
    for k, (level_nx, level_ny) in enumerate(sizes, start=1):
        if level_nx <= 0 or level_ny <= 0:
            raise RasterSizeError(
                f"A {nx}x{ny} raster cannot provide {n} {kind} levels "
                f"(level {k} would be {level_nx}x{level_ny})"
            )

    log.info(f"Building {kind} with {n} levels from '{raster.name}' ({nx}x{ny})")
    levels = [raster]
    for k, (level_nx, level_ny) in enumerate(sizes, start=1):
        level = type(raster).create(
            raster.store, level_name(raster.name, kind, k), RasterType.REAL32, level_nx, level_ny
        )
        levels.append(level)
        step(levels[k - 1], level)
        log.debug(f"{kind} level {k}: '{level.name}' {level_nx}x{level_ny}")

    return levels

def gaussian_pyramid(raster: 'Raster', n: int) -> List['Raster']:
    """
    Build a Gaussian pyramid of n levels below 'raster'.

    Downsampling smooths its source in place, so 'raster' and every level
    but the last are left attenuated by the kernel once built.

    Args:
        raster: Level 0.
        n: Number of generated levels. Must be at least 1.

    Returns:
        List[Raster]: n + 1 rasters; level k is (nx // 2**k, ny // 2**k).
            The caller owns every level except level 0.

    Raises:
        IntegerParameterError: If n < 1.
        RasterSizeError: If a level would be empty. Raised before any raster is created.
    """
    return _build(
        raster, n, "GPyramid",
        lambda nx, ny, k: (nx >> k, ny >> k),
        convolution.downsample
    )

def laplacian_pyramid(raster: 'Raster', n: int) -> List['Raster']:
    """
    Build a Laplacian (upsampling) pyramid of n levels above 'raster'.

    Returns:
        List[Raster]: n + 1 rasters; level k is (nx * 2**k, ny * 2**k).
    """
    return _build(
        raster, n, "LPyramid",
        lambda nx, ny, k: (nx << k, ny << k),
        convolution.upsample
    )
