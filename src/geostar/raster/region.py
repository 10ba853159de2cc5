# src/geostar/raster/region.py

"""
This module implements local-window statistics on rasters.

All filters share one pattern: the raster is partitioned into whole tiles
starting at (0, 0), one statistic is computed per tile and broadcast back
over that tile in the output. Tiles are read one row at a time, once for
the statistic and once for the broadcast pass. Trailing rows and columns
that do not fill a whole tile are left untouched in the output.
"""

import logging
from typing import TYPE_CHECKING, Callable, Tuple

import numpy as np
from numba import jit

from geostar.exceptions import IntegerParameterError, PartitionError
from .slices import Slice, iter_tiles
from .utils import require_odd_window, require_range, require_same_dimensions

if TYPE_CHECKING:
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "MAX_PARTITIONS",
    "harmonic_mean",
    "midpoint_filter",
    "range_filter",
    "auto_local_thresh"
]

MAX_PARTITIONS = 150

@jit(nopython=True, cache=True)
def _accumulate_row(row: np.ndarray, stats: np.ndarray):
    """
    Fold one row of a tile into running statistics.

    Args:
        row: 1D float64 samples.
        stats: [reciprocal sum, min, max], updated in place.
    """
    for i in range(row.shape[0]):
        v = row[i]
        if v == 0.0:
            stats[0] = np.inf
        else:
            stats[0] += 1.0 / v
        if v < stats[1]:
            stats[1] = v
        if v > stats[2]:
            stats[2] = v

def _tile_stats(raster: 'Raster', tile: Slice) -> Tuple[float, float, float]:
    """Return (reciprocal sum, min, max) over a tile, reading it row by row."""
    stats = np.array([0.0, np.inf, -np.inf])
    for row in range(tile.height):
        data = raster.read(Slice(tile.x0, tile.y0 + row, tile.width, 1), dtype=np.float64)
        _accumulate_row(data.reshape(-1), stats)
    return stats[0], stats[1], stats[2]

def _broadcast(output: 'Raster', tile: Slice, value: float):
    row_buffer = np.full(tile.width, value, dtype=np.float64)
    for row in range(tile.height):
        output.write(Slice(tile.x0, tile.y0 + row, tile.width, 1), row_buffer)

def _tile_filter(
    raster: 'Raster',
    output: 'Raster',
    n: int,
    statistic: Callable[[float, float, float], float],
    label: str
):
    require_odd_window(n, IntegerParameterError)
    nx, ny = require_same_dimensions(raster, output)

    log.info(f"Applying {label} filter ({n}x{n}) to '{raster.name}'")
    count = 0
    for tile in iter_tiles(nx, ny, n):
        _broadcast(output, tile, statistic(*_tile_stats(raster, tile)))
        count += 1
    log.debug(f"{label} filter wrote {count} tiles to '{output.name}'")

def _harmonic(area: float, recip_sum: float) -> float:
    # A zero sample drives the reciprocal sum to infinity and the mean to zero;
    # reciprocals cancelling to zero give an infinite mean
    with np.errstate(divide="ignore"):
        return float(np.float64(area) / np.float64(recip_sum))

def harmonic_mean(raster: 'Raster', output: 'Raster', n: int):
    """
    Harmonic mean filter: n*n / sum(1/sample) per n x n tile.

    Args:
        raster: Source raster.
        output: Destination of matching dimensions.
        n: Odd window size within [3, 11].

    Raises:
        IntegerParameterError: If n is invalid.
        RasterSizeError: If dimensions differ.
    """
    area = float(n * n)
    _tile_filter(
        raster, output, n,
        lambda recip_sum, low, high: _harmonic(area, recip_sum),
        "harmonic mean"
    )

def midpoint_filter(raster: 'Raster', output: 'Raster', n: int):
    """Midpoint filter: (min + max) / 2 per n x n tile."""
    _tile_filter(raster, output, n, lambda s, low, high: (low + high) / 2.0, "midpoint")

def range_filter(raster: 'Raster', output: 'Raster', n: int):
    """Range filter: max - min per n x n tile."""
    _tile_filter(raster, output, n, lambda s, low, high: high - low, "range")

def auto_local_thresh(raster: 'Raster', output: 'Raster', partitions: int):
    """
    Sector-wise automatic thresholding.

    The raster is split into partitions x partitions sectors of size
    (nx // partitions, ny // partitions). In each sector, samples below
    (max + min) / 3 become 0 in the output; the rest are copied from the source.

    Args:
        raster: Source raster (read only).
        output: Destination of matching dimensions.
        partitions: Sectors per axis, within [1, MAX_PARTITIONS].

    Raises:
        PartitionError: If partitions is out of range.
        RasterSizeError: If dimensions differ.
    """
    require_range(partitions, 1, MAX_PARTITIONS, "Partition count", PartitionError)
    nx, ny = require_same_dimensions(raster, output)

    size_x = nx // partitions
    size_y = ny // partitions
    if size_x == 0 or size_y == 0:
        log.warning(
            f"{partitions} partitions leave empty sectors on a {nx}x{ny} raster; nothing to threshold"
        )
        return

    log.info(f"Auto local threshold of '{raster.name}' over {partitions}x{partitions} sectors")
    for sector in iter_tiles(size_x * partitions, size_y * partitions, size_x, size_y):
        _, low, high = _tile_stats(raster, sector)
        cutoff = (high + low) / 3.0

        for row in range(sector.height):
            row_slice = Slice(sector.x0, sector.y0 + row, sector.width, 1)
            data = raster.read(row_slice, dtype=np.float64)
            data[data < cutoff] = 0
            output.write(row_slice, data)
