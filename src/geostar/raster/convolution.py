# src/geostar/raster/convolution.py

"""
This module implements the fixed-kernel convolution passes: Gaussian
downsample and upsample, and the directional gradient mask.

The kernels are applied per sample: each output sample is its own input
sample multiplied by every kernel coefficient in turn, accumulated in
double precision in flipped kernel order. Neighbouring samples are not
gathered. This reproduces the output of existing geostar products and is
kept as is.
"""

import logging
from typing import TYPE_CHECKING

import numpy as np

from geostar.exceptions import IntegerParameterError
from .slices import Slice, iter_rows
from .utils import require_dimensions, require_range, require_same_dimensions

if TYPE_CHECKING:
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "GAUSSIAN_KERNEL",
    "BLUR_KERNEL",
    "GRADIENT_MASKS",
    "downsample",
    "upsample",
    "gradient_mask"
]

_BINOMIAL = np.array([1.0, 4.0, 6.0, 4.0, 1.0])

GAUSSIAN_KERNEL = np.outer(_BINOMIAL, _BINOMIAL) / 400.0

BLUR_KERNEL = np.array([
    [0.0625, 0.125, 0.0625],
    [0.125, 0.5, 0.125],
    [0.0625, 0.125, 0.0625]
])

# Sobel-like compass kernels, indexed by mask id 1..8
GRADIENT_MASKS = {
    1: np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]]),      # N
    2: np.array([[1, 0, -1], [2, 0, -2], [1, 0, -1]]),      # W
    3: np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]]),      # S
    4: np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]]),      # E
    5: np.array([[0, -1, -2], [1, 0, -1], [2, 1, 0]]),      # SW
    6: np.array([[-2, -1, 0], [-1, 0, 1], [0, 1, 2]]),      # SE
    7: np.array([[2, 1, 0], [1, 0, -1], [0, -1, -2]]),      # NW
    8: np.array([[0, 1, 2], [-1, 0, 1], [-2, -1, 0]]),      # NE
}

def _apply_kernel(data: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Multiply-accumulate each sample with every coefficient of 'kernel', flipped."""
    acc = np.zeros(data.shape, dtype=np.float64)
    for coefficient in kernel[::-1, ::-1].ravel():
        acc += data * coefficient
    return acc

def downsample(raster: 'Raster', output: 'Raster'):
    """
    Gaussian downsample to half size.

    Every row of the source is convolved in place and stored back, so the
    samples take the source's element type (an INT8U source truncates).
    Odd rows and columns (1, 3, 5, ...) of the stored result are then copied
    to 'output'. Each pass scales samples by GAUSSIAN_KERNEL.sum() (0.64).

    Args:
        raster: Source raster, modified in place.
        output: Destination of exactly (nx // 2, ny // 2).

    Raises:
        RasterSizeError: If 'output' has the wrong dimensions.
    """
    nx, ny = raster.dimensions()
    require_dimensions(output, nx // 2, ny // 2)

    log.debug(f"Downsampling '{raster.name}' {nx}x{ny} -> '{output.name}' {output.nx}x{output.ny}")
    for row, data in raster.rows(dtype=np.float64):
        raster.write(row, _apply_kernel(data, GAUSSIAN_KERNEL))

    for out_row, row in enumerate(range(1, ny, 2)):
        stored = raster.read(Slice(0, row, nx, 1), dtype=np.float64).reshape(-1)
        output.write(Slice(0, out_row, output.nx, 1), stored[1::2])

def upsample(raster: 'Raster', output: 'Raster'):
    """
    Gaussian upsample to double size.

    The first pass spreads each source row into odd output rows at odd
    columns, leaving zero gaps. The second pass convolves every odd output
    row and copies each value into the following gap column and row; the
    first column and first row take the values of the second.

    Args:
        raster: Source raster.
        output: Destination of exactly (2 * nx, 2 * ny).

    Raises:
        RasterSizeError: If 'output' has the wrong dimensions.
    """
    nx, ny = raster.dimensions()
    require_dimensions(output, nx * 2, ny * 2)
    nx_out, ny_out = output.dimensions()

    log.debug(f"Upsampling '{raster.name}' {nx}x{ny} -> '{output.name}' {nx_out}x{ny_out}")

    spread = np.zeros(nx_out, dtype=np.float64)
    for row in range(ny):
        spread[1::2] = raster.read(Slice(0, row, nx, 1), dtype=np.float64).reshape(-1)
        output.write(Slice(0, 2 * row + 1, nx_out, 1), spread)

    for row in range(1, ny_out, 2):
        row_slice = Slice(0, row, nx_out, 1)
        data = output.read(row_slice, dtype=np.float64).reshape(-1)

        values = _apply_kernel(data[1::2], GAUSSIAN_KERNEL)
        data[1::2] = values
        data[2::2] = values[:len(data[2::2])]
        data[0] = values[0]

        output.write(row_slice, data)
        if row == 1:
            output.write(Slice(0, 0, nx_out, 1), data)
        if row + 1 < ny_out:
            output.write(Slice(0, row + 1, nx_out, 1), data)

def gradient_mask(raster: 'Raster', output: 'Raster', mask: int):
    """
    Apply a gradient mask pass.

    'mask' selects one of the eight compass kernels in GRADIENT_MASKS, but
    the store cannot hold the negative responses they produce, so the pass
    actually applied is BLUR_KERNEL whatever the mask id.

    Args:
        raster: Source raster.
        output: Destination of matching dimensions.
        mask: Compass kernel id within [1, 8].

    Raises:
        IntegerParameterError: If mask is outside [1, 8].
        RasterSizeError: If dimensions differ.
    """
    require_range(mask, 1, len(GRADIENT_MASKS), "Gradient mask", IntegerParameterError)
    require_same_dimensions(raster, output)

    log.warning(f"Gradient mask {mask} requested; applying the blur kernel to '{raster.name}'")
    for row in iter_rows(raster.nx, raster.ny):
        data = raster.read(row, dtype=np.float64)
        output.write(row, _apply_kernel(data, BLUR_KERNEL))
