# src/geostar/raster/pixel.py

"""
This module implements per-sample raster operations.

Every operation streams the raster one row at a time, so memory use is
bounded by the raster width. Arithmetic is carried out on 32-bit float
buffers and converted to the output element type by the store on write.
"""

import logging
from typing import TYPE_CHECKING, Callable, Union

import numpy as np

from geostar.exceptions import (
    BitError,
    DivideByZeroError,
    ProbabilityError
)
from .slices import SliceLike, as_slice, iter_rows
from .utils import require_range, require_same_dimensions

if TYPE_CHECKING:
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "DIVIDE_BY_ZERO_VALUE",
    "SALT_VALUE",
    "threshold",
    "scale",
    "set_value",
    "add",
    "subtract",
    "multiply",
    "divide",
    "add_scalar",
    "subtract_scalar",
    "multiply_scalar",
    "divide_scalar",
    "bit_shift",
    "add_salt_pepper",
    "binary_operator"
]

DIVIDE_BY_ZERO_VALUE = 255
SALT_VALUE = 15000

Number = Union[int, float]
RandomSource = Union[np.random.Generator, int, None]

def threshold(raster: 'Raster', value: Number):
    """
    Zero every sample below 'value', in place.

    Args:
        raster: Raster to modify.
        value: Samples strictly less than this become 0.
    """
    for row, buffer in raster.rows(dtype=np.float64):
        buffer[buffer < value] = 0
        raster.write(row, buffer)

def scale(raster: 'Raster', output: 'Raster', offset: Number, mult: Number):
    """
    Linear rescale into 'output': max(0, trunc(mult * (sample - offset))).

    Raises:
        RasterSizeError: If 'output' does not match the raster dimensions.
    """
    require_same_dimensions(raster, output)
    for row, buffer in raster.rows(dtype=np.float64):
        scaled = np.trunc(mult * (buffer - offset))
        output.write(row, np.maximum(scaled, 0))

def set_value(raster: 'Raster', slice: SliceLike, value: Number):
    """
    Fill every sample of 'slice' with 'value'.

    Raises:
        SliceSizeError: If the slice is malformed or exceeds the raster.
    """
    s = as_slice(slice).check_bounds(raster.nx, raster.ny)
    raster.write(s, np.full(s.area, value, dtype=np.float64))

def _combine(
    raster: 'Raster',
    other: 'Raster',
    output: 'Raster',
    op: Callable[[np.ndarray, np.ndarray], np.ndarray]
):
    """Apply a binary elementwise op row by row. Dimension checks run before any I/O."""
    require_same_dimensions(raster, other, output)
    for row in iter_rows(raster.nx, raster.ny):
        a = raster.read(row, dtype=np.float32)
        b = other.read(row, dtype=np.float32)
        output.write(row, op(a, b))

def _safe_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    out = np.full_like(a, DIVIDE_BY_ZERO_VALUE)
    np.divide(a, b, out=out, where=(b != 0))
    return out

def add(raster: 'Raster', other: 'Raster', output: 'Raster'):
    _combine(raster, other, output, np.add)

def subtract(raster: 'Raster', other: 'Raster', output: 'Raster'):
    _combine(raster, other, output, np.subtract)

def multiply(raster: 'Raster', other: 'Raster', output: 'Raster'):
    _combine(raster, other, output, np.multiply)

def divide(raster: 'Raster', other: 'Raster', output: 'Raster'):
    """
    Elementwise division into 'output'.

    Samples whose divisor is zero are set to DIVIDE_BY_ZERO_VALUE instead of inf/nan.
    """
    _combine(raster, other, output, _safe_divide)

def _combine_scalar(
    raster: 'Raster',
    value: Number,
    output: 'Raster',
    op: Callable[[np.ndarray, np.float32], np.ndarray]
):
    require_same_dimensions(raster, output)
    value = np.float32(value)
    for row, buffer in raster.rows(dtype=np.float32):
        output.write(row, op(buffer, value))

def add_scalar(raster: 'Raster', value: Number, output: 'Raster'):
    _combine_scalar(raster, value, output, np.add)

def subtract_scalar(raster: 'Raster', value: Number, output: 'Raster'):
    _combine_scalar(raster, value, output, np.subtract)

def multiply_scalar(raster: 'Raster', value: Number, output: 'Raster'):
    _combine_scalar(raster, value, output, np.multiply)

def divide_scalar(raster: 'Raster', value: Number, output: 'Raster'):
    """
    Divide every sample by a constant.

    Raises:
        DivideByZeroError: If 'value' is exactly zero.
    """
    if value == 0:
        raise DivideByZeroError(f"Cannot divide raster '{raster.name}' by zero")
    _combine_scalar(raster, value, output, np.divide)

_OPERATORS = {
    "add": ("PLUS", add, add_scalar),
    "subtract": ("MINUS", subtract, subtract_scalar),
    "multiply": ("TIMES", multiply, multiply_scalar),
    "divide": ("DIVIDEDBY", divide, divide_scalar),
}

def binary_operator(raster: 'Raster', other: Union['Raster', Number], op_name: str) -> 'Raster':
    """
    Back the arithmetic operators: create a new raster next to 'raster' and fill it.

    The result is named '<a>_PLUS_<b>' for two rasters or '<a>_PLUS_val' for a
    scalar (MINUS, TIMES and DIVIDEDBY likewise) and has the element type of 'raster'.

    Returns:
        Raster: The new, open result raster. The caller owns it.
    """
    token, raster_op, scalar_op = _OPERATORS[op_name]

    if isinstance(other, (int, float, np.number)):
        if op_name == "divide" and other == 0:
            raise DivideByZeroError(f"Cannot divide raster '{raster.name}' by zero")
        name = f"{raster.name}_{token}_val"
        output = type(raster).create(raster.store, name, raster.element_type, raster.nx, raster.ny)
        scalar_op(raster, other, output)
        return output

    require_same_dimensions(raster, other)
    name = f"{raster.name}_{token}_{other.name}"
    output = type(raster).create(raster.store, name, raster.element_type, raster.nx, raster.ny)
    raster_op(raster, other, output)
    return output

def bit_shift(raster: 'Raster', output: 'Raster', bits: int, direction: bool):
    """
    Arithmetic shift by multiplication with a power of two.

    Args:
        raster: Source raster.
        output: Destination of matching dimensions.
        bits: Number of bit positions. Must be non-negative.
        direction: True shifts right (divides by 2**bits), False shifts left.

    Raises:
        BitError: If bits is negative.
        RasterSizeError: If dimensions differ.
    """
    if bits < 0:
        raise BitError(f"Bit count must be non-negative, got {bits}")
    require_same_dimensions(raster, output)

    factor = 2.0 ** bits
    if direction:
        factor = 1.0 / factor

    for row, buffer in raster.rows(dtype=np.float64):
        output.write(row, buffer * factor)

def add_salt_pepper(
    raster: 'Raster',
    output: 'Raster',
    low_prob: float,
    rng: RandomSource = None
):
    """
    Inject salt-and-pepper noise into 'output'.

    For each sample a uniform draw in [0, 1) is taken: draws <= low_prob become 0,
    draws >= 1 - low_prob become SALT_VALUE, anything else copies the source.

    Args:
        raster: Source raster.
        output: Destination of matching dimensions.
        low_prob: Pepper probability, within [0, 0.5].
        rng: numpy Generator, an integer seed, or None for fresh OS entropy.

    Raises:
        ProbabilityError: If low_prob is outside [0, 0.5].
        RasterSizeError: If dimensions differ.
    """
    require_range(low_prob, 0.0, 0.5, "Noise probability", ProbabilityError)
    require_same_dimensions(raster, output)

    generator = np.random.default_rng(rng)
    high_prob = 1.0 - low_prob

    for row, buffer in raster.rows(dtype=np.float64):
        draws = generator.random(buffer.size)
        buffer[draws <= low_prob] = 0
        buffer[(draws > low_prob) & (draws >= high_prob)] = SALT_VALUE
        output.write(row, buffer)

    log.debug(f"Added salt-and-pepper noise to '{output.name}' (p={low_prob})")
