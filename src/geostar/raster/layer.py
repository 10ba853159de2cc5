# src/geostar/raster/layer.py

"""
This module defines the Raster, the core unit of the geostar pipeline.

A Raster wraps one named 2D array inside a store and exposes typed slice
reads and writes plus every image processing operation. Operations stream
through the store one row, column or tile at a time; the full array is
never loaded unless a caller asks for it.
"""

import logging
from functools import wraps
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from geostar.exceptions import (
    RasterClosedError,
    RasterCreationError,
    RasterDoesNotExistError,
    RasterOpenError,
    SliceSizeError
)
from geostar.store.base import RasterStore

from .types import RasterType, element_kind, raster_type_of
from .slices import Slice, SliceLike, as_slice, iter_rows
from . import pixel, region, convolution, pyramid, spectral, draw

log = logging.getLogger(__name__)

__all__ = [
    "Raster",
    "OBJECT_TYPE",
    "OBJECT_TYPE_ATTR"
]

OBJECT_TYPE = "geostar::raster"
OBJECT_TYPE_ATTR = "object_type"

Number = Union[int, float]

def _requires_open(func):
    """Decorator rejecting calls on a raster whose handle was released."""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        if self._handle is None:
            raise RasterClosedError(f"Raster '{self._name}' is closed")
        return func(self, *args, **kwargs)
    return wrapper

class Raster:
    """
    A named 2D array of fixed element type and dimensions inside a store.

    Rasters are obtained through Raster.open() (bind to an existing array) or
    Raster.create() (allocate a new one). The object owns its store handle and
    releases it on close(); it never owns rasters passed to it as parameters.
    Dimensions are immutable.

    Attributes:
        name (str): Array name inside the store.
        store (RasterStore): The containing store (borrowed, not owned).
        nx (int): Width in samples.
        ny (int): Height in samples.
    """

    def __init__(self, store: RasterStore, name: str, handle: Any):
        """
        Wrap an already validated store handle. Use open() or create() instead.
        """
        self._store = store
        self._name = name
        self._handle = handle
        self._nx, self._ny = store.get_dimensions(handle)

    @classmethod
    def open(cls, store: RasterStore, name: str) -> 'Raster':
        """
        Bind to an existing raster.

        Args:
            store: Store holding the array.
            name: Array name.

        Returns:
            Raster: An open raster.

        Raises:
            RasterDoesNotExistError: If no such array exists.
            RasterOpenError: If the array lacks the raster object type tag.
        """
        if not store.exists(name):
            raise RasterDoesNotExistError(f"Raster '{name}' does not exist")

        handle = store.open_array(name)
        object_type = store.get_attribute(handle, OBJECT_TYPE_ATTR)
        if object_type != OBJECT_TYPE:
            store.release(handle)
            raise RasterOpenError(
                f"'{name}' is not a raster (object type {object_type!r}, expected {OBJECT_TYPE!r})"
            )

        raster = cls(store, name, handle)
        log.info(f"Opened raster '{name}' {raster.nx}x{raster.ny}")
        return raster

    @classmethod
    def create(
        cls,
        store: RasterStore,
        name: str,
        raster_type: Union[RasterType, str, Any],
        nx: int,
        ny: int
    ) -> 'Raster':
        """
        Allocate a new raster and tag it as such.

        Args:
            store: Store that will hold the array.
            name: Array name. Must not already exist.
            raster_type: INT8U, INT16U or REAL32 (enum, name or numpy dtype).
            nx: Width in samples.
            ny: Height in samples.

        Returns:
            Raster: An open raster, filled with the store's fill value.

        Raises:
            RasterCreationError: If the type is unsupported or a dimension is not positive.
            RasterExistsError: If the name is taken.
        """
        rtype = RasterType.coerce(raster_type)
        if int(nx) <= 0 or int(ny) <= 0:
            raise RasterCreationError(f"Raster dimensions must be positive, got {nx}x{ny}")

        handle = store.create_array(name, rtype.dtype, int(nx), int(ny))
        store.set_attribute(handle, OBJECT_TYPE_ATTR, OBJECT_TYPE)

        log.info(f"Created raster '{name}' {nx}x{ny} {rtype.name}")
        return cls(store, name, handle)

    # Lifecycle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def close(self):
        """Release the store handle. Further operations raise RasterClosedError."""
        if self._handle is None:
            return
        self._store.release(self._handle)
        self._handle = None
        log.debug(f"Closed raster '{self._name}'")

    def __enter__(self) -> 'Raster':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Properties

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> RasterStore:
        return self._store

    @property
    def nx(self) -> int:
        return self._nx

    @property
    def ny(self) -> int:
        return self._ny

    @property
    def shape(self) -> Tuple[int, int]:
        """Array shape as (rows, cols)."""
        return (self._ny, self._nx)

    def dimensions(self) -> Tuple[int, int]:
        """Return (nx, ny)."""
        return (self._nx, self._ny)

    @property
    @_requires_open
    def dtype(self) -> np.dtype:
        return np.dtype(self._store.get_dtype(self._handle))

    @property
    def element_type(self) -> RasterType:
        return raster_type_of(self.dtype)

    @_requires_open
    def read_object_type(self) -> Optional[str]:
        return self._store.get_attribute(self._handle, OBJECT_TYPE_ATTR)

    @_requires_open
    def write_object_type(self, value: str):
        self._store.set_attribute(self._handle, OBJECT_TYPE_ATTR, value)

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<Raster '{self._name}' {self._nx}x{self._ny} {state}>"

    # Slice I/O

    @_requires_open
    def read(self, slice: SliceLike, dtype: Any = None) -> np.ndarray:
        """
        Read a rectangular block.

        Args:
            slice: (x0, y0, width, height) as a Slice, rasterio Window or 4-sequence.
            dtype: Numeric type of the returned buffer. Defaults to the raster's own type.

        Returns:
            np.ndarray: A (height, width) row-major array.

        Raises:
            SliceSizeError: If the slice is malformed.
            SliceOutOfBoundsError: If the slice exits the raster.
        """
        s = as_slice(slice).check_bounds(self._nx, self._ny)
        if dtype is not None:
            dtype = element_kind(dtype).dtype
        return self._store.read_hyperslab(self._handle, s.x0, s.y0, s.width, s.height, dtype)

    @_requires_open
    def write(self, slice: SliceLike, buffer: Any):
        """
        Write a rectangular block.

        The buffer may be flat or 2D; its first width*height samples are written
        row-major. Element conversion to the raster type is done by the store.

        Raises:
            SliceSizeError: If the slice is malformed or the buffer holds fewer samples than its area.
            SliceOutOfBoundsError: If the slice exits the raster.
        """
        s = as_slice(slice).check_bounds(self._nx, self._ny)
        data = np.asarray(buffer)
        if data.size < s.area:
            raise SliceSizeError(
                f"Buffer holds {data.size} samples, slice {s.as_tuple()} needs {s.area}"
            )
        element_kind(data.dtype)

        flat = data.reshape(-1)[:s.area]
        self._store.write_hyperslab(self._handle, s.x0, s.y0, s.width, s.height, flat)

    def read_all(self, dtype: Any = None) -> np.ndarray:
        """Read the whole raster as a (ny, nx) array."""
        return self.read(Slice(0, 0, self._nx, self._ny), dtype=dtype)

    @_requires_open
    def copy(self, slice: SliceLike, output: 'Raster'):
        """
        Copy a slice of this raster into the top-left corner of 'output', row by row.

        Raises:
            SliceSizeError: If the slice exceeds this raster or is larger than 'output'.
        """
        s = as_slice(slice).check_bounds(self._nx, self._ny)
        if s.width > output.nx or s.height > output.ny:
            raise SliceSizeError(
                f"Slice {s.as_tuple()} does not fit in '{output.name}' ({output.nx}x{output.ny})"
            )
        for row in range(s.height):
            data = self.read(Slice(s.x0, s.y0 + row, s.width, 1), dtype=np.float32)
            output.write(Slice(0, row, s.width, 1), data)

    def rows(self, dtype: Any = np.float32):
        """Yield (Slice, row buffer) for each row, top to bottom."""
        for row_slice in iter_rows(self._nx, self._ny):
            yield row_slice, self.read(row_slice, dtype=dtype).reshape(-1)

    # Pixel operations

    def threshold(self, value: Number):
        pixel.threshold(self, value)

    def scale(self, output: 'Raster', offset: Number, mult: Number):
        pixel.scale(self, output, offset, mult)

    def set(self, slice: SliceLike, value: Number):
        pixel.set_value(self, slice, value)

    def add(self, other: 'Raster', output: 'Raster'):
        pixel.add(self, other, output)

    def subtract(self, other: 'Raster', output: 'Raster'):
        pixel.subtract(self, other, output)

    def multiply(self, other: 'Raster', output: 'Raster'):
        pixel.multiply(self, other, output)

    def divide(self, other: 'Raster', output: 'Raster'):
        pixel.divide(self, other, output)

    def add_scalar(self, value: Number, output: 'Raster'):
        pixel.add_scalar(self, value, output)

    def subtract_scalar(self, value: Number, output: 'Raster'):
        pixel.subtract_scalar(self, value, output)

    def multiply_scalar(self, value: Number, output: 'Raster'):
        pixel.multiply_scalar(self, value, output)

    def divide_scalar(self, value: Number, output: 'Raster'):
        pixel.divide_scalar(self, value, output)

    def bit_shift(self, output: 'Raster', bits: int, direction: bool):
        pixel.bit_shift(self, output, bits, direction)

    def add_salt_pepper(self, output: 'Raster', low_prob: float, rng=None):
        pixel.add_salt_pepper(self, output, low_prob, rng=rng)

    def __add__(self, other: Union['Raster', Number]) -> 'Raster':
        return pixel.binary_operator(self, other, "add")

    def __sub__(self, other: Union['Raster', Number]) -> 'Raster':
        return pixel.binary_operator(self, other, "subtract")

    def __mul__(self, other: Union['Raster', Number]) -> 'Raster':
        return pixel.binary_operator(self, other, "multiply")

    def __truediv__(self, other: Union['Raster', Number]) -> 'Raster':
        return pixel.binary_operator(self, other, "divide")

    # Region statistics

    def harmonic_mean(self, output: 'Raster', n: int):
        region.harmonic_mean(self, output, n)

    def midpoint_filter(self, output: 'Raster', n: int):
        region.midpoint_filter(self, output, n)

    def range_filter(self, output: 'Raster', n: int):
        region.range_filter(self, output, n)

    def auto_local_thresh(self, output: 'Raster', partitions: int):
        region.auto_local_thresh(self, output, partitions)

    # Convolution

    def downsample(self, output: 'Raster'):
        convolution.downsample(self, output)

    def upsample(self, output: 'Raster'):
        convolution.upsample(self, output)

    def gradient_mask(self, output: 'Raster', mask: int):
        convolution.gradient_mask(self, output, mask)

    # Pyramids

    def gaussian_pyramid(self, n: int) -> List['Raster']:
        return pyramid.gaussian_pyramid(self, n)

    def laplacian_pyramid(self, n: int) -> List['Raster']:
        return pyramid.laplacian_pyramid(self, n)

    # Frequency domain

    def fft_2d(self, work_store: Optional[RasterStore], out_real: 'Raster', out_imag: 'Raster'):
        spectral.fft_2d(self, out_real, out_imag, work_store=work_store)

    def fft_2d_inv(
        self,
        work_store: Optional[RasterStore],
        output: 'Raster',
        in_imag: 'Raster',
        scale: float = spectral.INVERSE_FFT_SCALE
    ):
        spectral.fft_2d_inv(self, output, in_imag, work_store=work_store, scale=scale)

    def low_pass_filter(
        self,
        work_store: Optional[RasterStore],
        buf_real: 'Raster',
        buf_imag: 'Raster',
        output: 'Raster'
    ):
        spectral.low_pass_filter(self, buf_real, buf_imag, output, work_store=work_store)

    # Drawing

    def draw_filled_circle(self, x0: int, y0: int, radius: float, color: Number):
        draw.draw_filled_circle(self, x0, y0, radius, color)

    def draw_line(self, slice: SliceLike, radius: float, color: Number):
        draw.draw_line(self, slice, radius, color)

    def draw_rectangle(self, slice: SliceLike, radius: int, color: Number):
        draw.draw_rectangle(self, slice, radius, color)

    def draw_filled_rectangle(self, slice: SliceLike, radius: int, line_color: Number, fill_color: Number):
        draw.draw_filled_rectangle(self, slice, radius, line_color, fill_color)
