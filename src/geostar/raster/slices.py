# src/geostar/raster/slices.py

"""
This module defines the rectangular slice contract used by every raster operation.

A slice is (x0, y0, width, height), offset from the raster's top-left origin;
y indexes rows. It also provides the partition iterators that keep streaming
operations bounded to one row, one column or one tile in memory.
"""

import logging
from dataclasses import dataclass
from typing import Generator, Sequence, Union

from rasterio.windows import Window

from geostar.exceptions import SliceSizeError, SliceOutOfBoundsError

log = logging.getLogger(__name__)

__all__ = [
    "Slice",
    "SliceLike",
    "as_slice",
    "iter_rows",
    "iter_columns",
    "iter_tiles"
]

@dataclass(frozen=True)
class Slice:
    """
    Rectangular sub-region of a raster.

    Args:
        x0: Column offset of the top-left sample.
        y0: Row offset of the top-left sample.
        width: Number of columns.
        height: Number of rows.
    """
    x0: int
    y0: int
    width: int
    height: int

    def __post_init__(self):
        for field_name in ("x0", "y0", "width", "height"):
            value = getattr(self, field_name)
            if int(value) != value:
                raise SliceSizeError(f"Slice {field_name} must be integral, got {value!r}")
            object.__setattr__(self, field_name, int(value))

        if self.x0 < 0 or self.y0 < 0:
            raise SliceOutOfBoundsError(f"Slice offsets must be non-negative: {self}")
        if self.width <= 0 or self.height <= 0:
            raise SliceSizeError(f"Slice must have a positive area: {self}")

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def x1(self) -> int:
        """Exclusive end column."""
        return self.x0 + self.width

    @property
    def y1(self) -> int:
        """Exclusive end row."""
        return self.y0 + self.height

    def fits(self, nx: int, ny: int) -> bool:
        return self.x1 <= nx and self.y1 <= ny

    def check_bounds(self, nx: int, ny: int) -> 'Slice':
        """
        Validate that the slice lies inside a raster of size (nx, ny).

        Raises:
            SliceOutOfBoundsError: If the slice extends past the raster edge.
        """
        if not self.fits(nx, ny):
            raise SliceOutOfBoundsError(
                f"Slice {self.as_tuple()} exceeds raster dimensions ({nx}, {ny})"
            )
        return self

    def as_tuple(self):
        return (self.x0, self.y0, self.width, self.height)

    def to_numpy(self):
        """Return the (rows, cols) index pair addressing this slice in a (ny, nx) array."""
        return (slice(self.y0, self.y1), slice(self.x0, self.x1))

    def to_window(self) -> Window:
        return Window(self.x0, self.y0, self.width, self.height)

    @classmethod
    def from_window(cls, window: Window) -> 'Slice':
        return cls(window.col_off, window.row_off, window.width, window.height)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> 'Slice':
        """
        Build a slice from its first four fields (x0, y0, width, height).

        Raises:
            SliceSizeError: If fewer than four fields are given.
        """
        values = list(values)
        if len(values) < 4:
            raise SliceSizeError(f"A slice needs 4 fields (x0, y0, width, height), got {len(values)}")
        return cls(*values[:4])

SliceLike = Union[Slice, Window, Sequence[int]]

def as_slice(value: SliceLike) -> Slice:
    """Coerce a Slice, a rasterio Window or a 4-sequence into a Slice."""
    if isinstance(value, Slice):
        return value
    if isinstance(value, Window):
        return Slice.from_window(value)
    return Slice.from_sequence(value)

def iter_rows(nx: int, ny: int) -> Generator[Slice, None, None]:
    """Yield one full-width slice per raster row, top to bottom."""
    for row in range(ny):
        yield Slice(0, row, nx, 1)

def iter_columns(nx: int, ny: int) -> Generator[Slice, None, None]:
    """Yield one full-height slice per raster column, left to right."""
    for col in range(nx):
        yield Slice(col, 0, 1, ny)

def iter_tiles(
    nx: int,
    ny: int,
    tile_x: int,
    tile_y: int = None
) -> Generator[Slice, None, None]:
    """
    Partition a raster into a grid of whole tiles starting at (0, 0).

    Tile counts come from floor division, so trailing rows and columns that do
    not fill a whole tile are not covered.

    Args:
        nx: Raster width.
        ny: Raster height.
        tile_x: Tile width.
        tile_y: Tile height (defaults to tile_x).

    Yields:
        Slice: Tiles in row-major order.
    """
    tile_y = tile_x if tile_y is None else tile_y
    if tile_x <= 0 or tile_y <= 0:
        return

    n_tiles_x = nx // tile_x
    n_tiles_y = ny // tile_y
    if nx % tile_x or ny % tile_y:
        log.debug(
            f"Tiling {nx}x{ny} by {tile_x}x{tile_y} leaves "
            f"{nx % tile_x} columns and {ny % tile_y} rows uncovered"
        )

    for ty in range(n_tiles_y):
        for tx in range(n_tiles_x):
            yield Slice(tx * tile_x, ty * tile_y, tile_x, tile_y)
