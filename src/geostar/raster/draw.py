# src/geostar/raster/draw.py

"""
This module draws primitive shapes into rasters: filled circles, thick
line segments and axis-aligned rectangles.

Shapes are painted by reading the affected block, overwriting the covered
samples and writing the block back.
"""

import logging
from typing import TYPE_CHECKING, Sequence, Tuple, Union

import numpy as np
from numba import jit
from rasterio.windows import Window

from geostar.exceptions import RadiusSizeError, RasterSizeError, SliceSizeError
from .slices import Slice, SliceLike, as_slice

if TYPE_CHECKING:
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "draw_filled_circle",
    "draw_line",
    "draw_rectangle",
    "draw_filled_rectangle"
]

Number = Union[int, float]

def _require_radius(radius: Number):
    if radius < 0:
        raise RadiusSizeError(f"Radius must be non-negative, got {radius}")

def draw_filled_circle(raster: 'Raster', x0: int, y0: int, radius: Number, color: Number):
    """
    Paint a filled disc.

    The bounding block is (x0 - r, y0 - r, 2r, 2r); a sample at block offset
    (x, y) is painted when (x - r)**2 + (y - r)**2 <= r**2.

    Args:
        raster: Raster to draw into.
        x0: Center column.
        y0: Center row.
        radius: Disc radius.
        color: Value written to covered samples.

    Raises:
        RadiusSizeError: If radius is negative.
        RasterSizeError: If the bounding block leaves the raster.
    """
    _require_radius(radius)
    nx, ny = raster.dimensions()
    if x0 - radius < 0 or x0 + radius > nx or y0 - radius < 0 or y0 + radius > ny:
        raise RasterSizeError(
            f"Circle at ({x0}, {y0}) with radius {radius} exceeds raster '{raster.name}' ({nx}x{ny})"
        )

    side = int(2 * radius)
    if side == 0:
        return

    block = Slice(int(x0 - radius), int(y0 - radius), side, side)
    data = raster.read(block, dtype=np.float64)

    offsets = np.arange(side, dtype=np.float64) - radius
    dist_sq = offsets[np.newaxis, :] ** 2 + offsets[:, np.newaxis] ** 2
    data[dist_sq <= radius * radius] = color

    raster.write(block, data)

@jit(nopython=True, cache=True)
def _paint_segment(
    data: np.ndarray,
    origin_x: int,
    origin_y: int,
    ax: float,
    ay: float,
    bx: float,
    by: float,
    radius: float,
    color: float
):
    """
    Paint every sample of 'data' within 'radius' of segment A-B, measured perpendicular
    to the segment and only where the projection falls inside it.

    Args:
        data: (rows, cols) block, modified in place.
        origin_x: Raster column of data[:, 0].
        origin_y: Raster row of data[0, :].
        ax, ay, bx, by: Segment endpoints in raster coordinates.
        radius: Half thickness.
        color: Paint value.
    """
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return

    for row in range(data.shape[0]):
        py = origin_y + row - ay
        for col in range(data.shape[1]):
            px = origin_x + col - ax
            t = (px * dx + py * dy) / length_sq
            if t < 0.0 or t > 1.0:
                continue
            cross = px * dy - py * dx
            if cross * cross <= radius * radius * length_sq:
                data[row, col] = color

def _endpoints(segment: Union[SliceLike, Sequence[int]]) -> Tuple[int, int, int, int]:
    if isinstance(segment, Slice):
        return segment.as_tuple()
    if isinstance(segment, Window):
        return (int(segment.col_off), int(segment.row_off), int(segment.width), int(segment.height))
    values = list(segment)
    if len(values) < 4:
        raise SliceSizeError(f"A segment needs 4 fields (x0, y0, dx, dy), got {len(values)}")
    return tuple(int(v) for v in values[:4])

def draw_line(raster: 'Raster', segment: Union[SliceLike, Sequence[int]], radius: Number, color: Number):
    """
    Draw a thick segment with round caps.

    The segment runs from (x0, y0) to (x0 + dx, y0 + dy). Samples within
    'radius' of it are painted, and a filled circle is drawn at each end.
    Vertical and horizontal segments (dx or dy of zero) are supported.

    Args:
        raster: Raster to draw into.
        segment: (x0, y0, dx, dy).
        radius: Half thickness.
        color: Paint value.

    Raises:
        SliceSizeError: If fewer than 4 fields are given.
        RadiusSizeError: If radius is negative.
        RasterSizeError: If either cap leaves the raster.
    """
    x0, y0, dx, dy = _endpoints(segment)
    _require_radius(radius)
    x1, y1 = x0 + dx, y0 + dy

    nx, ny = raster.dimensions()
    for x, y in ((x0, y0), (x1, y1)):
        if x - radius < 0 or x + radius > nx or y - radius < 0 or y + radius > ny:
            raise RasterSizeError(
                f"Line end ({x}, {y}) with radius {radius} exceeds raster '{raster.name}' ({nx}x{ny})"
            )

    draw_filled_circle(raster, x0, y0, radius, color)
    draw_filled_circle(raster, x1, y1, radius, color)

    left = int(min(x0, x1) - radius)
    top = int(min(y0, y1) - radius)
    right = min(nx, int(np.ceil(max(x0, x1) + radius)) + 1)
    bottom = min(ny, int(np.ceil(max(y0, y1) + radius)) + 1)
    if right <= left or bottom <= top:
        return
    block = Slice(left, top, right - left, bottom - top)

    data = raster.read(block, dtype=np.float64)
    _paint_segment(data, left, top, float(x0), float(y0), float(x1), float(y1), float(radius), float(color))
    raster.write(block, data)
    log.debug(f"Drew line ({x0}, {y0})-({x1}, {y1}) r={radius} on '{raster.name}'")

def _rectangle_edges(rect: Slice, radius: int):
    """Yield the left, top, bottom and right bands of a rectangle outline."""
    band_x = min(radius, rect.width)
    band_y = min(radius, rect.height)
    if band_x == 0 or band_y == 0:
        return
    yield Slice(rect.x0, rect.y0, band_x, rect.height)
    yield Slice(rect.x0, rect.y0, rect.width, band_y)
    yield Slice(rect.x0, rect.y1 - band_y, rect.width, band_y)
    yield Slice(rect.x1 - band_x, rect.y0, band_x, rect.height)

def _validate_rectangle(raster: 'Raster', slice: SliceLike, radius: int) -> Slice:
    rect = as_slice(slice)
    _require_radius(radius)
    if not rect.fits(raster.nx, raster.ny):
        raise RasterSizeError(
            f"Rectangle {rect.as_tuple()} exceeds raster '{raster.name}' ({raster.nx}x{raster.ny})"
        )
    return rect

def draw_rectangle(raster: 'Raster', slice: SliceLike, radius: int, color: Number):
    """
    Outline a rectangle with bands 'radius' samples thick, drawn inside its edges.

    Raises:
        SliceSizeError: If the slice is malformed.
        RadiusSizeError: If radius is negative.
        RasterSizeError: If the rectangle leaves the raster.
    """
    rect = _validate_rectangle(raster, slice, radius)
    for edge in _rectangle_edges(rect, radius):
        raster.set(edge, color)

def draw_filled_rectangle(
    raster: 'Raster',
    slice: SliceLike,
    radius: int,
    line_color: Number,
    fill_color: Number
):
    """Fill a rectangle with 'fill_color', then outline it in 'line_color'."""
    rect = _validate_rectangle(raster, slice, radius)
    raster.set(rect, fill_color)
    for edge in _rectangle_edges(rect, radius):
        raster.set(edge, line_color)
