# tests/unit/test_slices.py

import pytest
from rasterio.windows import Window

from geostar.exceptions import SliceOutOfBoundsError, SliceSizeError
from geostar.raster.slices import Slice, as_slice, iter_columns, iter_rows, iter_tiles

def test_slice_geometry():
    s = Slice(2, 3, 4, 5)
    assert s.area == 20
    assert (s.x1, s.y1) == (6, 8)
    assert s.as_tuple() == (2, 3, 4, 5)
    rows, cols = s.to_numpy()
    assert (rows.start, rows.stop) == (3, 8)
    assert (cols.start, cols.stop) == (2, 6)

@pytest.mark.parametrize("fields", [
    (0, 0, 0, 4),
    (0, 0, 4, 0),
    (0, 0, -1, 4),
    (0, 0, 2.5, 4),
])
def test_slice_rejects_degenerate_sizes(fields):
    with pytest.raises(SliceSizeError):
        Slice(*fields)

def test_slice_rejects_negative_offsets():
    with pytest.raises(SliceOutOfBoundsError):
        Slice(-1, 0, 2, 2)

def test_from_sequence_requires_four_fields():
    with pytest.raises(SliceSizeError):
        Slice.from_sequence([0, 0, 1])
    assert Slice.from_sequence([1, 2, 3, 4, 99]) == Slice(1, 2, 3, 4)

def test_check_bounds():
    assert Slice(0, 0, 10, 10).check_bounds(10, 10) == Slice(0, 0, 10, 10)
    with pytest.raises(SliceOutOfBoundsError):
        Slice(5, 0, 6, 1).check_bounds(10, 10)
    with pytest.raises(SliceOutOfBoundsError):
        Slice(0, 9, 1, 2).check_bounds(10, 10)

def test_window_interop():
    s = Slice(3, 4, 5, 6)
    window = s.to_window()
    assert (window.col_off, window.row_off, window.width, window.height) == (3, 4, 5, 6)
    assert Slice.from_window(window) == s
    assert as_slice(Window(1, 2, 3, 4)) == Slice(1, 2, 3, 4)
    assert as_slice([1, 2, 3, 4]) == Slice(1, 2, 3, 4)
    assert as_slice(s) is s

def test_row_and_column_iterators():
    rows = list(iter_rows(5, 3))
    assert rows == [Slice(0, 0, 5, 1), Slice(0, 1, 5, 1), Slice(0, 2, 5, 1)]

    cols = list(iter_columns(2, 4))
    assert cols == [Slice(0, 0, 1, 4), Slice(1, 0, 1, 4)]

def test_tiles_skip_remainders():
    tiles = list(iter_tiles(7, 5, 3))
    # 7 // 3 = 2 tiles across, 5 // 3 = 1 tile down
    assert tiles == [Slice(0, 0, 3, 3), Slice(3, 0, 3, 3)]

def test_tiles_rectangular():
    tiles = list(iter_tiles(4, 6, 2, 3))
    assert len(tiles) == 4
    assert tiles[-1] == Slice(2, 3, 2, 3)
