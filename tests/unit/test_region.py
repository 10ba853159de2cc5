# tests/unit/test_region.py

import numpy as np
import pytest

from geostar.exceptions import IntegerParameterError, PartitionError, RasterSizeError
from helpers import assert_raster_equal, read_all

@pytest.mark.parametrize("n", [1, 2, 4, 12, 13])
def test_window_size_validation(raster_factory, n):
    source = raster_factory("source", nx=12, ny=12)
    out = raster_factory("out", nx=12, ny=12)
    for method in (source.harmonic_mean, source.midpoint_filter, source.range_filter):
        with pytest.raises(IntegerParameterError):
            method(out, n)

def test_region_filters_require_matching_output(raster_factory):
    source = raster_factory("source", nx=9, ny=9)
    out = raster_factory("out", nx=9, ny=6)
    with pytest.raises(RasterSizeError):
        source.midpoint_filter(out, 3)

def test_harmonic_mean_of_constant_tile(raster_factory):
    source = raster_factory("source", np.full((6, 6), 4.0))
    out = raster_factory("out", nx=6, ny=6)

    source.harmonic_mean(out, 3)

    assert_raster_equal(out, np.full((6, 6), 4.0), rtol=1e-6)

def test_harmonic_mean_values(raster_factory):
    tile = np.array([[1, 2, 4], [1, 2, 4], [1, 2, 4]], dtype=np.float32)
    source = raster_factory("source", tile)
    out = raster_factory("out", nx=3, ny=3)

    source.harmonic_mean(out, 3)

    # 9 / (3 * (1 + 0.5 + 0.25))
    expected = 9.0 / 5.25
    assert_raster_equal(out, np.full((3, 3), expected), rtol=1e-6)

def test_harmonic_mean_with_zero_sample(raster_factory):
    data = np.full((3, 3), 5.0)
    data[1, 1] = 0
    source = raster_factory("source", data)
    out = raster_factory("out", nx=3, ny=3)
    out.set((0, 0, 3, 3), 99)

    source.harmonic_mean(out, 3)

    assert_raster_equal(out, np.zeros((3, 3)))

def test_harmonic_mean_cancelling_reciprocals(raster_factory):
    source = raster_factory("source", np.tile([2.0, 2.0, -1.0], (3, 1)))
    out = raster_factory("out", nx=3, ny=3)

    source.harmonic_mean(out, 3)

    # 1/2 + 1/2 - 1 sums to zero, so n * n / 0 is infinite
    assert np.all(np.isposinf(read_all(out)))

def test_midpoint_and_range(raster_factory):
    data = np.arange(1, 10, dtype=np.float32).reshape(3, 3)
    source = raster_factory("source", data)
    mid = raster_factory("mid", nx=3, ny=3)
    spread = raster_factory("spread", nx=3, ny=3)

    source.midpoint_filter(mid, 3)
    source.range_filter(spread, 3)

    assert_raster_equal(mid, np.full((3, 3), 5.0))
    assert_raster_equal(spread, np.full((3, 3), 8.0))

def test_tiles_are_independent(raster_factory):
    data = np.zeros((3, 6), dtype=np.float32)
    data[:, :3] = 2
    data[:, 3:] = np.arange(9).reshape(3, 3)
    source = raster_factory("source", data)
    out = raster_factory("out", nx=6, ny=3)

    source.range_filter(out, 3)

    expected = np.zeros((3, 6))
    expected[:, 3:] = 8
    assert_raster_equal(out, expected)

def test_remainder_is_not_covered(raster_factory):
    source = raster_factory("source", np.full((7, 8), 6.0))
    out = raster_factory("out", nx=8, ny=7)

    source.midpoint_filter(out, 3)

    result = read_all(out)
    assert np.all(result[:6, :6] == 6)
    assert np.all(result[6, :] == 0)
    assert np.all(result[:, 6:] == 0)

@pytest.mark.parametrize("partitions", [0, -1, 151])
def test_auto_local_thresh_partition_range(raster_factory, partitions):
    source = raster_factory("source", nx=10, ny=10)
    out = raster_factory("out", nx=10, ny=10)
    # A closed source proves the check happens before any read
    source.close()
    with pytest.raises(PartitionError):
        source.auto_local_thresh(out, partitions)

def test_auto_local_thresh_requires_matching_output(raster_factory):
    source = raster_factory("source", nx=10, ny=10)
    out = raster_factory("out", nx=5, ny=10)
    with pytest.raises(RasterSizeError):
        source.auto_local_thresh(out, 2)

def test_auto_local_thresh_single_sector(raster_factory):
    data = np.arange(16, dtype=np.float32).reshape(4, 4)
    source = raster_factory("source", data)
    out = raster_factory("out", nx=4, ny=4)

    source.auto_local_thresh(out, 1)

    # (15 + 0) / 3 = 5
    expected = np.where(data < 5, 0, data)
    assert_raster_equal(out, expected)
    assert_raster_equal(source, data)

def test_auto_local_thresh_per_sector(raster_factory):
    data = np.array([
        [0, 9, 30, 30],
        [3, 6, 60, 90],
        [1, 1, 1, 1],
        [1, 1, 1, 4],
    ], dtype=np.float32)
    source = raster_factory("source", data)
    out = raster_factory("out", nx=4, ny=4)

    source.auto_local_thresh(out, 2)

    expected = np.array([
        [0, 9, 0, 0],
        [3, 6, 60, 90],
        [1, 1, 0, 0],
        [1, 1, 0, 4],
    ])
    assert_raster_equal(out, expected)

def test_auto_local_thresh_more_partitions_than_samples(raster_factory):
    source = raster_factory("source", np.full((4, 4), 3.0))
    out = raster_factory("out", nx=4, ny=4)

    source.auto_local_thresh(out, 10)

    assert_raster_equal(out, np.zeros((4, 4)))
