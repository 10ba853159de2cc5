# tests/helpers.py

import numpy as np
from geostar.raster.layer import Raster

def read_all(raster: Raster) -> np.ndarray:
    """Read the whole raster as float64."""
    return raster.read_all(dtype=np.float64)

def assert_raster_equal(raster: Raster, expected, atol: float = 0.0, rtol: float = 0.0):
    """Compare every sample of a raster against an expected (ny, nx) array."""
    actual = read_all(raster)
    expected = np.asarray(expected, dtype=np.float64)
    assert actual.shape == expected.shape, \
        f"Shape mismatch: {actual.shape} != {expected.shape}"
    assert np.allclose(actual, expected, atol=atol, rtol=rtol), \
        f"Max deviation {np.max(np.abs(actual - expected)):.6g} (atol={atol}, rtol={rtol})"

def assert_grid_match(r1: Raster, r2: Raster):
    """Strictly verify two rasters share the exact same dimensions."""
    assert r1.dimensions() == r2.dimensions(), \
        f"Dimension mismatch: {r1.dimensions()} != {r2.dimensions()}"
