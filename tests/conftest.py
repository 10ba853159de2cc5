# tests/conftest.py

import pytest
import numpy as np

from geostar.store import H5Store
from geostar.raster import Raster, RasterType

@pytest.fixture
def store():
    """In-memory HDF5 store, discarded after the test."""
    s = H5Store.in_memory()
    yield s
    s.close()

@pytest.fixture
def work_store():
    """Second in-memory store used as scratch space by the spectral operations."""
    s = H5Store.in_memory(image="work")
    yield s
    s.close()

@pytest.fixture
def disk_path(tmp_path):
    return tmp_path / "scene.h5"

@pytest.fixture
def disk_store(disk_path):
    """HDF5 store on disk, bound to the 'scene' image group."""
    s = H5Store.open(disk_path, image="scene")
    yield s
    s.close()

@pytest.fixture
def raster_factory(store):
    """
    Fixture: Returns a function creating rasters in the test store.

    If 'data' is given (a (ny, nx) array) it is written to the new raster and
    its shape defines the dimensions; otherwise a zero-filled nx by ny raster
    is created.
    """
    def _create(
        name,
        data=None,
        nx=20,
        ny=20,
        raster_type=RasterType.REAL32,
        target_store=None
    ):
        target = target_store if target_store is not None else store
        if data is not None:
            data = np.asarray(data)
            ny, nx = data.shape
        raster = Raster.create(target, name, raster_type, nx, ny)
        if data is not None:
            raster.write((0, 0, nx, ny), data)
        return raster

    return _create

@pytest.fixture
def gradient():
    """A 6x8 float array whose samples encode their position: 100 * row + col."""
    rows, cols = np.mgrid[0:6, 0:8]
    return (100 * rows + cols).astype(np.float32)
