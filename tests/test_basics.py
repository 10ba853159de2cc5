# tests/test_basics.py
import numpy as np

import geostar
from geostar import H5Store, Raster, RasterType, Slice
from geostar.exceptions import ParameterError, RasterError, RasterValidationError

def test_imports():
    """Simple smoke test to ensure modules import correctly."""
    assert geostar.__version__
    assert Raster is not None
    assert H5Store is not None

def test_exception_hierarchy():
    from geostar import exceptions

    assert issubclass(exceptions.SliceOutOfBoundsError, exceptions.SliceSizeError)
    assert issubclass(exceptions.IntegerParameterError, ParameterError)
    assert issubclass(exceptions.PartitionError, ValueError)
    assert issubclass(exceptions.DivideByZeroError, ZeroDivisionError)
    assert issubclass(ParameterError, RasterValidationError)
    for name in exceptions.__all__:
        assert issubclass(getattr(exceptions, name), RasterError)

def test_quick_session():
    """
    Test: create a raster in memory, write a block, read it back.
    """
    with H5Store.in_memory() as store:
        raster = Raster.create(store, "band", RasterType.REAL32, 8, 8)
        raster.write(Slice(2, 2, 2, 2), np.full(4, 1.5))
        assert raster.read(Slice(0, 0, 8, 8)).sum() == 6.0
