# src/geostar/raster/spectral.py

"""
This module implements the frequency-domain operations on rasters.

The 2D discrete Fourier transform is decomposed into 1D transforms along
rows and then along columns (the inverse runs columns first). Intermediate
complex results are staged in two auxiliary REAL32 rasters in a work store
so that only one row or column is ever held in memory.
"""

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional, Tuple

import numpy as np
from scipy import fft

from .slices import Slice, iter_columns, iter_rows
from .types import RasterType
from .utils import require_same_dimensions, unique_name

if TYPE_CHECKING:
    from geostar.store.base import RasterStore
    from .layer import Raster

log = logging.getLogger(__name__)

__all__ = [
    "INVERSE_FFT_SCALE",
    "fft_2d",
    "fft_2d_inv",
    "low_pass_filter",
    "notch_slice"
]

# Divisor applied to the inverse transform output; existing products depend on it
INVERSE_FFT_SCALE = 200000.0

@contextmanager
def _work_rasters(
    raster: 'Raster',
    work_store: Optional['RasterStore'],
    label: str
) -> Iterator[Tuple['Raster', 'Raster']]:
    """
    Create a real/imaginary pair of scratch rasters shaped like 'raster'.

    Both are closed and deleted from the work store on exit, also when the
    transform fails.
    """
    store = work_store if work_store is not None else raster.store
    factory = type(raster)
    created = []
    try:
        for part in ("Real", "Imag"):
            name = unique_name(store, f"{raster.name}_{label}{part}")
            created.append(factory.create(store, name, RasterType.REAL32, raster.nx, raster.ny))
        yield created[0], created[1]
    finally:
        for aux in created:
            aux.close()
            store.delete(aux.name)
        log.debug(f"Discarded {len(created)} {label} work rasters")

def fft_2d(
    raster: 'Raster',
    out_real: 'Raster',
    out_imag: 'Raster',
    work_store: Optional['RasterStore'] = None
):
    """
    Forward 2D DFT of 'raster'.

    Args:
        raster: Real-valued input.
        out_real: Receives the real part of the spectrum.
        out_imag: Receives the imaginary part of the spectrum.
        work_store: Store for the scratch rasters. Defaults to the raster's store.

    Raises:
        RasterSizeError: If either output differs in dimensions from the input.
    """
    require_same_dimensions(raster, out_real, out_imag)
    nx, ny = raster.dimensions()
    log.info(f"Forward FFT of '{raster.name}' ({nx}x{ny})")

    with _work_rasters(raster, work_store, "Buffer") as (buf_real, buf_imag):
        for row in iter_rows(nx, ny):
            spectrum = fft.fft(raster.read(row, dtype=np.float64).reshape(-1))
            buf_real.write(row, spectrum.real)
            buf_imag.write(row, spectrum.imag)

        for col in iter_columns(nx, ny):
            column = buf_real.read(col, dtype=np.float64) + 1j * buf_imag.read(col, dtype=np.float64)
            spectrum = fft.fft(column.reshape(-1))
            out_real.write(col, spectrum.real)
            out_imag.write(col, spectrum.imag)

def fft_2d_inv(
    raster: 'Raster',
    output: 'Raster',
    in_imag: 'Raster',
    work_store: Optional['RasterStore'] = None,
    scale: float = INVERSE_FFT_SCALE
):
    """
    Inverse 2D DFT of the spectrum whose real part is 'raster'.

    The backward transforms are unnormalized; the real part of the result is
    divided by 'scale'. Pass scale=nx*ny for the mathematically normalized inverse.

    Args:
        raster: Real part of the spectrum.
        output: Receives the real part of the inverse transform.
        in_imag: Imaginary part of the spectrum.
        work_store: Store for the scratch rasters. Defaults to the raster's store.
        scale: Divisor applied to the output.

    Raises:
        RasterSizeError: If dimensions differ.
    """
    require_same_dimensions(raster, output, in_imag)
    nx, ny = raster.dimensions()
    log.info(f"Inverse FFT of '{raster.name}' ({nx}x{ny}), scale 1/{scale:g}")

    with _work_rasters(raster, work_store, "BufferInv") as (buf_real, buf_imag):
        for col in iter_columns(nx, ny):
            column = raster.read(col, dtype=np.float64) + 1j * in_imag.read(col, dtype=np.float64)
            signal = fft.ifft(column.reshape(-1), norm="forward")
            buf_real.write(col, signal.real)
            buf_imag.write(col, signal.imag)

        for row in iter_rows(nx, ny):
            line = buf_real.read(row, dtype=np.float64) + 1j * buf_imag.read(row, dtype=np.float64)
            signal = fft.ifft(line.reshape(-1), norm="forward")
            output.write(row, signal.real / scale)

def notch_slice(nx: int, ny: int) -> Optional[Slice]:
    """
    Region zeroed by the low-pass filter: a square of side nx // 5 at (nx // 5, nx // 5).

    Returns None when the raster is too narrow for a non-empty region.

    Raises:
        SliceOutOfBoundsError: If the region does not fit inside (nx, ny).
    """
    width = nx // 5
    if width == 0:
        return None
    return Slice(width, width, width, width).check_bounds(nx, ny)

def low_pass_filter(
    raster: 'Raster',
    buf_real: 'Raster',
    buf_imag: 'Raster',
    output: 'Raster',
    work_store: Optional['RasterStore'] = None
):
    """
    Frequency-domain filter: forward transform, zero the notch region, inverse transform.

    Args:
        raster: Input.
        buf_real: Receives (and keeps) the filtered real spectrum.
        buf_imag: Receives (and keeps) the filtered imaginary spectrum.
        output: Filtered result.
        work_store: Store for the scratch rasters.

    Raises:
        RasterSizeError: If any raster differs in dimensions from the input.
        SliceOutOfBoundsError: If the notch region does not fit the raster.
    """
    require_same_dimensions(raster, buf_real, buf_imag, output)
    notch = notch_slice(raster.nx, raster.ny)

    fft_2d(raster, buf_real, buf_imag, work_store=work_store)

    if notch is None:
        log.warning(f"'{raster.name}' is narrower than 5 samples; no frequencies removed")
    else:
        buf_real.set(notch, 0)
        buf_imag.set(notch, 0)

    fft_2d_inv(buf_real, output, buf_imag, work_store=work_store)
