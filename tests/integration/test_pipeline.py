# tests/integration/test_pipeline.py

import numpy as np
import pytest

from geostar import H5Store, Raster, RasterType, StoreConfig
from geostar.raster import SALT_VALUE
from helpers import assert_grid_match, read_all

def test_full_scene_processing_pipeline(disk_path):
    """
    Simulates a standard user workflow on an HDF5 scene file:
    1. Draw: paint a synthetic scene into an 8-bit raster.
    2. Degrade: add salt-and-pepper noise.
    3. Clean: rescale, threshold and filter the noisy scene.
    4. Pyramid: build a Gaussian pyramid, which smooths the scene in place.
    5. Reopen: check everything was persisted.
    """

    # --- 1. DRAW THE SCENE ---
    config = StoreConfig(chunks=(16, 16), compression="gzip", compression_opts=4)
    with H5Store.open(disk_path, image="scene", config=config) as store:
        scene = Raster.create(store, "scene", RasterType.INT8U, 64, 48)
        scene.draw_filled_rectangle([4, 4, 24, 16], 2, 200, 120)
        scene.draw_filled_circle(44, 30, 8, 250)
        scene.draw_line([8, 36, 20, 0], 1, 90)

        pixels = read_all(scene)
        assert pixels[4, 4] == 200
        assert pixels[10, 10] == 120
        assert pixels[30, 44] == 250
        assert pixels[36, 18] == 90

        # --- 2. DEGRADE ---
        noisy = Raster.create(store, "noisy", RasterType.REAL32, 64, 48)
        scene.add_salt_pepper(noisy, 0.05, rng=2024)
        noisy_pixels = read_all(noisy)
        changed = noisy_pixels != pixels
        assert changed.any()
        assert set(np.unique(noisy_pixels[changed]).tolist()) <= {0.0, float(SALT_VALUE)}

        # --- 3. CLEAN ---
        scaled = Raster.create(store, "scaled", RasterType.REAL32, 64, 48)
        noisy.scale(scaled, 0, 0.01)
        assert read_all(scaled).max() <= SALT_VALUE * 0.01

        median_like = Raster.create(store, "midpoint", RasterType.REAL32, 64, 48)
        scene.midpoint_filter(median_like, 3)
        assert_grid_match(scene, median_like)

        thresholded = Raster.create(store, "thresholded", RasterType.INT8U, 64, 48)
        scene.auto_local_thresh(thresholded, 4)
        assert read_all(thresholded).max() == 250

        # --- 4. PYRAMID ---
        levels = scene.gaussian_pyramid(2)
        assert [lvl.dimensions() for lvl in levels] == [(64, 48), (32, 24), (16, 12)]
        smoothed = read_all(scene)
        assert np.all(smoothed <= pixels)
        assert smoothed.max() < pixels.max()
        for level in levels[1:]:
            level.close()

    # --- 5. REOPEN ---
    with H5Store.open(disk_path, image="scene", mode="r") as store:
        assert set(store.names()) >= {
            "scene", "noisy", "scaled", "midpoint", "thresholded",
            "scene_GPyramid1", "scene_GPyramid2"
        }
        reopened = Raster.open(store, "scene")
        assert np.array_equal(read_all(reopened), smoothed)
        assert reopened.element_type is RasterType.INT8U

def test_frequency_filter_with_separate_work_store(disk_path, tmp_path):
    """
    Runs the low-pass filter with scratch rasters kept in a different file,
    then checks that the work file holds nothing afterwards.
    """
    work_path = tmp_path / "work.h5"
    rows, cols = np.mgrid[0:20, 0:20]
    data = (np.sin(cols / 3.0) + np.cos(rows / 5.0) + 2).astype(np.float32)

    with H5Store.open(disk_path) as store, H5Store.open(work_path, image="tmp") as work:
        source = Raster.create(store, "source", RasterType.REAL32, 20, 20)
        source.write((0, 0, 20, 20), data)

        real = Raster.create(store, "spectrum_real", RasterType.REAL32, 20, 20)
        imag = Raster.create(store, "spectrum_imag", RasterType.REAL32, 20, 20)
        out = Raster.create(store, "filtered", RasterType.REAL32, 20, 20)

        source.low_pass_filter(work, real, imag, out)

        assert work.names() == []
        assert np.all(read_all(real)[4:8, 4:8] == 0)
        filtered = read_all(out)
        assert filtered.shape == (20, 20)
        assert np.isfinite(filtered).all()

        # Undo the fixed divisor to compare with a normalized inverse
        spectrum = np.fft.fft2(data.astype(np.float64))
        spectrum[4:8, 4:8] = 0
        expected = np.fft.ifft2(spectrum).real
        assert np.allclose(filtered * 200000.0 / 400.0, expected, atol=1e-3)

@pytest.mark.parametrize("raster_type", list(RasterType))
def test_arithmetic_chain_per_type(raster_type):
    with H5Store.in_memory() as store:
        a = Raster.create(store, "a", raster_type, 20, 20)
        a.set((0, 0, 20, 20), 2)

        doubled = a + a
        quadrupled = doubled * 2
        back = quadrupled / a

        assert np.all(read_all(doubled) == 4)
        assert np.all(read_all(quadrupled) == 8)
        assert np.all(read_all(back) == 4)
        assert back.name == "a_PLUS_a_TIMES_val_DIVIDEDBY_a"
        assert back.element_type is raster_type
