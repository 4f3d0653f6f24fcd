import numpy as np
import pytest
from PIL import Image

from conftest import gradient_image
from slide_restore.domain.models.region_model import Region
from slide_restore.infrastructure.imaging.compositor_service import PillowCompositorService, changed_mask


@pytest.fixture
def compositor(logger):
    return PillowCompositorService(logger)


@pytest.fixture
def nearest(logger):
    return PillowCompositorService(logger, resample=Image.Resampling.NEAREST)


def region_mask(size, regions):
    width, height = size
    mask = np.zeros((height, width), dtype=bool)
    for left, top, right, bottom in regions:
        mask[top:bottom, left:right] = True
    return mask


def test_no_regions_returns_identical_copy(compositor):
    source = gradient_image()
    model = Image.new("RGB", (200, 100), "red")

    result = compositor.composite(source, model, [])

    assert result is not source
    assert result.size == source.size
    assert not changed_mask(source, result).any()


@pytest.mark.parametrize("model_size", [(80, 60), (160, 120), (100, 37), (40, 90)])
def test_only_region_pixels_change(compositor, model_size):
    source = gradient_image(80, 60)
    model = Image.new("RGB", model_size, (0, 200, 0))
    regions = [Region(1, 10, 5, 20, 15), Region(2, 50.5, 30.2, 10.3, 12.9)]

    result = compositor.composite(source, model, regions)

    assert result.size == source.size
    changed = changed_mask(source, result)
    allowed = region_mask(source.size, [(10, 5, 30, 20), (50, 30, 61, 44)])
    assert not (changed & ~allowed).any()
    assert changed[5:20, 10:30].all()


def test_patch_comes_from_scaled_model_rectangle(nearest):
    source = Image.new("RGB", (100, 100), "white")
    model = Image.new("RGB", (200, 200), "white")
    # Blue block in the model exactly where the region maps to at 2x
    model.paste((0, 0, 255), (40, 40, 80, 80))

    result = nearest.composite(source, model, [Region(1, 20, 20, 20, 20)])

    patch = np.asarray(result)[20:40, 20:40]
    assert (patch == [0, 0, 255]).all()
    assert result.getpixel((10, 10)) == (255, 255, 255)


def test_overlapping_regions_take_model_pixels(nearest):
    source = Image.new("RGB", (100, 50), "white")
    model = Image.new("RGB", (200, 100), (255, 0, 0))
    model.paste((0, 0, 255), (100, 0, 200, 100))
    first = Region(1, 10, 10, 30, 30)
    second = Region(2, 30, 10, 30, 30)

    result = nearest.composite(source, model, [first, second])
    swapped = nearest.composite(source, model, [second, first])

    assert result.getpixel((35, 20)) == (255, 0, 0)
    assert result.getpixel((55, 20)) == (0, 0, 255)
    assert not changed_mask(result, swapped).any()
    assert result.getpixel((70, 20)) == (255, 255, 255)


def test_empty_region_is_skipped(compositor):
    source = gradient_image()
    model = Image.new("RGB", source.size, "black")

    result = compositor.composite(source, model, [Region(1, 10, 10, 0, 0)])

    assert not changed_mask(source, result).any()


def test_mode_of_source_is_kept(nearest):
    source = gradient_image(mode="RGBA")
    model = Image.new("RGB", (40, 30), "black")

    result = nearest.composite(source, model, [Region(1, 0, 0, 10, 10)])

    assert result.mode == "RGBA"
    assert result.getpixel((5, 5)) == (0, 0, 0, 255)


def test_changed_mask_requires_same_size():
    with pytest.raises(ValueError):
        changed_mask(Image.new("RGB", (2, 2)), Image.new("RGB", (3, 3)))
