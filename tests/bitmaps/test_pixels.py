import numpy as np
import pytest
from PIL import Image

from chrome_paint import pixels


def test_rgba_array_from_gray_and_rgb():
    gray = np.array([[0, 128]], dtype=np.uint8)
    out = pixels.to_rgba_array(gray)
    assert out.shape == (1, 2, 4)
    assert tuple(out[0, 1]) == (128, 128, 128, 255)

    rgb = np.array([[[1, 2, 3]]], dtype=np.uint8)
    assert tuple(pixels.to_rgba_array(rgb)[0, 0]) == (1, 2, 3, 255)


def test_rgba_array_is_a_copy():
    arr = np.zeros((1, 1, 4), dtype=np.uint8)
    out = pixels.to_rgba_array(arr)
    out[0, 0, 0] = 9
    assert arr[0, 0, 0] == 0


def test_bool_array_expands_to_white():
    out = pixels.to_rgba_array(np.array([[True, False]]))
    assert tuple(out[0, 0]) == (255, 255, 255, 255)
    assert tuple(out[0, 1]) == (0, 0, 0, 255)


@pytest.mark.parametrize(
    "arr",
    [
        np.zeros((2, 2), dtype=np.float32),
        np.zeros((2, 2, 2), dtype=np.uint8),
        np.zeros((2,), dtype=np.uint8),
    ],
)
def test_unsupported_arrays(arr):
    with pytest.raises(ValueError):
        pixels.to_rgba_array(arr)


def test_unsupported_type():
    with pytest.raises(ValueError):
        pixels.to_rgba_array("not an image")
    with pytest.raises(ValueError):
        pixels.image_size(object())


def test_none_rejected():
    with pytest.raises(ValueError, match="must not be None"):
        pixels.to_rgba_array(None)


def test_pil_image_conversion():
    img = Image.new("RGBA", (2, 1), (10, 20, 30, 40))
    out = pixels.to_rgba_array(img)
    assert out.shape == (1, 2, 4)
    assert tuple(out[0, 0]) == (10, 20, 30, 40)
    assert pixels.image_size(img) == (2, 1)


@pytest.mark.parametrize(
    "mode, bpp, indexed, has_alpha",
    [
        ("1", 1, True, False),
        ("L", 8, False, False),
        ("RGB", 24, False, False),
        ("RGBA", 32, False, True),
    ],
)
def test_pixel_format_of_pil_modes(mode, bpp, indexed, has_alpha):
    fmt = pixels.pixel_format(Image.new(mode, (1, 1)))
    assert fmt.bits_per_pixel == bpp
    assert fmt.indexed is indexed
    assert fmt.has_alpha is has_alpha


def test_mono_bits_only_for_one_bit_sources():
    assert pixels.to_mono_bits(Image.new("RGB", (1, 1))) is None
    assert pixels.to_mono_bits(np.zeros((1, 1), dtype=np.uint8)) is None
    bits = pixels.to_mono_bits(Image.new("1", (2, 1), 1))
    np.testing.assert_array_equal(bits, [[True, True]])
