import numpy as np
import pytest

from chrome_paint.color import BLACK, LIGHT_GRAY, TRANSPARENT, Color


def test_from_hex_rgb_is_opaque():
    assert Color.from_hex("#D3D3D3") == LIGHT_GRAY
    assert Color.from_hex("000000") == BLACK


def test_from_hex_argb():
    c = Color.from_hex("#80FF0010")
    assert c == Color(0x80, 0xFF, 0x00, 0x10)
    assert c.to_hex() == "#80FF0010"
    assert Color.from_int(c.to_argb()) == c


@pytest.mark.parametrize("text", ["", "#12345", "#GG0000", "red"])
def test_from_hex_rejects_garbage(text):
    with pytest.raises(ValueError):
        Color.from_hex(text)


def test_from_argb_validates_channels():
    with pytest.raises(ValueError):
        Color.from_argb(255, 256, 0, 0)
    with pytest.raises(ValueError):
        Color.from_rgb(0, -1, 0)
    with pytest.raises(ValueError):
        Color.from_rgb(0.5, 0, 0)
    assert Color.from_rgb(np.uint8(7), 0, 0) == Color(255, 7, 0, 0)


def test_transparent_constant():
    assert TRANSPARENT.a == 0
    assert TRANSPARENT.opaque() == Color(255, 255, 255, 255)


def test_equality_is_exact_and_hashable():
    a = Color(0, 10, 20, 30)
    b = Color(255, 10, 20, 30)
    assert a != b
    assert a.opaque() == b
    assert len({a, b, Color(0, 10, 20, 30)}) == 2
