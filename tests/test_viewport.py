import numpy as np
import pytest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from buddhabrot.viewport import Viewport


@pytest.fixture
def vp():
    # left=-2, top=2, 0.4 plane units per pixel
    return Viewport.centered(0j, 4.0, 10, 10)


def test_centered_geometry(vp):
    assert vp.left == pytest.approx(-2.0)
    assert vp.top == pytest.approx(2.0)
    assert vp.height == pytest.approx(4.0)
    assert vp.pixel_width == pytest.approx(0.4)
    assert vp.pixel_height == vp.pixel_width


def test_centered_takes_height_from_aspect():
    vp = Viewport.centered(-0.5 + 0j, 4.3, 2560, 1440)
    assert vp.height == pytest.approx(4.3 * 1440 / 2560)
    assert vp.left == pytest.approx(-2.65)


def test_rejects_non_square_pixels():
    with pytest.raises(ValueError):
        Viewport(-2 + 2j, 4.0, 3.0, 10, 10)


@pytest.mark.parametrize("gw, gh", [(0, 10), (10, -1), (2.5, 10)])
def test_rejects_bad_grid(gw, gh):
    with pytest.raises(ValueError):
        Viewport(-2 + 2j, 4.0, 4.0, gw, gh)


def test_top_left_corner_is_pixel_zero(vp):
    assert vp.map_to_pixel(-2 + 2j) == (0, 0)


def test_vertical_axis_is_inverted(vp):
    x, y_hi = vp.map_to_pixel(0.1 + 1.9j)
    _, y_lo = vp.map_to_pixel(0.1 - 1.9j)
    assert y_hi == 0
    assert y_lo == 9
    assert x == 5


@pytest.mark.parametrize("c", [
    2.0 + 0j,          # right edge is open
    0.0 - 2.0j,        # bottom edge is open
    -2.0001 + 0j,
    0.0 + 2.0001j,
    5 + 5j,
    -10 - 10j,
])
def test_outside_points_map_to_none(vp, c):
    assert vp.map_to_pixel(c) is None


def test_outside_random_points_map_to_none(vp):
    rng = np.random.default_rng()
    re = rng.uniform(2.0, 10.0, 200) * rng.choice([-1, 1], 200)
    im = rng.uniform(-10.0, 10.0, 200)
    for c in re + 1j * im:
        if c.real < -2.0 or c.real >= 2.0:
            assert vp.map_to_pixel(c) is None


def test_grid_lines_stay_in_range():
    """Every pixel boundary inside the viewport maps into the grid."""
    vp = Viewport.centered(-0.5 + 0.1j, 4.3, 37, 23)
    xs_line = vp.left + np.arange(vp.grid_width + 1) * vp.pixel_width
    ys_line = vp.top - np.arange(vp.grid_height + 1) * vp.pixel_height
    for re in xs_line:
        for im in ys_line:
            px = vp.map_to_pixel(complex(re, im))
            if px is None:
                continue
            x, y = px
            assert 0 <= x < vp.grid_width
            assert 0 <= y < vp.grid_height


def test_vectorized_matches_scalar(vp):
    rng = np.random.default_rng()
    pts = rng.uniform(-3, 3, 500) + 1j * rng.uniform(-3, 3, 500)
    xs, ys, inside = vp.map_to_pixels(pts)

    expected = [vp.map_to_pixel(c) for c in pts]
    np.testing.assert_array_equal(inside, [e is not None for e in expected])
    assert list(zip(xs.tolist(), ys.tolist())) == [e for e in expected if e is not None]


def test_samples_fall_inside(vp):
    rng = np.random.default_rng()
    cs = vp.sample(rng, 1000)
    _, _, inside = vp.map_to_pixels(cs)
    assert inside.all()
