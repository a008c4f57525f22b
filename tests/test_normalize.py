import numpy as np
import pytest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from buddhabrot.histogram import DensityHistogram
from buddhabrot.normalize import normalize_channel, normalize_histogram


def test_max_maps_to_255():
    counts = np.array([[0, 3], [7, 12]], dtype=np.uint64)
    out = normalize_channel(counts)
    assert out.dtype == np.uint8
    assert out[1, 1] == 255
    assert out[0, 0] == 0
    assert out[0, 1] == round(3 / 12 * 255)


def test_linear_rounding():
    out = normalize_channel(np.array([0, 1, 2], dtype=np.uint64))
    np.testing.assert_array_equal(out, [0, 128, 255])


def test_all_zero_channel_stays_zero():
    out = normalize_channel(np.zeros((4, 6), dtype=np.uint64))
    assert out.shape == (4, 6)
    assert not out.any()


def test_output_is_new_and_read_only():
    counts = np.array([[1, 2]], dtype=np.uint64)
    out = normalize_channel(counts)
    np.testing.assert_array_equal(counts, [[1, 2]])
    with pytest.raises(ValueError):
        out[0, 0] = 5


def test_channels_normalized_independently():
    hist = DensityHistogram(2, 2, 2)
    hist.counts[0] = [[1, 2], [3, 4]]
    out = normalize_histogram(hist)
    assert len(out) == 2
    assert out[0].max() == 255
    assert out[1].max() == 0
