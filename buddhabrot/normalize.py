from typing import List

import numpy as np

from buddhabrot.histogram import DensityHistogram


def normalize_channel(counts: np.ndarray) -> np.ndarray:
    """
    Linearly rescale raw counts to 0..255 (max count -> 255).

    An all-zero channel stays all zero. Returns a new read-only uint8 array.
    """
    counts = np.asarray(counts)
    peak = counts.max() if counts.size else 0

    if peak == 0:
        out = np.zeros(counts.shape, dtype=np.uint8)
    else:
        scaled = np.rint(counts.astype(np.float64) / float(peak) * 255.0)
        out = scaled.clip(0, 255).astype(np.uint8)

    out.flags.writeable = False
    return out


def normalize_histogram(histogram: DensityHistogram) -> List[np.ndarray]:
    return [normalize_channel(histogram.channel(i)) for i in range(histogram.n_channels)]
