"""
Channel compositing: which channels an escaped orbit is drawn into.

Each channel has its own iteration cap. An orbit that escapes after L
steps is recorded in every channel with L <= cap, so fast-escaping
orbits light up all channels and slow ones only the deep channels.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from buddhabrot.config import Channel
from buddhabrot.viewport import Viewport


def eligible_channels(length: int, channels: Sequence[Channel]) -> List[int]:
    return [i for i, ch in enumerate(channels) if length <= ch.max_iter]


def composite_trajectory(traj: np.ndarray, channels: Sequence[Channel], viewport: Viewport, histogram):
    """
    Record one escaped trajectory into `histogram`.

    histogram is anything with add_points(channel, xs, ys), i.e. a
    DensityHistogram or a ShardedHistogram.
    """
    length = len(traj)
    targets = eligible_channels(length, channels)
    if not targets:
        return

    for i in targets:
        prefix = traj[:min(length, channels[i].max_iter)]
        xs, ys, _ = viewport.map_to_pixels(prefix)
        histogram.add_points(i, xs, ys)


def composite_batch(
    history: np.ndarray,
    lengths: np.ndarray,
    escaped: np.ndarray,
    channels: Sequence[Channel],
    viewport: Viewport,
    histogram,
):
    """Batched composite_trajectory over the output of iterate_batch."""
    if not escaped.any():
        return

    steps = np.arange(history.shape[0])[:, None]
    within = steps < lengths[None, :]

    for i, ch in enumerate(channels):
        chosen = escaped & (lengths <= ch.max_iter)
        if not chosen.any():
            continue
        mask = within & (steps < ch.max_iter) & chosen[None, :]
        xs, ys, _ = viewport.map_to_pixels(history[mask])
        histogram.add_points(i, xs, ys)
