"""
Per-channel hit-count grids.

Counters are uint64: wrapping a pixel would take ~1.8e19 hits, so no
saturation logic is needed for any realistic sample budget.

Two ways to fill them during a pass:
- DensityHistogram: owned by a single worker, merged with others at
  the join point.
- ShardedHistogram: one object shared by many threads. Each thread
  writes to its own private shard, so increments are never lost and no
  lock is taken; reduce() sums the shards once all workers are done.
"""

from __future__ import annotations

import threading
from typing import Dict, Tuple

import numpy as np

COUNTER_DTYPE = np.uint64


class DensityHistogram:
    def __init__(self, n_channels: int, grid_height: int, grid_width: int):
        if n_channels < 1:
            raise ValueError(f"Need at least one channel, got {n_channels}")
        self.counts = np.zeros((n_channels, grid_height, grid_width), dtype=COUNTER_DTYPE)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.counts.shape

    @property
    def n_channels(self) -> int:
        return self.counts.shape[0]

    def increment(self, channel: int, pixel: Tuple[int, int]):
        x, y = pixel
        self.counts[channel, y, x] += 1

    def add_points(self, channel: int, xs: np.ndarray, ys: np.ndarray):
        """Add one hit per (xs[i], ys[i]); repeated pixels accumulate."""
        if len(xs) == 0:
            return
        _, h, w = self.counts.shape
        flat = np.asarray(ys, dtype=np.int64) * w + np.asarray(xs, dtype=np.int64)
        hits = np.bincount(flat, minlength=h * w).astype(COUNTER_DTYPE)
        self.counts[channel] += hits.reshape(h, w)

    def merge(self, other: "DensityHistogram") -> "DensityHistogram":
        if other.shape != self.shape:
            raise ValueError(f"Cannot merge histogram of shape {other.shape} into {self.shape}")
        self.counts += other.counts
        return self

    def __iadd__(self, other: "DensityHistogram") -> "DensityHistogram":
        return self.merge(other)

    def channel(self, i: int) -> np.ndarray:
        return self.counts[i]

    def max_counts(self):
        return [int(self.counts[i].max()) for i in range(self.n_channels)]

    def total(self) -> int:
        return int(self.counts.sum())


class ShardedHistogram:
    """Thread-shared accumulator: one private DensityHistogram per writer thread."""

    def __init__(self, n_channels: int, grid_height: int, grid_width: int):
        self.shape = (n_channels, grid_height, grid_width)
        # make sure bad shapes fail here, not in the first worker
        DensityHistogram(*self.shape)
        self._shards: Dict[int, DensityHistogram] = {}

    def shard(self) -> DensityHistogram:
        key = threading.get_ident()
        shard = self._shards.get(key)
        if shard is None:
            # dict.setdefault is atomic, so racing threads agree on one shard
            shard = self._shards.setdefault(key, DensityHistogram(*self.shape))
        return shard

    def increment(self, channel: int, pixel: Tuple[int, int]):
        self.shard().increment(channel, pixel)

    def add_points(self, channel: int, xs: np.ndarray, ys: np.ndarray):
        self.shard().add_points(channel, xs, ys)

    @property
    def n_shards(self) -> int:
        return len(self._shards)

    def reduce(self) -> DensityHistogram:
        """Sum all shards. Only call after every writer has finished."""
        total = DensityHistogram(*self.shape)
        for shard in list(self._shards.values()):
            total.merge(shard)
        return total
