"""
One accumulation pass: spread the sample budget over a pool of workers.

Each worker draws uniform samples in the viewport, iterates them in
batches, and composites the escaped orbits into a histogram. Two
backends:

    "process"  ProcessPoolExecutor. Every worker fills its own
               DensityHistogram; the parent merges them after the join.
    "thread"   ThreadPoolExecutor. Workers write into one shared
               ShardedHistogram, reduced after the join.

Either way the only sync point is the join, and a worker exception
aborts the whole pass.
"""

from __future__ import annotations

import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from buddhabrot.compositor import composite_batch
from buddhabrot.config import Channel, RenderConfig
from buddhabrot.histogram import DensityHistogram, ShardedHistogram
from buddhabrot.iterators import iterate_batch
from buddhabrot.viewport import Viewport

BACKENDS = ("process", "thread")

# cap on complex values held in one batch history (max_iter x batch), 64 MB
HISTORY_BUDGET = 1 << 22


@dataclass(frozen=True)
class WorkerTask:
    worker_id: int
    viewport: Viewport
    channels: Tuple[Channel, ...]
    exponent: float
    samples: int
    batch_size: int = 4096


@dataclass
class WorkerResult:
    worker_id: int
    samples: int
    escaped: int
    histogram: Optional[DensityHistogram] = None


@dataclass
class PassResult:
    histogram: DensityHistogram
    samples: int
    escaped: int
    seconds: float
    workers: int


def batch_length(batch_size: int, max_iter: int, budget: int = HISTORY_BUDGET) -> int:
    """Samples per batch so a (max_iter, n) history stays within budget."""
    return max(1, min(batch_size, budget // max_iter))


def sample_worker(task: WorkerTask, histogram=None) -> WorkerResult:
    """
    Run task.samples samples and composite the escaped ones.

    If `histogram` is given (shared accumulator) hits go there and the
    result carries no histogram; otherwise a local one is returned.
    """
    vp = task.viewport
    local = None
    if histogram is None:
        local = DensityHistogram(len(task.channels), vp.grid_height, vp.grid_width)
        histogram = local

    rng = np.random.default_rng()
    max_iter = max(ch.max_iter for ch in task.channels)
    batch = batch_length(task.batch_size, max_iter)

    done = 0
    escaped_total = 0
    while done < task.samples:
        n = min(batch, task.samples - done)
        cs = vp.sample(rng, n)

        history, lengths, escaped = iterate_batch(cs, task.exponent, max_iter)
        composite_batch(history, lengths, escaped, task.channels, vp, histogram)

        escaped_total += int(escaped.sum())
        done += n

    return WorkerResult(task.worker_id, done, escaped_total, local)


def make_tasks(config: RenderConfig, exponent: Optional[float] = None):
    p = config.exponent if exponent is None else float(exponent)
    if not p > 0:
        raise ValueError(f"exponent must be > 0, got {p}")
    return [
        WorkerTask(
            worker_id=i,
            viewport=config.viewport,
            channels=config.channels,
            exponent=p,
            samples=config.samples_per_worker,
            batch_size=config.batch_size,
        )
        for i in range(config.worker_count)
    ]


def run_pass(
    config: RenderConfig,
    exponent: Optional[float] = None,
    backend: str = "process",
    verbose: bool = False,
    worker: Callable[..., WorkerResult] = sample_worker,
) -> PassResult:
    """
    Run every worker to completion and return the combined histogram.

    `worker` must be a module-level function for the process backend.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend}")

    tasks = make_tasks(config, exponent)
    vp = config.viewport
    shape = (len(config.channels), vp.grid_height, vp.grid_width)
    start = time.time()

    if backend == "process":
        total = DensityHistogram(*shape)
        with ProcessPoolExecutor(max_workers=len(tasks)) as pool:
            futures = [pool.submit(worker, t) for t in tasks]
            results = []
            # merge as workers finish so only one local grid is held at a time;
            # result() re-raises a worker's exception here
            for f in as_completed(futures):
                r = f.result()
                total.merge(r.histogram)
                r.histogram = None
                results.append(r)
    else:
        shared = ShardedHistogram(*shape)
        with ThreadPoolExecutor(max_workers=len(tasks)) as pool:
            futures = [pool.submit(worker, t, shared) for t in tasks]
            results = [f.result() for f in futures]
        total = shared.reduce()

    elapsed = time.time() - start

    if verbose:
        for r in results:
            print(f"[worker {r.worker_id}] finished ({r.samples} samples, {r.escaped} escaped)")
        print(f"[pass] {len(results)} workers, exponent={tasks[0].exponent}, "
              f"{elapsed:.2f}s, max counts={total.max_counts()}")

    return PassResult(
        histogram=total,
        samples=sum(r.samples for r in results),
        escaped=sum(r.escaped for r in results),
        seconds=elapsed,
        workers=len(results),
    )
