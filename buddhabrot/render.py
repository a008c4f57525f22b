from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from buddhabrot.config import RenderConfig
from buddhabrot.dispatcher import PassResult, run_pass
from buddhabrot.histogram import DensityHistogram
from buddhabrot.normalize import normalize_histogram


@dataclass
class Frame:
    channels: List[np.ndarray]
    rgb: np.ndarray
    result: PassResult


def compose_rgb(channels: Sequence[np.ndarray]) -> np.ndarray:
    """
    Stack normalized 8-bit channels into an (H, W, 3) image.

    One channel -> grayscale; two or three fill R, G, B in order and the
    rest stay black.
    """
    if len(channels) == 0 or len(channels) > 3:
        raise ValueError(f"Can only compose 1 to 3 channels, got {len(channels)}")

    shape = channels[0].shape
    for ch in channels:
        if ch.shape != shape:
            raise ValueError(f"Channel shapes differ: {ch.shape} vs {shape}")

    if len(channels) == 1:
        gray = np.asarray(channels[0], dtype=np.uint8)
        return np.stack([gray, gray, gray], axis=-1)

    planes = [np.asarray(ch, dtype=np.uint8) for ch in channels]
    while len(planes) < 3:
        planes.append(np.zeros(shape, dtype=np.uint8))
    return np.stack(planes, axis=-1)


def render_frame(
    config: RenderConfig,
    exponent: Optional[float] = None,
    backend: str = "process",
    verbose: bool = False,
) -> Frame:
    """Accumulate one pass, then normalize and compose it."""
    result = run_pass(config, exponent=exponent, backend=backend, verbose=verbose)
    channels = normalize_histogram(result.histogram)
    return Frame(channels=channels, rgb=compose_rgb(channels), result=result)


def save_image(rgb: np.ndarray, path: str | Path) -> Path:
    from PIL import Image

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8)).save(path)
    return path


def save_density_plot(histogram: DensityHistogram, path: str | Path, names: Optional[Sequence[str]] = None) -> Path:
    """Raw counts per channel on a log scale, one panel each."""
    from matplotlib.figure import Figure

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n = histogram.n_channels
    if names is None:
        names = [f"channel {i}" for i in range(n)]

    # no pyplot: the caller's matplotlib backend is left alone
    fig = Figure(figsize=(5 * n, 4))
    axes = fig.subplots(1, n, squeeze=False)
    for i, ax in enumerate(axes[0]):
        im = ax.imshow(np.log1p(histogram.channel(i).astype(np.float64)), cmap="magma")
        ax.set_title(f"{names[i]} (max {int(histogram.channel(i).max())})")
        ax.set_xlabel("x [px]")
        ax.set_ylabel("y [px]")
        fig.colorbar(im, ax=ax, label="log(1 + hits)")

    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")
    return path
