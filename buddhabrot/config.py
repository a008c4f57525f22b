"""
Render configuration.

A RenderConfig is fixed before a pass starts and never mutated; animation
frames get a fresh copy via with_exponent().

YAML layout (every key optional except where noted):

    viewport:
      center: "-0.5+0j"      # or top_left + height instead of center
      width: 4.3
      grid_width: 2560
      grid_height: 1440
    channels:
      - {name: red, max_iter: 200}
      - {name: green, max_iter: 100}
      - {name: blue, max_iter: 50}
    workers: 8               # default: os.cpu_count()
    samples_per_worker: 1000000
    exponent: 2.0
    batch_size: 4096
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

import yaml

from buddhabrot.utils import parse_complex
from buddhabrot.viewport import Viewport


@dataclass(frozen=True)
class Channel:
    name: str
    max_iter: int

    def __post_init__(self):
        cap = self.max_iter
        if isinstance(cap, bool) or not isinstance(cap, (int, float)) or not math.isfinite(cap) \
                or int(cap) != cap or cap < 1:
            raise ValueError(f"Channel {self.name!r}: max_iter must be a positive integer, got {cap!r}")
        object.__setattr__(self, "max_iter", int(cap))


DEFAULT_CHANNELS: Tuple[Channel, ...] = (
    Channel("red", 200),
    Channel("green", 100),
    Channel("blue", 50),
)


def default_viewport(grid_width: int = 2560, grid_height: int = 1440) -> Viewport:
    """Plane width 4.3, panned 0.5 left so the whole figure fits a 16:9 frame."""
    return Viewport.centered(complex(-0.5, 0.0), 4.3, grid_width, grid_height)


@dataclass(frozen=True)
class RenderConfig:
    viewport: Viewport = field(default_factory=default_viewport)
    channels: Tuple[Channel, ...] = DEFAULT_CHANNELS
    workers: Optional[int] = None
    samples_per_worker: int = 1_000_000
    exponent: float = 2.0
    batch_size: int = 4096

    def __post_init__(self):
        object.__setattr__(self, "channels", tuple(self.channels))
        if not self.channels:
            raise ValueError("At least one channel is required")
        names = [ch.name for ch in self.channels]
        if len(set(names)) != len(names):
            raise ValueError(f"Channel names must be unique, got {names}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.samples_per_worker < 0:
            raise ValueError(f"samples_per_worker must be >= 0, got {self.samples_per_worker}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if not self.exponent > 0:
            raise ValueError(f"exponent must be > 0, got {self.exponent}")

    @property
    def max_iter(self) -> int:
        return max(ch.max_iter for ch in self.channels)

    @property
    def worker_count(self) -> int:
        return self.workers if self.workers is not None else (os.cpu_count() or 1)

    @property
    def total_samples(self) -> int:
        return self.worker_count * self.samples_per_worker

    def with_exponent(self, exponent: float) -> "RenderConfig":
        return replace(self, exponent=float(exponent))


def _parse_viewport(vp: dict) -> Viewport:
    if not isinstance(vp, dict):
        raise ValueError(f"viewport must be a mapping, got {type(vp).__name__}")

    try:
        width = float(vp.get("width", 4.3))
        grid_width = int(vp.get("grid_width", 2560))
        grid_height = int(vp.get("grid_height", 1440))
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Bad viewport settings: {vp}") from e

    if "top_left" in vp:
        top_left = parse_complex(str(vp["top_left"]))
        height = float(vp.get("height", width * grid_height / grid_width))
        return Viewport(top_left, width, height, grid_width, grid_height)

    center = parse_complex(str(vp.get("center", "-0.5+0j")))
    return Viewport.centered(center, width, grid_width, grid_height)


def _parse_channels(raw) -> Tuple[Channel, ...]:
    if raw is None:
        return DEFAULT_CHANNELS
    if not isinstance(raw, list):
        raise ValueError(f"channels must be a list, got {type(raw).__name__}")

    channels = []
    for entry in raw:
        if not isinstance(entry, dict) or "max_iter" not in entry:
            raise ValueError(f"Each channel needs a max_iter: {entry}")
        channels.append(Channel(str(entry.get("name", f"channel{len(channels)}")), entry["max_iter"]))
    return tuple(channels)


def config_from_dict(cfg: dict) -> RenderConfig:
    cfg = cfg or {}

    workers = cfg.get("workers", None)
    try:
        workers = int(workers) if workers is not None else None
        samples_per_worker = int(cfg.get("samples_per_worker", 1_000_000))
        exponent = float(cfg.get("exponent", 2.0))
        batch_size = int(cfg.get("batch_size", 4096))
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Bad render settings: {e}") from e

    return RenderConfig(
        viewport=_parse_viewport(cfg.get("viewport", {}) or {}),
        channels=_parse_channels(cfg.get("channels")),
        workers=workers,
        samples_per_worker=samples_per_worker,
        exponent=exponent,
        batch_size=batch_size,
    )


def load_config(path: str | Path) -> RenderConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, "r") as f:
        cfg = yaml.safe_load(f)

    if cfg is not None and not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a mapping at the top level")
    return config_from_dict(cfg)
