"""
Exponent sweeps: render z -> z^p + c for a sequence of p, one frame each.

Every frame is an independent pass; nothing carries over between frames.
Frames are written as frame_00000.png, frame_00001.png, ... next to a
frame_stats.csv, and can be stitched into a video with ffmpeg.
"""

from __future__ import annotations

import shutil
import subprocess
import time
from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd

from buddhabrot.config import RenderConfig
from buddhabrot.render import render_frame, save_image

FRAME_GLOB = "frame_*.png"
STATS_FILE = "frame_stats.csv"


def exponent_schedule(start: float, end: float, frames: int) -> np.ndarray:
    if frames < 1:
        raise ValueError(f"frames must be >= 1, got {frames}")
    return np.linspace(start, end, frames)


def frame_path(out_dir: str | Path, index: int) -> Path:
    return Path(out_dir) / f"frame_{index:05d}.png"


def render_animation(
    config: RenderConfig,
    exponents: Sequence[float],
    out_dir: str | Path,
    backend: str = "process",
    verbose: bool = False,
) -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    names = [ch.name for ch in config.channels]
    rows = []
    paths = []

    for i, p in enumerate(exponents):
        t0 = time.time()
        frame = render_frame(config, exponent=float(p), backend=backend)
        path = save_image(frame.rgb, frame_path(out_dir, i))
        paths.append(path)

        row = {
            "frame": i,
            "exponent": float(p),
            "samples": frame.result.samples,
            "escaped": frame.result.escaped,
            "seconds": time.time() - t0,
        }
        for name, m in zip(names, frame.result.histogram.max_counts()):
            row[f"max_{name}"] = m
        rows.append(row)

        if verbose:
            print(f"[frame {i}] p={float(p):.4f} -> {path.name} ({row['seconds']:.2f}s)")

    pd.DataFrame(rows).to_csv(out_dir / STATS_FILE, index=False)
    return paths


def assemble_video(
    frames_dir: str | Path,
    out_path: str | Path,
    framerate: int = 60,
    bitrate: int = 5_000_000,
) -> Path:
    """Stitch frame_*.png into a video with ffmpeg."""
    if shutil.which("ffmpeg") is None:
        raise FileNotFoundError("ffmpeg not found on PATH")

    frames_dir = Path(frames_dir)
    out_path = Path(out_path).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg", "-y",
        "-framerate", str(framerate),
        "-pattern_type", "glob",
        "-i", FRAME_GLOB,
        "-b:v", str(bitrate),
        str(out_path),
    ]
    subprocess.run(cmd, cwd=str(frames_dir), check=True)
    return out_path
