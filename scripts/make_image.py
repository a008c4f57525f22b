"""
Render a single Buddhabrot still.

Run:
    python scripts/make_image.py --outfile figures/buddhabrot.png
    python scripts/make_image.py --config configs/default.yaml --outfile figures/b.png --plot figures/b_density.png
    python scripts/make_image.py --grid-width 800 --grid-height 600 --samples 200000 --caps 500 100 20 --outfile figures/small.png
"""

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path

# Ensure repository root is on sys.path so `from buddhabrot...` works when running
# this script directly (e.g. `python scripts/make_image.py`).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from buddhabrot.config import Channel, RenderConfig, load_config
from buddhabrot.dispatcher import BACKENDS
from buddhabrot.render import render_frame, save_density_plot, save_image
from buddhabrot.utils import parse_complex
from buddhabrot.viewport import Viewport

CHANNEL_NAMES = ("red", "green", "blue")


def build_config(args) -> RenderConfig:
    cfg = load_config(args.config) if args.config else RenderConfig()

    vp = cfg.viewport
    if any(v is not None for v in (args.center, args.width, args.grid_width, args.grid_height)):
        center = parse_complex(args.center) if args.center is not None else \
            complex(vp.left + vp.width / 2.0, vp.top - vp.height / 2.0)
        vp = Viewport.centered(
            center,
            args.width if args.width is not None else vp.width,
            args.grid_width if args.grid_width is not None else vp.grid_width,
            args.grid_height if args.grid_height is not None else vp.grid_height,
        )

    channels = cfg.channels
    if args.caps:
        if len(args.caps) > 3:
            raise ValueError(f"At most 3 channel caps, got {len(args.caps)}")
        channels = tuple(Channel(name, cap) for name, cap in zip(CHANNEL_NAMES, args.caps))

    overrides = dict(viewport=vp, channels=channels)
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.samples is not None:
        overrides["samples_per_worker"] = args.samples
    if args.exponent is not None:
        overrides["exponent"] = args.exponent
    return replace(cfg, **overrides)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=str, default=None, help="YAML render config")
    parser.add_argument("--center", type=str, default=None, help="e.g. '-0.5+0j'")
    parser.add_argument("--width", type=float, default=None, help="plane width")
    parser.add_argument("--grid-width", type=int, default=None)
    parser.add_argument("--grid-height", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--samples", type=int, default=None, help="samples per worker")
    parser.add_argument("--exponent", type=float, default=None)
    parser.add_argument("--caps", type=int, nargs="+", default=None, help="iteration caps for R G B")
    parser.add_argument("--backend", type=str, default="process", choices=BACKENDS)
    parser.add_argument("--outfile", type=str, required=True)
    parser.add_argument("--plot", type=str, default=None, help="also save a raw density plot here")

    args = parser.parse_args()
    cfg = build_config(args)
    out_path = Path(args.outfile)

    vp = cfg.viewport
    print(f"[run] {vp.grid_width}x{vp.grid_height}, caps={[ch.max_iter for ch in cfg.channels]}, "
          f"p={cfg.exponent}, {cfg.worker_count} workers x {cfg.samples_per_worker} samples")

    frame = render_frame(cfg, backend=args.backend, verbose=True)
    save_image(frame.rgb, out_path)
    print(f"[run] saved {out_path}")

    if args.plot:
        save_density_plot(frame.result.histogram, args.plot, names=[ch.name for ch in cfg.channels])
        print(f"[run] density plot saved to {args.plot}")

    print("[run] done.")


if __name__ == "__main__":
    main()
