"""
Render an exponent sweep (z -> z^p + c with p moving from --start to --end).

Run:
    python -m scripts.animate --config configs/default.yaml --start 2 --end 4 --frames 120 --outdir figures/frames
    python -m scripts.animate --frames 240 --outdir figures/frames --video figures/buddhabrot.mp4

Outputs:
    <outdir>/frame_00000.png ...
    <outdir>/frame_stats.csv
    <video> (only with --video, needs ffmpeg)
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from buddhabrot.animation import assemble_video, exponent_schedule, render_animation
from buddhabrot.config import RenderConfig, load_config
from buddhabrot.dispatcher import BACKENDS


def main():
    parser = argparse.ArgumentParser(description="Render a Buddhabrot exponent sweep")
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--start", type=float, default=2.0)
    parser.add_argument("--end", type=float, default=4.0)
    parser.add_argument("--frames", type=int, default=60)
    parser.add_argument("--outdir", type=str, default="figures/frames")
    parser.add_argument("--backend", type=str, default="process", choices=BACKENDS)
    parser.add_argument("--video", type=str, default=None, help="assemble frames into this video file")
    parser.add_argument("--framerate", type=int, default=60)
    args = parser.parse_args()

    cfg = load_config(args.config) if args.config else RenderConfig()
    exponents = exponent_schedule(args.start, args.end, args.frames)

    print(f"[run] {args.frames} frames, p {args.start} -> {args.end}, saving to {args.outdir}")
    paths = render_animation(cfg, exponents, args.outdir, backend=args.backend, verbose=True)
    print(f"[run] wrote {len(paths)} frames")

    if args.video:
        out = assemble_video(args.outdir, args.video, framerate=args.framerate)
        print(f"[run] video saved to {out}")

    print("[run] done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
