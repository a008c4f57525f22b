"""
Viewport: a rectangle of the complex plane laid over a pixel grid.

Pixel rows grow downwards, so row 0 is the top edge (largest imaginary
part), matching image coordinates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Viewport:
    top_left: complex
    width: float
    height: float
    grid_width: int
    grid_height: int

    def __post_init__(self):
        for name in ("grid_width", "grid_height"):
            v = getattr(self, name)
            if not isinstance(v, (int, np.integer)) or isinstance(v, bool) or v < 1:
                raise ValueError(f"{name} must be a positive integer, got {v!r}")
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Plane size must be positive, got {self.width} x {self.height}")
        if not math.isclose(self.width / self.grid_width, self.height / self.grid_height, rel_tol=1e-9):
            raise ValueError(
                "Pixels must be square: "
                f"{self.width}/{self.grid_width} != {self.height}/{self.grid_height}"
            )
        object.__setattr__(self, "top_left", complex(self.top_left))

    @classmethod
    def centered(cls, center: complex, width: float, grid_width: int, grid_height: int) -> "Viewport":
        """Build a viewport around `center`, height taken from the grid aspect ratio."""
        if grid_width < 1 or grid_height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {grid_width}x{grid_height}")
        height = width * grid_height / grid_width
        center = complex(center)
        top_left = complex(center.real - width / 2.0, center.imag + height / 2.0)
        return cls(top_left, width, height, grid_width, grid_height)

    @property
    def left(self) -> float:
        return self.top_left.real

    @property
    def top(self) -> float:
        return self.top_left.imag

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top - self.height

    @property
    def pixel_width(self) -> float:
        return self.width / self.grid_width

    @property
    def pixel_height(self) -> float:
        # square pixels
        return self.pixel_width

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols), the numpy shape of a grid over this viewport."""
        return (self.grid_height, self.grid_width)

    def map_to_pixel(self, c: complex) -> Optional[Tuple[int, int]]:
        """
        Map a plane coordinate to (x, y), or None outside the viewport.

        Accepted region is [left, right) x (bottom, top]. Indices are
        truncated, never clamped.
        """
        re, im = c.real, c.imag
        if not (self.left <= re < self.right and self.bottom < im <= self.top):
            return None

        x = int((re - self.left) / self.pixel_width)
        y = int((self.top - im) / self.pixel_height)
        if x >= self.grid_width or y >= self.grid_height:
            return None
        return x, y

    def map_to_pixels(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Vectorized map_to_pixel.

        Returns (xs, ys, inside). xs/ys only hold the points where
        inside is True.
        """
        points = np.asarray(points, dtype=np.complex128)
        re, im = points.real, points.imag

        with np.errstate(invalid="ignore"):
            inside = (re >= self.left) & (re < self.right) & (im > self.bottom) & (im <= self.top)
        xs = ((re[inside] - self.left) / self.pixel_width).astype(np.int64)
        ys = ((self.top - im[inside]) / self.pixel_height).astype(np.int64)

        ok = (xs < self.grid_width) & (ys < self.grid_height)
        if not ok.all():
            idx = np.flatnonzero(inside)
            inside = inside.copy()
            inside[idx[~ok]] = False
            xs, ys = xs[ok], ys[ok]
        return xs, ys, inside

    def sample(self, rng: np.random.Generator, n: int) -> np.ndarray:
        """Draw n uniform plane coordinates inside the viewport."""
        u = rng.random(n)
        v = rng.random(n)
        return (self.left + u * self.width) + 1j * (self.top - v * self.height)
