"""
Complex helpers for the escape-time map z -> z^p + c.

Everything here works on Python complex scalars and on numpy complex128
arrays alike. Addition and multiplication are the built-in operators.
"""

import numpy as np

ESCAPE_RADIUS_SQ = 4.0


def square(z):
    return z * z


def abs_sq(z):
    """Squared magnitude re^2 + im^2 (no sqrt)."""
    return z.real * z.real + z.imag * z.imag


def cpow(z, exponent: float):
    """
    Raise z to a real power.

    exponent == 2 is a plain squaring; anything else goes through polar
    form: |z|^p * e^(i*p*arg z). cpow(0, p) is 0 for p > 0.
    """
    if exponent == 2.0:
        return square(z)

    with np.errstate(over="ignore", invalid="ignore"):
        r = np.abs(z) ** exponent
        th = np.angle(z) * exponent
        w = r * np.exp(1j * th)

    if np.ndim(w) == 0:
        return complex(w)
    return w


def step(z, c, exponent: float = 2.0):
    return cpow(z, exponent) + c


def has_escaped(z):
    # NaN magnitudes compare False, so they count as escaped
    with np.errstate(over="ignore", invalid="ignore"):
        bounded = abs_sq(z) <= ESCAPE_RADIUS_SQ
    if isinstance(bounded, np.ndarray):
        return ~bounded
    return not bounded
