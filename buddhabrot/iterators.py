from typing import Tuple

import numpy as np

from buddhabrot.complex_ops import cpow, has_escaped, step


def _check_args(exponent: float, max_iter: int):
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")
    if not exponent > 0:
        raise ValueError(f"exponent must be > 0, got {exponent}")


def iterate_trajectory(
    c: complex,
    exponent: float = 2.0,
    max_iter: int = 200,
) -> Tuple[np.ndarray, bool]:
    """
    Iterate z_{n+1} = z_n^p + c from z_0 = 0.

    Returns (traj, escaped). traj holds z_1..z_L where L is the 1-based
    iteration at which |z|^2 > 4, or all max_iter points if the orbit
    stayed bounded (escaped=False; such orbits are not rendered).
    """
    _check_args(exponent, max_iter)

    z = 0j
    traj = []

    for _ in range(max_iter):
        z = step(z, c, exponent)
        traj.append(z)

        if has_escaped(z):
            return np.array(traj, dtype=np.complex128), True

    return np.array(traj, dtype=np.complex128), False


def iterate_batch(
    cs: np.ndarray,
    exponent: float = 2.0,
    max_iter: int = 200,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorized iterate_trajectory over a 1-D array of samples.

    Returns (history, lengths, escaped):
        history[k, j]  z_{k+1} of sample j, valid for k < lengths[j]
        lengths[j]     escape iteration (1-based), or max_iter if bounded
        escaped[j]     whether sample j diverged
    """
    _check_args(exponent, max_iter)

    cs = np.asarray(cs, dtype=np.complex128).ravel()
    n = cs.shape[0]

    history = np.zeros((max_iter, n), dtype=np.complex128)
    lengths = np.full(n, max_iter, dtype=np.int64)
    escaped = np.zeros(n, dtype=bool)

    z = np.zeros(n, dtype=np.complex128)
    alive = np.arange(n)

    for k in range(max_iter):
        if alive.size == 0:
            break

        # only orbits that haven't escaped yet are advanced
        z = cpow(z, exponent) + cs[alive]
        history[k, alive] = z

        out = has_escaped(z)
        if out.any():
            done = alive[out]
            lengths[done] = k + 1
            escaped[done] = True
            alive = alive[~out]
            z = z[~out]

    return history, lengths, escaped
