"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes the fluid look like it's *actually flowing*.

The algorithm (per interior cell):
  1. Start at the cell position (i, j).
  2. Trace BACKWARD along the velocity field by one timestep:
       (x, y) = (i, j) - dt * (N-2) * (vx[i,j], vy[i,j])
     → "Where did the stuff in this cell come FROM?"
  3. Sample the source field there with bilinear interpolation
     (the traced point lands between cells).
  4. That sample is the new value of the cell.

Forward-stepping particles blows up for large dt. Asking where the value
came from never produces a value outside the range of its four
neighbours, so it is stable for any dt. The price is numerical blurring
that grows with dt.

The traced point is clamped into [0.5, (N-2) + 0.5] on both axes so that
all four interpolation corners stay inside the N×N buffer.

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import numpy as np

from .boundary import enforce
from .grid import FieldBuffer


def _bilinear_interpolate(field: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Bilinear interpolation of a 2D field (indexed [x, y]) at fractional
    positions. Positions must already be clamped so that floor(p) + 1 is a
    valid index.

    Bilinear = lerp in X on the two bracketing rows, then lerp in Y.
    """
    i0 = np.floor(x).astype(np.intp)
    j0 = np.floor(y).astype(np.intp)
    i1 = i0 + 1
    j1 = j0 + 1

    s1 = x - i0
    s0 = 1.0 - s1
    t1 = y - j0
    t0 = 1.0 - t1

    return (s0 * (t0 * field[i0, j0] + t1 * field[i0, j1]) +
            s1 * (t0 * field[i1, j0] + t1 * field[i1, j1]))


def advect(
    dst: FieldBuffer,
    src: FieldBuffer,
    velocity_x: FieldBuffer,
    velocity_y: FieldBuffer,
    dt: float,
    kind: int,
):
    """
    Transport `src` along (velocity_x, velocity_y) for one timestep and
    write the result into `dst`.

    The same routine moves density and both velocity components; only the
    buffers and the boundary kind change between calls.

    Args:
        dst        : Output field (interior overwritten, then boundaries)
        src        : Field being transported, read only
        velocity_x : X-velocity used for the back-trace
        velocity_y : Y-velocity used for the back-trace
        dt         : Timestep
        kind       : Boundary kind applied to dst afterwards

    Modifies: dst (in-place)
    """
    if dst is src:
        raise ValueError("advect() needs distinct dst and src buffers")

    N = dst.N
    n = N - 2
    dt0 = dt * n

    i, j = np.meshgrid(
        np.arange(1, N - 1, dtype=np.float64),
        np.arange(1, N - 1, dtype=np.float64),
        indexing='ij'
    )

    # Back-trace from every interior cell at once
    x = i - dt0 * velocity_x.view[1:-1, 1:-1]
    y = j - dt0 * velocity_y.view[1:-1, 1:-1]

    np.clip(x, 0.5, n + 0.5, out=x)
    np.clip(y, 0.5, n + 0.5, out=y)

    dst.view[1:-1, 1:-1] = _bilinear_interpolate(src.view, x, y)
    enforce(dst, kind)
