"""
boundary.py — Closed-Box Boundary Conditions
=============================================
The simulated domain is a sealed box. The outer ring of cells is not
simulated; it is rewritten from the first interior ring so that:

  - Velocity normal to a wall is reflected (negated) → nothing flows
    through the wall ("free-slip": the tangential part is copied)
  - Scalars (density, pressure, divergence) are copied → no leaks and
    no sign flips at the walls

  Field kind   | left/right walls (x=0, x=N-1) | top/bottom walls (y=0, y=N-1)
  -------------+-------------------------------+------------------------------
  SCALAR       | copy                          | copy
  VELOCITY_X   | negate                        | copy
  VELOCITY_Y   | copy                          | negate

Each corner becomes the average of its two edge neighbours.

Every relaxation sweep and every advection pass reads border cells as
neighbours, so this runs after each of them. Running it twice is the same
as running it once: the interior is never touched.
"""

from .grid import FieldBuffer


# ── Boundary kinds ────────────────────────────────────────────────────────────
SCALAR     = 0
VELOCITY_X = 1
VELOCITY_Y = 2

KINDS = (SCALAR, VELOCITY_X, VELOCITY_Y)


def enforce(field: FieldBuffer, kind: int):
    """
    Rewrite the border ring of `field` for the given boundary kind.

    Modifies: field (in-place, border cells only)
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown boundary kind: {kind}. Use SCALAR, VELOCITY_X or VELOCITY_Y.")

    v = field.view        # indexed [x, y]
    N = field.N

    # ── Top/bottom walls (y = 0 and y = N-1), corners excluded ───────────
    if kind == VELOCITY_Y:
        v[1:N-1, 0]   = -v[1:N-1, 1]
        v[1:N-1, N-1] = -v[1:N-1, N-2]
    else:
        v[1:N-1, 0]   = v[1:N-1, 1]
        v[1:N-1, N-1] = v[1:N-1, N-2]

    # ── Left/right walls (x = 0 and x = N-1), corners excluded ───────────
    if kind == VELOCITY_X:
        v[0,   1:N-1] = -v[1,   1:N-1]
        v[N-1, 1:N-1] = -v[N-2, 1:N-1]
    else:
        v[0,   1:N-1] = v[1,   1:N-1]
        v[N-1, 1:N-1] = v[N-2, 1:N-1]

    # ── Corners ──────────────────────────────────────────────────────────
    v[0,   0]   = 0.5 * (v[1,   0]   + v[0,   1])
    v[0,   N-1] = 0.5 * (v[1,   N-1] + v[0,   N-2])
    v[N-1, 0]   = 0.5 * (v[N-2, 0]   + v[N-1, 1])
    v[N-1, N-1] = 0.5 * (v[N-2, N-1] + v[N-1, N-2])
