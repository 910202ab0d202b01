"""
solver.py — Pressure Projection
================================
The projection step enforces INCOMPRESSIBILITY:
  div(v) = 0 everywhere

After diffusion or advection the velocity field is generally NOT
divergence-free (fluid "piles up" in some cells). We fix this by:
  1. Computing the divergence of the velocity field
  2. Solving the Poisson equation  ∇²p = div  for a pressure p
  3. Subtracting the pressure gradient from velocity: v = v - ∇p

This is the Helmholtz-Hodge decomposition: any vector field splits into a
divergence-free part plus a curl-free (gradient) part. We keep the first.

Velocity lives at cell centres here (collocated grid), so both the
divergence and the gradient use central differences over two cells.

The solve is approximate: a fixed number of relaxation sweeps. More
sweeps → smaller residual divergence, slower step.
"""

import numpy as np

from .boundary import SCALAR, VELOCITY_X, VELOCITY_Y, enforce
from .diffuse import relax
from .grid import FieldBuffer, ORDERING_LEXICOGRAPHIC


def compute_divergence(velocity_x: FieldBuffer, velocity_y: FieldBuffer,
                       out: np.ndarray = None) -> np.ndarray:
    """
    Scaled central-difference divergence on the interior:
      div[i,j] = -0.5 * ((vx[i+1,j] - vx[i-1,j]) + (vy[i,j+1] - vy[i,j-1])) / N

    This is the right-hand side the pressure solve expects (note the sign).

    Returns: (N-2, N-2) array, or writes into `out` if given.
    """
    N = velocity_x.N
    vx = velocity_x.view
    vy = velocity_y.view
    div = -0.5 * ((vx[2:, 1:-1] - vx[:-2, 1:-1]) +
                  (vy[1:-1, 2:] - vy[1:-1, :-2])) / N
    if out is not None:
        out[...] = div
        return out
    return div


def project(
    velocity_x: FieldBuffer,
    velocity_y: FieldBuffer,
    pressure: FieldBuffer,
    divergence: FieldBuffer,
    iterations: int,
    ordering: str = ORDERING_LEXICOGRAPHIC,
):
    """
    Remove the divergent part of (velocity_x, velocity_y).

    `pressure` and `divergence` are workspaces; their previous contents are
    discarded. The solver hands in its spare scratch buffers here so a step
    never allocates new fields.

    Args:
        velocity_x, velocity_y : Velocity to make divergence-free (in-place)
        pressure               : Workspace, holds the solved pressure afterwards
        divergence             : Workspace, holds the pre-projection divergence
        iterations             : Relaxation sweeps for the Poisson solve
        ordering               : Relaxation sweep order

    Modifies: all four buffers (in-place)
    """
    buffers = (velocity_x, velocity_y, pressure, divergence)
    if len({id(b) for b in buffers}) != len(buffers):
        raise ValueError("project() needs four distinct buffers")

    N = velocity_x.N

    # Step 1: divergence on the interior, pressure guess = 0
    compute_divergence(velocity_x, velocity_y, out=divergence.view[1:-1, 1:-1])
    pressure.fill(0.0)
    enforce(divergence, SCALAR)
    enforce(pressure, SCALAR)

    # Step 2: Poisson solve  4p - sum_of_4_neighbors(p) = div
    relax(pressure, divergence, 1.0, 4.0, SCALAR, iterations, ordering)

    # Step 3: subtract the pressure gradient
    p = pressure.view
    velocity_x.view[1:-1, 1:-1] -= 0.5 * N * (p[2:, 1:-1] - p[:-2, 1:-1])
    velocity_y.view[1:-1, 1:-1] -= 0.5 * N * (p[1:-1, 2:] - p[1:-1, :-2])

    enforce(velocity_x, VELOCITY_X)
    enforce(velocity_y, VELOCITY_Y)
