"""
forces.py — External Sources and Density Fade
==============================================
Helpers a front end calls between steps. None of this runs inside
`FluidSolver.step()`.

  - add_source   : inject density + velocity over a small block of cells
                   (what a mouse drag or an emitter does every frame)
  - fade_density : subtract a fixed amount of density everywhere, clamped
                   at zero, so a continuously fed scene doesn't saturate
"""

import numpy as np

from .grid import check_finite


def add_source(solver, x: int, y: int,
               density: float = 10.0,
               velocity: tuple = (0.0, 0.0),
               radius: int = 1):
    """
    Inject density and velocity in the (2*radius+1)² block centred on (x, y).
    The block is clipped to the grid; the centre itself must be inside it
    (IndexOutOfRange otherwise). NaN/inf amounts raise ValueError.

    Args:
        solver   : FluidSolver to modify
        x, y     : Centre cell
        density  : Density added to every cell in the block
        velocity : (dx, dy) added to every cell in the block
        radius   : Block half-width in cells (0 = single cell)
    """
    N = solver.N
    solver.density.index(x, y)   # centre must be a cell of the grid
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    dx, dy = velocity
    check_finite(density=density, dx=dx, dy=dy)

    x0, x1 = max(0, x - radius), min(N, x + radius + 1)
    y0, y1 = max(0, y - radius), min(N, y + radius + 1)

    solver.density.view[x0:x1, y0:y1] += density
    solver.vx.view[x0:x1, y0:y1] += dx
    solver.vy.view[x0:x1, y0:y1] += dy


def fade_density(solver, amount: float = 0.02):
    """
    Lower every density value by `amount`, never going below zero.

    Modifies: solver.density (in-place)
    """
    if amount < 0:
        raise ValueError(f"fade amount must be >= 0, got {amount}")
    d = solver.density.data
    d -= amount
    np.maximum(d, 0.0, out=d)
