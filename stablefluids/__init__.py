"""
stablefluids/ — 2D Stable Fluids Solver
========================================
Exports the interfaces a front end (renderer, input handler, CLI) uses.

    from stablefluids import FluidSolver
    solver = FluidSolver(n=64, diffusion_rate=0.0001, viscosity=0.0001, dt=0.1)
"""

from .boundary import SCALAR, VELOCITY_X, VELOCITY_Y, enforce
from .errors import ConstructionError, FluidError, IndexOutOfRange
from .grid import FieldBuffer, Grid, ORDERING_LEXICOGRAPHIC, ORDERING_RED_BLACK
from .simulation import FluidSolver

__all__ = [
    "FluidSolver", "Grid", "FieldBuffer",
    "SCALAR", "VELOCITY_X", "VELOCITY_Y", "enforce",
    "ORDERING_LEXICOGRAPHIC", "ORDERING_RED_BLACK",
    "FluidError", "ConstructionError", "IndexOutOfRange",
]
