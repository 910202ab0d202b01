"""
errors.py — Solver Exceptions
==============================
Everything the solver raises on bad input derives from FluidError, so a
caller driving the simulation from an input loop can catch one type.

  ConstructionError : the Grid could not be built (N < 3, negative dt, ...)
  IndexOutOfRange   : a cell coordinate fell outside [0, N)

Both also subclass the matching builtin (ValueError / IndexError).
"""


class FluidError(Exception):
    """Base class for all solver errors."""


class ConstructionError(FluidError, ValueError):
    """Raised when a Grid or FluidSolver is created with invalid parameters."""


class IndexOutOfRange(FluidError, IndexError):
    """Raised when a cell coordinate is outside the grid."""

    def __init__(self, x, y, N: int):
        super().__init__(f"Cell ({x}, {y}) is outside the {N}x{N} grid")
        self.x = x
        self.y = y
        self.N = N
