"""
grid.py — Grid Configuration and Field Storage
===============================================
Two things live here:

  - Grid        : the immutable simulation parameters (resolution, dt, rates)
  - FieldBuffer : one N×N scalar field stored as a flat array

Memory layout of a FieldBuffer:
  cell (x, y) lives at flat index  x + y * N

The flat array is what the numeric kernels iterate over. For slicing we
also expose a 2D view indexed [x, y]; it shares memory with the flat array,
so writing through either one updates both.

Border cells (x or y equal to 0 or N-1) are never solved for directly.
They are rewritten by the boundary step after every sweep.
"""

import numbers
from dataclasses import dataclass

import numpy as np

from .errors import ConstructionError, IndexOutOfRange


MIN_RESOLUTION = 3

ORDERING_LEXICOGRAPHIC = "lexicographic"
ORDERING_RED_BLACK     = "red_black"
ORDERINGS = (ORDERING_LEXICOGRAPHIC, ORDERING_RED_BLACK)


def _is_int(value) -> bool:
    # numpy integer scalars register as numbers.Integral; bool does too, so exclude it
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def check_finite(**amounts):
    """Raise ValueError unless every keyword value is a finite real number."""
    for name, value in amounts.items():
        if not _is_real(value) or not np.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class Grid:
    """
    Simulation parameters, fixed for the lifetime of a solver.

    Args:
        N          : Cells per axis, including the one-cell border (N >= 3)
        dt         : Timestep
        diffusion  : Density spreading rate (0 = none)
        viscosity  : Velocity spreading rate (0 = inviscid)
        iterations : Relaxation sweeps per linear solve
        scale      : Screen pixels per cell (only a renderer cares)
        ordering   : Sweep order of the relaxer, "lexicographic" or "red_black"
    """

    N: int = 64
    dt: float = 0.1
    diffusion: float = 0.0001
    viscosity: float = 0.0001
    iterations: int = 4
    scale: int = 4
    ordering: str = ORDERING_LEXICOGRAPHIC

    def __post_init__(self):
        if not _is_int(self.N) or self.N < MIN_RESOLUTION:
            raise ConstructionError(
                f"Grid side length must be an integer >= {MIN_RESOLUTION}, got {self.N!r}")
        for name in ("dt", "diffusion", "viscosity"):
            value = getattr(self, name)
            if not _is_real(value) or not np.isfinite(value) or value < 0:
                raise ConstructionError(f"{name} must be finite and non-negative, got {value!r}")
        if not _is_int(self.iterations) or self.iterations < 1:
            raise ConstructionError(f"iterations must be a positive integer, got {self.iterations!r}")
        if not _is_real(self.scale) or not self.scale > 0:
            raise ConstructionError(f"scale must be positive, got {self.scale!r}")
        if self.ordering not in ORDERINGS:
            raise ConstructionError(f"Unknown ordering: {self.ordering}. Use one of {ORDERINGS}.")

    @property
    def cells(self) -> int:
        return self.N * self.N

    @property
    def interior(self) -> int:
        """Number of solved cells per axis (the border is excluded)."""
        return self.N - 2


class FieldBuffer:
    """
    A single N×N scalar field.

    Usage:
        f = FieldBuffer(8)
        f.set(3, 4, 1.5)
        f.get(3, 4)        # 1.5
        f.data[3 + 4 * 8]  # 1.5, same cell through the flat array
        f.view[3, 4]       # 1.5, same cell through the 2D view
    """

    def __init__(self, N: int):
        if not _is_int(N) or N < MIN_RESOLUTION:
            raise ConstructionError(
                f"FieldBuffer side length must be an integer >= {MIN_RESOLUTION}, got {N!r}")
        N = int(N)
        self.N = N
        self.data = np.zeros(N * N, dtype=np.float64)
        # reshape gives [y, x]; the transpose flips it to [x, y] without copying
        self.view = self.data.reshape(N, N).T

    def __len__(self) -> int:
        return self.data.size

    def index(self, x: int, y: int) -> int:
        """Flat index of cell (x, y), bounds-checked. Coordinates must be integers."""
        N = self.N
        if not (_is_int(x) and _is_int(y)) or not (0 <= x < N and 0 <= y < N):
            raise IndexOutOfRange(x, y, N)
        return x + y * N

    def get(self, x: int, y: int) -> float:
        return float(self.data[self.index(x, y)])

    def set(self, x: int, y: int, value: float):
        self.data[self.index(x, y)] = value

    def add(self, x: int, y: int, amount: float):
        self.data[self.index(x, y)] += amount

    def fill(self, value: float = 0.0):
        self.data.fill(value)

    def copy_from(self, other: "FieldBuffer"):
        if other.N != self.N:
            raise ValueError(f"Cannot copy a {other.N}x{other.N} field into a {self.N}x{self.N} field")
        np.copyto(self.data, other.data)

    def to_array(self) -> np.ndarray:
        """Independent 2D copy indexed [x, y] (for renderers and snapshots)."""
        return self.view.copy()

    def sum(self) -> float:
        return float(self.data.sum())

    def max(self) -> float:
        return float(self.data.max())

    def min(self) -> float:
        return float(self.data.min())

    def __repr__(self):
        return f"FieldBuffer(N={self.N}, min={self.min():.4f}, max={self.max():.4f})"
