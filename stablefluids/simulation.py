"""
simulation.py — Master Physics Loop
====================================
One call to `step()` advances the fluid by dt.

Physics pipeline per step:
  1. Diffuse velocity-x       vx  → vx0   (viscosity)
  2. Diffuse velocity-y       vy  → vy0
  3. Project (vx0, vy0)       (vx, vy used as pressure/divergence workspace)
  4. Advect velocity-x        vx0 → vx    along (vx0, vy0)
  5. Advect velocity-y        vy0 → vy    along (vx0, vy0)
  6. Project (vx, vy)         (vx0, vy0 used as workspace)
  7. Diffuse density          density → s
  8. Advect density           s → density along (vx, vy)

Boundary conditions are applied inside every diffuse/advect/project call.

The solver owns exactly six fields (current + scratch for vx, vy and
density). Nothing is reallocated or cloned during a step.

This follows the "Stable Fluids" paper by Jos Stam.
"""

import time
from dataclasses import replace

import numpy as np

from .advect import advect
from .boundary import SCALAR, VELOCITY_X, VELOCITY_Y
from .diffuse import diffuse
from .grid import FieldBuffer, Grid, ORDERING_LEXICOGRAPHIC, check_finite
from .errors import ConstructionError
from .solver import compute_divergence, project


class FluidSolver:
    """
    The complete 2D fluid simulation.

    Usage:
        solver = FluidSolver(n=64, diffusion_rate=0.0001, viscosity=0.0001, dt=0.1)
        solver.add_density(32, 32, 10.0)
        solver.add_velocity(32, 32, 1.0, 0.0)
        for frame in range(100):
            solver.step()
            d = solver.density_at(40, 32)     # hand to a renderer

    The default lexicographic sweep is a Python loop over every interior
    cell. For large grids (the N=256 demo size) pass ordering="red_black",
    which runs each half-sweep as numpy slices.
    """

    def __init__(self, n: int = 64, diffusion_rate: float = 0.0001,
                 viscosity: float = 0.0001, dt: float = 0.1,
                 iterations: int = 4, scale: int = 4,
                 ordering: str = ORDERING_LEXICOGRAPHIC):
        """
        Args:
            n              : Cells per axis (>= 3), border included
            diffusion_rate : Density spreading rate
            viscosity      : Velocity spreading rate
            dt             : Timestep
            iterations     : Relaxation sweeps per linear solve
            scale          : Pixels per cell for a renderer
            ordering       : "lexicographic" (Gauss-Seidel) or "red_black" (faster at large n)

        Raises:
            ConstructionError : on any invalid parameter; no solver is created
        """
        self.grid = Grid(N=n, dt=dt, diffusion=diffusion_rate, viscosity=viscosity,
                         iterations=iterations, scale=scale, ordering=ordering)
        N = self.grid.N

        # ── Current fields ─────────────────────────────────────────────────
        self.vx      = FieldBuffer(N)
        self.vy      = FieldBuffer(N)
        self.density = FieldBuffer(N)

        # ── Scratch fields (previous values / solver workspace) ────────────
        self.vx0 = FieldBuffer(N)
        self.vy0 = FieldBuffer(N)
        self.s   = FieldBuffer(N)

        self.frame = 0
        self.perf_log = []   # stores timing data per step

    @classmethod
    def from_grid(cls, grid: Grid) -> "FluidSolver":
        if not isinstance(grid, Grid):
            raise ConstructionError(f"Expected a Grid, got {type(grid).__name__}")
        return cls(n=grid.N, diffusion_rate=grid.diffusion, viscosity=grid.viscosity,
                   dt=grid.dt, iterations=grid.iterations, scale=grid.scale,
                   ordering=grid.ordering)

    # ── Convenience accessors ──────────────────────────────────────────────
    @property
    def N(self) -> int:
        return self.grid.N

    @property
    def buffers(self) -> tuple:
        return (self.vx, self.vx0, self.vy, self.vy0, self.density, self.s)

    def set_ordering(self, ordering: str):
        """
        Switch the relaxation sweep order between steps.
        Red-black output differs slightly from the lexicographic reference.
        """
        self.grid = replace(self.grid, ordering=ordering)
        print(f"[Solver] Relaxation ordering switched to: {ordering}")

    # ── External impulses ──────────────────────────────────────────────────
    def add_density(self, x: int, y: int, amount: float):
        """
        Add `amount` of density at cell (x, y).
        Raises IndexOutOfRange for a bad cell, ValueError for a NaN/inf amount.
        """
        k = self.density.index(x, y)
        check_finite(amount=amount)
        self.density.data[k] += amount

    def add_velocity(self, x: int, y: int, dx: float, dy: float):
        """
        Add a velocity impulse (dx, dy) at cell (x, y).
        The cell and both components are checked before either field changes.
        """
        k = self.vx.index(x, y)
        check_finite(dx=dx, dy=dy)
        self.vx.data[k] += dx
        self.vy.data[k] += dy

    # ── Read-only accessors ────────────────────────────────────────────────
    def density_at(self, x: int, y: int) -> float:
        return self.density.get(x, y)

    def velocity_at(self, x: int, y: int) -> tuple[float, float]:
        k = self.vx.index(x, y)
        return float(self.vx.data[k]), float(self.vy.data[k])

    # ── Physics ────────────────────────────────────────────────────────────
    def step(self) -> dict:
        """
        Advance the simulation by one timestep (dt).

        Returns performance metrics dict for benchmarking.
        """
        t_total_start = time.perf_counter()
        g = self.grid
        iters, order = g.iterations, g.ordering

        # ── Steps 1-2: Diffuse velocity (viscosity) ────────────────────────
        t0 = time.perf_counter()
        diffuse(self.vx0, self.vx, g.viscosity, g.dt, VELOCITY_X, iters, order)
        diffuse(self.vy0, self.vy, g.viscosity, g.dt, VELOCITY_Y, iters, order)
        t_diffuse_vel = (time.perf_counter() - t0) * 1000

        # ── Step 3: Project the diffused velocity ──────────────────────────
        t0 = time.perf_counter()
        project(self.vx0, self.vy0, self.vx, self.vy, iters, order)
        t_project1 = (time.perf_counter() - t0) * 1000

        # ── Steps 4-5: Self-advect velocity ────────────────────────────────
        t0 = time.perf_counter()
        advect(self.vx, self.vx0, self.vx0, self.vy0, g.dt, VELOCITY_X)
        advect(self.vy, self.vy0, self.vx0, self.vy0, g.dt, VELOCITY_Y)
        t_advect_vel = (time.perf_counter() - t0) * 1000

        # ── Step 6: Project again (clean up post-advection divergence) ─────
        t0 = time.perf_counter()
        project(self.vx, self.vy, self.vx0, self.vy0, iters, order)
        t_project2 = (time.perf_counter() - t0) * 1000

        # ── Step 7: Diffuse density ────────────────────────────────────────
        t0 = time.perf_counter()
        diffuse(self.s, self.density, g.diffusion, g.dt, SCALAR, iters, order)
        t_diffuse_den = (time.perf_counter() - t0) * 1000

        # ── Step 8: Advect density along the projected velocity ────────────
        t0 = time.perf_counter()
        advect(self.density, self.s, self.vx, self.vy, g.dt, SCALAR)
        t_advect_den = (time.perf_counter() - t0) * 1000

        # ── Frame bookkeeping ──────────────────────────────────────────────
        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000
        div = self.compute_divergence()

        metrics = {
            "frame"            : self.frame,
            "ordering"         : order,
            "total_ms"         : t_total,
            "fps"              : 1000.0 / t_total if t_total > 0 else 0,
            "diffuse_vel_ms"   : t_diffuse_vel,
            "project1_ms"      : t_project1,
            "advect_vel_ms"    : t_advect_vel,
            "project2_ms"      : t_project2,
            "diffuse_den_ms"   : t_diffuse_den,
            "advect_den_ms"    : t_advect_den,
            "divergence_max"   : float(np.abs(div).max()),
            "divergence_mean"  : float(np.abs(div).mean()),
            "density_total"    : self.density.sum(),
        }
        self.perf_log.append(metrics)
        return metrics

    def compute_divergence(self) -> np.ndarray:
        """
        Divergence of the current velocity on the interior, (N-2, N-2).
        Should stay close to zero after a step.
        """
        return compute_divergence(self.vx, self.vy)

    def reset(self):
        """Zero out all fields. Useful for running multiple simulations."""
        for buf in self.buffers:
            buf.fill(0.0)
        self.frame = 0
        self.perf_log.clear()

    def get_snapshot(self) -> dict:
        """
        Copy of the current state for a renderer, arrays indexed [x, y].
        """
        return {
            "frame"      : self.frame,
            "density"    : self.density.to_array(),
            "velocity_x" : self.vx.to_array(),
            "velocity_y" : self.vy.to_array(),
        }

    def print_status(self):
        """Pretty-print current simulation state."""
        div = self.compute_divergence()
        print(f"\n{'='*50}")
        print(f"  Frame: {self.frame}  |  N: {self.N}  |  Ordering: {self.grid.ordering}")
        print(f"  Density   : max={self.density.max():.4f}, total={self.density.sum():.2f}")
        print(f"  Velocity  : max_x={np.abs(self.vx.data).max():.4f}, "
              f"max_y={np.abs(self.vy.data).max():.4f}")
        print(f"  Divergence: max={np.abs(div).max():.6f}, mean={np.abs(div).mean():.8f}")
        if self.perf_log:
            last = self.perf_log[-1]
            print(f"  Perf      : {last['total_ms']:.1f}ms/step ({last['fps']:.1f} FPS)")
        print(f"{'='*50}")

    def __repr__(self):
        return (
            f"FluidSolver(N={self.N}, dt={self.grid.dt}, frame={self.frame})\n"
            f"  density  : max={self.density.max():.4f}, sum={self.density.sum():.2f}\n"
            f"  velocity : max_magnitude={max(np.abs(self.vx.data).max(), np.abs(self.vy.data).max()):.4f}"
        )
