"""
main.py — Command-Line Entry Point
===================================
Runs the solver without a window and reports what it is doing.

Usage:
    python main.py                               # Headless run (default)
    python main.py --mode benchmark              # Per-stage timing table
    python main.py --N 64 --ordering red_black   # Vectorized relaxation
"""

import argparse

import numpy as np

from stablefluids import FluidSolver
from stablefluids.forces import add_source, fade_density


def build_solver(args) -> FluidSolver:
    return FluidSolver(n=args.N, diffusion_rate=args.diffusion, viscosity=args.viscosity,
                       dt=args.dt, iterations=args.iterations, ordering=args.ordering)


def feed_source(solver: FluidSolver, frame: int):
    """Emitter near the bottom centre, swinging slowly left and right."""
    N = solver.N
    swing = np.sin(frame * 0.1)
    add_source(solver, N // 2, 2, density=5.0, velocity=(swing, 2.0), radius=1)


def run_headless(args):
    """Run simulation without display — prints stats every few frames."""
    solver = build_solver(args)

    print(f"\nHeadless simulation | N={args.N} | {args.frames} frames | {args.ordering}")
    print(f"{'─'*60}")

    total_times = []
    for f in range(args.frames):
        feed_source(solver, f)
        metrics = solver.step()
        fade_density(solver, args.fade)
        total_times.append(metrics["total_ms"])

        if f % 10 == 0:
            print(f"  Frame {f:03d} | {metrics['total_ms']:6.1f}ms "
                  f"({metrics['fps']:.1f} FPS) | "
                  f"div_max={metrics['divergence_max']:.5f} | "
                  f"density={metrics['density_total']:.1f}")

    print(f"\n{'─'*60}")
    print(f"  Average: {np.mean(total_times):.1f}ms/frame ({1000/np.mean(total_times):.1f} FPS)")
    print(f"  Min:     {np.min(total_times):.1f}ms")
    print(f"  Max:     {np.max(total_times):.1f}ms")
    solver.print_status()


def run_benchmark(args):
    """Detailed performance breakdown of each stage of a step."""
    print(f"\n{'='*60}")
    print(f"  BENCHMARK | N={args.N} | {args.frames} frames | {args.ordering}")
    print(f"{'='*60}")

    solver = build_solver(args)

    # Warm up
    for f in range(5):
        feed_source(solver, f)
        solver.step()

    logs = []
    for f in range(args.frames):
        feed_source(solver, f)
        logs.append(solver.step())
        fade_density(solver, args.fade)

    keys = ["diffuse_vel_ms", "project1_ms", "advect_vel_ms",
            "project2_ms", "diffuse_den_ms", "advect_den_ms", "total_ms"]

    print(f"\n{'Step':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.1f}ms {np.min(vals):>7.1f}ms {np.max(vals):>7.1f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  FPS (physics only): {1000/np.mean(total_vals):.1f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D Stable Fluids Solver")
    parser.add_argument(
        "--mode", choices=["headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--N",          type=int,   default=32,      help="Grid resolution (default: 32)")
    parser.add_argument("--frames",     type=int,   default=100,     help="Number of frames")
    parser.add_argument("--iterations", type=int,   default=4,       help="Relaxation sweeps per solve")
    parser.add_argument("--ordering",   choices=["lexicographic", "red_black"],
                        default="lexicographic", help="Relaxation sweep order")
    parser.add_argument("--dt",         type=float, default=0.1,     help="Timestep")
    parser.add_argument("--diffusion",  type=float, default=0.0001,  help="Density diffusion rate")
    parser.add_argument("--viscosity",  type=float, default=0.0001,  help="Velocity viscosity")
    parser.add_argument("--fade",       type=float, default=0.02,    help="Density fade per frame")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.mode == "headless":
        run_headless(args)
    elif args.mode == "benchmark":
        run_benchmark(args)


if __name__ == "__main__":
    main()
