"""
Benchmark Suite

Performance of the NumPy reference path against the Numba kernels for the
sealed-box D3Q19 solver.
"""

import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm3d.grid import initialize_uniform
from lbm3d.boundary import create_box_walls
from lbm3d.solver import step


def benchmark_step(n, tau, num_steps, use_fast=True, warmup_steps=5):
    """
    Benchmark the full step on an n x n x n box.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    """
    grid = initialize_uniform(n, n, n)
    wall_mask = create_box_walls(n, n, n)

    # Warmup (JIT compilation)
    for _ in range(warmup_steps):
        step(grid, tau, use_fast=use_fast, wall_mask=wall_mask)

    start = time.perf_counter()
    for _ in range(num_steps):
        step(grid, tau, use_fast=use_fast, wall_mask=wall_mask)
    elapsed = time.perf_counter() - start

    return num_steps * n ** 3 / elapsed / 1e6


def run_full_benchmark(grid_sizes=None, tau=0.8, num_steps=50):
    """
    Benchmark both implementations across grid sizes.

    Returns
    -------
    results : dict
        {'numpy': {n: mlups}, 'numba': {n: mlups}}
    """
    if grid_sizes is None:
        grid_sizes = [16, 32, 64, 96]

    results = {'numpy': {}, 'numba': {}}

    print("=" * 60)
    print("D3Q19 LBM Benchmark")
    print("=" * 60)
    print(f"Tau: {tau}, Steps: {num_steps}")
    print()

    for impl, use_fast in (('numpy', False), ('numba', True)):
        print(f"Benchmarking {impl}...")
        print("-" * 40)
        for n in grid_sizes:
            mlups = benchmark_step(n, tau, num_steps, use_fast=use_fast)
            results[impl][n] = mlups
            print(f"  {n:4d}^3: {mlups:8.2f} MLUPS")
        print()

    print("=" * 60)
    print(f"{'Grid':<10} {'NumPy':>10} {'Numba':>10} {'Speedup':>10}")
    print("-" * 60)
    for n in grid_sizes:
        base = results['numpy'][n]
        fast = results['numba'][n]
        print(f"{n:4d}^3     {base:>10.2f} {fast:>10.2f} {fast / base:>9.1f}x")
    print("=" * 60)

    return results


def compute_memory_bandwidth(mlups, bytes_per_site=19 * 8 * 2):
    """Effective memory bandwidth in GB/s from MLUPS (19 doubles read + written)."""
    return mlups * bytes_per_site / 1000


if __name__ == "__main__":
    results = run_full_benchmark()
    best = max(results['numba'].values())
    print(f"\nPeak: {best:.2f} MLUPS, ~{compute_memory_bandwidth(best):.1f} GB/s")
