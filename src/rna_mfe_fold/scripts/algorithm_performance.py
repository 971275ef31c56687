#!/usr/bin/env python3
"""
Performance evaluation script for the MFE folding kernel.

Benchmarks runtime and peak memory of the fill + traceback across a range of
sequence lengths, estimates the empirical complexity exponent and plots the
results. The interior-loop search makes the worst case $O(N^{4})$; the loop
size cap brings the practical cost closer to $O(N^{3})$ once N exceeds the cap.
"""

import time
import tracemalloc
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import matplotlib
import matplotlib.pyplot as plt

from rna_mfe_fold.folding import MfeFoldingConfig, build_engine
from rna_mfe_fold.folding.predictor import fold_with_engine


def generate_random_sequence(length: int, seed: Optional[int] = None) -> str:
    """
    Generate a random RNA sequence of a given length.

    Parameters
    ----------
    length : int
        The desired length of the RNA sequence ($N$).
    seed : int, optional
        Seed for a private random generator, for reproducibility.

    Returns
    -------
    str
        A random sequence over 'A', 'C', 'G', 'U'.
    """
    rng = random.Random(seed)
    return ''.join(rng.choices(['A', 'C', 'G', 'U'], k=length))


def benchmark_runtime(sequence_lengths: List[int], num_trials: int = 3,
                      config: Optional[MfeFoldingConfig] = None) -> Dict[str, list]:
    """
    Benchmark the mean runtime across different sequence lengths ($N$).

    Returns
    -------
    dict
        'lengths', 'mean_times', 'std_times' (seconds) and 'energies'
        (MFE of the last trial per length).
    """
    engine = build_engine(config)

    results: Dict[str, list] = {
        'lengths': list(sequence_lengths),
        'mean_times': [],
        'std_times': [],
        'energies': []
    }

    for n in sequence_lengths:
        print(f"\nBenchmarking N={n}...")
        trial_times = []
        energy = 0.0

        for trial in range(num_trials):
            seq = generate_random_sequence(n, seed=42 + trial)

            start = time.perf_counter()
            energy = fold_with_engine(seq, engine).energy
            elapsed = time.perf_counter() - start

            trial_times.append(elapsed)
            print(f"  Trial {trial + 1}/{num_trials}: {elapsed:.3f}s")

        results['mean_times'].append(float(np.mean(trial_times)))
        results['std_times'].append(float(np.std(trial_times)))
        results['energies'].append(energy)

        print(f"  Mean: {results['mean_times'][-1]:.3f}s ± {results['std_times'][-1]:.3f}s")

    return results


def benchmark_memory(sequence_lengths: List[int],
                     config: Optional[MfeFoldingConfig] = None) -> Dict[str, list]:
    """
    Benchmark peak memory (MB) per sequence length with `tracemalloc`.
    """
    engine = build_engine(config)

    results: Dict[str, list] = {
        'lengths': list(sequence_lengths),
        'peak_memory_mb': []
    }

    for n in sequence_lengths:
        seq = generate_random_sequence(n, seed=42)

        tracemalloc.start()
        fold_with_engine(seq, engine)
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        peak_mb = peak / 1024 ** 2
        results['peak_memory_mb'].append(peak_mb)
        print(f"  N={n}: peak memory {peak_mb:.2f} MB")

    return results


def analyze_complexity(lengths: List[int], times: List[float]) -> Tuple[float, np.ndarray]:
    """
    Fit $T \\propto N^{k}$ by linear regression in log-log space.

    Returns
    -------
    tuple of (float, numpy.ndarray)
        The estimated exponent $k$ and the fitted times at `lengths`.
    """
    log_n = np.log(lengths)
    log_time = np.log(times)

    k, c = np.polyfit(log_n, log_time, 1)
    fitted_times = np.exp(c) * np.asarray(lengths, dtype=float) ** k

    return float(k), fitted_times


def plot_results(runtime_results: Dict[str, list], memory_results: Dict[str, list],
                 fitted_times: np.ndarray, complexity_k: float,
                 output_dir: Path = Path('performance_results'), show: bool = False) -> Path:
    """
    Save runtime and memory plots side by side and return the image path.
    """
    if not show:
        matplotlib.use("Agg")

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax1 = axes[0]
    lengths = runtime_results['lengths']
    ax1.errorbar(lengths, runtime_results['mean_times'], yerr=runtime_results['std_times'],
                 fmt='o-', capsize=5, label='Measured', linewidth=2, markersize=8)
    ax1.plot(lengths, fitted_times, '--',
             label=f'Fitted $O(N^{{{complexity_k:.2f}}})$', linewidth=2, alpha=0.7)
    ax1.set_xlabel('Sequence Length ($N$)', fontsize=12)
    ax1.set_ylabel('Runtime (seconds)', fontsize=12)
    ax1.set_title('Runtime Performance (Log-Log)', fontsize=14, fontweight='bold')
    ax1.legend(fontsize=10)
    ax1.grid(True, alpha=0.3)
    ax1.set_yscale('log')
    ax1.set_xscale('log')

    ax2 = axes[1]
    ax2.plot(memory_results['lengths'], memory_results['peak_memory_mb'], 's-',
             linewidth=2, markersize=8, color='orange')
    ax2.set_xlabel('Sequence Length ($N$)', fontsize=12)
    ax2.set_ylabel('Peak Memory (MB)', fontsize=12)
    ax2.set_title('Memory Usage (Log-Log)', fontsize=14, fontweight='bold')
    ax2.grid(True, alpha=0.3)
    ax2.set_yscale('log')
    ax2.set_xscale('log')

    fig.tight_layout()

    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / 'performance_analysis.png'
    fig.savefig(out_path, dpi=150, bbox_inches='tight')
    print(f"\nPlot saved to: {out_path}")

    if show:
        plt.show()
    plt.close(fig)
    return out_path


def generate_markdown_table(runtime_results: Dict[str, list], memory_results: Dict[str, list]) -> str:
    """
    Render the benchmark results as a Markdown table.
    """
    lines = [
        "| Sequence Length (N) | Runtime (s) | Peak Memory (MB) | MFE (kcal/mol) |",
        "|---------------------|-------------|------------------|----------------|",
    ]
    for i, n in enumerate(runtime_results['lengths']):
        lines.append(
            f"| {n:19d} | {runtime_results['mean_times'][i]:6.3f} ± {runtime_results['std_times'][i]:.3f} "
            f"| {memory_results['peak_memory_mb'][i]:16.2f} | {runtime_results['energies'][i]:14.2f} |"
        )
    return "\n".join(lines)


def main():
    sequence_lengths = [20, 40, 60, 80, 100]
    num_trials = 3

    print(f"Sequence lengths to test: {sequence_lengths}")
    print(f"Trials per length: {num_trials}")

    runtime_results = benchmark_runtime(sequence_lengths, num_trials)
    memory_results = benchmark_memory(sequence_lengths)

    complexity_k, fitted_times = analyze_complexity(runtime_results['lengths'], runtime_results['mean_times'])
    print(f"\nEmpirical complexity: O(N^{complexity_k:.2f}) (worst case O(N^4))")

    plot_results(runtime_results, memory_results, fitted_times, complexity_k)
    print("\n" + generate_markdown_table(runtime_results, memory_results))


if __name__ == "__main__":
    main()
