"""
Visualization functions for tag evaluation reports.
"""

from pathlib import Path
from typing import Dict, Sequence
import matplotlib.pyplot as plt
import matplotlib
import numpy as np

from .config import OVERALL_KEY
from .metrics import TagCounts

# Use non-interactive backend for server environments
matplotlib.use('Agg')


def _save_figure(output_path) -> Path:
    plt.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()
    return output_path


def plot_per_tag_prf(
    report: Dict[str, TagCounts],
    tags: Sequence[str],
    output_path: str,
    title: str = "Precision / Recall / F1 per Tag"
) -> Path:
    """
    Plot grouped bars of precision, recall and F1 for each tag and Overall.

    Args:
        report: Dict from aggregate_results()
        tags: Tags to plot, in order
        output_path: Path to save figure
        title: Plot title

    Example:
        >>> report = aggregate_results(per_image, tags)
        >>> plot_per_tag_prf(report, tags, "figures/per_tag_prf.png")
    """
    names = [t for t in list(tags) + [OVERALL_KEY] if t in report]
    precisions = [report[n].precision for n in names]
    recalls = [report[n].recall for n in names]
    f1s = [report[n].f1_score for n in names]

    x = np.arange(len(names))
    width = 0.25

    fig, ax = plt.subplots(figsize=(max(8, len(names) * 1.6), 6))
    ax.bar(x - width, precisions, width, label='Precision', edgecolor='black', linewidth=0.5)
    ax.bar(x, recalls, width, label='Recall', edgecolor='black', linewidth=0.5)
    bars = ax.bar(x + width, f1s, width, label='F1 Score', edgecolor='black', linewidth=0.5)

    for bar, f1 in zip(bars, f1s):
        ax.text(bar.get_x() + bar.get_width() / 2, f1 + 0.02, f'{f1:.2f}',
                ha='center', va='bottom', fontsize=9)

    ax.set_xticks(x)
    ax.set_xticklabels(names, fontsize=11)
    ax.set_ylabel('Score', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_ylim([0, 1.1])
    ax.legend(fontsize=10)
    ax.grid(axis='y', alpha=0.3)

    output_path = _save_figure(output_path)
    print(f"✓ Saved per-tag P/R/F1 plot: {output_path}")
    return output_path


def plot_tag_counts(
    report: Dict[str, TagCounts],
    tags: Sequence[str],
    output_path: str,
    title: str = "TP / FP / FN per Tag"
) -> Path:
    """
    Plot horizontal stacked bars of TP, FP and FN counts per tag.

    The Overall row is left out so per-tag bars stay readable.
    """
    names = [t for t in tags if t in report]
    tps = np.array([report[n].true_positives for n in names])
    fps = np.array([report[n].false_positives for n in names])
    fns = np.array([report[n].false_negatives for n in names])

    fig, ax = plt.subplots(figsize=(10, max(4, len(names) * 0.6)))

    ax.barh(names, tps, color='#2ecc71', edgecolor='black', linewidth=0.5, label='TP')
    ax.barh(names, fps, left=tps, color='#e74c3c', edgecolor='black', linewidth=0.5, label='FP')
    ax.barh(names, fns, left=tps + fps, color='#f39c12', edgecolor='black', linewidth=0.5, label='FN')

    for i, name in enumerate(names):
        total = tps[i] + fps[i] + fns[i]
        ax.text(total + 0.1, i, f'GT={report[name].ground_truth_count}, Pred={report[name].predicted_count}',
                va='center', fontsize=9)

    ax.set_xlabel('Boxes', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.invert_yaxis()
    ax.legend(fontsize=10, loc='lower right')
    ax.grid(axis='x', alpha=0.3)

    output_path = _save_figure(output_path)
    print(f"✓ Saved tag count plot: {output_path}")
    return output_path


def plot_all_metrics(
    report: Dict[str, TagCounts],
    tags: Sequence[str],
    output_dir: str,
    run_name: str = "evaluation"
):
    """
    Generate all evaluation plots in one call.

    Args:
        report: Dict from aggregate_results()
        tags: Tags to plot, in order
        output_dir: Directory to save all plots
        run_name: Name to include in titles
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # 1. Rates per tag
    plot_per_tag_prf(
        report, tags,
        output_dir / "per_tag_prf.png",
        title=f"{run_name}: Precision / Recall / F1"
    )

    # 2. Raw counts per tag
    plot_tag_counts(
        report, tags,
        output_dir / "tag_counts.png",
        title=f"{run_name}: TP / FP / FN"
    )

    print(f"\n✓ All plots saved to: {output_dir}/")
