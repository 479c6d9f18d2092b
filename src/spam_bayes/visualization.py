"""Static report figures for the alpha sweep and test evaluation."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from .config import Config
from .data import Label
from .evaluation import EvaluationResult
from .experiment import ExperimentReport
from .search import SearchResult

plt.switch_backend("Agg")


def plot_alpha_sweep(search: SearchResult, output_path: Path) -> Path:
    """Plot cross-validation accuracy for every alpha candidate."""
    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))
    sns.lineplot(data=search.to_frame(), x="alpha", y="accuracy", marker="o", ax=ax)
    ax.axvline(search.best_alpha, color="tab:red", linestyle="--", linewidth=1)
    ax.annotate(
        f"best alpha={search.best_alpha:g}",
        xy=(search.best_alpha, search.best_accuracy),
        xytext=(5, -15),
        textcoords="offset points",
        color="tab:red",
    )
    ax.set_title("Cross-validation Accuracy by Alpha")
    ax.set_xlabel("Alpha")
    ax.set_ylabel("Accuracy")
    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path


def plot_confusion_matrix(evaluation: EvaluationResult, output_path: Path) -> Path:
    """Render the confusion counts as a heatmap."""
    labels = [label.value for label in Label]
    grid = pd.DataFrame(
        [[evaluation.count(predicted, actual) for predicted in Label] for actual in Label],
        index=labels,
        columns=labels,
    )
    fig, ax = plt.subplots(figsize=(5, 4))
    sns.heatmap(grid, annot=True, fmt="d", cmap="Blues", ax=ax)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    ax.set_title("Confusion Matrix")
    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path


def refresh_static_reports(report: ExperimentReport, config: Config) -> Dict[str, Path]:
    """Generate the full visual report suite."""
    figures_dir = config.paths.figures_dir
    figures_dir.mkdir(parents=True, exist_ok=True)

    outputs = {
        "alpha_sweep": figures_dir / "alpha_sweep.png",
        "confusion_matrix": figures_dir / "confusion_matrix.png",
    }
    plot_alpha_sweep(report.search, outputs["alpha_sweep"])
    plot_confusion_matrix(report.test, outputs["confusion_matrix"])
    return outputs
