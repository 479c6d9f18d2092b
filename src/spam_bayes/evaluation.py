"""Prediction scoring and metrics persistence."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence, Tuple

from sklearn.metrics import precision_recall_fscore_support

from .config import Config
from .data import Label

ConfusionKey = Tuple[Label, Label]


@dataclass(frozen=True)
class EvaluationResult:
    """Accuracy plus confusion counts keyed by ``(predicted, actual)``."""

    accuracy: float
    confusion: Mapping[ConfusionKey, int]
    total: int
    precision: float = 0.0
    recall: float = 0.0
    f1_score: float = 0.0
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def count(self, predicted: Label, actual: Label) -> int:
        return self.confusion.get((Label(predicted), Label(actual)), 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1_score": self.f1_score,
            "total": self.total,
            "confusion": [
                {"predicted": predicted.value, "actual": actual.value, "count": count}
                for (predicted, actual), count in self.confusion.items()
            ],
            "generated_at": self.generated_at,
        }


def evaluate(predictions: Sequence[Label], ground_truth: Sequence[Label]) -> EvaluationResult:
    """
    Compare predictions against ground truth.

    Accuracy is the fraction of positions where the predicted label equals
    the true label. Precision, recall and F1 are reported for the spam class.
    """
    if len(predictions) != len(ground_truth):
        raise ValueError(
            f"Got {len(predictions)} predictions for {len(ground_truth)} ground-truth labels."
        )
    if not predictions:
        raise ValueError("Cannot evaluate an empty prediction set.")

    y_pred = [Label(label) for label in predictions]
    y_true = [Label(label) for label in ground_truth]

    counts = Counter(zip(y_pred, y_true))
    confusion = {
        (predicted, actual): counts.get((predicted, actual), 0)
        for predicted in Label
        for actual in Label
    }
    correct = sum(count for (predicted, actual), count in confusion.items() if predicted is actual)

    precision, recall, f1, _ = precision_recall_fscore_support(
        [label.value for label in y_true],
        [label.value for label in y_pred],
        labels=[Label.HAM.value, Label.SPAM.value],
        average=None,
        zero_division=0,
    )
    return EvaluationResult(
        accuracy=correct / len(y_pred),
        confusion=confusion,
        total=len(y_pred),
        precision=float(precision[1]),
        recall=float(recall[1]),
        f1_score=float(f1[1]),
    )


def save_metrics(metrics: Dict[str, Any], config: Config) -> Path:
    """Persist metrics to the reports directory as JSON."""
    config.paths.reports_dir.mkdir(parents=True, exist_ok=True)
    metrics_path = config.paths.metrics_path
    with metrics_path.open("w", encoding="utf-8") as fh:
        json.dump(metrics, fh, indent=2)
    return metrics_path
