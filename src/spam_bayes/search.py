"""Smoothing-parameter selection on a held-out split."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import pandas as pd
from joblib import Parallel, delayed

from .data import Message
from .modeling import NaiveBayesClassifier, validate_alpha

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Outcome of an alpha sweep; ``results`` keeps candidate input order."""

    best_alpha: float
    best_accuracy: float
    results: Tuple[Tuple[float, float], ...]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.results), columns=["alpha", "accuracy"])

    def to_dict(self) -> dict:
        return {
            "best_alpha": self.best_alpha,
            "best_accuracy": self.best_accuracy,
            "results": [{"alpha": alpha, "accuracy": accuracy} for alpha, accuracy in self.results],
        }


def _cv_accuracy(classifier: NaiveBayesClassifier, cv_messages: Sequence[Message], alpha: float) -> float:
    return classifier.evaluate(cv_messages, alpha).accuracy


def search_alpha(
    classifier: NaiveBayesClassifier,
    candidates: Sequence[float],
    cv_messages: Sequence[Message],
    n_jobs: int = 1,
) -> SearchResult:
    """
    Evaluate each alpha candidate on ``cv_messages`` and pick the best.

    The classifier's vocabulary and parameters are reused for every
    candidate. The highest accuracy wins; among equal accuracies the
    earliest candidate in ``candidates`` is kept.
    """
    candidates = list(candidates)
    cv_messages = list(cv_messages)
    if len(candidates) == 0:
        raise ValueError("At least one alpha candidate is required.")
    if len(cv_messages) == 0:
        raise ValueError("Cannot search alpha on an empty cross-validation set.")
    alphas: List[float] = [validate_alpha(alpha) for alpha in candidates]

    if n_jobs == 1:
        accuracies = [_cv_accuracy(classifier, cv_messages, alpha) for alpha in alphas]
    else:
        accuracies = Parallel(n_jobs=n_jobs)(
            delayed(_cv_accuracy)(classifier, cv_messages, alpha) for alpha in alphas
        )

    best_alpha, best_accuracy = alphas[0], accuracies[0]
    for alpha, accuracy in zip(alphas, accuracies):
        logger.info("alpha=%g cv_accuracy=%.4f", alpha, accuracy)
        if accuracy > best_accuracy:
            best_alpha, best_accuracy = alpha, accuracy

    logger.info("Selected alpha=%g (cv_accuracy=%.4f)", best_alpha, best_accuracy)
    return SearchResult(
        best_alpha=best_alpha,
        best_accuracy=best_accuracy,
        results=tuple(zip(alphas, accuracies)),
    )
