"""End-to-end training, alpha selection and test evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .config import Config
from .data import DatasetBundle, Message, split_messages
from .evaluation import EvaluationResult
from .modeling import NaiveBayesClassifier, ScoringPolicy
from .preprocessing import Tokenizer
from .search import SearchResult, search_alpha

logger = logging.getLogger(__name__)


@dataclass
class ExperimentReport:
    """Everything produced by one train/search/test run."""

    bundle: DatasetBundle
    classifier: NaiveBayesClassifier
    search: SearchResult
    test: EvaluationResult

    @property
    def best_alpha(self) -> float:
        return self.search.best_alpha

    def to_dict(self) -> Dict[str, Any]:
        params = self.classifier.parameters
        return {
            "split": self.bundle.sizes(),
            "model": {
                "n_ham": params.n_ham,
                "n_spam": params.n_spam,
                "n_vocabulary": params.n_vocabulary,
                "p_spam": params.p_spam,
                "p_ham": params.p_ham,
                "scoring_policy": self.classifier.policy.value,
            },
            "search": self.search.to_dict(),
            "test": self.test.to_dict(),
        }


def train_classifier(train_messages: Sequence[Message], config: Config) -> NaiveBayesClassifier:
    """Fit a classifier using the configured tokenizer and scoring policy."""
    return NaiveBayesClassifier.fit(
        train_messages,
        tokenizer=Tokenizer(config.preprocessing),
        policy=ScoringPolicy(config.search.scoring_policy),
    )


def run_experiment(messages: Sequence[Message], config: Config) -> ExperimentReport:
    """Split, fit on train, pick alpha on cv, then score once on test."""
    bundle = split_messages(messages, config.split.proportions, seed=config.split.random_state)
    logger.info("Split %d messages into %s", len(messages), bundle.sizes())

    classifier = train_classifier(bundle.train, config)
    search = search_alpha(classifier, config.search.alphas, bundle.cv, n_jobs=config.search.n_jobs)
    test = classifier.evaluate(bundle.test, search.best_alpha)
    logger.info("Test accuracy at alpha=%g: %.4f", search.best_alpha, test.accuracy)
    return ExperimentReport(bundle=bundle, classifier=classifier, search=search, test=test)
