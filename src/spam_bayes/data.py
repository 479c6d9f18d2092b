"""Dataset loading and splitting utilities."""

from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import Config
from .exceptions import EmptyTrainingSetError

logger = logging.getLogger(__name__)


class Label(str, Enum):
    """Class labels understood by the classifier."""

    HAM = "ham"
    SPAM = "spam"

    def __str__(self) -> str:
        return self.value


LABEL_NORMALIZATION = {
    "ham": Label.HAM,
    "spam": Label.SPAM,
    "0": Label.HAM,
    "1": Label.SPAM,
}


@dataclass(frozen=True)
class Message:
    """A single labeled text message."""

    text: str
    label: Label


@dataclass(frozen=True)
class DatasetBundle:
    """Disjoint train/cv/test partitions of a message collection."""

    train: Tuple[Message, ...]
    cv: Tuple[Message, ...]
    test: Tuple[Message, ...]

    def sizes(self) -> dict:
        return {"train": len(self.train), "cv": len(self.cv), "test": len(self.test)}


def normalize_label(raw: object) -> Label:
    """Map a raw label value onto :class:`Label`."""
    key = str(raw).strip().lower()
    try:
        return LABEL_NORMALIZATION[key]
    except KeyError:
        raise ValueError(f"Unrecognized label {raw!r}; expected one of {sorted(LABEL_NORMALIZATION)}") from None


class DataRepository:
    """Thin wrapper around dataset access patterns."""

    def __init__(self, config: Config):
        self.config = config

    def load_raw(self) -> pd.DataFrame:
        """Load the delimited dataset and normalize schema."""
        dataset_path: Path = self.config.paths.dataset
        if not dataset_path.exists():
            raise FileNotFoundError(f"Dataset not found at {dataset_path}")

        df = pd.read_csv(
            dataset_path,
            sep=self.config.dataset.separator,
            encoding=self.config.dataset.encoding,
            header=None,
            names=["label", "text"],
            quoting=csv.QUOTE_NONE,
            dtype=str,
            keep_default_na=False,
        )

        labels = []
        for row_number, raw_label in enumerate(df["label"], start=1):
            try:
                labels.append(normalize_label(raw_label))
            except ValueError as exc:
                raise ValueError(f"{dataset_path}, row {row_number}: {exc}") from exc
        df["label"] = labels
        df["text"] = df["text"].astype(str)
        df["message_id"] = range(1, len(df) + 1)
        logger.info("Loaded %d messages from %s", len(df), dataset_path)
        return df[["message_id", "label", "text"]]

    def load_messages(self) -> List[Message]:
        """Load the dataset as an ordered list of :class:`Message`."""
        df = self.load_raw()
        return [Message(text=text, label=label) for label, text in zip(df["label"], df["text"])]

    def split(self, messages: Sequence[Message]) -> DatasetBundle:
        """Split with the configured proportions and seed."""
        cfg = self.config.split
        return split_messages(messages, cfg.proportions, seed=cfg.random_state)


def split_messages(
    messages: Sequence[Message],
    proportions: Tuple[float, float, float] = (0.8, 0.1, 0.1),
    seed: int = 1,
) -> DatasetBundle:
    """
    Deterministically split ``messages`` into train, cv and test subsets.

    Indices are shuffled with a generator seeded from ``seed`` alone, so the
    same input and seed always produce the same split. Train and cv sizes are
    rounded down; test receives the remainder.
    """
    if len(proportions) != 3:
        raise ValueError("Expected three proportions (train, cv, test).")
    if any(p < 0 for p in proportions):
        raise ValueError(f"Proportions must be non-negative, got {proportions}.")
    if not math.isclose(sum(proportions), 1.0, abs_tol=1e-9):
        raise ValueError(f"Proportions must sum to 1, got {sum(proportions)}.")

    total = len(messages)
    n_train = math.floor(round(total * proportions[0], 9))
    n_cv = math.floor(round(total * proportions[1], 9))
    if n_train == 0:
        raise EmptyTrainingSetError(
            f"Split of {total} messages with train proportion {proportions[0]} leaves no training data."
        )

    order = np.random.default_rng(seed).permutation(total)
    shuffled = tuple(messages[int(i)] for i in order)
    bundle = DatasetBundle(
        train=shuffled[:n_train],
        cv=shuffled[n_train : n_train + n_cv],
        test=shuffled[n_train + n_cv :],
    )
    logger.debug("Split sizes: %s (seed=%s)", bundle.sizes(), seed)
    return bundle
