"""Error types raised by the spam classifier core."""

from __future__ import annotations


class SpamBayesError(Exception):
    """Base class for all classifier errors."""


class EmptyTrainingSetError(SpamBayesError):
    """Raised when a model is trained on zero messages."""

    def __init__(self, message: str = "Training set contains no messages.") -> None:
        super().__init__(message)


class EmptyVocabularyError(SpamBayesError):
    """Raised when training produced no vocabulary entries."""

    def __init__(self, message: str = "Vocabulary is empty; no tokens survived normalization.") -> None:
        super().__init__(message)


class InvalidAlphaError(SpamBayesError, ValueError):
    """Raised for a negative or non-finite smoothing parameter."""

    def __init__(self, alpha: float) -> None:
        super().__init__(f"Smoothing parameter alpha must be a finite non-negative number, got {alpha!r}.")
        self.alpha = alpha
