"""Naive Bayes spam classifier with additive smoothing and held-out alpha selection."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "data",
    "exceptions",
    "preprocessing",
    "vocabulary",
    "modeling",
    "evaluation",
    "search",
    "experiment",
    "visualization",
    "cli",
]
