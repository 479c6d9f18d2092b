"""Configuration management for the spam classifier."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

import yaml


@dataclass
class PathConfig:
    """Filesystem locations used by the toolkit."""

    dataset: Path = Path("SMSSpamCollection")
    reports_dir: Path = Path("reports")
    figures_dirname: str = "figures"
    metrics_name: str = "metrics.json"

    @property
    def figures_dir(self) -> Path:
        return self.reports_dir / self.figures_dirname

    @property
    def metrics_path(self) -> Path:
        return self.reports_dir / self.metrics_name


@dataclass
class DatasetConfig:
    """Layout of the delimited source file."""

    separator: str = "\t"
    encoding: str = "utf-8"


@dataclass
class PreprocessingConfig:
    """Text normalization options."""

    lowercase: bool = True
    strip_numbers: bool = True
    strip_punctuation: bool = True
    collapse_whitespace: bool = True
    remove_stop_words: bool = False
    use_stemmer: bool = False
    extra_stop_words: Tuple[str, ...] = field(default_factory=tuple)


@dataclass
class SplitConfig:
    """Train/cv/test proportions and the split seed."""

    train_size: float = 0.8
    cv_size: float = 0.1
    test_size: float = 0.1
    random_state: int = 1

    @property
    def proportions(self) -> Tuple[float, float, float]:
        return (self.train_size, self.cv_size, self.test_size)


@dataclass
class SearchConfig:
    """Smoothing-parameter sweep options."""

    alphas: Tuple[float, ...] = (0.001, 0.25, 0.5, 0.75, 1.0)
    scoring_policy: str = "distinct"
    n_jobs: int = 1


@dataclass
class Config:
    """Top-level configuration container."""

    paths: PathConfig = field(default_factory=PathConfig)
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    preprocessing: PreprocessingConfig = field(default_factory=PreprocessingConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def ensure_directories(self) -> None:
        """Create output directories if they do not exist."""
        self.paths.reports_dir.mkdir(parents=True, exist_ok=True)
        self.paths.figures_dir.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the config to a dictionary."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(instance: Any) -> Dict[str, Any]:
    if not is_dataclass(instance):
        raise TypeError("Expected dataclass instance.")
    output: Dict[str, Any] = {}
    for field_info in fields(instance):
        value = getattr(instance, field_info.name)
        if is_dataclass(value):
            output[field_info.name] = _dataclass_to_dict(value)
        elif isinstance(value, (tuple, list)):
            output[field_info.name] = list(value)
        elif isinstance(value, Path):
            output[field_info.name] = str(value)
        else:
            output[field_info.name] = value
    return output


def load_config(path: Path | None = None) -> Config:
    """
    Load configuration from YAML if provided, otherwise return defaults.

    Parameters
    ----------
    path:
        Optional path to a YAML configuration file.
    """
    config = Config()
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    _apply_updates(config, raw)
    return config


def _apply_updates(instance: Any, updates: Dict[str, Any]) -> None:
    """Recursively apply overrides onto a dataclass instance."""
    for name, value in updates.items():
        if not hasattr(instance, name):
            continue
        current = getattr(instance, name)
        if is_dataclass(current) and isinstance(value, dict):
            _apply_updates(current, value)
        elif is_dataclass(current) and value is None:
            continue
        else:
            setattr(instance, name, _coerce_value(current, value))


def _coerce_value(current: Any, value: Any) -> Any:
    if isinstance(current, Path):
        return Path(value)
    if isinstance(current, tuple) and isinstance(value, Iterable) and not isinstance(value, str):
        return tuple(value)
    return value
