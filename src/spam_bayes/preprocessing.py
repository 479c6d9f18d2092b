"""Text normalization and tokenization."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from nltk.stem import SnowballStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .config import PreprocessingConfig

DIGIT_PATTERN = re.compile(r"\d+")
PUNCTUATION_PATTERN = re.compile(r"[^\w\s]|_")
MULTISPACE_PATTERN = re.compile(r"\s+")


class Tokenizer:
    """
    Normalize raw message text and split it into word tokens.

    The default pipeline lowercases, strips digits and punctuation, collapses
    whitespace and splits. Repeated tokens and their order are preserved.
    Stop-word removal and stemming are optional extra stages.
    """

    def __init__(self, config: Optional[PreprocessingConfig] = None):
        self.config = config or PreprocessingConfig()
        if self.config.use_stemmer:
            self.stemmer = SnowballStemmer("english")
        else:
            self.stemmer = None
        if self.config.remove_stop_words:
            stop_words = set(ENGLISH_STOP_WORDS)
            stop_words.update(word.lower() for word in self.config.extra_stop_words)
            self.stop_words = frozenset(stop_words)
        else:
            self.stop_words = frozenset()

    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)

    def tokenize(self, text: str) -> List[str]:
        """Return the ordered token sequence for ``text``."""
        normalized = self.normalize(text)
        if not normalized:
            return []
        tokens = normalized.split()
        tokens = self._remove_stopwords(tokens)
        return self._stem_tokens(tokens)

    def normalize(self, text: str) -> str:
        cfg = self.config
        working = text or ""
        if cfg.lowercase:
            working = working.lower()
        if cfg.strip_numbers:
            working = DIGIT_PATTERN.sub(" ", working)
        if cfg.strip_punctuation:
            working = PUNCTUATION_PATTERN.sub(" ", working)
        if cfg.collapse_whitespace:
            working = MULTISPACE_PATTERN.sub(" ", working)
        return working.strip()

    def _remove_stopwords(self, tokens: Sequence[str]) -> List[str]:
        if not self.stop_words:
            return list(tokens)
        return [token for token in tokens if token not in self.stop_words]

    def _stem_tokens(self, tokens: Sequence[str]) -> List[str]:
        if not self.stemmer:
            return list(tokens)
        return [self.stemmer.stem(token) for token in tokens]


def tokenize(text: str) -> List[str]:
    """Tokenize with the default normalization pipeline."""
    return _DEFAULT_TOKENIZER.tokenize(text)


_DEFAULT_TOKENIZER = Tokenizer()
