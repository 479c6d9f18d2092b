"""Per-class word frequency tables built from a training split."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from .data import Label, Message
from .exceptions import EmptyTrainingSetError
from .preprocessing import Tokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VocabularyEntry:
    """Occurrence counts of a single word in each class."""

    word: str
    freq_ham: int = 0
    freq_spam: int = 0

    def frequency(self, label: Label) -> int:
        return self.freq_spam if label is Label.SPAM else self.freq_ham


class Vocabulary(Mapping[str, VocabularyEntry]):
    """
    Read-only mapping of word -> :class:`VocabularyEntry`.

    Class totals are computed once at construction since every likelihood
    computation needs them.
    """

    def __init__(self, entries: Iterable[VocabularyEntry] = ()):
        self._entries: Dict[str, VocabularyEntry] = {}
        for entry in entries:
            if entry.freq_ham < 0 or entry.freq_spam < 0:
                raise ValueError(f"Negative frequency for word {entry.word!r}.")
            if entry.word in self._entries:
                raise ValueError(f"Duplicate vocabulary entry for word {entry.word!r}.")
            self._entries[entry.word] = entry
        self._n_ham = sum(entry.freq_ham for entry in self._entries.values())
        self._n_spam = sum(entry.freq_spam for entry in self._entries.values())

    @classmethod
    def from_counts(cls, counts: Mapping[str, Mapping[str, int]]) -> "Vocabulary":
        """Build from ``{word: {"ham": n, "spam": m}}``; missing classes default to 0."""
        return cls(
            VocabularyEntry(word=word, freq_ham=int(c.get("ham", 0)), freq_spam=int(c.get("spam", 0)))
            for word, c in counts.items()
        )

    def __getitem__(self, word: str) -> VocabularyEntry:
        return self._entries[word]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)}, n_ham={self._n_ham}, n_spam={self._n_spam})"

    @property
    def n_ham(self) -> int:
        return self._n_ham

    @property
    def n_spam(self) -> int:
        return self._n_spam

    def class_total(self, label: Label) -> int:
        return self._n_spam if label is Label.SPAM else self._n_ham


def build_vocabulary(
    train_messages: Iterable[Message],
    tokenizer: Optional[Callable[[str], List[str]]] = None,
) -> Vocabulary:
    """
    Count word occurrences per class over the training messages.

    Every word seen in either class gets an entry; a word never seen in one
    class has frequency 0 there. No smoothing is applied.
    """
    tokenize = tokenizer or Tokenizer()
    counts: Dict[Label, Counter] = {Label.HAM: Counter(), Label.SPAM: Counter()}
    n_messages = 0
    for message in train_messages:
        counts[message.label].update(tokenize(message.text))
        n_messages += 1

    if n_messages == 0:
        raise EmptyTrainingSetError()

    ham_counts, spam_counts = counts[Label.HAM], counts[Label.SPAM]
    words = list(ham_counts)
    words.extend(word for word in spam_counts if word not in ham_counts)
    vocabulary = Vocabulary(
        VocabularyEntry(word=word, freq_ham=ham_counts[word], freq_spam=spam_counts[word]) for word in words
    )
    logger.info(
        "Built vocabulary of %d words from %d messages (N_ham=%d, N_spam=%d)",
        len(vocabulary),
        n_messages,
        vocabulary.n_ham,
        vocabulary.n_spam,
    )
    return vocabulary
