"""Naive Bayes probability model and classifier."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from .data import Label, Message
from .evaluation import EvaluationResult, evaluate
from .exceptions import EmptyTrainingSetError, EmptyVocabularyError, InvalidAlphaError
from .preprocessing import Tokenizer
from .vocabulary import Vocabulary, build_vocabulary

logger = logging.getLogger(__name__)

MessageLike = Union[Message, str]


class ScoringPolicy(str, Enum):
    """How repeated tokens within one message contribute to its score."""

    DISTINCT = "distinct"
    OCCURRENCE = "occurrence"


def validate_alpha(alpha: float) -> float:
    """Return ``alpha`` as a float, rejecting negative and non-finite values."""
    try:
        value = float(alpha)
    except (TypeError, ValueError):
        raise InvalidAlphaError(alpha) from None
    if not math.isfinite(value) or value < 0:
        raise InvalidAlphaError(alpha)
    return value


def _log(value: float) -> float:
    if math.isnan(value):
        raise ValueError("Cannot take the log of NaN.")
    return math.log(value) if value > 0 else -math.inf


@dataclass(frozen=True)
class ModelParameters:
    """Priors and class totals derived from the training split."""

    n_ham: int
    n_spam: int
    n_vocabulary: int
    p_spam: float

    @property
    def p_ham(self) -> float:
        return 1.0 - self.p_spam

    def prior(self, label: Label) -> float:
        return self.p_spam if label is Label.SPAM else self.p_ham

    def class_total(self, label: Label) -> int:
        return self.n_spam if label is Label.SPAM else self.n_ham


class ProbabilityModel:
    """
    Class priors plus additively smoothed word likelihoods.

    For a vocabulary word ``w`` and class ``c``::

        P(w | c) = (freq(w, c) + alpha) / (N_c + alpha * N_vocabulary)

    where ``N_c`` is the total word count of class ``c`` itself.
    """

    def __init__(self, vocabulary: Vocabulary, parameters: ModelParameters):
        self.vocabulary = vocabulary
        self.parameters = parameters

    @classmethod
    def fit(cls, train_messages: Sequence[Message], vocabulary: Vocabulary) -> "ProbabilityModel":
        """Derive priors from ``train_messages`` and totals from ``vocabulary``."""
        if not train_messages:
            raise EmptyTrainingSetError()
        if len(vocabulary) == 0:
            raise EmptyVocabularyError()
        n_spam_messages = sum(1 for message in train_messages if message.label is Label.SPAM)
        parameters = ModelParameters(
            n_ham=vocabulary.n_ham,
            n_spam=vocabulary.n_spam,
            n_vocabulary=len(vocabulary),
            p_spam=n_spam_messages / len(train_messages),
        )
        logger.info(
            "Fitted model: P_spam=%.4f, P_ham=%.4f, N_vocabulary=%d",
            parameters.p_spam,
            parameters.p_ham,
            parameters.n_vocabulary,
        )
        return cls(vocabulary, parameters)

    @classmethod
    def from_vocabulary(cls, vocabulary: Vocabulary, p_spam: float) -> "ProbabilityModel":
        """Build a model from a known vocabulary and spam prior."""
        if len(vocabulary) == 0:
            raise EmptyVocabularyError()
        if not 0.0 <= p_spam <= 1.0:
            raise ValueError(f"p_spam must lie in [0, 1], got {p_spam}.")
        parameters = ModelParameters(
            n_ham=vocabulary.n_ham,
            n_spam=vocabulary.n_spam,
            n_vocabulary=len(vocabulary),
            p_spam=p_spam,
        )
        return cls(vocabulary, parameters)

    def word_probability(self, word: str, label: Label, alpha: float) -> float:
        """
        Smoothed likelihood of ``word`` under ``label``.

        Raises ``KeyError`` for words outside the vocabulary. With ``alpha == 0``
        and an empty class the denominator vanishes and 0.0 is returned.
        """
        alpha = validate_alpha(alpha)
        entry = self.vocabulary[word]
        denominator = self.parameters.class_total(label) + alpha * self.parameters.n_vocabulary
        if denominator == 0:
            return 0.0
        return (entry.frequency(label) + alpha) / denominator


@dataclass(frozen=True)
class MessageScores:
    """Unnormalized class posteriors for one message, kept in log space."""

    log_spam: float
    log_ham: float

    @property
    def spam(self) -> float:
        return math.exp(self.log_spam)

    @property
    def ham(self) -> float:
        return math.exp(self.log_ham)

    @property
    def label(self) -> Label:
        # Ties resolve to spam.
        return Label.SPAM if self.log_spam >= self.log_ham else Label.HAM


class NaiveBayesClassifier:
    """
    Spam/ham classifier over a fitted :class:`ProbabilityModel`.

    The model is shared read-only; alpha is supplied per call so one fitted
    classifier serves a whole smoothing sweep.
    """

    def __init__(
        self,
        model: ProbabilityModel,
        tokenizer: Optional[Callable[[str], List[str]]] = None,
        policy: ScoringPolicy = ScoringPolicy.DISTINCT,
    ):
        self.model = model
        self.tokenizer = tokenizer or Tokenizer()
        self.policy = ScoringPolicy(policy)

    @classmethod
    def fit(
        cls,
        train_messages: Sequence[Message],
        tokenizer: Optional[Callable[[str], List[str]]] = None,
        policy: ScoringPolicy = ScoringPolicy.DISTINCT,
    ) -> "NaiveBayesClassifier":
        """Build the vocabulary and model from ``train_messages``."""
        train_messages = list(train_messages)
        tokenizer = tokenizer or Tokenizer()
        vocabulary = build_vocabulary(train_messages, tokenizer)
        model = ProbabilityModel.fit(train_messages, vocabulary)
        return cls(model, tokenizer=tokenizer, policy=policy)

    @property
    def vocabulary(self) -> Vocabulary:
        return self.model.vocabulary

    @property
    def parameters(self) -> ModelParameters:
        return self.model.parameters

    def scored_words(self, message: MessageLike) -> List[str]:
        """Tokens of ``message`` that contribute to its score, per the policy."""
        tokens = self.tokenizer(_text_of(message))
        if self.policy is ScoringPolicy.DISTINCT:
            tokens = list(dict.fromkeys(tokens))
        return [token for token in tokens if token in self.model.vocabulary]

    def score(self, message: MessageLike, alpha: float) -> MessageScores:
        alpha = validate_alpha(alpha)
        words = self.scored_words(message)
        params = self.model.parameters
        log_spam = _log(params.p_spam) + sum(
            _log(self.model.word_probability(word, Label.SPAM, alpha)) for word in words
        )
        log_ham = _log(params.p_ham) + sum(
            _log(self.model.word_probability(word, Label.HAM, alpha)) for word in words
        )
        return MessageScores(log_spam=log_spam, log_ham=log_ham)

    def predict(self, message: MessageLike, alpha: float) -> Label:
        """Classify a single message."""
        return self.score(message, alpha).label

    def predict_many(self, messages: Iterable[MessageLike], alpha: float) -> List[Label]:
        alpha = validate_alpha(alpha)
        return [self.predict(message, alpha) for message in messages]

    def evaluate(self, messages: Sequence[Message], alpha: float) -> EvaluationResult:
        """Classify labeled ``messages`` and score the predictions."""
        predictions = self.predict_many(messages, alpha)
        return evaluate(predictions, [message.label for message in messages])


def _text_of(message: MessageLike) -> str:
    return message.text if isinstance(message, Message) else message


def extract_top_features(
    classifier: NaiveBayesClassifier, top_n: int, alpha: float = 1.0
) -> Dict[str, pd.DataFrame]:
    """
    Rank vocabulary words by smoothed log-likelihood ratio.

    Returns a dictionary with the ``top_n`` most spam-indicative and most
    ham-indicative words.
    """
    alpha = validate_alpha(alpha)
    model = classifier.model
    rows = []
    for word in model.vocabulary:
        p_spam = model.word_probability(word, Label.SPAM, alpha)
        p_ham = model.word_probability(word, Label.HAM, alpha)
        rows.append({"feature": word, "weight": _log(p_spam) - _log(p_ham)})

    frame = pd.DataFrame(rows, columns=["feature", "weight"])
    # Stable sorts keep first-seen order among equal weights.
    spam_ranked = frame.sort_values("weight", ascending=False, kind="mergesort")
    ham_ranked = frame.sort_values("weight", ascending=True, kind="mergesort")
    return {
        "spam": spam_ranked.head(top_n).reset_index(drop=True),
        "ham": ham_ranked.head(top_n).reset_index(drop=True),
    }
