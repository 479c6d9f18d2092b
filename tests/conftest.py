# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the spam-bayes test suite.
# =============================================================================

import pytest

from spam_bayes.data import Label, Message
from spam_bayes.modeling import NaiveBayesClassifier, ProbabilityModel
from spam_bayes.vocabulary import Vocabulary


@pytest.fixture
def worked_vocabulary():
    """
    Three-word vocabulary with hand-checkable totals.

    N_ham = 12, N_spam = 13, N_vocabulary = 3.
    """
    return Vocabulary.from_counts(
        {
            "win": {"ham": 0, "spam": 5},
            "free": {"ham": 2, "spam": 8},
            "hello": {"ham": 10, "spam": 0},
        }
    )


@pytest.fixture
def worked_model(worked_vocabulary):
    """Model over the worked vocabulary with P_spam = 0.3."""
    return ProbabilityModel.from_vocabulary(worked_vocabulary, p_spam=0.3)


@pytest.fixture
def worked_classifier(worked_model):
    return NaiveBayesClassifier(worked_model)


@pytest.fixture
def small_training_set():
    """A handful of labeled messages for vocabulary tests."""
    return [
        Message("Hello, how are you?", Label.HAM),
        Message("hello hello lunch at 12", Label.HAM),
        Message("WIN a FREE prize!!!", Label.SPAM),
        Message("Free entry: win win win", Label.SPAM),
        Message("Call 0800 now for your free prize", Label.SPAM),
    ]


@pytest.fixture
def corpus():
    """Forty clearly separable messages, half spam and half ham."""
    spam = [
        Message(f"WINNER!! You have won a free prize #{i}. Call now to claim your cash", Label.SPAM)
        for i in range(20)
    ]
    ham = [
        Message(f"Are we still meeting for lunch at {i}? See you later, mate", Label.HAM)
        for i in range(20)
    ]
    messages = []
    for spam_message, ham_message in zip(spam, ham):
        messages.extend([spam_message, ham_message])
    return messages


@pytest.fixture
def dataset_file(tmp_path, corpus):
    """Write ``corpus`` in the tab-separated label/text layout."""
    path = tmp_path / "SMSSpamCollection"
    lines = [f"{message.label.value}\t{message.text}" for message in corpus]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path, dataset_file):
    """YAML config pointing at ``dataset_file`` with reports under ``tmp_path``."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "paths:",
                f"  dataset: {dataset_file.as_posix()}",
                f"  reports_dir: {(tmp_path / 'reports').as_posix()}",
                "split:",
                "  random_state: 7",
                "search:",
                "  alphas: [0.001, 0.25, 0.5, 0.75, 1.0]",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path
