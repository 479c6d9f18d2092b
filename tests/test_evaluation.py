import json

import pytest

from spam_bayes.config import Config, PathConfig
from spam_bayes.data import Label
from spam_bayes.evaluation import evaluate, save_metrics

HAM, SPAM = Label.HAM, Label.SPAM


def test_accuracy_and_confusion():
    result = evaluate([SPAM, HAM, SPAM, HAM], [SPAM, SPAM, HAM, HAM])

    assert result.accuracy == pytest.approx(0.5)
    assert result.total == 4
    assert result.count(SPAM, SPAM) == 1
    assert result.count(HAM, SPAM) == 1
    assert result.count(SPAM, HAM) == 1
    assert result.count(HAM, HAM) == 1
    assert sum(result.confusion.values()) == 4


def test_confusion_is_keyed_by_label_pair():
    result = evaluate([SPAM, SPAM, SPAM], [HAM, SPAM, SPAM])
    assert result.confusion[(SPAM, SPAM)] == 2
    assert result.confusion[(SPAM, HAM)] == 1
    assert result.confusion[(HAM, HAM)] == 0
    assert result.accuracy == pytest.approx(2 / 3)


def test_spam_precision_recall():
    result = evaluate([SPAM, HAM, SPAM, HAM], [SPAM, SPAM, HAM, HAM])
    assert result.precision == pytest.approx(0.5)
    assert result.recall == pytest.approx(0.5)
    assert result.f1_score == pytest.approx(0.5)


def test_no_spam_predicted_has_zero_precision():
    result = evaluate([HAM, HAM], [SPAM, HAM])
    assert result.precision == 0.0
    assert result.recall == 0.0
    assert result.accuracy == pytest.approx(0.5)


def test_accepts_plain_string_labels():
    result = evaluate(["spam", "ham"], ["spam", "ham"])
    assert result.accuracy == 1.0
    assert result.count("spam", "spam") == 1


@pytest.mark.parametrize(
    "predictions, truth",
    [
        ([HAM], [HAM]),
        ([SPAM, SPAM, HAM], [HAM, HAM, SPAM]),
        ([SPAM] * 7 + [HAM] * 3, [HAM] * 5 + [SPAM] * 5),
    ],
)
def test_accuracy_bounds(predictions, truth):
    result = evaluate(predictions, truth)
    assert 0.0 <= result.accuracy <= 1.0
    assert sum(result.confusion.values()) == len(predictions)


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        evaluate([SPAM], [SPAM, HAM])


def test_empty_predictions_raise():
    with pytest.raises(ValueError):
        evaluate([], [])


def test_unknown_label_raises():
    with pytest.raises(ValueError):
        evaluate(["eggs"], ["spam"])


def test_save_metrics(tmp_path):
    config = Config(paths=PathConfig(reports_dir=tmp_path / "reports"))
    result = evaluate([SPAM, HAM], [SPAM, SPAM])

    path = save_metrics(result.to_dict(), config)

    assert path == config.paths.metrics_path
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["accuracy"] == pytest.approx(0.5)
    assert {"predicted": "ham", "actual": "spam", "count": 1} in saved["confusion"]
