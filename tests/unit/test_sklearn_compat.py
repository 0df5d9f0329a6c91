"""Tests for penalty arguments across scikit-learn releases."""

import pytest

from sentiment_vocab.shared import sklearn_compat
from sentiment_vocab.shared.sklearn_compat import penalty_params


def test_ratio_api_from_1_8(monkeypatch):
    monkeypatch.setattr(sklearn_compat, "USE_L1_RATIO", True)
    assert penalty_params("l1") == {"l1_ratio": 1.0}
    assert penalty_params("l2") == {"l1_ratio": 0.0}
    assert penalty_params("l2", cv=True) == {"l1_ratios": (0.0,)}


def test_penalty_api_before_1_8(monkeypatch):
    monkeypatch.setattr(sklearn_compat, "USE_L1_RATIO", False)
    assert penalty_params("l1") == {"penalty": "l1"}
    assert penalty_params("l2", cv=True) == {"penalty": "l2"}


def test_flag_follows_installed_version():
    assert sklearn_compat.USE_L1_RATIO == (sklearn_compat.sklearn_version() >= (1, 8))


def test_unknown_penalty_rejected():
    with pytest.raises(ValueError):
        penalty_params("elasticnet")
