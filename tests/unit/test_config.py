"""Tests for pipeline configuration loading and validation."""

import pytest
from pydantic import ValidationError

from sentiment_vocab.config import STOP_WORDS, PipelineConfig, load_config


def test_defaults_match_reference_settings():
    cfg = PipelineConfig()
    assert cfg.ngram_range == (1, 4)
    assert (cfg.min_count, cfg.min_doc_prop, cfg.max_doc_prop) == (10, 0.001, 0.5)
    assert (cfg.n0, cfg.n1, cfg.nt) == (10000, 2000, 1000)
    assert cfg.cv_folds == 5
    assert cfg.convergence_tol == 1e-5
    assert cfg.max_iter == 1000
    assert cfg.test_size == 0.2
    assert cfg.stop_words == STOP_WORDS
    assert len(set(STOP_WORDS)) == len(STOP_WORDS)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SENTIMENT_VOCAB_NT", "500")
    monkeypatch.setenv("SENTIMENT_VOCAB_MIN_COUNT", "3")
    cfg = load_config()
    assert cfg.nt == 500
    assert cfg.min_count == 3


def test_keyword_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("SENTIMENT_VOCAB_SEED", "1")
    assert load_config(seed=2).seed == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"ngram_min": 3, "ngram_max": 2},
        {"min_doc_prop": 0.6, "max_doc_prop": 0.5},
        {"nt": 3000},
        {"n1": 20000},
        {"test_size": 1.0},
        {"tfidf_norm": "l3"},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        load_config(**overrides)


def test_config_is_immutable():
    cfg = PipelineConfig()
    with pytest.raises(ValidationError):
        cfg.nt = 5
