"""Tests for corpus loading, splitting and prediction output."""

import numpy as np
import pandas as pd
import pytest

from sentiment_vocab.corpus import from_frame, load_corpus, split_corpus, write_predictions
from sentiment_vocab.errors import CorpusFormatError


def test_load_corpus(reviews_tsv, reviews_frame):
    corpus = load_corpus(reviews_tsv)
    assert len(corpus) == len(reviews_frame)
    np.testing.assert_array_equal(corpus.ids, reviews_frame["id"].to_numpy())
    np.testing.assert_array_equal(corpus.labels, reviews_frame["sentiment"].to_numpy())
    assert corpus.texts[0] == reviews_frame["review"].iloc[0]


def test_accessors_return_copies(reviews_tsv):
    corpus = load_corpus(reviews_tsv)
    labels = corpus.labels
    labels[:] = 1
    assert corpus.labels.sum() == len(corpus) // 2


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_corpus("does/not/exist.tsv")


def test_missing_required_column(tmp_path, reviews_frame, tsv_writer):
    path = tsv_writer(reviews_frame.drop(columns=["review"]), tmp_path / "bad.tsv")
    with pytest.raises(CorpusFormatError, match="review"):
        load_corpus(path)


def test_unlabeled_corpus_allowed_when_labels_not_required(tmp_path, review_factory, tsv_writer):
    path = tsv_writer(review_factory(n=10, labeled=False), tmp_path / "test.tsv")
    with pytest.raises(CorpusFormatError):
        load_corpus(path)
    corpus = load_corpus(path, require_labels=False)
    assert not corpus.has_labels
    with pytest.raises(CorpusFormatError):
        corpus.labels


def test_non_binary_labels_rejected():
    df = pd.DataFrame({"id": [1, 2], "sentiment": [0, 2], "review": ["a", "b"]})
    with pytest.raises(CorpusFormatError, match="0 or 1"):
        from_frame(df)


def test_duplicate_ids_rejected():
    df = pd.DataFrame({"id": [1, 1], "sentiment": [0, 1], "review": ["a", "b"]})
    with pytest.raises(CorpusFormatError, match="duplicate"):
        from_frame(df)


def test_split_is_stratified_and_seeded(reviews_tsv):
    corpus = load_corpus(reviews_tsv)
    train, test = split_corpus(corpus, test_size=0.2, seed=3)
    again_train, again_test = split_corpus(corpus, test_size=0.2, seed=3)
    assert (len(train), len(test)) == (160, 40)
    assert test.labels.mean() == pytest.approx(0.5)
    np.testing.assert_array_equal(test.ids, again_test.ids)
    assert not set(train.ids) & set(test.ids)
    # rows keep their original relative order
    assert list(test.ids) == sorted(test.ids)


def test_write_predictions(tmp_path):
    path = write_predictions([3, 1, 2], [0.9, 0.1, 0.5], tmp_path / "out" / "sub.txt")
    frame = pd.read_csv(path, sep="\t")
    assert list(frame.columns) == ["id", "prob"]
    assert frame["id"].tolist() == [3, 1, 2]
    assert frame["prob"].tolist() == [0.9, 0.1, 0.5]


def test_write_predictions_length_mismatch(tmp_path):
    with pytest.raises(ValueError):
        write_predictions([1, 2], [0.5], tmp_path / "sub.txt")
