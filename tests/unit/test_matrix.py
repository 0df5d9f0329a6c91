"""Tests for term matrices, column statistics and column conformance."""

import numpy as np
import pytest
from scipy import sparse

from sentiment_vocab.config import PipelineConfig
from sentiment_vocab.errors import ColumnMismatchError
from sentiment_vocab.matrix import TermMatrix, build_term_matrix, conform
from sentiment_vocab.vocabulary import Vocabulary


@pytest.fixture
def matrix():
    values = np.array(
        [
            [1.0, 0.0, 2.0],
            [0.0, 3.0, 0.0],
            [4.0, 0.0, 0.0],
        ]
    )
    return TermMatrix(sparse.csr_matrix(values), Vocabulary(["a", "b", "c"]))


class TestConform:
    def test_shape_and_order(self, matrix):
        out = conform(matrix, ["c", "z", "a"])
        assert out.shape == (3, 3)
        assert list(out.vocabulary) == ["c", "z", "a"]
        np.testing.assert_array_equal(
            out.toarray(),
            [[2.0, 0.0, 1.0], [0.0, 0.0, 0.0], [0.0, 0.0, 4.0]],
        )

    def test_idempotent(self, matrix):
        target = Vocabulary(["b", "q", "c"])
        once = conform(matrix, target)
        twice = conform(once, target)
        assert twice.vocabulary == once.vocabulary
        np.testing.assert_array_equal(twice.toarray(), once.toarray())

    def test_empty_target(self, matrix):
        out = conform(matrix, Vocabulary())
        assert out.shape == (3, 0)

    def test_conformed_matrices_are_interchangeable(self, matrix):
        other = TermMatrix(np.array([[5.0, 6.0]]), Vocabulary(["c", "d"]))
        target = Vocabulary(["a", "c", "d"])
        left, right = conform(matrix, target), conform(other, target)
        assert left.vocabulary == right.vocabulary
        stacked = sparse.vstack([left.values, right.values])
        assert stacked.shape == (4, 3)

    def test_input_not_mutated(self, matrix):
        before = matrix.toarray().copy()
        conform(matrix, ["c"])
        np.testing.assert_array_equal(matrix.toarray(), before)


class TestTermMatrix:
    def test_column_count_must_match_vocabulary(self):
        with pytest.raises(ColumnMismatchError):
            TermMatrix(np.zeros((2, 3)), Vocabulary(["a", "b"]))

    def test_require_vocabulary(self, matrix):
        matrix.require_vocabulary(Vocabulary(["a", "b", "c"]))
        with pytest.raises(ColumnMismatchError, match="conform"):
            matrix.require_vocabulary(Vocabulary(["b", "a", "c"]))

    def test_column_statistics_match_numpy(self, matrix):
        dense = matrix.toarray()
        rows = np.array([True, False, True])
        np.testing.assert_allclose(matrix.column_means(rows), dense[rows].mean(axis=0))
        np.testing.assert_allclose(matrix.column_variances(rows), dense[rows].var(axis=0, ddof=1))
        np.testing.assert_allclose(matrix.column_variances(), dense.var(axis=0, ddof=1))

    def test_dense_and_sparse_storage_agree(self, matrix):
        dense = TermMatrix(matrix.toarray(), matrix.vocabulary)
        np.testing.assert_allclose(dense.column_variances(), matrix.column_variances())
        np.testing.assert_allclose(dense.column_means([0, 2]), matrix.column_means([0, 2]))

    def test_constant_column_variance_is_exactly_zero(self):
        m = TermMatrix(np.full((5, 1), 0.1), Vocabulary(["same"]))
        assert m.column_variances()[0] == 0.0

    def test_single_row_variance_undefined(self, matrix):
        assert np.isnan(matrix.column_variances([0])).all()

    def test_mask_length_checked(self, matrix):
        with pytest.raises(ValueError):
            matrix.column_means(np.array([True, False]))


def test_build_term_matrix_prunes_and_weights():
    cfg = PipelineConfig(ngram_max=1, min_count=1, min_doc_prop=0.0, max_doc_prop=0.6)
    texts = ["good film", "good plot", "bad film<br />", "bad acting", "fine"]
    matrix, stats = build_term_matrix(texts, cfg)
    assert set(stats["term"]) == {"good", "bad", "film", "plot", "acting", "fine"}
    assert matrix.n_docs == 5
    assert set(matrix.vocabulary) == {"good", "bad", "film", "plot", "acting", "fine"}
    # l1-normalised rows
    np.testing.assert_allclose(np.asarray(matrix.values.sum(axis=1)).ravel(), 1.0)


def test_build_term_matrix_conforms_to_given_vocabulary():
    cfg = PipelineConfig(ngram_max=2, min_count=1, min_doc_prop=0.0, max_doc_prop=1.0)
    target = Vocabulary(["good_film", "missing", "bad"])
    matrix, _ = build_term_matrix(["good film", "bad film"], cfg, vocabulary=target)
    assert matrix.vocabulary == target
    assert matrix.toarray()[:, 1].sum() == 0.0
    assert matrix.toarray()[0, 0] > 0 and matrix.toarray()[1, 2] > 0


def test_build_term_matrix_without_any_tokens():
    cfg = PipelineConfig(ngram_max=2, min_count=1, min_doc_prop=0.0, max_doc_prop=1.0)
    matrix, stats = build_term_matrix(["It is the <br />", "<p></p>"], cfg)
    assert matrix.shape == (2, 0)
    assert stats.empty

    target = Vocabulary(["good", "bad_film"])
    matrix, _ = build_term_matrix(["It is the <br />"], cfg, vocabulary=target)
    assert matrix.vocabulary == target
    np.testing.assert_array_equal(matrix.toarray(), [[0.0, 0.0]])
