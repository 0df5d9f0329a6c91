"""Document-term matrices: construction, column statistics and conformance.

A ``TermMatrix`` pairs a CSR matrix with the vocabulary naming its columns.
Stages never mutate a matrix; every transformation returns a new one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from loguru import logger
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer, TfidfTransformer

from .errors import ColumnMismatchError
from .text import build_analyzer
from .vocabulary import Vocabulary, prune_vocabulary, term_statistics

RowSelector = Union[None, np.ndarray, Sequence[int], Sequence[bool]]


@dataclass(frozen=True)
class TermMatrix:
    """Documents x terms matrix bound to the vocabulary of its columns."""

    values: sparse.csr_matrix
    vocabulary: Vocabulary

    def __post_init__(self) -> None:
        values = self.values
        if not sparse.issparse(values):
            values = np.atleast_2d(np.asarray(values, dtype=np.float64))
        values = sparse.csr_matrix(values, dtype=np.float64)
        vocabulary = self.vocabulary
        if not isinstance(vocabulary, Vocabulary):
            vocabulary = Vocabulary(vocabulary)
        if values.shape[1] != len(vocabulary):
            raise ColumnMismatchError(
                f"matrix has {values.shape[1]} columns but vocabulary has {len(vocabulary)} terms"
            )
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "vocabulary", vocabulary)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def n_docs(self) -> int:
        return self.values.shape[0]

    @property
    def n_terms(self) -> int:
        return self.values.shape[1]

    def toarray(self) -> np.ndarray:
        return self.values.toarray()

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.toarray(), columns=list(self.vocabulary))

    def select_rows(self, rows: RowSelector) -> "TermMatrix":
        return TermMatrix(self._rows(rows), self.vocabulary)

    def require_vocabulary(self, vocabulary: Vocabulary) -> None:
        """Raise ``ColumnMismatchError`` unless columns match ``vocabulary`` exactly."""
        if self.vocabulary != vocabulary:
            missing = len([t for t in vocabulary if t not in self.vocabulary])
            extra = len([t for t in self.vocabulary if t not in vocabulary])
            raise ColumnMismatchError(
                f"matrix columns do not match the expected vocabulary "
                f"({self.n_terms} vs {len(vocabulary)} terms, {missing} missing, "
                f"{extra} unexpected); conform the matrix first"
            )

    # ----------------------------------------------------------------------
    # Column statistics over a row subset
    # ----------------------------------------------------------------------

    def _rows(self, rows: RowSelector) -> sparse.csr_matrix:
        if rows is None:
            return self.values
        rows = np.asarray(rows)
        if rows.dtype == bool:
            if rows.shape[0] != self.n_docs:
                raise ValueError(
                    f"row mask has length {rows.shape[0]}, matrix has {self.n_docs} rows"
                )
            rows = np.flatnonzero(rows)
        return self.values[rows]

    def column_means(self, rows: RowSelector = None) -> np.ndarray:
        sub = self._rows(rows)
        n = sub.shape[0]
        if n == 0:
            return np.full(self.n_terms, np.nan)
        return np.asarray(sub.sum(axis=0)).ravel() / n

    def column_variances(self, rows: RowSelector = None, ddof: int = 1) -> np.ndarray:
        """Per-column variance; exactly zero for constant columns.

        Computed as the sum of squared deviations over stored entries plus
        the implicit zeros, so sparse storage never densifies.
        """
        sub = sparse.csc_matrix(self._rows(rows))
        n = sub.shape[0]
        if n - ddof <= 0:
            return np.full(self.n_terms, np.nan)
        if self.n_terms == 0:
            return np.zeros(0)

        mean = np.asarray(sub.sum(axis=0)).ravel() / n
        nnz = np.diff(sub.indptr)
        col_of_entry = np.repeat(np.arange(sub.shape[1]), nnz)
        dev = sub.data - mean[col_of_entry]
        ss = np.bincount(col_of_entry, weights=dev * dev, minlength=sub.shape[1])
        ss += (n - nnz) * mean * mean
        var = ss / (n - ddof)

        # floating point leaves residue on constant columns
        col_max = sub.max(axis=0).toarray().ravel()
        col_min = sub.min(axis=0).toarray().ravel()
        var[col_max == col_min] = 0.0
        return var


def conform(matrix: TermMatrix, target: Union[Vocabulary, Iterable[str]]) -> TermMatrix:
    """Return ``matrix`` with exactly the columns of ``target``, in its order.

    Columns not in ``target`` are dropped, target terms absent from the
    matrix become zero columns. Rows are untouched. Conforming twice to the
    same target is a no-op.
    """
    if not isinstance(target, Vocabulary):
        target = Vocabulary(target)
    source = matrix.vocabulary
    if source == target:
        return TermMatrix(matrix.values.copy(), target)

    target_pos = [j for j, t in enumerate(target) if t in source]
    source_pos = [source.index(target[j]) for j in target_pos]
    selector = sparse.csr_matrix(
        (
            np.ones(len(target_pos)),
            (np.asarray(source_pos, dtype=np.int64), np.asarray(target_pos, dtype=np.int64)),
        ),
        shape=(len(source), len(target)),
    )
    values = sparse.csr_matrix(matrix.values @ selector)

    logger.debug(
        f"Conformed {matrix.n_terms} -> {len(target)} columns "
        f"({len(target_pos)} kept, {len(target) - len(target_pos)} zero-filled, "
        f"{matrix.n_terms - len(target_pos)} dropped)"
    )
    return TermMatrix(values, target)


def build_term_matrix(
    texts: Sequence[str],
    config,
    vocabulary: Optional[Vocabulary] = None,
) -> Tuple[TermMatrix, pd.DataFrame]:
    """Count n-grams, prune the vocabulary and apply TF-IDF weighting.

    The TF-IDF weights are fitted on ``texts`` alone. When ``vocabulary`` is
    given the pruned matrix is conformed to it afterwards, so matrices built
    from different document sets become column-compatible.

    Returns
    -------
    matrix : TermMatrix
        TF-IDF weighted documents x terms matrix.
    stats : pd.DataFrame
        Unpruned ``term``/``term_count``/``doc_count`` statistics.
    """
    texts = list(texts)
    vectorizer = CountVectorizer(analyzer=build_analyzer(config), dtype=np.int64)
    try:
        counts = vectorizer.fit_transform(texts)
        features = vectorizer.get_feature_names_out()
    except ValueError as e:
        # raised when no document yields a single token
        if "empty vocabulary" not in str(e):
            raise
        logger.warning(f"No n-grams in {len(texts)} documents; matrix has no columns")
        counts = sparse.csr_matrix((len(texts), 0), dtype=np.int64)
        features = np.array([], dtype=object)
    logger.info(f"Counted {len(features)} candidate n-grams over {len(texts)} documents")

    stats = term_statistics(counts, features)
    pruned = prune_vocabulary(
        stats,
        n_docs=len(texts),
        min_count=config.min_count,
        min_doc_prop=config.min_doc_prop,
        max_doc_prop=config.max_doc_prop,
    )

    feature_index = {t: i for i, t in enumerate(features)}
    columns = np.array([feature_index[t] for t in pruned], dtype=np.intp)
    counts = sparse.csr_matrix(counts)[:, columns]
    if len(pruned):
        weighted = TfidfTransformer(norm=config.tfidf_norm).fit_transform(counts)
    else:
        weighted = sparse.csr_matrix((len(texts), 0), dtype=np.float64)

    matrix = TermMatrix(weighted, pruned)
    if vocabulary is not None:
        matrix = conform(matrix, vocabulary)
    return matrix, stats
