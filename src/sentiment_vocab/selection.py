"""Sparse (L1) term selection along a regularization path.

The path spans from the strength at which every coefficient is zero down
through weaker penalties, and is stored weakest-first. Selection picks the
largest model whose active-term count fits the cap; when several strengths
share that count the first one met scanning weakest -> strongest wins. A path
that fits entirely under the cap selects its weakest strength.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from loguru import logger
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.svm import l1_min_c

from .errors import InfeasibleReductionError
from .matrix import TermMatrix, conform
from .shared.sklearn_compat import penalty_params
from .vocabulary import Vocabulary


@dataclass(frozen=True)
class RegularizationPath:
    """L1 logistic fits over a sequence of strengths, weakest penalty first.

    ``Cs`` are inverse penalty strengths, so they decrease along the path.
    ``coefs`` has one row per strength and one column per vocabulary term.
    """

    Cs: np.ndarray
    coefs: np.ndarray
    vocabulary: Vocabulary

    @property
    def active_counts(self) -> np.ndarray:
        return np.count_nonzero(self.coefs, axis=1)

    def active_terms(self, i: int) -> Vocabulary:
        """Terms with non-zero weight at strength ``i``, in column order."""
        nz = np.flatnonzero(self.coefs[i])
        return Vocabulary(self.vocabulary[j] for j in nz)

    def select(self, max_terms: int) -> int:
        """Index of the largest model with at most ``max_terms`` active terms.

        Ties on the active count go to the first index, i.e. the weakest
        penalty achieving it. When every strength fits under the cap the
        weakest one (index 0) is returned even if liblinear left a stronger
        penalty with more active terms.

        Raises
        ------
        InfeasibleReductionError
            If every strength on the path keeps more than ``max_terms`` terms.
        """
        counts = self.active_counts
        feasible = counts <= max_terms
        if not feasible.any():
            raise InfeasibleReductionError(
                f"no regularization strength keeps <= {max_terms} terms; "
                f"smallest active count on the path is {int(counts.min())}"
            )
        if feasible.all():
            return 0
        best = counts[feasible].max()
        return int(np.flatnonzero(counts == best)[0])


@dataclass(frozen=True)
class ReductionResult:
    vocabulary: Vocabulary
    matrix: TermMatrix
    path: RegularizationPath = field(repr=False)
    selected_index: int
    selected_C: float


def lasso_path_Cs(matrix: TermMatrix, labels: np.ndarray, config) -> np.ndarray:
    """Log-spaced C grid starting where every coefficient is zero, weakest first."""
    c_min = l1_min_c(matrix.values, labels, loss="log")
    Cs = c_min * np.logspace(0.0, config.lasso_path_decades, config.lasso_path_length)
    return Cs[::-1]


def fit_lasso_path(
    matrix: TermMatrix,
    labels: Sequence[int],
    config,
    Cs: Sequence[float] | None = None,
) -> RegularizationPath:
    """Fit L1-penalized logistic regressions over ``Cs`` (weakest first)."""
    y = np.asarray(labels)
    if y.shape[0] != matrix.n_docs:
        raise ValueError(f"{y.shape[0]} labels for a matrix with {matrix.n_docs} rows")
    if len(np.unique(y)) != 2:
        raise ValueError("LASSO selection needs both sentiment classes in the labels")

    if matrix.n_terms == 0:
        logger.warning("Empty vocabulary; regularization path is trivially empty")
        return RegularizationPath(np.ones(1), np.zeros((1, 0)), matrix.vocabulary)

    Cs = lasso_path_Cs(matrix, y, config) if Cs is None else np.sort(np.asarray(Cs, float))[::-1]

    clf = LogisticRegression(
        **penalty_params("l1"),
        solver="liblinear",
        tol=config.convergence_tol,
        max_iter=config.max_iter,
        intercept_scaling=10000.0,
        random_state=config.seed,
    )
    coefs = np.zeros((len(Cs), matrix.n_terms))
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", category=ConvergenceWarning)
        for i, C in enumerate(Cs):
            clf.set_params(C=float(C))
            clf.fit(matrix.values, y)
            coefs[i] = clf.coef_.ravel()

    path = RegularizationPath(Cs, coefs, matrix.vocabulary)
    logger.debug(
        f"LASSO path over {len(Cs)} strengths: active counts "
        f"{int(path.active_counts.min())}..{int(path.active_counts.max())}"
    )
    return path


def lasso_reduce(
    matrix: TermMatrix,
    labels: Sequence[int],
    max_terms: int,
    config,
    Cs: Sequence[float] | None = None,
) -> ReductionResult:
    """Shrink ``matrix`` to the active terms of the largest L1 model within ``max_terms``."""
    path = fit_lasso_path(matrix, labels, config, Cs=Cs)
    i = path.select(max_terms)
    selected = path.active_terms(i)
    logger.info(
        f"LASSO reduction {matrix.n_terms} -> {len(selected)} terms "
        f"(cap {max_terms}, C={path.Cs[i]:.4g}, path index {i})"
    )
    return ReductionResult(
        vocabulary=selected,
        matrix=conform(matrix, selected),
        path=path,
        selected_index=i,
        selected_C=float(path.Cs[i]),
    )
