"""Two-sample t-statistic filter for interpretable terms.

Each term is scored by Welch's statistic comparing its mean weight in
positive versus negative reviews. The strongest ``top_k`` terms by absolute
statistic are kept, and any term with zero variance inside either class is
kept as well: its value alone pins down that class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .matrix import TermMatrix
from .vocabulary import Vocabulary


@dataclass(frozen=True)
class InterpretabilityResult:
    """Outcome of the t-statistic filter.

    Attributes
    ----------
    statistics : pd.Series
        Welch statistic per term (matrix column order); NaN when undefined.
    selected : Vocabulary
        Top-K terms plus zero-variance rescues, in matrix column order.
    positive_terms, negative_terms : list[str]
        Top-K terms with positive / negative statistic, strongest first.
    rescued_terms : list[str]
        Terms with zero within-class variance, in column order.
    """

    statistics: pd.Series
    selected: Vocabulary
    positive_terms: List[str]
    negative_terms: List[str]
    rescued_terms: List[str]

    def summary_frame(self) -> pd.DataFrame:
        """Per-term table sorted by absolute statistic (NaN last)."""
        df = pd.DataFrame({"term": self.statistics.index, "t_stat": self.statistics.to_numpy()})
        df["abs_t"] = df["t_stat"].abs()
        df["selected"] = df["term"].isin(set(self.selected))
        df["rescued"] = df["term"].isin(set(self.rescued_terms))
        return df.sort_values("abs_t", ascending=False, kind="mergesort", na_position="last")


def welch_statistics(matrix: TermMatrix, labels: Sequence[int]) -> tuple:
    """Per-term Welch t statistic and within-class variances.

    Returns ``(t, var_pos, var_neg)``. ``t`` is NaN where the denominator and
    the mean difference are both zero, and +-inf where only the denominator is.
    """
    y = np.asarray(labels)
    if y.shape[0] != matrix.n_docs:
        raise ValueError(f"{y.shape[0]} labels for a matrix with {matrix.n_docs} rows")
    pos, neg = y == 1, y == 0
    n_pos, n_neg = int(pos.sum()), int(neg.sum())

    mean_pos, mean_neg = matrix.column_means(pos), matrix.column_means(neg)
    var_pos, var_neg = matrix.column_variances(pos), matrix.column_variances(neg)

    with np.errstate(divide="ignore", invalid="ignore"):
        t = (mean_pos - mean_neg) / np.sqrt(var_pos / n_pos + var_neg / n_neg)
    return t, var_pos, var_neg


def rank_by_magnitude(t: np.ndarray) -> np.ndarray:
    """Column indices ordered by |t| descending; equal magnitudes keep column order.

    NaN statistics are not ranked.
    """
    valid = np.flatnonzero(~np.isnan(t))
    order = np.argsort(-np.abs(t[valid]), kind="stable")
    return valid[order]


def interpretability_filter(
    matrix: TermMatrix, labels: Sequence[int], top_k: int
) -> InterpretabilityResult:
    """Keep the ``top_k`` most separating terms plus zero-variance rescues."""
    terms = matrix.vocabulary
    t, var_pos, var_neg = welch_statistics(matrix, labels)

    ranked = rank_by_magnitude(t)[:top_k]
    rescued = np.flatnonzero((var_pos == 0) | (var_neg == 0))

    keep = np.zeros(matrix.n_terms, dtype=bool)
    keep[ranked] = True
    keep[rescued] = True
    selected = Vocabulary(terms[j] for j in np.flatnonzero(keep))

    positive = [terms[j] for j in ranked if t[j] > 0]
    negative = [terms[j] for j in ranked if t[j] < 0]
    rescued_terms = [terms[j] for j in rescued]

    n_undefined = int(np.isnan(t).sum())
    logger.info(
        f"t-statistic filter {matrix.n_terms} -> {len(selected)} terms "
        f"(top {len(ranked)}, {len(rescued_terms)} zero-variance rescues, "
        f"{len(positive)} positive / {len(negative)} negative)"
    )
    if n_undefined:
        logger.debug(f"{n_undefined} terms have an undefined statistic")

    return InterpretabilityResult(
        statistics=pd.Series(t, index=list(terms), name="t_stat"),
        selected=selected,
        positive_terms=positive,
        negative_terms=negative,
        rescued_terms=rescued_terms,
    )
