"""Vocabulary type, term statistics and frequency pruning."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger
from scipy import sparse


class Vocabulary:
    """Ordered set of unique terms.

    Order carries no meaning beyond defining the column order of every
    matrix built against this vocabulary.
    """

    __slots__ = ("_terms", "_index")

    def __init__(self, terms: Iterable[str] = ()):
        self._terms = tuple(str(t) for t in terms)
        self._index = {t: i for i, t in enumerate(self._terms)}
        if len(self._index) != len(self._terms):
            seen, dupes = set(), []
            for t in self._terms:
                if t in seen:
                    dupes.append(t)
                seen.add(t)
            raise ValueError(f"duplicate terms in vocabulary: {dupes[:10]}")

    @property
    def terms(self) -> tuple:
        return self._terms

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self._terms)

    def __contains__(self, term: object) -> bool:
        return term in self._index

    def __getitem__(self, i):
        return self._terms[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Vocabulary):
            return self._terms == other._terms
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._terms)

    def __repr__(self) -> str:
        head = ", ".join(self._terms[:5])
        more = ", ..." if len(self._terms) > 5 else ""
        return f"Vocabulary({len(self)} terms: {head}{more})"

    def index(self, term: str) -> int:
        return self._index[term]

    def indices(self, terms: Iterable[str]) -> np.ndarray:
        return np.fromiter((self._index[t] for t in terms), dtype=np.int64)

    def intersection(self, other: Iterable[str]) -> "Vocabulary":
        """Terms also in ``other``, keeping this vocabulary's order."""
        keep = set(other)
        return Vocabulary(t for t in self._terms if t in keep)

    def to_file(self, path: Union[str, Path]) -> Path:
        """Write one term per line, no header."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for term in self._terms:
                f.write(term + "\n")
        logger.info(f"Wrote {len(self)} terms to {path}")
        return path

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Vocabulary":
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            terms = [line.strip() for line in f if line.strip()]
        logger.info(f"Loaded {len(terms)} terms from {path}")
        return cls(terms)


def term_statistics(counts: sparse.spmatrix, terms: Sequence[str]) -> pd.DataFrame:
    """Corpus-level statistics for every column of a document-term count matrix.

    Returns a frame with columns ``term``, ``term_count`` (total occurrences)
    and ``doc_count`` (documents containing the term), ordered by term count
    ascending then term.
    """
    counts = sparse.csc_matrix(counts, copy=True)
    if counts.shape[1] != len(terms):
        raise ValueError(
            f"count matrix has {counts.shape[1]} columns but {len(terms)} terms were given"
        )
    counts.eliminate_zeros()
    term_count = np.asarray(counts.sum(axis=0)).ravel()
    doc_count = np.diff(counts.indptr)
    stats = pd.DataFrame(
        {
            "term": list(terms),
            "term_count": term_count.astype(np.int64),
            "doc_count": np.asarray(doc_count, dtype=np.int64),
        }
    )
    return stats.sort_values(["term_count", "term"], kind="mergesort").reset_index(drop=True)


def prune_vocabulary(
    stats: pd.DataFrame,
    n_docs: int,
    min_count: int,
    min_doc_prop: float,
    max_doc_prop: float,
) -> Vocabulary:
    """Drop terms that are too rare or too common.

    A term survives iff ``term_count >= min_count`` and its document
    proportion lies in ``[min_doc_prop, max_doc_prop]``. An empty result is
    returned as an empty vocabulary.
    """
    if n_docs <= 0:
        logger.warning("Pruning over an empty corpus; vocabulary is empty")
        return Vocabulary()

    doc_prop = stats["doc_count"].to_numpy() / float(n_docs)
    keep = (
        (stats["term_count"].to_numpy() >= min_count)
        & (doc_prop >= min_doc_prop)
        & (doc_prop <= max_doc_prop)
    )
    vocab = Vocabulary(stats.loc[keep, "term"])
    logger.info(
        f"Pruned vocabulary {len(stats)} -> {len(vocab)} terms "
        f"(min_count={min_count}, doc_prop in [{min_doc_prop}, {max_doc_prop}])"
    )
    if not len(vocab):
        logger.warning("Pruning removed every term; downstream matrices will have no columns")
    return vocab
