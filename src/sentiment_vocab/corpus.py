"""Corpus loading, splitting and prediction output.

A corpus is a tab-separated file with a header row and the columns
``id``, ``sentiment``, ``score`` and ``review``. ``score`` is carried along
but never used by the model; ``sentiment`` may be absent for corpora that are
only scored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.model_selection import train_test_split

from .errors import CorpusFormatError

ID_COLUMN = "id"
LABEL_COLUMN = "sentiment"
TEXT_COLUMN = "review"


@dataclass(frozen=True)
class Corpus:
    """Immutable, ordered collection of reviews backed by a DataFrame.

    Accessors return copies so downstream stages cannot alter the loaded
    records.
    """

    frame: pd.DataFrame

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def has_labels(self) -> bool:
        return LABEL_COLUMN in self.frame.columns

    @property
    def ids(self) -> np.ndarray:
        return self.frame[ID_COLUMN].to_numpy(copy=True)

    @property
    def texts(self) -> list[str]:
        return self.frame[TEXT_COLUMN].tolist()

    @property
    def labels(self) -> np.ndarray:
        if not self.has_labels:
            raise CorpusFormatError(
                f"corpus has no '{LABEL_COLUMN}' column; labels are unavailable"
            )
        return self.frame[LABEL_COLUMN].to_numpy(dtype=np.int64, copy=True)

    def take(self, positions: Sequence[int]) -> "Corpus":
        """Return a new corpus holding the rows at ``positions``, in that order."""
        return Corpus(self.frame.iloc[list(positions)].reset_index(drop=True))


def _validate_frame(df: pd.DataFrame, require_labels: bool, source: str) -> pd.DataFrame:
    required = [ID_COLUMN, TEXT_COLUMN] + ([LABEL_COLUMN] if require_labels else [])
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise CorpusFormatError(
            f"{source}: missing required columns {missing}; found {list(df.columns)}"
        )

    duplicated = df[ID_COLUMN][df[ID_COLUMN].duplicated()].unique()
    if len(duplicated):
        raise CorpusFormatError(
            f"{source}: duplicate ids {list(duplicated[:5])} (id must be a unique key)"
        )

    df = df.copy()
    df[TEXT_COLUMN] = df[TEXT_COLUMN].fillna("").astype(str)

    if LABEL_COLUMN in df.columns:
        labels = pd.to_numeric(df[LABEL_COLUMN], errors="coerce")
        bad = ~labels.isin([0, 1])
        if bad.any():
            raise CorpusFormatError(
                f"{source}: '{LABEL_COLUMN}' must be 0 or 1, found "
                f"{sorted(map(str, df.loc[bad, LABEL_COLUMN].unique()[:5]))}"
            )
        df[LABEL_COLUMN] = labels.astype(np.int64)
    return df


def from_frame(df: pd.DataFrame, require_labels: bool = True) -> Corpus:
    """Validate an in-memory table and wrap it as a corpus."""
    return Corpus(_validate_frame(df.reset_index(drop=True), require_labels, "<frame>"))


def load_corpus(path: Union[str, Path], require_labels: bool = True) -> Corpus:
    """Read a tab-separated review file into a corpus.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    CorpusFormatError
        If required columns are missing, ids repeat, or labels are not binary.
    """
    path = Path(path)
    logger.info(f"Loading corpus from {path}")
    df = pd.read_csv(path, sep="\t", header=0)
    corpus = Corpus(_validate_frame(df, require_labels, str(path)))
    if corpus.has_labels:
        labels = corpus.labels
        logger.info(
            f"Loaded {len(corpus)} reviews ({int(labels.sum())} positive, "
            f"{int(len(labels) - labels.sum())} negative)"
        )
    else:
        logger.info(f"Loaded {len(corpus)} unlabeled reviews")
    return corpus


def split_corpus(corpus: Corpus, test_size: float, seed: int) -> Tuple[Corpus, Corpus]:
    """Stratified, seeded train/test split."""
    positions = np.arange(len(corpus))
    train_pos, test_pos = train_test_split(
        positions,
        test_size=test_size,
        random_state=seed,
        stratify=corpus.labels,
    )
    train, test = corpus.take(np.sort(train_pos)), corpus.take(np.sort(test_pos))
    logger.info(f"Split corpus: {len(train)} train / {len(test)} test (seed={seed})")
    return train, test


def write_predictions(
    ids: Sequence, probabilities: Sequence[float], path: Union[str, Path]
) -> Path:
    """Write ``id``/``prob`` rows as TSV with a header, in the given order."""
    if len(ids) != len(probabilities):
        raise ValueError(
            f"ids and probabilities differ in length: {len(ids)} vs {len(probabilities)}"
        )
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    out = pd.DataFrame({"id": list(ids), "prob": np.asarray(probabilities, dtype=float)})
    out.to_csv(path, sep="\t", index=False)
    logger.info(f"Wrote {len(out)} predictions to {path}")
    return path
