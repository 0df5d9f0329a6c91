# conftest.py  (tests root)
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

ROOT = Path(__file__).parent.parent.resolve()
SRC = ROOT / "src"

# Add src directory to Python path for proper imports
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sentiment_vocab.config import PipelineConfig  # noqa: E402

POSITIVE = ["great", "wonderful", "loved", "brilliant", "superb", "moving", "fun", "charming"]
NEGATIVE = ["awful", "boring", "terrible", "waste", "dull", "worst", "poor", "mess"]
NEUTRAL = ["movie", "film", "plot", "actor", "scene", "story", "director", "ending", "music", "cast"]


def make_reviews(n: int = 200, seed: int = 0, labeled: bool = True) -> pd.DataFrame:
    """Synthetic reviews: class words, shared filler, stop words and markup."""
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        label = i % 2
        pool, other = (POSITIVE, NEGATIVE) if label else (NEGATIVE, POSITIVE)
        words = [str(w) for w in rng.choice(NEUTRAL, size=6)]
        words += [str(w) for w in rng.choice(pool, size=3)]
        if rng.random() < 0.2:
            words.append(str(rng.choice(other)))
        rng.shuffle(words)
        row = {
            "id": 1000 + i,
            "score": int(rng.integers(7, 11)) if label else int(rng.integers(1, 5)),
            "review": "The " + " ".join(words) + ".<br /><br />It was " + words[0] + ".",
        }
        if labeled:
            row["sentiment"] = label
        rows.append(row)
    return pd.DataFrame(rows)


def write_tsv(df: pd.DataFrame, path: Path) -> Path:
    df.to_csv(path, sep="\t", index=False)
    return path


@pytest.fixture
def small_config() -> PipelineConfig:
    return PipelineConfig(
        ngram_max=2,
        min_count=2,
        min_doc_prop=0.0,
        max_doc_prop=0.95,
        n0=150,
        n1=60,
        nt=25,
        lasso_path_length=15,
        ridge_Cs=5,
        cv_folds=3,
        max_iter=300,
        seed=7,
    )


@pytest.fixture
def reviews_frame() -> pd.DataFrame:
    return make_reviews()


@pytest.fixture
def reviews_tsv(tmp_path: Path, reviews_frame: pd.DataFrame) -> Path:
    return write_tsv(reviews_frame, tmp_path / "train.tsv")


@pytest.fixture
def review_factory():
    return make_reviews


@pytest.fixture
def tsv_writer():
    return write_tsv
