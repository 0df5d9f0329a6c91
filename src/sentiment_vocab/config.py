"""Configuration for the vocabulary construction and sentiment pipeline.

Settings are read from keyword overrides, then environment variables
prefixed with ``SENTIMENT_VOCAB_`` (e.g. ``SENTIMENT_VOCAB_NT=800``), then
an optional ``.env`` file, then the defaults below.

Each pipeline stage receives a ``PipelineConfig`` explicitly, so several runs
with different thresholds can coexist in one process.
"""

from typing import Optional, Tuple

from loguru import logger
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Common English function words excluded before n-gram generation
STOP_WORDS: Tuple[str, ...] = (
    "i", "me", "my", "myself", "we", "our", "ours", "ourselves",
    "you", "your", "yours", "their", "they", "his", "her",
    "she", "he", "a", "an", "and", "is", "was", "are", "were",
    "him", "himself", "has", "have", "it", "its", "the", "us",
)


class PipelineConfig(BaseSettings):
    """Thresholds, target sizes and solver settings for one pipeline run."""

    model_config = SettingsConfigDict(
        env_prefix="SENTIMENT_VOCAB_",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # Text normalization
    stop_words: Tuple[str, ...] = Field(
        default=STOP_WORDS, description="Tokens dropped before n-gram generation"
    )
    ngram_min: int = Field(default=1, ge=1)
    ngram_max: int = Field(default=4, ge=1)

    # Vocabulary pruning
    min_count: int = Field(default=10, ge=0, description="Minimum corpus term count")
    min_doc_prop: float = Field(default=0.001, ge=0.0, le=1.0)
    max_doc_prop: float = Field(default=0.5, ge=0.0, le=1.0)
    tfidf_norm: Optional[str] = Field(default="l1", description="l1 | l2 | None")

    # Vocabulary target sizes
    n0: int = Field(default=10000, gt=0, description="First LASSO pass cap")
    n1: int = Field(default=2000, gt=0, description="Top-K kept by the t-statistic filter")
    nt: int = Field(default=1000, gt=0, description="Final vocabulary cap")

    # LASSO regularization path
    lasso_path_length: int = Field(default=100, ge=2)
    lasso_path_decades: float = Field(default=3.0, gt=0.0)

    # Ridge classifier
    ridge_Cs: int = Field(default=20, ge=1, description="Number of candidate C values")
    cv_folds: int = Field(default=5, ge=2)
    convergence_tol: float = Field(default=1e-5, gt=0.0)
    max_iter: int = Field(default=1000, ge=1)

    # Evaluation split
    test_size: float = Field(default=0.2, gt=0.0, lt=1.0)
    seed: int = 6594

    @model_validator(mode="after")
    def _check_ranges(self) -> "PipelineConfig":
        if self.ngram_min > self.ngram_max:
            raise ValueError(
                f"ngram_min ({self.ngram_min}) must be <= ngram_max ({self.ngram_max})"
            )
        if self.min_doc_prop > self.max_doc_prop:
            raise ValueError(
                f"min_doc_prop ({self.min_doc_prop}) must be <= max_doc_prop ({self.max_doc_prop})"
            )
        if not (self.nt <= self.n1 <= self.n0):
            raise ValueError(
                f"vocabulary targets must satisfy nt <= n1 <= n0, got "
                f"nt={self.nt}, n1={self.n1}, n0={self.n0}"
            )
        if self.tfidf_norm not in ("l1", "l2", None):
            raise ValueError(f"tfidf_norm must be l1, l2 or None, got {self.tfidf_norm}")
        return self

    @property
    def ngram_range(self) -> Tuple[int, int]:
        return (self.ngram_min, self.ngram_max)


def load_config(**overrides) -> PipelineConfig:
    """Load configuration with proper fallbacks.

    Priority:
    1. Keyword overrides
    2. Environment variables
    3. .env file
    4. Default values

    Returns:
        PipelineConfig: Loaded configuration
    """
    try:
        config = PipelineConfig(**overrides)
    except Exception as e:
        logger.error(f"Error loading configuration: {e}")
        raise
    logger.debug(f"Pipeline configuration: {config.model_dump(exclude={'stop_words'})}")
    return config
