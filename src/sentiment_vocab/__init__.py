"""
sentiment_vocab
===============

Small, human-interpretable vocabularies for movie-review sentiment, and a
ridge logistic classifier trained over them.

Entry Points:
- `sentiment_vocab.cli`: typer CLI (build-vocab, train, predict, run)
- `sentiment_vocab.pipeline`: vocabulary construction and train/evaluate orchestration
- `sentiment_vocab.matrix`: term matrices and column conformance
- `sentiment_vocab.selection`: LASSO path term selection
- `sentiment_vocab.interpret`: t-statistic interpretability filter
"""

from __future__ import annotations

from .config import PipelineConfig, load_config
from .corpus import Corpus, load_corpus, split_corpus, write_predictions
from .errors import ColumnMismatchError, CorpusFormatError, InfeasibleReductionError
from .evaluate import EvaluationResult, evaluate
from .interpret import InterpretabilityResult, interpretability_filter
from .matrix import TermMatrix, build_term_matrix, conform
from .model import TrainedClassifier, load_model, save_model, train_classifier
from .pipeline import build_vocabulary, run_pipeline, score_corpus, train_on_corpus
from .selection import RegularizationPath, fit_lasso_path, lasso_reduce
from .vocabulary import Vocabulary, prune_vocabulary, term_statistics

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "PipelineConfig",
    "load_config",
    # Data
    "Corpus",
    "load_corpus",
    "split_corpus",
    "write_predictions",
    "Vocabulary",
    "TermMatrix",
    # Stages
    "term_statistics",
    "prune_vocabulary",
    "build_term_matrix",
    "conform",
    "RegularizationPath",
    "fit_lasso_path",
    "lasso_reduce",
    "InterpretabilityResult",
    "interpretability_filter",
    "TrainedClassifier",
    "train_classifier",
    "save_model",
    "load_model",
    "EvaluationResult",
    "evaluate",
    # Pipeline
    "build_vocabulary",
    "train_on_corpus",
    "score_corpus",
    "run_pipeline",
    # Errors
    "CorpusFormatError",
    "InfeasibleReductionError",
    "ColumnMismatchError",
]
