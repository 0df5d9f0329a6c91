"""sentiment_vocab.pipeline
--------------------------

End-to-end orchestration of the vocabulary reduction and sentiment model.

Vocabulary construction runs, in order:

1. n-gram counting, frequency pruning and TF-IDF weighting
2. LASSO reduction to at most ``n0`` terms
3. t-statistic filter keeping the ``n1`` strongest terms (plus rescues)
4. LASSO reduction to at most ``nt`` terms

Training and scoring rebuild a TF-IDF matrix for their own documents and
conform it to the fixed vocabulary before touching the model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import pandas as pd
from loguru import logger

from .corpus import Corpus, split_corpus
from .evaluate import EvaluationResult, evaluate
from .interpret import InterpretabilityResult, interpretability_filter
from .matrix import TermMatrix, build_term_matrix, conform
from .model import TrainedClassifier, train_classifier
from .selection import ReductionResult, lasso_reduce
from .vocabulary import Vocabulary


@dataclass(frozen=True)
class VocabularyBuild:
    """Every intermediate artifact of vocabulary construction."""

    vocabulary: Vocabulary
    term_stats: pd.DataFrame = field(repr=False)
    pruned: Vocabulary = field(repr=False)
    first_reduction: ReductionResult = field(repr=False)
    interpretability: InterpretabilityResult = field(repr=False)
    final_reduction: ReductionResult = field(repr=False)

    @property
    def stage_sizes(self) -> Dict[str, int]:
        return {
            "candidates": int(len(self.term_stats)),
            "pruned": len(self.pruned),
            "lasso_n0": len(self.first_reduction.vocabulary),
            "t_filter": len(self.interpretability.selected),
            "final": len(self.vocabulary),
        }


@dataclass(frozen=True)
class PipelineRun:
    build: Optional[VocabularyBuild]
    vocabulary: Vocabulary
    classifier: TrainedClassifier
    evaluation: EvaluationResult
    predictions: pd.DataFrame
    metrics: Dict[str, Any]


def build_vocabulary(corpus: Corpus, config) -> VocabularyBuild:
    """Reduce the corpus n-gram vocabulary to at most ``config.nt`` terms."""
    labels = corpus.labels
    logger.info(f"Building vocabulary from {len(corpus)} labeled reviews")

    matrix, stats = build_term_matrix(corpus.texts, config)
    pruned = matrix.vocabulary

    first = lasso_reduce(matrix, labels, config.n0, config)
    interp = interpretability_filter(first.matrix, labels, config.n1)
    filtered = conform(first.matrix, interp.selected)
    final = lasso_reduce(filtered, labels, config.nt, config)

    build = VocabularyBuild(
        vocabulary=final.vocabulary,
        term_stats=stats,
        pruned=pruned,
        first_reduction=first,
        interpretability=interp,
        final_reduction=final,
    )
    logger.info(f"Vocabulary stages: {build.stage_sizes}")
    return build


def corpus_matrix(corpus: Corpus, vocabulary: Vocabulary, config) -> TermMatrix:
    """TF-IDF matrix of ``corpus`` conformed to ``vocabulary``."""
    matrix, _ = build_term_matrix(corpus.texts, config, vocabulary=vocabulary)
    return matrix


def train_on_corpus(corpus: Corpus, vocabulary: Vocabulary, config) -> TrainedClassifier:
    return train_classifier(corpus_matrix(corpus, vocabulary, config), corpus.labels, config)


def score_corpus(classifier: TrainedClassifier, corpus: Corpus, config=None) -> pd.DataFrame:
    """``id``/``prob`` frame for every review, in corpus order.

    Documents are featurized with the classifier's own training settings
    when it carries them; ``config`` is only the fallback.
    """
    if classifier.config is not None:
        config = classifier.config
    elif config is None:
        raise ValueError("classifier carries no settings; pass config explicitly")
    probs = classifier.predict_proba(corpus_matrix(corpus, classifier.vocabulary, config))
    return pd.DataFrame({"id": corpus.ids, "prob": probs})


def run_pipeline(
    corpus: Corpus, config, vocabulary: Optional[Vocabulary] = None
) -> PipelineRun:
    """Split, build (or reuse) the vocabulary, train and evaluate.

    The vocabulary is built from the training split only, so the held-out
    AUC is not informed by test documents.
    """
    train, test = split_corpus(corpus, test_size=config.test_size, seed=config.seed)

    build = None
    if vocabulary is None:
        build = build_vocabulary(train, config)
        vocabulary = build.vocabulary

    classifier = train_on_corpus(train, vocabulary, config)
    test_matrix = corpus_matrix(test, vocabulary, config)
    evaluation = evaluate(classifier, test_matrix, test.labels)

    predictions = pd.DataFrame({"id": test.ids, "prob": evaluation.probabilities})
    metrics = evaluation.metrics(test.labels)
    metrics.update(
        {
            "vocabulary_size": len(vocabulary),
            "C": classifier.C,
            "n_train": len(train),
            "n_test": len(test),
            "seed": config.seed,
        }
    )
    if build is not None:
        metrics["stage_sizes"] = build.stage_sizes
    logger.info(f"Pipeline finished: AUC={metrics['auc']:.4f}, vocabulary={len(vocabulary)}")
    return PipelineRun(
        build=build,
        vocabulary=vocabulary,
        classifier=classifier,
        evaluation=evaluation,
        predictions=predictions,
        metrics=metrics,
    )
