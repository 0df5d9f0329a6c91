"""Cross-validated ridge logistic classifier bound to a fixed vocabulary."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import joblib
import numpy as np
from loguru import logger
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegressionCV
from sklearn.model_selection import StratifiedKFold

from .config import PipelineConfig
from .matrix import TermMatrix
from .shared.sklearn_compat import penalty_params
from .vocabulary import Vocabulary


@dataclass(frozen=True)
class TrainedClassifier:
    """A fitted model plus the vocabulary, strength and settings it was fitted with.

    ``config`` carries the text and weighting settings that documents must be
    featurized with before scoring.
    """

    estimator: LogisticRegressionCV
    vocabulary: Vocabulary
    C: float
    config: Optional[PipelineConfig] = field(default=None, repr=False)

    def predict_proba(self, matrix: TermMatrix) -> np.ndarray:
        """Probability of positive sentiment for each row of ``matrix``."""
        matrix.require_vocabulary(self.vocabulary)
        return self.estimator.predict_proba(matrix.values)[:, 1]

    def coefficients(self) -> Dict[str, float]:
        return dict(zip(self.vocabulary, self.estimator.coef_.ravel().tolist()))


def train_classifier(matrix: TermMatrix, labels: Sequence[int], config) -> TrainedClassifier:
    """Fit an L2 logistic regression, choosing C by k-fold held-out deviance.

    Folds are stratified and shuffled with ``config.seed``. Solver
    non-convergence within ``config.max_iter`` is tolerated: the model is
    returned as fitted.
    """
    y = np.asarray(labels)
    if y.shape[0] != matrix.n_docs:
        raise ValueError(f"{y.shape[0]} labels for a matrix with {matrix.n_docs} rows")

    folds = StratifiedKFold(n_splits=config.cv_folds, shuffle=True, random_state=config.seed)
    estimator = LogisticRegressionCV(
        Cs=config.ridge_Cs,
        cv=folds,
        **penalty_params("l2", cv=True),
        solver="lbfgs",
        scoring="neg_log_loss",
        tol=config.convergence_tol,
        max_iter=config.max_iter,
        refit=True,
        random_state=config.seed,
    )

    logger.info(
        f"Training ridge logistic regression on {matrix.n_docs} documents x "
        f"{matrix.n_terms} terms ({config.cv_folds}-fold CV over {config.ridge_Cs} strengths)"
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", category=ConvergenceWarning)
        estimator.fit(matrix.values, y)
    n_unconverged = sum(issubclass(w.category, ConvergenceWarning) for w in caught)
    if n_unconverged:
        logger.debug(f"{n_unconverged} fits stopped at max_iter={config.max_iter}")
    for w in caught:
        if not issubclass(w.category, ConvergenceWarning):
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

    C = float(np.ravel(estimator.C_)[0])
    logger.info(f"Selected C={C:.4g} (lambda={1.0 / (C * matrix.n_docs):.4g})")
    return TrainedClassifier(estimator=estimator, vocabulary=matrix.vocabulary, C=C, config=config)


def save_model(
    classifier: TrainedClassifier,
    path: Union[str, Path],
    config: Optional[Any] = None,
) -> Path:
    """Persist a trained classifier with joblib.

    ``config`` defaults to the settings the classifier was trained with.
    """
    path = Path(path)
    config = config if config is not None else classifier.config
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "estimator": classifier.estimator,
        "vocabulary": list(classifier.vocabulary),
        "C": classifier.C,
        "config": config.model_dump() if config is not None else None,
    }
    joblib.dump(payload, path, compress=3)
    logger.info(f"Saved model to {path}")
    return path


def load_model(path: Union[str, Path]) -> TrainedClassifier:
    """Load a classifier saved by :func:`save_model`, restoring its training settings.

    The stored settings are passed as explicit values, so environment
    variables present at load time cannot change them.
    """
    path = Path(path)
    payload = joblib.load(path)
    cfg = payload.get("config")
    logger.info(f"Loaded model from {path} ({len(payload['vocabulary'])} terms)")
    return TrainedClassifier(
        estimator=payload["estimator"],
        vocabulary=Vocabulary(payload["vocabulary"]),
        C=float(payload["C"]),
        config=PipelineConfig(**cfg) if cfg is not None else None,
    )
