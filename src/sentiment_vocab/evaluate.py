"""Held-out scoring: probabilities, ROC curve and AUC."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np
from loguru import logger
from sklearn.metrics import accuracy_score, auc, log_loss, roc_curve

from .matrix import TermMatrix
from .model import TrainedClassifier


@dataclass(frozen=True)
class EvaluationResult:
    probabilities: np.ndarray
    fpr: np.ndarray
    tpr: np.ndarray
    thresholds: np.ndarray
    auc: float

    def metrics(self, labels: Sequence[int], threshold: float = 0.5) -> Dict[str, Any]:
        """Scalar summary for reports and the CLI."""
        y = np.asarray(labels)
        p = self.probabilities
        return {
            "auc": self.auc,
            "accuracy": float(accuracy_score(y, (p >= threshold).astype(int))),
            "log_loss": float(log_loss(y, p, labels=[0, 1])),
            "n_documents": int(len(y)),
        }


def roc_auc(labels: Sequence[int], scores: Sequence[float]) -> EvaluationResult:
    """ROC curve and area for arbitrary scores; only their ranking matters."""
    y = np.asarray(labels)
    s = np.asarray(scores, dtype=float)
    if len(np.unique(y)) < 2:
        raise ValueError("ROC/AUC needs both sentiment classes among the labels")
    fpr, tpr, thresholds = roc_curve(y, s)
    return EvaluationResult(
        probabilities=s, fpr=fpr, tpr=tpr, thresholds=thresholds, auc=float(auc(fpr, tpr))
    )


def evaluate(
    classifier: TrainedClassifier, matrix: TermMatrix, labels: Sequence[int]
) -> EvaluationResult:
    """Score ``matrix`` (already conformed to the classifier's vocabulary)."""
    probs = classifier.predict_proba(matrix)
    result = roc_auc(labels, probs)
    logger.info(f"AUC={result.auc:.4f} over {matrix.n_docs} held-out documents")
    return result
