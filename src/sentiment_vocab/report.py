"""Run reports: ROC figure, directional term lists and metrics."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from loguru import logger

from .evaluate import EvaluationResult
from .interpret import InterpretabilityResult
from .shared.serialization import pyify


class RunReport:
    """Writes the artifacts of a pipeline run into one directory."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        plt.rcParams["savefig.dpi"] = 150
        plt.rcParams["savefig.bbox"] = "tight"

    def write(
        self,
        evaluation: Optional[EvaluationResult] = None,
        interpretability: Optional[InterpretabilityResult] = None,
        metrics: Optional[Dict[str, Any]] = None,
    ) -> Path:
        if evaluation is not None:
            self._plot_roc(evaluation)
        if interpretability is not None:
            self._write_terms(interpretability)
        if metrics is not None:
            with (self.output_dir / "metrics.json").open("w") as f:
                json.dump(pyify(metrics), f, indent=2)
        logger.info(f"Report written to {self.output_dir}")
        return self.output_dir

    def _plot_roc(self, evaluation: EvaluationResult) -> None:
        fig, ax = plt.subplots(figsize=(5, 5))
        ax.plot(evaluation.fpr, evaluation.tpr, lw=2, label=f"AUC = {evaluation.auc:.4f}")
        ax.plot([0, 1], [0, 1], ls="--", color="grey", lw=1)
        ax.set_xlim(0.0, 1.0)
        ax.set_ylim(0.0, 1.0)
        ax.set_xlabel("False positive rate")
        ax.set_ylabel("True positive rate")
        ax.set_title("ROC curve (held-out reviews)")
        ax.legend(loc="lower right")
        fig.savefig(self.output_dir / "roc_curve.png")
        plt.close(fig)

    def _write_terms(self, interpretability: InterpretabilityResult) -> None:
        for name, terms in (
            ("positive_terms.txt", interpretability.positive_terms),
            ("negative_terms.txt", interpretability.negative_terms),
            ("rescued_terms.txt", interpretability.rescued_terms),
        ):
            (self.output_dir / name).write_text("".join(t + "\n" for t in terms), encoding="utf-8")
        interpretability.summary_frame().to_csv(
            self.output_dir / "term_statistics.tsv", sep="\t", index=False
        )


def write_report(output_dir: Union[str, Path], **artifacts) -> Path:
    return RunReport(output_dir).write(**artifacts)
