"""Command-line interface for vocabulary building, training and scoring.

Subcommands:
- build-vocab: reduce a labeled corpus to an interpretable vocabulary file
- train: fit the ridge classifier on a labeled corpus and a vocabulary file
- predict: score a corpus with a saved model and write ``id``/``prob`` TSV
- run: split, build, train, evaluate and report in one go
"""

import json
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from .config import load_config
from .corpus import load_corpus, write_predictions
from .errors import ColumnMismatchError, CorpusFormatError, InfeasibleReductionError
from .model import load_model, save_model
from .pipeline import build_vocabulary, run_pipeline, score_corpus, train_on_corpus
from .report import write_report
from .shared.logging_utils import setup_logging
from .shared.serialization import pyify
from .vocabulary import Vocabulary

app = typer.Typer(help="Interpretable vocabulary and sentiment classifier for movie reviews")

PIPELINE_ERRORS = (
    CorpusFormatError,
    InfeasibleReductionError,
    ColumnMismatchError,
    FileNotFoundError,
    ValueError,
)


@app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Optional log file"),
):
    """Configure logging for every subcommand."""
    setup_logging(log_file=log_file, level=log_level)


@app.command("build-vocab")
def build_vocab(
    data: Path = typer.Option(..., "--data", help="Labeled reviews TSV"),
    out: Path = typer.Option(Path("myvocab.txt"), "--out", help="Vocabulary file to write"),
    report_dir: Optional[Path] = typer.Option(
        None, "--report-dir", help="Directory for term lists and statistics"
    ),
    nt: Optional[int] = typer.Option(None, "--nt", help="Final vocabulary cap"),
):
    """Build the reduced vocabulary from a labeled corpus."""
    try:
        config = load_config(**({"nt": nt} if nt is not None else {}))
        build = build_vocabulary(load_corpus(data), config)
    except PIPELINE_ERRORS as e:
        logger.error(f"Vocabulary build failed: {e}")
        raise typer.Exit(1)

    build.vocabulary.to_file(out)
    if report_dir:
        write_report(
            report_dir,
            interpretability=build.interpretability,
            metrics={"stage_sizes": build.stage_sizes},
        )
    typer.echo(json.dumps({"vocabulary": str(out), **build.stage_sizes}))


@app.command()
def train(
    data: Path = typer.Option(..., "--data", help="Labeled reviews TSV"),
    vocab: Path = typer.Option(..., "--vocab", help="Vocabulary file"),
    out: Path = typer.Option(..., "--out", help="Model path (joblib)"),
):
    """Fit the cross-validated ridge classifier over a fixed vocabulary."""
    try:
        config = load_config()
        classifier = train_on_corpus(load_corpus(data), Vocabulary.from_file(vocab), config)
    except PIPELINE_ERRORS as e:
        logger.error(f"Training failed: {e}")
        raise typer.Exit(1)

    save_model(classifier, out, config)
    typer.echo(json.dumps({"model": str(out), "C": classifier.C, "terms": len(classifier.vocabulary)}))


@app.command()
def predict(
    model: Path = typer.Option(..., "--model", help="Saved model (joblib)"),
    data: Path = typer.Option(..., "--data", help="Reviews TSV to score"),
    out: Path = typer.Option(Path("mysubmission.txt"), "--out", help="Prediction TSV"),
):
    """Write the positive-sentiment probability of every review.

    Reviews are featurized with the settings stored in the model file.
    """
    try:
        classifier = load_model(model)
        config = classifier.config if classifier.config is not None else load_config()
        scores = score_corpus(classifier, load_corpus(data, require_labels=False), config)
    except PIPELINE_ERRORS as e:
        logger.error(f"Prediction failed: {e}")
        raise typer.Exit(1)

    write_predictions(scores["id"], scores["prob"], out)
    typer.echo(json.dumps({"predictions": str(out), "rows": len(scores)}))


@app.command()
def run(
    data: Path = typer.Option(..., "--data", help="Labeled reviews TSV"),
    out_dir: Path = typer.Option(Path("runs/latest"), "--out-dir", help="Output directory"),
    vocab: Optional[Path] = typer.Option(
        None, "--vocab", help="Reuse this vocabulary instead of building one"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Split and fold seed"),
):
    """Split, build the vocabulary, train, evaluate and write a report."""
    try:
        config = load_config(**({"seed": seed} if seed is not None else {}))
        vocabulary = Vocabulary.from_file(vocab) if vocab else None
        result = run_pipeline(load_corpus(data), config, vocabulary=vocabulary)
    except PIPELINE_ERRORS as e:
        logger.error(f"Pipeline failed: {e}")
        raise typer.Exit(1)

    out_dir.mkdir(parents=True, exist_ok=True)
    result.vocabulary.to_file(out_dir / "myvocab.txt")
    save_model(result.classifier, out_dir / "model.joblib", config)
    write_predictions(result.predictions["id"], result.predictions["prob"], out_dir / "mysubmission.txt")
    write_report(
        out_dir,
        evaluation=result.evaluation,
        interpretability=result.build.interpretability if result.build else None,
        metrics=result.metrics,
    )
    typer.echo(json.dumps(pyify(result.metrics), indent=2))


if __name__ == "__main__":
    app()
