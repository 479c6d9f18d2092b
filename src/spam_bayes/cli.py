"""Command line entry point for the spam classifier."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import Config, load_config
from .data import DataRepository, Message
from .evaluation import EvaluationResult, save_metrics
from .exceptions import SpamBayesError
from .experiment import run_experiment, train_classifier
from .modeling import extract_top_features
from .preprocessing import Tokenizer
from .search import SearchResult, search_alpha
from .visualization import refresh_static_reports

app = typer.Typer(help="Naive Bayes spam classifier: training, alpha search and evaluation.")
data_app = typer.Typer(help="Dataset inspection utilities.")
model_app = typer.Typer(help="Model training, tuning and prediction commands.")
viz_app = typer.Typer(help="Visualization and report generation.")

app.add_typer(data_app, name="data")
app.add_typer(model_app, name="model")
app.add_typer(viz_app, name="visualize")

console = Console()
DEFAULT_CONFIG_PATH = Path(__file__).resolve().with_name("config.yaml")
HANDLED_ERRORS = (SpamBayesError, FileNotFoundError, ValueError)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


def _resolve_config(config_path: Optional[Path]) -> Config:
    if config_path is not None:
        target_path: Optional[Path] = config_path
    elif DEFAULT_CONFIG_PATH.exists():
        target_path = DEFAULT_CONFIG_PATH
    else:
        target_path = None
    return load_config(target_path)


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {escape(str(exc))}")
    raise typer.Exit(code=1)


def _load_messages(config: Config) -> List[Message]:
    return DataRepository(config).load_messages()


@data_app.command("summary")
def data_summary(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional path to a YAML config file.",
    ),
    limit: int = typer.Option(5, help="Rows to preview from the dataset."),
) -> None:
    """Display dataset statistics and preview rows."""
    try:
        config = _resolve_config(config_path)
        repo = DataRepository(config)
        df = repo.load_raw()
        bundle = repo.split(repo.load_messages())
    except HANDLED_ERRORS as exc:
        _fail(exc)

    console.print(f"[bold green]Dataset loaded:[/] {config.paths.dataset} ({len(df)} rows)")
    label_counts = df["label"].map(str).value_counts()

    stats_table = Table(title="Dataset Stats")
    stats_table.add_column("Metric")
    stats_table.add_column("Value", justify="right")
    stats_table.add_row("Rows", str(len(df)))
    stats_table.add_row("Ham", str(label_counts.get("ham", 0)))
    stats_table.add_row("Spam", str(label_counts.get("spam", 0)))
    for name, size in bundle.sizes().items():
        stats_table.add_row(f"{name.capitalize()} split", str(size))
    console.print(stats_table)

    if limit > 0:
        preview_table = Table(title=f"Preview (first {limit} rows)", show_lines=False)
        preview_table.add_column("ID", justify="right")
        preview_table.add_column("Label")
        preview_table.add_column("Text", overflow="fold")
        for _, row in df.head(limit).iterrows():
            preview_table.add_row(str(row["message_id"]), str(row["label"]), row["text"])
        console.print(preview_table)


@data_app.command("tokenize")
def data_tokenize(
    text: str = typer.Argument(..., help="Raw message text."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional config path."),
) -> None:
    """Show the normalized tokens produced for TEXT."""
    try:
        config = _resolve_config(config_path)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    tokens = Tokenizer(config.preprocessing).tokenize(text)
    console.print(json.dumps(tokens))


@model_app.command("search")
def model_search(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional config path."),
    plots: bool = typer.Option(True, help="Refresh figures under the reports directory."),
    top_features: int = typer.Option(10, help="Most indicative words to list per class (0 to skip)."),
) -> None:
    """Train on the train split, sweep alpha on cv and score the winner on test."""
    try:
        config = _resolve_config(config_path)
        report = run_experiment(_load_messages(config), config)
    except HANDLED_ERRORS as exc:
        _fail(exc)

    config.ensure_directories()
    _print_sweep(report.search)
    _print_evaluation(report.test, title=f"Test metrics (alpha={report.best_alpha:g})")

    if top_features > 0:
        ranked = extract_top_features(report.classifier, top_features, alpha=report.best_alpha)
        for label, frame in ranked.items():
            console.print(f"[bold]Top {label} words:[/] " + ", ".join(frame["feature"]))

    metrics_path = save_metrics(report.to_dict(), config)
    console.print(f"Metrics saved to: {metrics_path}")
    if plots:
        outputs = refresh_static_reports(report, config)
        console.print(f"[bold green]Figures refreshed in {config.paths.figures_dir}[/] ({len(outputs)} files)")


@model_app.command("predict")
def model_predict(
    text: str = typer.Argument(..., help="Message text to classify."),
    alpha: Optional[float] = typer.Option(
        None, help="Smoothing parameter. Selected on the cv split when omitted."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional config path."),
) -> None:
    """Train on the train split and classify TEXT."""
    try:
        config = _resolve_config(config_path)
        repo = DataRepository(config)
        bundle = repo.split(repo.load_messages())
        classifier = train_classifier(bundle.train, config)
        if alpha is None:
            alpha = search_alpha(
                classifier, config.search.alphas, bundle.cv, n_jobs=config.search.n_jobs
            ).best_alpha
        scores = classifier.score(text, alpha)
    except HANDLED_ERRORS as exc:
        _fail(exc)

    colour = "red" if scores.label.value == "spam" else "green"
    console.print(f"[bold {colour}]{scores.label.value}[/] (alpha={alpha:g})")
    console.print(f"score_spam={scores.spam:.6g} score_ham={scores.ham:.6g}")


@viz_app.command("report")
def visualize_report(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional config path."),
) -> None:
    """Generate static figures for the alpha sweep and test confusion matrix."""
    try:
        config = _resolve_config(config_path)
        report = run_experiment(_load_messages(config), config)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    refresh_static_reports(report, config)
    console.print(f"[bold green]Figures refreshed in {config.paths.figures_dir}[/]")


def _print_sweep(search: SearchResult) -> None:
    table = Table(title="Alpha sweep (cv accuracy)")
    table.add_column("Alpha", justify="right")
    table.add_column("Accuracy", justify="right")
    for alpha, accuracy in search.results:
        marker = " *" if alpha == search.best_alpha else ""
        table.add_row(f"{alpha:g}", f"{accuracy:.4f}{marker}")
    console.print(table)


def _print_evaluation(evaluation: EvaluationResult, title: str) -> None:
    table = Table(title=title)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for name in ("accuracy", "precision", "recall", "f1_score"):
        table.add_row(name, f"{getattr(evaluation, name):.4f}")
    for (predicted, actual), count in evaluation.confusion.items():
        table.add_row(f"predicted={predicted.value} actual={actual.value}", str(count))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
