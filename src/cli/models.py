"""
Model preparation output.

Pulls Ollama models with a progress bar and prints their information.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn
from rich.table import Table

from src.llm.ollama_client import PullProgress, get_model_info, pull_model


class PullProgressBar:
    """
    Progress callback for pull_model() rendering a Rich progress bar.

    Ollama reports each layer separately; the bar follows whichever layer
    is currently downloading.
    """

    def __init__(self, progress: Progress):
        self.progress = progress
        self.task = progress.add_task("starting", total=None)

    def __call__(self, update: PullProgress):
        self.progress.update(
            self.task,
            description=update.status,
            total=update.total or None,
            completed=update.completed,
        )


@contextmanager
def pull_progress(console: Console) -> Iterator[PullProgressBar]:
    """
    Show a transient download progress bar for the duration of a pull.

    Yields:
        PullProgressBar: Callback to pass as on_progress
    """
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TextColumn("{task.percentage:>6.2f}%"),
        console=console,
        transient=True,
    ) as progress:
        yield PullProgressBar(progress)


def prepare_model(console: Console, model: str, show_info: bool = True):
    """
    Pull a model into the local runtime and optionally print its info.

    Args:
        console: Console to write to
        model: Model name
        show_info: Print the model information table afterwards
    """
    console.print(f"Preparing model [bold]{model}[/bold]")

    with pull_progress(console) as on_progress:
        pull_model(model, on_progress=on_progress)

    if show_info:
        print_model_info(console, model, get_model_info(model))


def print_model_info(console: Console, model: str, info: dict):
    """Print model information as a two-column table."""
    table = Table(title=f"Model information: {model}", show_header=False, title_justify="left")
    table.add_column(style="bold", min_width=30)
    table.add_column()
    for label, value in info.items():
        table.add_row(label, value)
    console.print(table)
