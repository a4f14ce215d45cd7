"""Console output of the cluster calculations."""

from __future__ import annotations

import enum
import importlib
import os
import subprocess
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.errors import LiveError
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table
from rich.theme import Theme

from clusterpt import __version__

if TYPE_CHECKING:
    from typing import Any

    from rich.progress import TaskID


theme = Theme(
    {
        "good": "green",
        "okay": "yellow",
        "bad": "red",
        "output": "cyan",
        "input": "bright_magenta",
        "method": "bold underline",
        "header": "bold",
    }
)

console = Console(
    highlight=False,
    theme=theme,
    log_path=False,
    quiet=os.environ.get("CLUSTERPT_QUIET", "").lower() in ("1", "true"),
)

HEADER = r"""
      _           _                  _
  ___| |_   _ ___| |_ ___ _ __ _ __ | |_
 / __| | | | / __| __/ _ \ '__| '_ \| __|
| (__| | |_| \__ \ ||  __/ |  | |_) | |_
 \___|_|\__,_|___/\__\___|_|  | .__/ \__|
                               |_|  %s
"""

_DEPENDENCIES = ("numpy", "scipy", "pyscf", "clusterpt")


def _get_git_hash(directory: str) -> str:
    """Get the short git hash of a directory, if it is a repository."""
    cmd = ["git", "--git-dir=%s" % os.path.join(directory, ".git"), "rev-parse", "--short", "HEAD"]
    try:
        output = subprocess.check_output(cmd, universal_newlines=True, stderr=subprocess.STDOUT)
        return output.rstrip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return "N/A"


def init_console() -> None:
    """Print the banner and the versions of the numerical dependencies, once per session."""
    if globals().get("_CLUSTERPT_LOG_INITIALISED", False):
        return

    banner = HEADER % (" " * (14 - len(__version__)) + "[input]" + __version__ + "[/input]")
    console.print("[header]" + banner + "[/header]")

    rows = []
    for name in _DEPENDENCIES:
        module = importlib.import_module(name)
        if module.__file__ is None:
            git_hash = "N/A"
        else:
            git_hash = _get_git_hash(os.path.join(os.path.dirname(module.__file__), ".."))
        rows.append((name, module.__version__, git_hash))
    print_table(("Package", "Version", "Git hash"), rows)
    console.print("OMP_NUM_THREADS = [input]%s[/]" % os.environ.get("OMP_NUM_THREADS", ""))

    globals()["_CLUSTERPT_LOG_INITIALISED"] = True


def quiet(enable: bool = True) -> None:
    """Silence the console, or restore it with ``enable=False``."""
    console.quiet = enable


def format_float(value: float, precision: int = 10, scientific: bool = False) -> str:
    """Format a real number, such as an energy, with a given precision."""
    value = float(value)
    return f"{value:.{precision}g}" if scientific else f"{value:.{precision}f}"


def format_error(value: float, threshold: float) -> str:
    """Format an error in scientific notation, coloured by its size relative to a threshold.

    Errors below the threshold are rated good, and below ten times the threshold okay.
    """
    if abs(value) < threshold:
        rating = "good"
    elif abs(value) < 10 * threshold:
        rating = "okay"
    else:
        rating = "bad"
    return f"[{rating}]{format_float(value, precision=4, scientific=True)}[/]"


def format_option(value: Any) -> str:
    """Format the value of a solver option for display.

    Enumerations are shown by their value, and functions or classes by their name.
    """
    if isinstance(value, enum.Enum):
        return str(value.value)
    if hasattr(value, "__name__"):
        return str(value.__name__)
    if isinstance(value, float):
        return format_float(value, precision=6, scientific=True)
    return str(value)


def print_table(
    columns: tuple[str, ...],
    rows: list[tuple[Any, ...]],
    console: Console = console,
    value_style: str = "input",
) -> None:
    """Print a simple table, with all columns but the first styled as values.

    Args:
        columns: Names of the columns.
        rows: Rows of the table. Each entry is converted with :func:`str`.
        console: The console to print to.
        value_style: Style of the value columns.
    """
    table = Table(box=box.SIMPLE)
    for i, column in enumerate(columns):
        if i == 0:
            table.add_column(column)
        else:
            table.add_column(column, justify="right", style=value_style)
    for row in rows:
        table.add_row(*[str(value) for value in row])
    console.print(table)


class GroundStateTable:
    """Table of the iterations of an iterative ground state search.

    Args:
        conv_tol: Threshold on the change in energy.
        conv_tol_residual: Threshold on the residual norm.
        console: The console to print to.
    """

    def __init__(self, conv_tol: float, conv_tol_residual: float, console: Console = console):
        """Initialise the object."""
        self._console = console
        self._thresholds = (conv_tol, conv_tol_residual)
        self._table = Table(box=box.SIMPLE)
        self._table.add_column("Cycle", style="dim")
        for column in ("Energy", "Change", "Residual"):
            self._table.add_column(column, justify="right")

    def add_row(self, cycle: int, energy: float, change: float, residual: float) -> None:
        """Add the state of one iteration."""
        self._table.add_row(
            str(cycle),
            format_float(energy),
            format_error(change, self._thresholds[0]),
            format_error(residual, self._thresholds[1]),
        )

    def print(self) -> None:
        """Print the table."""
        self._console.print(self._table)


class ProgressPrinter:
    """Transient progress bar over a known number of steps.

    The steps are the iterations of the ground state search, the labels of the cluster whose
    Krylov subspaces are built, or the momenta of a spectrum. Use as a context manager. Nothing
    is shown if the console is quiet or another live display is already active.

    Args:
        total: Number of steps.
        description: Name of a step.
        console: The console to print to.
    """

    def __init__(self, total: int, description: str = "Iteration", console: Console = console):
        """Initialise the object."""
        self._total = total
        self._description = description
        self._console = console
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> ProgressPrinter:
        """Start the progress bar."""
        if self._console.quiet:
            return self
        progress = Progress(
            TextColumn(self._description),
            BarColumn(),
            MofNCompleteColumn(),
            console=self._console,
            transient=True,
        )
        try:
            progress.start()
        except LiveError:
            return self
        self._progress = progress
        self._task = progress.add_task(self._description, total=self._total)
        return self

    def __exit__(self, *args: Any) -> None:
        """Stop the progress bar."""
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def update(self, step: int) -> None:
        """Mark the given number of steps as completed."""
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, completed=step)

    @property
    def total(self) -> int:
        """Get the number of steps."""
        return self._total

    @property
    def active(self) -> bool:
        """Get whether the progress bar is being displayed."""
        return self._progress is not None
