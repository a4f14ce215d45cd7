"""Tests for :module:`~clusterpt.printing`."""

from __future__ import annotations

import pytest
from rich.console import Console

from clusterpt import console, printing, quiet


def _recording_console() -> Console:
    """Get a console that records its output."""
    return Console(record=True, theme=printing.theme, width=120, highlight=False)


@pytest.mark.parametrize(
    "value, rating", [(1e-12, "good"), (-5e-10, "okay"), (1e-3, "bad"), (2e-9, "bad")]
)
def test_format_error(value: float, rating: str) -> None:
    """Test the rating of errors against a threshold."""
    assert printing.format_error(value, 1e-10).startswith(f"[{rating}]")


def test_format_option() -> None:
    """Test the formatting of solver options."""
    assert printing.format_option(1e-10) == "1e-10"
    assert printing.format_option(200) == "200"
    assert printing.format_option(True) == "True"
    assert printing.format_option(printing.format_float) == "format_float"
    assert printing.format_float(-1.25, precision=3) == "-1.250"


def test_print_table() -> None:
    """Test the printing of a table of sectors."""
    output = _recording_console()
    rows = [("Removal", 1, 4), ("Ground", 2, 6), ("Addition", 3, 4)]
    printing.print_table(("Sector", "Particles", "Dimension"), rows, console=output)
    text = output.export_text()
    for column in ("Sector", "Particles", "Dimension", "Removal", "Ground", "Addition"):
        assert column in text


def test_ground_state_table() -> None:
    """Test the table of the ground state iterations."""
    output = _recording_console()
    table = printing.GroundStateTable(1e-10, 1e-5, console=output)
    table.add_row(1, -2.5, 1e-3, 1e-2)
    table.add_row(2, -2.8284271247, 1e-12, 1e-7)
    table.print()
    text = output.export_text()
    assert "Residual" in text
    assert "-2.8284271247" in text


def test_progress_printer() -> None:
    """Test that the progress bar is only shown on an active console."""
    output = _recording_console()
    with printing.ProgressPrinter(3, description="Label", console=output) as progress:
        assert progress.active
        assert progress.total == 3
        progress.update(2)
    assert not progress.active

    with printing.ProgressPrinter(3, console=Console(quiet=True)) as progress:
        assert not progress.active
        progress.update(1)


def test_quiet() -> None:
    """Test silencing and restoring the console."""
    original = console.quiet
    try:
        quiet()
        assert console.quiet
        quiet(False)
        assert not console.quiet
    finally:
        console.quiet = original
