"""Logging helpers for binary HGF runs."""
from __future__ import annotations

from typing import Dict

from rich.console import Console
from rich.table import Table

from ..parameters import ParameterSet


console = Console()


def log_table(title: str, data: Dict[str, float]) -> None:
    table = Table(title=title)
    table.add_column("Metric", justify="left")
    table.add_column("Value", justify="right")
    for key, value in data.items():
        table.add_row(key, f"{value:.4f}")
    console.print(table)


def log_parameters(params: ParameterSet, n_trials: int, n_skipped: int) -> None:
    table = Table(title=f"HGF run: {n_trials} trials, {n_skipped} ignored")
    for name in params.names():
        table.add_column(name, justify="right")
    table.add_row(*(f"{v:.4g}" for v in params.to_vector()))
    console.print(table)


__all__ = ["console", "log_table", "log_parameters"]
