"""Formatters turning LoggableValues into experiment file lines.

Each ValueKind maps to exactly one formatter in FORMATTERS. A formatter
receives the value and the FormatContext of the current call and returns
the lines to write.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List

import numpy as np
import pandas as pd

from starlog.paths import ExperimentPaths
from starlog.plots import save_plot
from starlog.values import LoggableValue, ValueKind

logger = logging.getLogger(__name__)


@dataclass
class FormatContext:
    """Per-call state shared by the formatters.

    Attributes:
        paths: Resolved paths of the experiment being written
        table_digits: Decimals kept for float table cells
        image_dpi: Resolution of saved plots
        saved_plots: Plot files written so far in this call, in order
    """

    paths: ExperimentPaths
    table_digits: int = 5
    image_dpi: int = 150
    saved_plots: List[Path] = field(default_factory=list)

    def next_plot_path(self) -> Path:
        return self.paths.plot_path(len(self.saved_plots))


def _float_formatter(digits: int) -> Callable[[float], str]:
    def fmt(value: float) -> str:
        text = f"{value:.{digits}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    return fmt


def format_table(frame: pd.DataFrame, digits: int = 5) -> List[str]:
    """Pretty-print a DataFrame as a ruled text table.

    Layout:
        =========================
             model    auc
        -------------------------
        0      xgb  0.789
        1       lr  0.71234
        =========================

    Args:
        frame: The dataset to print
        digits: Decimals kept for float cells (trailing zeros dropped)

    Returns:
        Table lines, without trailing newlines
    """
    if frame.empty:
        body = [f"(empty table: {len(frame.index)} rows x {len(frame.columns)} columns)"]
        header_count = 0
    else:
        body = frame.to_string(float_format=_float_formatter(digits)).splitlines()
        header_count = frame.columns.nlevels
        if any(name is not None for name in frame.index.names):
            header_count += 1

    width = max(len(line) for line in body)
    lines = ["=" * width]
    if header_count:
        lines.extend(body[:header_count])
        lines.append("-" * width)
    lines.extend(body[header_count:])
    lines.append("=" * width)
    return lines


def format_text_value(payload: Any) -> List[str]:
    """Return the textual representation of a value.

    Dicts write one 'key: value' line per item; flat sequences write one
    element per line; anything else, including an empty dict or sequence,
    is str(value) on a single line.
    """
    lines = [str(payload)]
    if isinstance(payload, dict):
        lines = [f"{key}: {value}" for key, value in payload.items()]
    elif isinstance(payload, (list, tuple)):
        lines = [str(item) for item in payload]
    elif isinstance(payload, np.ndarray) and payload.ndim == 1:
        lines = [str(item) for item in payload.tolist()]
    return lines or [str(payload)]


def _format_text(value: LoggableValue, context: FormatContext) -> List[str]:
    return format_text_value(value.payload)


def _format_blank(value: LoggableValue, context: FormatContext) -> List[str]:
    return [""]


def _format_table(value: LoggableValue, context: FormatContext) -> List[str]:
    frame = value.payload
    logger.debug(f"Formatting table with {len(frame.index)} rows x {len(frame.columns)} columns")
    return format_table(frame, digits=context.table_digits)


def _format_plot(value: LoggableValue, context: FormatContext) -> List[str]:
    path = context.next_plot_path()
    save_plot(value.payload, path, dpi=context.image_dpi)
    context.saved_plots.append(path)
    logger.debug(f"Plot {len(context.saved_plots)} of {context.paths.stem} written inline as {path.name}")
    return [str(path)]


FORMATTERS: Dict[ValueKind, Callable[[LoggableValue, FormatContext], List[str]]] = {
    ValueKind.TEXT: _format_text,
    ValueKind.BLANK: _format_blank,
    ValueKind.TABLE: _format_table,
    ValueKind.PLOT: _format_plot,
}


def format_value(value: LoggableValue, context: FormatContext) -> List[str]:
    """Format one value with the formatter registered for its kind."""
    return FORMATTERS[value.kind](value, context)
