"""Loggable values: the tagged variant written into experiment files.

Raw Python objects passed to a logging call are classified once, at the
boundary, into a LoggableValue with an explicit ValueKind. Everything
downstream dispatches on the kind only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List

import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure


class ValueKind(Enum):
    """Discriminator for LoggableValue."""
    TEXT = "text"      # Textual representation on its own line(s)
    BLANK = "blank"    # A single empty line
    TABLE = "table"    # Pretty-printed rectangular dataset
    PLOT = "plot"      # Saved image, path written inline


@dataclass(frozen=True)
class LoggableValue:
    """One value to serialize into an experiment file.

    Attributes:
        kind: Which formatter handles the payload
        payload: The value itself (DataFrame for TABLE, Figure for PLOT)
    """

    kind: ValueKind
    payload: Any = None

    @classmethod
    def text(cls, value: Any) -> "LoggableValue":
        return cls(ValueKind.TEXT, value)

    @classmethod
    def blank(cls) -> "LoggableValue":
        return cls(ValueKind.BLANK)

    @classmethod
    def table(cls, data: Any) -> "LoggableValue":
        """Wrap a rectangular dataset, normalized to a DataFrame.

        Args:
            data: DataFrame, Series (one-column table) or 2-D array

        Raises:
            ValueError: If data cannot be viewed as a table
        """
        if isinstance(data, pd.DataFrame):
            frame = data
        elif isinstance(data, pd.Series):
            frame = data.to_frame()
        elif isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise ValueError(f"Only 2-D arrays can be logged as tables, got {data.ndim}-D")
            frame = pd.DataFrame(data)
        else:
            raise ValueError(f"Cannot log {type(data).__name__} as a table")
        return cls(ValueKind.TABLE, frame)

    @classmethod
    def plot(cls, figure: Any) -> "LoggableValue":
        """Wrap a matplotlib Figure, or the Figure owning an Axes."""
        if isinstance(figure, Axes):
            figure = figure.figure
        if not isinstance(figure, Figure):
            raise ValueError(f"Cannot log {type(figure).__name__} as a plot")
        return cls(ValueKind.PLOT, figure)

    @property
    def is_plot(self) -> bool:
        return self.kind is ValueKind.PLOT


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, np.ndarray):
        return value.size == 0
    return False


def coerce_value(value: Any) -> LoggableValue:
    """Classify a raw object into a LoggableValue.

    Priority order: already-wrapped, tabular, blank, plot, text.
    """
    if isinstance(value, LoggableValue):
        return value
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return LoggableValue.table(value)
    if isinstance(value, np.ndarray) and value.ndim == 2 and value.size > 0:
        return LoggableValue.table(value)
    if _is_blank(value):
        return LoggableValue.blank()
    if isinstance(value, (Figure, Axes)):
        return LoggableValue.plot(value)
    return LoggableValue.text(value)


def coerce_values(values: Iterable[Any]) -> List[LoggableValue]:
    """Classify every raw value, preserving order."""
    return [coerce_value(value) for value in values]
