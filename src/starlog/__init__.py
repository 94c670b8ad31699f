"""Starlog: a captain's log for your experiments.

The Starlog is a recording entered into a starship computer for posterity.
This package keeps track of the experiments you run, their context and
their results:
- One human-readable text file per experiment
- An append-only captain's log summarizing every experiment in a folder
- Tables pretty-printed, plots saved next to the experiment file
"""

from starlog.abstractions import (
    ExperimentIdentifier,
    ExperimentRecord,
    MasterLogEntry,
    stardate_now,
)
from starlog.capitan_log import CapitanLog, append_capitan_log, read_capitan_log
from starlog.config import DEFAULT_CONFIG, LogConfig
from starlog.errors import ExperimentExistsError, StarlogError, StarlogIOError
from starlog.experiment_log import ExperimentLogger, log_experiment
from starlog.paths import ExperimentPaths, ensure_directory, experiment_paths
from starlog.values import LoggableValue, ValueKind, coerce_value

__all__ = [
    # Abstractions
    "ExperimentIdentifier",
    "ExperimentRecord",
    "MasterLogEntry",
    "stardate_now",
    # Config
    "LogConfig",
    "DEFAULT_CONFIG",
    # Errors
    "StarlogError",
    "ExperimentExistsError",
    "StarlogIOError",
    # Values
    "LoggableValue",
    "ValueKind",
    "coerce_value",
    # Paths
    "ExperimentPaths",
    "ensure_directory",
    "experiment_paths",
    # Logging
    "ExperimentLogger",
    "log_experiment",
    "CapitanLog",
    "append_capitan_log",
    "read_capitan_log",
]
