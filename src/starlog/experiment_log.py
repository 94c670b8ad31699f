"""Experiment files: one human-readable text log per experiment.

A logging call resolves the experiment path, refuses to overwrite it,
writes the header, stardate, description and every value, then appends
the matching entry to the captain's log.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, TextIO, Union

from starlog.abstractions import ExperimentIdentifier, ExperimentRecord, MasterLogEntry, stardate_now
from starlog.capitan_log import CapitanLog
from starlog.config import DEFAULT_CONFIG, LogConfig
from starlog.errors import ExperimentExistsError, StarlogError, StarlogIOError
from starlog.formatting import FormatContext, format_value
from starlog.paths import ExperimentPaths, ensure_directory, experiment_paths
from starlog.values import coerce_values

logger = logging.getLogger(__name__)


def header_lines(record: ExperimentRecord) -> List[str]:
    """Return the lines written before the values of a record."""
    title = f"Experiment #{record.number} (v:{record.version})"
    if record.tag:
        title += f" [tag:{record.tag}]"
    return [
        title,
        "",
        "Execution Date and Time:",
        record.timestamp,
        "",
        "Description:",
        str(record.description),
        "",
    ]


class ExperimentLogger:
    """Writes experiment files and keeps the captain's log in step.

    Usage:
        exp_logger = ExperimentLogger(LogConfig(folder="./logs/", version="1.3"))
        exp_logger.log("Final AUC:", 0.789, "", description="XGBoost baseline", number=4)
    """

    def __init__(self, config: Optional[LogConfig] = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._capitan = CapitanLog(self._config.folder, self._config.master_log_name)

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def capitan(self) -> CapitanLog:
        return self._capitan

    def record_for(
        self,
        *values: Any,
        description: str = "",
        number: int = 1,
        tag: Optional[str] = None,
        version: Optional[str] = None,
    ) -> ExperimentRecord:
        """Build a record, stamping it with the current stardate.

        tag and version fall back to the config when None.
        """
        identifier = ExperimentIdentifier(
            version=self._config.version if version is None else version,
            number=number,
            tag=self._config.tag if tag is None else tag,
        )
        return ExperimentRecord(
            identifier=identifier,
            description=description,
            timestamp=stardate_now(),
            entries=coerce_values(values),
        )

    def paths_for(self, identifier: ExperimentIdentifier) -> ExperimentPaths:
        return experiment_paths(
            self._config.folder,
            identifier,
            master_log_name=self._config.master_log_name,
            image_format=self._config.image_format,
        )

    def write(self, record: ExperimentRecord) -> Path:
        """Write a record to its experiment file, then to the captain's log.

        Every target file is checked before anything is written. If writing
        fails partway, the partial experiment file and the plots saved by
        this call are removed and the captain's log is left untouched.

        Args:
            record: The record to write

        Returns:
            Path of the experiment file

        Raises:
            ExperimentExistsError: If the experiment file or a plot file exists
            StarlogIOError: If a directory or file cannot be written
        """
        paths = self.paths_for(record.identifier)

        if paths.log_file.exists():
            raise ExperimentExistsError(paths.log_file)
        for plot_path in paths.plot_paths(record.plot_count):
            if plot_path.exists():
                raise ExperimentExistsError(plot_path)

        ensure_directory(paths.directory)

        try:
            log_file = open(paths.log_file, "x", encoding="utf-8")
        except FileExistsError as e:
            # Lost a race with another writer
            raise ExperimentExistsError(paths.log_file) from e
        except OSError as e:
            raise StarlogIOError(f"Cannot create {paths.log_file}: {e}") from e

        context = FormatContext(
            paths=paths,
            table_digits=self._config.table_digits,
            image_dpi=self._config.image_dpi,
        )
        try:
            with log_file:
                self._write_body(log_file, record, context)
        except Exception as e:
            self._discard(paths.log_file, context.saved_plots)
            if isinstance(e, OSError) and not isinstance(e, StarlogError):
                raise StarlogIOError(f"Failed writing {paths.log_file}: {e}") from e
            raise

        logger.info(f"Experiment {record.identifier} written to {paths.log_file}")

        self._capitan.append(record.master_entry())
        return paths.log_file

    def log(
        self,
        *values: Any,
        description: str = "",
        number: int = 1,
        tag: Optional[str] = None,
        version: Optional[str] = None,
    ) -> Path:
        """Build a record from raw values and write it."""
        record = self.record_for(
            *values, description=description, number=number, tag=tag, version=version
        )
        return self.write(record)

    def history(self) -> List[MasterLogEntry]:
        """Return every captain's log entry in this logger's folder."""
        return self._capitan.read_entries()

    def _write_body(self, f: TextIO, record: ExperimentRecord, context: FormatContext) -> None:
        for line in header_lines(record):
            f.write(line + "\n")
        for value in record.entries:
            for line in format_value(value, context):
                f.write(f"{line}\n")

    def _discard(self, log_file: Path, saved_plots: List[Path]) -> None:
        """Remove files left behind by a failed write."""
        for path in [log_file, *saved_plots]:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove partial file {path}: {e}")
            else:
                logger.warning(f"Removed partial file {path}")


def log_experiment(
    *values: Any,
    description: str = "",
    tag: Optional[str] = None,
    version: Optional[str] = None,
    number: int = 1,
    folder: Optional[Union[str, Path]] = None,
    config: Optional[LogConfig] = None,
) -> Path:
    """Create an experiment log file and append its captain's log entry.

    Values are written in order. Recommended shape is ("title", value, ""):
    an empty string is written as a blank line, tables are pretty-printed
    and plots are saved next to the log file.

    Example:
        log_experiment(
            "Final AUC:", 0.789, "",
            description="First experiment using XGBoost without categorical features",
            tag="ml", version="1.0", number=1,
        )

    Args:
        *values: Everything to log, in order
        description: Main information about the experiment
        tag: Optional tag to separate and organize logs
        version: Main version of the project, e.g. "1.3"
        number: Experiment number, e.g. 4 for v1.3.4
        folder: Folder to store the logs
        config: Base configuration; explicit arguments take precedence

    Returns:
        Path of the experiment file

    Raises:
        ExperimentExistsError: If the experiment was already logged
        StarlogIOError: If the logs cannot be written
    """
    base = config or DEFAULT_CONFIG
    folder = str(folder) if folder is not None else None
    exp_logger = ExperimentLogger(base.with_overrides(folder=folder, version=version, tag=tag))
    return exp_logger.log(*values, description=description, number=number)
