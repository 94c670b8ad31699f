"""The captain's log: append-only master log spanning all experiments.

Each logging call appends one two-line entry:

    Experiment v:1.0.1 - Stardate: 2024-05-01 10:42:07
    	First experiment using XGBoost without categorical features

Entries are never rewritten or removed.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from starlog.abstractions import ExperimentIdentifier, MasterLogEntry, stardate_now
from starlog.config import DEFAULT_CONFIG, LogConfig
from starlog.errors import StarlogIOError
from starlog.paths import ensure_directory, master_log_path

logger = logging.getLogger(__name__)

_HEADER_PATTERN = re.compile(
    r"^Experiment v:(?P<version>.+)\.(?P<number>\d+) - Stardate: (?P<timestamp>.*)$"
)


class CapitanLog:
    """Append-only writer and reader for capitan.log.

    Usage:
        capitan = CapitanLog("./logs/")
        capitan.append(entry)
        capitan.read_entries()
    """

    def __init__(self, folder: Union[str, Path], master_log_name: str = "capitan.log") -> None:
        self._folder = Path(folder)
        self._path = master_log_path(self._folder, master_log_name)

    @property
    def path(self) -> Path:
        """Return the path to the captain's log."""
        return self._path

    def append(self, entry: MasterLogEntry) -> MasterLogEntry:
        """Append an entry, creating the folder if needed.

        Raises:
            StarlogIOError: If the folder or file cannot be written
        """
        ensure_directory(self._folder)
        header, description = entry.to_lines()
        try:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(header + "\n")
                f.write(description + "\n")
        except OSError as e:
            raise StarlogIOError(f"Cannot append to {self._path}: {e}") from e

        logger.info(f"Captain's log entry v:{entry.full_version} appended to {self._path}")
        return entry

    def read_entries(self) -> List[MasterLogEntry]:
        """Parse every entry of the log, oldest first.

        Lines that do not belong to an entry are skipped.
        """
        if not self._path.exists():
            return []

        with open(self._path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()

        entries = []
        i = 0
        while i < len(lines):
            match = _HEADER_PATTERN.match(lines[i])
            if not match:
                i += 1
                continue
            description = ""
            if i + 1 < len(lines) and lines[i + 1].startswith("\t"):
                description = lines[i + 1][1:]
                i += 1
            entries.append(MasterLogEntry(
                version=match.group("version"),
                number=int(match.group("number")),
                timestamp=match.group("timestamp"),
                description=description,
            ))
            i += 1
        return entries


def append_capitan_log(
    timestamp: Optional[str] = None,
    description: str = "",
    version: str = DEFAULT_CONFIG.version,
    number: int = 1,
    folder: Union[str, Path] = DEFAULT_CONFIG.folder,
    config: Optional[LogConfig] = None,
) -> MasterLogEntry:
    """Append an entry to <folder>/capitan.log.

    Called by log_experiment after the experiment file is written. Exposed
    so an entry can be written by hand, e.g. to recover a lost one.

    Args:
        timestamp: Stardate of the experiment; defaults to now
        description: Main information about the experiment
        version: Main version of the project, e.g. "1.3"
        number: Experiment number, e.g. 4 for v1.3.4
        folder: Folder holding the captain's log
        config: Optional config supplying master_log_name

    Returns:
        The entry written
    """
    master_log_name = config.master_log_name if config else DEFAULT_CONFIG.master_log_name
    identifier = ExperimentIdentifier(version=version, number=number)
    entry = MasterLogEntry(
        version=identifier.version,
        number=identifier.number,
        timestamp=timestamp or stardate_now(),
        description=description,
    )
    return CapitanLog(folder, master_log_name).append(entry)


def read_capitan_log(
    folder: Union[str, Path] = DEFAULT_CONFIG.folder,
    master_log_name: str = DEFAULT_CONFIG.master_log_name,
) -> List[MasterLogEntry]:
    """Read every entry of <folder>/capitan.log."""
    return CapitanLog(folder, master_log_name).read_entries()
