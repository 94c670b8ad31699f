"""Formal abstractions for experiment logging.

Defines the identifiers and records that flow through a logging call:
- ExperimentIdentifier: (version, number, tag), owns the file name stem
- ExperimentRecord: everything written to one experiment file
- MasterLogEntry: the condensed line pair appended to the captain's log
"""

import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple

from starlog.values import LoggableValue

STARDATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def stardate_now() -> str:
    """Return the current wall-clock time as a stardate string."""
    return datetime.now().strftime(STARDATE_FORMAT)


@dataclass(frozen=True)
class ExperimentIdentifier:
    """Unique identifier for one experiment.

    The file name stem is derived only from these three fields, so two
    calls with the same identifier always target the same file.

    Attributes:
        version: Main version of the project, e.g. "1.3"
        number: Experiment number within the version, e.g. 4 for v1.3.4
        tag: Optional tag to organize logs; empty string means no tag
    """

    version: str
    number: int
    tag: str = ""

    def __post_init__(self) -> None:
        """Validate the identifier parts."""
        if isinstance(self.number, bool) or not isinstance(self.number, numbers.Integral):
            raise ValueError(f"Experiment number must be an integer, got {self.number!r}")
        object.__setattr__(self, "number", int(self.number))
        if self.number < 0:
            raise ValueError(f"Experiment number must be non-negative, got {self.number}")
        version = str(self.version).strip()
        if not version:
            raise ValueError("Experiment version cannot be empty or whitespace")
        invalid_chars = set('<>:"/\\|?*')
        for part in (version, self.tag or ""):
            if any(char in part for char in invalid_chars):
                raise ValueError(f"Identifier contains invalid characters: {part}")
            # Versions name a directory; keep every file inside <folder>/<version>/
            if part.strip() in (".", "..") or ".." in part:
                raise ValueError(f"Identifier cannot be or contain a relative path segment: {part}")

        object.__setattr__(self, "version", version)
        object.__setattr__(self, "tag", (self.tag or "").strip())

    @property
    def stem(self) -> str:
        """Return the file name stem, e.g. 'exp.ml.1.0.1' or 'exp.1.0.1'."""
        if self.tag:
            return f"exp.{self.tag}.{self.version}.{self.number}"
        return f"exp.{self.version}.{self.number}"

    @property
    def full_version(self) -> str:
        """Return '<version>.<number>', as shown in the captain's log."""
        return f"{self.version}.{self.number}"

    def __str__(self) -> str:
        return self.stem


@dataclass
class ExperimentRecord:
    """Everything written to a single experiment file.

    Attributes:
        identifier: Experiment identifier (version, number, tag)
        description: Main information about the experiment
        timestamp: Stardate captured once per logging call
        entries: Ordered values to serialize after the description
    """

    identifier: ExperimentIdentifier
    description: str = ""
    timestamp: str = field(default_factory=stardate_now)
    entries: List[LoggableValue] = field(default_factory=list)

    @property
    def version(self) -> str:
        return self.identifier.version

    @property
    def number(self) -> int:
        return self.identifier.number

    @property
    def tag(self) -> str:
        return self.identifier.tag

    @property
    def plot_count(self) -> int:
        """Return how many entries will be saved as image files."""
        return sum(1 for entry in self.entries if entry.is_plot)

    def master_entry(self) -> "MasterLogEntry":
        """Return the captain's log entry for this record."""
        return MasterLogEntry(
            version=self.version,
            number=self.number,
            timestamp=self.timestamp,
            description=self.description,
        )


@dataclass(frozen=True)
class MasterLogEntry:
    """One two-line entry in the captain's log. Never mutated once written."""

    version: str
    number: int
    timestamp: str
    description: str = ""

    @property
    def full_version(self) -> str:
        return f"{self.version}.{self.number}"

    def to_lines(self) -> Tuple[str, str]:
        """Return the header and indented description lines."""
        # Keep the entry on exactly two lines
        description = " ".join(str(self.description).splitlines())
        header = f"Experiment v:{self.full_version} - Stardate: {self.timestamp}"
        return header, f"\t{description}"
