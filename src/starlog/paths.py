"""Path resolution for experiment logs.

Directory structure:
    <folder>/
        capitan.log                                  # Append-only master log
        <version>/
            exp.<tag?>.<version>.<number>.txt          # One per experiment
            exp.<tag?>.<version>.<number>-<letter>.png # One per plot value
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from starlog.abstractions import ExperimentIdentifier
from starlog.errors import StarlogIOError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create a directory recursively if it does not exist.

    Idempotent: an existing directory is not an error. Part of the write
    contract, called before any file in the directory is written.

    Raises:
        StarlogIOError: If the directory cannot be created
    """
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StarlogIOError(f"Cannot create directory {directory}: {e}") from e
    logger.debug(f"Ensured directory {directory}")
    return directory


def plot_letter(index: int) -> str:
    """Return the suffix letter for the index-th plot of a call.

    0 -> 'a', 25 -> 'z', 26 -> 'aa', 27 -> 'ab', ...
    """
    if index < 0:
        raise ValueError(f"Plot index must be non-negative, got {index}")
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('a') + remainder) + letters
    return letters


@dataclass(frozen=True)
class ExperimentPaths:
    """Collection of paths for one experiment.

    Attributes:
        folder: Root logging folder
        directory: Versioned directory holding the experiment files
        log_file: Path to the experiment text file
        master_log: Path to the captain's log
    """

    folder: Path
    directory: Path
    log_file: Path
    master_log: Path
    stem: str
    image_format: str = "png"

    def plot_path(self, index: int) -> Path:
        """Return the image path for the index-th plot (0-based)."""
        return self.directory / f"{self.stem}-{plot_letter(index)}.{self.image_format}"

    def plot_paths(self, count: int) -> List[Path]:
        return [self.plot_path(i) for i in range(count)]


def master_log_path(folder: PathLike, master_log_name: str = "capitan.log") -> Path:
    return Path(folder) / master_log_name


def experiment_paths(
    folder: PathLike,
    identifier: ExperimentIdentifier,
    master_log_name: str = "capitan.log",
    image_format: str = "png",
) -> ExperimentPaths:
    """Resolve every path for an experiment. Touches nothing on disk.

    Args:
        folder: Root logging folder
        identifier: Experiment identifier
        master_log_name: File name of the captain's log inside folder
        image_format: Extension used for saved plots

    Returns:
        ExperimentPaths for the identifier
    """
    root = Path(folder)
    directory = root / identifier.version
    return ExperimentPaths(
        folder=root,
        directory=directory,
        log_file=directory / f"{identifier.stem}.txt",
        master_log=master_log_path(root, master_log_name),
        stem=identifier.stem,
        image_format=image_format,
    )
