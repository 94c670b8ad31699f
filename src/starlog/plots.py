"""Image saving for plot values.

Figures are written straight through Figure.savefig, which renders with
the Agg canvas and never opens a GUI window. The caller keeps ownership
of the figure; it is not closed here.
"""

import logging
from pathlib import Path
from typing import Union

from matplotlib.figure import Figure

from starlog.errors import ExperimentExistsError, StarlogIOError

logger = logging.getLogger(__name__)


def save_plot(figure: Figure, file_path: Union[str, Path], dpi: int = 150) -> Path:
    """Save a figure to a new image file.

    Args:
        figure: The matplotlib Figure to render
        file_path: Destination; the extension selects the format
        dpi: Resolution of the saved image

    Returns:
        The path written

    Raises:
        ExperimentExistsError: If file_path already exists
        StarlogIOError: If the image cannot be written
    """
    path = Path(file_path)
    if path.exists():
        raise ExperimentExistsError(path)

    try:
        figure.savefig(path, dpi=dpi, bbox_inches='tight')
    except OSError as e:
        raise StarlogIOError(f"Failed to save plot to {path}: {e}") from e

    logger.debug(f"Plot saved to {path}")
    return path
