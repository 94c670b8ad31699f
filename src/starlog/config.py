"""Configuration dataclass for experiment logging."""

from dataclasses import dataclass, replace
from typing import Any

from matplotlib.backend_bases import FigureCanvasBase


@dataclass(frozen=True)
class LogConfig:
    """Settings shared by every logging call.

    Passed explicitly to each call instead of living in module globals.
    """

    folder: str = './logs/'
    version: str = '1.0'
    tag: str = ''  # Empty string = no tag segment in file names
    master_log_name: str = 'capitan.log'

    # Tables: decimals kept for float cells
    table_digits: int = 5

    # Plots
    image_dpi: int = 150
    image_format: str = 'png'

    def __post_init__(self) -> None:
        if not str(self.folder).strip():
            raise ValueError("folder cannot be empty")
        if not str(self.version).strip():
            raise ValueError("version cannot be empty")
        if not self.master_log_name or '/' in self.master_log_name or '\\' in self.master_log_name:
            raise ValueError(f"Invalid master_log_name: {self.master_log_name!r}")
        if self.table_digits < 0:
            raise ValueError(f"table_digits must be non-negative, got {self.table_digits}")
        if self.image_dpi <= 0:
            raise ValueError(f"image_dpi must be positive, got {self.image_dpi}")
        supported_formats = FigureCanvasBase.get_supported_filetypes()
        if self.image_format not in supported_formats:
            raise ValueError(
                f"Unsupported image_format: {self.image_format!r}. Use one of {sorted(supported_formats)}"
            )

        # Normalize optional tag; object.__setattr__ because frozen=True
        object.__setattr__(self, 'tag', self.tag or '')

    def with_overrides(self, **overrides: Any) -> "LogConfig":
        """Return a copy with the given fields replaced, ignoring None values."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


DEFAULT_CONFIG = LogConfig()
