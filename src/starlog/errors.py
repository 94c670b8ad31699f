"""Exceptions raised while writing experiment logs."""


class StarlogError(Exception):
    """Base exception for experiment logging errors."""

    pass


class ExperimentExistsError(StarlogError, FileExistsError):
    """Raised when an experiment or plot file is already on disk.

    Nothing is overwritten: delete the file manually or change the
    identifiers and log again.
    """

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(
            f"File {path} already exists. Manually delete the file and try again "
            f"or you can lose information."
        )

    def __str__(self) -> str:
        return self.args[0]


class StarlogIOError(StarlogError, OSError):
    """Raised when a directory or file cannot be created or written."""

    def __str__(self) -> str:
        return self.args[0] if self.args else "I/O failure"
