"""Parser exception definitions.

Parsing itself never raises; these cover misuse at the edges (bad command
definitions at start-up, unreadable context files).
"""


class TrailparseError(ValueError):
    """Base exception for trailparse."""

    pass


class CommandDefinitionError(TrailparseError):
    """A CommandDef could not be registered.

    Attributes:
        canonical: Canonical name of the offending definition.
    """

    def __init__(self, message: str, canonical: str = "") -> None:
        super().__init__(message)
        self.canonical = canonical


class ContextFileError(TrailparseError):
    """A parse context file could not be read or validated.

    Attributes:
        path: Path of the file.
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path
