# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Exception hierarchy for component API coverage analysis.

Only failures on the primary component input are raised to callers.
Problems in cross-file dependencies are resolution misses and never
surface as exceptions.
"""


class CoverageError(Exception):
    """Base class for all analysis errors."""

    pass


class ComponentReadError(CoverageError):
    """Raised when the primary component file cannot be read."""

    pass


class ComponentParseError(CoverageError):
    """Raised when source text cannot be parsed into a usable syntax tree."""

    def __init__(self, message: str, path: str = "<source>", line: int = 0) -> None:
        super().__init__(message)
        self.path = path
        self.line = line


class ConfigurationError(CoverageError):
    """Raised when explicit analyzer settings are unusable."""

    pass
