"""
Error kinds raised by the package.

Fatal conditions are exceptions deriving from `FatalConfigurationError`
or `ExternalToolError`. Recoverable conditions are reported with
`warnings.warn` using the `ValidationWarning` category, after which the
operation either leaves the previous state in place or continues with a
safe default.

"""
from typing import (
    Optional,
    Sequence,
)


class FatalConfigurationError(Exception):
    """Base class for errors that abort the current operation chain."""


class UnknownGridTypeError(FatalConfigurationError):
    """The grid preset name is not registered in the catalog."""

    def __init__(self, gridtype: str):
        super().__init__(f"Gridtype {gridtype!r} is not supported")
        self.gridtype = gridtype


class MissingValueTypeError(FatalConfigurationError, TypeError):
    """A non-numeric missing value was given."""


class InvalidOperandError(FatalConfigurationError, TypeError):
    """An operand that is neither a Grid nor a real number was used in arithmetic."""


class GridSizeMismatchError(FatalConfigurationError, ValueError):
    """Two grids of different sizes were combined."""


class UnsupportedOperatorError(FatalConfigurationError):
    """The operator is not part of the grid algebra."""

    def __init__(self, operator: str):
        super().__init__(f"Cannot use {operator} operator with a Grid object")
        self.operator = operator


class CodecError(FatalConfigurationError, ValueError):
    """A binary blob could not be decoded into float values."""


class RegridConfigurationError(FatalConfigurationError):
    """A regridding parameter is missing or invalid."""


class ExternalToolError(RuntimeError):
    """
    An external program (`wgrib2`, `ncgen`) failed.

    Any partially written output has been removed by the time this is raised.

    """

    def __init__(self, message: str, command: Optional[Sequence[str]] = None, returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command) if command is not None else None
        self.returncode = returncode


class ValidationWarning(UserWarning):
    """A recoverable problem: the operation no-ops or falls back to a default."""
