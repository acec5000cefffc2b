"""
Data Grid Errors

Exception types raised by the data grid renderer. None of them are caught
inside the package; they always propagate to the caller.
"""

from typing import Optional


class DataGridError(Exception):
    """Base class for all data grid rendering errors."""


class ConfigurationError(DataGridError):
    """
    A wrapper path could not be resolved or a wrapper spec is unusable.

    Always a programming mistake (a missing default template), never a
    per-request condition.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class PreconditionError(DataGridError):
    """Rendering was attempted without an attached data source."""


class MissingKeyError(DataGridError, KeyError):
    """
    The grid's primary-key field is absent from a row record while bulk
    operations or row actions need it.
    """

    def __init__(self, key_name: str):
        super().__init__(
            f"Invalid name of key for group operations or actions. "
            f"Column '{key_name}' does not exist in data source."
        )
        self.key_name = key_name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]
