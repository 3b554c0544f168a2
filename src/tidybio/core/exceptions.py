"""
Error types raised by tidybio.

All errors are deterministic given the same inputs and are raised before any
partial result is produced. They subclass the closest builtin so callers that
already catch ``ValueError``/``KeyError`` keep working.
"""

from __future__ import annotations

from typing import Iterable, Optional

__all__ = [
    'TidyError',
    'SchemaMismatchError',
    'ConfigurationMismatchError',
    'UnresolvedIdentifierError',
    'AmbiguousIdentifierError',
]


class TidyError(Exception):
    """Base class for tidybio errors."""
    pass


class SchemaMismatchError(TidyError, ValueError):
    """Raised when a table lacks the columns of the required tidy format."""

    def __init__(self, message: str, kind: Optional[str] = None,
                 missing: Iterable[str] = ()):
        super().__init__(message)
        self.kind = kind
        self.missing = list(missing)


class ConfigurationMismatchError(TidyError, ValueError):
    """Raised when parallel arguments disagree (e.g. data types vs alias columns)."""
    pass


class UnresolvedIdentifierError(TidyError, KeyError):
    """Raised when requested identifiers cannot be found in a source lookup."""

    def __init__(self, identifiers: Iterable[str], column: Optional[str] = None,
                 data_type: Optional[str] = None):
        self.identifiers = list(identifiers)
        self.column = column
        self.data_type = data_type
        where = f"column '{column}'" if column else "internal ids"
        if data_type:
            where += f" of '{data_type}'"
        shown = self.identifiers[:10]
        more = f" (+{len(self.identifiers) - 10} more)" if len(self.identifiers) > 10 else ""
        super().__init__(f"{len(self.identifiers)} identifier(s) not found in {where}: {shown}{more}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0])


class AmbiguousIdentifierError(TidyError, ValueError):
    """Raised when an identifier map sends one source id to several targets."""
    pass
