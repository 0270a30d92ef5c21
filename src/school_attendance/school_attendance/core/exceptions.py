from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class FetchError(DomainError):
    """Raised when the record source is unreachable or returns malformed data."""


class WriteError(DomainError):
    """Raised when the backend rejects an attendance write."""


class AggregationError(DomainError):
    """Raised when a monthly report cannot be built.

    The report is all-or-nothing: ``causes`` holds the fetch errors that
    aborted it and the first one is chained as ``__cause__``.
    """

    def __init__(self, message: str, causes: Sequence[BaseException] = ()):
        super().__init__(message)
        self.causes = tuple(causes)
        if self.causes:
            self.__cause__ = self.causes[0]
