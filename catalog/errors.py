from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    invalid_input = "invalid_input"
    not_found = "not_found"
    conflict = "conflict"


class CatalogError(Exception):
    """Base error; ``kind`` decides how the HTTP layer reports it."""

    kind: ErrorKind = ErrorKind.invalid_input

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInput(CatalogError):
    kind = ErrorKind.invalid_input


class InvalidFilter(InvalidInput):
    pass


class InvalidSort(InvalidInput):
    pass


class InvalidPagination(InvalidInput):
    pass


class NotFound(CatalogError):
    kind = ErrorKind.not_found


class Conflict(CatalogError):
    kind = ErrorKind.conflict
