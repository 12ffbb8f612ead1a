"""Catalog error kinds.

Services raise these; the HTTP layer maps them to status codes and a
stable `{"error": ..., "message": ...}` body (see `catalog_api.main`).

Malformed paging input is not an error: the query compiler falls back
to defaults instead of raising.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for failures surfaced to the HTTP boundary."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class NotFoundError(CatalogError):
    """A single-record lookup matched nothing."""

    status_code = 404
    error = "Not found"


class DecodeError(CatalogError):
    """A serialized column (images, opening hours, postal codes) is corrupt."""

    error = "Error decoding stored data"

    def __init__(self, field: str, record_id: str | None, reason: str) -> None:
        where = f"{field} of record {record_id}" if record_id else field
        super().__init__(f"Invalid serialized value in {where}: {reason}")
        self.field = field
        self.record_id = record_id


class StoreFailure(CatalogError):
    """The database failed (connectivity, timeout, bad query).

    The original exception is kept as `__cause__`.
    """

    error = "Error querying the catalog"
