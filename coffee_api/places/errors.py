from __future__ import annotations

from typing import Any


class PlaceQueryError(Exception):
    """Base class for failures surfaced by the place query engine."""

    status_code: int = 500
    error: str = "Internal server error"

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error}


class QueryValidationError(PlaceQueryError):
    status_code = 400
    error = "Invalid query parameters"

    def __init__(self, details: list[dict[str, str]]) -> None:
        super().__init__(f"{len(details)} invalid query parameter(s)")
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "details": self.details}


class PlaceNotFoundError(PlaceQueryError):
    status_code = 404
    error = "No coffee places found matching the criteria"


class StorageError(PlaceQueryError):
    """The backing store could not answer a query. Details are logged, not returned."""

    status_code = 500
    error = "Internal server error"
    public_message = "Failed to query coffee places"

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.public_message}
