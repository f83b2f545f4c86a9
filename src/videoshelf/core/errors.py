"""Error taxonomy for request handling.

Services and dependencies raise these; the API layer renders them as
``{"message": ..., "error": ...}`` with the matching HTTP status.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict[str, str]:
        payload = {"message": self.message}
        if self.error is not None:
            payload["error"] = self.error
        return payload


class Unauthenticated(AppError):
    """Missing, malformed, expired or otherwise invalid bearer token."""

    status_code = 401


class NotFound(AppError):
    """User or video absent, or video not owned by the given user."""

    status_code = 404


class ValidationError(AppError):
    """Missing, malformed or duplicate input."""

    status_code = 400


class UpstreamError(AppError):
    """Video extraction or streaming failure."""

    status_code = 500


class InternalError(AppError):
    """Unclassified store or logic failure."""

    status_code = 500
