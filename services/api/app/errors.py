from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(RuntimeError):
    """Base for errors that map onto an HTTP status at the route boundary."""

    status_code: int = 500
    public_message: str = "Internal Server Error"

    def __init__(self, message: str, *, status_code: Optional[int] = None, public_message: Optional[str] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if public_message is not None:
            self.public_message = public_message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.public_message}


class ValidationError(AppError):
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def details(self) -> List[Dict[str, str]]:
        return [{"field": self.field, "message": self.message}]

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details()}


class NotFoundError(AppError):
    status_code = 404
    public_message = "Feed not found"


class FetchError(AppError):
    """A source could not be fetched or parsed. Carries the source id."""

    status_code = 500
    public_message = "Failed to fetch feed"

    def __init__(self, source_id: str, message: str):
        super().__init__(f"{source_id}: {message}")
        self.source_id = source_id
        self.reason = message


class ExtractionError(AppError):
    status_code = 500
    public_message = "Failed to parse article"


class AuthError(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)
        self.public_message = message


class ServiceUnavailableError(AppError):
    status_code = 503

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message
