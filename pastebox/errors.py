"""
Error types raised by the paste core.
Each error carries a code and the HTTP status the route layer maps it to.
"""
from typing import Any, Dict, Optional


class PasteError(Exception):
    """Base exception for all paste lifecycle errors."""

    code: str = "PASTE_ERROR"
    http_status: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Convert to the JSON error envelope used by the API routes."""
        return {"error": {"code": self.code, "message": self.message}}


class InvalidIdentifier(PasteError):
    code = "INVALID_IDENTIFIER"
    http_status = 400
    default_message = "Invalid paste identifier"


class IllegalCharacters(PasteError):
    code = "ILLEGAL_CHARACTERS"
    http_status = 400
    default_message = "Extension contains illegal characters"


class IdentifierCollision(PasteError):
    code = "IDENTIFIER_COLLISION"
    http_status = 500
    default_message = "Paste identifier already in use"


class NotFound(PasteError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Paste not found, expired, or already burned"


class DeletionTimeExpired(PasteError):
    code = "DELETION_TIME_EXPIRED"
    http_status = 403
    default_message = "Paste can no longer be deleted"


class StorageUnavailable(PasteError):
    code = "STORAGE_UNAVAILABLE"
    http_status = 503
    default_message = "Paste storage is unavailable"
