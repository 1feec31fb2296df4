"""
Pydantic models for pastes and request/response validation.
"""
from typing import Optional
from pydantic import BaseModel, Field

from pastebox.errors import DeletionTimeExpired

# Grace period after creation during which a paste may still be deleted.
DELETION_WINDOW_SECONDS = 60

# Longest lifetime accepted, in seconds; larger form values mean never.
MAX_EXPIRES = 0xFFFFFFFF


class Entry(BaseModel):
    """A stored paste together with its lifecycle metadata."""
    text: str = Field(..., description="Raw paste content")
    extension: Optional[str] = Field(None, description="Highlighting hint, e.g. 'py'")
    expires: Optional[int] = Field(None, ge=0, le=MAX_EXPIRES, description="Lifetime in seconds (0/null = never)")
    burn_after_reading: Optional[bool] = Field(None, description="Delete after the first read")
    seconds_since_creation: int = Field(0, ge=0, description="Derived at read time")

    @property
    def deletion_possible(self) -> bool:
        return self.seconds_since_creation <= DELETION_WINDOW_SECONDS

    def ensure_deletable(self) -> None:
        """
        Enforce the deletion window on a previously read entry.

        Raises:
            DeletionTimeExpired: If the entry is older than the window
        """
        if not self.deletion_possible:
            raise DeletionTimeExpired()


class Key(BaseModel):
    """Parsed path segment: identifier plus an optional extension override."""
    identifier: int = Field(..., ge=0, le=0xFFFFFFFF)
    extension: Optional[str] = None


class FormattedEntry(BaseModel):
    """An entry whose text has been replaced by highlighted markup."""
    formatted: str
    extension: str = Field(..., description="Extension the markup was rendered with")
    seconds_since_creation: int = 0

    @property
    def deletion_possible(self) -> bool:
        return self.seconds_since_creation <= DELETION_WINDOW_SECONDS


class EntryCreate(BaseModel):
    """Schema for creating a new paste through the JSON API."""
    text: str = Field(..., min_length=1, description="Text content (required, non-empty)")
    extension: Optional[str] = Field(None, max_length=32, description="Optional highlighting hint")
    expires: Optional[int] = Field(None, ge=0, le=MAX_EXPIRES, description="Optional lifetime in seconds")
    burn_after_reading: Optional[bool] = Field(None, description="Delete after the first read")

    def to_entry(self) -> Entry:
        return Entry(
            text=self.text,
            extension=self.extension or None,
            expires=self.expires or None,
            burn_after_reading=self.burn_after_reading,
        )


def entry_from_form(text: str, extension: Optional[str], expires: str) -> Entry:
    """
    Build an entry from the HTML form fields.

    The form sends `expires` as a string: "burn" selects burn-after-reading,
    a positive number of seconds up to MAX_EXPIRES sets the lifetime, anything
    else means never.
    """
    burn_after_reading = expires == "burn"
    try:
        seconds = int(expires)
    except (TypeError, ValueError):
        seconds = 0

    return Entry(
        text=text,
        extension=extension or None,
        expires=seconds if 0 < seconds <= MAX_EXPIRES else None,
        burn_after_reading=burn_after_reading,
    )


class RedirectResponse(BaseModel):
    """Schema for paste creation response."""
    path: str = Field(..., description="Path of the new paste, e.g. /ab12Cd.py")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
