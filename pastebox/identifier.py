"""
Paste identifier codec.

Identifiers are unsigned 32-bit integers. Externally they are written as a
fixed-width six character token over a 58 symbol alphabet that leaves out
the easily confused glyphs 0, O, I and l.
"""
import secrets
from typing import Optional

from starlette.concurrency import run_in_threadpool

from pastebox.errors import IllegalCharacters, InvalidIdentifier
from pastebox.models import Entry, Key

ALPHABET = "abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ123456789"
BASE = len(ALPHABET)
TOKEN_LENGTH = 6
MAX_IDENTIFIER = 0xFFFFFFFF

_INDEX = {char: value for value, char in enumerate(ALPHABET)}


def generate() -> int:
    """Pick a random identifier. Uniqueness is checked on insert, not here."""
    return secrets.randbits(32)


async def generate_async() -> int:
    """Generate an identifier on the worker thread pool, off the event loop."""
    return await run_in_threadpool(generate)


def encode(identifier: int) -> str:
    """Render an identifier as its fixed-width token."""
    if not 0 <= identifier <= MAX_IDENTIFIER:
        raise InvalidIdentifier(f"Identifier out of range: {identifier}")

    chars = []
    for _ in range(TOKEN_LENGTH):
        identifier, digit = divmod(identifier, BASE)
        chars.append(ALPHABET[digit])
    return "".join(reversed(chars))


def parse(text: str) -> int:
    """
    Parse a token back into its identifier.

    Args:
        text: Six character token

    Returns:
        The numeric identifier

    Raises:
        InvalidIdentifier: On wrong length, unknown characters or overflow
    """
    if len(text) != TOKEN_LENGTH:
        raise InvalidIdentifier(f"Identifier must be {TOKEN_LENGTH} characters long")

    value = 0
    for char in text:
        digit = _INDEX.get(char)
        if digit is None:
            raise InvalidIdentifier(f"Invalid character in identifier: {char!r}")
        value = value * BASE + digit

    if value > MAX_IDENTIFIER:
        raise InvalidIdentifier("Identifier out of range")
    return value


def parse_key(segment: str) -> Key:
    """Split "<token>[.<extension>]" into a Key."""
    token, _, extension = segment.partition(".")
    identifier = parse(token)

    if extension and not extension.isascii():
        raise IllegalCharacters()

    return Key(identifier=identifier, extension=extension or None)


def to_path(identifier: int, entry: Optional[Entry] = None) -> str:
    """Build the URL path of a paste, e.g. /ab12Cd.rs."""
    path = f"/{encode(identifier)}"
    if entry is not None and entry.extension:
        path = f"{path}.{entry.extension}"
    return path
