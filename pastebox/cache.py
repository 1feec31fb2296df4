"""
Rendering cache: highlighted views of pastes on top of the storage layer.
"""
import hashlib
import logging
import threading
from collections import OrderedDict
from typing import Tuple

from pastebox import highlight
from pastebox.database import PasteDatabase
from pastebox.models import FormattedEntry, Key

logger = logging.getLogger(__name__)

CacheKey = Tuple[int, str, str]

PLAIN_TEXT = "txt"


class RenderCache:
    """
    Produces FormattedEntry views and memoizes the highlighted markup.

    Every lookup goes through PasteDatabase.get first, so expiry and
    burn-after-reading are applied before any cached markup is returned.
    Entries never change under a fixed identifier, which makes the memoized
    output safe to reuse.
    """

    def __init__(self, db: PasteDatabase, max_size: int = 128):
        self.db = db
        self.max_size = max_size
        self._rendered: "OrderedDict[CacheKey, str]" = OrderedDict()
        self._lock = threading.Lock()

    def get_formatted(self, key: Key) -> FormattedEntry:
        """
        Fetch and highlight a paste.

        The extension of the key overrides the one stored with the paste.

        Raises:
            NotFound: If the paste is absent, expired or already burned
            StorageUnavailable: On backend failure
        """
        entry = self.db.get(key.identifier)
        extension = key.extension or entry.extension or PLAIN_TEXT

        digest = hashlib.sha256(entry.text.encode("utf-8", "surrogatepass")).hexdigest()
        cache_key = (key.identifier, extension, digest)

        formatted = self._lookup(cache_key)
        if formatted is None:
            formatted = highlight.highlight(entry.text, extension)
            # A burned paste can never be read again; don't keep its markup.
            if not entry.burn_after_reading:
                self._store(cache_key, formatted)

        return FormattedEntry(
            formatted=formatted,
            extension=extension,
            seconds_since_creation=entry.seconds_since_creation,
        )

    def __len__(self) -> int:
        return len(self._rendered)

    def _lookup(self, cache_key: CacheKey):
        with self._lock:
            formatted = self._rendered.get(cache_key)
            if formatted is not None:
                self._rendered.move_to_end(cache_key)
                logger.debug(f"Render cache hit for paste {cache_key[0]}")
            return formatted

    def _store(self, cache_key: CacheKey, formatted: str) -> None:
        if self.max_size <= 0:
            return
        with self._lock:
            self._rendered[cache_key] = formatted
            self._rendered.move_to_end(cache_key)
            while len(self._rendered) > self.max_size:
                self._rendered.popitem(last=False)
