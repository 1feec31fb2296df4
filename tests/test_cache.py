"""Rendering cache and highlighting."""

import pytest

from pastebox import highlight
from pastebox.cache import PLAIN_TEXT, RenderCache
from pastebox.errors import NotFound
from pastebox.models import Entry, Key

PASTE_ID = 7


def test_highlight_known_extension():
    formatted = highlight.highlight("def f():\n    return 1\n", "py")
    assert "<span" in formatted
    assert "highlight" in formatted


def test_highlight_unknown_extension_degrades_to_plain_text():
    formatted = highlight.highlight("<b>hi</b>", "no-such-language")
    assert formatted == highlight.plain("<b>hi</b>")
    assert "&lt;b&gt;" in formatted


def test_highlight_without_extension():
    assert highlight.highlight("plain", None) == highlight.plain("plain")


@pytest.mark.parametrize("theme", ["light", "dark"])
def test_stylesheet(theme):
    assert ".highlight" in highlight.stylesheet(theme)


def test_formatted_entry_uses_stored_extension(db, cache):
    db.insert(PASTE_ID, Entry(text="fn main() {}", extension="rs"))
    formatted = cache.get_formatted(Key(identifier=PASTE_ID))
    assert formatted.extension == "rs"
    assert formatted.formatted == highlight.highlight("fn main() {}", "rs")


def test_key_extension_overrides_stored_extension(db, cache):
    db.insert(PASTE_ID, Entry(text="fn main() {}", extension="rs"))
    formatted = cache.get_formatted(Key(identifier=PASTE_ID, extension="py"))
    assert formatted.extension == "py"
    assert formatted.formatted == highlight.highlight("fn main() {}", "py")


def test_plain_text_when_no_extension(db, cache):
    db.insert(PASTE_ID, Entry(text="FooBarBaz"))
    formatted = cache.get_formatted(Key(identifier=PASTE_ID))
    assert formatted.extension == PLAIN_TEXT
    assert "FooBarBaz" in formatted.formatted


def test_formatted_entry_carries_age(db, cache, clock):
    db.insert(PASTE_ID, Entry(text="x"))
    clock.advance(90)
    formatted = cache.get_formatted(Key(identifier=PASTE_ID))
    assert formatted.seconds_since_creation == 90
    assert not formatted.deletion_possible


def test_rendered_markup_is_memoized(db, cache, monkeypatch):
    db.insert(PASTE_ID, Entry(text="x = 1", extension="py"))
    calls = []
    original = highlight.highlight

    def counting(text, extension=None):
        calls.append(extension)
        return original(text, extension)

    monkeypatch.setattr(highlight, "highlight", counting)

    first = cache.get_formatted(Key(identifier=PASTE_ID))
    second = cache.get_formatted(Key(identifier=PASTE_ID))

    assert first == second
    assert calls == ["py"]


def test_cache_never_outlives_deletion(db, cache):
    db.insert(PASTE_ID, Entry(text="x"))
    cache.get_formatted(Key(identifier=PASTE_ID))
    db.delete(PASTE_ID)

    with pytest.raises(NotFound):
        cache.get_formatted(Key(identifier=PASTE_ID))


def test_burned_paste_is_rendered_once_and_not_kept(db, cache):
    db.insert(PASTE_ID, Entry(text="secret", burn_after_reading=True))

    assert "secret" in cache.get_formatted(Key(identifier=PASTE_ID)).formatted
    assert len(cache) == 0
    with pytest.raises(NotFound):
        cache.get_formatted(Key(identifier=PASTE_ID))


def test_cache_is_bounded(db):
    cache = RenderCache(db, max_size=2)
    for paste_id in range(5):
        db.insert(paste_id, Entry(text=f"paste {paste_id}"))
        cache.get_formatted(Key(identifier=paste_id))
    assert len(cache) == 2


def test_text_with_lone_surrogate_still_renders(db, cache):
    db.insert(PASTE_ID, Entry(text="a\ud800b"))
    formatted = cache.get_formatted(Key(identifier=PASTE_ID))
    assert formatted.extension == PLAIN_TEXT
