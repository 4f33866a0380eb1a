"""Translate Textual key events into browser keys."""

from typing import Optional

from textual import events

from .browser.events import Key

# Textual key names (event.key) and printable characters (event.character)
KEY_MAP = {
    "j": Key.DOWN,
    "down": Key.DOWN,
    "k": Key.UP,
    "up": Key.UP,
    "g": Key.TOP,
    "home": Key.TOP,
    "G": Key.BOTTOM,
    "end": Key.BOTTOM,
    "]": Key.NEXT_PAGE,
    "right_square_bracket": Key.NEXT_PAGE,
    "[": Key.PREV_PAGE,
    "left_square_bracket": Key.PREV_PAGE,
    "enter": Key.ENTER,
    "escape": Key.ESCAPE,
    "q": Key.QUIT,
    "d": Key.HALF_PAGE_DOWN,
    "pagedown": Key.HALF_PAGE_DOWN,
    "u": Key.HALF_PAGE_UP,
    "pageup": Key.HALF_PAGE_UP,
    "S": Key.SORT,
    "o": Key.OPEN_URL,
}


def map_key(event: events.Key) -> Optional[Key]:
    """Browser key for a Textual key event, or None if the browser ignores it."""
    key = KEY_MAP.get(event.key)
    if key is None and event.character:
        key = KEY_MAP.get(event.character)
    return key
