"""Translation of terminal key presses into key events."""

from killtimer.models import Key, KeyEvent

NAMED_KEYS = {
    "up": Key.UP,
    "down": Key.DOWN,
    "enter": Key.CONFIRM,
    "escape": Key.CANCEL,
    "backspace": Key.BACKSPACE,
}

QUIT_CHARACTERS = {"q", "Q"}


def translate(key: str, character: str | None = None) -> KeyEvent | None:
    """
    Map a Textual key name and character to a KeyEvent.

    Returns None for keys the application does not use.
    """
    named = NAMED_KEYS.get(key)
    if named is not None:
        return KeyEvent(named)

    if character is None or len(character) != 1 or not character.isprintable():
        return None
    if character == "/":
        return KeyEvent(Key.BEGIN_SEARCH)
    if character in QUIT_CHARACTERS:
        return KeyEvent(Key.QUIT)
    return KeyEvent.character(character)
