"""Key events and their translation into editing command tokens.

A ``KeyEvent`` names a key the way browsers do (``"Enter"``, ``"Backspace"``,
``"ArrowLeft"``, ``"a"``) together with its modifier flags.
``translate_key`` turns an event into the canonical token the line editor
dispatches on, e.g. ``"C-a"`` or ``"M-Backspace"``. ``parse_terminal_key``
decodes raw terminal input into a ``KeyEvent``.
"""

from __future__ import annotations

from dataclasses import dataclass

# Keys that only ever modify another key press.
MODIFIER_KEYS: frozenset[str] = frozenset({"Alt", "Control", "Shift", "Unidentified"})


@dataclass(frozen=True)
class KeyEvent:
    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False

    @property
    def is_character(self) -> bool:
        """True for a single printable character (including space)."""
        return len(self.key) == 1 and self.key.isprintable()


def translate_key(event: KeyEvent) -> str:
    """Return the command token for *event*, or ``""`` if it should be ignored.

    Shift has no prefix of its own: shifted keys arrive as distinct key names
    (``"A"`` rather than shift + ``"a"``).
    """
    if event.key in MODIFIER_KEYS:
        return ""
    # Digits are left alone so they never shadow tab-switching shortcuts.
    if len(event.key) == 1 and "0" <= event.key <= "9":
        return ""

    name = ""
    if event.alt:
        name += "M-"
    if event.ctrl:
        name += "C-"
    return name + event.key


# ---------------------------------------------------------------------------
# Terminal decoding
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "ArrowUp",
    "\x1b[B": "ArrowDown",
    "\x1b[C": "ArrowRight",
    "\x1b[D": "ArrowLeft",
    "\x1b[H": "Home",
    "\x1b[F": "End",
    "\x1bOA": "ArrowUp",
    "\x1bOB": "ArrowDown",
    "\x1bOC": "ArrowRight",
    "\x1bOD": "ArrowLeft",
    "\x1bOH": "Home",
    "\x1bOF": "End",
    "\x1b[1~": "Home",
    "\x1b[4~": "End",
    "\x1b[7~": "Home",
    "\x1b[8~": "End",
    "\x1b[2~": "Insert",
    "\x1b[3~": "Delete",
    "\x1b[5~": "PageUp",
    "\x1b[6~": "PageDown",
    "\x1bOP": "F1",
    "\x1bOQ": "F2",
    "\x1bOR": "F3",
    "\x1bOS": "F4",
    "\x1b[15~": "F5",
    "\x1b[17~": "F6",
    "\x1b[18~": "F7",
    "\x1b[19~": "F8",
    "\x1b[20~": "F9",
    "\x1b[21~": "F10",
    "\x1b[23~": "F11",
    "\x1b[24~": "F12",
}

# xterm-style modified cursor keys: ESC [ 1 ; <mod> <letter>
_MODIFIED_CURSOR_KEYS: dict[str, str] = {
    "A": "ArrowUp",
    "B": "ArrowDown",
    "C": "ArrowRight",
    "D": "ArrowLeft",
    "H": "Home",
    "F": "End",
}

SHIFT, ALT, CTRL = 1, 2, 4


def _single_key(ch: str) -> KeyEvent | None:
    if ch == "\x1b":
        return KeyEvent("Escape")
    if ch in ("\r", "\n"):
        return KeyEvent("Enter")
    if ch == "\t":
        return KeyEvent("Tab")
    if ch in ("\x7f", "\x08"):
        return KeyEvent("Backspace")
    if ch == "\x00":
        return KeyEvent(" ", ctrl=True)
    # Ctrl + letter (0x01 - 0x1a)
    if 1 <= ord(ch) <= 26:
        return KeyEvent(chr(ord(ch) + ord("a") - 1), ctrl=True)
    if ch.isprintable():
        return KeyEvent(ch)
    return None


def parse_terminal_key(data: str) -> KeyEvent | None:
    """Decode one key press of raw terminal input.

    Returns ``None`` when *data* is not exactly one recognised key, e.g. for
    a chunk of pasted text or an unknown escape sequence.
    """
    if not data:
        return None

    key = LEGACY_KEY_SEQUENCES.get(data)
    if key is not None:
        return KeyEvent(key)

    if data == "\x1b[Z":
        return KeyEvent("Tab", shift=True)

    if data.startswith("\x1b[1;") and len(data) == 6 and data[4].isdigit():
        key = _MODIFIED_CURSOR_KEYS.get(data[5])
        if key is not None:
            mod = int(data[4]) - 1
            return KeyEvent(
                key,
                alt=bool(mod & ALT),
                ctrl=bool(mod & CTRL),
                shift=bool(mod & SHIFT),
            )
        return None

    if len(data) == 1:
        return _single_key(data)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        inner = _single_key(data[1])
        if inner is None:
            return None
        return KeyEvent(inner.key, alt=True, ctrl=inner.ctrl)

    return None
