"""Text helpers: word boundaries, shared prefixes, terminal width measurement.

The word and prefix helpers are pure functions over Python strings (code
point indices). The width helpers measure text in terminal cells and back the
default ``TextMeasurer`` used by the terminal line input.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Sequence

import grapheme
import wcwidth as _wcwidth

from pi.readline.types import TextSize


# ---------------------------------------------------------------------------
# Word boundaries and completion prefixes
# ---------------------------------------------------------------------------


def backward_word_boundary(text: str, pos: int) -> int:
    """Return the start of the word before *pos*.

    Skips a run of spaces immediately before *pos*, then the non-space
    characters before that. Only ``" "`` delimits words; tabs and other
    whitespace count as word characters.
    """
    while pos > 0 and text[pos - 1] == " ":
        pos -= 1
    while pos > 0 and text[pos - 1] != " ":
        pos -= 1
    return pos


def longest_shared_prefix_length(strs: Sequence[str]) -> int:
    """Return the length of the longest prefix shared by all of *strs*.

    *strs* must contain at least one string. Comparison is case-sensitive.
    """
    if not strs:
        raise ValueError("longest_shared_prefix_length() needs at least one string")
    length = 0
    first = strs[0]
    while True:
        for s in strs:
            if length == len(s) or s[length] != first[length]:
                return length
        length += 1


def completion_overlap(buffer: str, text: str, pos: int) -> int:
    """Count the leading characters of *text* already present in *buffer* at *pos*."""
    overlap = 0
    while (
        pos + overlap < len(buffer)
        and overlap < len(text)
        and buffer[pos + overlap] == text[overlap]
    ):
        overlap += 1
    return overlap


# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into grapheme clusters."""
    return list(grapheme.graphemes(text))


# ---------------------------------------------------------------------------
# Terminal width
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ sequences, skin tones and flags render as wide emoji
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI styling is ignored and tabs count as 3 cells.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text).replace("\t", "   ")
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = total
    return total


def measure_text(container: object, text: str) -> TextSize:
    """Measure *text* in terminal cells: widest line by number of lines."""
    lines = text.split("\n")
    return TextSize(
        width=max(visible_width(line) for line in lines),
        height=len(lines),
    )


def truncate_to_width(text: str, width: int) -> str:
    """Cut *text* so that it occupies at most *width* terminal cells."""
    if visible_width(text) <= width:
        return text
    out: list[str] = []
    used = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if used + w > width:
            break
        out.append(g)
        used += w
    return "".join(out)
