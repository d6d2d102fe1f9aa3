"""Completion request/response types and a word-list completion provider."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable, Sequence
from dataclasses import dataclass
from typing import Callable

from pi.readline.utils import backward_word_boundary


@dataclass(frozen=True)
class CompletionRequest:
    """Snapshot of the input and caret position when completion was requested."""

    input: str
    pos: int


@dataclass(frozen=True)
class CompletionResponse:
    """Candidate replacements for the text starting at ``pos``.

    ``pos`` is usually the request's ``pos`` but a provider may move it, e.g.
    to the start of the word being completed.
    """

    completions: Sequence[str]
    pos: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "completions", tuple(self.completions))


CompleteFn = Callable[[CompletionRequest], Awaitable[CompletionResponse]]


class WordListCompleter:
    """Completes the word before the caret from a fixed vocabulary.

    Words are delimited by spaces only. Matches keep vocabulary order and the
    response position is the start of the word, so each candidate replaces
    the partial word in full.
    """

    def __init__(self, words: Iterable[str]) -> None:
        self._words: list[str] = list(dict.fromkeys(words))

    @property
    def words(self) -> list[str]:
        return list(self._words)

    async def __call__(self, req: CompletionRequest) -> CompletionResponse:
        start = self.word_start(req.input, req.pos)
        prefix = req.input[start : req.pos]
        return CompletionResponse(
            [w for w in self._words if w.startswith(prefix)],
            start,
        )

    @staticmethod
    def word_start(text: str, pos: int) -> int:
        # A caret right after a space starts a new, empty word.
        if pos > 0 and text[pos - 1] == " ":
            return pos
        return backward_word_boundary(text, pos)
