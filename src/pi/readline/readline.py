"""ReadLine - single-line editor with Emacs keys and async tab completion.

Keys reach the editor as tokens produced by ``translate_key``. A shown
completion popup gets the first chance at each key; everything else is
dispatched to the editing commands below. Completion lookups run on the
asyncio event loop and only the most recently started one may change the
buffer.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from pi.readline.completion import CompleteFn, CompletionRequest, CompletionResponse
from pi.readline.popup import (
    CompletePopup,
    PopupContainer,
    PopupMetrics,
    ScreenGeometry,
    TextMeasurer,
)
from pi.readline.utils import (
    backward_word_boundary,
    completion_overlap,
    graphemes,
    longest_shared_prefix_length,
)

logger = logging.getLogger(__name__)

KeyHandler = Callable[[str], bool]

# Left to the host application (browser: cut, copy, paste, inspector,
# location bar, reload).
PASSTHROUGH_KEYS: frozenset[str] = frozenset({"C-x", "C-c", "C-v", "C-J", "C-l", "C-R"})


@dataclass
class ReadLineOptions:
    prompt: str = "> "
    popup: PopupMetrics = field(default_factory=PopupMetrics)


@dataclass
class EditBuffer:
    """Text plus a selection; a collapsed selection is the caret.

    ``0 <= selection_start <= selection_end <= len(text)`` always holds.
    """

    text: str = ""
    selection_start: int = 0
    selection_end: int = 0

    def set_text(self, text: str) -> None:
        self.text = text
        self.select(self.selection_start, self.selection_end)

    def select(self, start: int, end: int) -> None:
        length = len(self.text)
        start = min(max(start, 0), length)
        end = min(max(end, start), length)
        self.selection_start = start
        self.selection_end = end

    def set_caret(self, pos: int) -> None:
        self.select(pos, pos)

    @property
    def selection(self) -> tuple[int, int]:
        return (self.selection_start, self.selection_end)


async def _no_completions(req: CompletionRequest) -> CompletionResponse:
    raise NotImplementedError("no completion provider configured")


class ReadLine:
    """Line editor state and key dispatch."""

    def __init__(
        self,
        container: PopupContainer,
        *,
        measure: TextMeasurer,
        geometry: ScreenGeometry,
        options: ReadLineOptions | None = None,
    ) -> None:
        self._options = options or ReadLineOptions()
        self._container = container
        self._measure = measure
        self._geometry = geometry

        self.buffer = EditBuffer()
        self.prompt = self._options.prompt

        self.on_commit: Callable[[str], None] = lambda text: None
        self.on_complete: CompleteFn = _no_completions

        self.pending_complete: asyncio.Future[CompletionResponse] | None = None
        self.popup: CompletePopup | None = None

        # Selection at the time of the last blur, restored on focus.
        self.selection: tuple[int, int] = (0, 0)

    # ------------------------------------------------------------------
    # Buffer access
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self.buffer.text

    def get_text(self) -> str:
        return self.buffer.text

    def set_text(self, text: str) -> None:
        self.buffer.set_text(text)

    @property
    def selection_start(self) -> int:
        return self.buffer.selection_start

    @property
    def selection_end(self) -> int:
        return self.buffer.selection_end

    def set_selection(self, start: int, end: int) -> None:
        self.buffer.select(start, end)

    def move_caret(self, pos: int) -> None:
        self.buffer.set_caret(pos)

    def set_prompt(self, text: str) -> None:
        self.prompt = f"{text}$ "

    def insert_text(self, text: str) -> None:
        """Replace the selection with *text* and put the caret after it."""
        start, end = self.buffer.selection
        self.buffer.text = self.buffer.text[:start] + text + self.buffer.text[end:]
        self.buffer.set_caret(start + len(text))

    def delete_backward(self) -> None:
        """Delete the selection, or the grapheme before the caret."""
        start, end = self.buffer.selection
        if start == end:
            if start == 0:
                return
            before = graphemes(self.buffer.text[:start])
            start -= len(before[-1])
        self.buffer.text = self.buffer.text[:start] + self.buffer.text[end:]
        self.buffer.set_caret(start)

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def blur(self) -> None:
        self.selection = self.buffer.selection
        self.cancel_completion()

    def focus(self) -> None:
        self.buffer.select(*self.selection)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def hide_popup(self) -> None:
        if self.popup is None:
            return
        popup, self.popup = self.popup, None
        popup.hide()

    def cancel_completion(self) -> None:
        """Drop any pending completion result and close the popup.

        Call before changing the buffer outside of ``handle_key``.
        """
        self.pending_complete = None
        self.hide_popup()

    def handle_key(self, key: str) -> bool:
        """Handle a token produced by ``translate_key``.

        Returns True when the key was consumed and default handling should
        be suppressed.
        """
        for handler in self._key_handlers():
            if handler(key):
                return True
        return False

    def _key_handlers(self) -> Iterator[KeyHandler]:
        if self.popup is not None:
            yield self.popup.handle_key
        yield self._edit

    def _edit(self, key: str) -> bool:
        self.cancel_completion()

        buf = self.buffer
        if key in ("Delete", "M-Backspace"):
            # backward-kill-word; ChromeOS reports M-Backspace as Delete.
            pos = buf.selection_start
            start = backward_word_boundary(buf.text, pos)
            buf.text = buf.text[:start] + buf.text[pos:]
            buf.set_caret(start)
        elif key == "Enter":
            self.on_commit(buf.text)
        elif key == "Tab":
            self._complete()
        elif key == "C-a":
            buf.set_caret(0)
        elif key == "C-b":
            buf.set_caret(buf.selection_start - 1)
        elif key == "C-e":
            buf.set_caret(len(buf.text))
        elif key == "C-f":
            buf.set_caret(buf.selection_start + 1)
        elif key == "C-k":
            pos = buf.selection_start
            buf.text = buf.text[:pos]
            buf.set_caret(pos)
        elif key in ("C-n", "C-p"):
            # TODO: history navigation. Swallowed until then.
            pass
        elif key == "C-u":
            buf.text = buf.text[buf.selection_start :]
            buf.set_caret(0)
        elif key in PASSTHROUGH_KEYS:
            return False
        else:
            logger.debug("unhandled key %r", key)
            return False
        return True

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        req = CompletionRequest(input=self.buffer.text, pos=self.buffer.selection_start)
        pending = asyncio.ensure_future(self.on_complete(req))
        self.pending_complete = pending
        pending.add_done_callback(lambda fut: self._on_completed(req, fut))

    def _on_completed(
        self, req: CompletionRequest, pending: asyncio.Future[CompletionResponse]
    ) -> None:
        resp: CompletionResponse | None = None
        if pending.cancelled():
            logger.debug("completion for %r cancelled", req.input)
        elif pending.exception() is not None:
            logger.debug(
                "completion for %r failed", req.input, exc_info=pending.exception()
            )
        else:
            resp = pending.result()

        if pending is not self.pending_complete:
            return
        self.pending_complete = None
        if resp is None or not resp.completions:
            return

        length = longest_shared_prefix_length(resp.completions)
        if length > 0:
            self.apply_completion(resp.completions[0][:length], resp.pos)

        # A single completion has been applied in full already.
        if len(resp.completions) > 1:
            self._show_popup(req, resp)

    def _show_popup(self, req: CompletionRequest, resp: CompletionResponse) -> None:
        self.hide_popup()
        popup = CompletePopup(
            req,
            resp,
            measure=self._measure,
            geometry=self._geometry,
            metrics=self._options.popup,
        )

        def commit(text: str, pos: int) -> None:
            self.apply_completion(text, pos)
            self.hide_popup()

        popup.on_commit = commit
        self.popup = popup
        popup.show(self._container)

    def apply_completion(self, text: str, pos: int) -> None:
        """Insert *text* at *pos*, reusing characters already typed there.

        Only a literal run of matching characters at *pos* is elided, so
        ``"foobar"`` applied at 0 to ``"foo bar"`` gives ``"foobaro bar"``.
        A caret past the replaced run keeps its place relative to the text
        after it; a caret inside the run ends up after the inserted text.
        """
        value = self.buffer.text
        overlap = completion_overlap(value, text, pos)
        caret = self.buffer.selection_start
        if caret >= pos + overlap:
            caret += len(text) - overlap
        elif caret > pos:
            caret = pos + len(text)
        self.buffer.text = value[:pos] + text + value[pos + overlap :]
        self.buffer.set_caret(caret)
