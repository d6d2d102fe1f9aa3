"""LineInput component - terminal host for a ReadLine.

Decodes raw terminal input into key events, offers them to the ReadLine and
performs the default editing a text field does on its own (typing,
backspace, arrow keys) for keys the ReadLine leaves alone. It also hosts
the completion popup, measuring in terminal cells.
"""

from __future__ import annotations

from pi.readline.keys import KeyEvent, parse_terminal_key, translate_key
from pi.readline.popup import PopupMetrics
from pi.readline.readline import ReadLine, ReadLineOptions
from pi.readline.types import Rect
from pi.readline.utils import graphemes, measure_text, visible_width


class LineInput:
    """Single-line terminal input with Emacs keys and a completion popup."""

    def __init__(
        self,
        *,
        rows: int = 24,
        row: int = 0,
        column: int = 0,
        options: ReadLineOptions | None = None,
    ) -> None:
        self._rows = rows
        self._row = row
        self._column = column

        self.children: list[object] = []
        self.focused: bool = False

        if options is None:
            # Terminal cells: no padding, one free row when clipped.
            options = ReadLineOptions(
                popup=PopupMetrics(
                    input_padding_left=0, popup_padding_left=0, clip_margin=1
                )
            )
        self.readline = ReadLine(
            self, measure=measure_text, geometry=self, options=options
        )

    # ------------------------------------------------------------------
    # Popup container and screen geometry
    # ------------------------------------------------------------------

    def add_child(self, component: object) -> None:
        self.children.append(component)

    def remove_child(self, component: object) -> None:
        self.children.remove(component)

    def viewport_height(self) -> float:
        return self._rows

    def client_rect(self, container: object) -> Rect:
        prompt_width = visible_width(self.readline.prompt)
        return Rect(x=self._column + prompt_width, y=self._row, width=0)

    def set_rows(self, rows: int) -> None:
        self._rows = rows
        self._reposition_popup()

    def set_screen_position(self, row: int, column: int = 0) -> None:
        self._row = row
        self._column = column
        self._reposition_popup()

    def _reposition_popup(self) -> None:
        popup = self.readline.popup
        if popup is not None:
            popup.position()

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def focus(self) -> None:
        self.focused = True
        self.readline.focus()

    def blur(self) -> None:
        self.focused = False
        self.readline.blur()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        event = parse_terminal_key(data)
        if event is None:
            self._handle_paste(data)
            return

        key = translate_key(event)
        if key and self.readline.handle_key(key):
            return
        if not key and event.is_character:
            # Key-press path for characters without a command token.
            if self.readline.handle_key(event.key):
                return
        self._default_action(event)

    def _default_action(self, event: KeyEvent) -> None:
        rl = self.readline
        if event.is_character and not (event.ctrl or event.alt):
            rl.insert_text(event.key)
        elif event.key == "Backspace" and not event.alt:
            rl.delete_backward()
        elif event.key == "ArrowLeft":
            before = graphemes(rl.text[: rl.selection_start])
            rl.move_caret(rl.selection_start - (len(before[-1]) if before else 0))
        elif event.key == "ArrowRight":
            after = graphemes(rl.text[rl.selection_end :])
            rl.move_caret(rl.selection_end + (len(after[0]) if after else 0))
        elif event.key == "Home":
            rl.move_caret(0)
        elif event.key == "End":
            rl.move_caret(len(rl.text))

    def _handle_paste(self, data: str) -> None:
        data = data.replace("\x1b[200~", "").replace("\x1b[201~", "")
        clean = data.replace("\r\n", "").replace("\r", "").replace("\n", "")
        if not clean or any(ord(ch) < 32 or ord(ch) == 0x7F for ch in clean):
            return
        self.readline.cancel_completion()
        self.readline.insert_text(clean)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, width: int) -> list[str]:
        line, scroll = self._render_line(width)
        popup = self.readline.popup
        if popup is None or popup not in self.children or popup.placement is None:
            return [line]

        placement = popup.placement
        # Follow the word on screen when the line is scrolled.
        column = int(placement.left) - self._column - visible_width(self.readline.text[:scroll])
        indent = " " * min(max(0, column), max(0, width - 1))
        candidates = popup.render(max(1, width - len(indent)))
        if placement.top is not None and placement.bottom is not None:
            # Clipped: only the rows between both edges are free.
            free_rows = int(self._rows - placement.top - placement.bottom)
            candidates = candidates[: max(0, free_rows)]
        popup_lines = [indent + text for text in candidates]
        if placement.above:
            return popup_lines + [line]
        return [line] + popup_lines

    def _render_line(self, width: int) -> tuple[str, int]:
        """Render the input line; also return the index of its first visible character."""
        prompt = self.readline.prompt
        available_width = width - visible_width(prompt)
        if available_width <= 0:
            return prompt, 0

        value = self.readline.text
        cursor = self.readline.selection_start
        cursor_display = cursor
        start = 0

        if len(value) < available_width:
            visible_text = value
        else:
            scroll_width = available_width - 1 if cursor == len(value) else available_width
            half_width = scroll_width // 2
            if cursor < half_width:
                visible_text = value[:scroll_width]
            elif cursor > len(value) - half_width:
                start = len(value) - scroll_width
                visible_text = value[start:]
                cursor_display = cursor - start
            else:
                start = cursor - half_width
                visible_text = value[start : start + scroll_width]
                cursor_display = half_width

        after = graphemes(visible_text[cursor_display:])
        at_cursor = after[0] if after else " "
        before_cursor = visible_text[:cursor_display]
        after_cursor = visible_text[cursor_display + len(at_cursor) :]

        cursor_char = f"\x1b[7m{at_cursor}\x1b[27m" if self.focused else at_cursor
        text_with_cursor = before_cursor + cursor_char + after_cursor
        padding = " " * max(0, available_width - visible_width(text_with_cursor))
        return prompt + text_with_cursor + padding, start

