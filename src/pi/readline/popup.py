"""Completion popup - transient list of completion candidates.

The popup does not draw itself. It measures text through an injected
``TextMeasurer``, reads the input box's on-screen rectangle and the viewport
height from a ``ScreenGeometry``, and exposes the resulting
``PopupPlacement`` for whatever renders it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from pi.readline.completion import CompletionRequest, CompletionResponse
from pi.readline.types import PopupPlacement, Rect, TextSize
from pi.readline.utils import truncate_to_width

# Appended before measuring so trailing spaces keep their width.
ZERO_WIDTH_SPACE = "\u200b"


class PopupContainer(Protocol):
    def add_child(self, component: object) -> None: ...

    def remove_child(self, component: object) -> None: ...


class ScreenGeometry(Protocol):
    def viewport_height(self) -> float:
        """Height of the visible screen area."""
        ...

    def client_rect(self, container: object) -> Rect:
        """On-screen rectangle of *container*."""
        ...


TextMeasurer = Callable[[object, str], TextSize]


@dataclass
class PopupMetrics:
    input_padding_left: float = 2
    popup_padding_left: float = 4
    # Kept free on the far side when the popup fits neither above nor below.
    clip_margin: float = 10


class CompletePopup:
    """Shows the candidates of one completion response next to the caret."""

    def __init__(
        self,
        req: CompletionRequest,
        resp: CompletionResponse,
        *,
        measure: TextMeasurer,
        geometry: ScreenGeometry,
        metrics: PopupMetrics | None = None,
    ) -> None:
        self.req = req
        self.resp = resp
        self._measure = measure
        self._geometry = geometry
        self._metrics = metrics or PopupMetrics()

        self.on_commit: Callable[[str, int], None] = lambda text, pos: None

        self.text = ""
        self.text_size = TextSize(0, 0)
        self.placement: PopupPlacement | None = None
        self.visible = False
        self._parent: PopupContainer | None = None

    def show(self, parent: PopupContainer) -> None:
        self.text_size = self._measure(
            parent, self.req.input[: self.resp.pos] + ZERO_WIDTH_SPACE
        )
        self.text = "\n".join(self.resp.completions)
        parent.add_child(self)
        self._parent = parent
        self.visible = True
        self.position()

    def position(self) -> PopupPlacement:
        """Place the popup below the input if it fits, else above, else on
        whichever side has more room, clipped."""
        if self._parent is None:
            raise RuntimeError("popup is not shown")

        rect = self._geometry.client_rect(self._parent)
        viewport_height = self._geometry.viewport_height()
        popup_height = self._measure(self._parent, self.text).height
        text_height = self.text_size.height
        margin = self._metrics.clip_margin

        space_above = rect.y
        space_below = viewport_height - (rect.y + text_height)
        top: float | None
        bottom: float | None
        above = False
        if space_below >= popup_height:
            top, bottom = rect.y + text_height, None
        elif space_above >= popup_height:
            top, bottom, above = None, viewport_height - rect.y, True
        elif space_below >= space_above:
            top, bottom = rect.y + text_height, margin
        else:
            top, bottom, above = margin, viewport_height - rect.y, True

        left = (
            rect.x
            + self._metrics.input_padding_left
            - self._metrics.popup_padding_left
            + self.text_size.width
        )
        self.placement = PopupPlacement(left=left, top=top, bottom=bottom, above=above)
        return self.placement

    def hide(self) -> None:
        if self._parent is None:
            raise RuntimeError("popup is not shown")
        self._parent.remove_child(self)
        self._parent = None
        self.visible = False

    def handle_key(self, key: str) -> bool:
        """Handle a token produced by ``translate_key``."""
        if key == "Tab":
            # No nested popups.
            return True
        if key == "Enter":
            self.on_commit(self.resp.completions[0], self.resp.pos)
            return True
        if key == "Escape":
            self.on_commit("", self.resp.pos)
            return True
        return False

    def render(self, width: int) -> list[str]:
        return [truncate_to_width(line, width) for line in self.resp.completions]
