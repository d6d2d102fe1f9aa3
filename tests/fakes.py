"""Fakes for the popup collaborators and the completion provider."""

from __future__ import annotations

import asyncio

from pi.readline.completion import CompletionRequest, CompletionResponse
from pi.readline.readline import ReadLine
from pi.readline.types import Rect, TextSize

CHAR_WIDTH = 8
LINE_HEIGHT = 16


def fake_measure(container: object, text: str) -> TextSize:
    """Fixed-pitch font: 8px per code point (zero-width space excluded), 16px lines."""
    lines = text.split("\n")
    width = max(len(line.replace("\u200b", "")) for line in lines) * CHAR_WIDTH
    return TextSize(width=width, height=len(lines) * LINE_HEIGHT)


class FakeContainer:
    def __init__(self) -> None:
        self.children: list[object] = []

    def add_child(self, component: object) -> None:
        self.children.append(component)

    def remove_child(self, component: object) -> None:
        self.children.remove(component)


class FakeGeometry:
    def __init__(self, viewport_height: float = 600, rect: Rect | None = None) -> None:
        self.height = viewport_height
        self.rect = rect or Rect(x=100, y=50, width=400)

    def viewport_height(self) -> float:
        return self.height

    def client_rect(self, container: object) -> Rect:
        return self.rect


class ScriptedCompleter:
    """Completion provider whose responses are resolved by the test."""

    def __init__(self) -> None:
        self.requests: list[CompletionRequest] = []
        self.futures: list[asyncio.Future[CompletionResponse]] = []

    def __call__(self, req: CompletionRequest) -> asyncio.Future[CompletionResponse]:
        fut: asyncio.Future[CompletionResponse] = asyncio.get_running_loop().create_future()
        self.requests.append(req)
        self.futures.append(fut)
        return fut

    def resolve(self, index: int, completions: list[str], pos: int | None = None) -> None:
        if pos is None:
            pos = self.requests[index].pos
        self.futures[index].set_result(CompletionResponse(completions, pos))

    def reject(self, index: int, exc: Exception) -> None:
        self.futures[index].set_exception(exc)


async def settle() -> None:
    """Let done callbacks scheduled on the loop run."""
    for _ in range(3):
        await asyncio.sleep(0)


def make_readline(text: str = "", caret: int | None = None) -> tuple[ReadLine, FakeContainer]:
    container = FakeContainer()
    readline = ReadLine(container, measure=fake_measure, geometry=FakeGeometry())
    readline.set_text(text)
    readline.move_caret(len(text) if caret is None else caret)
    return readline, container
