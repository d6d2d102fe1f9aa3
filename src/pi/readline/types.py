"""Geometry types shared by the popup and its rendering collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TextSize:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """On-screen rectangle of the input box."""

    x: float
    y: float
    width: float


@dataclass(frozen=True)
class PopupPlacement:
    """Popup edges relative to the viewport.

    ``top`` is the distance of the popup's top edge from the top of the
    viewport and ``bottom`` the distance of its bottom edge from the bottom.
    ``None`` leaves that edge free so the popup takes its natural height.
    ``above`` is set when the popup opens upwards from the input line.
    """

    left: float
    top: float | None = None
    bottom: float | None = None
    above: bool = False
