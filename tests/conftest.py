from __future__ import annotations

import pytest

from pi.readline.readline import ReadLine

from .fakes import FakeContainer, FakeGeometry, ScriptedCompleter, fake_measure


@pytest.fixture
def container() -> FakeContainer:
    return FakeContainer()


@pytest.fixture
def geometry() -> FakeGeometry:
    return FakeGeometry()


@pytest.fixture
def completer() -> ScriptedCompleter:
    return ScriptedCompleter()


@pytest.fixture
def rl(container: FakeContainer, geometry: FakeGeometry, completer: ScriptedCompleter) -> ReadLine:
    readline = ReadLine(container, measure=fake_measure, geometry=geometry)
    readline.on_complete = completer
    return readline
