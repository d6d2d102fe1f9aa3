"""Tests for pi.readline.completion -- request/response types and WordListCompleter."""

from __future__ import annotations

import dataclasses

import pytest

from pi.readline.completion import CompletionRequest, CompletionResponse, WordListCompleter

from .fakes import make_readline, settle


class TestCompletionTypes:
    def test_request_is_immutable(self) -> None:
        req = CompletionRequest(input="ls", pos=2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.pos = 0  # type: ignore[misc]

    def test_response_normalises_to_tuple(self) -> None:
        resp = CompletionResponse(["a", "b"], 0)
        assert resp.completions == ("a", "b")

    def test_responses_compare_by_value(self) -> None:
        assert CompletionResponse(["a"], 1) == CompletionResponse(("a",), 1)


class TestWordListCompleter:
    @pytest.mark.asyncio
    async def test_completes_word_before_caret(self) -> None:
        complete = WordListCompleter(["checkout", "cherry-pick", "commit"])
        resp = await complete(CompletionRequest("git che", 7))
        assert resp == CompletionResponse(["checkout", "cherry-pick"], 4)

    @pytest.mark.asyncio
    async def test_empty_word_offers_everything(self) -> None:
        complete = WordListCompleter(["ls", "cd"])
        resp = await complete(CompletionRequest("sudo ", 5))
        assert resp == CompletionResponse(["ls", "cd"], 5)

    @pytest.mark.asyncio
    async def test_no_match(self) -> None:
        complete = WordListCompleter(["ls", "cd"])
        resp = await complete(CompletionRequest("xyz", 3))
        assert resp.completions == ()
        assert resp.pos == 0

    @pytest.mark.asyncio
    async def test_caret_mid_word_uses_text_before_caret(self) -> None:
        complete = WordListCompleter(["status", "stash"])
        resp = await complete(CompletionRequest("git stXX", 6))
        assert resp == CompletionResponse(["status", "stash"], 4)

    def test_duplicates_dropped_in_order(self) -> None:
        assert WordListCompleter(["b", "a", "b"]).words == ["b", "a"]

    @pytest.mark.asyncio
    async def test_drives_readline(self) -> None:
        rl, container = make_readline("git chec")
        rl.on_complete = WordListCompleter(["checkout", "cherry-pick"])
        rl.handle_key("Tab")
        await settle()
        assert rl.text == "git checkout"
        assert container.children == []
