"""Tests for queen.middleware.chain — sequential execution and short-circuit."""

import anyio
import pytest

from queen.http.headers import Headers
from queen.http.request import Request
from queen.http.response import Response
from queen.middleware.chain import run_chain, run_step
from queen.middleware.protocol import CONTINUE, STOP, Continuation, Outcome


def _request() -> Request:
    return Request(
        scope={"type": "http"},
        method="GET",
        path="/",
        raw_path="/",
        headers=Headers(),
        query={},
    )


async def _discard(message: dict) -> None:
    pass


def _pair() -> tuple[Request, Response]:
    return _request(), Response(_discard)


class TestRunStep:
    async def test_explicit_continue(self) -> None:
        async def handler(request, response):
            return CONTINUE

        assert await run_step(handler, *_pair()) is Outcome.CONTINUE

    async def test_explicit_stop(self) -> None:
        async def handler(request, response):
            return STOP

        assert await run_step(handler, *_pair()) is Outcome.STOP

    async def test_none_stops(self) -> None:
        async def handler(request, response):
            return None

        assert await run_step(handler, *_pair()) is Outcome.STOP

    async def test_sync_handler(self) -> None:
        def handler(request, response):
            return CONTINUE

        assert await run_step(handler, *_pair()) is Outcome.CONTINUE

    async def test_continuation_called(self) -> None:
        async def handler(request, response, next):
            next()

        assert await run_step(handler, *_pair()) is Outcome.CONTINUE

    async def test_continuation_not_called(self) -> None:
        async def handler(request, response, next):
            pass

        assert await run_step(handler, *_pair()) is Outcome.STOP

    async def test_explicit_outcome_beats_continuation(self) -> None:
        async def handler(request, response, next):
            next()
            return STOP

        assert await run_step(handler, *_pair()) is Outcome.STOP

    async def test_callable_object(self) -> None:
        class Stamp:
            async def __call__(self, request, response, next):
                response.set_header("x-stamp", "1")
                next()

        request, response = _pair()
        assert await run_step(Stamp(), request, response) is Outcome.CONTINUE
        assert response.get_header("X-Stamp") == "1"


class TestContinuation:
    def test_only_first_call_counts(self) -> None:
        signal = Continuation()
        assert signal.called is False
        signal()
        signal()
        assert signal.called is True


class TestRunChain:
    async def test_all_continue(self) -> None:
        seen: list[str] = []

        async def first(request, response):
            seen.append("first")
            return CONTINUE

        async def second(request, response):
            seen.append("second")
            return CONTINUE

        assert await run_chain([first, second], *_pair()) is True
        assert seen == ["first", "second"]

    async def test_stop_skips_rest(self) -> None:
        seen: list[str] = []

        async def gate(request, response):
            seen.append("gate")
            return STOP

        async def never(request, response):
            seen.append("never")
            return CONTINUE

        assert await run_chain([gate, never], *_pair()) is False
        assert seen == ["gate"]

    async def test_empty_chain_continues(self) -> None:
        assert await run_chain([], *_pair()) is True

    async def test_double_continuation_runs_next_once(self) -> None:
        seen: list[str] = []

        async def eager(request, response, next):
            next()
            next()

        async def after(request, response):
            seen.append("after")
            return CONTINUE

        assert await run_chain([eager, after], *_pair()) is True
        assert seen == ["after"]

    async def test_next_handler_waits_for_previous_io(self) -> None:
        seen: list[str] = []

        async def slow(request, response, next):
            next()
            await anyio.sleep(0.01)
            seen.append("slow done")

        async def fast(request, response):
            seen.append("fast")
            return CONTINUE

        await run_chain([slow, fast], *_pair())
        assert seen == ["slow done", "fast"]

    async def test_handlers_share_request(self) -> None:
        async def annotate(request, response):
            request.body = {"user": "ada"}
            return CONTINUE

        async def read(request, response):
            await response.json(request.body)

        request, response = _pair()
        assert await run_chain([annotate, read], request, response) is False
        assert response.finished is True

    async def test_exception_propagates(self) -> None:
        seen: list[str] = []

        async def boom(request, response):
            raise ValueError("boom")

        async def never(request, response):
            seen.append("never")

        with pytest.raises(ValueError, match="boom"):
            await run_chain([boom, never], *_pair())
        assert seen == []
