"""Tests for queen.http.response — writing over ASGI send."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from queen.http.response import Response


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)

    @property
    def start(self) -> dict:
        return self.messages[0]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.start["headers"])

    @property
    def body(self) -> bytes:
        return b"".join(m["body"] for m in self.messages[1:])


class TestSend:
    async def test_text(self) -> None:
        sent = _Recorder()
        response = Response(sent)
        await response.send("hello")

        assert sent.start["status"] == 200
        assert sent.headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert sent.headers[b"content-length"] == b"5"
        assert sent.body == b"hello"
        assert sent.messages[-1]["more_body"] is False
        assert response.finished is True

    async def test_bytes(self) -> None:
        sent = _Recorder()
        await Response(sent).send(b"\x00\x01")
        assert sent.headers[b"content-type"] == b"application/octet-stream"

    async def test_keeps_explicit_content_type(self) -> None:
        sent = _Recorder()
        response = Response(sent)
        response.set_header("Content-Type", "text/html")
        await response.send("<p>hi</p>")
        assert sent.headers[b"content-type"] == b"text/html"

    async def test_status(self) -> None:
        sent = _Recorder()
        response = Response(sent)
        response.status = 201
        await response.send("created")
        assert sent.start["status"] == 201


class TestJson:
    async def test_dict(self) -> None:
        sent = _Recorder()
        await Response(sent).json({"message": "ok"})

        assert sent.headers[b"content-type"] == b"application/json"
        assert sent.body == b'{"message": "ok"}'

    async def test_dataclass_and_path(self) -> None:
        @dataclass
        class Saved:
            name: str
            path: Path

        sent = _Recorder()
        await Response(sent).json(Saved("a", Path("uploads/a.txt")))
        assert sent.body == b'{"name": "a", "path": "uploads/a.txt"}'

    async def test_unserializable(self) -> None:
        sent = _Recorder()
        with pytest.raises(TypeError):
            await Response(sent).json(object())
        assert sent.messages == []


class TestStreaming:
    async def test_write_then_end(self) -> None:
        sent = _Recorder()
        response = Response(sent)
        await response.write("a")
        assert response.started is True
        assert response.finished is False
        await response.write(b"b")
        await response.end("c")

        assert [m["more_body"] for m in sent.messages[1:]] == [True, True, False]
        assert sent.body == b"abc"

    async def test_write_after_end(self) -> None:
        response = Response(_Recorder())
        await response.end()
        with pytest.raises(RuntimeError, match="already finished"):
            await response.write("late")

    async def test_headers_fixed_after_start(self) -> None:
        response = Response(_Recorder())
        await response.write("a")
        with pytest.raises(RuntimeError, match="after the response has started"):
            response.set_header("x-late", "1")

    def test_add_header_keeps_duplicates(self) -> None:
        response = Response(_Recorder())
        response.add_header("Set-Cookie", "a=1")
        response.add_header("Set-Cookie", "b=2")
        response.set_header("X-One", "1")
        response.set_header("x-one", "2")
        assert response.headers == (("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("x-one", "2"))

    def test_clear_headers(self) -> None:
        response = Response(_Recorder())
        response.add_header("Set-Cookie", "a=1")
        response.clear_headers()
        assert response.headers == ()

    async def test_clear_headers_after_start(self) -> None:
        response = Response(_Recorder())
        await response.write("a")
        with pytest.raises(RuntimeError):
            response.clear_headers()


class TestSendFile:
    async def test_streams_in_chunks(self, tmp_path: Path) -> None:
        target = tmp_path / "notes.txt"
        target.write_bytes(b"0123456789")

        sent = _Recorder()
        response = Response(sent, chunk_size=4)
        await response.send_file(target)

        assert sent.headers[b"content-type"] == b"text/plain"
        assert [m["body"] for m in sent.messages[1:]] == [b"0123", b"4567", b"89", b""]
        assert sent.body == b"0123456789"
        assert response.finished is True

    async def test_empty_file(self, tmp_path: Path) -> None:
        target = tmp_path / "empty.bin"
        target.write_bytes(b"")

        sent = _Recorder()
        await Response(sent).send_file(target)
        assert sent.headers[b"content-type"] == b"application/octet-stream"
        assert sent.body == b""
        assert sent.messages[-1]["more_body"] is False

    async def test_missing_file_writes_nothing(self, tmp_path: Path) -> None:
        sent = _Recorder()
        response = Response(sent)
        with pytest.raises(FileNotFoundError):
            await response.send_file(tmp_path / "nope.txt")
        assert sent.messages == []
        assert response.started is False
