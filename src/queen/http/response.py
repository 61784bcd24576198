"""Structured HTTP response over the ASGI ``send`` callable.

Unlike a value returned from a handler, a ``Response`` writes as it goes:
``send``, ``json`` and ``send_file`` each complete once the transport has
acknowledged the bytes, so the chain never races a handler that is still
writing.
"""

import dataclasses
import json as json_module
import mimetypes
import os
from os import PathLike

import anyio

from queen._internal.asgi import Send

DEFAULT_CHUNK_SIZE = 64 * 1024


class Response:
    """Writable HTTP response bound to one ASGI request cycle.

    Status and headers can be changed until the first byte is written;
    after that they are fixed. ``started`` flips on the first write,
    ``finished`` once the final body message has been sent.

    Usage::

        async def show(request, response):
            response.status = 201
            await response.json({"id": request.params["id"]})
    """

    __slots__ = ("_headers", "_send", "chunk_size", "finished", "started", "status")

    def __init__(self, send: Send, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._send = send
        self._headers: list[tuple[str, str]] = []
        self.status = 200
        self.chunk_size = chunk_size
        self.started = False
        self.finished = False

    # -- Headers --

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Headers queued for the response start, in order."""
        return tuple(self._headers)

    def get_header(self, name: str) -> str | None:
        """Return the first queued value for *name*, case-insensitively."""
        wanted = name.lower()
        for key, value in self._headers:
            if key.lower() == wanted:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Set *name*, replacing any value already queued."""
        self._check_not_started()
        wanted = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != wanted]
        self._headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        """Queue an additional value for *name* (e.g. ``Set-Cookie``)."""
        self._check_not_started()
        self._headers.append((name, value))

    def clear_headers(self) -> None:
        """Drop every queued header."""
        self._check_not_started()
        self._headers.clear()

    # -- Streaming primitives --

    async def write(self, chunk: str | bytes) -> None:
        """Send *chunk* and keep the response open."""
        await self._write(_encode(chunk), more_body=True)

    async def end(self, chunk: str | bytes = b"") -> None:
        """Send *chunk* as the last piece of the body."""
        await self._write(_encode(chunk), more_body=False)

    # -- Helpers --

    async def send(self, raw: str | bytes) -> None:
        """Write *raw* as the complete response body."""
        body = _encode(raw)
        if not self.started:
            if self.get_header("content-type") is None:
                content_type = (
                    "text/plain; charset=utf-8" if isinstance(raw, str) else "application/octet-stream"
                )
                self.set_header("content-type", content_type)
            self.set_header("content-length", str(len(body)))
        await self.end(body)

    async def json(self, value: object) -> None:
        """Serialize *value* as JSON and write it as the complete body."""
        body = json_module.dumps(value, default=_json_default).encode("utf-8")
        self.set_header("content-type", "application/json")
        self.set_header("content-length", str(len(body)))
        await self.end(body)

    async def send_file(self, path: str | PathLike[str]) -> None:
        """Stream the file at *path* as the response body.

        The file handle is released whether streaming succeeds or fails.
        Raises ``FileNotFoundError`` (or any other ``OSError``) before
        anything is written when the file cannot be opened.
        """
        async with await anyio.open_file(path, "rb") as fh:
            if not self.started and self.get_header("content-type") is None:
                content_type, _ = mimetypes.guess_type(str(path))
                self.set_header("content-type", content_type or "application/octet-stream")
            while chunk := await fh.read(self.chunk_size):
                await self.write(chunk)
        await self.end()

    # -- Internal --

    async def _start(self) -> None:
        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]
        self.started = True
        await self._send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": raw_headers,
            }
        )

    async def _write(self, body: bytes, *, more_body: bool) -> None:
        if self.finished:
            msg = "Response already finished; nothing more can be written."
            raise RuntimeError(msg)
        if not self.started:
            await self._start()
        if not more_body:
            self.finished = True
        await self._send(
            {
                "type": "http.response.body",
                "body": body,
                "more_body": more_body,
            }
        )

    def _check_not_started(self) -> None:
        if self.started:
            msg = "Cannot change headers after the response has started."
            raise RuntimeError(msg)

    def __repr__(self) -> str:
        state = "finished" if self.finished else "started" if self.started else "pending"
        return f"Response({self.status}, {state})"


def _encode(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def _json_default(value: object) -> object:
    """Serialize dataclass instances and paths that ``json`` cannot."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, PathLike):
        return os.fspath(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)
