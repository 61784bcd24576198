"""Multipart form-data body parser plugin.

Parsing is byte-oriented (``python-multipart``), so file content that
happens to contain boundary-like text cannot break part boundaries.

Uploaded files are written to ``<destination>/<filename>``. A later part
with the same filename overwrites an earlier one. Filenames are limited to
letters, digits, ``.``, ``_``, ``-`` and spaces, and ``.``/``..`` are
refused, so an upload can never land outside *destination*.
"""

import logging
import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

import anyio
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from queen.http.request import Request
from queen.http.response import Response
from queen.middleware.protocol import CONTINUE, Outcome

logger = logging.getLogger("queen.plugins")

MULTIPART_MEDIA_TYPE = b"multipart/form-data"

_FIELD_NAME = re.compile(r"[A-Za-z0-9_-]+")
_FILENAME = re.compile(r"[A-Za-z0-9. _-]+")


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file part that has been written to disk."""

    name: str
    filename: str
    content_type: str | None
    path: Path

    def __repr__(self) -> str:
        return f"UploadedFile({self.name!r}, {self.filename!r}, {str(self.path)!r})"


@dataclass(slots=True)
class _Part:
    """One section of a multipart body, as it is being parsed."""

    headers: dict[str, str]
    data: bytearray


class MultipartBody:
    """Parse ``multipart/form-data`` bodies into ``request.body``.

    Text fields become ``str`` values keyed by field name; file fields
    are saved under *destination* and listed under ``"files"``::

        app.register(App.multipart("uploads"))

        @app.post("/upload")
        async def upload(request, response):
            await response.json({
                "title": request.body["title"],
                "saved": [f.filename for f in request.body["files"]],
            })

    Parts whose ``Content-Disposition`` has no usable ``name`` (or a
    filename outside the allowed characters) are dropped without error.
    Never stops the chain.
    """

    __slots__ = ("_destination",)

    def __init__(self, destination: str | PathLike[str]) -> None:
        self._destination = Path(destination)
        self._destination.mkdir(parents=True, exist_ok=True)

    @property
    def destination(self) -> Path:
        return self._destination

    async def __call__(self, request: Request, response: Response) -> Outcome:
        boundary = _boundary(request.content_type)
        if boundary is None or not request.buffer:
            return CONTINUE

        fields: dict[str, Any] = {}
        uploads: list[tuple[str, str, str | None, bytes]] = []

        for part in _split_parts(request.buffer, boundary):
            disposition = part.headers.get("content-disposition")
            if disposition is None:
                continue
            _, options = parse_options_header(disposition)
            name = _option(options, b"name")
            if name is None or not _FIELD_NAME.fullmatch(name):
                continue

            filename = _option(options, b"filename")
            if not filename:
                fields[name] = part.data.decode("utf-8", errors="replace")
                continue
            if not _FILENAME.fullmatch(filename) or filename.strip(" ") in (".", ".."):
                logger.debug("Dropping upload with unsafe filename %r", filename)
                continue

            uploads.append((name, filename, part.headers.get("content-type"), bytes(part.data)))

        fields["files"] = await self._store(uploads)
        request.body = fields
        return CONTINUE

    async def _store(self, uploads: list[tuple[str, str, str | None, bytes]]) -> list[UploadedFile]:
        """Write every upload concurrently; return records once all are on disk.

        Only the last part for a given filename is written, so the file on
        disk always holds the later upload.
        """
        last_for_filename = {filename: index for index, (_, filename, _, _) in enumerate(uploads)}

        async def write(path: Path, content: bytes) -> None:
            await anyio.Path(path).write_bytes(content)

        async with anyio.create_task_group() as tg:
            for index, (_, filename, _, content) in enumerate(uploads):
                if last_for_filename[filename] == index:
                    tg.start_soon(write, self._destination / filename, content)

        return [
            UploadedFile(name, filename, content_type, self._destination / filename)
            for name, filename, content_type, _ in uploads
        ]

    def __repr__(self) -> str:
        return f"MultipartBody({str(self._destination)!r})"


def _boundary(content_type: str | None) -> bytes | None:
    """Return the boundary token of a multipart/form-data Content-Type."""
    if not content_type:
        return None
    media_type, options = parse_options_header(content_type)
    if media_type != MULTIPART_MEDIA_TYPE:
        return None
    return options.get(b"boundary") or None


def _option(options: dict[bytes, bytes], key: bytes) -> str | None:
    value = options.get(key)
    if value is None:
        return None
    return value.decode("utf-8", errors="replace")


def _split_parts(body: bytes, boundary: bytes) -> list[_Part]:
    """Split *body* into parts, keeping whatever parsed before an error."""
    parts: list[_Part] = []
    current: _Part | None = None
    header_field = bytearray()
    header_value = bytearray()

    def on_part_begin() -> None:
        nonlocal current
        current = _Part(headers={}, data=bytearray())

    def on_header_field(data: bytes, start: int, end: int) -> None:
        header_field.extend(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        header_value.extend(data[start:end])

    def on_header_end() -> None:
        if current is not None:
            field = header_field.decode("latin-1").strip().lower()
            current.headers[field] = header_value.decode("latin-1").strip()
        header_field.clear()
        header_value.clear()

    def on_part_data(data: bytes, start: int, end: int) -> None:
        if current is not None:
            current.data.extend(data[start:end])

    def on_part_end() -> None:
        nonlocal current
        if current is not None:
            parts.append(current)
        current = None

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.debug("Stopped parsing malformed multipart body after %d part(s): %s", len(parts), exc)

    return parts
