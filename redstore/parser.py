"""Parsing of the serialization protocol from a byte stream into replies."""

from __future__ import annotations

import io
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from redstore.protocol import (
    BulkReply,
    EmptyMultiBulkReply,
    IntReply,
    MultiBulkReply,
    NullBulkReply,
    Reply,
    StandardErrReply,
    StatusReply,
)

_CHUNK_SIZE = 4096
_INT_RE = re.compile(rb"[+-]?[0-9]+")


class _Readable(Protocol):
    def read(self, size: int = ...) -> bytes: ...


class ProtocolError(Exception):
    """Raised for input that does not follow the protocol."""


@dataclass(frozen=True)
class Payload:
    """One parsed reply, or the error met while parsing."""

    data: Reply | None = None
    error: Exception | None = None


class _BufferedReader:
    """Line and exact-size reads over anything with a ``read(size)`` method."""

    def __init__(self, source: _Readable) -> None:
        self._source = source
        self._buf = bytearray()

    def _fill(self) -> bool:
        chunk = self._source.read(_CHUNK_SIZE)
        if not chunk:
            return False
        self._buf += chunk
        return True

    def read_line(self) -> bytes | None:
        """Return the next line with its newline, or None at the end of input."""
        start = 0
        while True:
            index = self._buf.find(b"\n", start)
            if index >= 0:
                line = bytes(self._buf[: index + 1])
                del self._buf[: index + 1]
                return line
            start = len(self._buf)
            if not self._fill():
                return None

    def read_exact(self, size: int) -> bytes:
        """Return exactly ``size`` bytes; raise EOFError if input ends first."""
        while len(self._buf) < size:
            if not self._fill():
                raise EOFError("unexpected EOF")
        data = bytes(self._buf[:size])
        del self._buf[:size]
        return data


def _parse_int(text: bytes) -> int | None:
    if _INT_RE.fullmatch(text) is None:
        return None
    return int(text)


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _protocol_error(msg: str) -> Payload:
    return Payload(error=ProtocolError("protocol error: " + msg))


def _parse_bulk_string(header: bytes, reader: _BufferedReader) -> Payload:
    length = _parse_int(header[1:])
    if length is None or length < -1:
        return _protocol_error("illegal bulk string header: " + _text(header))
    if length == -1:
        return Payload(data=NullBulkReply())
    body = reader.read_exact(length + 2)
    return Payload(data=BulkReply(body[:-2]))


def _parse_rdb_bulk_string(reader: _BufferedReader) -> Payload:
    # the RDB body is not followed by CRLF, so it is read by its exact length
    line = reader.read_line()
    header = line.removesuffix(b"\r\n") if line is not None else b""
    if not header:
        raise ProtocolError("empty header")
    length = _parse_int(header[1:])
    if length is None or length <= 0:
        raise ProtocolError("illegal bulk header: " + _text(header))
    return Payload(data=BulkReply(reader.read_exact(length)))


def _parse_array(header: bytes, reader: _BufferedReader) -> Iterator[Payload]:
    count = _parse_int(header[1:])
    if count is None or count < 0:
        yield _protocol_error("illegal array header " + _text(header[1:]))
        return
    if count == 0:
        yield Payload(data=EmptyMultiBulkReply())
        return
    args: list[bytes] = []
    for _ in range(count):
        line = reader.read_line()
        if line is None:
            raise EOFError("unexpected EOF")
        if len(line) < 4 or line[-2:-1] != b"\r" or line[:1] != b"$":
            yield _protocol_error("illegal bulk string header " + _text(line))
            break
        length = _parse_int(line[1:-2])
        if length is None or length < -1:
            yield _protocol_error("illegal bulk string length " + _text(line))
            break
        if length == -1:
            args.append(b"")
        else:
            args.append(reader.read_exact(length + 2)[:-2])
    yield Payload(data=MultiBulkReply(args))


def _parse(reader: _BufferedReader) -> Iterator[Payload]:
    while True:
        line = reader.read_line()
        if line is None:
            return
        if len(line) <= 2 or line[-2:-1] != b"\r":
            # replication traffic may hold empty lines; they are skipped
            continue
        line = line[:-2]
        kind = line[:1]
        if kind == b"+":
            content = _text(line[1:])
            yield Payload(data=StatusReply(content))
            if content.startswith("FULLRESYNC"):
                yield _parse_rdb_bulk_string(reader)
        elif kind == b"-":
            yield Payload(data=StandardErrReply(_text(line[1:])))
        elif kind == b":":
            value = _parse_int(line[1:])
            if value is None:
                yield _protocol_error("illegal number " + _text(line[1:]))
                continue
            yield Payload(data=IntReply(value))
        elif kind == b"$":
            yield _parse_bulk_string(line, reader)
        elif kind == b"*":
            yield from _parse_array(line, reader)
        else:
            yield Payload(data=MultiBulkReply(line.split(b" ")))


def parse_stream(reader: _Readable) -> Iterator[Payload]:
    """Yield a payload for each reply read from ``reader`` until its input ends.

    Malformed items yield a payload holding a ProtocolError and parsing goes on;
    input that ends inside a reply yields a final payload holding the error.
    """
    stream = _BufferedReader(reader)
    try:
        yield from _parse(stream)
    except (ProtocolError, EOFError, OSError) as exc:
        yield Payload(error=exc)


def parse_bytes(data: bytes) -> list[Reply]:
    """Return every reply in ``data``; raise the first parse error met."""
    replies: list[Reply] = []
    for payload in parse_stream(io.BytesIO(data)):
        if payload.error is not None:
            raise payload.error
        replies.append(payload.data)
    return replies


def parse_one(data: bytes) -> Reply:
    """Return the first reply in ``data``; raise if it cannot be parsed."""
    payloads = parse_stream(io.BytesIO(data))
    try:
        payload = next(payloads, None)
    finally:
        payloads.close()
    if payload is None:
        raise ProtocolError("no protocol")
    if payload.error is not None:
        raise payload.error
    return payload.data