"""Reply types of the RESP wire protocol and their serialisation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

CRLF = b"\r\n"

_PONG_BYTES = b"+PONG\r\n"
_OK_BYTES = b"+OK\r\n"
_NULL_BULK_BYTES = b"$-1\r\n"
_EMPTY_MULTI_BULK_BYTES = b"*0\r\n"
_NO_BYTES = b""
_QUEUED_BYTES = b"+QUEUED\r\n"


def _encode(text: str | bytes) -> bytes:
    return text.encode() if isinstance(text, str) else bytes(text)


class Reply(ABC):
    """A message of the serialisation protocol."""

    __slots__ = ()

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Serialise the reply to its wire form."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reply):
            return NotImplemented
        return type(self) is type(other) and self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash((type(self), self.to_bytes()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_bytes()!r})"


class PongReply(Reply):
    """The +PONG status."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _PONG_BYTES


class OkReply(Reply):
    """The +OK status."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _OK_BYTES


class NullBulkReply(Reply):
    """A nil bulk string."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _NULL_BULK_BYTES


class EmptyMultiBulkReply(Reply):
    """An empty array."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _EMPTY_MULTI_BULK_BYTES


class NoReply(Reply):
    """Nothing is sent back, as for SUBSCRIBE."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _NO_BYTES


class QueuedReply(Reply):
    """The +QUEUED status of a transaction."""

    __slots__ = ()

    def to_bytes(self) -> bytes:
        return _QUEUED_BYTES


class BulkReply(Reply):
    """A binary-safe string; ``None`` serialises as a nil bulk."""

    __slots__ = ("arg",)

    def __init__(self, arg: bytes | None) -> None:
        self.arg = arg

    def to_bytes(self) -> bytes:
        if self.arg is None:
            return _NULL_BULK_BYTES
        return b"$" + str(len(self.arg)).encode() + CRLF + self.arg + CRLF


class MultiBulkReply(Reply):
    """An array of bulk strings; ``None`` items serialise as nil bulks."""

    __slots__ = ("args",)

    def __init__(self, args: Iterable[bytes | None]) -> None:
        self.args = list(args)

    def to_bytes(self) -> bytes:
        parts = [b"*", str(len(self.args)).encode(), CRLF]
        for arg in self.args:
            if arg is None:
                parts.append(b"$-1" + CRLF)
            else:
                parts.extend((b"$", str(len(arg)).encode(), CRLF, arg, CRLF))
        return b"".join(parts)


class MultiRawReply(Reply):
    """An array whose items are arbitrary replies."""

    __slots__ = ("replies",)

    def __init__(self, replies: Iterable[Reply]) -> None:
        self.replies = list(replies)

    def to_bytes(self) -> bytes:
        header = b"*" + str(len(self.replies)).encode() + CRLF
        return header + b"".join(reply.to_bytes() for reply in self.replies)


class StatusReply(Reply):
    """A simple status string."""

    __slots__ = ("status",)

    def __init__(self, status: str) -> None:
        self.status = status

    def to_bytes(self) -> bytes:
        return b"+" + _encode(self.status) + CRLF


class IntReply(Reply):
    """A 64-bit integer."""

    __slots__ = ("code",)

    def __init__(self, code: int) -> None:
        self.code = code

    def to_bytes(self) -> bytes:
        return b":" + str(self.code).encode() + CRLF


class ErrorReply(Reply, Exception):
    """A reply that is also an error and can be raised."""

    def __init__(self, message: str) -> None:
        Exception.__init__(self, message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""

    def to_bytes(self) -> bytes:
        return b"-" + _encode(str(self)) + CRLF


class StandardErrReply(ErrorReply):
    """A server error with a free-form status."""

    def __init__(self, status: str) -> None:
        super().__init__(status)
        self.status = status

    def to_bytes(self) -> bytes:
        return b"-" + _encode(self.status) + CRLF


class UnknownErrReply(ErrorReply):
    """An unknown error."""

    def __init__(self) -> None:
        super().__init__("Err unknown")

    def to_bytes(self) -> bytes:
        return b"-Err unknown\r\n"


class ArgNumErrReply(ErrorReply):
    """Wrong number of arguments for a command."""

    def __init__(self, cmd: str) -> None:
        super().__init__(f"ERR wrong number of arguments for '{cmd}' command")
        self.cmd = cmd

    def to_bytes(self) -> bytes:
        return b"-ERR wrong number of arguments for '" + _encode(self.cmd) + b"' command" + CRLF


class SyntaxErrReply(ErrorReply):
    """Unexpected arguments."""

    def __init__(self) -> None:
        super().__init__("Err syntax error")

    def to_bytes(self) -> bytes:
        return b"-Err syntax error\r\n"


class WrongTypeErrReply(ErrorReply):
    """Operation against a key holding the wrong kind of value."""

    def __init__(self) -> None:
        super().__init__("WRONGTYPE Operation against a key holding the wrong kind of value")

    def to_bytes(self) -> bytes:
        return b"-WRONGTYPE Operation against a key holding the wrong kind of value\r\n"


class ProtocolErrReply(ErrorReply):
    """An unexpected byte met while parsing a request."""

    def __init__(self, msg: str) -> None:
        super().__init__(f"ERR Protocol error '{msg}' command")
        self.msg = msg

    def to_bytes(self) -> bytes:
        return b"-ERR Protocol error: '" + _encode(self.msg) + b"'" + CRLF


def is_ok_reply(reply: Reply) -> bool:
    """Return whether the reply serialises as +OK."""
    return reply.to_bytes() == _OK_BYTES


def is_error_reply(reply: Reply) -> bool:
    """Return whether the reply is an error on the wire."""
    return reply.to_bytes()[:1] == b"-"


def is_empty_multi_bulk_reply(reply: Reply) -> bool:
    """Return whether the reply serialises as an empty array."""
    return reply.to_bytes() == _EMPTY_MULTI_BULK_BYTES