"""Publish/subscribe: channels, their subscribers and message delivery."""

from __future__ import annotations

import contextlib
from collections.abc import Sequence

from redstore.connection import Connection
from redstore.dicts import ConcurrentDict
from redstore.linked import LinkedList
from redstore.lockmap import LockMap
from redstore.protocol import ArgNumErrReply, IntReply, MultiBulkReply, NoReply, Reply

_SUBSCRIBE = "subscribe"
_UNSUBSCRIBE = "unsubscribe"
_MESSAGE = b"message"
UNSUBSCRIBE_NOTHING = b"*3\r\n$11\r\nunsubscribe\r\n$-1\n:0\r\n"


def _channel_name(arg: bytes) -> str:
    return arg.decode("latin-1")


def _channel_bytes(channel: str) -> bytes:
    return channel.encode("latin-1")


def make_msg(kind: str, channel: str, code: int) -> bytes:
    """Return the three-item notice sent on (un)subscribe: kind, channel, count."""
    kind_bytes = kind.encode("latin-1")
    channel_bytes = _channel_bytes(channel)
    return (
        b"*3\r\n$%d\r\n%s\r\n$%d\r\n%s\r\n:%d\r\n"
        % (len(kind_bytes), kind_bytes, len(channel_bytes), channel_bytes, code)
    )


def _send(conn: Connection, data: bytes) -> None:
    # a failing client must not disturb the others
    with contextlib.suppress(OSError):
        conn.write(data)


class Hub:
    """All subscription relations: channel to subscribed connections."""

    def __init__(self) -> None:
        self._subs = ConcurrentDict(4)
        self._locks = LockMap(16)

    def _subscribe0(self, channel: str, conn: Connection) -> bool:
        conn.subscribe(channel)
        subscribers = self._subs.get(channel)
        if subscribers is None:
            subscribers = LinkedList()
            self._subs.put(channel, subscribers)
        if subscribers.contains(lambda item: item is conn):
            return False
        subscribers.add(conn)
        return True

    def _unsubscribe0(self, channel: str, conn: Connection) -> bool:
        conn.unsubscribe(channel)
        subscribers = self._subs.get(channel)
        if subscribers is None:
            return False
        subscribers.remove_all_by_val(lambda item: item is conn)
        if len(subscribers) == 0:
            self._subs.remove(channel)
        return True

    def subscribe(self, conn: Connection, args: Sequence[bytes]) -> Reply:
        """Subscribe the connection to each channel, notifying it of new ones."""
        channels = [_channel_name(arg) for arg in args]
        with self._locks.locked(*channels):
            for channel in channels:
                if self._subscribe0(channel, conn):
                    _send(conn, make_msg(_SUBSCRIBE, channel, conn.subs_count()))
        return NoReply()

    def unsubscribe_all(self, conn: Connection) -> None:
        """Remove the connection from every channel it subscribes to."""
        channels = conn.get_channels()
        with self._locks.locked(*channels):
            for channel in channels:
                self._unsubscribe0(channel, conn)

    def unsubscribe(self, conn: Connection, args: Sequence[bytes]) -> Reply:
        """Unsubscribe from the given channels, or from all when none are given."""
        if args:
            channels = [_channel_name(arg) for arg in args]
        else:
            channels = conn.get_channels()
        with self._locks.locked(*channels):
            if not channels:
                _send(conn, UNSUBSCRIBE_NOTHING)
                return NoReply()
            for channel in channels:
                if self._unsubscribe0(channel, conn):
                    _send(conn, make_msg(_UNSUBSCRIBE, channel, conn.subs_count()))
        return NoReply()

    def publish(self, args: Sequence[bytes]) -> Reply:
        """Send a message to every subscriber of a channel; reply with their number."""
        if len(args) != 2:
            return ArgNumErrReply("publish")
        channel = _channel_name(args[0])
        message = args[1]
        with self._locks.locked(channel):
            subscribers = self._subs.get(channel)
            if subscribers is None:
                return IntReply(0)
            payload = MultiBulkReply([_MESSAGE, _channel_bytes(channel), message]).to_bytes()
            for conn in list(subscribers):
                _send(conn, payload)
            return IntReply(len(subscribers))