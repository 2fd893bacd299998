"""State of one client connection, and an in-memory stand-in for tests."""

from __future__ import annotations

import contextlib
import enum
import socket
import threading
from typing import Any

_CLOSE_WAIT_SECONDS = 10.0


class _Flag(enum.IntFlag):
    NONE = 0
    SLAVE = 1
    MASTER = 2
    MULTI = 4


class Connection:
    """A client connection: its socket, subscriptions, transaction and selected db."""

    def __init__(self, sock: socket.socket | None = None) -> None:
        self._sock = sock
        self._lock = threading.Lock()
        self._sending = 0
        self._sending_done = threading.Condition()
        self._flags = _Flag.NONE
        self._subs: dict[str, None] = {}
        self.password = ""
        self.queued_cmd_lines: list[list[bytes]] = []
        self._watching: dict[str, int] | None = None
        self.tx_errors: list[Exception] = []
        self.db_index = 0

    def _peer(self) -> str:
        peer: Any = self._sock.getpeername()
        if isinstance(peer, tuple):
            return f"{peer[0]}:{peer[1]}"
        return str(peer)

    def remote_addr(self) -> str:
        """Return the address of the remote end."""
        return self._peer()

    def name(self) -> str:
        """Return the remote address, or an empty string without a socket."""
        if self._sock is None:
            return ""
        return self._peer()

    def close(self) -> None:
        """Wait briefly for pending writes, close the socket and reset the state."""
        with self._sending_done:
            self._sending_done.wait_for(lambda: self._sending == 0, _CLOSE_WAIT_SECONDS)
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.close()
        self._subs = {}
        self.password = ""
        self.queued_cmd_lines = []
        self._watching = None
        self.tx_errors = []
        self.db_index = 0

    def write(self, data: bytes) -> int:
        """Send all of ``data`` to the client; return the number of bytes sent."""
        if not data:
            return 0
        with self._sending_done:
            self._sending += 1
        try:
            self._sock.sendall(data)
            return len(data)
        finally:
            with self._sending_done:
                self._sending -= 1
                self._sending_done.notify_all()

    def subscribe(self, channel: str) -> None:
        """Record a subscription to the channel."""
        with self._lock:
            self._subs[channel] = None

    def unsubscribe(self, channel: str) -> None:
        """Forget a subscription to the channel."""
        with self._lock:
            self._subs.pop(channel, None)

    def subs_count(self) -> int:
        """Return the number of subscribed channels."""
        return len(self._subs)

    def get_channels(self) -> list[str]:
        """Return the subscribed channels."""
        with self._lock:
            return list(self._subs)

    def in_multi_state(self) -> bool:
        """Return whether a transaction is open."""
        return bool(self._flags & _Flag.MULTI)

    def set_multi_state(self, state: bool) -> None:
        """Open a transaction, or cancel it and drop queued commands and watches."""
        if not state:
            self._watching = None
            self.queued_cmd_lines = []
            self._flags &= ~_Flag.MULTI
            return
        self._flags |= _Flag.MULTI

    def enqueue_cmd(self, cmd_line: list[bytes]) -> None:
        """Queue a command of the open transaction."""
        self.queued_cmd_lines.append(cmd_line)

    def clear_queued_cmds(self) -> None:
        """Drop the queued commands."""
        self.queued_cmd_lines = []

    def get_watching(self) -> dict[str, int]:
        """Return the watched keys and their versions when watching began."""
        if self._watching is None:
            self._watching = {}
        return self._watching

    def add_tx_error(self, err: Exception) -> None:
        """Record an error met while queueing a transaction."""
        self.tx_errors.append(err)

    def select_db(self, db_num: int) -> None:
        """Select a database by index."""
        self.db_index = db_num

    def set_slave(self) -> None:
        """Mark this as a connection with a replica."""
        self._flags |= _Flag.SLAVE

    def is_slave(self) -> bool:
        """Return whether this is a connection with a replica."""
        return bool(self._flags & _Flag.SLAVE)

    def set_master(self) -> None:
        """Mark this as a connection with a master."""
        self._flags |= _Flag.MASTER

    def is_master(self) -> bool:
        """Return whether this is a connection with a master."""
        return bool(self._flags & _Flag.MASTER)


class FakeConn(Connection):
    """A connection that keeps what is written in memory and can read it back."""

    def __init__(self) -> None:
        super().__init__(None)
        self._buf = bytearray()
        self._offset = 0
        self._closed = False
        self._cond = threading.Condition()

    def write(self, data: bytes) -> int:
        """Append data to the buffer; raise BrokenPipeError once closed."""
        with self._cond:
            if self._closed:
                raise BrokenPipeError("connection closed")
            self._buf += data
            self._cond.notify_all()
        return len(data)

    def read(self, size: int = -1) -> bytes:
        """Return unread data, waiting for a write; return b"" once closed and drained."""
        with self._cond:
            self._cond.wait_for(lambda: self._closed or self._offset < len(self._buf))
            end = len(self._buf) if size < 0 else min(len(self._buf), self._offset + size)
            data = bytes(self._buf[self._offset : end])
            self._offset = end
            return data

    def clean(self) -> None:
        """Discard everything written so far."""
        with self._cond:
            self._buf = bytearray()
            self._offset = 0

    def getvalue(self) -> bytes:
        """Return everything written since the last clean."""
        with self._cond:
            return bytes(self._buf)

    def close(self) -> None:
        """Mark the connection closed and wake waiting readers."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def remote_addr(self) -> str:
        """A fake connection has no remote address."""
        return ""