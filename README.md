# redstore

Building blocks for a Redis-style in-memory database, written in plain Python
with no third-party dependencies.

## What is inside

- `redstore.protocol` – RESP reply types (`StatusReply`, `IntReply`,
  `BulkReply`, `MultiBulkReply`, `MultiRawReply`, `OkReply`, `PongReply`,
  `NullBulkReply`, `EmptyMultiBulkReply`, `NoReply`, `QueuedReply`) and error
  replies (`StandardErrReply`, `ArgNumErrReply`, `SyntaxErrReply`,
  `WrongTypeErrReply`, `UnknownErrReply`, `ProtocolErrReply`), each with
  `to_bytes()`. Error replies are also exceptions and can be raised. Helpers:
  `is_ok_reply`, `is_error_reply`, `is_empty_multi_bulk_reply`.
- `redstore.parser` – decode RESP input: `parse_stream` (a generator of
  `Payload` objects from anything with a `read(size)` method), `parse_bytes`
  and `parse_one`. Malformed input gives a `ProtocolError`.
- `redstore.utils` – `to_cmd_line`, `to_cmd_line2`, `to_cmd_line3`,
  `convert_range` (inclusive, possibly negative indices to a half-open slice)
  and the `fnv32` hash.
- `redstore.dicts` – `SimpleDict` and the sharded, thread-safe
  `ConcurrentDict` (with `*_with_lock` variants and `rw_locks`/`rw_unlocks`).
- `redstore.lockmap` – `RWLock` and `LockMap`, a table of reader/writer locks
  keyed by string; multi-key locking goes in a fixed order, and `locked(*keys)`
  is a context manager.
- `redstore.linked`, `redstore.quicklist` – `LinkedList` and the paged
  `QuickList`, both with predicate-based removal.
- `redstore.sets` – `Set` with `intersect`, `union` and `diff`.
- `redstore.sortedset` – `sortedset.SortedSet` on a `skiplist.Skiplist`, with
  score and lexicographic borders from `border.parse_score_border` and
  `border.parse_lex_border`.
- `redstore.bitmap` – growable `BitMap` and `from_bytes`.
- `redstore.geohash` – `encode`, `decode`, `to_string`, `to_int`, `from_int`,
  `to_range`, `distance`, `get_neighbours`.
- `redstore.consistenthash` – `HashRing` with `{hash tag}` support.
- `redstore.wildcard` – glob patterns as used by `KEYS`: `compile_pattern`
  returns a `Pattern` with `is_match`; bad patterns raise `WildcardError`.
- `redstore.pool` – a bounded object `Pool` (`get`, `put`, `close`), raising
  `PoolClosedError` and `PoolExhaustedError`.
- `redstore.idgenerator` – snowflake-style `IdGenerator`.
- `redstore.connection` – `Connection` (per-client state over a socket:
  subscriptions, transaction queue, watched keys, selected db) and the
  in-memory `FakeConn`.
- `redstore.pubsub` – the `Hub` with `subscribe`, `unsubscribe`,
  `unsubscribe_all` and `publish`.

## Install

```
pip install .
```

## Examples

Encoding and parsing replies:

```python
from redstore.protocol import MultiBulkReply
from redstore.parser import parse_one

wire = MultiBulkReply([b"set", b"a", b"1"]).to_bytes()
reply = parse_one(wire)
assert reply.to_bytes() == wire
```

A sorted set:

```python
from redstore.sortedset.sortedset import SortedSet
from redstore.sortedset.border import parse_score_border

zs = SortedSet()
zs.add("a", 1)
zs.add("b", 2)
zs.add("c", 3)
members = [e.member for e in zs.range(parse_score_border("(1"), parse_score_border("+inf"), 0, -1, False)]
# ['b', 'c']
```

Publish and subscribe:

```python
from redstore.connection import FakeConn
from redstore.pubsub import Hub

hub = Hub()
conn = FakeConn()
hub.subscribe(conn, [b"news"])
conn.clean()
hub.publish([b"news", b"hello"])
print(conn.getvalue())
```

## What it does not do

This package is a set of parts, not a running database. It has no network
server and no command to start one, no command table or executor for GET,
SET and the rest, no client, no persistence (append-only file or snapshot)
and no cluster mode. A server would be built on top of these parts.

## Tests

```
pip install .[test]
pytest
```