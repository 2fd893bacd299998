import io

import pytest

from redstore.parser import Payload, ProtocolError, parse_bytes, parse_one, parse_stream
from redstore.protocol import (
    BulkReply,
    EmptyMultiBulkReply,
    IntReply,
    MultiBulkReply,
    NullBulkReply,
    StandardErrReply,
    StatusReply,
)


def _replies():
    return [
        IntReply(1),
        StatusReply("OK"),
        StandardErrReply("ERR unknown"),
        BulkReply(b"a\r\nb"),
        NullBulkReply(),
        MultiBulkReply([b"a", b"\r\n"]),
        EmptyMultiBulkReply(),
    ]


def test_parse_stream():
    replies = _replies()
    data = b"".join(r.to_bytes() for r in replies) + b"set a a\r\n"
    expected = [r.to_bytes() for r in replies]
    expected.append(MultiBulkReply([b"set", b"a", b"a"]).to_bytes())
    payloads = list(parse_stream(io.BytesIO(data)))
    assert all(p.error is None for p in payloads)
    assert [p.data.to_bytes() for p in payloads] == expected


@pytest.mark.parametrize("reply", _replies())
def test_parse_one(reply):
    assert parse_one(reply.to_bytes()).to_bytes() == reply.to_bytes()


def test_parse_bytes_all():
    replies = _replies()
    data = b"".join(r.to_bytes() for r in replies)
    assert [r.to_bytes() for r in parse_bytes(data)] == [r.to_bytes() for r in replies]


def test_illegal_number_is_protocol_error():
    with pytest.raises(ProtocolError, match="illegal number abc"):
        parse_one(b":abc\r\n")


def test_illegal_number_does_not_stop_stream():
    payloads = list(parse_stream(io.BytesIO(b":abc\r\n:2\r\n")))
    assert isinstance(payloads[0].error, ProtocolError)
    assert payloads[1].data.to_bytes() == b":2\r\n"


def test_empty_input():
    with pytest.raises(ProtocolError):
        parse_one(b"")
    assert parse_bytes(b"") == []


def test_truncated_bulk_raises_eof():
    with pytest.raises(EOFError):
        parse_bytes(b"$3\r\nab")


def test_lines_without_carriage_return_are_skipped():
    replies = parse_bytes(b"\n:1\r\n")
    assert [r.to_bytes() for r in replies] == [b":1\r\n"]


def test_null_item_in_array_becomes_empty():
    reply = parse_one(b"*2\r\n$-1\r\n$1\r\nb\r\n")
    assert reply.to_bytes() == MultiBulkReply([b"", b"b"]).to_bytes()


def test_bad_array_item_yields_error_then_partial_array():
    payloads = list(parse_stream(io.BytesIO(b"*2\r\n$1\r\na\r\nxx\r\n")))
    assert len(payloads) == 2
    assert isinstance(payloads[0].error, ProtocolError)
    assert payloads[1].data.to_bytes() == MultiBulkReply([b"a"]).to_bytes()


def test_illegal_array_header():
    with pytest.raises(ProtocolError, match="illegal array header"):
        parse_one(b"*x\r\n")


def test_full_resync_reads_rdb_body():
    data = b"+FULLRESYNC abc 0\r\n$3\r\nRDB:1\r\n"
    payloads = list(parse_stream(io.BytesIO(data)))
    assert payloads[0].data.to_bytes() == b"+FULLRESYNC abc 0\r\n"
    assert payloads[1].data.to_bytes() == BulkReply(b"RDB").to_bytes()
    assert payloads[2].data.to_bytes() == b":1\r\n"


def test_payload_defaults():
    payload = Payload()
    assert payload.data is None and payload.error is None