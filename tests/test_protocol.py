import pytest

from redstore.protocol import (
    ArgNumErrReply,
    BulkReply,
    EmptyMultiBulkReply,
    ErrorReply,
    IntReply,
    MultiBulkReply,
    MultiRawReply,
    NoReply,
    NullBulkReply,
    OkReply,
    PongReply,
    ProtocolErrReply,
    QueuedReply,
    StandardErrReply,
    StatusReply,
    SyntaxErrReply,
    UnknownErrReply,
    WrongTypeErrReply,
    is_empty_multi_bulk_reply,
    is_error_reply,
    is_ok_reply,
)


def test_constant_replies():
    assert PongReply().to_bytes() == b"+PONG\r\n"
    assert OkReply().to_bytes() == b"+OK\r\n"
    assert NullBulkReply().to_bytes() == b"$-1\r\n"
    assert EmptyMultiBulkReply().to_bytes() == b"*0\r\n"
    assert NoReply().to_bytes() == b""
    assert QueuedReply().to_bytes() == b"+QUEUED\r\n"


def test_int_reply():
    assert IntReply(42).to_bytes() == b":42\r\n"


def test_bulk_reply():
    assert BulkReply(b"abc").to_bytes() == b"$3\r\nabc\r\n"


def test_bulk_reply_binary_safe():
    data = BulkReply(b"a\r\nb").to_bytes()
    assert data.endswith(b"a\r\nb\r\n")


def test_bulk_reply_none_is_null_bulk():
    assert BulkReply(None).to_bytes() == NullBulkReply().to_bytes()


def test_multi_bulk_reply_with_nil():
    assert MultiBulkReply([b"a", None]).to_bytes() == b"*2\r\n$1\r\na\r\n$-1\r\n"


def test_empty_multi_bulk_matches_empty_reply():
    assert MultiBulkReply([]).to_bytes() == EmptyMultiBulkReply().to_bytes()
    assert MultiRawReply([]).to_bytes() == EmptyMultiBulkReply().to_bytes()


def test_multi_raw_reply_concatenates_items():
    items = [IntReply(1), NullBulkReply(), StatusReply("OK")]
    data = MultiRawReply(items).to_bytes()
    assert data.endswith(b"".join(item.to_bytes() for item in items))
    assert data.startswith(b"*3")


def test_status_reply_ok_equals_ok_bytes():
    assert StatusReply("OK").to_bytes() == OkReply().to_bytes()
    assert StatusReply("PONG").to_bytes() == PongReply().to_bytes()


def test_reply_equality():
    assert BulkReply(b"x") == BulkReply(b"x")
    assert BulkReply(b"x") != BulkReply(b"y")
    assert StatusReply("OK") != OkReply()


def test_error_replies_bytes():
    assert UnknownErrReply().to_bytes() == b"-Err unknown\r\n"
    assert SyntaxErrReply().to_bytes() == b"-Err syntax error\r\n"
    assert WrongTypeErrReply().to_bytes() == (
        b"-WRONGTYPE Operation against a key holding the wrong kind of value\r\n"
    )
    assert ArgNumErrReply("get").to_bytes() == (
        b"-ERR wrong number of arguments for 'get' command\r\n"
    )
    assert ProtocolErrReply("bad").to_bytes() == b"-ERR Protocol error: 'bad'\r\n"


def test_error_messages():
    assert str(UnknownErrReply()) == "Err unknown"
    assert str(ArgNumErrReply("get")) == "ERR wrong number of arguments for 'get' command"
    assert str(ProtocolErrReply("bad")) == "ERR Protocol error 'bad' command"
    assert str(StandardErrReply("ERR unknown")) == "ERR unknown"


def test_standard_error_round_trip():
    reply = StandardErrReply("ERR unknown")
    assert reply.to_bytes() == b"-" + str(reply).encode() + b"\r\n"


def test_error_reply_can_be_raised():
    reply = StandardErrReply("client closed")
    assert str(reply) == "client closed"
    assert reply.to_bytes() == b"-client closed\r\n"
    assert is_error_reply(reply)
    with pytest.raises(ErrorReply) as info:
        raise reply
    assert info.value is reply
    assert info.value.to_bytes() == b"-client closed\r\n"


def test_predicates():
    assert is_ok_reply(OkReply())
    assert is_ok_reply(StatusReply("OK"))
    assert not is_ok_reply(PongReply())
    assert is_error_reply(SyntaxErrReply())
    assert is_error_reply(StandardErrReply("ERR x"))
    assert not is_error_reply(IntReply(1))
    assert not is_error_reply(NoReply())
    assert is_empty_multi_bulk_reply(EmptyMultiBulkReply())
    assert is_empty_multi_bulk_reply(MultiBulkReply([]))
    assert not is_empty_multi_bulk_reply(MultiBulkReply([b"a"]))