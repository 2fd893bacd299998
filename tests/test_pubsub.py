from redstore.connection import FakeConn
from redstore.parser import parse_one
from redstore.protocol import MultiBulkReply, is_error_reply
from redstore.pubsub import UNSUBSCRIBE_NOTHING, Hub, make_msg
from redstore.utils import to_cmd_line


def test_publish():
    hub = Hub()
    channel = "chan1"
    msg = "hello"
    conn = FakeConn()
    hub.subscribe(conn, to_cmd_line(channel))
    conn.clean()
    hub.publish(to_cmd_line(channel, msg))
    ret = parse_one(conn.getvalue())
    expected = MultiBulkReply([b"message", channel.encode(), msg.encode()])
    assert ret.to_bytes() == expected.to_bytes()

    hub.unsubscribe(conn, to_cmd_line(channel))
    conn.clean()
    hub.publish(to_cmd_line(channel, msg))
    assert conn.getvalue() == b""

    hub.subscribe(conn, to_cmd_line(channel))
    hub.unsubscribe(conn, to_cmd_line())
    conn.clean()
    hub.publish(to_cmd_line(channel, msg))
    assert conn.getvalue() == b""


def test_make_msg():
    assert make_msg("subscribe", "news", 1) == b"*3\r\n$9\r\nsubscribe\r\n$4\r\nnews\r\n:1\r\n"


def test_subscribe_notifies_once():
    hub = Hub()
    conn = FakeConn()
    hub.subscribe(conn, to_cmd_line("a", "b"))
    assert conn.getvalue() == make_msg("subscribe", "a", 1) + make_msg("subscribe", "b", 2)
    conn.clean()
    hub.subscribe(conn, to_cmd_line("a"))
    assert conn.getvalue() == b""
    assert conn.subs_count() == 2


def test_publish_counts_subscribers():
    hub = Hub()
    first, second = FakeConn(), FakeConn()
    hub.subscribe(first, to_cmd_line("ch"))
    hub.subscribe(second, to_cmd_line("ch"))
    assert hub.publish(to_cmd_line("ch", "m")).to_bytes() == b":2\r\n"
    assert hub.publish(to_cmd_line("other", "m")).to_bytes() == b":0\r\n"


def test_publish_wrong_arity():
    hub = Hub()
    reply = hub.publish(to_cmd_line("only"))
    assert is_error_reply(reply)
    assert reply.to_bytes() == b"-ERR wrong number of arguments for 'publish' command\r\n"


def test_unsubscribe_nothing():
    hub = Hub()
    conn = FakeConn()
    hub.unsubscribe(conn, to_cmd_line())
    assert conn.getvalue() == UNSUBSCRIBE_NOTHING


def test_unsubscribe_notifies_with_remaining_count():
    hub = Hub()
    conn = FakeConn()
    hub.subscribe(conn, to_cmd_line("a", "b"))
    conn.clean()
    hub.unsubscribe(conn, to_cmd_line("a"))
    assert conn.getvalue() == make_msg("unsubscribe", "a", 1)


def test_unsubscribe_all():
    hub = Hub()
    conn = FakeConn()
    hub.subscribe(conn, to_cmd_line("a", "b"))
    hub.unsubscribe_all(conn)
    assert conn.subs_count() == 0
    assert hub.publish(to_cmd_line("a", "m")).to_bytes() == b":0\r\n"
    assert hub.publish(to_cmd_line("b", "m")).to_bytes() == b":0\r\n"


def test_closed_subscriber_does_not_break_publish():
    hub = Hub()
    closed, open_conn = FakeConn(), FakeConn()
    hub.subscribe(closed, to_cmd_line("ch"))
    hub.subscribe(open_conn, to_cmd_line("ch"))
    closed.close()
    open_conn.clean()
    assert hub.publish(to_cmd_line("ch", "m")).to_bytes() == b":2\r\n"
    expected = MultiBulkReply([b"message", b"ch", b"m"]).to_bytes()
    assert open_conn.getvalue() == expected