import pytest

from redstore.consistenthash import HashRing, get_partition_key


def test_hash_ring_default_hash():
    ring = HashRing(3)
    ring.add_node("a", "b", "c", "d")
    assert ring.pick_node("zxc") == "a"
    assert ring.pick_node("123{abc}") == "b"
    assert ring.pick_node("abc") == "b"


def test_empty_ring():
    ring = HashRing(3)
    assert ring.is_empty()
    assert ring.pick_node("anything") is None
    ring.add_node("")
    assert ring.is_empty()


def test_custom_hash_function():
    ring = HashRing(3, lambda data: int(data.decode()))
    ring.add_node("6", "4", "2")
    assert not ring.is_empty()
    assert ring.pick_node("2") == "2"
    assert ring.pick_node("11") == "2"
    assert ring.pick_node("23") == "4"
    assert ring.pick_node("27") == "2"
    ring.add_node("8")
    assert ring.pick_node("27") == "8"


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("123{abc}", "abc"),
        ("plain", "plain"),
        ("{}x", "{}x"),
        ("a{b", "a{b"),
        ("{user1}.following", "user1"),
    ],
)
def test_get_partition_key(key, expected):
    assert get_partition_key(key) == expected


def test_hash_tag_keys_land_on_same_node():
    ring = HashRing(5)
    ring.add_node("n1", "n2", "n3")
    assert ring.pick_node("{tag}a") == ring.pick_node("{tag}b") == ring.pick_node("tag")