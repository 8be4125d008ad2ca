import pytest

from dosevasive.ntt import PRIMES, NamedTimestampTree, Node, table_size_for


@pytest.mark.parametrize(
    "size, expected",
    [(1, 53), (53, 53), (54, 97), (3079, 3079), (3097, 6151), (4294967291, 4294967291)],
)
def test_table_size_for_rounds_up_to_prime(size, expected):
    assert table_size_for(size) == expected


def test_table_size_for_too_large():
    with pytest.raises(ValueError):
        table_size_for(PRIMES[-1] + 1)


def test_tree_size_is_rounded():
    assert NamedTimestampTree(100).size == 193


def test_hashcode_in_range_and_stable():
    tree = NamedTimestampTree(53)
    for key in ["10.0.0.1", "10.0.0.1_/index.html", "WHITELIST_127.0.0.*", "h\u00e9llo"]:
        code = tree.hashcode(key)
        assert 0 <= code < tree.size
        assert tree.hashcode(key) == code


def test_hashcode_of_empty_key():
    assert NamedTimestampTree(53).hashcode("") == 0


def test_insert_and_find():
    tree = NamedTimestampTree(53)
    node = tree.insert("10.0.0.1", 1000)
    assert node == Node("10.0.0.1", 1000, 0)
    assert tree.find("10.0.0.1") is node
    assert tree.find("10.0.0.2") is None
    assert len(tree) == 1


def test_insert_existing_resets_count_and_timestamp():
    tree = NamedTimestampTree(53)
    node = tree.insert("key", 5)
    node.count = 7
    again = tree.insert("key", 9)
    assert again is node
    assert node.count == 0
    assert node.timestamp == 9
    assert len(tree) == 1


def test_colliding_keys_are_chained_in_insertion_order():
    tree = NamedTimestampTree(53)
    assert tree.hashcode("") == tree.hashcode("5")
    tree.insert("5", 1)
    tree.insert("", 2)
    assert [node.key for node in tree] == ["5", ""]
    assert tree.find("").timestamp == 2
    assert tree.find("5").timestamp == 1


def test_delete_from_chain_keeps_others():
    tree = NamedTimestampTree(53)
    tree.insert("5", 1)
    tree.insert("", 2)
    tree.delete("5")
    assert "5" not in tree
    assert "" in tree
    assert len(tree) == 1


def test_delete_missing_raises():
    tree = NamedTimestampTree(53)
    tree.insert("present", 1)
    with pytest.raises(KeyError):
        tree.delete("absent")
    assert len(tree) == 1


def test_iteration_visits_every_key_in_bucket_order():
    tree = NamedTimestampTree(53)
    keys = [f"192.168.1.{n}_SITE" for n in range(40)]
    for key in keys:
        tree.insert(key, 0)
    seen = list(tree)
    assert sorted(node.key for node in seen) == sorted(keys)
    codes = [tree.hashcode(node.key) for node in seen]
    assert codes == sorted(codes)


def test_delete_while_iterating_empties_tree():
    tree = NamedTimestampTree(53)
    for n in range(20):
        tree.insert(f"k{n}", n)
    for node in tree:
        tree.delete(node.key)
    assert len(tree) == 0
    assert list(tree) == []


def test_clear():
    tree = NamedTimestampTree(53)
    tree.insert("a", 1)
    tree.insert("b", 2)
    tree.clear()
    assert len(tree) == 0
    assert tree.find("a") is None


def test_contains_rejects_non_strings():
    tree = NamedTimestampTree(53)
    tree.insert("1", 0)
    assert "1" in tree
    assert 1 not in tree