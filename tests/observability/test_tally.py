#!filepath: tests/observability/test_tally.py

from steplog.observability.tally import Tally


def test_unknown_name_reads_zero_without_insert():
    t = Tally()

    assert t.get("missing") == 0.0
    assert "missing" not in t
    assert len(t) == 0


def test_add_keeps_insertion_order():
    t = Tally()
    t.add("c", 1.0)
    t.add("a", 2.0)
    t.add("b", 3.0)
    t.add("c", 1.5)

    assert t.names() == ["c", "a", "b"]
    assert t.values() == [2.5, 2.0, 3.0]
    assert t.total() == 7.5


def test_reset_keeps_keys():
    t = Tally()
    t.add("x", 4.0)
    t.add("y", -1.0)
    t.reset()

    assert t.names() == ["x", "y"]
    assert t.values() == [0.0, 0.0]


def test_erase_and_reinsert_goes_to_end():
    t = Tally()
    t.add("a", 1.0)
    t.add("b", 1.0)
    t.erase("a")
    t.erase("not-there")  # no-op

    assert t.get("a") == 0.0
    t.add("a", 5.0)
    assert t.names() == ["b", "a"]


def test_touch_does_not_change_existing_value():
    t = Tally()
    t.add("a", 3.0)
    t.touch("a")
    t.touch("b")

    assert t.items() == [("a", 3.0), ("b", 0.0)]
