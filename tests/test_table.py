# tests/test_table.py
import pytest

from wordcount.table import FrequencyTable, spill


class ListWriter:
    def __init__(self):
        self.rows = []

    def write_sorted(self, pairs):
        self.rows.extend(pairs)
        return len(pairs)


def test_add_and_drain_sorted():
    t = FrequencyTable(3)
    for tok in ["b", "a", "b", "c"]:
        t.add(tok)
    assert len(t) == 3 and t.is_full()
    assert t.get("b") == 2
    assert t.drain() == [("a", 1), ("b", 2), ("c", 1)]
    assert len(t) == 0
    assert t.flushes == 1
    assert t.peak == 3


def test_existing_key_never_needs_room():
    t = FrequencyTable(1)
    t.add("a", 5)
    assert not t.needs_room("a")
    assert t.needs_room("b")
    t.add("a", 2)
    assert t.get("a") == 7


def test_add_past_capacity_raises():
    t = FrequencyTable(2)
    t.add("a")
    t.add("b")
    with pytest.raises(OverflowError):
        t.add("c")


def test_zero_capacity_rejected():
    with pytest.raises(ValueError):
        FrequencyTable(0)


def test_spill_writes_and_clears():
    t = FrequencyTable(4)
    t.add("z", 2)
    t.add("m", 1)
    w = ListWriter()
    assert spill(t, w) == 2
    assert w.rows == [("m", 1), ("z", 2)]
    assert len(t) == 0
