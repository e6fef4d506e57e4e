"""Tests for span claims."""

from anonimizador import RangeTracker


def test_claim_disjoint_spans():
    t = RangeTracker()
    assert t.try_claim(10, 20)
    assert t.try_claim(0, 5)
    assert t.try_claim(30, 40)
    assert t.spans() == [(0, 5), (10, 20), (30, 40)]
    assert len(t) == 3


def test_overlapping_claim_is_rejected_without_change():
    t = RangeTracker()
    assert t.try_claim(10, 20)
    assert not t.try_claim(15, 25)
    assert not t.try_claim(5, 11)
    assert not t.try_claim(12, 18)
    assert not t.try_claim(0, 100)
    assert not t.try_claim(10, 20)
    assert t.spans() == [(10, 20)]


def test_adjacent_spans_do_not_overlap():
    t = RangeTracker()
    assert t.try_claim(10, 20)
    assert t.try_claim(20, 25)
    assert t.try_claim(5, 10)


def test_empty_span_is_never_claimed():
    t = RangeTracker()
    assert not t.try_claim(3, 3)
    assert not t.try_claim(5, 2)
    assert len(t) == 0


def test_is_claimed():
    t = RangeTracker()
    t.try_claim(10, 20)
    assert t.is_claimed(10)
    assert t.is_claimed(19)
    assert not t.is_claimed(20)
    assert not t.is_claimed(9)
