"""Tests for the plain and indexed binary min-heaps."""

from __future__ import annotations

import random

import pytest

from ssspid.exceptions import AlgorithmError, HeapContractError
from ssspid.heap import RETIRED, IndexedMinHeap, MinHeap
from ssspid.records import DistanceRecord


def _rec(key: float, vertex: int = 0) -> DistanceRecord:
    return DistanceRecord(vertex=vertex, distance=key, predecessor=vertex)


def test_minheap_pops_in_order():
    keys = [7, 2, 9, 4, 1, 8, 3]
    h: MinHeap[int] = MinHeap(len(keys), validate=True)
    for k in keys:
        h.push(k)
        assert h.is_valid()
    out = []
    while not h.is_empty():
        out.append(h.pop())
        assert h.is_valid()
    assert out == sorted(keys)


def test_minheap_repr_matches_array_order():
    h: MinHeap[int] = MinHeap(3)
    assert repr(h) == "[]"
    for k in (5, 3, 8):
        h.push(k)
    assert repr(h) == "[ 3 , 5 , 8 ]"
    assert h.peek() == 3
    assert len(h) == 3


def test_capacity_bound_is_enforced():
    h: MinHeap[int] = MinHeap(2)
    h.push(1)
    h.push(2)
    with pytest.raises(AssertionError):
        h.push(3)
    # The failed push must not have overwritten anything.
    assert [h.pop(), h.pop()] == [1, 2]

    ih: IndexedMinHeap[int] = IndexedMinHeap(1)
    ih.push(4)
    with pytest.raises(HeapContractError):
        ih.push(5)
    assert ih.pop() == 4


def test_pop_from_empty_heap_fails():
    with pytest.raises(HeapContractError):
        MinHeap(1).pop()
    with pytest.raises(HeapContractError):
        IndexedMinHeap(1).pop()
    with pytest.raises(HeapContractError):
        IndexedMinHeap(1).peek()


@pytest.mark.parametrize("capacity", [0, -3, 2.5, True])
def test_capacity_must_be_positive_int(capacity):
    with pytest.raises(ValueError):
        IndexedMinHeap(capacity)


def test_indexed_pop_ordering_distinct_keys():
    rnd = random.Random(3)
    keys = rnd.sample(range(1000), 64)
    h: IndexedMinHeap[int] = IndexedMinHeap(len(keys), validate=True)
    for k in keys:
        h.push(k)
    assert [h.pop() for _ in keys] == sorted(keys)
    assert h.is_empty()


def test_decrease_key_moves_element_to_root():
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(3, validate=True)
    recs = {k: _rec(k, vertex=k) for k in (5, 3, 8)}
    ids = {k: h.push(r) for k, r in recs.items()}

    recs[8].update(1, 0)
    h.reposition(ids[8])

    top = h.pop()
    assert top is recs[8]
    assert top.distance == 1
    assert [h.pop().distance, h.pop().distance] == [3, 5]


def test_reposition_after_key_increase_sifts_down():
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(4, validate=True)
    recs = [_rec(k, vertex=i) for i, k in enumerate((1, 4, 6, 9))]
    ids = [h.push(r) for r in recs]

    recs[0].distance = 10  # raised externally, not through update()
    h.reposition(ids[0])

    assert h.peek() is recs[1]
    assert [h.pop().vertex for _ in recs] == [1, 2, 3, 0]


def test_slot_ids_are_not_aliased_after_pop():
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(3, validate=True)
    a, b, c = _rec(1, 0), _rec(2, 1), _rec(0, 2)
    id_a = h.push(a)
    id_b = h.push(b)
    assert h.pop() is a
    assert id_a not in h
    assert id_b in h

    id_c = h.push(c)
    assert id_c != id_b
    assert h.get(id_b) is b
    assert h.get(id_c) is c
    assert sorted(h.active_ids()) == sorted([id_b, id_c])
    assert h.is_valid()


def test_retired_slot_id_is_rejected():
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(2)
    sid = h.push(_rec(1))
    h.pop()
    with pytest.raises(HeapContractError):
        h.reposition(sid)
    with pytest.raises(HeapContractError):
        h.get(sid)
    with pytest.raises(HeapContractError):
        h.reposition(7)


def test_ids_handed_out_in_order_when_pool_is_fresh():
    h: IndexedMinHeap[int] = IndexedMinHeap(4)
    assert [h.push(k) for k in (9, 8, 7, 6)] == [0, 1, 2, 3]


def test_position_table_tracks_swaps():
    h: IndexedMinHeap[int] = IndexedMinHeap(5)
    ids = [h.push(k) for k in (50, 40, 30, 20, 10)]
    for pos, sid in enumerate(h.active_ids()):
        assert h.position(sid) == pos
    # The last pushed (smallest) element ended at the root.
    assert h.position(ids[-1]) == 0
    assert h.get(ids[-1]) == 10


def test_random_operations_preserve_invariants():
    rnd = random.Random(11)
    capacity = 40
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(capacity, validate=True)
    live = {}
    for step in range(2000):
        op = rnd.random()
        if live and (op < 0.3 or len(live) == capacity):
            expected = min(r.distance for r in live.values())
            popped = h.pop()
            assert popped.distance == expected
            sid = next(k for k, r in live.items() if r is popped)
            del live[sid]
        elif live and op < 0.6:
            sid = rnd.choice(list(live))
            rec = live[sid]
            rec.update(rec.distance - rnd.uniform(0.1, 50.0), 0)
            h.reposition(sid)
        else:
            rec = _rec(rnd.uniform(0, 100), vertex=step)
            sid = h.push(rec)
            assert sid not in live
            live[sid] = rec

        assert h.is_valid()
        assert len(h) == len(live)
        assert len(set(h.active_ids())) == len(live)
        for sid, rec in live.items():
            assert h.get(sid) is rec
            assert h.active_ids()[h.position(sid)] == sid


def test_validate_flag_reports_corruption():
    h: IndexedMinHeap[DistanceRecord] = IndexedMinHeap(3, validate=True)
    low, high = _rec(1), _rec(5)
    h.push(low)
    h.push(high)
    high.distance = 0  # changed without reposition
    with pytest.raises(AlgorithmError):
        h.push(_rec(9))


def test_is_valid_detects_broken_id_table():
    h: IndexedMinHeap[int] = IndexedMinHeap(3)
    sid = h.push(1)
    h.push(2)
    assert h.is_valid()
    h._pos_of_id[sid] = RETIRED
    assert not h.is_valid()
