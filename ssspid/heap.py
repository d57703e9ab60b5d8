"""Fixed-capacity binary min-heaps.

Two variants share the same array layout and sift routines:

* :class:`MinHeap` stores bare element references.
* :class:`IndexedMinHeap` additionally hands out a stable *slot id* for every
  pushed element. The id lets the caller re-heapify that element with
  :meth:`IndexedMinHeap.reposition` after changing its key in place, which is
  how the solver performs decrease-key without re-inserting stale entries.

Elements only need to support ``<`` and ``<=``. The heap never copies or
inspects them beyond those comparisons, so the caller may mutate an element
it still holds (and then call ``reposition``).

The tree is folded into an array: the children of position ``i`` are
``2i + 1`` and ``2i + 2`` and positions ``0 .. size-1`` satisfy the min-heap
property. All storage is allocated once in the constructor.
"""

from __future__ import annotations

from typing import Any, Generic, List, Optional, Protocol, TypeVar

from .exceptions import AlgorithmError, HeapContractError


class Comparable(Protocol):
    """Element contract required by the heaps."""

    def __lt__(self, other: Any) -> bool: ...

    def __le__(self, other: Any) -> bool: ...


T = TypeVar("T", bound=Comparable)

#: Marker stored in the id-to-position table for ids that are not in use.
RETIRED = -1


class _ArrayHeap(Generic[T]):
    """Array storage and sift routines shared by both heap variants."""

    def __init__(self, capacity: int, validate: bool = False) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("capacity must be a positive integer.")
        self._capacity = capacity
        self._validate = validate
        self._elements: List[Optional[T]] = [None] * capacity
        self._size = 0

    # ---- positions ----------------------------------------------------

    @staticmethod
    def _left(i: int) -> int:
        return 2 * i + 1

    @staticmethod
    def _right(i: int) -> int:
        return 2 * i + 2

    @staticmethod
    def _parent(i: int) -> int:
        """Return the parent position of ``i``; the root is its own parent."""
        if i == 0:
            return 0
        return (i - 1) // 2

    # ---- comparisons --------------------------------------------------

    def _lt(self, pos_1: int, pos_2: int) -> bool:
        return self._elements[pos_1] < self._elements[pos_2]  # type: ignore[operator]

    def _le(self, pos_1: int, pos_2: int) -> bool:
        return self._elements[pos_1] <= self._elements[pos_2]  # type: ignore[operator]

    # ---- mutation primitives -----------------------------------------

    def _swap(self, pos_a: int, pos_b: int) -> None:
        els = self._elements
        els[pos_a], els[pos_b] = els[pos_b], els[pos_a]

    def _sift_up(self, pos: int) -> int:
        """Swap ``pos`` towards the root while it is strictly less than its parent.

        Returns:
            The final position of the element.
        """
        while pos != 0:
            parent = self._parent(pos)
            if not self._lt(pos, parent):
                break
            self._swap(pos, parent)
            pos = parent
        return pos

    def _sift_down(self, pos: int) -> int:
        """Swap ``pos`` with its smaller child while that child is strictly less.

        Returns:
            The final position of the element.
        """
        size = self._size
        while True:
            left = self._left(pos)
            right = self._right(pos)
            smallest = pos
            if left < size and self._lt(left, smallest):
                smallest = left
            if right < size and self._lt(right, smallest):
                smallest = right
            if smallest == pos:
                return pos
            self._swap(pos, smallest)
            pos = smallest

    # ---- checks -------------------------------------------------------

    def _require_room(self) -> None:
        if self._size >= self._capacity:
            raise HeapContractError(f"push into a full heap (capacity {self._capacity})")

    def _require_items(self) -> None:
        if self._size == 0:
            raise HeapContractError("pop from an empty heap")

    def _heap_order_ok(self) -> bool:
        for i in range(self._size):
            for child in (self._left(i), self._right(i)):
                if child < self._size and not self._le(i, child):
                    return False
        return True

    def is_valid(self) -> bool:
        """Return ``True`` if every parent is ``<=`` its children."""
        return self._heap_order_ok()

    def _check(self) -> None:
        if self._validate and not self.is_valid():
            raise AlgorithmError(f"heap invariant violated: {self!r}")

    # ---- public API ---------------------------------------------------

    @property
    def capacity(self) -> int:
        """Maximum number of elements the heap can hold."""
        return self._capacity

    def is_empty(self) -> bool:
        """Return ``True`` when the heap holds no element."""
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def peek(self) -> T:
        """Return the minimum element without removing it."""
        self._require_items()
        return self._elements[0]  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._size == 0:
            return "[]"
        return "[ " + " , ".join(repr(e) for e in self._elements[: self._size]) + " ]"


class MinHeap(_ArrayHeap[T]):
    """Binary min-heap of element references with a fixed capacity.

    Args:
        capacity: Maximum number of elements held at once.
        validate: Re-check the heap property after every mutation and raise
            :class:`~ssspid.exceptions.AlgorithmError` if it is broken.

    Examples:
        ```python
        >>> h = MinHeap(3)
        >>> for x in (5, 3, 8):
        ...     h.push(x)
        >>> h.pop(), h.pop(), h.pop()
        (3, 5, 8)
        ```
    """

    def push(self, element: T) -> None:
        """Insert ``element`` at the first free cell and sift it up.

        Raises:
            HeapContractError: If the heap is already at capacity.
        """
        self._require_room()
        pos = self._size
        self._elements[pos] = element
        self._size += 1
        self._sift_up(pos)
        self._check()

    def pop(self) -> T:
        """Remove and return the minimum element.

        The last element is moved to the root and sifted down.

        Raises:
            HeapContractError: If the heap is empty.
        """
        self._require_items()
        root = self._elements[0]
        last = self._size - 1
        self._elements[0] = self._elements[last]
        self._elements[last] = None
        self._size = last
        if last:
            self._sift_down(0)
        self._check()
        return root  # type: ignore[return-value]


class IndexedMinHeap(_ArrayHeap[T]):
    """Binary min-heap whose elements are addressable through slot ids.

    Every :meth:`push` returns a slot id in ``0 .. capacity-1``. The id stays
    bound to its element until that element is popped; only then does it go
    back to the free pool, so two live elements never share an id. Between
    push and pop the caller may lower (or raise) the element's key in place
    and call :meth:`reposition` with the id to restore heap order.

    Internally three arrays of length ``capacity`` are kept: the element array
    and the parallel id array (together the heap slots), the id-to-position
    table, and a stack of free ids.

    Args:
        capacity: Maximum number of elements held at once.
        validate: Re-check heap order and id tables after every mutation.
    """

    def __init__(self, capacity: int, validate: bool = False) -> None:
        super().__init__(capacity, validate=validate)
        self._ids: List[int] = [RETIRED] * capacity
        self._pos_of_id: List[int] = [RETIRED] * capacity
        # Popped from the end, so ids are first handed out as 0, 1, 2, ...
        self._free_ids: List[int] = list(range(capacity - 1, -1, -1))

    def _swap(self, pos_a: int, pos_b: int) -> None:
        super()._swap(pos_a, pos_b)
        ids = self._ids
        ids[pos_a], ids[pos_b] = ids[pos_b], ids[pos_a]
        self._pos_of_id[ids[pos_a]] = pos_a
        self._pos_of_id[ids[pos_b]] = pos_b

    def _position(self, slot_id: int) -> int:
        if slot_id not in self:
            raise HeapContractError(f"slot id {slot_id!r} is not active")
        return self._pos_of_id[slot_id]

    def __contains__(self, slot_id: object) -> bool:
        """Return ``True`` if ``slot_id`` is currently bound to an element."""
        return (
            isinstance(slot_id, int)
            and 0 <= slot_id < self._capacity
            and self._pos_of_id[slot_id] != RETIRED
        )

    def push(self, element: T) -> int:
        """Insert ``element`` and return its slot id.

        Raises:
            HeapContractError: If the heap is already at capacity.
        """
        self._require_room()
        slot_id = self._free_ids.pop()
        pos = self._size
        self._elements[pos] = element
        self._ids[pos] = slot_id
        self._pos_of_id[slot_id] = pos
        self._size += 1
        self._sift_up(pos)
        self._check()
        return slot_id

    def pop(self) -> T:
        """Remove and return the minimum element, retiring its slot id.

        Raises:
            HeapContractError: If the heap is empty.
        """
        self._require_items()
        root = self._elements[0]
        root_id = self._ids[0]
        last = self._size - 1
        if last:
            self._swap(0, last)
        self._elements[last] = None
        self._ids[last] = RETIRED
        self._pos_of_id[root_id] = RETIRED
        self._free_ids.append(root_id)
        self._size = last
        if last:
            self._sift_down(0)
        self._check()
        return root  # type: ignore[return-value]

    def reposition(self, slot_id: int) -> None:
        """Restore heap order after the key of ``slot_id``'s element changed.

        One upward sift runs, then one downward sift from wherever the element
        ended up. For a single monotonic key change only one of them moves it.

        Raises:
            HeapContractError: If ``slot_id`` is not active.
        """
        pos = self._sift_up(self._position(slot_id))
        self._sift_down(pos)
        self._check()

    def get(self, slot_id: int) -> T:
        """Return the element bound to ``slot_id``.

        Raises:
            HeapContractError: If ``slot_id`` is not active.
        """
        return self._elements[self._position(slot_id)]  # type: ignore[return-value]

    def position(self, slot_id: int) -> int:
        """Return the array position currently holding ``slot_id``."""
        return self._position(slot_id)

    def active_ids(self) -> List[int]:
        """Return the ids of the live elements in array order."""
        return self._ids[: self._size]

    def is_valid(self) -> bool:
        """Check heap order, the id-to-position table and the free pool."""
        if not self._heap_order_ok():
            return False
        live = set()
        for pos in range(self._size):
            slot_id = self._ids[pos]
            if slot_id in live or not 0 <= slot_id < self._capacity:
                return False
            if self._pos_of_id[slot_id] != pos:
                return False
            live.add(slot_id)
        free = set(self._free_ids)
        if len(free) != len(self._free_ids) or free & live:
            return False
        if len(free) + len(live) != self._capacity:
            return False
        return all(self._pos_of_id[i] == RETIRED for i in free)


__all__ = ["Comparable", "IndexedMinHeap", "MinHeap", "RETIRED"]
