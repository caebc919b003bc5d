import random

from rivulet.core.heap import MinHeap


def test_empty_heap_returns_none() -> None:
    heap = MinHeap()

    assert heap.count() == 0
    assert heap.peek_min() is None
    assert heap.extract_min() is None


def test_insert_and_extract_in_ascending_order() -> None:
    heap = MinHeap([5, 3, 8, 1, 9, 2])

    assert heap.peek_min() == 1
    assert [heap.extract_min() for _ in range(6)] == [1, 2, 3, 5, 8, 9]
    assert heap.extract_min() is None


def test_single_element_extract() -> None:
    heap = MinHeap()
    heap.insert(42)

    assert heap.extract_min() == 42
    assert len(heap) == 0


def test_extract_and_insert_on_empty_heap_inserts() -> None:
    heap = MinHeap()

    assert heap.extract_and_insert(7) is None
    assert heap.count() == 1
    assert heap.peek_min() == 7


def test_extract_and_insert_replaces_root_when_greater() -> None:
    heap = MinHeap([3, 5, 7])

    assert heap.extract_and_insert(6) == 3
    assert heap.drain_sorted() == [5, 6, 7]


def test_extract_and_insert_discards_smaller_or_equal_item() -> None:
    heap = MinHeap([3, 5, 7])

    assert heap.extract_and_insert(1) == 3
    assert heap.extract_and_insert(3) == 3
    assert heap.drain_sorted() == [3, 5, 7]


def test_comparator_builds_max_heap() -> None:
    heap = MinHeap([4, 1, 9, 6], comparator=lambda a, b: b - a)

    assert heap.peek_min() == 9
    assert heap.drain_sorted() == [9, 6, 4, 1]


def test_iteration_is_sorted_and_non_destructive() -> None:
    heap = MinHeap([4, 2, 9, 1])

    assert list(heap) == [1, 2, 4, 9]
    assert heap.count() == 4


def test_peek_min_tracks_naive_minimum_under_random_operations() -> None:
    rng = random.Random(1234)
    heap = MinHeap()
    shadow: list[int] = []

    for _ in range(2000):
        op = rng.random()
        value = rng.randint(-500, 500)
        if op < 0.5:
            heap.insert(value)
            shadow.append(value)
        elif op < 0.75:
            got = heap.extract_min()
            if shadow:
                shadow.sort()
                assert got == shadow.pop(0)
            else:
                assert got is None
        else:
            old = heap.extract_and_insert(value)
            if not shadow:
                assert old is None
                shadow.append(value)
            else:
                shadow.sort()
                assert old == shadow[0]
                if value > shadow[0]:
                    shadow[0] = value
        assert heap.count() == len(shadow)
        assert heap.peek_min() == (min(shadow) if shadow else None)

    assert heap.drain_sorted() == sorted(shadow)


def _by_key(a, b) -> int:
    return (a[0] > b[0]) - (a[0] < b[0])


def test_sift_down_prefers_left_child_on_ties() -> None:
    heap = MinHeap([(0, "root"), (1, "left"), (1, "right"), (5, "last")], comparator=_by_key)

    assert heap.extract_min() == (0, "root")
    assert heap.peek_min() == (1, "left")
    assert heap.extract_min() == (1, "left")
    assert heap.extract_min() == (1, "right")


def test_extract_and_insert_prefers_left_child_on_ties() -> None:
    heap = MinHeap([(0, "root"), (1, "left"), (1, "right")], comparator=_by_key)

    assert heap.extract_and_insert((9, "new")) == (0, "root")
    assert heap.peek_min() == (1, "left")
