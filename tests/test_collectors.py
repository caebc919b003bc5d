import math
import random

import pytest

from rivulet import Stream, collectors
from rivulet.core.collectors import Statistics
from rivulet.core.interfaces import Collector, FunctionCollector


def test_grouping_by_parity() -> None:
    groups = Stream.int_range_closed(1, 10).collect(collectors.grouping_by(lambda x: x % 2))

    assert groups == {0: [2, 4, 6, 8, 10], 1: [1, 3, 5, 7, 9]}
    assert list(groups) == [1, 0]


def test_to_list_keeps_duplicates_and_order() -> None:
    data = [1, 1, 2, 1, 1, 3, 1, 1, 4]

    assert Stream.of(data).collect(collectors.to_list()) == data


def test_to_set_keeps_first_insertion_order() -> None:
    result = Stream.of([3, 1, 3, 2, 1, 4]).collect(collectors.to_set())

    assert result == [3, 1, 2, 4]


def test_to_set_with_key_keeps_first_element_per_key() -> None:
    rows = [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}, {"id": 1, "v": "c"}]

    result = Stream.of(rows).collect(collectors.to_set(key=lambda r: r["id"]))

    assert result == [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}]


def test_to_set_rejects_unhashable_elements_without_key() -> None:
    with pytest.raises(TypeError):
        Stream.of([[1], [2]]).collect(collectors.to_set())


def test_summing_is_compensated() -> None:
    assert Stream.of([1.0, 1e100, 1.0, -1e100]).collect(collectors.summing()) == 2.0


def test_summing_with_mapper_and_empty_stream() -> None:
    rows = [{"usd": 1.5}, {"usd": 2.5}]

    assert Stream.of(rows).collect(collectors.summing(lambda r: r["usd"])) == 4.0
    assert Stream.empty().collect(collectors.summing()) == 0


def test_averaging() -> None:
    assert Stream.of([1, 2, 3, 4]).collect(collectors.averaging()) == 2.5
    assert Stream.of([1.0, 1e100, 1.0, -1e100]).collect(collectors.averaging()) == 0.5
    assert Stream.empty().collect(collectors.averaging()) == 0


def test_averaging_with_mapper() -> None:
    words = ["a", "abc", "ab"]

    assert Stream.of(words).collect(collectors.averaging(len)) == 2.0


def test_statistics() -> None:
    stats = Stream.of([4, 1, 7, 2]).collect(collectors.statistics())

    assert stats == Statistics(sum=14, count=4, avg=3.5, min=1, max=7)
    assert stats.as_dict() == {"sum": 14, "count": 4, "avg": 3.5, "min": 1, "max": 7}


def test_statistics_on_empty_stream() -> None:
    stats = Stream.empty().collect(collectors.statistics())

    assert stats.count == 0
    assert stats.sum == 0
    assert stats.avg == 0
    assert stats.min is None
    assert stats.max is None


def test_statistics_with_mapper() -> None:
    rows = [{"p": 2.0}, {"p": -1.0}]

    stats = Stream.of(rows).collect(collectors.statistics(lambda r: r["p"]))

    assert stats.min == -1.0
    assert stats.max == 2.0
    assert stats.avg == 0.5


def test_top_n_returns_largest_ascending() -> None:
    assert Stream.of([5, 1, 9, 3, 7, 2]).collect(collectors.top_n(3)) == [5, 7, 9]


def test_top_n_with_fewer_elements_than_k() -> None:
    assert Stream.of([3, 1, 2]).collect(collectors.top_n(10)) == [1, 2, 3]


def test_top_n_with_non_positive_k_is_empty() -> None:
    assert Stream.of([3, 1, 2]).collect(collectors.top_n(0)) == []
    assert Stream.of([3, 1, 2]).collect(collectors.top_n(-2)) == []


def test_top_n_refreshes_cached_minimum() -> None:
    # 5.5 beats the evicted 5 but not the surviving 6.
    assert Stream.of([5, 6, 7, 5.5]).collect(collectors.top_n(2)) == [6, 7]


def test_top_n_with_comparator() -> None:
    words = ["pear", "fig", "banana", "kiwi", "apple"]

    result = Stream.of(words).collect(collectors.top_n(2, lambda a, b: len(a) - len(b)))

    assert result == ["apple", "banana"]


def test_top_n_matches_sort_then_slice() -> None:
    rng = random.Random(7)
    for _ in range(200):
        data = [rng.randint(0, 50) for _ in range(rng.randint(0, 40))]
        k = rng.randint(0, 12)
        expected = sorted(data)[-k:] if k else []

        assert Stream.of(data).collect(collectors.top_n(k)) == expected


def test_collector_is_reusable_across_runs() -> None:
    collector = collectors.to_list()

    assert Stream.of([1, 2]).collect(collector) == [1, 2]
    assert Stream.of([3]).collect(collector) == [3]


def test_of_builds_custom_collector() -> None:
    fib = collectors.of(
        lambda: [0, 1],
        lambda acc, _: acc.__setitem__(slice(None), [acc[1], acc[0] + acc[1]]),
        lambda acc: acc[1],
    )

    assert isinstance(fib, FunctionCollector)
    assert Stream.int_range(1, 10).collect(fib) == 55


def test_of_defaults_to_identity_finisher() -> None:
    collector = collectors.of(set, set.add)

    assert Stream.of([1, 2, 2]).collect(collector) == {1, 2}


def test_user_class_satisfies_collector_protocol() -> None:
    class Joiner:
        def supplier(self):
            return []

        def accumulator(self, container, element):
            container.append(str(element))

        def finisher(self, container):
            return "-".join(container)

    joiner = Joiner()

    assert isinstance(joiner, Collector)
    assert Stream.of([1, 2, 3]).collect(joiner) == "1-2-3"


def test_summing_infinite_values_keep_sign() -> None:
    assert Stream.of([1.0, math.inf]).collect(collectors.summing()) == math.inf
