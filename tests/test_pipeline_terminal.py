import logging

import pytest

from rivulet import Stream, StreamConsumedError, collectors


def _numbers(n: int):
    for _ in range(n):
        yield from (1, 1e100, 1, -1e100)


def test_count() -> None:
    assert Stream.int_range(0, 100).count() == 100
    assert Stream.empty().count() == 0


def test_sum_is_compensated() -> None:
    assert Stream.of([1.0, 1e100, 1.0, -1e100]).sum() == 2.0
    assert Stream.of(_numbers(10_000)).sum() == 20_000.0


def test_sum_inaccurate_is_naive() -> None:
    assert Stream.of([1.0, 1e100, 1.0, -1e100]).sum_inaccurate() == 0.0
    assert Stream.of([1, 2, 3]).sum_inaccurate() == 6


def test_sums_of_empty_stream_are_zero() -> None:
    assert Stream.empty().sum() == 0
    assert Stream.empty().sum_inaccurate() == 0


def test_min_and_max() -> None:
    assert Stream.of([3, 9, 1, 4]).min() == 1
    assert Stream.of([3, 9, 1, 4]).max() == 9


def test_min_and_max_of_empty_stream_are_none() -> None:
    assert Stream.empty().min() is None
    assert Stream.empty().max() is None


def test_min_and_max_with_comparator() -> None:
    by_len = lambda a, b: len(a) - len(b)  # noqa: E731

    assert Stream.of(["ccc", "a", "bb"]).min(by_len) == "a"
    assert Stream.of(["ccc", "a", "bb"]).max(by_len) == "ccc"


def test_quantifiers() -> None:
    odd_primes = Stream.of([2, 3, 5, 7, 11]).drop_while(lambda x: x < 3)

    assert odd_primes.all_match(lambda x: x % 2 == 1)
    assert Stream.of([2, 3, 5]).any_match(lambda x: x % 2 == 0)
    assert Stream.of([3, 5, 7]).none_match(lambda x: x % 2 == 0)
    assert not Stream.of([3, 4]).all_match(lambda x: x % 2 == 1)
    assert not Stream.of([3, 4]).none_match(lambda x: x % 2 == 0)


def test_quantifiers_on_empty_stream() -> None:
    def boom(_):
        raise AssertionError("predicate must not run")

    assert Stream.empty().all_match(boom) is True
    assert Stream.empty().none_match(boom) is True
    assert Stream.empty().any_match(boom) is False


def test_any_match_short_circuits_infinite_source() -> None:
    produced = []

    assert Stream.iterate(1, lambda x: x + 1).peek(produced.append).any_match(lambda x: x > 3)
    assert produced == [1, 2, 3, 4]


def test_for_each() -> None:
    seen = []

    assert Stream.of([1, 2, 3]).for_each(seen.append) is None
    assert seen == [1, 2, 3]


def test_find_first() -> None:
    assert Stream.of([10, 20, 30]).skip(1).find_first() == 20
    assert Stream.of([10, 20, 30]).skip(4).find_first() is None


def test_find_first_consumes_stream() -> None:
    stream = Stream.of([1, 2])

    assert stream.find_first() == 1
    with pytest.raises(StreamConsumedError):
        stream.to_list()


def test_find_first_on_infinite_source() -> None:
    assert Stream.iterate(5, lambda x: x * 2).filter(lambda x: x > 100).find_first() == 160


def test_peek_first_does_not_consume() -> None:
    produced = []
    stream = Stream.of([10, 20, 30]).peek(produced.append)

    assert stream.peek_first() == 10
    assert stream.peek_first() == 10
    assert produced == [10]
    assert stream.to_list() == [10, 20, 30]
    assert produced == [10, 20, 30]


def test_peek_first_on_empty_stream() -> None:
    stream = Stream.empty()

    assert stream.peek_first() is None
    assert stream.to_list() == []


def test_peek_first_after_consumption_raises_and_logs(caplog) -> None:
    stream = Stream.of([1])
    stream.count()

    with caplog.at_level(logging.DEBUG, logger="rivulet"):
        with pytest.raises(StreamConsumedError):
            stream.peek_first()

    assert any("Rejected reuse" in rec.getMessage() for rec in caplog.records)


def test_collect_with_standard_collector() -> None:
    result = Stream.of(["a", "bb", "cc", "d"]).collect(collectors.grouping_by(len))

    assert result == {1: ["a", "d"], 2: ["bb", "cc"]}


def test_to_list_and_to_array() -> None:
    assert Stream.of((3, 1, 2)).to_list() == [3, 1, 2]
    assert Stream.of((3, 1, 2)).to_array() == [3, 1, 2]


def test_callback_errors_propagate_from_terminal() -> None:
    def explode(x):
        if x == 2:
            raise KeyError("bad element")
        return x

    stream = Stream.of([1, 2, 3]).map(explode)

    with pytest.raises(KeyError):
        stream.to_list()


def test_reuse_is_logged_at_debug(caplog) -> None:
    stream = Stream.of([1])
    stream.count()

    with caplog.at_level(logging.DEBUG, logger="rivulet"):
        with pytest.raises(StreamConsumedError):
            stream.count()

    assert any("consumed" in rec.getMessage() for rec in caplog.records)
