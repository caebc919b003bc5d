# collectors.py
# SPDX-License-Identifier: MIT
"""
Standard :class:`~rivulet.core.interfaces.Collector` implementations.

Every collector here is a (supplier, accumulator, finisher) triple built
with :func:`of`. Pass them to :meth:`rivulet.Stream.collect`::

    >>> from rivulet import Stream, collectors
    >>> Stream.int_range_closed(1, 10).collect(collectors.grouping_by(lambda x: x % 2))
    {1: [1, 3, 5, 7, 9], 0: [2, 4, 6, 8, 10]}

Summing, averaging and statistics use two-level compensated summation
(:class:`~rivulet.core.summation.CompensatedSum`), so their results can
differ from a naive running total; they are usually closer to the exact
value. Results may still depend on encounter order. Values sorted by
increasing magnitude tend to give the most accurate totals.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable
from dataclasses import asdict, dataclass, field
from typing import Any, TypeVar

from .heap import Comparator, MinHeap
from .interfaces import Collector, FunctionCollector
from .log import get_logger
from .summation import CompensatedSum

log = get_logger(__name__)

__all__ = [
    "Statistics",
    "of",
    "grouping_by",
    "to_set",
    "to_list",
    "summing",
    "averaging",
    "statistics",
    "top_n",
]

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")
K = TypeVar("K", bound=Hashable)

Mapper = Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


def of(
    supplier: Callable[[], U],
    accumulator: Callable[[U, T], Any],
    finisher: Callable[[U], R] = _identity,
) -> Collector[T, U, R]:
    """Wrap three callables into a Collector.

    ``finisher`` defaults to the identity, returning the container itself.
    """
    return FunctionCollector(supplier, accumulator, finisher)


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

def _append_to_group(classifier: Callable[[T], K]) -> Callable[[dict[K, list[T]], T], None]:
    def accumulate(groups: dict[K, list[T]], element: T) -> None:
        key = classifier(element)
        bucket = groups.get(key)
        if bucket is None:
            groups[key] = [element]
        else:
            bucket.append(element)

    return accumulate


def grouping_by(classifier: Callable[[T], K]) -> Collector[T, dict[K, list[T]], dict[K, list[T]]]:
    """Group elements into lists keyed by ``classifier(element)``.

    Keys appear in first-encounter order and each list keeps encounter order.
    """
    return of(dict, _append_to_group(classifier))


def to_set(key: Callable[[T], Hashable] | None = None) -> Collector[T, dict, list[T]]:
    """Collect the distinct elements, in first-insertion order.

    Elements are their own hash keys unless ``key`` is given, in which case
    the first element seen for each key is kept. Unhashable elements without
    a ``key`` raise TypeError.
    """
    if key is None:
        def accumulate(seen: dict, element: T) -> None:
            seen[element] = True

        return of(dict, accumulate, list)

    def accumulate_keyed(seen: dict, element: T) -> None:
        seen.setdefault(key(element), element)

    return of(dict, accumulate_keyed, lambda seen: list(seen.values()))


def to_list() -> Collector[T, list[T], list[T]]:
    """Collect every element, duplicates included, in encounter order."""
    return of(list, list.append)


# ---------------------------------------------------------------------------
# Numeric reductions
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _AveragingState:
    total: CompensatedSum = field(default_factory=CompensatedSum)
    count: int = 0


@dataclass(slots=True)
class _StatisticsState:
    total: CompensatedSum = field(default_factory=CompensatedSum)
    count: int = 0
    min: Any = math.inf
    max: Any = -math.inf


@dataclass(frozen=True, slots=True)
class Statistics:
    """
    Summary of a numeric stream.

    Attributes:
        sum (int | float): Compensated sum of the values.
        count (int): Number of values.
        avg (int | float): ``sum / count``, or 0 when there were no values.
        min (int | float | None): Smallest value, or None when empty.
        max (int | float | None): Largest value, or None when empty.
    """

    sum: int | float = 0
    count: int = 0
    avg: int | float = 0
    min: int | float | None = None
    max: int | float | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def summing(mapper: Mapper | None = None) -> Collector[Any, CompensatedSum, int | float]:
    """Sum ``mapper(element)`` (or the elements themselves).

    Returns 0 for an empty stream. A NaN anywhere makes the sum NaN.
    """
    if mapper is None:
        accumulate = CompensatedSum.add
    else:
        def accumulate(state: CompensatedSum, element: Any) -> None:
            state.add(mapper(element))

    return of(CompensatedSum, accumulate, CompensatedSum.result)


def averaging(mapper: Mapper | None = None) -> Collector[Any, _AveragingState, int | float]:
    """Arithmetic mean of ``mapper(element)``; 0 for an empty stream."""
    fn = mapper or _identity

    def accumulate(state: _AveragingState, element: Any) -> None:
        state.total.add(fn(element))
        state.count += 1

    def finish(state: _AveragingState) -> int | float:
        if state.count == 0:
            return 0
        return state.total.result() / state.count

    return of(_AveragingState, accumulate, finish)


def statistics(mapper: Mapper | None = None) -> Collector[Any, _StatisticsState, Statistics]:
    """Sum, count, average, min and max of ``mapper(element)`` in one pass.

    On an empty stream the result has ``count == 0``, ``sum == avg == 0``
    and ``min``/``max`` set to None.
    """
    fn = mapper or _identity

    def accumulate(state: _StatisticsState, element: Any) -> None:
        value = fn(element)
        state.total.add(value)
        state.count += 1
        if value < state.min:
            state.min = value
        if value > state.max:
            state.max = value

    def finish(state: _StatisticsState) -> Statistics:
        total = state.total.result()
        if state.count == 0:
            return Statistics(sum=total, count=0, avg=0, min=None, max=None)
        return Statistics(
            sum=total,
            count=state.count,
            avg=total / float(state.count),
            min=state.min,
            max=state.max,
        )

    return of(_StatisticsState, accumulate, finish)


# ---------------------------------------------------------------------------
# Bounded selection
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _TopNState:
    heap: MinHeap
    is_full: bool = False
    current_min: Any = None


def top_n(max_elements: int, comparator: Comparator | None = None) -> Collector[Any, _TopNState, list]:
    """Keep the ``max_elements`` highest-ranking elements, in ascending order.

    Ranking is natural ordering, or ``comparator`` when supplied. The heap
    is filled unconditionally until it holds ``max_elements`` items; after
    that, an element only touches the heap when it outranks the cached
    current minimum. Runs in O(n log k).

    ``max_elements <= 0`` always yields an empty list; fewer inputs than
    ``max_elements`` yields all of them.
    """
    if max_elements <= 0:
        log.debug("top_n called with max_elements=%d; result will be empty", max_elements)

    def supply() -> _TopNState:
        return _TopNState(heap=MinHeap(comparator=comparator))

    def accumulate(state: _TopNState, element: Any) -> None:
        if max_elements <= 0:
            return
        heap = state.heap
        if state.is_full:
            if heap.precedes(state.current_min, element):
                heap.extract_and_insert(element)
                state.current_min = heap.peek_min()
            return
        heap.insert(element)
        if len(heap) == max_elements:
            state.is_full = True
            state.current_min = heap.peek_min()

    def finish(state: _TopNState) -> list:
        return state.heap.drain_sorted()

    return of(supply, accumulate, finish)
