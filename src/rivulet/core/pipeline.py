# pipeline.py
# SPDX-License-Identifier: MIT
"""Lazy, single-pass element pipelines.

A :class:`Stream` wraps exactly one lazy iterator. Source constructors
(:meth:`Stream.of`, :meth:`Stream.int_range`, :meth:`Stream.iterate`, ...)
create one; intermediate operations (:meth:`Stream.filter`,
:meth:`Stream.map`, ...) hand the iterator over to a new stream wrapping a
composed generator; terminal operations (:meth:`Stream.count`,
:meth:`Stream.collect`, ...) drain it.

Nothing is computed until a terminal operation starts pulling, and each
stage only pulls from its upstream when its downstream asks for the next
element. Short-circuiting operations (``limit``, ``take_while``,
``any_match``, ``find_first``) therefore stop upstream work as soon as the
answer is known, which makes infinite sources usable::

    >>> Stream.iterate(1, lambda x: 2 * x + 1).limit(5).to_list()
    [1, 3, 7, 15, 31]

Streams are single-pass. Calling any operation hands the underlying
iterator over and marks the stream consumed; touching it again raises
:class:`StreamConsumedError`. Keep the stream returned by each call::

    >>> s = Stream.of([3, 1, 2])
    >>> s.sorted().to_list()
    [1, 2, 3]
    >>> s.count()
    Traceback (most recent call last):
    ...
    rivulet.core.pipeline.StreamConsumedError: stream has already been consumed
"""

from __future__ import annotations

import functools
import itertools
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from functools import cmp_to_key
from typing import Any, Generic, TypeVar

from . import collectors
from .heap import Comparator
from .interfaces import Collector
from .log import get_logger

log = get_logger(__name__)

__all__ = ["Stream", "StreamConsumedError"]

T = TypeVar("T")
R = TypeVar("R")

Predicate = Callable[[Any], bool]

# Iterable elements that flatten() treats as leaves.
_ATOMIC_ITERABLES = (str, bytes, bytearray, Mapping)


class StreamConsumedError(RuntimeError):
    """Raised when a stream is used after its elements were handed over."""


# ---------------------------------------------------------------------------
# Generator stages
# ---------------------------------------------------------------------------

def _ints(start: int, stop: int, step: int) -> Iterator[int]:
    """Closed integer range; empty when ``step`` cannot reach ``stop``."""
    if start == stop:
        yield start
        return
    if step == 0 or (start < stop and step < 0) or (start > stop and step > 0):
        return
    if start < stop:
        yield from range(start, stop + 1, step)
    else:
        yield from range(start, stop - 1, step)


def _iterate(seed: T, fn: Callable[[T], T]) -> Iterator[T]:
    while True:
        yield seed
        seed = fn(seed)


def _generate(supplier: Callable[[], T]) -> Iterator[T]:
    while True:
        yield supplier()


def _distinct(upstream: Iterator[T], key: Callable[[T], Hashable] | None) -> Iterator[T]:
    seen: set[Hashable] = set()
    for item in upstream:
        marker = item if key is None else key(item)
        if marker not in seen:
            seen.add(marker)
            yield item


def _sorted(upstream: Iterator[T], key: Callable[[T], Any] | None, reverse: bool) -> Iterator[T]:
    buffered = list(upstream)
    log.debug("sorted() buffered %d elements", len(buffered))
    buffered.sort(key=key, reverse=reverse)
    yield from buffered


def _peek(upstream: Iterator[T], action: Callable[[T], Any]) -> Iterator[T]:
    for item in upstream:
        action(item)
        yield item


def _flat_map(upstream: Iterator[T], fn: Callable[[T], Iterable[R]]) -> Iterator[R]:
    for item in upstream:
        yield from fn(item)


def _is_nested(item: Any) -> bool:
    return isinstance(item, Iterable) and not isinstance(item, _ATOMIC_ITERABLES)


def _flatten(upstream: Iterator[Any]) -> Iterator[Any]:
    for item in upstream:
        if _is_nested(item):
            yield from _flatten(iter(item))
        else:
            yield item


def _chunk(upstream: Iterator[T], size: int) -> Iterator[list[T]]:
    bucket: list[T] = []
    for item in upstream:
        bucket.append(item)
        if len(bucket) == size:
            yield bucket
            bucket = []
    if bucket:
        yield bucket


def _close(iterator: Iterator[Any]) -> None:
    """Finalize a generator chain left behind by a short-circuit."""
    close = getattr(iterator, "close", None)
    if close is not None:
        close()


# ---------------------------------------------------------------------------
# Stream
# ---------------------------------------------------------------------------

class Stream(Generic[T]):
    """A lazy, single-pass sequence of elements.

    Args:
        source (Iterable[T]): Elements to wrap. Iterators are used as-is;
            other iterables are iterated on demand.
    """

    __slots__ = ("_iterator", "_consumed")

    def __init__(self, source: Iterable[T]) -> None:
        self._iterator: Iterator[T] = iter(source)
        self._consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "open"
        return f"<{type(self).__name__} {state}>"

    def __iter__(self) -> Iterator[T]:
        return self._take()

    def _ensure_open(self) -> None:
        if self._consumed:
            log.debug("Rejected reuse of consumed %r", self)
            raise StreamConsumedError("stream has already been consumed")

    def _take(self) -> Iterator[T]:
        """Hand over the underlying iterator, marking this stream consumed."""
        self._ensure_open()
        self._consumed = True
        iterator = self._iterator
        self._iterator = iter(())
        return iterator

    def _then(self, stage: Iterator[R]) -> Stream[R]:
        return type(self)(stage)

    @property
    def consumed(self) -> bool:
        """True once an operation has taken this stream's elements."""
        return self._consumed

    # -------------------------
    # Sources
    # -------------------------
    @classmethod
    def empty(cls) -> Stream[Any]:
        """Return a stream with no elements."""
        return cls(())

    @classmethod
    def of(cls, source: Iterable[T]) -> Stream[T]:
        """Wrap any finite or infinite iterable.

        Generators and other iterators are passed through unchanged, so
        their elements are produced only as the stream is pulled. Passing a
        Stream takes over its elements.
        """
        if isinstance(source, Stream):
            return cls(source._take())
        return cls(source)

    @classmethod
    def int_range(cls, start: int, stop: int, step: int = 1) -> Stream[int]:
        """Integers from ``start`` (inclusive) to ``stop`` (exclusive).

        Descending ranges need a negative ``step``. A ``step`` of zero or of
        the wrong sign gives an empty stream, as does ``start == stop``.
        """
        if start == stop or step == 0 or (stop - start > 0) != (step > 0):
            return cls.empty()
        if start < stop:
            return cls(_ints(start, stop - 1, step))
        return cls(_ints(start, stop + 1, step))

    @classmethod
    def int_range_closed(cls, start: int, stop: int, step: int = 1) -> Stream[int]:
        """Integers from ``start`` to ``stop``, both inclusive.

        ``start == stop`` yields that single value whatever ``step`` is;
        otherwise a zero or wrong-signed ``step`` gives an empty stream.
        """
        return cls(_ints(start, stop, step))

    @classmethod
    def concat(cls, first: Iterable[T], second: Iterable[T]) -> Stream[T]:
        """Lazily chain all of ``first`` followed by all of ``second``."""
        return cls(itertools.chain(_source_iter(first), _source_iter(second)))

    @classmethod
    def iterate(cls, seed: T, fn: Callable[[T], T]) -> Stream[T]:
        """Infinite stream ``seed, fn(seed), fn(fn(seed)), ...``."""
        return cls(_iterate(seed, fn))

    @classmethod
    def generate(cls, supplier: Callable[[], T]) -> Stream[T]:
        """Infinite stream of independent ``supplier()`` calls."""
        return cls(_generate(supplier))

    # -------------------------
    # Intermediate operations
    # -------------------------
    def filter(self, predicate: Predicate) -> Stream[T]:
        """Keep the elements for which ``predicate`` is truthy."""
        return self._then(filter(predicate, self._take()))

    def map(self, fn: Callable[[T], R]) -> Stream[R]:
        """Replace each element with ``fn(element)``."""
        return self._then(map(fn, self._take()))

    def distinct(self, key: Callable[[T], Hashable] | None = None) -> Stream[T]:
        """Drop elements whose key was already seen.

        Without ``key`` the element is its own key and must be hashable.
        The seen-set lives as long as the stream is being pulled.
        """
        return self._then(_distinct(self._take(), key))

    def limit(self, max_size: int) -> Stream[T]:
        """Truncate to at most ``max_size`` elements.

        Exactly ``max_size`` upstream elements are pulled, never one more.

        Raises:
            ValueError: If ``max_size`` is negative.
        """
        if max_size < 0:
            raise ValueError(f"max_size must be non-negative, got {max_size}")
        return self._then(itertools.islice(self._take(), max_size))

    def skip(self, n: int) -> Stream[T]:
        """Discard the first ``n`` elements.

        Raises:
            ValueError: If ``n`` is negative.
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return self._then(itertools.islice(self._take(), n, None))

    def sorted(
        self,
        comparator: Comparator | None = None,
        *,
        key: Callable[[T], Any] | None = None,
        reverse: bool = False,
    ) -> Stream[T]:
        """Sort by natural order, a three-way ``comparator``, or a ``key``.

        The whole upstream is buffered in memory when the first element is
        requested, so never sort an unbounded stream.

        Raises:
            ValueError: If both ``comparator`` and ``key`` are given.
        """
        if comparator is not None:
            if key is not None:
                raise ValueError("pass either comparator or key, not both")
            key = cmp_to_key(comparator)
        return self._then(_sorted(self._take(), key, reverse))

    def peek(self, action: Callable[[T], Any]) -> Stream[T]:
        """Call ``action`` on each element as it is pulled, passing it on unchanged."""
        return self._then(_peek(self._take(), action))

    def flat_map(self, fn: Callable[[T], Iterable[R]]) -> Stream[R]:
        """Replace each element with the contents of the iterable ``fn(element)``."""
        return self._then(_flat_map(self._take(), fn))

    def flatten(self) -> Stream[Any]:
        """Recursively splice nested iterables into the stream.

        Strings, bytes and mappings are left intact; every other iterable
        element (lists, tuples, generators, streams, ...) is replaced by its
        contents, to any depth.
        """
        return self._then(_flatten(self._take()))

    def take_while(self, predicate: Predicate) -> Stream[T]:
        """Yield elements until ``predicate`` first fails, then stop for good."""
        return self._then(itertools.takewhile(predicate, self._take()))

    def drop_while(self, predicate: Predicate) -> Stream[T]:
        """Drop elements while ``predicate`` holds, then yield everything else.

        Once an element fails the predicate, later elements are yielded
        without being tested again.
        """
        return self._then(itertools.dropwhile(predicate, self._take()))

    def chunk(self, size: int) -> Stream[list[T]]:
        """Group elements into lists of ``size``; the last one may be shorter.

        Raises:
            ValueError: If ``size`` is less than 1.
        """
        if size < 1:
            raise ValueError(f"chunk size must be at least 1, got {size}")
        return self._then(_chunk(self._take(), size))

    # -------------------------
    # Terminal operations
    # -------------------------
    def reduce(self, identity: R, fn: Callable[[R, T], R]) -> R:
        """Left fold starting from ``identity``."""
        return functools.reduce(fn, self._take(), identity)

    def count(self) -> int:
        """Number of elements."""
        n = 0
        for _ in self._take():
            n += 1
        return n

    def sum(self) -> int | float:
        """Compensated sum of the elements; shorthand for ``collect(summing())``."""
        return self.collect(collectors.summing())

    def sum_inaccurate(self) -> int | float:
        """Naive left-to-right sum, 0 when empty.

        Faster than :meth:`sum` but subject to ordinary floating-point
        rounding error.
        """
        # Plain loop: the builtin sum() compensates floats on Python 3.12+.
        total: int | float = 0
        for value in self._take():
            total += value
        return total

    def min(self, comparator: Comparator | None = None) -> T | None:
        """Smallest element, or None when the stream is empty."""
        if comparator is None:
            return min(self._take(), default=None)
        return min(self._take(), key=cmp_to_key(comparator), default=None)

    def max(self, comparator: Comparator | None = None) -> T | None:
        """Largest element, or None when the stream is empty."""
        if comparator is None:
            return max(self._take(), default=None)
        return max(self._take(), key=cmp_to_key(comparator), default=None)

    def any_match(self, predicate: Predicate) -> bool:
        """True if some element satisfies ``predicate``; False when empty."""
        iterator = self._take()
        try:
            return any(predicate(item) for item in iterator)
        finally:
            _close(iterator)

    def all_match(self, predicate: Predicate) -> bool:
        """True if every element satisfies ``predicate``; vacuously True when empty."""
        iterator = self._take()
        try:
            return all(predicate(item) for item in iterator)
        finally:
            _close(iterator)

    def none_match(self, predicate: Predicate) -> bool:
        """True if no element satisfies ``predicate``; vacuously True when empty."""
        iterator = self._take()
        try:
            return not any(predicate(item) for item in iterator)
        finally:
            _close(iterator)

    def for_each(self, action: Callable[[T], Any]) -> None:
        """Call ``action`` on every element."""
        for item in self._take():
            action(item)

    def find_first(self) -> T | None:
        """Return the first element, or None when empty, consuming the stream."""
        iterator = self._take()
        try:
            return next(iterator, None)
        finally:
            _close(iterator)

    def peek_first(self) -> T | None:
        """Return the first element without consuming the stream.

        The upstream is evaluated up to its first element, which stays in
        place: a later traversal of this same stream yields it first.
        Returns None when the stream is empty.
        """
        self._ensure_open()
        sentinel = object()
        first = next(self._iterator, sentinel)
        if first is sentinel:
            return None
        self._iterator = itertools.chain((first,), self._iterator)
        return first  # type: ignore[return-value]

    def collect(self, collector: Collector[T, Any, R]) -> R:
        """Fold every element into a fresh container from ``collector``."""
        container = collector.supplier()
        accumulate = collector.accumulator
        for item in self._take():
            accumulate(container, item)
        return collector.finisher(container)

    def to_list(self) -> list[T]:
        """Drain the stream into a list, preserving order."""
        return list(self._take())

    to_array = to_list


def _source_iter(source: Iterable[T]) -> Iterator[T]:
    if isinstance(source, Stream):
        return source._take()
    return iter(source)
