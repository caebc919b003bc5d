# interfaces.py
# SPDX-License-Identifier: MIT
"""Protocols shared by streams and the aggregation strategies they drive."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

__all__ = ["Collector", "FunctionCollector"]

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")
T_contra = TypeVar("T_contra", contravariant=True)
R_co = TypeVar("R_co", covariant=True)


@runtime_checkable
class Collector(Protocol[T_contra, U, R_co]):
    """
    A mutable reduction over the elements of a stream.

    A collector is a stateless strategy: every run gets a fresh container
    from :meth:`supplier`, folds elements into it in encounter order with
    :meth:`accumulator`, and turns it into the result exactly once with
    :meth:`finisher`. Containers are never shared between runs, so the same
    collector may be reused for any number of streams.

    Because the container is passed by reference, it must be a mutable
    object (list, dict, a small state class, ...): rebinding the
    ``container`` argument inside the accumulator has no effect.
    """

    def supplier(self) -> U:
        """Create a new, empty accumulation container."""
        ...

    def accumulator(self, container: U, element: T_contra) -> None:
        """Fold one element into ``container``."""
        ...

    def finisher(self, container: U) -> R_co:
        """Transform the filled container into the final result."""
        ...


@dataclass(frozen=True, slots=True)
class FunctionCollector(Generic[T, U, R]):
    """
    Collector assembled from three plain callables.

    Attributes:
        supplier_fn (Callable[[], U]): Builds a fresh container.
        accumulator_fn (Callable[[U, T], Any]): Folds an element into the
            container; its return value is ignored.
        finisher_fn (Callable[[U], R]): Produces the result.
    """

    supplier_fn: Callable[[], U]
    accumulator_fn: Callable[[U, T], Any]
    finisher_fn: Callable[[U], R]

    def supplier(self) -> U:
        return self.supplier_fn()

    def accumulator(self, container: U, element: T) -> None:
        self.accumulator_fn(container, element)

    def finisher(self, container: U) -> R:
        return self.finisher_fn(container)
