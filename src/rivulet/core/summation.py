# summation.py
# SPDX-License-Identifier: MIT
"""Two-level compensated summation (Kahan-Babuska-Klein).

The running state keeps the high-order total, first- and second-order
error terms, and a naive total used only to recover signed infinities that
the compensation terms turn into NaN.

See https://en.wikipedia.org/wiki/Kahan_summation_algorithm
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["CompensatedSum"]

Number = int | float


@dataclass(slots=True)
class CompensatedSum:
    """Mutable accumulator for compensated summation.

    Attributes:
        sum (int | float): High-order running total.
        cs (int | float): First-order compensation term.
        ccs (int | float): Second-order compensation term.
        simple_sum (int | float): Uncompensated running total.
    """

    sum: Number = 0
    cs: Number = 0
    ccs: Number = 0
    simple_sum: Number = 0

    def add(self, value: Number) -> None:
        """Fold ``value`` into the running sum."""
        total = self.sum
        t = total + value
        if abs(total) >= abs(value):
            c = (total - t) + value
        else:
            c = (value - t) + total
        self.sum = t

        cs = self.cs
        t = cs + c
        if abs(cs) >= abs(c):
            cc = (cs - t) + c
        else:
            cc = (c - t) + cs
        self.cs = t
        self.ccs += cc

        self.simple_sum += value

    def result(self) -> Number:
        """Return the compensated total.

        If the compensated total came out NaN only because same-signed
        infinities cancelled inside the error terms, the correctly-signed
        infinity from the naive total is returned instead.
        """
        tmp = self.sum + self.cs + self.ccs
        # Integer totals are exact and may exceed float range, so only
        # float totals are inspected.
        if isinstance(tmp, float) and math.isnan(tmp) and math.isinf(self.simple_sum):
            return self.simple_sum
        return tmp
