# __init__.py
# SPDX-License-Identifier: MIT
"""
Top-level package exports for :mod:`rivulet`.

rivulet builds lazy, single-pass pipelines over any iterable: a source, a
chain of deferred transformations, and one terminal operation that either
reduces the elements or drains them into a container.

Public surface
--------------
- :class:`Stream`: sources (``of``, ``int_range``, ``iterate``, ...),
  intermediate operations (``filter``, ``map``, ``chunk``, ...) and terminal
  operations (``count``, ``sum``, ``collect``, ...).
- :mod:`rivulet.core.collectors` (exported as ``collectors``): grouping,
  set/list accumulation, compensated sum/average/statistics and bounded
  top-k selection, plus ``collectors.of`` for custom aggregations.
- :class:`Collector`: the supplier/accumulator/finisher protocol custom
  aggregation classes implement.
- :func:`stream_path`: open CSV, JSONL or Parquet files as a Stream of rows.

Examples:
    Filter, transform and reduce::

        >>> from rivulet import Stream
        >>> Stream.int_range_closed(1, 10).filter(lambda x: x % 2 == 0).map(lambda x: x + 1).sum()
        35

    Collect with a standard collector::

        >>> from rivulet import Stream, collectors
        >>> Stream.of([5, 1, 4, 2, 3]).collect(collectors.top_n(3))
        [3, 4, 5]
"""

from __future__ import annotations

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("rivulet")
except Exception:  # PackageNotFoundError or runtime env oddities
    __version__ = "0.0.0+unknown"

from .core import collectors
from .core.collectors import Statistics
from .core.config import (
    CsvSourceConfig,
    JSONLSourceConfig,
    LoggingConfig,
    ParquetSourceConfig,
    RivuletConfig,
    SourceConfig,
    load_config_from_path,
)
from .core.factories import stream_path
from .core.heap import MinHeap
from .core.interfaces import Collector, FunctionCollector
from .core.log import configure_logging, get_logger, temp_level
from .core.pipeline import Stream, StreamConsumedError
from .core.summation import CompensatedSum
from .sources.csv_source import stream_csv
from .sources.jsonl_source import stream_jsonl

PRIMARY_API = [
    "__version__",
    "Stream",
    "StreamConsumedError",
    "Collector",
    "FunctionCollector",
    "collectors",
    "Statistics",
    "MinHeap",
    "CompensatedSum",
    "RivuletConfig",
    "LoggingConfig",
    "SourceConfig",
    "CsvSourceConfig",
    "JSONLSourceConfig",
    "ParquetSourceConfig",
    "load_config_from_path",
    "configure_logging",
    "get_logger",
    "temp_level",
    "stream_path",
    "stream_csv",
    "stream_jsonl",
]

__all__ = list(PRIMARY_API)
