# parquetio.py
# SPDX-License-Identifier: MIT
"""Parquet row source feeding streams (requires the ``parquet`` extra)."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pyarrow.parquet as pq

from ..core.config import ParquetSourceConfig
from ..core.log import get_logger
from ..core.pipeline import Stream
from ._paths import PathArg, coerce_paths

log = get_logger(__name__)

__all__ = ["iter_parquet_rows", "stream_parquet"]


def iter_parquet_rows(
    path_or_paths: PathArg,
    *,
    config: ParquetSourceConfig | None = None,
    skip_missing: bool = True,
) -> Iterator[dict[str, Any]]:
    """Yield rows from Parquet files as dicts, one record batch at a time.

    Only ``config.batch_size`` rows are held in memory at once.

    Raises:
        FileNotFoundError: If a file is missing and ``skip_missing`` is False.
    """
    cfg = config or ParquetSourceConfig()
    for path in coerce_paths(path_or_paths):
        if not path.exists():
            if not skip_missing:
                raise FileNotFoundError(path)
            log.warning("Parquet file not found: %s", path)
            continue
        pf = pq.ParquetFile(path)
        try:
            for batch in pf.iter_batches(batch_size=cfg.batch_size, columns=cfg.columns):
                yield from batch.to_pylist()
        finally:
            pf.close()


def stream_parquet(
    path_or_paths: PathArg,
    *,
    config: ParquetSourceConfig | None = None,
    skip_missing: bool = True,
) -> Stream[dict[str, Any]]:
    """Return a lazy :class:`Stream` over the rows of Parquet files."""
    return Stream.of(iter_parquet_rows(path_or_paths, config=config, skip_missing=skip_missing))
