# csv_source.py
# SPDX-License-Identifier: MIT

"""CSV/TSV row source feeding streams."""

from __future__ import annotations

import csv
import gzip
from collections.abc import Iterator
from pathlib import Path
from typing import Any, TextIO

from ..core.config import CsvSourceConfig
from ..core.log import get_logger
from ..core.pipeline import Stream
from ._paths import PathArg, coerce_paths, compound_suffix

__all__ = ["iter_csv_rows", "stream_csv"]

log = get_logger(__name__)


def iter_csv_rows(
    path_or_paths: PathArg,
    *,
    config: CsvSourceConfig | None = None,
    skip_missing: bool = True,
) -> Iterator[dict[str, Any] | list[str]]:
    """Yield rows from one or more CSV/TSV files, in order.

    Files (including ``.csv.gz``/``.tsv.gz``) are opened only when the
    first row is pulled and closed once exhausted, or when the generator is
    closed early.

    Args:
        path_or_paths (str | Path | Sequence[str | Path]): Files to read.
        config (CsvSourceConfig | None): Reader settings.
        skip_missing (bool): Log and skip missing files instead of raising.

    Yields:
        dict[str, Any] | list[str]: A dict per row when the files have a
            header, otherwise the raw list of fields.

    Raises:
        FileNotFoundError: If a file is missing and ``skip_missing`` is False.
    """
    cfg = config or CsvSourceConfig()
    for path in coerce_paths(path_or_paths):
        try:
            fp = _open_csv(path, encoding=cfg.encoding)
        except FileNotFoundError:
            if not skip_missing:
                raise
            log.warning("CSV file not found: %s", path)
            continue
        with fp:
            delimiter = _resolve_delimiter(path, cfg.delimiter)
            reader: Iterator[Any]
            if cfg.has_header:
                reader = csv.DictReader(fp, delimiter=delimiter)
            else:
                reader = csv.reader(fp, delimiter=delimiter)
            for row in reader:
                if cfg.skip_blank_rows and _is_blank(row):
                    continue
                yield row


def stream_csv(
    path_or_paths: PathArg,
    *,
    config: CsvSourceConfig | None = None,
    skip_missing: bool = True,
) -> Stream[dict[str, Any] | list[str]]:
    """Return a lazy :class:`Stream` over the rows of CSV/TSV files."""
    return Stream.of(iter_csv_rows(path_or_paths, config=config, skip_missing=skip_missing))


def _resolve_delimiter(path: Path, delimiter: str | None) -> str:
    """Return the delimiter for a file, falling back by extension."""
    if delimiter is not None:
        return delimiter
    if ".tsv" in "".join(path.suffixes).lower():
        return "\t"
    return ","


def _is_blank(row: dict[str, Any] | list[str]) -> bool:
    values = row.values() if isinstance(row, dict) else row
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


def _open_csv(path: Path, *, encoding: str) -> TextIO:
    if compound_suffix(path) in {".csv.gz", ".tsv.gz"}:
        return gzip.open(path, "rt", encoding=encoding, newline="")
    # newline="" lets the csv module handle embedded newlines in quoted fields.
    return open(path, encoding=encoding, newline="")
