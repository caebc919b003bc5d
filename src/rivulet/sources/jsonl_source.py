# jsonl_source.py
# SPDX-License-Identifier: MIT

"""JSON Lines record source feeding streams."""

from __future__ import annotations

import gzip
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any, TextIO

from ..core.config import JSONLSourceConfig
from ..core.log import get_logger
from ..core.pipeline import Stream
from ._paths import PathArg, coerce_paths, compound_suffix

log = get_logger(__name__)

__all__ = ["iter_jsonl_records", "stream_jsonl"]


def iter_jsonl_records(
    path_or_paths: PathArg,
    *,
    config: JSONLSourceConfig | None = None,
    skip_missing: bool = True,
) -> Iterator[dict[str, Any]]:
    """Yield JSON objects from ``.jsonl`` / ``.jsonl.gz`` files, one per line.

    Blank lines are ignored. Lines that are not valid JSON, or that hold a
    JSON value other than an object, are skipped; invalid lines are logged
    up to ``config.max_invalid_json_warnings`` times per file.

    Raises:
        FileNotFoundError: If a file is missing and ``skip_missing`` is False.
    """
    cfg = config or JSONLSourceConfig()
    for path in coerce_paths(path_or_paths):
        try:
            fp = _open_jsonl(path, encoding=cfg.encoding, errors=cfg.decode_errors)
        except FileNotFoundError:
            if not skip_missing:
                raise
            log.warning("JSONL file not found: %s", path)
            continue
        invalid_lines = 0
        non_dict_lines = 0
        with fp:
            for lineno, raw_line in enumerate(fp, start=1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as exc:
                    invalid_lines += 1
                    if invalid_lines <= cfg.max_invalid_json_warnings:
                        log.warning("Skipping invalid JSON at %s:#%d: %s", path, lineno, exc)
                        if invalid_lines == cfg.max_invalid_json_warnings:
                            log.debug("Suppressing further invalid JSON warnings for %s", path)
                    continue
                if not isinstance(record, dict):
                    non_dict_lines += 1
                    continue
                yield record
        if invalid_lines or non_dict_lines:
            log.info(
                "JSONL %s: skipped %d invalid and %d non-object lines",
                path,
                invalid_lines,
                non_dict_lines,
            )


def stream_jsonl(
    path_or_paths: PathArg,
    *,
    config: JSONLSourceConfig | None = None,
    skip_missing: bool = True,
) -> Stream[dict[str, Any]]:
    """Return a lazy :class:`Stream` over the records of JSONL files."""
    return Stream.of(iter_jsonl_records(path_or_paths, config=config, skip_missing=skip_missing))


def _open_jsonl(path: Path, *, encoding: str, errors: str) -> TextIO:
    if compound_suffix(path) == ".jsonl.gz":
        return gzip.open(path, "rt", encoding=encoding, errors=errors)
    return open(path, encoding=encoding, errors=errors)
