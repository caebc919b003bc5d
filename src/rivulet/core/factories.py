# factories.py
# SPDX-License-Identifier: MIT
"""
Factory helpers that turn file paths into streams.

The concrete readers live in :mod:`rivulet.sources`; this module picks one
from the file suffix and layers per-call options over the configured
defaults.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .config import (
    CsvSourceConfig,
    JSONLSourceConfig,
    ParquetSourceConfig,
    RivuletConfig,
    build_config_from_defaults_and_options,
)
from .log import get_logger
from .pipeline import Stream

log = get_logger(__name__)

__all__ = ["detect_format", "stream_path"]

_FORMATS_BY_SUFFIX = {
    ".csv": "csv",
    ".tsv": "csv",
    ".csv.gz": "csv",
    ".tsv.gz": "csv",
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
    ".jsonl.gz": "jsonl",
    ".parquet": "parquet",
}


def detect_format(path: str | Path) -> str:
    """Return ``"csv"``, ``"jsonl"`` or ``"parquet"`` for a path.

    Raises:
        ValueError: If the suffix is not a supported row format.
    """
    p = Path(path)
    suffixes = [s.lower() for s in p.suffixes]
    for candidate in ("".join(suffixes[-2:]), "".join(suffixes[-1:])):
        fmt = _FORMATS_BY_SUFFIX.get(candidate)
        if fmt is not None:
            return fmt
    raise ValueError(
        f"Cannot infer row format for {p.name!r}; expected one of {sorted(_FORMATS_BY_SUFFIX)}"
    )


def stream_path(
    path_or_paths: str | Path | Sequence[str | Path],
    *,
    config: RivuletConfig | None = None,
    **options: Any,
) -> Stream[Any]:
    """
    Open one or more row files as a lazy Stream.

    The reader is chosen from the suffix of the first path; all paths must
    share that format. ``options`` override fields of the matching
    per-format config (e.g. ``delimiter=";"`` for CSV,
    ``columns=["a"]`` for Parquet).

    Raises:
        ValueError: If the format cannot be inferred, the paths mix formats,
            or an option is not a field of the format's config.
    """
    cfg = config or RivuletConfig()
    paths = [Path(path_or_paths)] if isinstance(path_or_paths, (str, Path)) else [Path(p) for p in path_or_paths]
    if not paths:
        return Stream.empty()
    fmt = detect_format(paths[0])
    mixed = [p.name for p in paths[1:] if detect_format(p) != fmt]
    if mixed:
        raise ValueError(f"All paths must be {fmt} files; got {', '.join(mixed)}")
    skip_missing = cfg.sources.skip_missing
    log.debug("Opening %d %s file(s) as a stream", len(paths), fmt)

    if fmt == "csv":
        from ..sources.csv_source import stream_csv

        csv_cfg = build_config_from_defaults_and_options(
            CsvSourceConfig, defaults=cfg.sources.csv, options=options
        )
        return stream_csv(paths, config=csv_cfg, skip_missing=skip_missing)
    if fmt == "jsonl":
        from ..sources.jsonl_source import stream_jsonl

        jsonl_cfg = build_config_from_defaults_and_options(
            JSONLSourceConfig, defaults=cfg.sources.jsonl, options=options
        )
        return stream_jsonl(paths, config=jsonl_cfg, skip_missing=skip_missing)

    from ..sources.parquetio import stream_parquet

    parquet_cfg = build_config_from_defaults_and_options(
        ParquetSourceConfig, defaults=cfg.sources.parquet, options=options
    )
    return stream_parquet(paths, config=parquet_cfg, skip_missing=skip_missing)
