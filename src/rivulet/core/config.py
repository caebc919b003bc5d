# config.py
# SPDX-License-Identifier: MIT
"""Configuration models and helpers for rivulet.

Declarative dataclasses for logging and for the row sources that feed
streams from files, plus helpers for round-tripping configurations through
dicts, JSON and TOML.
"""
from __future__ import annotations

import json
import types

try:  # pragma: no cover - optional dependency
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ModuleNotFoundError:  # pragma: no cover
        tomllib = None  # type: ignore[assignment]
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional, TypeVar, Union, get_args, get_origin, get_type_hints

from .log import PACKAGE_LOGGER_NAME, configure_logging

__all__ = [
    "LoggingConfig",
    "CsvSourceConfig",
    "JSONLSourceConfig",
    "ParquetSourceConfig",
    "SourceConfig",
    "RivuletConfig",
    "load_config_from_path",
    "build_config_from_defaults_and_options",
]

T = TypeVar("T")
C = TypeVar("C")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class LoggingConfig:
    """Settings applied to the rivulet logger by :meth:`apply`.

    Leave ``propagate`` False for a standalone handler, or set it (and
    ``logger_name``) to route stream diagnostics into a host application.
    """
    level: int | str = "INFO"
    propagate: bool = False
    fmt: Optional[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logger_name: str = PACKAGE_LOGGER_NAME

    def apply(self) -> None:
        """Apply this logging configuration to the package logger."""
        configure_logging(
            level=self.level,
            propagate=self.propagate,
            fmt=self.fmt,
            logger_name=self.logger_name or PACKAGE_LOGGER_NAME,
        )


# ---------------------------------------------------------------------------
# Source configs
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class CsvSourceConfig:
    """Settings for reading rows from CSV/TSV files.

    Attributes:
        delimiter (str | None): Field delimiter. When None it is chosen
            from the file suffix: tab for ``.tsv``, comma otherwise.
        encoding (str): Text encoding of the files.
        has_header (bool): When True rows are dicts keyed by the header;
            otherwise rows are lists of strings.
        skip_blank_rows (bool): Drop rows whose fields are all empty.
    """
    delimiter: Optional[str] = None
    encoding: str = "utf-8"
    has_header: bool = True
    skip_blank_rows: bool = True


@dataclass(slots=True)
class JSONLSourceConfig:
    """Settings for reading records from JSON Lines files.

    Attributes:
        max_invalid_json_warnings (int): Invalid lines logged per file
            before further warnings are suppressed.
        decode_errors (str): Error handler passed to the text decoder.
        encoding (str): Text encoding of the files.
    """
    max_invalid_json_warnings: int = 5
    decode_errors: str = "strict"
    encoding: str = "utf-8"


@dataclass(slots=True)
class ParquetSourceConfig:
    """Settings for reading rows from Parquet files.

    Attributes:
        columns (list[str] | None): Columns to project; None reads all.
        batch_size (int): Rows per record batch pulled from disk.
    """
    columns: Optional[list[str]] = None
    batch_size: int = 65_536


@dataclass(slots=True)
class SourceConfig:
    """Grouped settings for all row sources.

    Attributes:
        csv (CsvSourceConfig): CSV/TSV reader settings.
        jsonl (JSONLSourceConfig): JSONL reader settings.
        parquet (ParquetSourceConfig): Parquet reader settings.
        skip_missing (bool): Log and skip missing files instead of raising.
    """
    csv: CsvSourceConfig = field(default_factory=CsvSourceConfig)
    jsonl: JSONLSourceConfig = field(default_factory=JSONLSourceConfig)
    parquet: ParquetSourceConfig = field(default_factory=ParquetSourceConfig)
    skip_missing: bool = True


# ---------------------------------------------------------------------------
# Master config
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class RivuletConfig:
    """Top-level configuration.

    Attributes:
        logging (LoggingConfig): Package logger settings.
        sources (SourceConfig): Row source settings.
    """
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sources: SourceConfig = field(default_factory=SourceConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of this configuration."""
        return _dataclass_to_dict(self)

    def to_json(self, path: Path | str, *, indent: int = 2) -> str:
        """Serialize the configuration to JSON and write it to disk.

        Returns:
            str: String path to the written file.
        """
        target = Path(path)
        target.write_text(json.dumps(self.to_dict(), indent=indent, sort_keys=True), encoding="utf-8")
        return str(target)

    @classmethod
    def from_dict(cls: type[T], data: Mapping[str, Any]) -> T:
        """Instantiate a configuration from a mapping such as :meth:`to_dict` output."""
        return _dataclass_from_dict(cls, data)

    @classmethod
    def from_json(cls: type[T], path: Path | str) -> T:
        """Load a configuration from a JSON file."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.from_dict(payload)  # type: ignore[attr-defined]

    @classmethod
    def from_toml(cls: type[T], path: Path | str) -> T:
        """
        Load a configuration from a TOML file.

        The TOML layout mirrors the dataclasses: ``[logging]``,
        ``[sources]``, ``[sources.csv]``, ``[sources.jsonl]`` and
        ``[sources.parquet]``.
        """
        if tomllib is None:
            raise RuntimeError(
                "TOML support requires Python 3.11+ (tomllib) or installing the 'tomli' package."
            )
        data = tomllib.loads(Path(path).read_bytes().decode("utf-8"))
        if not isinstance(data, Mapping):
            raise TypeError(f"Top-level TOML document must be a mapping; got {type(data).__name__}.")
        return cls.from_dict(data)  # type: ignore[attr-defined]


def load_config_from_path(path: str | Path) -> RivuletConfig:
    """Load a RivuletConfig from a JSON or TOML file.

    Raises:
        ValueError: If the file extension is not ``.toml`` or ``.json``.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".toml":
        return RivuletConfig.from_toml(p)
    if suffix == ".json":
        return RivuletConfig.from_json(p)
    raise ValueError(f"Unsupported config extension {p.suffix!r}; expected .toml or .json.")


def build_config_from_defaults_and_options(
    cfg_type: type[C],
    *,
    defaults: C | Mapping[str, Any] | None,
    options: Mapping[str, Any] | None,
    ignore_keys: Iterable[str] = (),
) -> C:
    """
    Layer per-call ``options`` over ``defaults`` into a config dataclass.

    ``defaults`` may be an instance of ``cfg_type`` or a mapping. Option keys
    that are not fields of ``cfg_type`` raise ValueError unless listed in
    ``ignore_keys``.
    """
    if defaults is None:
        merged: dict[str, Any] = {}
    elif is_dataclass(defaults) and not isinstance(defaults, type):
        merged = {f.name: getattr(defaults, f.name) for f in fields(defaults)}
    else:
        merged = dict(defaults)  # type: ignore[arg-type]

    field_names = {f.name for f in fields(cfg_type)}  # type: ignore[arg-type]
    ignore = set(ignore_keys)
    if options:
        unknown = sorted(k for k in options if k not in field_names and k not in ignore)
        if unknown:
            raise ValueError(
                f"Unsupported options for {cfg_type.__name__}: {', '.join(unknown)}. "
                f"Allowed keys: {', '.join(sorted(field_names))}"
            )
        for key, value in options.items():
            if key in field_names:
                merged[key] = value
    return cfg_type(**merged)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _dataclass_to_dict(obj: Any) -> dict[str, Any]:
    """Serialize dataclasses to JSON-friendly dicts, skipping None values."""
    result: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        result[f.name] = _serialize_value(value)
    return result


def _serialize_value(value: Any) -> Any:
    if is_dataclass(value):
        return _dataclass_to_dict(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _serialize_value(v) for k, v in value.items()}
    return value


def _dataclass_from_dict(cls: type[T], data: Mapping[str, Any] | None) -> T:
    """Instantiate dataclass ``cls`` from a mapping, recursing into nested dataclasses.

    Raises:
        ValueError: If ``data`` contains keys that are not fields of ``cls``.
    """
    if data is None:
        return cls()
    type_hints = get_type_hints(cls)
    names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(k for k in data if k not in names)
    if unknown:
        raise ValueError(f"Unknown keys for {cls.__name__}: {', '.join(unknown)}")
    kwargs = {
        name: _coerce_value(type_hints.get(name, Any), value)
        for name, value in data.items()
    }
    return cls(**kwargs)


def _coerce_value(expected_type: Any, value: Any) -> Any:
    """Coerce ``value`` into the shape implied by ``expected_type``."""
    base_type = _strip_optional(expected_type)
    if value is None:
        return None
    if isinstance(base_type, type) and is_dataclass(base_type):
        return _dataclass_from_dict(base_type, value)
    if get_origin(base_type) is list:
        args = get_args(base_type)
        inner = args[0] if args else Any
        return [_coerce_value(inner, v) for v in value]
    if base_type in (str, int, float, bool):
        return base_type(value)
    return value


def _strip_optional(typ: Any) -> Any:
    """Drop ``None`` from an ``Optional[X]`` / ``X | None`` annotation."""
    if get_origin(typ) in (Union, types.UnionType):
        args = [arg for arg in get_args(typ) if arg is not type(None)]
        if len(args) == 1:
            return _strip_optional(args[0])
    return typ
