# _paths.py
# SPDX-License-Identifier: MIT
"""Path helpers shared by the row sources."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

PathArg = str | Path | Sequence[str | Path]


def coerce_paths(path_or_paths: PathArg) -> list[Path]:
    """Normalize one path or a sequence of paths into a list of Paths."""
    if isinstance(path_or_paths, (str, Path)):
        return [Path(path_or_paths)]
    return [Path(p) for p in path_or_paths]


def compound_suffix(path: Path) -> str:
    """Return the last two suffixes lowercased, e.g. ``.csv.gz``."""
    return "".join(path.suffixes[-2:]).lower()
