"""Expansion of command-line paths into analysable files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..exceptions import FileAccessError

_SKIP_DIRS = frozenset({".git", "build", "cmake-build-debug", "cmake-build-release", "node_modules", "third_party"})


def expand_paths(paths: Iterable[Path], suffixes: Iterable[str]) -> list[Path]:
    """Files named explicitly plus files under directories with a matching suffix.

    Raises:
        FileAccessError: If a path does not exist
    """
    wanted = tuple(s.lower() for s in suffixes)
    result: list[Path] = []
    seen: set[Path] = set()

    for path in paths:
        if path.is_file():
            candidates = [path]
        elif path.is_dir():
            candidates = sorted(
                p
                for p in path.rglob("*")
                if p.is_file()
                and p.name.lower().endswith(wanted)
                and not any(part in _SKIP_DIRS for part in p.relative_to(path).parts)
            )
        else:
            raise FileAccessError(path, "No such file or directory")

        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                result.append(candidate)

    return result
