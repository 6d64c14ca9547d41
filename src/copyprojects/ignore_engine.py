from __future__ import annotations

from typing import Iterable, Iterator
import os

from copyprojects.config import CopyConfig


DEFAULT_IGNORE_DIRS = (
    "node_modules",
    # build outputs
    "dist",
    "build",
    "out",
    ".next",
    ".nuxt",
    ".svelte-kit",
    ".output",
    # caches
    ".cache",
    ".turbo",
    ".vite",
    ".parcel-cache",
    ".eslintcache",
    ".angular",
    ".sass-cache",
    ".vercel",
    # test coverage
    "coverage",
    ".nyc_output",
    # temporary directories
    ".tmp",
    "tmp",
    "temp",
)


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError(f"Ignored directory name must be a non-empty string: {name!r}")
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators) or name in {".", ".."}:
        raise ValueError(f"Ignored directory name must be a plain base name: {name!r}")
    return name


class IgnoreSet:
    """Directory base names excluded from a copy, matched by exact equality."""

    __slots__ = ("_names", "_ordered")

    def __init__(self, names: Iterable[str]) -> None:
        ordered: list[str] = []
        for name in names:
            checked = _check_name(name)
            if checked not in ordered:
                ordered.append(checked)
        self._ordered = tuple(ordered)
        self._names = frozenset(ordered)

    def is_ignored(self, dir_name: str) -> bool:
        return dir_name in self._names

    def __contains__(self, dir_name: object) -> bool:
        return dir_name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __repr__(self) -> str:
        return f"IgnoreSet({list(self._ordered)!r})"


def build_ignore_set(config: CopyConfig | None = None) -> IgnoreSet:
    if config is None:
        return IgnoreSet(DEFAULT_IGNORE_DIRS)

    names: list[str] = list(config.ignore_dirs if config.ignore_dirs is not None else DEFAULT_IGNORE_DIRS)
    names.extend(config.additional_ignore_dirs)
    return IgnoreSet(names)
