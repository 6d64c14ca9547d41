from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shutil
from typing import Callable, Iterator

from copyprojects.ignore_engine import IgnoreSet
from copyprojects.models import CopyStats, ErrorKind


ProgressCallback = Callable[[str, str], None]


@dataclass(slots=True)
class CopyRunOptions:
    on_progress: ProgressCallback | None = None


@dataclass(slots=True)
class _Frame:
    source: Path
    destination: Path
    entries: Iterator[os.DirEntry[str]]


def _relative(path: Path, source_root: Path) -> str:
    return path.relative_to(source_root).as_posix()


def _list_entries(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as entries:
        return list(entries)


def _notify(options: CopyRunOptions, kind: str, relative_path: str) -> None:
    if options.on_progress is not None:
        options.on_progress(kind, relative_path)


def _prepare_roots(source_root: Path, destination_root: Path) -> None:
    if not source_root.exists():
        raise ValueError(f"Source directory does not exist: {source_root}")
    if not source_root.is_dir():
        raise ValueError(f"Source path is not a directory: {source_root}")
    if destination_root.exists() and not destination_root.is_dir():
        raise ValueError(f"Destination path exists but is not a directory: {destination_root}")
    if destination_root.exists() and source_root.resolve() == destination_root.resolve():
        raise ValueError(f"Invalid mapping: source and destination are equal: {source_root}")

    destination_root.mkdir(parents=True, exist_ok=True)


def _nested_destination(source_root: Path, destination_root: Path) -> Path | None:
    """Return the destination as seen from inside the source tree, if it lives there."""
    try:
        nested = destination_root.resolve().relative_to(source_root.resolve())
    except ValueError:
        return None
    return source_root / nested


def _enter_directory(
    source_dir: Path,
    destination_dir: Path,
    relative_path: str,
    stats: CopyStats,
    options: CopyRunOptions,
) -> _Frame | None:
    _notify(options, "directory", relative_path)

    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # The whole subtree is left out; this single record stands for it.
        stats.record_error(ErrorKind.DIRECTORY, relative_path, str(exc))
        return None
    stats.record_directory()

    try:
        entries = _list_entries(source_dir)
    except OSError as exc:
        stats.record_error(ErrorKind.DIRECTORY, relative_path, str(exc))
        return None

    return _Frame(source=source_dir, destination=destination_dir, entries=iter(entries))


def _copy_file(
    source_file: Path,
    destination_file: Path,
    relative_path: str,
    stats: CopyStats,
    options: CopyRunOptions,
    log: logging.Logger,
) -> None:
    _notify(options, "file", relative_path)

    try:
        size = source_file.stat().st_size
        shutil.copyfile(source_file, destination_file)
    except OSError as exc:
        stats.record_error(ErrorKind.FILE, relative_path, str(exc))
        return

    stats.record_file(size)
    log.debug("Copied %s (%s bytes)", relative_path, size)


def _walk(
    source_root: Path,
    destination_root: Path,
    ignore_set: IgnoreSet,
    stats: CopyStats,
    options: CopyRunOptions,
    log: logging.Logger,
) -> None:
    _notify(options, "directory", ".")

    try:
        _prepare_roots(source_root, destination_root)
        root_entries = _list_entries(source_root)
    except (OSError, ValueError) as exc:
        stats.record_error(ErrorKind.FATAL, ".", str(exc))
        return

    nested_destination = _nested_destination(source_root, destination_root)
    stack = [_Frame(source=source_root, destination=destination_root, entries=iter(root_entries))]

    while stack:
        frame = stack[-1]
        entry = next(frame.entries, None)
        if entry is None:
            stack.pop()
            continue

        source_path = frame.source / entry.name
        destination_path = frame.destination / entry.name
        relative_path = _relative(source_path, source_root)

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            stats.record_error(ErrorKind.DIRECTORY, relative_path, str(exc))
            continue
        try:
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except OSError as exc:
            stats.record_error(ErrorKind.FILE, relative_path, str(exc))
            continue

        if is_dir:
            if ignore_set.is_ignored(entry.name):
                log.debug("Skipping ignored directory %s", relative_path)
                continue
            if source_path == nested_destination:
                log.debug("Skipping destination directory %s inside source", relative_path)
                continue
            child = _enter_directory(source_path, destination_path, relative_path, stats, options)
            if child is not None:
                stack.append(child)
        elif is_file:
            _copy_file(source_path, destination_path, relative_path, stats, options, log)
        else:
            log.debug("Skipping non-regular entry %s", relative_path)


def copy_tree(
    source_root: Path,
    destination_root: Path,
    ignore_set: IgnoreSet,
    options: CopyRunOptions | None = None,
    logger: logging.Logger | None = None,
) -> CopyStats:
    """Copy ``source_root`` into ``destination_root``, leaving out ignored directories.

    Per-entry failures are recorded in the returned stats and the walk moves on
    to the next entry. Only an unusable root produces a fatal record. An
    interrupt (Ctrl+C) stops the walk where it is and the partial stats are
    returned with ``interrupted`` set.
    """
    log = logger or logging.getLogger("copyprojects.engine")
    opts = options or CopyRunOptions()
    stats = CopyStats()

    try:
        _walk(Path(source_root), Path(destination_root), ignore_set, stats, opts, log)
    except KeyboardInterrupt:
        stats.interrupted = True
        log.info("Copy interrupted after %s file(s)", stats.files_copied)
    finally:
        stats.finish()

    return stats
