from __future__ import annotations

from pathlib import Path
import logging

from copyprojects.copy_engine import CopyRunOptions, ProgressCallback, copy_tree
from copyprojects.ignore_engine import IgnoreSet
from copyprojects.models import CopyStats


EXIT_SUCCESS = 0
EXIT_RUNTIME_OR_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURES = 2
EXIT_INVALID_CONFIG = 3
EXIT_INTERRUPTED = 130


def exit_code_for(stats: CopyStats) -> int:
    if stats.interrupted:
        return EXIT_INTERRUPTED
    if stats.has_fatal_error:
        return EXIT_RUNTIME_OR_CONFIG_ERROR
    if stats.has_errors:
        return EXIT_PARTIAL_FAILURES
    return EXIT_SUCCESS


def run_copy(
    source: Path,
    destination: Path,
    ignore_set: IgnoreSet,
    on_progress: ProgressCallback | None = None,
    logger: logging.Logger | None = None,
) -> tuple[int, CopyStats]:
    log = logger or logging.getLogger("copyprojects.run")

    log.info("Copying %s -> %s", source, destination)
    log.debug("Ignoring directories: %s", ", ".join(ignore_set))

    stats = copy_tree(
        source,
        destination,
        ignore_set,
        CopyRunOptions(on_progress=on_progress),
    )

    for record in stats.errors:
        log.warning("[%s] %s: %s", record.kind.name, record.relative_path, record.message)

    if stats.interrupted:
        log.warning("Copy interrupted by user")

    log.info(
        "%s -> %s | files=%s directories=%s bytes=%s errors=%s",
        source,
        destination,
        stats.files_copied,
        stats.directories_created,
        stats.bytes_copied,
        len(stats.errors),
    )
    return exit_code_for(stats), stats
