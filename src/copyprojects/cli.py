from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from copyprojects.config import load_config, load_optional_config
from copyprojects.ignore_engine import build_ignore_set
from copyprojects.report import RULE, printable, render_summary
from copyprojects.run_service import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_CONFIG,
    EXIT_RUNTIME_OR_CONFIG_ERROR,
    EXIT_SUCCESS,
    run_copy,
)


LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
PROGRESS_WIDTH = 70


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copy-projects",
        description="Copy a project tree, leaving out build outputs, caches and dependency folders",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Copy a source directory into a destination")
    run_parser.add_argument("--source", type=Path, help="Source directory (prompted, defaults to cwd)")
    run_parser.add_argument("--dest", type=Path, help="Destination directory (prompted when missing)")
    run_parser.add_argument("--config", type=Path, help="Optional YAML/JSON config file")
    run_parser.add_argument("--no-prompt", action="store_true", help="Never ask for missing paths")
    run_parser.add_argument("--log-file", type=Path, help="Write a rotating log file")
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Log every copied file")

    list_parser = subparsers.add_parser("list-ignores", help="Show the ignored directory names")
    list_parser.add_argument("--config", type=Path)

    validate_parser = subparsers.add_parser("validate-config", help="Validate config")
    validate_parser.add_argument("--config", required=True, type=Path)

    return parser


def _configure_logging(log_file: Path | None, verbose: bool) -> logging.Logger:
    logger = logging.getLogger("copyprojects")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
            errors="backslashreplace",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


class _ProgressLine:
    def __init__(self) -> None:
        self._width = 0

    def update(self, kind: str, relative_path: str) -> None:
        label = "Copying" if kind == "file" else "Processing"
        line = f"{label}: {printable(relative_path)}"
        # pad over whatever the previous, possibly longer, line left behind
        width = max(PROGRESS_WIDTH, self._width, len(line))
        sys.stdout.write("\r" + line.ljust(width))
        sys.stdout.flush()
        self._width = len(line)

    def clear(self) -> None:
        width = max(PROGRESS_WIDTH, self._width)
        sys.stdout.write("\r" + " " * width + "\r")
        sys.stdout.flush()
        self._width = 0


def _prompt_for_source(default_dir: Path) -> Path:
    answer = input(
        f"Enter the source directory path (press Enter to use current directory: {default_dir}): "
    ).strip()
    return Path(answer) if answer else default_dir


def _prompt_for_destination() -> Path | None:
    answer = input("Enter the output directory path: ").strip()
    return Path(answer) if answer else None


def cmd_list_ignores(config_path: Path | None) -> int:
    try:
        ignore_set = build_ignore_set(load_optional_config(config_path))
    except Exception as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    for name in ignore_set:
        print(name)
    return EXIT_SUCCESS


def cmd_validate(config_path: Path) -> int:
    try:
        config = load_config(config_path)
        ignore_set = build_ignore_set(config)
    except Exception as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    origin = "config" if config.ignore_dirs is not None else "defaults"
    print(f"Valid config: {config_path} ({len(ignore_set)} ignored directory name(s))")
    print(f"  - ignoreDirs={origin} additionalIgnoreDirs={len(config.additional_ignore_dirs)}")
    print(f"  - logFile={config.log_file or '(none)'}")
    return EXIT_SUCCESS


def cmd_run(
    source: Path | None,
    destination: Path | None,
    config_path: Path | None,
    prompt: bool,
    log_file: Path | None,
    verbose: bool,
) -> int:
    try:
        config = load_optional_config(config_path)
        ignore_set = build_ignore_set(config)
    except Exception as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    logger = _configure_logging(log_file or config.log_file, verbose)

    print("Project Copy")
    print(RULE)

    if source is None:
        source = _prompt_for_source(Path.cwd()) if prompt else Path.cwd()
    source = source.expanduser().resolve()

    print(f"Source directory: {printable(str(source))}")
    print(f"Ignoring directories: {', '.join(ignore_set)}")
    print(RULE)

    if destination is None and prompt:
        destination = _prompt_for_destination()
    if destination is None:
        print("Error: Output directory is required", file=sys.stderr)
        return EXIT_RUNTIME_OR_CONFIG_ERROR

    progress = _ProgressLine()
    exit_code, stats = run_copy(
        source,
        destination.expanduser(),
        ignore_set,
        on_progress=progress.update,
        logger=logger.getChild("run"),
    )
    progress.clear()

    print(render_summary(stats))
    return exit_code


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            return cmd_run(
                source=args.source,
                destination=args.dest,
                config_path=args.config,
                prompt=not args.no_prompt,
                log_file=args.log_file,
                verbose=args.verbose,
            )
        if args.command == "list-ignores":
            return cmd_list_ignores(args.config)
        if args.command == "validate-config":
            return cmd_validate(args.config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    parser.print_help()
    return EXIT_RUNTIME_OR_CONFIG_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
