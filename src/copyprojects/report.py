from __future__ import annotations

from datetime import timedelta

from copyprojects.models import CopyStats


RULE = "=" * 70
SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def printable(text: str) -> str:
    """Escape undecodable filename bytes so the text can be written to any stream."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    value = round(value, 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[index]}"


def format_duration(duration: timedelta) -> str:
    seconds = max(0, int(duration.total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def render_summary(stats: CopyStats) -> str:
    lines = [
        RULE,
        "COPY OPERATION SUMMARY",
        RULE,
    ]
    if stats.interrupted:
        lines.append("Operation interrupted by user")
    lines.extend(
        [
            f"Files copied:        {stats.files_copied:,}",
            f"Directories created: {stats.directories_created:,}",
            f"Data copied:         {format_bytes(stats.bytes_copied)}",
            f"Duration:            {format_duration(stats.duration)}",
        ]
    )

    if stats.errors:
        lines.append("")
        lines.append(f"Errors encountered:  {len(stats.errors)}")
        lines.append("")
        lines.append("Failed operations:")
        for index, record in enumerate(stats.errors, start=1):
            lines.append("")
            lines.append(f"  {index}. [{record.kind.name}] {printable(record.relative_path)}")
            lines.append(f"     Error: {printable(record.message)}")
    else:
        lines.append("")
        lines.append("No errors encountered!")

    lines.append(RULE)
    return "\n".join(lines)
