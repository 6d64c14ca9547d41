from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class ErrorKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    kind: ErrorKind
    relative_path: str
    message: str


@dataclass(slots=True)
class CopyStats:
    """Progress and failures of a single copy run.

    Owned by one in-flight run and handed to the caller once the walk
    finishes, is interrupted, or fails fatally.
    """

    files_copied: int = 0
    directories_created: int = 0
    bytes_copied: int = 0
    errors: list[ErrorRecord] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    interrupted: bool = False

    def record_file(self, size: int) -> None:
        self.files_copied += 1
        self.bytes_copied += size

    def record_directory(self) -> None:
        self.directories_created += 1

    def record_error(self, kind: ErrorKind, relative_path: str, message: str) -> ErrorRecord:
        record = ErrorRecord(kind=kind, relative_path=relative_path, message=message)
        self.errors.append(record)
        return record

    def finish(self) -> None:
        if self.end_time is None:
            self.end_time = datetime.now()

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_fatal_error(self) -> bool:
        return any(record.kind is ErrorKind.FATAL for record in self.errors)

    @property
    def duration(self) -> timedelta:
        end = self.end_time or datetime.now()
        return end - self.start_time
