from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import json
import yaml


@dataclass(slots=True)
class CopyConfig:
    ignore_dirs: list[str] | None = None
    additional_ignore_dirs: list[str] = field(default_factory=list)
    log_file: Path | None = None


def _as_optional_path(value: Any, field_name: str) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string path")
    return Path(value).expanduser()


def _as_list_of_names(value: Any, field_name: str) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ValueError(f"{field_name} must be a list of strings")

    names: list[str] = []
    for index, item in enumerate(value):
        name = item.strip()
        if not name:
            continue
        if "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError(f"{field_name}[{index}] must be a directory name, not a path: {item}")
        names.append(name)
    return names


def _load_raw_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ValueError(f"Config file does not exist: {config_path}")

    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in {".yml", ".yaml"}:
        loaded = yaml.safe_load(text)
    elif suffix == ".json":
        loaded = json.loads(text)
    else:
        raise ValueError("Config file must be .yaml/.yml or .json")

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError("Config root must be an object")
    return loaded


def load_config(config_path: Path) -> CopyConfig:
    raw = _load_raw_config(config_path)

    return CopyConfig(
        ignore_dirs=_as_list_of_names(raw.get("ignoreDirs"), "ignoreDirs"),
        additional_ignore_dirs=_as_list_of_names(raw.get("additionalIgnoreDirs"), "additionalIgnoreDirs") or [],
        log_file=_as_optional_path(raw.get("logFile"), "logFile"),
    )


def load_optional_config(config_path: Path | None) -> CopyConfig:
    if config_path is None:
        return CopyConfig()
    return load_config(config_path)
