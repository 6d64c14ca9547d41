from pathlib import Path

import pytest

from copyprojects.config import CopyConfig, load_config, load_optional_config


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "copy-config.yaml"
    config_file.write_text(
        """
additionalIgnoreDirs:
  - vendor
  - "  "
logFile: logs/copy.log
""".strip(),
        encoding="utf-8",
    )

    loaded = load_config(config_file)

    assert loaded.ignore_dirs is None
    assert loaded.additional_ignore_dirs == ["vendor"]
    assert loaded.log_file == Path("logs/copy.log")


def test_load_config_reads_json(tmp_path: Path) -> None:
    config_file = tmp_path / "copy-config.json"
    config_file.write_text('{"ignoreDirs": ["dist", "out"]}', encoding="utf-8")

    loaded = load_config(config_file)

    assert loaded.ignore_dirs == ["dist", "out"]
    assert loaded.additional_ignore_dirs == []
    assert loaded.log_file is None


def test_empty_yaml_means_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "copy-config.yml"
    config_file.write_text("", encoding="utf-8")

    assert load_config(config_file) == CopyConfig()


def test_missing_config_path_means_defaults() -> None:
    assert load_optional_config(None) == CopyConfig()


@pytest.mark.parametrize(
    ("file_name", "content", "message"),
    [
        ("copy.yaml", "ignoreDirs: node_modules", "ignoreDirs must be a list of strings"),
        ("copy.yaml", "additionalIgnoreDirs: [src/vendor]", "must be a directory name"),
        ("copy.yaml", "- just\n- a list", "Config root must be an object"),
        ("copy.yaml", "logFile: 5", "logFile must be a non-empty string path"),
        ("copy.toml", "ignoreDirs = []", "must be .yaml/.yml or .json"),
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, file_name: str, content: str, message: str) -> None:
    config_file = tmp_path / file_name
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_config(config_file)


def test_load_config_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        load_config(tmp_path / "nope.yaml")
