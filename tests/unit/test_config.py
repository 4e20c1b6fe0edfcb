from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from loadstate.config import CONFIG_ENV_VAR, ConfigError, load_config


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent(content), encoding="utf-8")
    return config_path


def test_load_config_success(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        f"""
        rootdir: {tmp_path}/state
        output_dir: ~/build/out
        preloaded:
          - goog/base.py
        boot:
          - app/core.py
          - app/util.py
        logging:
          level: DEBUG
          debug_file: true
        """,
    )

    config = load_config(config_path)

    assert config.root_dir == tmp_path / "state"
    assert config.output_dir == Path("~/build/out").expanduser()
    assert config.preloaded == ["goog/base.py"]
    assert config.boot == ["app/core.py", "app/util.py"]
    assert config.logging.level == "debug"
    assert config.logging.debug_file is True


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        """
        output_dir: out
        boot: [main.py]
        """,
    )

    config = load_config(config_path)

    assert config.root_dir == Path("~/.local/lib/loadstate").expanduser()
    assert config.preloaded == []
    assert config.logging.level == "info"
    assert config.logging.debug_file is False


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        """
        output_dir: out
        boot: [main.py]
        """,
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))

    config = load_config()

    assert config.boot == ["main.py"]


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_output_dir_is_required(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "boot: [main.py]\n")

    with pytest.raises(ConfigError, match="output_dir"):
        load_config(config_path)


def test_root_must_be_mapping(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(config_path)


def test_invalid_yaml_is_reported(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "output_dir: [unterminated\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(config_path)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("output_dir: out\nboot: main.py\n", "boot must be a list"),
        ("output_dir: out\nboot: [main.py, 3]\n", r"boot\[2\] must be a string"),
        ("output_dir: out\npreloaded: [null]\n", r"preloaded\[1\] must be a string"),
        ("output_dir: out\nlogging: loud\n", "logging must be a mapping"),
    ],
)
def test_invalid_entries_raise(tmp_path: Path, content: str, message: str) -> None:
    config_path = _write_config(tmp_path, content)

    with pytest.raises(ConfigError, match=message):
        load_config(config_path)

