"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from dirskel.config import (
    ConfigError,
    ConfigManager,
    DirskelConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from dirskel.config.resolver import assign_dotted


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env={})


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".dirskel" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "dirskel configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == DirskelConfig()
    assert config.replication.on_error == "abort"
    assert config.progress.directory_interval == 100
    assert config.progress.file_interval == 1000


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"progress": {"file_interval": 50}, "replication": {"on_error": "skip"}})

    env = {
        "DIRSKEL__PROGRESS__DIRECTORY_INTERVAL": "7",
        "DIRSKEL__REPLICATION__ON_ERROR": "skip",
        "UNRELATED": "1",
    }
    cli = {"replication.on_error": "abort"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.progress.file_interval == 50
    assert config.progress.directory_interval == 7
    # CLI overrides take precedence over environment and file
    assert config.replication.on_error == "abort"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=DirskelConfig(),
            file_overrides={"scanning": {"include_hidden": True}},
        )


@pytest.mark.parametrize(
    "overrides",
    [
        {"progress": {"file_interval": 0}},
        {"replication": {"on_error": "retry"}},
        {"scanning": {"dotfiles_hidden": "sometimes"}},
        {"logging": {"level": "LOUD"}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=DirskelConfig(), file_overrides=overrides)


def test_logging_level_is_normalized() -> None:
    config = resolve_with_precedence(
        defaults=DirskelConfig(), cli_overrides={"logging.level": "info"}
    )

    assert config.logging.level == "INFO"


def test_flatten_for_env_renders_defaults() -> None:
    flat = flatten_for_env(DirskelConfig())

    assert flat["DIRSKEL__REPLICATION__ON_ERROR"] == "abort"
    assert flat["DIRSKEL__PROGRESS__FILE_INTERVAL"] == "1000"
    assert flat["DIRSKEL__CLI__QUIET_DEFAULT"] == "false"


def test_flattened_env_loads_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    expected = DirskelConfig.model_validate({"scanning": {"dotfiles_hidden": "never"}})

    config = manager.load(env_overrides=flatten_for_env(expected))

    assert config == expected


def test_assign_dotted_creates_sections_and_rejects_scalars() -> None:
    data: dict = {"replication": {"on_error": "abort"}}

    assign_dotted(data, "progress.file_interval", 10)

    assert data["progress"] == {"file_interval": 10}
    with pytest.raises(ConfigError):
        assign_dotted(data, "replication.on_error.mode", "skip")
    with pytest.raises(ConfigError):
        assign_dotted(data, " . ", "skip")


def test_unwritable_config_path_raises_config_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    manager = ConfigManager(config_path=blocker / "config.yaml", env={})

    with pytest.raises(ConfigError):
        manager.ensure_exists()
    assert manager.load(ensure_file=False) == DirskelConfig()
