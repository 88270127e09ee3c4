from __future__ import annotations

from pathlib import Path

import pytest

from autocommit.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_TRACK_EXTENSIONS,
    AutoCommitConfig,
    CommitStrategy,
    load_config_file,
)


def _config(**overrides) -> AutoCommitConfig:
    data = {"project_id": "game", "project_path": "/tmp/game", "author": "agent:test"}
    data.update(overrides)
    return AutoCommitConfig(**data)


def test_defaults_apply_when_unset() -> None:
    config = _config()

    assert config.strategy == CommitStrategy.IMMEDIATE
    assert config.effective_batch_size == DEFAULT_BATCH_SIZE == 5
    assert config.effective_interval_ms == DEFAULT_INTERVAL_MS == 60_000
    assert config.effective_ignore_patterns == list(DEFAULT_IGNORE_PATTERNS)
    assert config.effective_track_extensions == list(DEFAULT_TRACK_EXTENSIONS)


def test_explicit_lists_replace_defaults() -> None:
    config = _config(ignore_patterns=["build"], track_extensions=["gd", ".TSCN"])

    assert config.effective_ignore_patterns == ["build"]
    assert config.effective_track_extensions == [".gd", ".tscn"]


def test_to_dict_omits_unset_optionals() -> None:
    assert _config().to_dict() == {
        "project_id": "game",
        "project_path": "/tmp/game",
        "author": "agent:test",
        "strategy": "immediate",
    }
    assert _config(max_commits=10).to_dict()["max_commits"] == 10


def test_from_dict_round_trip() -> None:
    config = _config(strategy="interval", interval_ms=500, auto_message=False)
    assert AutoCommitConfig.from_dict(config.to_dict()) == config


@pytest.mark.parametrize(
    "overrides",
    [
        {"strategy": "sometimes"},
        {"batch_size": -1},
        {"interval_ms": True},
        {"max_commits": "ten"},
        {"ignore_patterns": "node_modules"},
        {"auto_message": "yes"},
        {"author": ""},
    ],
)
def test_invalid_values_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        _config(**overrides)


def test_from_dict_rejects_unknown_keys() -> None:
    data = _config().to_dict()
    data["colour"] = "blue"
    with pytest.raises(ValueError, match="colour"):
        AutoCommitConfig.from_dict(data)


def test_load_config_file(tmp_path: Path) -> None:
    path = tmp_path / "autocommit.toml"
    path.write_text(
        'project_id = "my-game"\n'
        'project_path = "/ignored"\n'
        'strategy = "batched"\n'
        "batch_size = 10\n"
        'ignore_patterns = [".git", "*.tmp"]\n',
        encoding="utf-8",
    )

    data = load_config_file(path, project_path=tmp_path)

    assert data == {
        "project_id": "my-game",
        "project_path": str(tmp_path),
        "strategy": "batched",
        "batch_size": 10,
        "ignore_patterns": [".git", "*.tmp"],
    }


def test_load_config_file_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "autocommit.toml"
    path.write_text('colour = "blue"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="colour"):
        load_config_file(path, project_path=tmp_path)
