from __future__ import annotations

import json

import pytest

from crazyeights.engine.game import GameConfig
from crazyeights.paths import get_paths
from crazyeights.services.content import ContentError, ContentService, config_from_dict


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_bundled_config_values() -> None:
    cfg = _content().load_config()
    assert cfg.initial_hand_size == 5
    assert cfg.min_players == 2
    assert cfg.isolate_listeners is False


def test_custom_config_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"initial_hand_size": 7, "isolate_listeners": True}), encoding="utf-8")
    cfg = _content().load_config(path)
    assert cfg == GameConfig(initial_hand_size=7, isolate_listeners=True)


def test_invalid_config_is_rejected(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"initial_hand_size": 0, "colour": "red"}), encoding="utf-8")
    with pytest.raises(ContentError) as info:
        _content().load_config(path)
    assert "Schema validation failed" in str(info.value)


def test_missing_and_malformed_files(tmp_path) -> None:
    with pytest.raises(ContentError):
        _content().load_config(tmp_path / "nope.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(ContentError):
        _content().load_config(bad)


def test_min_players_cannot_exceed_max() -> None:
    with pytest.raises(ContentError):
        config_from_dict({"min_players": 5, "max_players": 3})
