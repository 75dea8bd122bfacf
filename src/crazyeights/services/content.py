from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from crazyeights.engine.game import GameConfig


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _optional_int(obj: Mapping[str, object], key: str, default: int) -> int:
    v = obj.get(key, default)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def config_from_dict(raw: Mapping[str, object]) -> GameConfig:
    defaults = GameConfig()
    isolate = raw.get("isolate_listeners", defaults.isolate_listeners)
    if not isinstance(isolate, bool):
        raise ContentError("Expected bool for isolate_listeners")
    cfg = GameConfig(
        initial_hand_size=_optional_int(raw, "initial_hand_size", defaults.initial_hand_size),
        min_players=_optional_int(raw, "min_players", defaults.min_players),
        max_players=_optional_int(raw, "max_players", defaults.max_players),
        isolate_listeners=isolate,
    )
    if cfg.min_players > cfg.max_players:
        raise ContentError("min_players cannot exceed max_players")
    return cfg


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_config(self, path: Path | None = None) -> GameConfig:
        """Load and validate a game config; defaults to the bundled ``config.json``."""
        config_path = path or self._data_dir / "config.json"
        raw = _load_json(config_path)
        schema = _load_json(self._schema_dir / "config.schema.json")
        validate_json(raw, schema, context=str(config_path))
        if not isinstance(raw, dict):
            raise ContentError("config must be an object")
        return config_from_dict(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_config()
