from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping

from crazyeights.engine.serialize import card_to_dict
from crazyeights.engine.types import Card, GameEvent


@dataclass
class TelemetryService:
    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def listener(self) -> Callable[[GameEvent], None]:
        """A game listener that records every change notification."""

        def on_event(event: GameEvent) -> None:
            value = card_to_dict(event.value) if isinstance(event.value, Card) else event.value
            self.log(event.kind, {"value": value})

        return on_event

    def read(self) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
