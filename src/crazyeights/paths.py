from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    data_dir: Path
    schema_dir: Path


def get_paths() -> Paths:
    # src/crazyeights/paths.py -> data files live beside it in crazyeights/data
    data_dir = Path(__file__).resolve().parent / "data"
    schema_dir = data_dir / "schemas"
    return Paths(data_dir=data_dir, schema_dir=schema_dir)
