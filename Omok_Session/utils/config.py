"""Session settings loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from ..Board import MAX_SIZE, MIN_SIZE

PROJECT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_SETTINGS = PROJECT_DIR / "config" / "settings.yaml"


@dataclass(frozen=True)
class GameConfig:
    board_size: int = 15
    max_history: int = 1000
    log_moves: bool = True

    def __post_init__(self):
        if not isinstance(self.board_size, int) or not MIN_SIZE <= self.board_size <= MAX_SIZE:
            raise ValueError(f"board_size must be an integer in [{MIN_SIZE}, {MAX_SIZE}], got {self.board_size!r}")
        if not isinstance(self.max_history, int) or self.max_history < 1:
            raise ValueError(f"max_history must be an integer >= 1, got {self.max_history!r}")


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a package-relative path when invoked from another directory."""
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    candidate = PROJECT_DIR / p
    return candidate if candidate.exists() else p


def load_settings(path=DEFAULT_SETTINGS) -> GameConfig:
    path = resolve_project_path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"settings file {path} must contain a mapping")
    known = {f.name for f in fields(GameConfig)}
    return GameConfig(**{k: v for k, v in raw.items() if k in known})
