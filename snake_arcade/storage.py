"""
storage.py — Best-score and settings persistence.

The session only talks to the `ScoreStore` protocol. Storage problems are
logged and degrade to defaults; they never interrupt a game.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_SCORES_PATH = Path.home() / ".snake_arcade" / "scores.json"


class ScoreStore(Protocol):
    def get_high_score(self) -> int: ...

    def set_high_score(self, candidate: int) -> bool: ...

    def get_settings(self) -> dict: ...

    def set_settings(self, settings: dict) -> None: ...


class MemoryScoreStore:
    """Keeps everything in process; used by tests and `--no-save` runs."""

    def __init__(self, high_score: int = 0, settings: dict | None = None):
        self._high_score = high_score
        self._settings = dict(settings or {})

    def get_high_score(self) -> int:
        return self._high_score

    def set_high_score(self, candidate: int) -> bool:
        if candidate > self._high_score:
            self._high_score = candidate
            return True
        return False

    def get_settings(self) -> dict:
        return dict(self._settings)

    def set_settings(self, settings: dict) -> None:
        self._settings = dict(settings)


class JsonScoreStore:
    """
    One JSON document on disk:

        {"high_score": 120, "settings": {"difficulty": "hard"}}

    The file is read on every call so several processes sharing a file
    see each other's best score.
    """

    def __init__(self, path: Path = DEFAULT_SCORES_PATH):
        self.path = Path(path)

    def get_high_score(self) -> int:
        value = self._load().get("high_score", 0)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed high score {value!r} in {self.path}")
            return 0

    def set_high_score(self, candidate: int) -> bool:
        if candidate <= self.get_high_score():
            return False
        data = self._load()
        data["high_score"] = int(candidate)
        return self._save(data)

    def get_settings(self) -> dict:
        settings = self._load().get("settings", {})
        return settings if isinstance(settings, dict) else {}

    def set_settings(self, settings: dict) -> None:
        data = self._load()
        data["settings"] = dict(settings)
        self._save(data)

    # ── Private helpers ──────────────────────────────────────────
    def _load(self) -> dict:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Could not read scores from {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning(f"Could not write scores to {self.path}: {exc}")
            return False
        return True
