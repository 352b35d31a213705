from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from dgtracker.config import get_settings

from .models import FinishedRound

logger = logging.getLogger(__name__)


class RoundNotFound(Exception):
    pass


class RoundOwnershipError(Exception):
    pass


SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _sanitize_id(value: str, kind: str = "player_id") -> str:
    """
    Restrict ids to filesystem-safe characters to prevent path traversal.

    Only allow ASCII letters, digits, underscores, and dashes. Reject anything else.
    """

    if not SAFE_ID_RE.match(value or ""):
        raise ValueError(f"Invalid {kind} for filesystem usage: {value!r}")
    return value


class RoundStore:
    """Finished rounds as one JSON file each under ``<base>/<player>/<round>.json``."""

    def __init__(self, base_dir: Path | str | None = None):
        base = Path(base_dir or get_settings().rounds_dir).expanduser()
        self._base_dir = base.resolve()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def save(self, finished: FinishedRound) -> FinishedRound:
        path = self._round_path(finished.player_id, finished.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(finished.model_dump_json(by_alias=True, indent=2))
        return finished

    def get(self, round_id: str, *, player_id: str | None = None) -> FinishedRound:
        _sanitize_id(round_id, "round_id")
        for player_dir in self._base_dir.glob("*"):
            path = player_dir / f"{round_id}.json"
            if not path.exists():
                continue
            record = self._read(path)
            if record is None:
                break
            if player_id is not None and record.player_id != player_id:
                raise RoundOwnershipError(round_id)
            return record
        raise RoundNotFound(round_id)

    def list_rounds(
        self, player_id: str, *, course_id: str | None = None, limit: int = 50
    ) -> List[FinishedRound]:
        player_dir = self._player_dir(player_id)
        if not player_dir.exists():
            return []

        rounds: List[FinishedRound] = []
        for path in player_dir.glob("*.json"):
            record = self._read(path)
            if record is None:
                continue
            if course_id is not None and record.course_id != course_id:
                continue
            rounds.append(record)

        rounds.sort(
            key=lambda r: r.ended_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return rounds[: max(1, limit)]

    # Internal helpers
    def _player_dir(self, player_id: str) -> Path:
        return self._base_dir / _sanitize_id(player_id)

    def _round_path(self, player_id: str, round_id: str) -> Path:
        return self._player_dir(player_id) / f"{_sanitize_id(round_id, 'round_id')}.json"

    def _read(self, path: Path) -> Optional[FinishedRound]:
        try:
            return FinishedRound.model_validate(json.loads(path.read_text()))
        except (OSError, ValueError, ValidationError):
            logger.warning("skipping unreadable round file %s", path)
            return None


@lru_cache(maxsize=1)
def get_round_store() -> RoundStore:
    return RoundStore()


__all__ = [
    "RoundStore",
    "RoundNotFound",
    "RoundOwnershipError",
    "get_round_store",
]
