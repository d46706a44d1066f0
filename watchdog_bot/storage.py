"""Persistent storage utilities for the WatchDog bot."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
NICKNAME_HISTORY_FILENAME = "nickname_history.json"
NICKNAME_HISTORY_LIMIT = 20


def _clean_snowflake(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value) if value > 0 else None
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isdigit():
            return cleaned
    return None


def _clean_log_channels(payload: Any) -> Dict[str, str]:
    if not isinstance(payload, dict):
        return {}
    cleaned: Dict[str, str] = {}
    for guild_key, channel_id in payload.items():
        guild_id = _clean_snowflake(guild_key)
        channel = _clean_snowflake(channel_id)
        if guild_id is None or channel is None:
            continue
        cleaned[guild_id] = channel
    return cleaned


def _clean_nickname_history(payload: Any) -> Dict[str, Dict[str, List[str]]]:
    if not isinstance(payload, dict):
        return {}
    cleaned: Dict[str, Dict[str, List[str]]] = {}
    for guild_key, members in payload.items():
        guild_id = _clean_snowflake(guild_key)
        if guild_id is None or not isinstance(members, dict):
            continue
        guild_history: Dict[str, List[str]] = {}
        for user_key, nicknames in members.items():
            user_id = _clean_snowflake(user_key)
            if user_id is None or not isinstance(nicknames, list):
                continue
            history: List[str] = []
            for nickname in nicknames:
                if isinstance(nickname, str) and nickname and nickname not in history:
                    history.append(nickname)
            guild_history[user_id] = history[:NICKNAME_HISTORY_LIMIT]
        cleaned[guild_id] = guild_history
    return cleaned


class StorageManager:
    """Hold the log channel configuration and nickname history.

    Both maps are loaded once when the manager is created and every mutation
    rewrites the affected file.  Keys are stored as strings so the files stay
    compatible with any JSON consumer.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.config_path = self.root / CONFIG_FILENAME
        self.nickname_path = self.root / NICKNAME_HISTORY_FILENAME
        self._log_channels: Dict[str, str] = {}
        self._nicknames: Dict[str, Dict[str, List[str]]] = {}
        self.load()

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def _write_json(self, path: Path, data: Any) -> None:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> None:
        try:
            self._log_channels = _clean_log_channels(self._read_json(self.config_path, {}))
        except (OSError, ValueError):
            LOGGER.exception("Failed to load log configuration from %s; starting empty", self.config_path)
            self._log_channels = {}
        try:
            self._nicknames = _clean_nickname_history(self._read_json(self.nickname_path, {}))
        except (OSError, ValueError):
            LOGGER.exception("Failed to load nickname history from %s; starting empty", self.nickname_path)
            self._nicknames = {}
        LOGGER.info("Loaded log configuration for %s guild(s)", len(self._log_channels))

    def save(self) -> None:
        self.save_log_channels()
        self.save_nickname_history()

    def save_log_channels(self) -> None:
        self._write_json(self.config_path, self._log_channels)

    def save_nickname_history(self) -> None:
        self._write_json(self.nickname_path, self._nicknames)

    # ------------------------------------------------------------------
    # Log channel configuration
    # ------------------------------------------------------------------
    def get_log_channel(self, guild_id: int) -> Optional[int]:
        channel_id = self._log_channels.get(str(guild_id))
        return int(channel_id) if channel_id else None

    def set_log_channel(self, guild_id: int, channel_id: int) -> None:
        self._log_channels[str(guild_id)] = str(channel_id)
        self.save_log_channels()

    def remove_log_channel(self, guild_id: int, *, expected: Optional[int] = None) -> bool:
        """Forget the guild's log channel.

        When ``expected`` is given the entry is only removed if it still points
        at that channel, so a destination replaced in the meantime survives.
        """

        key = str(guild_id)
        current = self._log_channels.get(key)
        if current is None:
            return False
        if expected is not None and current != str(expected):
            return False
        del self._log_channels[key]
        self.save_log_channels()
        return True

    def log_channels(self) -> Dict[int, int]:
        return {int(guild_id): int(channel_id) for guild_id, channel_id in self._log_channels.items()}

    # ------------------------------------------------------------------
    # Nickname history
    # ------------------------------------------------------------------
    def get_nickname_history(self, guild_id: int, user_id: int) -> List[str]:
        return list(self._nicknames.get(str(guild_id), {}).get(str(user_id), []))

    def record_nickname(self, guild_id: int, user_id: int, nickname: Optional[str]) -> bool:
        """Prepend ``nickname`` to the member's history unless already present."""

        if not nickname:
            return False
        members = self._nicknames.setdefault(str(guild_id), {})
        history = members.setdefault(str(user_id), [])
        if nickname in history:
            return False
        history.insert(0, nickname)
        del history[NICKNAME_HISTORY_LIMIT:]
        self.save_nickname_history()
        return True


DEFAULT_STORAGE_ROOT = Path("watchdog_bot") / "data"
