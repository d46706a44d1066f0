"""Canonical log records and the context shared by event handlers."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

import discord

from . import audit_trail
from .invites import InviteTracker
from .storage import StorageManager


class EventKind(enum.Enum):
    """Every gateway event that can produce a log record."""

    MEMBER_JOIN = "member_join"
    MEMBER_REMOVE = "member_remove"
    MEMBER_NICKNAME = "member_nickname"
    MEMBER_ROLES = "member_roles"
    MEMBER_TIMEOUT = "member_timeout"
    MEMBER_BAN = "member_ban"
    MEMBER_UNBAN = "member_unban"
    MESSAGE_DELETE = "message_delete"
    MESSAGE_EDIT = "message_edit"
    MESSAGE_PIN = "message_pin"
    CHANNEL_CREATE = "channel_create"
    CHANNEL_DELETE = "channel_delete"
    CHANNEL_UPDATE = "channel_update"
    ROLE_CREATE = "role_create"
    ROLE_DELETE = "role_delete"
    ROLE_UPDATE = "role_update"
    GUILD_UPDATE = "guild_update"
    VOICE_CHANNEL = "voice_channel"
    VOICE_STATE = "voice_state"
    PRESENCE_UPDATE = "presence_update"
    EMOJI_CREATE = "emoji_create"
    EMOJI_DELETE = "emoji_delete"
    EMOJI_UPDATE = "emoji_update"
    STICKER_CREATE = "sticker_create"
    STICKER_DELETE = "sticker_delete"
    STICKER_UPDATE = "sticker_update"
    COMMAND_USED = "command_used"


@dataclass
class LogRecord:
    """A renderer-agnostic description of one loggable event."""

    title: str
    description: str
    colour: discord.Colour
    subject: Optional[discord.abc.User] = None


@dataclass
class EventContext:
    """State owned by the bot and handed to every event handler."""

    storage: StorageManager
    invites: InviteTracker
    self_id: Optional[int] = None
    clock: Callable[[], datetime] = field(default=discord.utils.utcnow)

    def now(self) -> datetime:
        return self.clock()

    async def resolve_actor(
        self,
        guild: discord.Guild,
        actions: audit_trail.Actions,
        target_id: Optional[int] = None,
    ) -> audit_trail.AuditAttribution:
        return await audit_trail.resolve_actor(guild, actions, target_id, now=self.now())


# ----------------------------------------------------------------------
# Formatting helpers shared by handlers
# ----------------------------------------------------------------------

def describe_user(user: Optional[discord.abc.User], fallback: str = "Unknown") -> str:
    if user is None:
        return fallback
    return f"{user} ({user.id})"


def truncate(value: Optional[str], max_length: int) -> str:
    if not value:
        return ""
    value = str(value)
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def code_block(value: str) -> str:
    return f"```\n{value}\n```"


def bullet_list(changes: Iterable[str]) -> str:
    return "\n".join(f"- {change}" for change in changes)


def mention_or_none(value: Any) -> str:
    if value is None:
        return "None"
    return getattr(value, "mention", str(value))
