"""Dispatch table mapping each event kind to the handler that builds its record."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..records import EventContext, EventKind, LogRecord
from . import activity, commands, expressions, members, messages, server

LOGGER = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Optional[LogRecord]]]

HANDLERS: Dict[EventKind, Handler] = {
    EventKind.MEMBER_JOIN: members.member_join,
    EventKind.MEMBER_REMOVE: members.member_remove,
    EventKind.MEMBER_NICKNAME: members.member_nickname,
    EventKind.MEMBER_ROLES: members.member_roles,
    EventKind.MEMBER_TIMEOUT: members.member_timeout,
    EventKind.MEMBER_BAN: members.member_ban,
    EventKind.MEMBER_UNBAN: members.member_unban,
    EventKind.MESSAGE_DELETE: messages.message_delete,
    EventKind.MESSAGE_EDIT: messages.message_edit,
    EventKind.MESSAGE_PIN: messages.message_pin,
    EventKind.CHANNEL_CREATE: server.channel_create,
    EventKind.CHANNEL_DELETE: server.channel_delete,
    EventKind.CHANNEL_UPDATE: server.channel_update,
    EventKind.ROLE_CREATE: server.role_create,
    EventKind.ROLE_DELETE: server.role_delete,
    EventKind.ROLE_UPDATE: server.role_update,
    EventKind.GUILD_UPDATE: server.guild_update,
    EventKind.VOICE_CHANNEL: activity.voice_channel,
    EventKind.VOICE_STATE: activity.voice_state,
    EventKind.PRESENCE_UPDATE: activity.presence_update,
    EventKind.EMOJI_CREATE: expressions.emoji_create,
    EventKind.EMOJI_DELETE: expressions.emoji_delete,
    EventKind.EMOJI_UPDATE: expressions.emoji_update,
    EventKind.STICKER_CREATE: expressions.sticker_create,
    EventKind.STICKER_DELETE: expressions.sticker_delete,
    EventKind.STICKER_UPDATE: expressions.sticker_update,
    EventKind.COMMAND_USED: commands.command_used,
}


async def build_record(kind: EventKind, ctx: EventContext, *payload: Any) -> Optional[LogRecord]:
    """Run the handler for ``kind``; failures are logged and yield no record."""

    handler = HANDLERS.get(kind)
    if handler is None:
        LOGGER.warning("No handler registered for %s", kind.value)
        return None
    try:
        return await handler(ctx, *payload)
    except Exception:
        LOGGER.exception("Failed to build %s log record", kind.value)
        return None


__all__ = ["HANDLERS", "build_record"]
