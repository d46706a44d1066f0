"""Moderation command usage records."""
from __future__ import annotations

from typing import Optional

from discord.ext import commands

from .. import branding
from ..records import EventContext, LogRecord, describe_user, mention_or_none, truncate


async def command_used(ctx: EventContext, invocation: commands.Context) -> Optional[LogRecord]:
    if invocation.guild is None:
        return None
    description = (
        f"**User:** {describe_user(invocation.author)}\n"
        f"**Channel:** {mention_or_none(invocation.channel)}\n"
        f"**Command:** `{truncate(invocation.message.content, 1000)}`"
    )
    return LogRecord("⚡ Command Used", description, branding.GREY, invocation.author)
