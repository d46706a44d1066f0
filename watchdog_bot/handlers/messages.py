"""Message events: deletions, edits and pin changes."""
from __future__ import annotations

import logging
from typing import Optional

import discord

from .. import branding
from ..records import EventContext, LogRecord, code_block, describe_user, mention_or_none

LOGGER = logging.getLogger(__name__)

DELETED_CONTENT_LIMIT = 1000
EDITED_CONTENT_LIMIT = 500


def _skip_author(author: Optional[discord.abc.User], self_id: Optional[int]) -> bool:
    """Ignore other bots; our own deleted messages are still logged."""

    return author is not None and author.bot and author.id != self_id


async def message_delete(ctx: EventContext, message: discord.Message) -> Optional[LogRecord]:
    if message.guild is None:
        return None
    author = message.author
    if _skip_author(author, ctx.self_id):
        return None

    bulk = await ctx.resolve_actor(message.guild, discord.AuditLogAction.message_bulk_delete, message.channel.id)
    if bulk:
        LOGGER.debug("Suppressing delete log for message %s: part of a bulk delete", message.id)
        return None

    bot_flag = " (BOT)" if author is not None and author.bot else ""
    lines = [
        f"**Author:** {describe_user(author, 'Unknown/Cached (Unknown)')}{bot_flag}",
        f"**Channel:** {mention_or_none(message.channel)}",
    ]
    if message.content:
        lines.append("")
        lines.append("**Content:**")
        lines.append(code_block(message.content[:DELETED_CONTENT_LIMIT]))

    if message.attachments:
        lines.append("")
        lines.append(f"**Deleted Attachments:** ({len(message.attachments)} files)")
        for attachment in message.attachments:
            lines.append(f"- [{attachment.filename}]({attachment.url})")
    elif not message.content:
        lines.append("")
        lines.append("**Content:** (Unknown/Empty)")

    return LogRecord("🗑️ Message Deleted", "\n".join(lines), branding.RED, author)


async def message_edit(
    ctx: EventContext, before: discord.Message, after: discord.Message
) -> Optional[LogRecord]:
    if after.guild is None or before.author.bot:
        return None
    if before.content == after.content:
        return None

    description = "\n".join(
        [
            f"**Author:** {describe_user(before.author)}",
            f"**Channel:** {mention_or_none(after.channel)}",
            "",
            "**Old Content:**",
            code_block(before.content[:EDITED_CONTENT_LIMIT]),
            "**New Content:**",
            code_block(after.content[:EDITED_CONTENT_LIMIT]),
            f"[Jump to Message]({after.jump_url})",
        ]
    )
    return LogRecord("✍️ Message Edited", description, branding.BLUE, before.author)


async def message_pin(
    ctx: EventContext, before: discord.Message, after: discord.Message
) -> Optional[LogRecord]:
    if after.guild is None or before.author.bot:
        return None
    if before.pinned == after.pinned:
        return None

    if after.pinned:
        action = discord.AuditLogAction.message_pin
        title, colour = "📌 Message Pinned", branding.PURPLE
    else:
        action = discord.AuditLogAction.message_unpin
        title, colour = "📎 Message Unpinned", branding.GREY

    attribution = await ctx.resolve_actor(after.guild, action, after.author.id)
    actor_name = str(attribution.actor) if attribution.actor is not None else "Unknown"
    description = "\n".join(
        [
            f"**Action Performed By:** {actor_name}",
            f"**Channel:** {mention_or_none(after.channel)}",
            f"**Author:** {describe_user(before.author)}",
            f"[Jump to Message]({after.jump_url})",
        ]
    )
    return LogRecord(title, description, colour, attribution.actor or before.author)
