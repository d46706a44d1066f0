"""Emoji and sticker lifecycle events."""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple, TypeVar

import discord

from .. import branding
from ..records import EventContext, EventKind, LogRecord, bullet_list

T = TypeVar("T", discord.Emoji, discord.GuildSticker)


def diff_by_id(before: Sequence[T], after: Sequence[T]) -> Tuple[List[T], List[T], List[Tuple[T, T]]]:
    """Split a bulk emoji/sticker update into created, deleted and changed items."""

    before_map = {item.id: item for item in before}
    after_map = {item.id: item for item in after}
    created = [item for item in after if item.id not in before_map]
    deleted = [item for item in before if item.id not in after_map]
    changed = [(before_map[item.id], item) for item in after if item.id in before_map]
    return created, deleted, changed


def iter_changes(
    before: Sequence[T],
    after: Sequence[T],
    *,
    created: EventKind,
    deleted: EventKind,
    updated: EventKind,
) -> Iterator[Tuple[EventKind, tuple]]:
    new, gone, changed = diff_by_id(before, after)
    for item in new:
        yield created, (item,)
    for item in gone:
        yield deleted, (item,)
    for old, current in changed:
        yield updated, (old, current)


async def _responsible(ctx: EventContext, guild: discord.Guild, action: discord.AuditLogAction, target_id: int) -> List[str]:
    attribution = await ctx.resolve_actor(guild, action, target_id)
    if not attribution:
        return []
    return [f"**Responsible Mod:** {attribution.actor_label()}"]


# ----------------------------------------------------------------------
# Emojis
# ----------------------------------------------------------------------

async def emoji_create(ctx: EventContext, guild: discord.Guild, emoji: discord.Emoji) -> Optional[LogRecord]:
    lines = [
        f"**Name:** {emoji.name}",
        f"**ID:** {emoji.id}",
        f"**Animated:** {'Yes' if emoji.animated else 'No'}",
        f"**URL:** {emoji.url}",
    ]
    lines.extend(await _responsible(ctx, guild, discord.AuditLogAction.emoji_create, emoji.id))
    return LogRecord("🎨 Emoji Created", "\n".join(lines), branding.GREEN)


async def emoji_delete(ctx: EventContext, guild: discord.Guild, emoji: discord.Emoji) -> Optional[LogRecord]:
    lines = [f"**Name:** {emoji.name}", f"**ID:** {emoji.id}"]
    lines.extend(await _responsible(ctx, guild, discord.AuditLogAction.emoji_delete, emoji.id))
    return LogRecord("🔥 Emoji Deleted", "\n".join(lines), branding.RED)


async def emoji_update(
    ctx: EventContext, guild: discord.Guild, before: discord.Emoji, after: discord.Emoji
) -> Optional[LogRecord]:
    if before.name == after.name:
        return None
    lines = [
        f"**Old Name:** `{before.name}`",
        f"**New Name:** `{after.name}`",
        f"**ID:** {after.id}",
    ]
    lines.extend(await _responsible(ctx, guild, discord.AuditLogAction.emoji_update, after.id))
    return LogRecord("✍️ Emoji Renamed", "\n".join(lines), branding.BLUE)


# ----------------------------------------------------------------------
# Stickers
# ----------------------------------------------------------------------

async def sticker_create(ctx: EventContext, guild: discord.Guild, sticker: discord.GuildSticker) -> Optional[LogRecord]:
    lines = [
        f"**Name:** {sticker.name}",
        f"**ID:** {sticker.id}",
        f"**Description:** {sticker.description or 'N/A'}",
        f"**Tags:** {sticker.emoji or 'N/A'}",
    ]
    lines.extend(await _responsible(ctx, guild, discord.AuditLogAction.sticker_create, sticker.id))
    return LogRecord("🖼️ Sticker Created", "\n".join(lines), branding.GREEN)


async def sticker_delete(ctx: EventContext, guild: discord.Guild, sticker: discord.GuildSticker) -> Optional[LogRecord]:
    lines = [f"**Name:** {sticker.name}", f"**ID:** {sticker.id}"]
    lines.extend(await _responsible(ctx, guild, discord.AuditLogAction.sticker_delete, sticker.id))
    return LogRecord("💥 Sticker Deleted", "\n".join(lines), branding.RED)


async def sticker_update(
    ctx: EventContext,
    guild: discord.Guild,
    before: discord.GuildSticker,
    after: discord.GuildSticker,
) -> Optional[LogRecord]:
    changes: List[str] = []
    if before.name != after.name:
        changes.append(f"Name changed from `{before.name}` to `{after.name}`")
    if before.description != after.description:
        changes.append("Description modified.")
    if not changes:
        return None
    description = f"**Sticker:** {after.name} ({after.id})\n\n**Changes:**\n{bullet_list(changes)}"
    responsible = await _responsible(ctx, guild, discord.AuditLogAction.sticker_update, after.id)
    if responsible:
        description = "\n".join([description, "", *responsible])
    return LogRecord("✍️ Sticker Updated", description, branding.BLUE)
