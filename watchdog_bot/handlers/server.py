"""Server configuration events: channels, roles and guild settings."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import discord

from .. import branding
from ..records import EventContext, LogRecord, bullet_list, mention_or_none

CHANNEL_TYPE_LABELS = {
    discord.ChannelType.text: "Text",
    discord.ChannelType.voice: "Voice",
    discord.ChannelType.category: "Category",
    discord.ChannelType.news: "Announcement",
    discord.ChannelType.stage_voice: "Stage",
    discord.ChannelType.forum: "Forum",
}


def channel_type_label(channel: discord.abc.GuildChannel) -> str:
    return CHANNEL_TYPE_LABELS.get(getattr(channel, "type", None), "Other")


def colour_hex(colour: discord.Colour) -> str:
    return str(colour).upper()


def _overwrite_map(channel: discord.abc.GuildChannel) -> Dict[int, Tuple[int, int]]:
    overwrites = getattr(channel, "overwrites", None) or {}
    result: Dict[int, Tuple[int, int]] = {}
    for target, overwrite in overwrites.items():
        allow, deny = overwrite.pair()
        result[target.id] = (allow.value, deny.value)
    return result


def channel_changes(before: discord.abc.GuildChannel, after: discord.abc.GuildChannel) -> List[str]:
    changes: List[str] = []
    if before.name != after.name:
        changes.append(f"Name changed from `{before.name}` to `{after.name}`")
    if getattr(before, "topic", None) != getattr(after, "topic", None):
        changes.append("Topic was modified.")
    before_slowmode = getattr(before, "slowmode_delay", None)
    after_slowmode = getattr(after, "slowmode_delay", None)
    if before_slowmode != after_slowmode:
        changes.append(f"Slowmode changed from `{before_slowmode}s` to `{after_slowmode}s`")

    before_overwrites = _overwrite_map(before)
    after_overwrites = _overwrite_map(after)
    if len(before_overwrites) != len(after_overwrites):
        changes.append(
            f"Permission Overrides: Count changed from {len(before_overwrites)} to {len(after_overwrites)}."
        )
    else:
        modified = [
            target_id
            for target_id, pair in after_overwrites.items()
            if before_overwrites.get(target_id) != pair
        ]
        if modified:
            changes.append(
                f"Permission Overrides: {len(modified)} roles/users had their channel permissions modified."
            )
    return changes


def role_changes(before: discord.Role, after: discord.Role) -> List[str]:
    changes: List[str] = []
    if before.name != after.name:
        changes.append(f"Name changed from `{before.name}` to `{after.name}`")
    if before.colour != after.colour:
        changes.append(f"Color changed from `{colour_hex(before.colour)}` to `{colour_hex(after.colour)}`")
    if before.permissions != after.permissions:
        changes.append("Permissions were modified.")
    return changes


def _verification_label(level: discord.VerificationLevel) -> str:
    return str(level).replace("_", " ").title()


def guild_changes(before: discord.Guild, after: discord.Guild) -> List[str]:
    changes: List[str] = []
    if before.name != after.name:
        changes.append(f"Name changed from `{before.name}` to `{after.name}`")
    if getattr(before.icon, "key", None) != getattr(after.icon, "key", None):
        changes.append("Icon changed.")
    if before.verification_level != after.verification_level:
        changes.append(
            "Verification Level changed from "
            f"`{_verification_label(before.verification_level)}` to `{_verification_label(after.verification_level)}`"
        )
    if getattr(before.system_channel, "id", None) != getattr(after.system_channel, "id", None):
        changes.append(f"System Channel changed to {mention_or_none(after.system_channel)}")
    return changes


# ----------------------------------------------------------------------
# Channels
# ----------------------------------------------------------------------

async def channel_create(ctx: EventContext, channel: discord.abc.GuildChannel) -> Optional[LogRecord]:
    if getattr(channel, "guild", None) is None:
        return None
    attribution = await ctx.resolve_actor(channel.guild, discord.AuditLogAction.channel_create, channel.id)
    lines = [
        f"**Name:** {channel.name}",
        f"**Type:** {channel_type_label(channel)}",
        f"**ID:** {channel.id}",
    ]
    if attribution:
        lines.append(f"**Responsible Mod:** {attribution.actor_label()}")
    return LogRecord("➕ Channel Created", "\n".join(lines), branding.GREEN)


async def channel_delete(ctx: EventContext, channel: discord.abc.GuildChannel) -> Optional[LogRecord]:
    if getattr(channel, "guild", None) is None:
        return None
    attribution = await ctx.resolve_actor(channel.guild, discord.AuditLogAction.channel_delete, channel.id)
    lines = [
        f"**Name:** {channel.name}",
        f"**ID:** {channel.id}",
        f"**Type:** {channel_type_label(channel)}",
    ]
    if attribution:
        lines.append(f"**Responsible Mod:** {attribution.actor_label()}")
    return LogRecord("➖ Channel Deleted", "\n".join(lines), branding.RED)


async def channel_update(
    ctx: EventContext,
    before: discord.abc.GuildChannel,
    after: discord.abc.GuildChannel,
) -> Optional[LogRecord]:
    if getattr(after, "guild", None) is None:
        return None
    changes = channel_changes(before, after)
    if not changes:
        return None

    attribution = await ctx.resolve_actor(after.guild, discord.AuditLogAction.channel_update, after.id)
    description = (
        f"**Channel:** {after.name} ({mention_or_none(after)})\n"
        f"**Moderator:** {attribution.actor_label()}\n\n"
        f"**Changes:**\n{bullet_list(changes)}"
    )
    return LogRecord("⚙️ Channel Settings Updated", description, branding.YELLOW)


# ----------------------------------------------------------------------
# Roles
# ----------------------------------------------------------------------

async def role_create(ctx: EventContext, role: discord.Role) -> Optional[LogRecord]:
    attribution = await ctx.resolve_actor(role.guild, discord.AuditLogAction.role_create, role.id)
    lines = [
        f"**Name:** {role.name}",
        f"**Color:** {colour_hex(role.colour)}",
        f"**ID:** {role.id}",
    ]
    if attribution:
        lines.append(f"**Responsible Mod:** {attribution.actor_label()}")
    return LogRecord("➕ Role Created", "\n".join(lines), branding.GREEN)


async def role_delete(ctx: EventContext, role: discord.Role) -> Optional[LogRecord]:
    attribution = await ctx.resolve_actor(role.guild, discord.AuditLogAction.role_delete, role.id)
    lines = [f"**Name:** {role.name}", f"**ID:** {role.id}"]
    if attribution:
        lines.append(f"**Responsible Mod:** {attribution.actor_label()}")
    return LogRecord("➖ Role Deleted", "\n".join(lines), branding.RED)


async def role_update(ctx: EventContext, before: discord.Role, after: discord.Role) -> Optional[LogRecord]:
    changes = role_changes(before, after)
    if not changes:
        return None

    attribution = await ctx.resolve_actor(after.guild, discord.AuditLogAction.role_update, after.id)
    description = (
        f"**Role:** {after.name} ({after.id})\n"
        f"**Moderator:** {attribution.actor_label()}\n\n"
        f"**Changes:**\n{bullet_list(changes)}"
    )
    return LogRecord("⚙️ Role Settings Updated", description, branding.YELLOW)


# ----------------------------------------------------------------------
# Guild
# ----------------------------------------------------------------------

async def guild_update(ctx: EventContext, before: discord.Guild, after: discord.Guild) -> Optional[LogRecord]:
    changes = guild_changes(before, after)
    if not changes:
        return None

    # Guild updates carry no useful target, any recent entry is accepted.
    attribution = await ctx.resolve_actor(after, discord.AuditLogAction.guild_update)
    description = (
        f"**Moderator:** {attribution.actor_label('Unknown/Automatic')}\n\n"
        f"**Changes:**\n{bullet_list(changes)}"
    )
    return LogRecord("🌐 Server Settings Updated", description, branding.DARK_GREEN)
