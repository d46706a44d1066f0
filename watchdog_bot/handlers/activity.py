"""Voice and presence events."""
from __future__ import annotations

from typing import List, Optional

import discord

from .. import branding
from ..records import EventContext, LogRecord, describe_user, mention_or_none

ACTIVITY_TYPE_LABELS = {
    discord.ActivityType.playing: "Playing",
    discord.ActivityType.streaming: "Streaming",
    discord.ActivityType.custom: "Custom Status",
}


def _channel_id(state: discord.VoiceState) -> Optional[int]:
    return getattr(state.channel, "id", None)


async def voice_channel(
    ctx: EventContext,
    member: discord.Member,
    before: discord.VoiceState,
    after: discord.VoiceState,
) -> Optional[LogRecord]:
    if getattr(member, "guild", None) is None:
        return None
    before_id = _channel_id(before)
    after_id = _channel_id(after)
    if before_id == after_id:
        return None
    if before_id is None:
        return LogRecord("🔊 Voice Joined", f"**Channel:** {mention_or_none(after.channel)}", branding.GREEN, member)
    if after_id is None:
        return LogRecord("🔇 Voice Left", f"**Channel:** {mention_or_none(before.channel)}", branding.RED, member)
    description = (
        f"**Old Channel:** {mention_or_none(before.channel)}\n"
        f"**New Channel:** {mention_or_none(after.channel)}"
    )
    return LogRecord("🔁 Voice Switched", description, branding.BLUE, member)


async def voice_state(
    ctx: EventContext,
    member: discord.Member,
    before: discord.VoiceState,
    after: discord.VoiceState,
) -> Optional[LogRecord]:
    """Mute, deafen, stream and video toggles within the same channel."""

    if getattr(member, "guild", None) is None:
        return None
    if _channel_id(before) != _channel_id(after):
        return None

    lines: List[str] = [
        f"**User:** {describe_user(member)}",
        f"**Channel:** {mention_or_none(after.channel)}",
    ]
    colour = branding.LIGHT_GREY
    server_action = False

    before_muted = before.mute or before.self_mute
    after_muted = after.mute or after.self_mute
    before_deafened = before.deaf or before.self_deaf
    after_deafened = after.deaf or after.self_deaf
    if before_muted != after_muted:
        title = "❌ User Muted" if after_muted else "✅ User Unmuted"
        lines.append(f"**Type:** {'Server' if after.mute else 'Self'} Mute")
        server_action = before.mute != after.mute
        if after.mute:
            colour = branding.ORANGE
    elif before_deafened != after_deafened:
        title = "❌ User Deafened" if after_deafened else "✅ User Undeafened"
        lines.append(f"**Type:** {'Server' if after.deaf else 'Self'} Deafen")
        server_action = before.deaf != after.deaf
        if after.deaf:
            colour = branding.ORANGE
    elif before.self_stream != after.self_stream:
        title = "📺 Stream Started" if after.self_stream else "🛑 Stream Stopped"
    elif before.self_video != after.self_video:
        title = "📹 Video Started" if after.self_video else "🛑 Video Stopped"
    else:
        return None

    if server_action:
        attribution = await ctx.resolve_actor(member.guild, discord.AuditLogAction.member_update, member.id)
        lines.append(f"**Moderator:** {attribution.actor_label()}")

    return LogRecord(title, "\n".join(lines), colour, member)


def _first_activity(member: Optional[discord.Member]):
    activities = getattr(member, "activities", None) or ()
    return activities[0] if activities else None


async def presence_update(
    ctx: EventContext, before: discord.Member, after: discord.Member
) -> Optional[LogRecord]:
    guild = getattr(after, "guild", None)
    if guild is None:
        return None
    if ctx.storage.get_log_channel(guild.id) is None:
        return None

    new_activity = _first_activity(after)
    old_activity = _first_activity(before)
    new_key = (getattr(new_activity, "name", None), getattr(new_activity, "type", None))
    old_key = (getattr(old_activity, "name", None), getattr(old_activity, "type", None))
    if new_key == old_key:
        return None

    lines = [f"**User:** {describe_user(after)}"]
    if new_activity is not None:
        label = ACTIVITY_TYPE_LABELS.get(new_activity.type, "Activity")
        lines.append(f"**Activity:** {new_activity.name}")
        details = getattr(new_activity, "details", None)
        if details:
            lines.append(f"**Details:** {details}")
        colour = branding.PINK if new_activity.type is discord.ActivityType.streaming else branding.GREEN
        return LogRecord(f"🕹️ {label} Started", "\n".join(lines), colour, after)

    lines.append(f"**Activity:** {old_activity.name}")
    return LogRecord("🛑 Activity Ended", "\n".join(lines), branding.RED, after)
