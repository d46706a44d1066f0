"""Membership events: joins, departures, nickname, roles, timeouts and bans."""
from __future__ import annotations

from typing import List, Optional

import discord
from discord.utils import format_dt

from .. import branding
from ..invites import InviteStatus
from ..records import EventContext, LogRecord, describe_user

NO_REASON = "No reason provided."


async def member_join(ctx: EventContext, member: discord.Member) -> Optional[LogRecord]:
    lines = [
        f"**User:** {describe_user(member)}",
        f"**Account Created:** {format_dt(member.created_at, 'f')} ({format_dt(member.created_at, 'R')})",
        "",
    ]

    attribution = await ctx.invites.attribute_join(member.guild)
    if attribution.status is InviteStatus.FOUND and attribution.invite is not None:
        invite = attribution.invite
        creator = str(invite.inviter) if invite.inviter else "System/Unknown"
        lines.append(f"**Invite Used:** `{invite.code}`")
        lines.append(f"**Created By:** {creator}")
        lines.append(f"**Uses:** {invite.uses}")
    elif attribution.status is InviteStatus.INDETERMINATE:
        lines.append("**Invite Used:** Could not determine invite link.")
    else:
        lines.append("⚠️ Invite tracking disabled.")

    return LogRecord("🟢 Member Joined", "\n".join(lines), branding.GREEN, member)


async def member_remove(ctx: EventContext, member: discord.Member) -> Optional[LogRecord]:
    lines = [f"**User:** {describe_user(member)}"]
    if member.joined_at:
        lines.append(f"**Joined:** {format_dt(member.joined_at, 'f')}")
    else:
        lines.append("**Joined:** Time unknown")

    attribution = await ctx.resolve_actor(member.guild, discord.AuditLogAction.kick, member.id)
    if not attribution:
        return LogRecord("🔴 Member Left/Quit", "\n".join(lines), branding.RED, member)

    lines.append("")
    lines.append(f"**Responsible Mod:** {attribution.actor_label()}")
    lines.append(f"**Reason:** {attribution.reason or NO_REASON}")
    return LogRecord("🔨 Member Kicked", "\n".join(lines), branding.ORANGE, member)


async def member_nickname(
    ctx: EventContext, before: discord.Member, after: discord.Member
) -> Optional[LogRecord]:
    if before.nick == after.nick:
        return None

    current = after.nick or after.name
    ctx.storage.record_nickname(after.guild.id, after.id, current)
    past = [nickname for nickname in ctx.storage.get_nickname_history(after.guild.id, after.id) if nickname != current]

    description = (
        f"**Old Nick:** {before.nick or 'None'}\n"
        f"**New Nick:** {after.nick or 'None'}\n\n"
        f"**Past Nicknames:** {', '.join(past) if past else 'None recorded.'}"
    )
    return LogRecord("📝 Nickname Changed (History Recorded)", description, branding.BLUE, after)


async def member_roles(
    ctx: EventContext, before: discord.Member, after: discord.Member
) -> Optional[LogRecord]:
    before_ids = {role.id for role in before.roles}
    after_ids = {role.id for role in after.roles}
    added = [role for role in after.roles if role.id not in before_ids]
    removed = [role for role in before.roles if role.id not in after_ids]
    if not added and not removed:
        return None

    attribution = await ctx.resolve_actor(after.guild, discord.AuditLogAction.member_role_update, after.id)
    lines = [
        f"**User:** {describe_user(after)}",
        f"**Moderator:** {attribution.actor_label()}",
    ]
    if added:
        lines.append(f"**Roles Added:** {', '.join(role.name for role in added)}")
    if removed:
        lines.append(f"**Roles Removed:** {', '.join(role.name for role in removed)}")
    return LogRecord("🛡️ Member Roles Updated", "\n".join(lines), branding.PINK, after)


async def member_timeout(
    ctx: EventContext, before: discord.Member, after: discord.Member
) -> Optional[LogRecord]:
    old_until = before.timed_out_until
    new_until = after.timed_out_until
    if old_until == new_until:
        return None

    now = ctx.now()
    started = new_until is not None and new_until > now
    ended = not started and old_until is not None and old_until > now
    if not started and not ended:
        return None

    attribution = await ctx.resolve_actor(after.guild, discord.AuditLogAction.member_update, after.id)
    moderator = attribution.actor_label("Unknown Moderator")
    lines: List[str] = [f"**User:** {describe_user(after)}"]
    if started:
        lines.append(f"**Moderator:** {moderator}")
        lines.append(f"**Until:** {format_dt(new_until, 'f')} ({format_dt(new_until, 'R')})")
        lines.append(f"**Reason:** {attribution.reason or NO_REASON}")
        return LogRecord("⏳ Member Timed Out", "\n".join(lines), branding.DARK_ORANGE, after)

    lines.append(f"**Action Performed By:** {moderator}")
    lines.append("**Reason:** Timeout lifted/expired.")
    return LogRecord("✅ Timeout Ended/Removed", "\n".join(lines), branding.GREEN, after)


async def member_ban(ctx: EventContext, guild: discord.Guild, user: discord.abc.User) -> Optional[LogRecord]:
    attribution = await ctx.resolve_actor(guild, discord.AuditLogAction.ban, user.id)
    description = (
        f"**User:** {describe_user(user)}\n"
        f"**Responsible Mod:** {attribution.actor_label()}\n"
        f"**Reason:** {attribution.reason or NO_REASON}"
    )
    return LogRecord("🔨 User Banned", description, branding.DARK_RED, user)


async def member_unban(ctx: EventContext, guild: discord.Guild, user: discord.abc.User) -> Optional[LogRecord]:
    attribution = await ctx.resolve_actor(guild, discord.AuditLogAction.unban, user.id)
    description = (
        f"**User:** {describe_user(user)}\n"
        f"**Responsible Mod:** {attribution.actor_label()}"
    )
    return LogRecord("🔓 User Unbanned", description, branding.YELLOW, user)
