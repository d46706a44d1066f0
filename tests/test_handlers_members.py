import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import discord

from watchdog_bot import branding
from watchdog_bot.handlers import members


def _member(make_user, guild, user_id=42, name="Target#0042", nick=None, roles=(), timed_out_until=None):
    member = make_user(user_id, name)
    member.guild = guild
    member.nick = nick
    member.roles = list(roles)
    member.timed_out_until = timed_out_until
    return member


def _role(role_id, name):
    role = MagicMock()
    role.id = role_id
    role.name = name
    return role


def _invite(code, uses, inviter=None):
    invite = MagicMock()
    invite.code = code
    invite.uses = uses
    invite.inviter = inviter
    return invite


@pytest.mark.asyncio
async def test_member_join_reports_invite(event_context, make_guild, make_user):
    guild = make_guild()
    guild.invites = AsyncMock(return_value=[_invite("A", 5), _invite("B", 2)])
    await event_context.invites.prime_guild(guild)
    guild.invites = AsyncMock(return_value=[_invite("A", 6, make_user(7, "Inviter#0007")), _invite("B", 2)])

    record = await members.member_join(event_context, _member(make_user, guild))

    assert record.title == "🟢 Member Joined"
    assert record.colour == branding.GREEN
    assert "**Invite Used:** `A`" in record.description
    assert "**Created By:** Inviter#0007" in record.description
    assert "**Uses:** 6" in record.description
    assert "Target#0042 (42)" in record.description


@pytest.mark.asyncio
async def test_member_join_indeterminate_invite(event_context, make_guild, make_user):
    guild = make_guild()
    guild.invites = AsyncMock(return_value=[_invite("A", 5)])
    await event_context.invites.prime_guild(guild)

    record = await members.member_join(event_context, _member(make_user, guild))

    assert "**Invite Used:** Could not determine invite link." in record.description


@pytest.mark.asyncio
async def test_member_join_tracking_disabled(event_context, make_guild, make_user):
    record = await members.member_join(event_context, _member(make_user, make_guild()))

    assert "⚠️ Invite tracking disabled." in record.description


@pytest.mark.asyncio
async def test_member_remove_without_kick_is_departure(event_context, make_guild, make_user):
    record = await members.member_remove(event_context, _member(make_user, make_guild()))

    assert record.title == "🔴 Member Left/Quit"
    assert record.colour == branding.RED
    assert "**Joined:**" in record.description


@pytest.mark.asyncio
async def test_member_remove_with_recent_kick(event_context, make_guild, make_user, audit_log, audit_entry):
    guild = make_guild()
    audit_log(guild, audit_entry(discord.AuditLogAction.kick, 42, make_user(7, "Mod#0007"), "spam"))

    record = await members.member_remove(event_context, _member(make_user, guild))

    assert record.title == "🔨 Member Kicked"
    assert record.colour == branding.ORANGE
    assert "**Responsible Mod:** Mod#0007 (7)" in record.description
    assert "**Reason:** spam" in record.description


@pytest.mark.asyncio
async def test_member_remove_with_stale_kick(event_context, make_guild, make_user, audit_log, audit_entry):
    guild = make_guild()
    audit_log(guild, audit_entry(discord.AuditLogAction.kick, 42, make_user(7), age=30))

    record = await members.member_remove(event_context, _member(make_user, guild))

    assert record.title == "🔴 Member Left/Quit"


@pytest.mark.asyncio
async def test_member_nickname_records_history(event_context, make_guild, make_user):
    guild = make_guild()
    first = _member(make_user, guild, nick=None)
    second = _member(make_user, guild, nick="alpha")
    third = _member(make_user, guild, nick="beta")

    record = await members.member_nickname(event_context, first, second)
    assert "**Past Nicknames:** None recorded." in record.description

    record = await members.member_nickname(event_context, second, third)
    assert record.title == "📝 Nickname Changed (History Recorded)"
    assert "**Old Nick:** alpha" in record.description
    assert "**New Nick:** beta" in record.description
    assert "**Past Nicknames:** alpha" in record.description
    assert event_context.storage.get_nickname_history(guild.id, 42) == ["beta", "alpha"]


@pytest.mark.asyncio
async def test_member_nickname_cleared_records_username(event_context, make_guild, make_user):
    guild = make_guild()
    before = _member(make_user, guild, nick="alpha")
    after = _member(make_user, guild, nick=None)

    record = await members.member_nickname(event_context, before, after)

    assert "**New Nick:** None" in record.description
    assert event_context.storage.get_nickname_history(guild.id, 42) == ["Target"]


@pytest.mark.asyncio
async def test_member_nickname_unchanged(event_context, make_guild, make_user):
    guild = make_guild()
    member = _member(make_user, guild, nick="alpha")

    assert await members.member_nickname(event_context, member, member) is None


@pytest.mark.asyncio
async def test_member_roles_lists_changes(event_context, make_guild, make_user, audit_log, audit_entry):
    guild = make_guild()
    audit_log(guild, audit_entry(discord.AuditLogAction.member_role_update, 42, make_user(7, "Mod#0007")))
    before = _member(make_user, guild, roles=[_role(1, "Member"), _role(2, "Muted")])
    after = _member(make_user, guild, roles=[_role(1, "Member"), _role(3, "Helper")])

    record = await members.member_roles(event_context, before, after)

    assert record.title == "🛡️ Member Roles Updated"
    assert "**Roles Added:** Helper" in record.description
    assert "**Roles Removed:** Muted" in record.description
    assert "**Moderator:** Mod#0007 (7)" in record.description


@pytest.mark.asyncio
async def test_member_roles_unchanged(event_context, make_guild, make_user):
    guild = make_guild()
    roles = [_role(1, "Member")]
    before = _member(make_user, guild, roles=roles)
    after = _member(make_user, guild, roles=roles)

    assert await members.member_roles(event_context, before, after) is None


@pytest.mark.asyncio
async def test_member_timeout_started(event_context, make_guild, make_user, now, audit_log, audit_entry):
    guild = make_guild()
    audit_log(guild, audit_entry(discord.AuditLogAction.member_update, 42, make_user(7, "Mod#0007"), "calm down"))
    before = _member(make_user, guild)
    after = _member(make_user, guild, timed_out_until=now + timedelta(minutes=10))

    record = await members.member_timeout(event_context, before, after)

    assert record.title == "⏳ Member Timed Out"
    assert record.colour == branding.DARK_ORANGE
    assert "**Moderator:** Mod#0007 (7)" in record.description
    assert "**Reason:** calm down" in record.description


@pytest.mark.asyncio
async def test_member_timeout_removed(event_context, make_guild, make_user, now):
    guild = make_guild()
    before = _member(make_user, guild, timed_out_until=now + timedelta(minutes=10))
    after = _member(make_user, guild)

    record = await members.member_timeout(event_context, before, after)

    assert record.title == "✅ Timeout Ended/Removed"
    assert "**Action Performed By:** Unknown Moderator" in record.description


@pytest.mark.asyncio
async def test_member_timeout_expired_is_ignored(event_context, make_guild, make_user, now):
    guild = make_guild()
    before = _member(make_user, guild, timed_out_until=now - timedelta(minutes=1))
    after = _member(make_user, guild)

    assert await members.member_timeout(event_context, before, after) is None


@pytest.mark.asyncio
async def test_member_ban_and_unban(event_context, make_guild, make_user, audit_log, audit_entry):
    guild = make_guild()
    user = make_user(42, "Target#0042")
    mod = make_user(7, "Mod#0007")
    audit_log(
        guild,
        audit_entry(discord.AuditLogAction.ban, 42, mod, "raid"),
        audit_entry(discord.AuditLogAction.unban, 42, mod),
    )

    banned = await members.member_ban(event_context, guild, user)
    unbanned = await members.member_unban(event_context, guild, user)

    assert banned.title == "🔨 User Banned"
    assert banned.colour == branding.DARK_RED
    assert "**Reason:** raid" in banned.description
    assert unbanned.title == "🔓 User Unbanned"
    assert "**Responsible Mod:** Mod#0007 (7)" in unbanned.description


@pytest.mark.asyncio
async def test_member_ban_without_audit_entry(event_context, make_guild, make_user):
    record = await members.member_ban(event_context, make_guild(), make_user(42))

    assert "**Responsible Mod:** Unknown" in record.description
    assert "**Reason:** No reason provided." in record.description
