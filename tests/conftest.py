import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import discord

from watchdog_bot.invites import InviteTracker
from watchdog_bot.records import EventContext
from watchdog_bot.storage import StorageManager

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def storage(tmp_path):
    """A StorageManager writing into a temporary directory."""
    return StorageManager(tmp_path)


@pytest.fixture
def event_context(storage):
    """Handler context with a frozen clock so recency checks are deterministic."""
    return EventContext(storage=storage, invites=InviteTracker(), self_id=999, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_user():
    def _make(user_id=100, name="User#0001", bot=False):
        user = MagicMock()
        user.id = user_id
        user.bot = bot
        user.name = name.split("#")[0]
        user.mention = f"<@{user_id}>"
        user.display_avatar.url = f"https://cdn.example/avatars/{user_id}.png"
        user.created_at = FIXED_NOW - timedelta(days=365)
        user.joined_at = FIXED_NOW - timedelta(days=30)
        user.__str__.return_value = name
        return user

    return _make


@pytest.fixture
def make_guild():
    def _make(guild_id=1):
        guild = MagicMock()
        guild.id = guild_id
        guild.owner_id = 1
        guild.audit_logs = MagicMock(side_effect=lambda limit=100, action=None: _iterate([], action))
        guild.invites = AsyncMock(return_value=[])
        guild.fetch_channel = AsyncMock()
        guild.get_channel.return_value = None
        guild.me.guild_permissions.manage_guild = True
        return guild

    return _make


async def _iterate(entries, action):
    for entry in entries:
        if action is None or entry.action == action:
            yield entry


@pytest.fixture
def audit_log():
    """Return a replacement for ``guild.audit_logs`` yielding ``entries``."""

    def _install(guild, *entries):
        guild.audit_logs = MagicMock(side_effect=lambda limit=100, action=None: _iterate(entries, action))
        return guild.audit_logs

    return _install


@pytest.fixture
def audit_entry():
    def _make(action, target_id=None, user=None, reason=None, age=1):
        entry = MagicMock()
        entry.action = action
        entry.target = MagicMock(id=target_id) if target_id is not None else None
        entry.user = user
        entry.reason = reason
        entry.created_at = FIXED_NOW - timedelta(seconds=age)
        return entry

    return _make


@pytest.fixture
def http_error():
    """Build a real ``discord.HTTPException`` carrying a Discord error code."""

    def _make(code=0, status=400, message="Error"):
        response = MagicMock()
        response.status = status
        response.reason = "Error"
        return discord.HTTPException(response, {"code": code, "message": message})

    return _make


@pytest.fixture
def text_channel():
    def _make(channel_id=500, name="mod-logs"):
        channel = MagicMock(spec=discord.TextChannel)
        channel.id = channel_id
        channel.name = name
        channel.mention = f"<#{channel_id}>"
        channel.send = AsyncMock()
        return channel

    return _make
