"""Invite usage tracking used to explain member joins."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import discord

LOGGER = logging.getLogger(__name__)


class InviteStatus(enum.Enum):
    FOUND = "found"
    INDETERMINATE = "indeterminate"
    DISABLED = "disabled"


@dataclass(frozen=True)
class InviteAttribution:
    status: InviteStatus
    invite: Optional[discord.Invite] = None


def _snapshot(invites: Iterable[discord.Invite]) -> Dict[str, int]:
    return {invite.code: invite.uses or 0 for invite in invites}


class InviteTracker:
    """Keep a per-guild ``code -> uses`` snapshot of invites.

    A guild without a snapshot is not tracked, usually because the bot lacks
    the Manage Server permission there.  Two joins landing before the snapshot
    is refreshed can both be compared against the same counts; the first
    increase found wins.
    """

    def __init__(self) -> None:
        self._snapshots: Dict[int, Dict[str, int]] = {}

    def is_tracking(self, guild_id: int) -> bool:
        return guild_id in self._snapshots

    def snapshot(self, guild_id: int) -> Optional[Dict[str, int]]:
        cached = self._snapshots.get(guild_id)
        return dict(cached) if cached is not None else None

    async def prime_guild(self, guild: discord.Guild) -> bool:
        me = guild.me
        if me is None or not me.guild_permissions.manage_guild:
            LOGGER.info("Missing Manage Server in guild %s; invite tracking disabled", guild.id)
            self._snapshots.pop(guild.id, None)
            return False
        try:
            invites = await guild.invites()
        except discord.HTTPException as error:
            LOGGER.warning("Failed to cache invites for guild %s: %s", guild.id, error)
            self._snapshots.pop(guild.id, None)
            return False
        self._snapshots[guild.id] = _snapshot(invites)
        return True

    async def prime_guilds(self, guilds: Iterable[discord.Guild]) -> int:
        primed = 0
        for guild in guilds:
            if await self.prime_guild(guild):
                primed += 1
        return primed

    def forget_guild(self, guild_id: int) -> None:
        self._snapshots.pop(guild_id, None)

    def track_invite(self, invite: discord.Invite) -> None:
        guild_id = getattr(invite.guild, "id", None)
        cached = self._snapshots.get(guild_id)
        if cached is not None:
            cached[invite.code] = invite.uses or 0

    def forget_invite(self, invite: discord.Invite) -> None:
        guild_id = getattr(invite.guild, "id", None)
        cached = self._snapshots.get(guild_id)
        if cached is not None:
            cached.pop(invite.code, None)

    async def attribute_join(self, guild: discord.Guild) -> InviteAttribution:
        cached = self._snapshots.get(guild.id)
        if cached is None:
            return InviteAttribution(InviteStatus.DISABLED)
        try:
            live = await guild.invites()
        except discord.HTTPException as error:
            LOGGER.warning("Failed to fetch invites for guild %s: %s", guild.id, error)
            return InviteAttribution(InviteStatus.INDETERMINATE)

        used: Optional[discord.Invite] = None
        for invite in live:
            if (invite.uses or 0) > cached.get(invite.code, 0):
                used = invite
                break
        self._snapshots[guild.id] = _snapshot(live)
        if used is None:
            return InviteAttribution(InviteStatus.INDETERMINATE)
        return InviteAttribution(InviteStatus.FOUND, used)
