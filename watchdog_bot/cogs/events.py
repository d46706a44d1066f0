"""Gateway listeners that feed the event log pipeline."""
from __future__ import annotations

from typing import Sequence

import discord
from discord.ext import commands

from ..bot import WatchDogBot
from ..handlers.expressions import iter_changes
from ..records import EventKind


class EventLogCog(commands.Cog):
    """Translate gateway events into log records."""

    def __init__(self, bot: WatchDogBot) -> None:
        self.bot = bot

    # ------------------------------------------------------------------
    # Invite snapshots
    # ------------------------------------------------------------------
    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        await self.bot.invites.prime_guild(guild)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        self.bot.invites.forget_guild(guild.id)

    @commands.Cog.listener()
    async def on_invite_create(self, invite: discord.Invite) -> None:
        self.bot.invites.track_invite(invite)

    @commands.Cog.listener()
    async def on_invite_delete(self, invite: discord.Invite) -> None:
        self.bot.invites.forget_invite(invite)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        await self.bot.emit(EventKind.MEMBER_JOIN, member.guild, member)

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member) -> None:
        await self.bot.emit(EventKind.MEMBER_REMOVE, member.guild, member)

    @commands.Cog.listener()
    async def on_member_update(self, before: discord.Member, after: discord.Member) -> None:
        for kind in (EventKind.MEMBER_NICKNAME, EventKind.MEMBER_ROLES, EventKind.MEMBER_TIMEOUT):
            await self.bot.emit(kind, after.guild, before, after)

    @commands.Cog.listener()
    async def on_member_ban(self, guild: discord.Guild, user: discord.abc.User) -> None:
        await self.bot.emit(EventKind.MEMBER_BAN, guild, guild, user)

    @commands.Cog.listener()
    async def on_member_unban(self, guild: discord.Guild, user: discord.User) -> None:
        await self.bot.emit(EventKind.MEMBER_UNBAN, guild, guild, user)

    @commands.Cog.listener()
    async def on_presence_update(self, before: discord.Member, after: discord.Member) -> None:
        await self.bot.emit(EventKind.PRESENCE_UPDATE, after.guild, before, after)

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        for kind in (EventKind.VOICE_CHANNEL, EventKind.VOICE_STATE):
            await self.bot.emit(kind, member.guild, member, before, after)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    @commands.Cog.listener()
    async def on_message_delete(self, message: discord.Message) -> None:
        await self.bot.emit(EventKind.MESSAGE_DELETE, message.guild, message)

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        for kind in (EventKind.MESSAGE_EDIT, EventKind.MESSAGE_PIN):
            await self.bot.emit(kind, after.guild, before, after)

    # ------------------------------------------------------------------
    # Channels, roles and guild settings
    # ------------------------------------------------------------------
    @commands.Cog.listener()
    async def on_guild_channel_create(self, channel: discord.abc.GuildChannel) -> None:
        await self.bot.emit(EventKind.CHANNEL_CREATE, channel.guild, channel)

    @commands.Cog.listener()
    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        await self.bot.emit(EventKind.CHANNEL_DELETE, channel.guild, channel)

    @commands.Cog.listener()
    async def on_guild_channel_update(
        self,
        before: discord.abc.GuildChannel,
        after: discord.abc.GuildChannel,
    ) -> None:
        await self.bot.emit(EventKind.CHANNEL_UPDATE, after.guild, before, after)

    @commands.Cog.listener()
    async def on_guild_role_create(self, role: discord.Role) -> None:
        await self.bot.emit(EventKind.ROLE_CREATE, role.guild, role)

    @commands.Cog.listener()
    async def on_guild_role_delete(self, role: discord.Role) -> None:
        await self.bot.emit(EventKind.ROLE_DELETE, role.guild, role)

    @commands.Cog.listener()
    async def on_guild_role_update(self, before: discord.Role, after: discord.Role) -> None:
        await self.bot.emit(EventKind.ROLE_UPDATE, after.guild, before, after)

    @commands.Cog.listener()
    async def on_guild_update(self, before: discord.Guild, after: discord.Guild) -> None:
        await self.bot.emit(EventKind.GUILD_UPDATE, after, before, after)

    # ------------------------------------------------------------------
    # Emojis and stickers
    # ------------------------------------------------------------------
    @commands.Cog.listener()
    async def on_guild_emojis_update(
        self,
        guild: discord.Guild,
        before: Sequence[discord.Emoji],
        after: Sequence[discord.Emoji],
    ) -> None:
        changes = iter_changes(
            before,
            after,
            created=EventKind.EMOJI_CREATE,
            deleted=EventKind.EMOJI_DELETE,
            updated=EventKind.EMOJI_UPDATE,
        )
        for kind, payload in changes:
            await self.bot.emit(kind, guild, guild, *payload)

    @commands.Cog.listener()
    async def on_guild_stickers_update(
        self,
        guild: discord.Guild,
        before: Sequence[discord.GuildSticker],
        after: Sequence[discord.GuildSticker],
    ) -> None:
        changes = iter_changes(
            before,
            after,
            created=EventKind.STICKER_CREATE,
            deleted=EventKind.STICKER_DELETE,
            updated=EventKind.STICKER_UPDATE,
        )
        for kind, payload in changes:
            await self.bot.emit(kind, guild, guild, *payload)


async def setup(bot: WatchDogBot) -> None:
    await bot.add_cog(EventLogCog(bot))
