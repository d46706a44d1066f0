"""Moderation commands for WatchDog."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import discord
from discord.ext import commands

from .. import branding
from ..bot import COMMAND_PREFIX, UNLOGGED_COMMANDS, WatchDogBot
from ..records import EventKind
from ..utils import parse_channel_reference

LOGGER = logging.getLogger(__name__)

DEFAULT_REASON = "No reason provided"


def can_moderate(guild: discord.Guild, member: discord.Member) -> bool:
    """Return True if the bot sits above ``member`` in the role hierarchy."""

    if member.id == guild.owner_id:
        return False
    me = guild.me
    if me is None:
        return False
    return me.top_role > member.top_role


def find_channel(guild: discord.Guild, value: str) -> Tuple[Optional[discord.abc.GuildChannel], bool]:
    """Resolve a channel mention, id or name within ``guild``.

    Returns the channel (or ``None``) and whether it was given as a mention.
    """

    cleaned = value.strip()
    mentioned = cleaned.startswith("<#")
    channel_id = parse_channel_reference(cleaned)
    if channel_id is not None:
        channel = guild.get_channel(channel_id)
        if channel is not None or mentioned:
            return channel, mentioned
    # Numeric names such as "2024" fall through to the name lookup.
    return discord.utils.get(guild.channels, name=cleaned.lstrip("#")), False


class ModerationCog(commands.Cog):
    """Log channel configuration and member moderation."""

    def __init__(self, bot: WatchDogBot) -> None:
        self.bot = bot

    @commands.command(
        name="setlog",
        help="Sets the current channel or a tagged channel as the dedicated log channel.",
        usage="[#channel|id|name]",
        extras={
            "permission": "Administrator",
            "denied": "❌ You must be an Administrator to use this command.",
        },
    )
    @commands.guild_only()
    @commands.has_permissions(administrator=True)
    async def setlog(self, ctx: commands.Context, *, channel: Optional[str] = None) -> None:
        target = ctx.channel
        if channel:
            resolved, mentioned = find_channel(ctx.guild, channel)
            if resolved is None:
                await ctx.reply(
                    f"⚠️ Could not find a channel matching `{channel}`. Using the current channel as the log channel."
                )
            elif not isinstance(resolved, discord.TextChannel):
                if mentioned:
                    await ctx.reply(
                        f"❌ The channel you mentioned ({resolved.mention}) is not a valid text channel for logging."
                    )
                else:
                    await ctx.reply("❌ The ID or name you provided corresponds to a channel that is not a text channel.")
                return
            else:
                target = resolved

        if not isinstance(target, discord.TextChannel):
            await ctx.reply("❌ This channel is not a text channel and cannot be used for logging.")
            return

        self.bot.storage.set_log_channel(ctx.guild.id, target.id)
        LOGGER.info("Log channel for guild %s set to %s by %s", ctx.guild.id, target.id, ctx.author.id)
        embed = discord.Embed(
            title="✅ Log Channel Set!",
            description=(
                f"The channel **{target.name}** ({target.mention}) has been successfully set "
                f"as the {branding.BOT_NAME} log channel for this server."
            ),
            colour=branding.GREEN,
        )
        await ctx.send(embed=embed)

    @commands.command(
        name="kick",
        help="Kicks a user from the server.",
        usage="<@user|id> [reason]",
        extras={
            "permission": "Kick Members",
            "denied": "❌ You do not have permission to kick members.",
        },
    )
    @commands.guild_only()
    @commands.has_permissions(kick_members=True)
    async def kick(
        self,
        ctx: commands.Context,
        member: Optional[discord.Member] = None,
        *,
        reason: Optional[str] = None,
    ) -> None:
        if member is None:
            await ctx.reply(f"Usage: {COMMAND_PREFIX}kick {ctx.command.usage}")
            return
        if not can_moderate(ctx.guild, member):
            await ctx.reply("❌ I cannot kick this user. Check my role hierarchy.")
            return

        try:
            await member.kick(reason=reason or DEFAULT_REASON)
        except discord.HTTPException as error:
            LOGGER.warning("Failed to kick %s in guild %s: %s", member.id, ctx.guild.id, error)
            await ctx.send(f"❌ An error occurred while trying to kick: {error.text or error}")
            return
        await ctx.send(f"✅ Successfully kicked {member}.")

    @commands.command(
        name="ban",
        help="Bans a user from the server.",
        usage="<@user|id> [reason]",
        extras={
            "permission": "Ban Members",
            "denied": "❌ You do not have permission to ban members.",
        },
    )
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def ban(
        self,
        ctx: commands.Context,
        user: Optional[discord.User] = None,
        *,
        reason: Optional[str] = None,
    ) -> None:
        if user is None:
            await ctx.reply(f"Usage: {COMMAND_PREFIX}ban {ctx.command.usage}")
            return
        member = ctx.guild.get_member(user.id)
        if member is not None and not can_moderate(ctx.guild, member):
            await ctx.reply("❌ I cannot ban this user. Check my role hierarchy.")
            return

        try:
            await ctx.guild.ban(user, reason=reason or DEFAULT_REASON)
        except discord.HTTPException as error:
            LOGGER.warning("Failed to ban %s in guild %s: %s", user.id, ctx.guild.id, error)
            await ctx.send(f"❌ An error occurred while trying to ban: {error.text or error}")
            return
        await ctx.send(f"✅ Successfully banned {user}.")

    @commands.Cog.listener()
    async def on_command_completion(self, ctx: commands.Context) -> None:
        if ctx.command is None or ctx.command.qualified_name in UNLOGGED_COMMANDS:
            return
        await self.bot.emit(EventKind.COMMAND_USED, ctx.guild, ctx)


async def setup(bot: WatchDogBot) -> None:
    await bot.add_cog(ModerationCog(bot))
