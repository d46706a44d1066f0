"""Help command for WatchDog."""
from __future__ import annotations

import logging
from typing import Iterable, List

import discord
from discord.ext import commands

from .. import branding
from ..bot import COMMAND_PREFIX, WatchDogBot

LOGGER = logging.getLogger(__name__)

EVERYONE = "Everyone"


def _visible_commands(commands_list: Iterable[commands.Command]) -> List[commands.Command]:
    return sorted(
        (command for command in commands_list if not command.hidden),
        key=lambda command: command.qualified_name,
    )


def build_help_embed(commands_list: Iterable[commands.Command]) -> discord.Embed:
    embed = discord.Embed(
        title=f"{branding.BOT_NAME} Bot Commands",
        description=f"My prefix is `{COMMAND_PREFIX}`. Below are the available moderation and utility commands:",
        colour=branding.BLUE,
    )
    for command in _visible_commands(commands_list):
        extras = command.extras or {}
        permission = extras.get("permission") or EVERYONE
        embed.add_field(
            name=f"{COMMAND_PREFIX}{command.qualified_name}",
            value=f"> {command.help or 'No description provided.'}\n> **Required Permission:** `{permission}`",
            inline=False,
        )
    return embed


class HelpCog(commands.Cog):
    """List the available commands."""

    def __init__(self, bot: WatchDogBot) -> None:
        self.bot = bot

    @commands.command(name="help", help="Displays all available commands and their usage.")
    async def help_command(self, ctx: commands.Context) -> None:
        LOGGER.info("Help command invoked by %s", ctx.author)
        await ctx.send(embed=build_help_embed(self.bot.commands))


async def setup(bot: WatchDogBot) -> None:
    await bot.add_cog(HelpCog(bot))
