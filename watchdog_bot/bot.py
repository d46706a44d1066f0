"""Bot setup for WatchDog."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import discord
from discord.ext import commands
from dotenv import load_dotenv

load_dotenv()

from .delivery import DeliveryStatus, LogDelivery
from .handlers import build_record
from .health import DEFAULT_PORT, HealthCheckServer
from .invites import InviteTracker
from .records import EventContext, EventKind
from .storage import DEFAULT_STORAGE_ROOT, StorageManager

LOGGER = logging.getLogger(__name__)

COMMAND_PREFIX = "!"
GENERIC_COMMAND_ERROR = "❌ There was an error trying to execute that command! Check the console."
# Commands whose usage is never written to the log channel.
UNLOGGED_COMMANDS = frozenset({"setlog"})


class WatchDogBot(commands.Bot):
    """Discord bot that mirrors server activity into a log channel."""

    def __init__(self, *, storage_root=DEFAULT_STORAGE_ROOT, health_port: Optional[int] = None) -> None:
        intents = discord.Intents.default()
        intents.members = True
        intents.presences = True
        intents.message_content = True
        super().__init__(
            command_prefix=commands.when_mentioned_or(COMMAND_PREFIX),
            intents=intents,
            help_command=None,
            activity=discord.Activity(type=discord.ActivityType.watching, name="for suspicious activity."),
        )
        self.storage = StorageManager(storage_root)
        self.invites = InviteTracker()
        self.delivery = LogDelivery(self.storage)
        self.event_context = EventContext(storage=self.storage, invites=self.invites)
        self.health = HealthCheckServer(self, health_port) if health_port else None

    # ------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load cogs and start the health endpoint."""

        await self.load_extension("watchdog_bot.cogs.events")
        await self.load_extension("watchdog_bot.cogs.moderation")
        await self.load_extension("watchdog_bot.cogs.help")
        if self.health is not None:
            await self.health.start()

    async def on_ready(self) -> None:
        self.event_context.self_id = getattr(self.user, "id", None)
        primed = await self.invites.prime_guilds(self.guilds)
        LOGGER.info(
            "WatchDog is ready. Logged in as %s (%s); tracking invites in %s/%s guilds",
            self.user,
            getattr(self.user, "id", "unknown"),
            primed,
            len(self.guilds),
        )

    async def close(self) -> None:
        if self.health is not None:
            await self.health.stop()
        await super().close()

    # ------------------------------------------------------------------
    async def emit(self, kind: EventKind, guild: Optional[discord.Guild], *payload: Any) -> Optional[DeliveryStatus]:
        """Build the record for an event and deliver it to the guild's log channel."""

        if guild is None:
            return None
        record = await build_record(kind, self.event_context, *payload)
        if record is None:
            return None
        try:
            return await self.delivery.deliver(guild, record)
        except Exception:
            LOGGER.exception("Unexpected error delivering %s log for guild %s", kind.value, guild.id)
            return DeliveryStatus.FAILED

    # ------------------------------------------------------------------
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.NoPrivateMessage):
            await ctx.send("❌ This command can only be used in a server.")
            return
        if isinstance(error, commands.MissingPermissions):
            extras = getattr(ctx.command, "extras", None) or {}
            await ctx.reply(extras.get("denied", "❌ You do not have permission to use this command."))
            await self._log_attempt(ctx)
            return
        if isinstance(error, (commands.BadArgument, commands.MissingRequiredArgument)):
            await ctx.reply(f"Usage: {COMMAND_PREFIX}{ctx.command.qualified_name} {ctx.command.usage or ''}".rstrip())
            await self._log_attempt(ctx)
            return

        original = getattr(error, "original", error)
        LOGGER.error("Error executing command %s", getattr(ctx.command, "qualified_name", None), exc_info=original)
        await ctx.reply(GENERIC_COMMAND_ERROR)

    async def _log_attempt(self, ctx: commands.Context) -> None:
        """Record a rejected moderation attempt as command usage."""

        if ctx.guild is None or ctx.command is None or ctx.command.qualified_name in UNLOGGED_COMMANDS:
            return
        await self.emit(EventKind.COMMAND_USED, ctx.guild, ctx)


# ----------------------------------------------------------------------
# Public helpers
# ----------------------------------------------------------------------

def _health_port() -> int:
    raw = os.getenv("PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"PORT must be an integer, got {raw!r}.") from None


def _log_level() -> int:
    raw = os.getenv("WATCHDOG_LOG_LEVEL") or "INFO"
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(f"WATCHDOG_LOG_LEVEL must be a logging level name, got {raw!r}.")
    return level


def create_bot() -> WatchDogBot:
    logging.basicConfig(level=_log_level())
    storage_root = Path(os.getenv("WATCHDOG_DATA_DIR") or DEFAULT_STORAGE_ROOT)
    return WatchDogBot(storage_root=storage_root, health_port=_health_port())


def run() -> None:
    """Entry point for running the bot via ``python -m watchdog_bot``."""

    token = os.getenv("BOT_TOKEN") or os.getenv("DISCORD_TOKEN")
    if not token:
        raise RuntimeError("Set the BOT_TOKEN environment variable before running the bot.")
    bot = create_bot()
    bot.run(token)


__all__ = ["WatchDogBot", "create_bot", "run"]
