"""Deliver log records to each guild's configured log channel."""
from __future__ import annotations

import enum
import logging
from typing import Optional

import discord

from .records import LogRecord
from .storage import StorageManager
from .utils import build_log_embed

LOGGER = logging.getLogger(__name__)

# Unknown Channel, Missing Access: the destination is gone for good.
UNREACHABLE_ERROR_CODES = frozenset({10003, 50001})


class DeliveryStatus(enum.Enum):
    SENT = "sent"
    NO_DESTINATION = "no_destination"
    UNREACHABLE = "unreachable"
    FAILED = "failed"


class LogDelivery:
    """Send records and evict destinations the bot can no longer reach."""

    def __init__(self, storage: StorageManager) -> None:
        self.storage = storage

    async def _resolve_channel(self, guild: discord.Guild, channel_id: int) -> Optional[discord.abc.GuildChannel]:
        channel = guild.get_channel(channel_id)
        if channel is not None:
            return channel
        return await guild.fetch_channel(channel_id)

    async def deliver(self, guild: discord.Guild, record: LogRecord) -> DeliveryStatus:
        channel_id = self.storage.get_log_channel(guild.id)
        if not channel_id:
            return DeliveryStatus.NO_DESTINATION

        try:
            channel = await self._resolve_channel(guild, channel_id)
            if not isinstance(channel, discord.TextChannel):
                LOGGER.debug("Log channel %s in guild %s is not a text channel", channel_id, guild.id)
                return DeliveryStatus.FAILED
            await channel.send(embed=build_log_embed(record, guild))
        except discord.HTTPException as error:
            return self._handle_failure(guild, channel_id, error)
        return DeliveryStatus.SENT

    def _handle_failure(self, guild: discord.Guild, channel_id: int, error: discord.HTTPException) -> DeliveryStatus:
        LOGGER.warning(
            "Could not log event in guild %s (channel %s): %s",
            guild.id,
            channel_id,
            error,
        )
        if error.code not in UNREACHABLE_ERROR_CODES:
            return DeliveryStatus.FAILED
        if self.storage.remove_log_channel(guild.id, expected=channel_id):
            LOGGER.info("Removed unreachable log channel %s for guild %s", channel_id, guild.id)
        return DeliveryStatus.UNREACHABLE
