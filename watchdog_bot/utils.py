"""Utility helpers for the WatchDog bot."""
from __future__ import annotations

import re
from typing import Optional

import discord

from . import branding
from .records import LogRecord, truncate

EMBED_DESCRIPTION_LIMIT = 4096
CHANNEL_MENTION_RE = re.compile(r"^<#(\d+)>$")


def build_log_embed(record: LogRecord, guild: discord.Guild) -> discord.Embed:
    """Create the Discord embed posted for a log record."""

    embed = discord.Embed(
        title=record.title,
        description=truncate(record.description, EMBED_DESCRIPTION_LIMIT),
        colour=record.colour,
    )
    embed.timestamp = discord.utils.utcnow()
    embed.set_footer(text=f"{branding.BOT_NAME} | Guild ID: {guild.id}")

    subject = record.subject
    if subject is not None:
        avatar_url = subject.display_avatar.url
        embed.set_author(name=f"{subject} ({subject.id})", icon_url=avatar_url)
        embed.set_thumbnail(url=avatar_url)
    else:
        embed.set_author(name=branding.SYSTEM_AUTHOR, icon_url=branding.LOGO_URL)
    return embed


def parse_channel_reference(value: str) -> Optional[int]:
    """Return the channel id referenced by a mention or a raw id."""

    cleaned = value.strip()
    match = CHANNEL_MENTION_RE.match(cleaned)
    if match:
        return int(match.group(1))
    if cleaned.isdigit():
        return int(cleaned)
    return None
