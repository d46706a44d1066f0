"""Brand constants for WatchDog embeds and styling."""
from __future__ import annotations

import discord

BOT_NAME = "WatchDog"
SYSTEM_AUTHOR = "WatchDog System"
LOGO_URL = "https://placehold.co/128x128/3498db/ffffff?text=WD"

# Severity palette used by log records.
GREEN = discord.Colour(0x57F287)
RED = discord.Colour(0xED4245)
ORANGE = discord.Colour(0xE67E22)
DARK_ORANGE = discord.Colour(0xA84300)
DARK_RED = discord.Colour(0x992D22)
DARK_GREEN = discord.Colour(0x1F8B4C)
BLUE = discord.Colour(0x3498DB)
YELLOW = discord.Colour(0xFFFF00)
PURPLE = discord.Colour(0x9B59B6)
PINK = discord.Colour(0xE91E63)
GREY = discord.Colour(0x95A5A6)
LIGHT_GREY = discord.Colour(0xBCC0C0)
