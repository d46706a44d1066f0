"""Best-effort attribution of gateway events to audit log entries."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Union

import discord

LOGGER = logging.getLogger(__name__)

# Audit log entries arrive independently of the gateway event that caused
# them, so only very recent entries are considered related.
ATTRIBUTION_WINDOW = timedelta(seconds=5)
AUDIT_LOOKUP_LIMIT = 5

Actions = Union[discord.AuditLogAction, Sequence[discord.AuditLogAction]]


@dataclass(frozen=True)
class AuditAttribution:
    """The actor and reason recorded for an event, when known."""

    actor: Optional[discord.abc.User] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.actor is not None

    def actor_label(self, fallback: str = "Unknown") -> str:
        if self.actor is None:
            return fallback
        return f"{self.actor} ({self.actor.id})"


NO_ATTRIBUTION = AuditAttribution()


def _as_actions(actions: Actions) -> List[discord.AuditLogAction]:
    if isinstance(actions, discord.AuditLogAction):
        return [actions]
    return list(actions)


def is_recent(entry: discord.AuditLogEntry, now: datetime, window: timedelta = ATTRIBUTION_WINDOW) -> bool:
    created_at = getattr(entry, "created_at", None)
    if created_at is None:
        return False
    return now - created_at < window


def matches(
    entry: discord.AuditLogEntry,
    actions: Iterable[discord.AuditLogAction],
    target_id: Optional[int],
    now: datetime,
) -> bool:
    if entry.action not in actions:
        return False
    if target_id is not None and getattr(entry.target, "id", None) != target_id:
        return False
    return is_recent(entry, now)


async def fetch_recent_entries(
    guild: discord.Guild,
    actions: Sequence[discord.AuditLogAction],
    *,
    limit: int = AUDIT_LOOKUP_LIMIT,
) -> List[discord.AuditLogEntry]:
    """Return the newest ``limit`` entries across all requested actions."""

    entries: List[discord.AuditLogEntry] = []
    for action in actions:
        async for entry in guild.audit_logs(limit=limit, action=action):
            entries.append(entry)
    entries.sort(key=lambda entry: entry.created_at, reverse=True)
    return entries[:limit]


async def resolve_actor(
    guild: discord.Guild,
    actions: Actions,
    target_id: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
) -> AuditAttribution:
    """Find who performed ``actions`` on ``target_id`` moments ago.

    The lookup never raises: missing permissions or API failures resolve to
    an empty attribution so the event itself is still logged.
    """

    requested = _as_actions(actions)
    if now is None:
        now = discord.utils.utcnow()
    try:
        entries = await fetch_recent_entries(guild, requested)
    except discord.HTTPException as error:
        LOGGER.warning(
            "Failed to fetch audit log for %s in guild %s: %s",
            ", ".join(action.name for action in requested),
            getattr(guild, "id", "unknown"),
            error,
        )
        return NO_ATTRIBUTION

    for entry in entries:
        if matches(entry, requested, target_id, now):
            return AuditAttribution(actor=entry.user, reason=entry.reason)
    return NO_ATTRIBUTION


__all__ = [
    "ATTRIBUTION_WINDOW",
    "AUDIT_LOOKUP_LIMIT",
    "AuditAttribution",
    "NO_ATTRIBUTION",
    "resolve_actor",
]
