"""Ephemeral per-user workflow sessions."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

_logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 900
MIN_SWEEP_INTERVAL_SECONDS = 60.0


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _SessionEntry:
    value: dict[str, object]
    expires_at: datetime


@dataclass
class SessionStore:
    """In-memory session store keyed by Slack user id.

    Every write restamps the entry's expiry. Reads treat expired entries as
    absent and drop them; ``sweep`` removes everything that has expired so
    abandoned workflows do not accumulate.
    """

    ttl_seconds: int = DEFAULT_TTL_SECONDS
    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, _SessionEntry] = field(
        default_factory=dict, init=False, repr=False
    )

    @property
    def sweep_interval_seconds(self) -> float:
        return max(MIN_SWEEP_INTERVAL_SECONDS, self.ttl_seconds / 2)

    def get(self, user_id: str) -> dict[str, object] | None:
        """Return a copy of the user's session if it hasn't expired."""
        entry = self._live_entry(user_id)
        if entry is None:
            return None
        return dict(entry.value)

    def has(self, user_id: str) -> bool:
        """Return true when the user has a live session."""
        return self._live_entry(user_id) is not None

    def set(self, user_id: str, value: dict[str, object]) -> dict[str, object]:
        """Replace the user's session."""
        self._entries[user_id] = _SessionEntry(
            value=dict(value), expires_at=self._expiry()
        )
        return dict(value)

    def update(self, user_id: str, patch: dict[str, object]) -> dict[str, object]:
        """Merge fields into the user's session and return the result."""
        current = self.get(user_id) or {}
        merged = {**current, **patch}
        return self.set(user_id, merged)

    def delete(self, user_id: str) -> None:
        """Drop the user's session, if any."""
        self._entries.pop(user_id, None)

    def sweep(self) -> int:
        """Remove all expired sessions and return how many were dropped."""
        now = self.clock()
        expired = [
            user_id
            for user_id, entry in self._entries.items()
            if now >= entry.expires_at
        ]
        for user_id in expired:
            self._entries.pop(user_id, None)
        return len(expired)

    async def run_sweeper(self) -> None:
        """Sweep expired sessions forever. Cancel the task to stop it."""
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            removed = self.sweep()
            if removed:
                _logger.info("Swept %s expired sessions", removed)

    def _live_entry(self, user_id: str) -> _SessionEntry | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            self._entries.pop(user_id, None)
            return None
        return entry

    def _expiry(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)
