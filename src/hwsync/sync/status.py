"""Status sink - latest reconcile outcome per update.

Only the most recent outcome is kept; earlier failures are overwritten.
"""

import asyncio
import logging
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from hwsync.sync.models import Condition, ReconcileOutcome, ReconcileState

logger = logging.getLogger(__name__)


class UpdateStatus(BaseModel):
    """Status record of one update."""

    name: str
    state: ReconcileState
    description: str = ""
    conditions: list[Condition] = Field(default_factory=list)
    action_count: int = 0
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StatusStore:
    """In-memory status storage.

    Thread-safe via asyncio locks.
    """

    def __init__(self) -> None:
        self._statuses: dict[str, UpdateStatus] = {}
        self._lock = asyncio.Lock()

    async def record(self, name: str, outcome: ReconcileOutcome) -> UpdateStatus:
        """Store the outcome of the latest pass for ``name``."""
        status = UpdateStatus(
            name=name,
            state=outcome.state,
            description=outcome.description,
            conditions=[outcome.condition()],
            action_count=len(outcome.actions),
        )
        async with self._lock:
            self._statuses[name] = status

        if outcome.ready:
            logger.info(f"update {name} is Ready ({status.action_count} actions)")
        else:
            logger.warning(f"update {name} is in Error: {outcome.description}")
        return status

    async def get(self, name: str) -> UpdateStatus | None:
        return self._statuses.get(name)

    async def remove(self, name: str) -> None:
        async with self._lock:
            self._statuses.pop(name, None)

    async def list_all(self) -> list[UpdateStatus]:
        return sorted(self._statuses.values(), key=lambda s: s.name)
