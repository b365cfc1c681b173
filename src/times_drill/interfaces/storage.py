"""Session store interface for times_drill.

This module defines the Protocol for persisting scheduler state
between sessions. Records carry an expiry timestamp; stale or
malformed records load as None.
"""

from typing import Protocol, runtime_checkable

from times_drill.models.state import PersistedStateDTO, SchedulerStateDTO

__all__ = [
    "StateStoreInterface",
]


@runtime_checkable
class StateStoreInterface(Protocol):
    """Contract for the TTL-bearing key-value session store."""

    async def load(self) -> PersistedStateDTO | None:
        """Load the saved session.

        Returns:
            PersistedStateDTO if a valid, unexpired record exists, None otherwise
        """
        ...

    async def save(self, state: SchedulerStateDTO) -> PersistedStateDTO:
        """Persist the session, overwriting any prior record.

        Args:
            state: Scheduler state with a level set

        Returns:
            The record written, including its expiry timestamp
        """
        ...

    async def clear(self) -> None:
        """Remove the saved session unconditionally."""
        ...

    async def close(self) -> None:
        """Release backend resources. The saved session is kept."""
        ...
