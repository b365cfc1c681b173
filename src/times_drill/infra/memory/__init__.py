"""In-process session store for times_drill."""

from times_drill.infra.memory.state_store import InMemoryStateStore

__all__ = ["InMemoryStateStore"]
