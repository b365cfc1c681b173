"""JSON encoding of persisted session records for times_drill.

Both stores share this codec so that expiry and validation rules are
identical whichever backend holds the record.
"""

import json
from typing import Any

from pydantic import ValidationError

from times_drill.exceptions import CorruptedPersistedStateError
from times_drill.models.state import PersistedStateDTO, SchedulerStateDTO

__all__ = [
    "decode_state",
    "encode_state",
]


def encode_state(
    state: SchedulerStateDTO,
    now: float,
    ttl_seconds: int,
) -> tuple[PersistedStateDTO, str]:
    """Build the persisted record and its JSON payload.

    Args:
        state: Scheduler state with a level set
        now: Current time (epoch seconds)
        ttl_seconds: Record lifetime

    Returns:
        Tuple of (record, JSON payload)
    """
    record = PersistedStateDTO.from_state(state, expires_at=now + ttl_seconds)
    return record, record.model_dump_json()


def decode_state(payload: str | bytes, now: float) -> PersistedStateDTO:
    """Parse and validate a JSON payload.

    Args:
        payload: Raw JSON from the store
        now: Current time (epoch seconds)

    Returns:
        Validated record

    Raises:
        CorruptedPersistedStateError: If the payload is not valid JSON, is
            missing required fields, has a level out of range, or has expired
    """
    try:
        data: Any = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptedPersistedStateError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CorruptedPersistedStateError("record is not an object")

    expires_at = data.get("expires_at")
    if isinstance(expires_at, bool) or not isinstance(expires_at, int | float):
        raise CorruptedPersistedStateError("missing expiry")
    if now > expires_at:
        raise CorruptedPersistedStateError("record expired")

    try:
        return PersistedStateDTO.model_validate(data)
    except ValidationError as e:
        raise CorruptedPersistedStateError(str(e)) from e
