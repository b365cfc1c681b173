"""Scheduler state models for times_drill.

SchedulerStateDTO is the single value threaded through every
transition in times_drill.services.progression. PersistedStateDTO is
the subset written to the session store.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from times_drill.constants import MAX_LEVEL, MIN_LEVEL
from times_drill.models.fact import FactDTO
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO
from times_drill.models.review import ReviewQueueItemDTO

__all__ = [
    "ChecklistRowDTO",
    "DrillSnapshotDTO",
    "FeedbackCue",
    "PersistedStateDTO",
    "Phase",
    "SchedulerStateDTO",
    "TurnResult",
]


class Phase(StrEnum):
    """Progression state machine phases."""

    CHOOSING_LEVEL = "choosing_level"
    PRACTICING = "practicing"
    AWAITING_MISS_ACK = "awaiting_miss_ack"
    AWAITING_LEVEL_UP = "awaiting_level_up"
    COMPLETED = "completed"


class FeedbackCue(StrEnum):
    """Presentation cue emitted by a transition (sound, flash)."""

    ACTION = "action"
    SUCCESS = "success"
    FAIL = "fail"
    CELEBRATE = "celebrate"


class SchedulerStateDTO(BaseModel, frozen=True):
    """Complete in-memory scheduler state.

    Attributes:
        phase: Current state machine phase
        level: Active level, None while choosing
        checklist: Fact key -> mastered-this-level flag
        miss_records: Lifetime miss counters
        corrections: Facts in remediation
        review_queue: Pending forced resurfacings, in insertion order
        turn_parity: Turn counter used to alternate new/review pools
        question: Fact currently asked
        last_question_key: Key of the most recently asked fact
        force_next_new: Draw the next normal turn from the new pool
        pending_fact: Missed fact awaiting acknowledgment
        next_level: Level offered by a pending level-up
        ack_armed_at: Epoch seconds at which the pending acknowledgment unlocks
        notice: Feedback text for the learner
    """

    phase: Phase = Phase.CHOOSING_LEVEL
    level: int | None = Field(default=None, ge=MIN_LEVEL, le=MAX_LEVEL)
    checklist: dict[str, bool] = Field(default_factory=dict)
    miss_records: list[MissRecordDTO] = Field(default_factory=list)
    corrections: list[CorrectionEntryDTO] = Field(default_factory=list)
    review_queue: list[ReviewQueueItemDTO] = Field(default_factory=list)
    turn_parity: int = Field(default=0, ge=0)
    question: FactDTO | None = None
    last_question_key: str | None = None
    force_next_new: bool = False
    pending_fact: FactDTO | None = None
    next_level: int | None = None
    ack_armed_at: float | None = None
    notice: str = ""


class PersistedStateDTO(BaseModel, frozen=True):
    """Session record as written to the store.

    Collections that are missing or of the wrong shape default to empty.
    The level and expiry are required; a record without them is corrupt.

    Attributes:
        level: Active level
        checklist: Fact key -> mastered flag
        miss_records: Lifetime miss counters
        corrections: Facts in remediation
        review_queue: Pending review items
        turn_parity: Turn alternation counter
        expires_at: Epoch seconds after which the record is stale
        schema_version: Schema version for forward compatibility
    """

    level: int = Field(ge=MIN_LEVEL, le=MAX_LEVEL)
    checklist: dict[str, bool] = Field(default_factory=dict)
    miss_records: list[MissRecordDTO] = Field(default_factory=list)
    corrections: list[CorrectionEntryDTO] = Field(default_factory=list)
    review_queue: list[ReviewQueueItemDTO] = Field(default_factory=list)
    turn_parity: int = Field(default=0, ge=0)
    expires_at: float = Field(description="Epoch seconds")
    schema_version: int = Field(default=1)

    @field_validator("level", mode="before")
    @classmethod
    def _reject_non_integer_level(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError("level must be a number")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("level must be a whole number")
        return int(value)

    @field_validator("checklist", mode="before")
    @classmethod
    def _default_checklist(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("miss_records", "corrections", "review_queue", mode="before")
    @classmethod
    def _default_collection(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @field_validator("turn_parity", mode="before")
    @classmethod
    def _default_turn_parity(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    @classmethod
    def from_state(cls, state: SchedulerStateDTO, expires_at: float) -> "PersistedStateDTO":
        """Extract the persisted subset of a scheduler state.

        Args:
            state: State with a level set
            expires_at: Expiry timestamp (epoch seconds)

        Returns:
            Persistable record
        """
        if state.level is None:
            raise ValueError("Cannot persist a state without a level")
        return cls(
            level=state.level,
            checklist=dict(state.checklist),
            miss_records=list(state.miss_records),
            corrections=list(state.corrections),
            review_queue=list(state.review_queue),
            turn_parity=state.turn_parity,
            expires_at=expires_at,
        )


class TurnResult(BaseModel, frozen=True):
    """Outcome of one transition, for the presentation layer.

    Attributes:
        phase: Phase after the transition
        correct: Answer correctness, None for non-answer transitions
        cues: Presentation cues to play, in order
        question: Fact to show next, if any
        from_review: Question came from the review queue
        hidden_review: Question came from a hidden next-level repeat
        notice: Feedback text
    """

    phase: Phase
    correct: bool | None = None
    cues: list[FeedbackCue] = Field(default_factory=list)
    question: FactDTO | None = None
    from_review: bool = False
    hidden_review: bool = False
    notice: str = ""


class ChecklistRowDTO(BaseModel, frozen=True):
    """Checklist entry projected for display.

    Attributes:
        key: Canonical fact key
        other: The operand paired with the level
        done: Mastered at this level
    """

    key: str
    other: int
    done: bool


class DrillSnapshotDTO(BaseModel, frozen=True):
    """Read-only projection of the session for rendering.

    Attributes:
        phase: Current phase
        level: Active level
        question: Fact currently asked
        checklist: Checklist rows in level order
        corrections: Corrections sorted by operands
        miss_records: Top missed facts by wrong count
        pending_fact: Missed fact awaiting acknowledgment
        next_level: Level offered by a pending level-up
        ack_armed: Pending acknowledgment is accepted now
        notice: Feedback text
    """

    phase: Phase
    level: int | None = None
    question: FactDTO | None = None
    checklist: list[ChecklistRowDTO] = Field(default_factory=list)
    corrections: list[CorrectionEntryDTO] = Field(default_factory=list)
    miss_records: list[MissRecordDTO] = Field(default_factory=list)
    pending_fact: FactDTO | None = None
    next_level: int | None = None
    ack_armed: bool = False
    notice: str = ""
