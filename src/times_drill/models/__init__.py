"""Public DTO models for times_drill.

This module exports all public data transfer objects.
"""

from times_drill.models.fact import FactDTO, fact_key, make_fact, parse_fact_key
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO
from times_drill.models.review import DueReview, ReviewQueueItemDTO
from times_drill.models.state import (
    ChecklistRowDTO,
    DrillSnapshotDTO,
    FeedbackCue,
    PersistedStateDTO,
    Phase,
    SchedulerStateDTO,
    TurnResult,
)

__all__ = [
    "ChecklistRowDTO",
    "CorrectionEntryDTO",
    "DrillSnapshotDTO",
    "DueReview",
    "FactDTO",
    "FeedbackCue",
    "MissRecordDTO",
    "PersistedStateDTO",
    "Phase",
    "ReviewQueueItemDTO",
    "SchedulerStateDTO",
    "TurnResult",
    "fact_key",
    "make_fact",
    "parse_fact_key",
]
