"""Level progression state machine for times_drill.

Phases:
    CHOOSING_LEVEL -> PRACTICING -> AWAITING_MISS_ACK -> PRACTICING
                                 -> AWAITING_LEVEL_UP -> PRACTICING
                                 -> COMPLETED -> (reset) CHOOSING_LEVEL

Every transition is a pure function taking the current
SchedulerStateDTO and returning the next one together with a
TurnResult for the presentation layer. Acknowledgment cool-downs are
carried as an ack_armed_at timestamp; callers pass the current time.
"""

import math
import re

from times_drill.config import DrillSettings
from times_drill.constants import MAX_LEVEL
from times_drill.exceptions import InvalidInputError, InvariantViolationError
from times_drill.logging import get_logger
from times_drill.models.fact import FactDTO
from times_drill.models.state import (
    FeedbackCue,
    PersistedStateDTO,
    Phase,
    SchedulerStateDTO,
    TurnResult,
)
from times_drill.services.corrections import (
    credit_entry,
    ensure_entry,
    record_hit,
    record_miss,
    reset_progress,
)
from times_drill.services.curriculum import (
    build_checklist,
    clamp_level,
    is_complete,
    mark_complete,
    merge_checklist,
)
from times_drill.services.question_selector import QuestionSelector
from times_drill.services.review_queue import (
    purge_current_level_items,
    schedule_current_level_repeats,
    schedule_next_level_hidden_repeats,
)

__all__ = [
    "GRADUATION_BLOCKED_NOTICE",
    "acknowledge_level_up",
    "acknowledge_miss",
    "is_armed",
    "parse_answer",
    "reset",
    "resume",
    "start_level",
    "submit_answer",
]

logger = get_logger(__name__)

GRADUATION_BLOCKED_NOTICE = "Checklist done - finish Current Corrections to graduate."
CORRECT_NOTICE = "Correct!"

# Plain ASCII decimal notation: no digit separators, no non-ASCII digits
_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_answer(raw_input: str) -> float:
    """Parse a submitted answer.

    Raises:
        InvalidInputError: If the input is blank or not a finite number
    """
    trimmed = raw_input.strip()
    if not trimmed:
        raise InvalidInputError(raw_input, "Please enter an answer.")
    if not _NUMBER_PATTERN.fullmatch(trimmed):
        raise InvalidInputError(raw_input)
    value = float(trimmed)
    if not math.isfinite(value):
        raise InvalidInputError(raw_input)
    return value


def is_armed(state: SchedulerStateDTO, now: float) -> bool:
    """Check whether the pending acknowledgment action is accepted at `now`."""
    return state.ack_armed_at is None or now >= state.ack_armed_at


def _require_phase(state: SchedulerStateDTO, phase: Phase, action: str) -> None:
    if state.phase != phase:
        raise InvariantViolationError(f"{action} is not allowed in phase {state.phase}")


def _require_armed(state: SchedulerStateDTO, now: float, action: str) -> None:
    if not is_armed(state, now):
        raise InvariantViolationError(f"{action} is still cooling down")


def _draw_next(
    state: SchedulerStateDTO,
    selector: QuestionSelector,
) -> tuple[SchedulerStateDTO, TurnResult]:
    """Draw the next normal-turn question and advance the turn counter."""
    selection = selector.next_question(state)
    next_state = state.model_copy(
        update={
            "question": selection.fact,
            "last_question_key": selection.fact.key,
            "review_queue": selection.review_queue,
            "turn_parity": state.turn_parity + 1,
            "force_next_new": False,
        }
    )
    result = TurnResult(
        phase=next_state.phase,
        question=selection.fact,
        from_review=selection.from_review,
        hidden_review=selection.hidden,
    )
    return next_state, result


def start_level(level: int, selector: QuestionSelector) -> tuple[SchedulerStateDTO, TurnResult]:
    """Begin a fresh session at a level.

    Args:
        level: Requested level, clamped to [0, MAX_LEVEL]
        selector: Question selector

    Returns:
        Tuple of (practicing state, turn result with the first question)
    """
    level = clamp_level(level)
    checklist = build_checklist(level)
    question = selector.pick_new(level, checklist)

    state = SchedulerStateDTO(
        phase=Phase.PRACTICING,
        level=level,
        checklist=checklist,
        question=question,
        last_question_key=question.key,
    )
    logger.info("level_started", level=level, first_question=question.key)
    return state, TurnResult(phase=state.phase, cues=[FeedbackCue.ACTION], question=question)


def resume(
    saved: PersistedStateDTO,
    selector: QuestionSelector,
) -> tuple[SchedulerStateDTO, TurnResult]:
    """Rebuild a practicing state from a persisted session record.

    The saved checklist is merged into the level's required facts and a
    fresh question is drawn from the new pool.
    """
    checklist = merge_checklist(saved.level, saved.checklist)
    question = selector.pick_new(saved.level, checklist)

    state = SchedulerStateDTO(
        phase=Phase.PRACTICING,
        level=saved.level,
        checklist=checklist,
        miss_records=list(saved.miss_records),
        corrections=list(saved.corrections),
        review_queue=list(saved.review_queue),
        turn_parity=saved.turn_parity,
        question=question,
        last_question_key=question.key,
    )
    logger.info(
        "session_resumed",
        level=saved.level,
        corrections=len(saved.corrections),
        review_items=len(saved.review_queue),
    )
    return state, TurnResult(phase=state.phase, question=question)


def submit_answer(
    state: SchedulerStateDTO,
    raw_input: str,
    selector: QuestionSelector,
    now: float,
    settings: DrillSettings,
) -> tuple[SchedulerStateDTO, TurnResult]:
    """Evaluate an answer to the current question.

    A correct answer credits the checklist and any open correction, then
    either graduates the level or draws the next question. A miss opens
    (or restarts) a correction, schedules both review horizons and waits
    for the learner to acknowledge it.

    Args:
        state: Practicing state
        raw_input: Raw text typed by the learner
        selector: Question selector
        now: Current time (epoch seconds)
        settings: Drill settings with cool-down durations

    Returns:
        Tuple of (next state, turn result)

    Raises:
        InvalidInputError: If the input is not a number (state unchanged)
        InvariantViolationError: If no question is being asked
    """
    _require_phase(state, Phase.PRACTICING, "submit_answer")
    if state.question is None or state.level is None:
        raise InvariantViolationError("submit_answer requires a current question")

    value = parse_answer(raw_input)
    fact = state.question
    level = state.level

    if value == fact.answer:
        return _on_correct(state, fact, level, selector, now, settings)

    corrections = ensure_entry(state.corrections, fact)
    corrections = reset_progress(corrections, fact)
    queue = schedule_current_level_repeats(state.review_queue, fact, level)
    queue = schedule_next_level_hidden_repeats(queue, fact, level)

    next_state = state.model_copy(
        update={
            "phase": Phase.AWAITING_MISS_ACK,
            "miss_records": record_miss(state.miss_records, fact),
            "corrections": corrections,
            "review_queue": queue,
            "pending_fact": fact,
            "ack_armed_at": now + settings.miss_ack_cooldown_seconds,
            "notice": "",
        }
    )
    logger.info("answer_missed", fact=fact.key, level=level, answer=raw_input.strip())
    return next_state, TurnResult(
        phase=next_state.phase,
        correct=False,
        cues=[FeedbackCue.FAIL],
        question=fact,
    )


def _on_correct(
    state: SchedulerStateDTO,
    fact: FactDTO,
    level: int,
    selector: QuestionSelector,
    now: float,
    settings: DrillSettings,
) -> tuple[SchedulerStateDTO, TurnResult]:
    corrections, cleared = credit_entry(state.corrections, fact)
    queue = state.review_queue
    if cleared:
        queue = purge_current_level_items(queue, fact.key, level)
        logger.info("correction_cleared", fact=fact.key, level=level)

    checklist = mark_complete(state.checklist, fact)
    credited = state.model_copy(
        update={
            "miss_records": record_hit(state.miss_records, fact),
            "corrections": corrections,
            "review_queue": queue,
            "checklist": checklist,
            "last_question_key": fact.key,
            "notice": "",
        }
    )

    if is_complete(checklist) and not corrections:
        if level == MAX_LEVEL:
            done = credited.model_copy(
                update={
                    "phase": Phase.COMPLETED,
                    "question": None,
                    "ack_armed_at": now + settings.completed_cooldown_seconds,
                }
            )
            logger.info("game_completed", level=level)
            return done, TurnResult(
                phase=done.phase,
                correct=True,
                cues=[FeedbackCue.SUCCESS, FeedbackCue.CELEBRATE],
            )

        next_level = min(MAX_LEVEL, level + 1)
        leveled = credited.model_copy(
            update={
                "phase": Phase.AWAITING_LEVEL_UP,
                "next_level": next_level,
                "ack_armed_at": now + settings.level_up_cooldown_seconds,
            }
        )
        logger.info("level_up_ready", level=level, next_level=next_level)
        return leveled, TurnResult(
            phase=leveled.phase,
            correct=True,
            cues=[FeedbackCue.SUCCESS, FeedbackCue.CELEBRATE],
        )

    notice = GRADUATION_BLOCKED_NOTICE if is_complete(checklist) else CORRECT_NOTICE
    next_state, drawn = _draw_next(credited.model_copy(update={"notice": notice}), selector)
    return next_state, drawn.model_copy(
        update={"correct": True, "cues": [FeedbackCue.SUCCESS], "notice": notice}
    )


def acknowledge_miss(
    state: SchedulerStateDTO,
    now: float,
) -> tuple[SchedulerStateDTO, TurnResult]:
    """Dismiss the miss feedback and re-ask the missed fact once more.

    The following normal turn is forced to the new pool.

    Raises:
        InvariantViolationError: If no miss is pending or the cool-down is running
    """
    _require_phase(state, Phase.AWAITING_MISS_ACK, "acknowledge_miss")
    _require_armed(state, now, "acknowledge_miss")
    if state.pending_fact is None:
        raise InvariantViolationError("acknowledge_miss requires a pending fact")

    fact = state.pending_fact
    next_state = state.model_copy(
        update={
            "phase": Phase.PRACTICING,
            "question": fact,
            "last_question_key": fact.key,
            "force_next_new": True,
            "pending_fact": None,
            "ack_armed_at": None,
        }
    )
    return next_state, TurnResult(phase=next_state.phase, cues=[FeedbackCue.ACTION], question=fact)


def acknowledge_level_up(
    state: SchedulerStateDTO,
    selector: QuestionSelector,
    now: float,
) -> tuple[SchedulerStateDTO, TurnResult]:
    """Advance to the pending level and draw its first question.

    Raises:
        InvariantViolationError: If no level-up is pending or the cool-down is running
    """
    _require_phase(state, Phase.AWAITING_LEVEL_UP, "acknowledge_level_up")
    _require_armed(state, now, "acknowledge_level_up")

    current = state.level if state.level is not None else 0
    level = state.next_level if state.next_level is not None else min(MAX_LEVEL, current + 1)
    checklist = build_checklist(level)
    question = selector.choose_non_repeating(
        lambda: selector.pick_new(level, checklist),
        state.last_question_key,
        level,
        checklist,
    )

    next_state = state.model_copy(
        update={
            "phase": Phase.PRACTICING,
            "level": level,
            "checklist": checklist,
            "turn_parity": 0,
            "question": question,
            "last_question_key": question.key,
            "force_next_new": False,
            "next_level": None,
            "ack_armed_at": None,
            "notice": "",
        }
    )
    logger.info("level_advanced", level=level, first_question=question.key)
    return next_state, TurnResult(
        phase=next_state.phase,
        cues=[FeedbackCue.ACTION],
        question=question,
    )


def reset(state: SchedulerStateDTO, now: float) -> tuple[SchedulerStateDTO, TurnResult]:
    """Discard all tracked state and return to level selection.

    From COMPLETED the reset honours the completion cool-down.

    Raises:
        InvariantViolationError: If the completion cool-down is running
    """
    if state.phase == Phase.COMPLETED:
        _require_armed(state, now, "reset")

    fresh = SchedulerStateDTO()
    logger.info("session_reset", previous_phase=str(state.phase), previous_level=state.level)
    return fresh, TurnResult(phase=fresh.phase, cues=[FeedbackCue.ACTION])
