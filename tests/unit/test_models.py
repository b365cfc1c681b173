"""Unit tests for times_drill models."""

import pytest
from pydantic import ValidationError

from times_drill.models.fact import FactDTO, fact_key, make_fact, parse_fact_key
from times_drill.models.progress import CorrectionEntryDTO
from times_drill.models.review import ReviewQueueItemDTO
from times_drill.models.state import PersistedStateDTO, Phase, SchedulerStateDTO


class TestFactDTO:
    """Tests for the fact model."""

    def test_canonicalizes_operands(self) -> None:
        fact = make_fact(7, 3)
        assert (fact.a, fact.b) == (3, 7)
        assert fact.key == "3x7"
        assert fact.answer == 21

    @pytest.mark.parametrize("a", range(13))
    def test_order_does_not_change_identity(self, a: int) -> None:
        for b in range(13):
            assert make_fact(a, b) == make_fact(b, a)
            assert make_fact(a, b).key == fact_key(b, a)

    def test_direct_construction_is_canonical(self) -> None:
        assert FactDTO(a=5, b=2) == make_fact(2, 5)

    def test_negative_operand_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_fact(-1, 2)

    def test_frozen_model(self) -> None:
        fact = make_fact(2, 3)
        with pytest.raises(ValidationError):
            fact.a = 4  # type: ignore[misc]

    def test_hashable(self) -> None:
        assert len({make_fact(2, 3), make_fact(3, 2), make_fact(3, 3)}) == 2

    def test_str(self) -> None:
        assert str(make_fact(4, 2)) == "2 × 4"


class TestParseFactKey:
    """Tests for fact key parsing."""

    def test_round_trips_key(self) -> None:
        assert parse_fact_key("2x3") == make_fact(2, 3)

    def test_canonicalizes_reversed_key(self) -> None:
        assert parse_fact_key("9x4").key == "4x9"

    @pytest.mark.parametrize("key", ["", "2x", "x3", "2*3", "axb", "-1x2"])
    def test_invalid_key(self, key: str) -> None:
        with pytest.raises(ValueError):
            parse_fact_key(key)


class TestCorrectionEntryDTO:
    """Tests for CorrectionEntryDTO model."""

    def test_defaults(self) -> None:
        entry = CorrectionEntryDTO(key="2x3", a=2, b=3)
        assert entry.got == 0
        assert entry.required == 3
        assert entry.fact == make_fact(2, 3)


class TestReviewQueueItemDTO:
    """Tests for ReviewQueueItemDTO model."""

    def test_due_only_once_active(self) -> None:
        item = ReviewQueueItemDTO(
            key="2x3", a=2, b=3, answer=6, activate_at_level=4, due_review_turns=0
        )
        assert item.is_due(3) is False
        assert item.is_due(4) is True
        assert item.is_active(5) is True


class TestSchedulerStateDTO:
    """Tests for SchedulerStateDTO model."""

    def test_defaults_to_choosing_level(self) -> None:
        state = SchedulerStateDTO()
        assert state.phase == Phase.CHOOSING_LEVEL
        assert state.level is None
        assert state.checklist == {}
        assert state.turn_parity == 0

    def test_level_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SchedulerStateDTO(level=13)


class TestPersistedStateDTO:
    """Tests for PersistedStateDTO model."""

    def test_from_state_requires_level(self) -> None:
        with pytest.raises(ValueError):
            PersistedStateDTO.from_state(SchedulerStateDTO(), expires_at=1.0)

    def test_missing_collections_default_to_empty(self) -> None:
        record = PersistedStateDTO.model_validate({"level": 4, "expires_at": 10.0})
        assert record.checklist == {}
        assert record.miss_records == []
        assert record.corrections == []
        assert record.review_queue == []
        assert record.turn_parity == 0

    def test_wrong_shaped_collections_default_to_empty(self) -> None:
        record = PersistedStateDTO.model_validate(
            {
                "level": 4,
                "expires_at": 10.0,
                "checklist": ["not", "a", "dict"],
                "corrections": "nope",
                "turn_parity": "two",
            }
        )
        assert record.checklist == {}
        assert record.corrections == []
        assert record.turn_parity == 0

    @pytest.mark.parametrize("level", [13, -1, "3", None, True, 2.5])
    def test_malformed_level_rejected(self, level: object) -> None:
        with pytest.raises(ValidationError):
            PersistedStateDTO.model_validate({"level": level, "expires_at": 10.0})

    def test_missing_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PersistedStateDTO.model_validate({"expires_at": 10.0})
