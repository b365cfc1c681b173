"""Correction and miss-record models for times_drill.

Corrections are facts under active remediation after a miss.
Miss records are lifetime counters kept for reporting only.
"""

from pydantic import BaseModel, Field

from times_drill.constants import CORRECTIONS_REQUIRED
from times_drill.models.fact import FactDTO, make_fact

__all__ = [
    "CorrectionEntryDTO",
    "MissRecordDTO",
]


class CorrectionEntryDTO(BaseModel, frozen=True):
    """Fact in remediation.

    Exists only while the fact still needs consecutive correct answers.
    A fact key appears at most once across all correction entries.

    Attributes:
        key: Canonical fact key
        a: Smaller operand
        b: Larger operand
        got: Consecutive correct answers since the last miss
        required: Correct answers needed to clear the entry
    """

    key: str
    a: int = Field(ge=0)
    b: int = Field(ge=0)
    got: int = Field(default=0, ge=0)
    required: int = Field(default=CORRECTIONS_REQUIRED, ge=1)

    @property
    def fact(self) -> FactDTO:
        return make_fact(self.a, self.b)


class MissRecordDTO(BaseModel, frozen=True):
    """Lifetime miss counters for a fact.

    Counters never decrease within a session.

    Attributes:
        key: Canonical fact key
        a: Smaller operand
        b: Larger operand
        wrong_count: Number of misses
        right_count: Correct answers given after the first miss
    """

    key: str
    a: int = Field(ge=0)
    b: int = Field(ge=0)
    wrong_count: int = Field(default=0, ge=0)
    right_count: int = Field(default=0, ge=0)

    @property
    def fact(self) -> FactDTO:
        return make_fact(self.a, self.b)
