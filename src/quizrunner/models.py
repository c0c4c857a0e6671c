import random
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


# --- Models ---
class Tier(str, Enum):
    PERFECT = "perfect"
    GREAT = "great"
    GOOD = "good"
    BASIC = "basic"


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class QuestionRecord(BaseModel):
    """One question as supplied by the question file.

    The wire names are ``q`` and ``a``; both the wire names and the field
    names are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    prompt: str = Field(alias="q")
    correct_answer: str = Field(alias="a")
    options: List[str]
    explanation: str = ""


class PresentedQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    options: List[str]
    position: int
    total_questions: int

    @property
    def number(self) -> int:
        return self.position + 1


class AnswerRecord(BaseModel):
    prompt: str
    chosen_answer: str
    correct_answer: str
    is_correct: bool


class AnswerOutcome(BaseModel):
    is_correct: bool
    chosen_answer: str
    correct_answer: str
    explanation: str


class SessionSummary(BaseModel):
    correct_count: int
    total_questions: int
    percentage: int
    tier: Tier


class SessionState(BaseModel):
    """Everything one quiz session knows. Mutated only by the engine."""

    questions: List[QuestionRecord]
    selected_order: List[int]
    position: int = 0
    correct_count: int = 0
    total_questions: int
    answers: List[AnswerRecord] = Field(default_factory=list)

    _rng: random.Random = PrivateAttr(default_factory=random.Random)

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def status(self) -> SessionStatus:
        if self.position >= self.total_questions:
            return SessionStatus.COMPLETE
        return SessionStatus.IN_PROGRESS
