import logging
import random
from typing import Optional, Sequence

from .errors import EmptyDataset, InvalidState
from .models import (
    AnswerOutcome,
    AnswerRecord,
    PresentedQuestion,
    QuestionRecord,
    SessionState,
    SessionStatus,
    SessionSummary,
    Tier,
)

logger = logging.getLogger(__name__)

# Evaluated highest first, below the perfect score.
TIER_THRESHOLDS = (
    (80, Tier.GREAT),
    (50, Tier.GOOD),
)


def tier_for(percentage: int) -> Tier:
    if percentage == 100:
        return Tier.PERFECT
    for threshold, tier in TIER_THRESHOLDS:
        if percentage >= threshold:
            return tier
    return Tier.BASIC


def percentage_of(correct_count: int, total_questions: int) -> int:
    # Integer round-half-up, so 12.5 becomes 13 rather than 12.
    return (200 * correct_count + total_questions) // (2 * total_questions)


# --- Session operations ---
def start_session(
    all_questions: Sequence[QuestionRecord],
    requested_count: int,
    rng: Optional[random.Random] = None,
) -> SessionState:
    """Samples ``min(requested_count, len(all_questions))`` distinct questions.

    A previous session is never touched; callers simply drop it.
    """
    if not all_questions:
        raise EmptyDataset("Cannot start a session without questions.")
    if requested_count < 1:
        raise ValueError(f"requested_count must be positive, got {requested_count}")

    rng = rng if rng is not None else random.Random()
    count = min(requested_count, len(all_questions))
    selected_order = rng.sample(range(len(all_questions)), count)

    state = SessionState(
        questions=list(all_questions),
        selected_order=selected_order,
        total_questions=len(selected_order),
    )
    state._rng = rng
    logger.info(
        f"Session started: {state.total_questions} of {len(all_questions)} questions"
    )
    return state


def current_question(state: SessionState) -> Optional[PresentedQuestion]:
    """Returns the question to display, or None once the session is complete.

    Options come back in a fresh random order on every call.
    """
    if state.position >= state.total_questions:
        return None

    record = state.questions[state.selected_order[state.position]]
    return PresentedQuestion(
        prompt=record.prompt,
        options=state.rng.sample(record.options, len(record.options)),
        position=state.position,
        total_questions=state.total_questions,
    )


def submit_answer(
    state: SessionState, presented: PresentedQuestion, chosen_option_text: str
) -> AnswerOutcome:
    if state.position >= state.total_questions:
        raise InvalidState("Session is complete; no question is awaiting an answer.")

    record = state.questions[state.selected_order[state.position]]
    if presented.position != state.position or presented.prompt != record.prompt:
        logger.warning(
            f"Rejected answer for question {presented.number}; "
            f"session is at question {state.position + 1}"
        )
        raise InvalidState(f"Question {presented.number} has already been answered.")

    is_correct = chosen_option_text == record.correct_answer
    if is_correct:
        state.correct_count += 1
    state.answers.append(
        AnswerRecord(
            prompt=record.prompt,
            chosen_answer=chosen_option_text,
            correct_answer=record.correct_answer,
            is_correct=is_correct,
        )
    )
    state.position += 1

    if state.status is SessionStatus.COMPLETE:
        logger.info(
            f"Session complete: {state.correct_count}/{state.total_questions} correct"
        )

    return AnswerOutcome(
        is_correct=is_correct,
        chosen_answer=chosen_option_text,
        correct_answer=record.correct_answer,
        explanation=record.explanation,
    )


def summarize(state: SessionState) -> SessionSummary:
    if state.position != state.total_questions:
        raise InvalidState(
            f"Session is not complete: {state.position} of "
            f"{state.total_questions} questions answered."
        )

    percentage = percentage_of(state.correct_count, state.total_questions)
    return SessionSummary(
        correct_count=state.correct_count,
        total_questions=state.total_questions,
        percentage=percentage,
        tier=tier_for(percentage),
    )


# --- Lifecycle object ---
class QuizEngine:
    """Holds the question set and the single active session."""

    def __init__(
        self,
        questions: Sequence[QuestionRecord],
        question_count: int,
        rng: Optional[random.Random] = None,
    ):
        self.questions = list(questions)
        self.question_count = question_count
        self.rng = rng if rng is not None else random.Random()
        self._state: Optional[SessionState] = None
        self._displayed: Optional[PresentedQuestion] = None

    @property
    def state(self) -> Optional[SessionState]:
        return self._state

    @property
    def status(self) -> SessionStatus:
        if self._state is None:
            return SessionStatus.NOT_STARTED
        return self._state.status

    def _require_state(self) -> SessionState:
        if self._state is None:
            raise InvalidState("No session has been started.")
        return self._state

    def start(self) -> SessionState:
        self._state = start_session(self.questions, self.question_count, self.rng)
        self._displayed = None
        return self._state

    def current(self) -> Optional[PresentedQuestion]:
        self._displayed = current_question(self._require_state())
        return self._displayed

    def submit(self, presented: PresentedQuestion, chosen_option_text: str) -> AnswerOutcome:
        return submit_answer(self._require_state(), presented, chosen_option_text)

    def submit_at(self, position: int, chosen_option_text: str) -> AnswerOutcome:
        """Answers the last displayed question, identified by its position.

        Used by callers that only carry the position across requests, such
        as an HTML form.
        """
        self._require_state()
        presented = self._displayed
        if presented is None or presented.position != position:
            raise InvalidState(f"Question {position + 1} is not awaiting an answer.")
        return self.submit(presented, chosen_option_text)

    def summarize(self) -> SessionSummary:
        return summarize(self._require_state())
