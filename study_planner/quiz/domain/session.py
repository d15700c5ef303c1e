from collections.abc import Callable
from dataclasses import dataclass

from study_planner.config import StudyConfig
from study_planner.fsm import QuizAction, QuizState, QuizStateMachine
from study_planner.quiz.domain.models import QuizQuestion

SKIPPED_ANSWER = StudyConfig.SKIPPED_ANSWER

ScoreListener = Callable[[int], None]


class QuizPreconditionError(ValueError):
    """Raised before a session exists; the message is shown to the user."""


@dataclass(frozen=True)
class AnswerResult:
    question: QuizQuestion
    answer: str
    is_correct: bool

    @property
    def is_skipped(self) -> bool:
        return self.answer == SKIPPED_ANSWER


class ReviewCursor:
    """
    Walks the finished quiz one question at a time.
    Bounds clamp; there is no wraparound.
    """

    def __init__(self, results: list[AnswerResult]) -> None:
        self._results = results
        self.position = 0

    def __len__(self) -> int:
        return len(self._results)

    @property
    def current(self) -> AnswerResult:
        return self._results[self.position]

    @property
    def can_prev(self) -> bool:
        return self.position > 0

    @property
    def can_next(self) -> bool:
        return self.position < len(self._results) - 1

    def prev(self) -> AnswerResult:
        if self.can_prev:
            self.position -= 1
        return self.current

    def next(self) -> AnswerResult:
        if self.can_next:
            self.position += 1
        return self.current


class QuizSession:
    """
    One quiz attempt over a fixed, ordered list of questions.

    Invalid calls (submitting twice, advancing before answering, anything
    after completion) are ignored rather than raised.
    """

    def __init__(
        self,
        questions: list[QuizQuestion],
        on_score_delta: ScoreListener | None = None,
    ) -> None:
        if not questions:
            raise QuizPreconditionError(
                "Could not generate any questions. Try adjusting your topics."
            )
        self._questions = list(questions)
        self._on_score_delta = on_score_delta
        self._fsm = QuizStateMachine()
        self._index = 0
        self._answers: list[str] = []
        self._score = 0

    # --- Properties ---
    @property
    def state(self) -> QuizState:
        return self._fsm.current_state

    @property
    def index(self) -> int:
        return self._index

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> tuple[QuizQuestion, ...]:
        return tuple(self._questions)

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.is_complete:
            return None
        return self._questions[self._index]

    @property
    def is_submitted(self) -> bool:
        return self.state is QuizState.ANSWER_SUBMITTED

    @property
    def is_complete(self) -> bool:
        return self.state is QuizState.COMPLETED

    @property
    def is_last_question(self) -> bool:
        return self._index == len(self._questions) - 1

    @property
    def score(self) -> int:
        return self._score

    @property
    def answers(self) -> tuple[str, ...]:
        return tuple(self._answers)

    @property
    def progress(self) -> float:
        if self.is_complete:
            return 1.0
        return (self._index + 1) / len(self._questions)

    @property
    def last_answer(self) -> str | None:
        if not self.is_submitted:
            return None
        return self._answers[self._index]

    @property
    def last_answer_correct(self) -> bool | None:
        answer = self.last_answer
        if answer is None:
            return None
        if answer == SKIPPED_ANSWER:
            return False
        return self._questions[self._index].is_correct(answer)

    # --- Transitions ---
    def submit_answer(self, raw: str) -> bool | None:
        """Grades the answer. Returns correctness, or None if ignored."""
        if not self._fsm.can(QuizAction.SUBMIT_ANSWER):
            return None

        question = self._questions[self._index]
        answer = raw.strip()
        is_correct = question.is_correct(answer)

        # Record before notifying: a failing listener must not reopen the question.
        self._answers.append(answer)
        self._fsm.transition(QuizAction.SUBMIT_ANSWER)
        if is_correct:
            self._score += 1

        self._notify(StudyConfig.POINTS_CORRECT if is_correct else StudyConfig.POINTS_INCORRECT)
        return is_correct

    def skip(self) -> bool:
        if not self._fsm.can(QuizAction.SKIP):
            return False
        self._answers.append(SKIPPED_ANSWER)
        self._fsm.transition(QuizAction.SKIP)
        return True

    def advance(self) -> bool:
        if not self.is_submitted:
            return False
        if self._index + 1 < len(self._questions):
            self._index += 1
            return self._fsm.transition(QuizAction.NEXT_QUESTION)
        return self._fsm.transition(QuizAction.FINISH_QUIZ)

    def _notify(self, points: int) -> None:
        if self._on_score_delta is not None:
            self._on_score_delta(points)

    # --- Results ---
    def results(self) -> list[AnswerResult]:
        return [
            AnswerResult(
                question=q,
                answer=a,
                is_correct=a != SKIPPED_ANSWER and q.is_correct(a),
            )
            for q, a in zip(self._questions, self._answers)
        ]

    def review(self) -> ReviewCursor:
        if not self.is_complete:
            raise QuizPreconditionError("Review is available once the quiz is finished.")
        return ReviewCursor(self.results())
