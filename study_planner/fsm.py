from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class QuizState(Enum):
    QUESTION_ACTIVE = auto()  # Waiting for an answer or a skip
    ANSWER_SUBMITTED = auto()  # Answer locked in, explanation visible
    COMPLETED = auto()  # Every question answered or skipped


class QuizAction(Enum):
    SUBMIT_ANSWER = auto()
    SKIP = auto()
    NEXT_QUESTION = auto()
    FINISH_QUIZ = auto()


class QuizStateMachine:
    """
    Transition table for one quiz attempt.
    Knows nothing about questions or scoring; QuizSession drives it.
    """

    def __init__(self, initial_state=QuizState.QUESTION_ACTIVE):
        self._state = initial_state

    @property
    def current_state(self) -> QuizState:
        return self._state

    def can(self, action: QuizAction) -> bool:
        return self._next_state(action) is not None

    def _next_state(self, action: QuizAction) -> QuizState | None:
        match (self._state, action):
            case (QuizState.QUESTION_ACTIVE, QuizAction.SUBMIT_ANSWER | QuizAction.SKIP):
                return QuizState.ANSWER_SUBMITTED
            case (QuizState.ANSWER_SUBMITTED, QuizAction.NEXT_QUESTION):
                return QuizState.QUESTION_ACTIVE
            case (QuizState.ANSWER_SUBMITTED, QuizAction.FINISH_QUIZ):
                return QuizState.COMPLETED
            case _:
                return None

    def transition(self, action: QuizAction) -> bool:
        """Applies the action. Returns False (and stays put) if it is not allowed."""
        previous = self._state
        target = self._next_state(action)

        if target is None:
            logger.warning(f"Ignored transition: {previous.name} + {action.name}")
            return False

        self._state = target
        logger.debug(f"FSM: {previous.name} --[{action.name}]--> {target.name}")
        return True
