from abc import ABC, abstractmethod

from study_planner.quiz.domain.models import QuizConfig, QuizQuestion


class QuizGenerationError(RuntimeError):
    """Upstream question source failed. Not retried automatically."""


class LedgerError(RuntimeError):
    """Points could not be stored. The answer itself is already recorded."""


class IQuizGenerator(ABC):
    @abstractmethod
    def generate(self, config: QuizConfig) -> list[QuizQuestion]:
        """
        Produces questions for the given configuration.
        An empty list is a valid answer; the caller decides what it means.
        """
        pass


class IPointLedger(ABC):
    @abstractmethod
    def apply_delta(self, user_id: str, points: int) -> int:
        """
        Adds points and returns the new balance, floored at zero.
        Raises LedgerError when the balance cannot be written.
        """
        pass

    @abstractmethod
    def balance(self, user_id: str) -> int:
        pass


class ICalendarStore(ABC):
    @abstractmethod
    def upsert_task(self, year: int, month: int, day: int, task: str) -> None:
        pass

    @abstractmethod
    def get_task(self, year: int, month: int, day: int) -> str | None:
        pass


class ICredentialStore(ABC):
    @abstractmethod
    def create_user(self, email: str, password: str) -> None:
        pass

    @abstractmethod
    def verify(self, email: str, password: str) -> bool:
        pass
