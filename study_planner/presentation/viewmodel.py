from datetime import date
from enum import Enum

from study_planner.planner.dashboard import TopicSelection
from study_planner.planner.date_bucketer import (
    CalendarWindow,
    ViewKind,
    advance,
    bucket_by_day,
    compute_window,
    tasks_in_window,
)
from study_planner.presentation.state_provider import IStateProvider
from study_planner.quiz.application.service import StudyService
from study_planner.quiz.domain.models import Course, QuizConfig, Task
from study_planner.quiz.domain.ports import LedgerError, QuizGenerationError
from study_planner.quiz.domain.session import QuizPreconditionError, QuizSession, ReviewCursor
from study_planner.shared.telemetry import Telemetry


class CalendarViewModel:
    def __init__(self, state_provider: IStateProvider, today: date | None = None):
        self.state = state_provider
        self.telemetry = Telemetry("CalendarViewModel")
        if self.state.get("calendar_window") is None:
            anchor = today or date.today()
            self.state.set("calendar_window", compute_window(ViewKind.MONTH, anchor))

    @property
    def window(self) -> CalendarWindow:
        return self.state.get("calendar_window")

    def set_view(self, view: ViewKind) -> None:
        self.state.set("calendar_window", compute_window(view, self.window.anchor))

    def shift(self, amount: int) -> None:
        self.state.set("calendar_window", advance(self.window, amount))

    def go_today(self, today: date | None = None) -> None:
        self.state.set(
            "calendar_window", compute_window(self.window.view, today or date.today())
        )

    def visible_days(self, tasks: list[Task]) -> list[tuple[date, list[Task]]]:
        return tasks_in_window(self.window, bucket_by_day(tasks))


class StudyScreen(Enum):
    COURSE_SELECTION = "course_selection"
    TOPIC_SELECTION = "topic_selection"
    QUIZ = "quiz"
    RESULTS = "results"


class StudyViewModel:
    def __init__(self, service: StudyService, state_provider: IStateProvider, user_id: str):
        self.service = service
        self.state = state_provider
        self.user_id = user_id
        self.telemetry = Telemetry("StudyViewModel")

    # --- Properties ---
    @property
    def screen(self) -> StudyScreen:
        return self.state.get("study_screen", StudyScreen.COURSE_SELECTION)

    @property
    def session(self) -> QuizSession | None:
        return self.state.get("quiz_session")

    @property
    def course(self) -> Course | None:
        return self.state.get("study_course")

    @property
    def topics(self) -> TopicSelection | None:
        return self.state.get("topic_selection")

    @property
    def review(self) -> ReviewCursor | None:
        return self.state.get("review_cursor")

    @property
    def error(self) -> str | None:
        return self.state.get("study_error")

    # --- Actions ---
    def select_course(self, course: Course) -> None:
        self.state.set("study_course", course)
        self.state.set("topic_selection", TopicSelection(course.topics))
        self.state.pop("study_error")
        self.state.set("study_screen", StudyScreen.TOPIC_SELECTION)

    def start_quiz(self, config: QuizConfig) -> bool:
        Telemetry.start_action()
        self.telemetry.log_info("Action: Start Quiz", course_id=config.course_id)
        try:
            session = self.service.start_session(config, self.user_id)
        except (QuizPreconditionError, QuizGenerationError) as e:
            self.state.set("study_error", str(e))
            return False

        self.state.pop("study_error")
        self.state.pop("review_cursor")
        self.state.set("quiz_session", session)
        self.state.set("study_screen", StudyScreen.QUIZ)
        return True

    def submit(self, answer: str) -> None:
        Telemetry.start_action()
        if self.session is None:
            return
        self.state.pop("study_error")
        try:
            is_correct = self.session.submit_answer(answer)
        except LedgerError as e:
            self.telemetry.log_error("Points not saved", e)
            self.state.set(
                "study_error", "Your answer was recorded, but your points could not be saved."
            )
            return
        self.telemetry.log_info("Action: Submit", correct=is_correct)

    def skip(self) -> None:
        Telemetry.start_action()
        if self.session is not None:
            self.session.skip()

    def next_question(self) -> None:
        Telemetry.start_action()
        session = self.session
        if session is None or not session.advance():
            return
        self.state.pop("study_error")
        if session.is_complete:
            self.telemetry.log_info(
                "Quiz finished", score=session.score, total=session.total_questions
            )
            self.state.set("study_screen", StudyScreen.RESULTS)

    def open_review(self) -> ReviewCursor | None:
        session = self.session
        if session is None or not session.is_complete:
            return None
        cursor = session.review()
        self.state.set("review_cursor", cursor)
        return cursor

    def close_review(self) -> None:
        self.state.pop("review_cursor")

    def dismiss_error(self) -> None:
        self.state.pop("study_error")

    def reset(self) -> None:
        Telemetry.start_action()
        for key in ("quiz_session", "review_cursor", "study_course", "topic_selection", "study_error"):
            self.state.pop(key)
        self.state.set("study_screen", StudyScreen.COURSE_SELECTION)
