from study_planner.planner.date_bucketer import parse_due_date
from study_planner.quiz.domain.models import QuizConfig, Task
from study_planner.quiz.domain.ports import ICalendarStore, IPointLedger, IQuizGenerator
from study_planner.quiz.domain.session import QuizPreconditionError, QuizSession
from study_planner.shared.telemetry import Telemetry, measure_time


class StudyService:
    def __init__(
        self,
        generator: IQuizGenerator,
        ledger: IPointLedger,
        calendar_store: ICalendarStore,
    ):
        self.generator = generator
        self.ledger = ledger
        self.calendar_store = calendar_store
        self.telemetry = Telemetry("StudyService")

    @staticmethod
    def validate_config(config: QuizConfig) -> None:
        if not config.topics:
            raise QuizPreconditionError("Please select at least one topic for the quiz.")
        if not config.question_types:
            raise QuizPreconditionError("Please select at least one question type.")

    @measure_time("start_session")
    def start_session(self, config: QuizConfig, user_id: str) -> QuizSession:
        self.validate_config(config)

        questions = self.generator.generate(config)
        if not questions:
            self.telemetry.log_info(
                "No questions generated", user_id=user_id, topics=config.topics
            )

        # QuizSession refuses an empty list with a user-facing message.
        session = QuizSession(
            questions, on_score_delta=lambda points: self.ledger.apply_delta(user_id, points)
        )
        self.telemetry.count("session_started")
        self.telemetry.log_info(
            "Session started", user_id=user_id, questions=session.total_questions
        )
        return session

    @measure_time("accept_syllabus")
    def accept_syllabus(self, tasks: list[Task]) -> int:
        """Stores reviewed tasks in the calendar. Unparseable dates are skipped."""
        stored = 0
        for task in tasks:
            due = parse_due_date(task.due_date)
            if due is None:
                continue
            self.calendar_store.upsert_task(due.year, due.month, due.day, task.description)
            stored += 1

        self.telemetry.log_info("Syllabus accepted", received=len(tasks), stored=stored)
        return stored

    def points(self, user_id: str) -> int:
        return self.ledger.balance(user_id)
