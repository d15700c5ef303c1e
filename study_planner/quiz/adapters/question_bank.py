import json
import os
import random

from pydantic import ValidationError

from study_planner.quiz.domain.models import QuizConfig, QuizQuestion
from study_planner.quiz.domain.ports import IQuizGenerator, QuizGenerationError
from study_planner.shared.telemetry import Telemetry, measure_time


class QuestionBankGenerator(IQuizGenerator):
    """
    Serves quizzes from a local JSON question bank.

    The file holds a list of question objects. Questions tagged with a topic
    or a difficulty are only used when both match the quiz configuration;
    untagged ones always qualify.
    """

    def __init__(self, bank_path: str, shuffle: bool = True) -> None:
        self.bank_path = bank_path
        self.shuffle = shuffle
        self.telemetry = Telemetry("QuestionBankGenerator")
        self._cache: list[QuizQuestion] | None = None

    def _load(self) -> list[QuizQuestion]:
        if self._cache is not None:
            return self._cache

        if not os.path.exists(self.bank_path):
            raise QuizGenerationError(f"Question bank not found: {self.bank_path}")

        try:
            with open(self.bank_path, encoding="utf-8") as f:
                raw = json.load(f)
            questions = [QuizQuestion.model_validate(q) for q in raw]
        except (
            OSError,
            UnicodeDecodeError,
            json.JSONDecodeError,
            ValidationError,
            TypeError,
        ) as e:
            self.telemetry.log_error("Question bank unreadable", e, path=self.bank_path)
            raise QuizGenerationError(
                "Failed to generate the quiz. Please try a different topic or file."
            ) from e

        self.telemetry.log_info("Question bank loaded", count=len(questions))
        self._cache = questions
        return questions

    @measure_time("generate_quiz")
    def generate(self, config: QuizConfig) -> list[QuizQuestion]:
        topics = {t.lower() for t in config.topics}
        pool = [
            q
            for q in self._load()
            if q.type in config.question_types
            and (q.topic is None or q.topic.lower() in topics)
            and (q.difficulty is None or q.difficulty is config.difficulty)
        ]

        if self.shuffle:
            pool = random.sample(pool, len(pool))

        selected = pool[: config.question_count]
        self.telemetry.log_info(
            "Quiz generated",
            course_id=config.course_id,
            requested=config.question_count,
            difficulty=config.difficulty.value,
            returned=len(selected),
        )
        return selected
