import json
import os

from pydantic import ValidationError

from study_planner.quiz.domain.models import Course, Task
from study_planner.shared.telemetry import Telemetry


class SyllabusSeeder:
    """
    Loads an already-reviewed syllabus export (courses + tasks) from JSON.
    Stands in for the document-analysis step when running locally.
    """

    def __init__(self, seed_file: str = "data/sample_syllabus.json") -> None:
        self.seed_file = seed_file
        self.telemetry = Telemetry("SyllabusSeeder")

    def load(self) -> tuple[list[Course], list[Task]]:
        if not os.path.exists(self.seed_file):
            self.telemetry.log_warning("Seed file not found", path=self.seed_file)
            return [], []

        try:
            with open(self.seed_file, encoding="utf-8") as f:
                data = json.load(f)
            courses = [Course.model_validate(c) for c in data.get("courses") or []]
            tasks = [Task.model_validate(t) for t in data.get("tasks") or []]
        except (
            OSError,
            UnicodeDecodeError,
            json.JSONDecodeError,
            ValidationError,
            AttributeError,
            TypeError,
        ) as e:
            self.telemetry.log_error("Seed file unreadable", e, path=self.seed_file)
            return [], []

        self.telemetry.log_info("Syllabus seeded", courses=len(courses), tasks=len(tasks))
        return courses, tasks
