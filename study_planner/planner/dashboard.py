from datetime import date, timedelta

from study_planner.config import CourseColor, StudyConfig
from study_planner.planner.date_bucketer import parse_due_date, start_of_week
from study_planner.quiz.domain.models import Course, Task, TaskCategory


class CourseNameError(ValueError):
    pass


def todays_tasks(tasks: list[Task], today: date | None = None) -> list[Task]:
    today = today or date.today()
    return [t for t in tasks if parse_due_date(t.due_date) == today]


def this_weeks_tasks(tasks: list[Task], today: date | None = None) -> list[Task]:
    """Tasks due in the Monday-Sunday week containing today."""
    week_start = start_of_week(today or date.today())
    week_end = week_start + timedelta(days=StudyConfig.WEEK_DAYS - 1)
    result = []
    for t in tasks:
        due = parse_due_date(t.due_date)
        if due is not None and week_start <= due <= week_end:
            result.append(t)
    return result


def studyable_courses(courses: list[Course], tasks: list[Task]) -> list[Course]:
    """Courses with at least one exam; only those can start a quiz."""
    with_exams = {t.course_id for t in tasks if t.category is TaskCategory.EXAM}
    return [c for c in courses if c.id in with_exams]


def course_index(courses: list[Course]) -> dict[str, Course]:
    return {c.id: c for c in courses}


def task_color(task: Task, courses: dict[str, Course]) -> str:
    course = courses.get(task.course_id)
    key = course.color if course else StudyConfig.DEFAULT_TASK_COLOR
    return CourseColor.hex_for(key)


def toggle_task(tasks: list[Task], task_id: str) -> list[Task]:
    return [t.toggled() if t.id == task_id else t for t in tasks]


def validate_course_name(name: str) -> str:
    name = name.strip()
    if not StudyConfig.COURSE_NAME_MIN <= len(name) <= StudyConfig.COURSE_NAME_MAX:
        raise CourseNameError(
            f"Name must be between {StudyConfig.COURSE_NAME_MIN} and "
            f"{StudyConfig.COURSE_NAME_MAX} characters."
        )
    return name


def rename_course(courses: list[Course], course_id: str, name: str) -> list[Course]:
    name = validate_course_name(name)
    return [
        c.model_copy(update={"name": name}) if c.id == course_id else c for c in courses
    ]


def recolor_course(courses: list[Course], course_id: str, color: str) -> list[Course]:
    return [
        c.model_copy(update={"color": color}) if c.id == course_id else c for c in courses
    ]


class TopicSelection:
    """
    Topics offered for a quiz. Starts with the course topics, all selected.
    """

    def __init__(self, topics: list[str]) -> None:
        self.all_topics: list[str] = list(topics)
        self.selected: list[str] = list(topics)

    def add(self, topic: str) -> bool:
        topic = topic.strip()
        if not topic or topic in self.all_topics:
            return False
        self.all_topics.append(topic)
        self.selected.append(topic)
        return True

    def toggle(self, topic: str) -> None:
        if topic in self.selected:
            self.selected.remove(topic)
        elif topic in self.all_topics:
            self.selected.append(topic)

    def is_selected(self, topic: str) -> bool:
        return topic in self.selected
