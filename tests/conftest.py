import pytest
import streamlit as st

from study_planner.quiz.adapters.db_manager import DatabaseManager
from study_planner.quiz.adapters.sqlite_repository import SQLiteStudyRepository
from study_planner.quiz.domain.models import (
    Course,
    QuestionType,
    QuizQuestion,
    Task,
    TaskCategory,
)


@pytest.fixture
def session_state(monkeypatch):
    """Plain dict standing in for st.session_state."""
    state: dict = {}
    monkeypatch.setattr(st, "session_state", state)
    return state


def _make_choice_question(correct: str, prompt: str = "Pick one") -> QuizQuestion:
    return QuizQuestion(
        type=QuestionType.MULTIPLE_CHOICE,
        prompt=prompt,
        options=["A", "B", "C", "D"],
        correct_answer=correct,
        explanation=f"{correct} is right",
    )


@pytest.fixture
def abc_questions():
    """Three multiple-choice questions answered A, B, C."""
    return [_make_choice_question(c) for c in ("A", "B", "C")]


@pytest.fixture
def blank_question():
    return QuizQuestion(
        type=QuestionType.FILL_IN_THE_BLANK,
        prompt="Each node holds a ____ to the next node.",
        correct_answer=["pointer", "Reference"],
        explanation="Nodes link forward.",
    )


@pytest.fixture
def sample_courses():
    return [
        Course(id="cs", name="CS 2337", color="teal", topics=["Recursion", "Trees"]),
        Course(id="hist", name="History", color="not-a-color", topics=["Rome"]),
    ]


@pytest.fixture
def sample_tasks():
    return [
        Task(id="t1", description="HW 1", due_date="03/05/2024", course_id="cs"),
        Task(
            id="t2",
            description="Midterm",
            due_date="03/07/2024",
            course_id="cs",
            category=TaskCategory.EXAM,
        ),
        Task(id="t3", description="Essay", due_date="03/05/2024", course_id="hist"),
        Task(id="t4", description="Broken", due_date="13/40/2024", course_id="hist"),
    ]


@pytest.fixture
def in_memory_repo():
    db_manager = DatabaseManager(db_path=":memory:")
    repo = SQLiteStudyRepository(db_manager=db_manager)
    yield repo
    db_manager.close()


@pytest.fixture
def make_question():
    return _make_choice_question
