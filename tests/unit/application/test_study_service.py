from unittest.mock import Mock

import pytest

from study_planner.quiz.application.service import StudyService
from study_planner.quiz.domain.models import QuizConfig, Task
from study_planner.quiz.domain.session import QuizPreconditionError


@pytest.fixture
def generator(abc_questions):
    """Mock generator returning three A/B/C questions."""
    gen = Mock()
    gen.generate.return_value = abc_questions
    return gen


@pytest.fixture
def ledger():
    return Mock()


@pytest.fixture
def calendar_store():
    return Mock()


@pytest.fixture
def service(generator, ledger, calendar_store):
    return StudyService(generator, ledger, calendar_store)


@pytest.fixture
def config():
    return QuizConfig(course_id="cs", topics=["Recursion"])


class TestStartSession:
    def test_requires_a_topic(self, service, generator):
        with pytest.raises(QuizPreconditionError, match="at least one topic"):
            service.start_session(QuizConfig(course_id="cs"), "u1")
        generator.generate.assert_not_called()

    def test_requires_a_question_type(self, service):
        config = QuizConfig(course_id="cs", topics=["Trees"], question_types=[])
        with pytest.raises(QuizPreconditionError, match="at least one question type"):
            service.start_session(config, "u1")

    def test_empty_generation_surfaces_message(self, service, generator, config):
        generator.generate.return_value = []
        with pytest.raises(QuizPreconditionError, match="adjusting your topics"):
            service.start_session(config, "u1")

    def test_session_reports_points_to_ledger(self, service, ledger, config):
        session = service.start_session(config, "u1")

        session.submit_answer("A")
        session.advance()
        session.submit_answer("A")

        assert [c.args for c in ledger.apply_delta.call_args_list] == [
            ("u1", 5),
            ("u1", -2),
        ]

    def test_skip_does_not_touch_ledger(self, service, ledger, config):
        session = service.start_session(config, "u1")
        session.skip()
        ledger.apply_delta.assert_not_called()

    def test_passes_config_to_generator(self, service, generator, config):
        service.start_session(config, "u1")
        generator.generate.assert_called_once_with(config)


class TestAcceptSyllabus:
    def test_stores_parseable_tasks(self, service, calendar_store, sample_tasks):
        stored = service.accept_syllabus(sample_tasks)

        assert stored == 3
        calendar_store.upsert_task.assert_any_call(2024, 3, 5, "HW 1")
        calendar_store.upsert_task.assert_any_call(2024, 3, 7, "Midterm")
        assert calendar_store.upsert_task.call_count == 3

    def test_tba_dates_are_skipped(self, service, calendar_store):
        tasks = [Task(id="x", description="Final", due_date="TBA", course_id="cs")]
        assert service.accept_syllabus(tasks) == 0
        calendar_store.upsert_task.assert_not_called()


def test_points_reads_balance(service, ledger):
    ledger.balance.return_value = 42
    assert service.points("u1") == 42
    ledger.balance.assert_called_once_with("u1")
