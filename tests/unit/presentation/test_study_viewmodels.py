from datetime import date
from unittest.mock import Mock

import pytest

from study_planner.planner.date_bucketer import ViewKind
from study_planner.presentation.state_provider import (
    DictStateProvider,
    StreamlitStateProvider,
)
from study_planner.presentation.viewmodel import (
    CalendarViewModel,
    StudyScreen,
    StudyViewModel,
)
from study_planner.quiz.domain.models import QuizConfig
from study_planner.quiz.domain.ports import LedgerError, QuizGenerationError
from study_planner.quiz.domain.session import QuizPreconditionError, QuizSession


class TestStateProviders:
    def test_dict_provider(self):
        state = DictStateProvider()
        state.set("k", 1)
        assert state.get("k") == 1
        state.pop("k")
        state.pop("k")
        assert state.get("k", "default") == "default"

    def test_streamlit_provider_uses_session_state(self, session_state):
        state = StreamlitStateProvider()
        state.set("k", "v")
        assert session_state["k"] == "v"
        state.pop("k")
        assert "k" not in session_state


class TestCalendarViewModel:
    @pytest.fixture
    def vm(self):
        return CalendarViewModel(DictStateProvider(), today=date(2024, 3, 15))

    def test_defaults_to_month_of_today(self, vm):
        assert vm.window.view is ViewKind.MONTH
        assert vm.window.title() == "March 2024"

    def test_keeps_existing_window(self, vm):
        vm.shift(1)
        again = CalendarViewModel(vm.state, today=date(2030, 1, 1))
        assert again.window.title() == "April 2024"

    def test_set_view_keeps_anchor(self, vm):
        vm.set_view(ViewKind.DAY)
        assert vm.window.title() == "Friday, 15th March 2024"

    def test_shift_week(self, vm):
        vm.set_view(ViewKind.WEEK)
        vm.shift(-1)
        assert vm.window.start == date(2024, 3, 4)

    def test_go_today_keeps_view(self, vm):
        vm.set_view(ViewKind.WEEK)
        vm.shift(5)
        vm.go_today(date(2024, 3, 15))
        assert vm.window.view is ViewKind.WEEK
        assert vm.window.contains(date(2024, 3, 15))

    def test_visible_days(self, vm, sample_tasks):
        vm.set_view(ViewKind.WEEK)
        vm.shift(-1)  # Mar 4 - Mar 10
        days = dict(vm.visible_days(sample_tasks))

        assert len(days) == 7
        assert [t.id for t in days[date(2024, 3, 5)]] == ["t1", "t3"]
        assert days[date(2024, 3, 6)] == []


class TestStudyViewModel:
    @pytest.fixture
    def service(self, abc_questions):
        service = Mock()
        service.start_session.side_effect = lambda config, user_id: QuizSession(
            abc_questions
        )
        return service

    @pytest.fixture
    def vm(self, service):
        return StudyViewModel(service, DictStateProvider(), user_id="u1")

    @pytest.fixture
    def config(self):
        return QuizConfig(course_id="cs", topics=["Recursion"])

    def test_starts_on_course_selection(self, vm):
        assert vm.screen is StudyScreen.COURSE_SELECTION
        assert vm.session is None

    def test_select_course_builds_topics(self, vm, sample_courses):
        vm.select_course(sample_courses[0])

        assert vm.screen is StudyScreen.TOPIC_SELECTION
        assert vm.course.id == "cs"
        assert vm.topics.selected == ["Recursion", "Trees"]

    def test_start_quiz(self, vm, service, config):
        assert vm.start_quiz(config) is True
        assert vm.screen is StudyScreen.QUIZ
        service.start_session.assert_called_once_with(config, "u1")

    @pytest.mark.parametrize(
        "error",
        [
            QuizPreconditionError("Please select at least one topic for the quiz."),
            QuizGenerationError("Failed to generate the quiz."),
        ],
    )
    def test_start_quiz_failure_is_stored(self, vm, service, config, error):
        service.start_session.side_effect = error

        assert vm.start_quiz(config) is False
        assert vm.error == str(error)
        assert vm.screen is StudyScreen.COURSE_SELECTION

        vm.dismiss_error()
        assert vm.error is None

    def test_full_quiz_reaches_results(self, vm, config):
        vm.start_quiz(config)
        for answer in ("A", "B", "X"):
            vm.submit(answer)
            vm.next_question()

        assert vm.screen is StudyScreen.RESULTS
        assert vm.session.score == 2

    def test_next_without_answer_does_nothing(self, vm, config):
        vm.start_quiz(config)
        vm.next_question()
        assert vm.session.index == 0

    def test_review_only_after_completion(self, vm, config):
        vm.start_quiz(config)
        assert vm.open_review() is None

        for _ in range(3):
            vm.skip()
            vm.next_question()

        cursor = vm.open_review()
        assert vm.review is cursor
        vm.close_review()
        assert vm.review is None

    def test_actions_without_session_are_noops(self, vm):
        vm.submit("A")
        vm.skip()
        vm.next_question()
        assert vm.session is None

    def test_reset(self, vm, config, sample_courses):
        vm.select_course(sample_courses[0])
        vm.start_quiz(config)
        vm.reset()

        assert vm.screen is StudyScreen.COURSE_SELECTION
        assert vm.session is None
        assert vm.course is None

    def test_ledger_failure_is_shown_and_answer_kept(self, vm, service, abc_questions, config):
        listener = Mock(side_effect=LedgerError("disk full"))
        service.start_session.side_effect = lambda config, user_id: QuizSession(
            abc_questions, on_score_delta=listener
        )
        vm.start_quiz(config)

        vm.submit("A")

        assert vm.error == "Your answer was recorded, but your points could not be saved."
        assert vm.session.answers == ("A",)
        assert vm.session.is_submitted

        vm.next_question()
        assert vm.error is None
        assert vm.session.index == 1
