import streamlit as st

from study_planner.config import StudyConfig
from study_planner.planner.dashboard import studyable_courses
from study_planner.presentation.viewmodel import StudyScreen, StudyViewModel
from study_planner.quiz.domain.models import (
    Course,
    Difficulty,
    QuestionType,
    QuizConfig,
    QuizQuestion,
    Task,
)
from study_planner.quiz.domain.session import SKIPPED_ANSWER, AnswerResult


def render(vm: StudyViewModel, courses: list[Course], tasks: list[Task]) -> None:
    screen = vm.screen
    if screen is StudyScreen.COURSE_SELECTION:
        _render_course_selection(vm, studyable_courses(courses, tasks))
    elif screen is StudyScreen.TOPIC_SELECTION:
        _render_topic_selection(vm)
    elif screen is StudyScreen.QUIZ:
        _render_question(vm)
    elif screen is StudyScreen.RESULTS:
        _render_results(vm)


def _render_course_selection(vm: StudyViewModel, courses: list[Course]) -> None:
    st.title("Start a Study Session")
    if not courses:
        st.info(
            "No courses with exams found. Add a syllabus and categorize tasks "
            "as 'Exam' to begin."
        )
        return
    for course in courses:
        if st.button(course.name, key=f"study_{course.id}", use_container_width=True):
            vm.select_course(course)
            st.rerun()


def _render_topic_selection(vm: StudyViewModel) -> None:
    course, topics = vm.course, vm.topics
    if course is None or topics is None:
        vm.reset()
        st.rerun()
        return

    if st.button("‹ Back to Course Selection"):
        vm.reset()
        st.rerun()

    st.header("Customize Your Quiz")
    if vm.error:
        st.error(vm.error)

    difficulty = st.segmented_control(
        "Quiz Difficulty", list(Difficulty), default=Difficulty.MEDIUM,
        format_func=lambda d: d.value,
    )
    question_types = st.multiselect(
        "Question Types", list(QuestionType), default=list(QuestionType),
        format_func=lambda t: t.label,
    )
    count = st.slider(
        "Number of Questions",
        StudyConfig.MIN_QUESTION_COUNT,
        StudyConfig.MAX_QUESTION_COUNT,
        StudyConfig.DEFAULT_QUESTION_COUNT,
    )

    st.subheader("Quiz Topics")
    for topic in topics.all_topics:
        checked = st.checkbox(topic, value=topics.is_selected(topic), key=f"topic_{topic}")
        if checked != topics.is_selected(topic):
            topics.toggle(topic)

    new_topic = st.text_input("Add a custom topic...")
    if st.button("Add") and topics.add(new_topic):
        st.rerun()

    if st.button("Generate Quiz", type="primary", disabled=not topics.selected):
        config = QuizConfig(
            course_id=course.id,
            topics=list(topics.selected),
            question_types=question_types,
            question_count=count,
            difficulty=difficulty or Difficulty.MEDIUM,
        )
        with st.spinner("Generating your custom quiz..."):
            vm.start_quiz(config)
        st.rerun()


def _answer_input(question: QuizQuestion, disabled: bool, key: str) -> str:
    if question.type is QuestionType.FILL_IN_THE_BLANK:
        before, after = question.prompt_parts()
        st.markdown(f"{before} ____ {after}")
        return st.text_input("Your answer", disabled=disabled, key=key)
    st.markdown(question.prompt)
    if question.type is QuestionType.SELECT_DROPDOWN:
        picked = st.selectbox(
            "Select an answer...", question.options, index=None, disabled=disabled, key=key
        )
    else:
        picked = st.radio(
            "Options", question.options, index=None, disabled=disabled, key=key
        )
    return picked or ""


def _render_question(vm: StudyViewModel) -> None:
    session = vm.session
    if session is None or session.current_question is None:
        vm.reset()
        st.rerun()
        return

    question = session.current_question
    st.progress(
        session.progress,
        text=f"Question {session.index + 1} of {session.total_questions}",
    )
    if vm.error:
        st.warning(vm.error)

    answer = _answer_input(
        question, disabled=session.is_submitted, key=f"quiz_answer_{session.index}"
    )

    if not session.is_submitted:
        col_skip, col_submit = st.columns(2)
        if col_skip.button("Skip Question", use_container_width=True):
            vm.skip()
            st.rerun()
        if col_submit.button(
            "Submit Answer", type="primary", disabled=not answer.strip(),
            use_container_width=True,
        ):
            vm.submit(answer)
            st.rerun()
        return

    _render_explanation(question, session.last_answer or "", bool(session.last_answer_correct))
    label = "Finish Quiz" if session.is_last_question else "Next Question"
    if st.button(label, type="primary"):
        vm.next_question()
        st.rerun()


def _render_explanation(question: QuizQuestion, answer: str, is_correct: bool) -> None:
    if is_correct:
        st.success("Correct!")
    elif answer == SKIPPED_ANSWER:
        st.warning(f"Skipped. The correct answer is: {question.display_answer}")
    else:
        st.error(f"Incorrect. The correct answer is: {question.display_answer}")
    st.markdown(question.explanation)
    note = None if is_correct else question.explanation_for(answer)
    if note:
        st.info(f"Why not **{answer}**: {note}")


def _render_results(vm: StudyViewModel) -> None:
    session = vm.session
    if session is None:
        vm.reset()
        st.rerun()
        return

    cursor = vm.review
    if cursor is None:
        st.title("Quiz Complete!")
        st.metric("Score", f"{session.score} / {session.total_questions}")
        col_review, col_new = st.columns(2)
        if col_review.button("Review Answers", use_container_width=True):
            vm.open_review()
            st.rerun()
        if col_new.button("Study Another Course", type="primary", use_container_width=True):
            vm.reset()
            st.rerun()
        return

    _render_review_item(cursor.current, cursor.position, len(cursor))
    col_prev, col_back, col_next = st.columns(3)
    if col_prev.button("‹ Previous", disabled=not cursor.can_prev):
        cursor.prev()
        st.rerun()
    if col_back.button("Back to Summary"):
        vm.close_review()
        st.rerun()
    if col_next.button("Next ›", disabled=not cursor.can_next):
        cursor.next()
        st.rerun()


def _render_review_item(result: AnswerResult, position: int, total: int) -> None:
    st.caption(f"Question {position + 1} of {total}")
    st.markdown(result.question.prompt)
    shown = "Skipped" if result.is_skipped else result.answer
    st.markdown(f"Your answer: **{shown}**")
    _render_explanation(result.question, result.answer, result.is_correct)
