from collections.abc import Callable

import streamlit as st

from study_planner.config import CourseColor
from study_planner.planner.dashboard import (
    CourseNameError,
    course_index,
    recolor_course,
    rename_course,
    studyable_courses,
    task_color,
    this_weeks_tasks,
    todays_tasks,
)
from study_planner.quiz.domain.models import Course, Task


def render(
    user_name: str,
    points: int,
    tasks: list[Task],
    courses: list[Course],
    on_toggle: Callable[[str], None],
    on_study: Callable[[Course], None],
) -> None:
    st.title(f"Welcome back, {user_name}")
    st.metric("Homework Points", points)

    courses_by_id = course_index(courses)

    st.subheader("Today's Tasks")
    today = todays_tasks(tasks)
    if not today:
        st.caption("Nothing due today.")
    for task in today:
        _render_task(task, courses_by_id, on_toggle)

    st.subheader("This Week")
    week = this_weeks_tasks(tasks)
    if not week:
        st.caption("Nothing due this week.")
    for task in week:
        color = task_color(task, courses_by_id)
        st.markdown(
            f"<span style='color:{color}'>■</span> {task.due_date} · {task.description}",
            unsafe_allow_html=True,
        )

    st.subheader("Study")
    for course in studyable_courses(courses, tasks):
        if st.button(f"Quiz: {course.name}", key=f"dash_study_{course.id}"):
            on_study(course)


def _render_task(task: Task, courses_by_id: dict[str, Course], on_toggle) -> None:
    course = courses_by_id.get(task.course_id)
    label = f"{course.name}: {task.description}" if course else task.description
    checked = st.checkbox(label, value=task.completed, key=f"dash_{task.id}")
    if checked != task.completed:
        on_toggle(task.id)
        st.rerun()


def render_course_editor(
    courses: list[Course], on_change: Callable[[list[Course]], None]
) -> None:
    st.subheader("Courses")
    palette = CourseColor.all_keys()
    for course in courses:
        with st.expander(course.name):
            name = st.text_input("Name", value=course.name, key=f"course_name_{course.id}")
            color = st.selectbox(
                "Color",
                palette,
                index=palette.index(course.color) if course.color in palette else 0,
                key=f"course_color_{course.id}",
            )
            if st.button("Save", key=f"course_save_{course.id}"):
                try:
                    updated = rename_course(courses, course.id, name)
                except CourseNameError as e:
                    st.error(str(e))
                    continue
                on_change(recolor_course(updated, course.id, color))
                st.rerun()
