from collections.abc import Callable
from datetime import date

import streamlit as st

from study_planner.planner.dashboard import course_index, task_color
from study_planner.planner.date_bucketer import ViewKind, is_today
from study_planner.presentation.viewmodel import CalendarViewModel
from study_planner.quiz.domain.models import Course, Task

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def render(
    vm: CalendarViewModel,
    tasks: list[Task],
    courses: list[Course],
    on_toggle: Callable[[str], None],
) -> None:
    _render_header(vm)

    courses_by_id = course_index(courses)
    days = vm.visible_days(tasks)

    if vm.window.view is ViewKind.MONTH:
        _render_grid(vm, days, courses_by_id, on_toggle)
    elif vm.window.view is ViewKind.WEEK:
        cols = st.columns(7)
        for col, (d, day_tasks) in zip(cols, days):
            with col:
                _render_day_cell(d, day_tasks, courses_by_id, on_toggle, dimmed=False)
    else:
        d, day_tasks = days[0]
        if not day_tasks:
            st.info("No tasks scheduled for this day.")
        for task in day_tasks:
            _render_task(task, courses_by_id, on_toggle, key_prefix="day")


def _render_header(vm: CalendarViewModel) -> None:
    st.subheader(vm.window.title())

    col_prev, col_today, col_next, col_view = st.columns([1, 1, 1, 3])
    if col_prev.button("‹", key="cal_prev"):
        vm.shift(-1)
        st.rerun()
    if col_today.button("Today", key="cal_today"):
        vm.go_today()
        st.rerun()
    if col_next.button("›", key="cal_next"):
        vm.shift(1)
        st.rerun()

    views = list(ViewKind)
    picked = col_view.radio(
        "View",
        views,
        index=views.index(vm.window.view),
        format_func=lambda v: v.value.capitalize(),
        horizontal=True,
        label_visibility="collapsed",
    )
    if picked is not vm.window.view:
        vm.set_view(picked)
        st.rerun()


def _render_grid(vm, days, courses_by_id, on_toggle) -> None:
    for col, name in zip(st.columns(7), DAY_NAMES):
        col.caption(name)

    for week in range(0, len(days), 7):
        for col, (d, day_tasks) in zip(st.columns(7), days[week : week + 7]):
            with col:
                _render_day_cell(
                    d,
                    day_tasks,
                    courses_by_id,
                    on_toggle,
                    dimmed=not vm.window.is_in_focus_month(d),
                )


def _render_day_cell(d: date, day_tasks, courses_by_id, on_toggle, dimmed: bool) -> None:
    label = f"**{d.day}**" if is_today(d) else str(d.day)
    if dimmed:
        label = f":gray[{d.day}]"
    st.markdown(label)
    for task in day_tasks:
        _render_task(task, courses_by_id, on_toggle, key_prefix=d.isoformat())


def _render_task(task: Task, courses_by_id, on_toggle, key_prefix: str) -> None:
    course = courses_by_id.get(task.course_id)
    color = task_color(task, courses_by_id)
    name = course.name if course else ""
    st.markdown(
        f"<span style='color:{color}'>■</span> **{name}**", unsafe_allow_html=True
    )
    checked = st.checkbox(
        task.description, value=task.completed, key=f"{key_prefix}_{task.id}"
    )
    if checked != task.completed:
        on_toggle(task.id)
        st.rerun()
