import logging
import os

import streamlit as st

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import start_http_server

# --- Application Imports ---
from study_planner.config import AppSettings, StudyConfig
from study_planner.planner.dashboard import toggle_task
from study_planner.presentation.state_provider import StreamlitStateProvider
from study_planner.presentation.viewmodel import CalendarViewModel, StudyViewModel
from study_planner.presentation.views import calendar_view, dashboard_view, quiz_view
from study_planner.quiz.adapters.db_manager import DatabaseManager
from study_planner.quiz.adapters.question_bank import QuestionBankGenerator
from study_planner.quiz.adapters.seeder import SyllabusSeeder
from study_planner.quiz.adapters.sqlite_repository import SQLiteStudyRepository
from study_planner.quiz.application.service import StudyService

PAGES = ["Dashboard", "Calendar", "Study"]


def configure_observability() -> None:
    """
    Ships traces and logs over OTLP when the OTEL env vars are present,
    and exposes Prometheus metrics on METRICS_PORT.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if endpoint and headers:
        resource = Resource.create({"service.name": "study-planner"})

        trace_provider = TracerProvider(resource=resource)
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
        )
        trace.set_tracer_provider(trace_provider)

        logger_provider = LoggerProvider(resource=resource)
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
        )
        set_logger_provider(logger_provider)
        logging.getLogger().addHandler(
            LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        )
    else:
        logging.warning("OTEL env vars not set. Telemetry stays local.")

    port = int(os.getenv("METRICS_PORT", "8000"))
    try:
        start_http_server(port)
        logging.info(f"Prometheus metrics on port {port}")
    except OSError:
        # Streamlit reruns the script; the server from the first run keeps the port.
        logging.info(f"Metrics port {port} already bound. Skipping.")


@st.cache_resource
def get_service(db_path: str, question_bank_path: str) -> StudyService:
    repo = SQLiteStudyRepository(DatabaseManager(db_path))
    generator = QuestionBankGenerator(question_bank_path)
    return StudyService(generator, ledger=repo, calendar_store=repo)


def load_planner(
    state: StreamlitStateProvider, service: StudyService, seed_path: str
) -> None:
    if state.get("courses") is not None:
        return
    courses, tasks = SyllabusSeeder(seed_path).load()
    service.accept_syllabus(tasks)
    state.set("courses", courses)
    state.set("tasks", tasks)


def main() -> None:
    st.set_page_config(page_title=StudyConfig.APP_TITLE, layout="wide")

    if "observability_configured" not in st.session_state:
        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
        configure_observability()
        st.session_state.observability_configured = True

    settings = AppSettings.from_env()
    service = get_service(settings.db_path, settings.question_bank_path)
    state = StreamlitStateProvider()
    load_planner(state, service, settings.seed_path)

    courses = state.get("courses", [])
    tasks = state.get("tasks", [])

    def on_toggle(task_id: str) -> None:
        state.set("tasks", toggle_task(state.get("tasks", []), task_id))

    study_vm = StudyViewModel(service, state, settings.user_id)

    def on_study(course) -> None:
        study_vm.select_course(course)
        state.set("page", "Study")
        st.rerun()

    page = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(state.get("page", "Dashboard")))
    if page != state.get("page"):
        # Leaving the study page abandons any running quiz.
        if page != "Study":
            study_vm.reset()
        state.set("page", page)

    if page == "Dashboard":
        dashboard_view.render(
            settings.user_id, service.points(settings.user_id), tasks, courses, on_toggle, on_study
        )
        dashboard_view.render_course_editor(courses, lambda updated: state.set("courses", updated))
    elif page == "Calendar":
        calendar_view.render(CalendarViewModel(state), tasks, courses, on_toggle)
    else:
        quiz_view.render(study_vm, courses, tasks)


if __name__ == "__main__":
    main()
