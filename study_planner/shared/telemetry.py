import logging
import sys
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from prometheus_client import REGISTRY, Counter, Histogram

# --- Correlation id for one user action (button click / rerun) ---
action_id_ctx: ContextVar[str] = ContextVar("action_id", default="system")

DURATION_METRIC = "study_planner_operation_duration_seconds"
EVENT_METRIC = "study_planner_events"

OPERATION_DURATION: Histogram
EVENTS: Counter


def _registered(name: str) -> Any:
    return REGISTRY._names_to_collectors[name]


# Streamlit re-imports modules on rerun; reuse already registered collectors.
try:
    OPERATION_DURATION = Histogram(
        DURATION_METRIC, "Time spent in an operation", ["component", "operation"]
    )
except ValueError:
    OPERATION_DURATION = cast(Histogram, _registered(DURATION_METRIC))

try:
    EVENTS = Counter(EVENT_METRIC, "Domain events", ["component", "event"])
except ValueError:
    EVENTS = cast(Counter, _registered(EVENT_METRIC + "_total"))

P = ParamSpec("P")
R = TypeVar("R")


def measure_time(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Times a method into the duration histogram.
    The owning instance may expose a ``telemetry`` attribute for log output.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            owner: Any = args[0] if args else None
            component = owner.__class__.__name__ if owner is not None else "Unknown"
            telemetry = getattr(owner, "telemetry", None)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start
                OPERATION_DURATION.labels(component=component, operation=operation).observe(
                    elapsed
                )
                if telemetry:
                    telemetry.log_error(
                        f"{operation} failed", e, duration_ms=round(elapsed * 1000, 2)
                    )
                raise

            elapsed = time.perf_counter() - start
            OPERATION_DURATION.labels(component=component, operation=operation).observe(
                elapsed
            )
            if telemetry:
                telemetry.log_debug(operation, duration_ms=round(elapsed * 1000, 2))
            return result

        return wrapper

    return decorator


class Telemetry:
    """
    Logging + metrics facade shared by services, adapters and view models.
    """

    def __init__(self, component_name: str) -> None:
        self.component = component_name
        self.logger: logging.Logger
        self._setup_logger()

    def _setup_logger(self) -> None:
        self.logger = logging.getLogger(f"study_planner.{self.component}")

        # Fall back to stdout when the root logger was never configured.
        if not self.logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def __getstate__(self) -> dict[str, Any]:
        """Loggers hold locks; drop them when session state is pickled."""
        state = self.__dict__.copy()
        state.pop("logger", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._setup_logger()

    @staticmethod
    def start_action() -> str:
        action_id = uuid.uuid4().hex[:8]
        action_id_ctx.set(action_id)
        return action_id

    @staticmethod
    def current_action() -> str:
        return action_id_ctx.get()

    def _format(self, event: str, fields: dict[str, Any]) -> str:
        if fields:
            return f"[{self.current_action()}] {event} | {fields}"
        return f"[{self.current_action()}] {event}"

    def count(self, event: str) -> None:
        EVENTS.labels(component=self.component, event=event).inc()

    def log_debug(self, event: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(event, kwargs))

    def log_info(self, event: str, **kwargs: Any) -> None:
        self.logger.info(self._format(event, kwargs))

    def log_warning(self, event: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(event, kwargs))

    def log_error(self, event: str, error: Exception, **kwargs: Any) -> None:
        msg = self._format(f"{event} | Error: {error}", kwargs)
        self.logger.error(msg, exc_info=True)
