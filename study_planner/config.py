from enum import Enum
from typing import Final

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CourseColor(Enum):
    # Enum Member = ("palette key", "hex")
    TEAL = ("teal", "#14b8a6")
    BLUE = ("blue", "#3b82f6")
    PURPLE = ("purple", "#a855f7")
    PINK = ("pink", "#ec4899")
    RED = ("red", "#ef4444")
    ORANGE = ("orange", "#f97316")
    YELLOW = ("yellow", "#eab308")
    GREEN = ("green", "#22c55e")
    INDIGO = ("indigo", "#6366f1")
    CYAN = ("cyan", "#06b6d4")

    def __init__(self, key: str, hex_value: str):
        self.key = key
        self.hex_value = hex_value

    @classmethod
    def from_key(cls, key: str | None) -> "CourseColor | None":
        for color in cls:
            if color.key == key:
                return color
        return None

    @classmethod
    def hex_for(cls, key: str | None) -> str:
        """Returns the hex for a palette key, or the gray fallback."""
        color = cls.from_key(key)
        if color is None:
            return FALLBACK_HEX
        return color.hex_value

    @classmethod
    def all_keys(cls) -> list[str]:
        return [c.key for c in cls]


FALLBACK_HEX: Final[str] = "#6b7280"


class StudyConfig:
    # --- App Identity ---
    APP_TITLE = "Study Planner"

    # --- Points Ledger ---
    # +5 / -2 is the policy the quiz flow actually applies.
    POINTS_CORRECT: Final[int] = 5
    POINTS_INCORRECT: Final[int] = -2

    # --- Calendar ---
    MONTH_GRID_DAYS: Final[int] = 42
    WEEK_DAYS: Final[int] = 7
    DUE_DATE_FORMAT = "MM/DD/YYYY"
    DEFAULT_TASK_COLOR = CourseColor.TEAL.key

    # --- Quiz Settings ---
    DEFAULT_QUESTION_COUNT = 10
    MIN_QUESTION_COUNT: Final[int] = 5
    MAX_QUESTION_COUNT: Final[int] = 25
    BLANK_MARKER: Final[str] = "____"
    SKIPPED_ANSWER: Final[str] = "__SKIPPED__"

    # --- Courses ---
    COURSE_NAME_MIN: Final[int] = 2
    COURSE_NAME_MAX: Final[int] = 10


class AppSettings(BaseSettings):
    """Runtime settings handed to the composition root."""

    model_config = SettingsConfigDict(frozen=True)

    db_path: str = Field(default="data/study_planner.db", validation_alias="STUDY_PLANNER_DB")
    question_bank_path: str = Field(
        default="data/question_bank.json", validation_alias="STUDY_PLANNER_QUESTION_BANK"
    )
    seed_path: str = Field(
        default="data/sample_syllabus.json", validation_alias="STUDY_PLANNER_SEED"
    )
    user_id: str = Field(default="student", validation_alias="STUDY_PLANNER_USER")

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls()
