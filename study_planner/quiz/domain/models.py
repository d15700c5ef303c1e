from enum import Enum

from pydantic import BaseModel, Field, model_validator

from study_planner.config import StudyConfig


# --- Enums ---
class TaskCategory(str, Enum):
    ASSIGNMENT = "Assignment"
    EXAM = "Exam"
    MISCELLANEOUS = "Miscellaneous"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    FILL_IN_THE_BLANK = "fill-in-the-blank"
    SELECT_DROPDOWN = "select-dropdown"

    @property
    def is_choice(self) -> bool:
        return self is not QuestionType.FILL_IN_THE_BLANK

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


# --- Planner Entities ---
class Task(BaseModel):
    id: str
    description: str
    due_date: str  # MM/DD/YYYY, may be malformed
    completed: bool = False
    course_id: str
    category: TaskCategory = TaskCategory.ASSIGNMENT

    def toggled(self) -> "Task":
        return self.model_copy(update={"completed": not self.completed})


class Course(BaseModel):
    id: str
    name: str
    # Palette key; unknown keys render with the fallback color.
    color: str = "teal"
    topics: list[str] = []


# --- Quiz Entities ---
class DistractorExplanation(BaseModel):
    option: str
    explanation: str


class QuizQuestion(BaseModel):
    type: QuestionType
    prompt: str
    options: list[str] = []
    correct_answer: str | list[str]
    explanation: str = ""
    distractor_explanations: list[DistractorExplanation] = []
    topic: str | None = None
    difficulty: Difficulty | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "QuizQuestion":
        if self.type.is_choice:
            if not 4 <= len(self.options) <= 5:
                raise ValueError("choice questions need 4-5 options")
            if len(set(self.options)) != len(self.options):
                raise ValueError("choice options must be distinct")
            if isinstance(self.correct_answer, list):
                raise ValueError("choice questions take a single correct answer")
        elif self.prompt.count(StudyConfig.BLANK_MARKER) != 1:
            raise ValueError("fill-in-the-blank prompt needs exactly one blank")
        if not self.accepted_answers:
            raise ValueError("question has no correct answer")
        return self

    @property
    def accepted_answers(self) -> list[str]:
        if isinstance(self.correct_answer, list):
            return list(self.correct_answer)
        return [self.correct_answer]

    @property
    def display_answer(self) -> str:
        return self.accepted_answers[0]

    def is_correct(self, answer: str) -> bool:
        answer = answer.strip()
        if self.type is QuestionType.FILL_IN_THE_BLANK:
            return any(a.strip().lower() == answer.lower() for a in self.accepted_answers)
        return answer == self.correct_answer

    def prompt_parts(self) -> tuple[str, str]:
        """Text before and after the blank (fill-in-the-blank only)."""
        before, _, after = self.prompt.partition(StudyConfig.BLANK_MARKER)
        return before, after

    def explanation_for(self, option: str) -> str | None:
        for d in self.distractor_explanations:
            if d.option == option:
                return d.explanation
        return None


class QuizConfig(BaseModel):
    """
    Everything the user picked on the quiz customization screen.
    """

    course_id: str
    topics: list[str] = []
    question_types: list[QuestionType] = Field(
        default_factory=lambda: list(QuestionType)
    )
    question_count: int = Field(
        default=StudyConfig.DEFAULT_QUESTION_COUNT,
        ge=StudyConfig.MIN_QUESTION_COUNT,
        le=StudyConfig.MAX_QUESTION_COUNT,
    )
    difficulty: Difficulty = Difficulty.MEDIUM
