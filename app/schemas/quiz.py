"""Pydantic models for quiz definitions.

A question is a tagged union keyed by ``kind``: each variant only carries
the answer-key fields that make sense for it, so an essay can never hold a
machine-checkable answer and a true/false question can only be keyed
``"True"`` or ``"False"``.
"""

import uuid
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator, model_validator

from app.core.base_config import BaseConfig, UtcDatetime


class QuestionKind(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    FILL_BLANK = "fill-blank"
    ESSAY = "essay"


class ShowResults(str, Enum):
    IMMEDIATELY = "immediately"
    AFTER_SUBMIT = "after_submit"
    MANUAL = "manual"


class QuestionOption(BaseConfig):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    text: str
    latex: Optional[str] = None
    is_correct: bool = False


class QuestionBase(BaseConfig):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    question: str = Field(..., min_length=1)
    question_latex: Optional[str] = None
    options: List[QuestionOption] = Field(default_factory=list)
    explanation: Optional[str] = None
    explanation_latex: Optional[str] = None
    points: int = Field(default=1, ge=0)
    time_limit: Optional[int] = Field(None, ge=1, description="Seconds allowed for this question")

    def answer_key(self) -> Optional[str]:
        """The machine-checkable answer, or None when the kind has none."""
        return None


class MultipleChoiceQuestion(QuestionBase):
    kind: Literal["multiple-choice"] = "multiple-choice"
    options: List[QuestionOption] = Field(..., min_length=2)
    correct_answer: str = Field(..., description="Id of the correct option")

    @model_validator(mode="after")
    def sync_option_flags(self) -> "MultipleChoiceQuestion":
        ids = [option.id for option in self.options]
        if len(set(ids)) != len(ids):
            raise ValueError("Option ids must be unique within a question")
        if self.correct_answer not in ids:
            raise ValueError("correctAnswer must be the id of one of the options")
        for option in self.options:
            option.is_correct = option.id == self.correct_answer
        return self

    def answer_key(self) -> Optional[str]:
        return self.correct_answer


class TrueFalseQuestion(QuestionBase):
    kind: Literal["true-false"] = "true-false"
    options: List[QuestionOption] = Field(
        default_factory=lambda: [
            QuestionOption(text="True"),
            QuestionOption(text="False"),
        ]
    )
    correct_answer: Literal["True", "False"]

    @model_validator(mode="after")
    def sync_option_flags(self) -> "TrueFalseQuestion":
        for option in self.options:
            option.is_correct = option.text == self.correct_answer
        return self

    def answer_key(self) -> Optional[str]:
        return self.correct_answer


class FillBlankQuestion(QuestionBase):
    kind: Literal["fill-blank"] = "fill-blank"
    correct_answer: str

    @field_validator("correct_answer")
    @classmethod
    def validate_correct_answer(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Fill-in-the-blank questions need a non-empty correctAnswer")
        return v

    @field_validator("options")
    @classmethod
    def validate_no_options(cls, v: List[QuestionOption]) -> List[QuestionOption]:
        if v:
            raise ValueError("Fill-in-the-blank questions do not take options")
        return v

    def answer_key(self) -> Optional[str]:
        return self.correct_answer


class EssayQuestion(QuestionBase):
    """Free-text question. Never auto-graded."""

    kind: Literal["essay"] = "essay"

    @field_validator("options")
    @classmethod
    def validate_no_options(cls, v: List[QuestionOption]) -> List[QuestionOption]:
        if v:
            raise ValueError("Essay questions do not take options")
        return v


Question = Annotated[
    Union[MultipleChoiceQuestion, TrueFalseQuestion, FillBlankQuestion, EssayQuestion],
    Field(discriminator="kind"),
]


def _check_unique_question_ids(questions: List[QuestionBase]) -> None:
    ids = [question.id for question in questions]
    if len(set(ids)) != len(ids):
        raise ValueError("Question ids must be unique within a quiz")


class QuizSettings(BaseConfig):
    """Quiz-level settings, including the result visibility policy."""

    time_limit: int = Field(default=30, ge=1, description="Total time limit in minutes")
    show_results: ShowResults = ShowResults.AFTER_SUBMIT
    allow_retake: bool = True
    shuffle_questions: bool = False
    shuffle_options: bool = False
    show_correct_answers: bool = True
    show_explanations: bool = True
    passing_score: int = Field(default=60, ge=0, le=100, description="Percentage needed to pass")


class QuizSettingsUpdate(BaseConfig):
    time_limit: Optional[int] = Field(None, ge=1)
    show_results: Optional[ShowResults] = None
    allow_retake: Optional[bool] = None
    shuffle_questions: Optional[bool] = None
    shuffle_options: Optional[bool] = None
    show_correct_answers: Optional[bool] = None
    show_explanations: Optional[bool] = None
    passing_score: Optional[int] = Field(None, ge=0, le=100)


class QuizCreate(BaseConfig):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    is_public: bool = True
    secret_code: Optional[str] = None
    settings: QuizSettings = Field(default_factory=QuizSettings)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("secret_code")
    @classmethod
    def blank_code_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def unique_question_ids(self) -> "QuizCreate":
        _check_unique_question_ids(self.questions)
        return self


class QuizUpdate(BaseConfig):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    questions: Optional[List[Question]] = None
    is_public: Optional[bool] = None
    secret_code: Optional[str] = None
    settings: Optional[QuizSettingsUpdate] = None
    is_active: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Title cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("is_public", "is_active")
    @classmethod
    def flag_not_null(cls, v: Optional[bool], info: ValidationInfo) -> bool:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @model_validator(mode="after")
    def unique_question_ids(self) -> "QuizUpdate":
        if self.questions is not None:
            _check_unique_question_ids(self.questions)
        return self


class QuizDefinition(BaseConfig):
    """Authoritative quiz snapshot, answer keys included.

    Only ever handed to the grading engine or to the quiz's owner.
    """

    id: UUID
    title: str
    description: Optional[str] = None
    created_by: UUID
    is_public: bool = True
    secret_code: Optional[str] = None
    is_active: bool = True
    questions: List[Question] = Field(default_factory=list)
    settings: QuizSettings = Field(default_factory=QuizSettings)
    total_points: int = 0
    response_count: int = 0
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

    @model_validator(mode="after")
    def unique_question_ids(self) -> "QuizDefinition":
        _check_unique_question_ids(self.questions)
        return self

    def question_by_id(self) -> dict:
        return {question.id: question for question in self.questions}


# Redacted shapes served to anyone but the owner


class PublicOption(BaseConfig):
    id: str
    text: str
    latex: Optional[str] = None


class PublicQuestion(BaseConfig):
    id: str
    kind: QuestionKind
    question: str
    question_latex: Optional[str] = None
    options: List[PublicOption] = Field(default_factory=list)
    points: int
    time_limit: Optional[int] = None


class PublicQuiz(BaseConfig):
    id: UUID
    title: str
    description: Optional[str] = None
    created_by: UUID
    is_public: bool
    questions: List[PublicQuestion]
    settings: QuizSettings
    total_points: int
    created_at: Optional[UtcDatetime] = None


class QuizSummary(BaseConfig):
    id: UUID
    title: str
    description: Optional[str] = None
    created_by: UUID
    author_name: Optional[str] = None
    response_count: int
    total_points: int
    time_limit: int
    created_at: UtcDatetime


class PublicQuizList(BaseConfig):
    quizzes: List[QuizSummary]
    total: int
    page: int
    pages: int


class QuizList(BaseConfig):
    quizzes: List[QuizDefinition]
    total: int
    page: int
    pages: int
