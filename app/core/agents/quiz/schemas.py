"""
Pydantic schemas for the quiz pipeline.
"""
import re
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

QuestionType = Literal["mcq", "saq", "laq"]

MCQ_LABELS = ("A", "B", "C", "D")

# "B", "b", "(B)", "B)", "B. Paris", "B: Paris"; not "B Paris"
_LABEL_RE = re.compile(r"^\(?([A-Da-d])\)?(?:[).:]|$)")


def normalize_mcq_answer(answer: str, options: List[str]) -> str:
    """Map an mcq answer to its letter label, or raise ValueError."""
    candidate = answer.strip()
    for label, option in zip(MCQ_LABELS, options):
        if candidate.lower() == option.strip().lower():
            return label
    match = _LABEL_RE.match(candidate)
    if match:
        return match.group(1).upper()
    raise ValueError(f"mcq correctAnswer must be one of {', '.join(MCQ_LABELS)}, got {answer!r}")


class Question(BaseModel):
    """A single quiz question as generated and stored."""
    model_config = ConfigDict(populate_by_name=True)

    type: QuestionType
    question: str = Field(min_length=1)
    options: Optional[List[str]] = None
    correct_answer: str = Field(validation_alias=AliasChoices("correctAnswer", "correct_answer"))
    explanation: str

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def check_options(self):
        if self.type == "mcq":
            if not self.options or len(self.options) != len(MCQ_LABELS):
                raise ValueError("mcq questions need exactly 4 options")
            self.correct_answer = normalize_mcq_answer(self.correct_answer, self.options)
        else:
            self.options = None
        return self


class GeneratedQuiz(BaseModel):
    """Top-level payload expected from the provider."""
    questions: List[Question] = Field(min_length=1)


class GradedResult(BaseModel):
    """Grading outcome for one question."""
    question: str
    user_answer: str
    correct_answer: str
    explanation: str
    is_correct: bool
    type: QuestionType


class ScoringOutcome(BaseModel):
    """Everything the scorer derives from one attempt."""
    results: List[GradedResult]
    score: float
    correct_answers: int
    total_questions: int
    correct_mcqs: int
    total_mcqs: int


class Analysis(BaseModel):
    """Qualitative feedback on one attempt."""
    model_config = ConfigDict(populate_by_name=True)

    strengths: List[str] = Field(min_length=1)
    weaknesses: List[str] = Field(min_length=1)
    recommendations: List[str] = Field(min_length=1)
    key_insights: List[str] = Field(
        min_length=1, validation_alias=AliasChoices("keyInsights", "key_insights")
    )
