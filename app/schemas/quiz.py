"""
Pydantic schemas for quiz endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.agents.quiz.schemas import Analysis, GradedResult, Question


class QuizRead(BaseModel):
    """Schema for quiz response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    questions: List[Question]
    score: Optional[float] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class QuizSubmit(BaseModel):
    """
    Schema for submitting quiz answers.

    Answers are matched to questions by position. MCQ answers are the option
    letter (``"A"``-``"D"``); ``null`` or missing entries count as unanswered.
    """
    answers: List[Optional[str]] = Field(
        default_factory=list,
        description="One answer per question, in question order",
        examples=[["A", "C", "B", "Photosynthesis", "", "Plants convert light into chemical energy..."]]
    )


class QuizEvaluationResponse(BaseModel):
    """Schema for a graded attempt."""
    score: float
    results: List[GradedResult]
    total_questions: int
    correct_answers: int
    correct_mcqs: int
    total_mcqs: int
    analysis: Analysis
    progress_updated: bool = Field(
        True, description="False when the quiz was graded but progress could not be saved"
    )
