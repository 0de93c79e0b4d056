"""
Pydantic schemas for progress views.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MCQStats(BaseModel):
    """Multiple choice accuracy for one book."""

    total: int
    correct: int
    percentage: float


class BookProgress(BaseModel):
    """Progress of the current user on one book."""

    book_id: int
    book_title: str
    total_quizzes: int
    average_score: float
    mcq_stats: MCQStats
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    last_activity: Optional[datetime] = None
    last_analysis: Optional[datetime] = None


class QuizPerformance(BaseModel):
    """Quiz totals across all books."""

    total_quizzes: int
    total_mcqs_attempted: int
    correct_mcqs: int
    correct_mcqs_percentage: float
    overall_average_score: float


class LearningInsights(BaseModel):
    """Deduplicated qualitative feedback across all books."""

    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]


class ProgressOverview(BaseModel):
    """Cross-book progress rollup."""

    quiz_performance: QuizPerformance
    learning_insights: LearningInsights
    detailed_progress: List[BookProgress]
