"""Schemas module - Import all schemas."""
from app.schemas.common import ErrorResponse, ServiceErrorResponse
from app.schemas.quiz import QuizRead, QuizSubmit, QuizEvaluationResponse
from app.schemas.progress import (
    BookProgress,
    MCQStats,
    QuizPerformance,
    LearningInsights,
    ProgressOverview,
)

__all__ = [
    "ErrorResponse",
    "ServiceErrorResponse",
    "QuizRead",
    "QuizSubmit",
    "QuizEvaluationResponse",
    "BookProgress",
    "MCQStats",
    "QuizPerformance",
    "LearningInsights",
    "ProgressOverview",
]
