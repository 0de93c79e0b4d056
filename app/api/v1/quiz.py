"""
API endpoints for quiz interactions - generating quizzes, submitting answers, etc.
"""
from typing import Any, List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_active_user, get_quiz_service
from app.models.user import User
from app.schemas.common import ErrorResponse, ServiceErrorResponse
from app.schemas.quiz import QuizEvaluationResponse, QuizRead, QuizSubmit
from app.services.quiz_service import QuizService

router = APIRouter()


@router.post(
    "/generate/{book_id}",
    response_model=QuizRead,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        429: {"model": ServiceErrorResponse},
        502: {"model": ServiceErrorResponse},
        503: {"model": ServiceErrorResponse},
        504: {"model": ServiceErrorResponse},
    },
)
async def generate_quiz(
    book_id: int,
    quiz_service: QuizService = Depends(get_quiz_service),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Generate a quiz (3 MCQs, 2 short answer, 1 long answer) from a book.

    Concurrent requests for the same book share one generation. Failures
    return a message specific to the cause so the client can decide whether
    to retry.
    """
    return await quiz_service.generate_quiz_for_book(book_id)


@router.post(
    "/submit/{quiz_id}",
    response_model=QuizEvaluationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def submit_quiz(
    quiz_id: int,
    submission: QuizSubmit,
    quiz_service: QuizService = Depends(get_quiz_service),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Submit answers for a quiz.
    Returns graded results, the score, an analysis of the attempt and
    whether the user's progress was updated.
    """
    return await quiz_service.evaluate_quiz(quiz_id, submission.answers, current_user.id)  # type: ignore


@router.get("/book/{book_id}", response_model=List[QuizRead])
def get_book_quizzes(
    book_id: int,
    quiz_service: QuizService = Depends(get_quiz_service),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get all quizzes for a book, newest first.
    """
    return quiz_service.list_book_quizzes(book_id)


@router.get("/{quiz_id}", response_model=QuizRead, responses={404: {"model": ErrorResponse}})
def get_quiz(
    quiz_id: int,
    quiz_service: QuizService = Depends(get_quiz_service),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get a quiz by ID.
    """
    return quiz_service.get_quiz(quiz_id)
