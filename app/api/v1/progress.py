"""
API endpoints for learning progress and statistics.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_active_user
from app.core.agents.quiz.progress_aggregator import ProgressAggregator
from app.db.base import get_db
from app.models.user import User
from app.schemas.common import ErrorResponse
from app.schemas.progress import BookProgress, ProgressOverview

router = APIRouter()


@router.get("/", response_model=ProgressOverview)
def get_overall_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get quiz performance and learning insights across all books.
    """
    return ProgressAggregator(db).summarize_user(current_user.id)  # type: ignore


@router.get("/book/{book_id}", response_model=BookProgress, responses={404: {"model": ErrorResponse}})
def get_book_progress(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Get progress for a specific book.
    """
    return ProgressAggregator(db).get_book_progress(current_user.id, book_id)  # type: ignore
