"""
Per-user, per-book progress aggregation.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.agents.quiz.schemas import Analysis
from app.models.book import Book
from app.models.progress import Progress
from app.schemas.progress import BookProgress, LearningInsights, MCQStats, ProgressOverview, QuizPerformance

logger = logging.getLogger(__name__)


def _percentage(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


def _union(groups: List[Optional[List[str]]]) -> List[str]:
    """Order-preserving set union."""
    seen = {}
    for group in groups:
        for item in group or []:
            seen.setdefault(item, None)
    return list(seen)


class ProgressAggregator:
    """
    Merges graded attempts into the unique Progress record of a (user, book)
    pair and builds read-side views over those records.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_attempt(
        self,
        book_id: int,
        user_id: int,
        score: float,
        correct_mcqs: int,
        total_mcqs: int,
        analysis: Analysis
    ) -> Progress:
        """
        Add one graded attempt to the running totals.

        Counters are incremented in SQL so concurrent graders cannot lose
        updates; the average is recomputed from the retained total.

        Returns:
            The refreshed Progress record
        """
        progress = self._get_or_create(user_id, book_id)
        now = datetime.now(timezone.utc)

        self.db.execute(
            update(Progress)
            .where(Progress.id == progress.id)
            .values(
                total_quizzes=Progress.total_quizzes + 1,
                total_score=Progress.total_score + score,
                average_score=(Progress.total_score + score) / (Progress.total_quizzes + 1),
                correct_mcqs=Progress.correct_mcqs + correct_mcqs,
                total_mcqs=Progress.total_mcqs + total_mcqs,
                strengths=analysis.strengths,
                weaknesses=analysis.weaknesses,
                recommendations=analysis.recommendations,
                last_activity=now,
                last_analysis=now,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(progress)

        logger.info(
            f"Progress updated for user {user_id}, book {book_id}: "
            f"{progress.total_quizzes} quizzes, average {progress.average_score:.2f}"
        )
        return progress

    def get_progress(self, user_id: int, book_id: int) -> Optional[Progress]:
        return self.db.query(Progress).filter(
            Progress.user_id == user_id,
            Progress.book_id == book_id
        ).first()

    def get_book_progress(self, user_id: int, book_id: int) -> BookProgress:
        """
        Per-book progress view.

        Raises:
            NotFoundError: If the user has no graded attempt for the book
        """
        progress = self.get_progress(user_id, book_id)
        if progress is None:
            raise NotFoundError("Progress not found for this book")
        return self._to_book_progress(progress)

    def summarize_user(self, user_id: int) -> ProgressOverview:
        """Roll up every Progress record of a user across books."""
        records = self.db.query(Progress).filter(Progress.user_id == user_id).all()

        total_mcqs = sum(p.total_mcqs or 0 for p in records)
        correct_mcqs = sum(p.correct_mcqs or 0 for p in records)
        total_quizzes = sum(p.total_quizzes or 0 for p in records)
        total_score = sum(p.total_score or 0 for p in records)

        return ProgressOverview(
            quiz_performance=QuizPerformance(
                total_quizzes=total_quizzes,
                total_mcqs_attempted=total_mcqs,
                correct_mcqs=correct_mcqs,
                correct_mcqs_percentage=_percentage(correct_mcqs, total_mcqs),
                overall_average_score=round(total_score / total_quizzes, 2) if total_quizzes > 0 else 0.0,
            ),
            learning_insights=LearningInsights(
                strengths=_union([p.strengths for p in records]),
                weaknesses=_union([p.weaknesses for p in records]),
                recommendations=_union([p.recommendations for p in records]),
            ),
            detailed_progress=[self._to_book_progress(p) for p in records],
        )

    def _get_or_create(self, user_id: int, book_id: int) -> Progress:
        progress = self.get_progress(user_id, book_id)
        if progress is not None:
            return progress

        progress = Progress(
            user_id=user_id,
            book_id=book_id,
            total_quizzes=0,
            total_score=0.0,
            average_score=0.0,
            correct_mcqs=0,
            total_mcqs=0,
        )
        self.db.add(progress)
        try:
            self.db.commit()
        except IntegrityError:
            # Another grader created the record first
            self.db.rollback()
            progress = self.get_progress(user_id, book_id)
            if progress is None:
                raise
            return progress

        self.db.refresh(progress)
        logger.info(f"Created progress record for user {user_id}, book {book_id}")
        return progress

    def _to_book_progress(self, progress: Progress) -> BookProgress:
        book = self.db.get(Book, progress.book_id)
        return BookProgress(
            book_id=progress.book_id,
            book_title=book.title if book else "Unknown Book",
            total_quizzes=progress.total_quizzes or 0,
            average_score=round(progress.average_score or 0, 2),
            mcq_stats=MCQStats(
                total=progress.total_mcqs or 0,
                correct=progress.correct_mcqs or 0,
                percentage=_percentage(progress.correct_mcqs or 0, progress.total_mcqs or 0),
            ),
            strengths=progress.strengths or [],
            weaknesses=progress.weaknesses or [],
            recommendations=progress.recommendations or [],
            last_activity=progress.last_activity,
            last_analysis=progress.last_analysis,
        )
