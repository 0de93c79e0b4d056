"""
Quiz service - generation and evaluation of book quizzes.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    InvalidInputError,
    MalformedOutputError,
    NotFoundError,
    ServiceError,
    ServiceUnavailableError,
)
from app.core.agents.quiz.deduplicator import InFlightRequestDeduplicator
from app.core.agents.quiz.parser import QuizParser
from app.core.agents.quiz.performance_analyzer import PerformanceAnalyzer
from app.core.agents.quiz.progress_aggregator import ProgressAggregator
from app.core.agents.quiz.prompts import build_quiz_prompt
from app.core.agents.quiz.provider import GenerationProvider
from app.core.agents.quiz.schemas import Question
from app.core.agents.quiz.scorer import QuizScorer
from app.models.book import Book
from app.models.quiz import Quiz
from app.schemas.quiz import QuizEvaluationResponse, QuizRead

logger = logging.getLogger(__name__)


class QuizService:
    """
    Orchestrates the quiz pipeline for one request.

    The deduplicator is shared across requests; everything else is bound to
    the request's database session.
    """

    def __init__(
        self,
        db: Session,
        provider: GenerationProvider,
        deduplicator: InFlightRequestDeduplicator,
        text_limit: Optional[int] = None
    ):
        self.db = db
        self.provider = provider
        self.deduplicator = deduplicator
        self.text_limit = settings.QUIZ_TEXT_LIMIT if text_limit is None else text_limit
        self.parser = QuizParser()
        self.scorer = QuizScorer(db)
        self.analyzer = PerformanceAnalyzer(provider)
        self.progress = ProgressAggregator(db)

    # ============= Generation =============

    async def generate_quiz_for_book(self, book_id: int) -> QuizRead:
        """
        Generate a quiz from a stored book's extracted text.

        Raises:
            NotFoundError: If the book does not exist
            InvalidInputError: If the book has no extracted text
            ServiceUnavailableError: If generation fails
        """
        book = self.db.get(Book, book_id)
        if not book:
            raise NotFoundError("Book not found")
        if not (book.text_content or "").strip():
            raise InvalidInputError("Book has no extracted text to build a quiz from")

        return await self.generate_quiz(book_id, book.text_content)

    async def generate_quiz(self, book_id: int, book_text: str) -> QuizRead:
        """
        Generate and store a quiz for a book.

        Concurrent calls for the same book share one generation.

        Raises:
            ServiceUnavailableError: If the provider fails or its output cannot be parsed
        """
        return await self.deduplicator.run(book_id, lambda: self._generate(book_id, book_text))

    async def _generate(self, book_id: int, book_text: str) -> QuizRead:
        logger.info(f"Starting quiz generation for book {book_id}")
        prompt = build_quiz_prompt(book_text, self.text_limit)

        try:
            response_text = await self.provider.generate_content(prompt)
            logger.info(f"Raw AI response received, length: {len(response_text)}")
            questions = self.parser.parse_response(response_text)
        except (ServiceError, MalformedOutputError) as e:
            logger.error(f"Quiz generation failed for book {book_id}: {e}")
            raise ServiceUnavailableError.from_error(e) from e

        quiz = Quiz(
            book_id=book_id,
            questions=[q.model_dump() for q in questions],
        )
        self.db.add(quiz)
        self.db.commit()
        self.db.refresh(quiz)

        logger.info(f"Quiz {quiz.id} saved with {len(questions)} questions for book {book_id}")
        return QuizRead.model_validate(quiz)

    # ============= Evaluation =============

    async def evaluate_quiz(
        self,
        quiz_id: int,
        user_answers: Sequence[Optional[str]],
        user_id: int
    ) -> QuizEvaluationResponse:
        """
        Grade a quiz attempt, analyze it and fold it into the user's progress.

        A failed progress update does not fail the evaluation; it is reported
        through ``progress_updated``.

        Raises:
            NotFoundError: If the quiz does not exist
            QuizAlreadyCompletedError: If the quiz was already submitted
        """
        quiz = self.db.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        outcome = self.scorer.score_quiz(quiz, user_answers)
        questions: List[Question] = [Question.model_validate(q) for q in quiz.questions]

        analysis = await self.analyzer.analyze(questions, outcome.results, user_answers, outcome.score)

        progress_updated = True
        try:
            self.progress.record_attempt(
                book_id=quiz.book_id,
                user_id=user_id,
                score=outcome.score,
                correct_mcqs=outcome.correct_mcqs,
                total_mcqs=outcome.total_mcqs,
                analysis=analysis
            )
        except SQLAlchemyError:
            logger.exception(f"Progress update failed for quiz {quiz_id}, user {user_id}")
            self.db.rollback()
            progress_updated = False

        return QuizEvaluationResponse(
            score=outcome.score,
            results=outcome.results,
            total_questions=outcome.total_questions,
            correct_answers=outcome.correct_answers,
            correct_mcqs=outcome.correct_mcqs,
            total_mcqs=outcome.total_mcqs,
            analysis=analysis,
            progress_updated=progress_updated
        )

    # ============= Reads =============

    def get_quiz(self, quiz_id: int) -> QuizRead:
        quiz = self.db.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")
        return QuizRead.model_validate(quiz)

    def list_book_quizzes(self, book_id: int) -> List[QuizRead]:
        quizzes = self.db.query(Quiz).filter(
            Quiz.book_id == book_id
        ).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()
        return [QuizRead.model_validate(q) for q in quizzes]
