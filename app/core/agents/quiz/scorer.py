"""
Grading of quiz attempts.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.exceptions import QuizAlreadyCompletedError
from app.core.agents.quiz.schemas import GradedResult, Question, ScoringOutcome
from app.models.quiz import Quiz

logger = logging.getLogger(__name__)


def answer_at(answers: Sequence[Optional[str]], index: int) -> str:
    """Positional answer lookup; missing or null entries count as unanswered."""
    if index < len(answers) and answers[index] is not None:
        return answers[index]
    return ""


def is_answer_correct(question: Question, user_answer: str) -> bool:
    """
    MCQ answers must match the letter label exactly (case-sensitive).
    Free-text answers count as correct when they are not blank; their
    content is not graded.
    """
    if question.type == "mcq":
        return user_answer == question.correct_answer
    return len(user_answer.strip()) > 0


class QuizScorer:
    """
    Grades an attempt and records the score on the quiz.
    """

    def __init__(self, db: Session):
        self.db = db

    def grade(self, questions: List[Question], answers: Sequence[Optional[str]]) -> ScoringOutcome:
        """
        Grade answers against questions by position.

        Args:
            questions: Stored quiz questions
            answers: User answers, one per question

        Returns:
            ScoringOutcome with per-question results and totals
        """
        results = []
        correct = 0
        correct_mcqs = 0
        total_mcqs = 0

        for index, question in enumerate(questions):
            user_answer = answer_at(answers, index)
            is_correct = is_answer_correct(question, user_answer)

            if question.type == "mcq":
                total_mcqs += 1
                if is_correct:
                    correct_mcqs += 1

            if is_correct:
                correct += 1

            results.append(GradedResult(
                question=question.question,
                user_answer=user_answer,
                correct_answer=question.correct_answer,
                explanation=question.explanation,
                is_correct=is_correct,
                type=question.type
            ))

        total = len(questions)
        score = (correct / total) * 100 if total > 0 else 0.0

        return ScoringOutcome(
            results=results,
            score=score,
            correct_answers=correct,
            total_questions=total,
            correct_mcqs=correct_mcqs,
            total_mcqs=total_mcqs
        )

    def score_quiz(self, quiz: Quiz, answers: Sequence[Optional[str]]) -> ScoringOutcome:
        """
        Grade an attempt and persist score and completion time on the quiz.

        Raises:
            QuizAlreadyCompletedError: If the quiz was already graded
        """
        if quiz.completed_at is not None:
            raise QuizAlreadyCompletedError(f"Quiz {quiz.id} has already been submitted")

        questions = [Question.model_validate(q) for q in quiz.questions]
        outcome = self.grade(questions, answers)

        # Conditional update so that only one submission can win
        result = self.db.execute(
            update(Quiz)
            .where(Quiz.id == quiz.id, Quiz.completed_at.is_(None))
            .values(score=outcome.score, completed_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise QuizAlreadyCompletedError(f"Quiz {quiz.id} has already been submitted")

        self.db.commit()
        self.db.refresh(quiz)

        logger.info(
            f"Graded quiz {quiz.id}: {outcome.correct_answers}/{outcome.total_questions} "
            f"correct, score {outcome.score:.2f}"
        )
        return outcome
