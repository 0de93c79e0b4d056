"""Tests for per-user, per-book progress aggregation."""
import pytest

from app.core.agents.quiz.progress_aggregator import ProgressAggregator
from app.core.agents.quiz.schemas import Analysis
from app.core.exceptions import NotFoundError
from app.models import Book, Progress, User


def _analysis(tag: str) -> Analysis:
    return Analysis(
        strengths=[f"{tag} strength", "Shared strength"],
        weaknesses=[f"{tag} weakness"],
        recommendations=["Practice more"],
        key_insights=[f"{tag} insight"],
    )


def test_creates_record_lazily_and_averages(db, user, book) -> None:
    aggregator = ProgressAggregator(db)
    assert aggregator.get_progress(user.id, book.id) is None

    for score in (100.0, 0.0, 50.0):
        progress = aggregator.record_attempt(book.id, user.id, score, 1, 3, _analysis("x"))

    assert progress.total_quizzes == 3
    assert progress.total_score == 150.0
    assert progress.average_score == 50.0
    assert progress.correct_mcqs == 3
    assert progress.total_mcqs == 9
    assert db.query(Progress).count() == 1


def test_latest_analysis_overwrites_previous(db, user, book) -> None:
    aggregator = ProgressAggregator(db)
    aggregator.record_attempt(book.id, user.id, 40.0, 0, 3, _analysis("first"))
    progress = aggregator.record_attempt(book.id, user.id, 80.0, 2, 3, _analysis("second"))

    assert progress.strengths == ["second strength", "Shared strength"]
    assert progress.weaknesses == ["second weakness"]
    assert progress.recommendations == ["Practice more"]
    assert progress.last_analysis is not None
    assert progress.last_activity is not None


def test_records_are_separate_per_user_and_book(db, user, book) -> None:
    other_user = User(email="other@example.com", is_active=True)
    other_book = Book(title="Chemistry", filename="chem.pdf", original_name="Chemistry.pdf")
    db.add_all([other_user, other_book])
    db.commit()

    aggregator = ProgressAggregator(db)
    aggregator.record_attempt(book.id, user.id, 100.0, 3, 3, _analysis("a"))
    aggregator.record_attempt(other_book.id, user.id, 50.0, 1, 3, _analysis("b"))
    aggregator.record_attempt(book.id, other_user.id, 0.0, 0, 3, _analysis("c"))

    assert db.query(Progress).count() == 3
    assert aggregator.get_progress(user.id, book.id).total_score == 100.0


def test_book_progress_view(db, user, book) -> None:
    aggregator = ProgressAggregator(db)
    aggregator.record_attempt(book.id, user.id, 100.0, 2, 3, _analysis("a"))
    aggregator.record_attempt(book.id, user.id, 33.34, 0, 3, _analysis("b"))

    view = aggregator.get_book_progress(user.id, book.id)

    assert view.book_title == "Cell Biology"
    assert view.total_quizzes == 2
    assert view.average_score == 66.67
    assert view.mcq_stats.total == 6
    assert view.mcq_stats.correct == 2
    assert view.mcq_stats.percentage == 33.33


def test_book_progress_missing(db, user, book) -> None:
    with pytest.raises(NotFoundError):
        ProgressAggregator(db).get_book_progress(user.id, book.id)


def test_summarize_user_rolls_up_across_books(db, user, book) -> None:
    other_book = Book(title="Chemistry", filename="chem.pdf", original_name="Chemistry.pdf")
    db.add(other_book)
    db.commit()

    aggregator = ProgressAggregator(db)
    aggregator.record_attempt(book.id, user.id, 100.0, 3, 3, _analysis("bio"))
    aggregator.record_attempt(book.id, user.id, 50.0, 1, 3, _analysis("bio"))
    aggregator.record_attempt(other_book.id, user.id, 0.0, 0, 3, _analysis("chem"))

    overview = aggregator.summarize_user(user.id)

    assert overview.quiz_performance.total_quizzes == 3
    assert overview.quiz_performance.total_mcqs_attempted == 9
    assert overview.quiz_performance.correct_mcqs == 4
    assert overview.quiz_performance.correct_mcqs_percentage == 44.44
    assert overview.quiz_performance.overall_average_score == 50.0
    assert overview.learning_insights.strengths == ["bio strength", "Shared strength", "chem strength"]
    assert overview.learning_insights.recommendations == ["Practice more"]
    assert {p.book_title for p in overview.detailed_progress} == {"Cell Biology", "Chemistry"}


def test_summarize_user_without_records(db, user) -> None:
    overview = ProgressAggregator(db).summarize_user(user.id)

    assert overview.quiz_performance.total_quizzes == 0
    assert overview.quiz_performance.overall_average_score == 0.0
    assert overview.detailed_progress == []
