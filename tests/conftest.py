"""Fixtures for the quiz pipeline tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_MIN_REQUEST_INTERVAL", "0")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.agents.quiz.deduplicator import InFlightRequestDeduplicator
from app.core.security import create_access_token
from app.models import Base, Book, Quiz, User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    user = User(email="reader@example.com", name="Reader", is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def book(db):
    book = Book(
        title="Cell Biology",
        filename="cell-biology.pdf",
        original_name="Cell Biology.pdf",
        text_content="Cells are the basic unit of life. " * 40,
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


@pytest.fixture
def make_quiz(db, book):
    def _make_quiz(questions):
        quiz = Quiz(book_id=book.id, questions=questions)
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz
    return _make_quiz


@pytest.fixture
def deduplicator():
    return InFlightRequestDeduplicator()


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
