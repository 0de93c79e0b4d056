"""
Quiz model - an AI-generated question set for one book.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class Quiz(Base):
    """Quiz model. Questions are fixed at creation; score is set once when graded."""

    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)

    # List of {"type", "question", "options", "correct_answer", "explanation"}
    questions = Column(JSON, nullable=False)

    score = Column(Float, nullable=True)  # 0-100, set when graded
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    book = relationship("Book", back_populates="quizzes")
