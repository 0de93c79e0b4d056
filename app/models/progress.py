"""
Per-user, per-book progress aggregate.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Progress(Base):
    """Running quiz statistics for one (user, book) pair."""

    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_progress_user_book"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)

    # Counters only ever grow
    total_quizzes = Column(Integer, nullable=False, default=0)
    total_score = Column(Float, nullable=False, default=0.0)  # Sum of percentage scores
    average_score = Column(Float, nullable=False, default=0.0)
    correct_mcqs = Column(Integer, nullable=False, default=0)
    total_mcqs = Column(Integer, nullable=False, default=0)

    # Latest analysis only (overwritten on each attempt)
    strengths = Column(JSON, nullable=True)
    weaknesses = Column(JSON, nullable=True)
    recommendations = Column(JSON, nullable=True)

    last_activity = Column(DateTime(timezone=True), server_default=func.now())
    last_analysis = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="progress")
    book = relationship("Book", backref="progress")
