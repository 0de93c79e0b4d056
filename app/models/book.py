from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class Book(Base):
    """Uploaded textbook with its extracted text."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    filename = Column(String, nullable=False)
    original_name = Column(String, nullable=False)
    text_content = Column(Text, default="")  # Filled by the PDF extraction step
    upload_date = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    quizzes = relationship("Quiz", back_populates="book", cascade="all, delete-orphan")
