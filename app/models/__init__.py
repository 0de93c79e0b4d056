"""Models module - Import all models here so metadata is complete."""
from app.db.base import Base
from app.models.user import User
from app.models.book import Book
from app.models.quiz import Quiz
from app.models.progress import Progress

__all__ = ["Base", "User", "Book", "Quiz", "Progress"]
