"""
Database initialization and seeding.
"""
from sqlalchemy.orm import Session

from app.models.user import User


def init_db(db: Session) -> None:
    """
    Initialize database with default data.

    Args:
        db: Database session
    """
    # Local single-user setups attribute progress to this account
    user = db.query(User).filter(User.email == "student@example.com").first()
    if not user:
        user = User(
            email="student@example.com",
            name="Default Student",
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        print("Default user created successfully")
