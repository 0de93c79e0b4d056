"""
Dependency injection for FastAPI endpoints.
"""
from typing import Optional, cast

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_token
from app.core.agents.quiz.deduplicator import InFlightRequestDeduplicator
from app.core.agents.quiz.provider import GenerationProvider, LangChainGenerationProvider
from app.db.base import get_db
from app.models.user import User
from app.services.quiz_service import QuizService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login")


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        db: Database session
        token: JWT token

    Returns:
        Current user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    user_id: Optional[str] = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise credentials_exception

    user = db.get(User, int(user_id))
    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current active user.

    Raises:
        HTTPException: If user is inactive
    """
    if not cast(bool, current_user.is_active):
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def get_generation_provider(request: Request) -> GenerationProvider:
    """Application-wide generation provider, created on first use."""
    provider = getattr(request.app.state, "generation_provider", None)
    if provider is None:
        provider = LangChainGenerationProvider()
        request.app.state.generation_provider = provider
    return provider


def get_quiz_deduplicator(request: Request) -> InFlightRequestDeduplicator:
    """Application-wide in-flight generation registry."""
    return request.app.state.quiz_deduplicator


def get_quiz_service(
    db: Session = Depends(get_db),
    provider: GenerationProvider = Depends(get_generation_provider),
    deduplicator: InFlightRequestDeduplicator = Depends(get_quiz_deduplicator),
) -> QuizService:
    """Quiz service bound to the request's database session."""
    return QuizService(db, provider, deduplicator)
