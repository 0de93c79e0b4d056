"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import quiz, progress

api_router = APIRouter()

api_router.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
api_router.include_router(progress.router, prefix="/progress", tags=["Progress"])
