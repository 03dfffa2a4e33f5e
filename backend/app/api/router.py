"""
Main API router.
"""

from fastapi import APIRouter
from app.api import auth, categories, goals, notifications, recurring, transactions

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(auth.profile_router)
api_router.include_router(transactions.router)
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(goals.router)
api_router.include_router(recurring.router)
api_router.include_router(notifications.router)
