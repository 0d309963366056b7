"""Page routes"""
from fastapi import APIRouter

from src.utils.config import ConfirmationConfig
from . import confirmation, errors, health


def build_page_router(config: ConfirmationConfig) -> APIRouter:
    """Mount the confirmation and error pages at their configured paths"""
    page_router = APIRouter()
    page_router.include_router(
        confirmation.router,
        prefix=config.confirmation_page_path,
        tags=["confirmation"],
    )
    page_router.include_router(errors.router, prefix=config.error_page_path, tags=["errors"])
    page_router.include_router(health.router, tags=["health"])
    return page_router
