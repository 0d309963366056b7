"""Health check route"""
from fastapi import APIRouter, Depends

from src.api.dependencies import get_config
from src.utils.config import ConfirmationConfig

router = APIRouter()


@router.get("/health")
async def health(config: ConfirmationConfig = Depends(get_config)):
    """Health check"""
    return {
        "status": "ok",
        "service": "confirmation",
        "store": config.store_backend,
    }
