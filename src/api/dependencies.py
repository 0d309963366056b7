"""FastAPI dependency providers

Everything is built once by ``create_app`` and kept on ``app.state``.
"""
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from src.confirmation import (
    ConfirmationInterceptor,
    ConfirmationService,
    FlashStore,
    ReplayRedirector,
)
from src.utils.config import ConfirmationConfig

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_config(request: Request) -> ConfirmationConfig:
    return request.app.state.config


def get_service(request: Request) -> ConfirmationService:
    return request.app.state.confirmation_service


def get_redirector(request: Request) -> ReplayRedirector:
    return request.app.state.replay_redirector


def get_flash_store(request: Request) -> FlashStore:
    return request.app.state.flash_store


def get_interceptor(request: Request) -> ConfirmationInterceptor:
    return request.app.state.confirmation_interceptor


def get_templates() -> Jinja2Templates:
    return templates
