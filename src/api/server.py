"""FastAPI application for the confirmation pages"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from src.api.dependencies import templates
from src.api.middleware import FlashMiddleware
from src.api.routes import build_page_router
from src.confirmation import (
    ConfirmationInterceptor,
    ConfirmationService,
    ConfirmationStoreError,
    FlashStore,
    ReplayRedirector,
    get_confirmation_service,
)
from src.utils.config import ConfirmationConfig

logger = logging.getLogger(__name__)


async def sweep_expired(service: ConfirmationService, interval_seconds: int) -> None:
    """Periodically drop expired confirmations"""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await service.cleanup_expired()
        except ConfirmationStoreError as e:
            logger.error(f"Confirmation sweep failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info("Application starting...")

    config: ConfirmationConfig = app.state.config
    sweep_task = None
    if config.sweep_interval_seconds > 0:
        sweep_task = asyncio.create_task(
            sweep_expired(app.state.confirmation_service, config.sweep_interval_seconds)
        )
        logger.info(f"Expiry sweep running every {config.sweep_interval_seconds}s")

    yield

    if sweep_task is not None:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass
    logger.info("Application shutting down...")


def create_app(
    config: Optional[ConfirmationConfig] = None,
    service: Optional[ConfirmationService] = None,
) -> FastAPI:
    """Build the application

    Args:
        config: defaults to ``ConfirmationConfig.from_env()``
        service: defaults to the process-wide ConfirmationService
    """
    config = config or ConfirmationConfig.from_env()
    configure_logging(config)
    service = service or get_confirmation_service(config)
    flash_store = FlashStore(ttl_seconds=config.flash_ttl_seconds)

    app = FastAPI(title="Confirmation Pages", version="1.0.0", lifespan=lifespan)

    app.state.config = config
    app.state.confirmation_service = service
    app.state.flash_store = flash_store
    app.state.replay_redirector = ReplayRedirector(
        flash_store,
        cookie_name=config.flash_cookie_name,
        flash_ttl_seconds=config.flash_ttl_seconds,
    )
    app.state.confirmation_interceptor = ConfirmationInterceptor(
        service,
        confirmation_page_path=config.confirmation_page_path,
    )

    app.add_middleware(FlashMiddleware)
    app.include_router(build_page_router(config))

    @app.exception_handler(ConfirmationStoreError)
    async def store_error_handler(request: Request, exc: ConfirmationStoreError):
        logger.error(f"Confirmation store unavailable on {request.url.path}: {exc}", exc_info=exc)
        return templates.TemplateResponse(request, "error.html", {}, status_code=500)

    return app


def configure_logging(config: ConfirmationConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
