"""Flash transport middleware"""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.dependencies import get_config, get_flash_store

logger = logging.getLogger(__name__)


class FlashMiddleware(BaseHTTPMiddleware):
    """Hands flashed confirmation data to the request that carries its cookie

    The entry is taken (and therefore gone) before the handler runs and the
    cookie is cleared on the response, so nothing after this request can
    read it.
    """

    async def dispatch(self, request: Request, call_next):
        config = get_config(request)
        flash_id = request.cookies.get(config.flash_cookie_name)

        if not flash_id:
            return await call_next(request)

        data = await get_flash_store(request).take(flash_id)
        if data is None:
            logger.info("Flash cookie presented but no live entry found")
        request.state.confirmed_form_data = data

        response = await call_next(request)
        response.delete_cookie(config.flash_cookie_name, path="/")
        return response
