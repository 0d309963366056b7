"""Method-preserving replay of a confirmed request"""

from typing import Mapping
from urllib.parse import urlencode
import logging

from fastapi.responses import RedirectResponse

from .exceptions import ReplayFailureError
from .flash import FlashStore
from .models import ConfirmationRequest, FormValue

logger = logging.getLogger(__name__)

FLASH_COOKIE_NAME = "confirmation_flash"


def build_replay_url(original_page_path: str, original_handler: str) -> str:
    """``{path}?confirmed=true&handler={handler}``"""
    query = urlencode({"confirmed": "true", "handler": original_handler})
    separator = "&" if "?" in original_page_path else "?"
    return f"{original_page_path}{separator}{query}"


class ReplayRedirector:
    """Turns a confirmed request snapshot into a 307 redirect

    307 makes the browser resend the original method and body to the
    original handler. The stored form data travels separately through the
    flash store, readable by the next request only.
    """

    def __init__(
        self,
        flash_store: FlashStore,
        cookie_name: str = FLASH_COOKIE_NAME,
        flash_ttl_seconds: int = 60,
    ):
        self._flash_store = flash_store
        self._cookie_name = cookie_name
        self._flash_ttl = flash_ttl_seconds

    async def redirect(self, token: str, request: ConfirmationRequest) -> RedirectResponse:
        return await self.replay(
            token,
            request.original_page_path,
            request.original_handler,
            request.original_form_data,
        )

    async def replay(
        self,
        token: str,
        original_page_path: str,
        original_handler: str,
        original_form_data: Mapping[str, FormValue],
    ) -> RedirectResponse:
        """
        Raises:
            ReplayFailureError: the redirect or the flash entry could not be built
        """
        try:
            if not original_page_path or not original_handler:
                raise ValueError("original page path and handler are required")

            flash_id = await self._flash_store.put({
                "form_data": dict(original_form_data),
                "handler": original_handler,
            })

            redirect_url = build_replay_url(original_page_path, original_handler)
            response = RedirectResponse(redirect_url, status_code=307)
            response.set_cookie(
                self._cookie_name,
                flash_id,
                max_age=self._flash_ttl,
                path="/",
                httponly=True,
                samesite="lax",
            )
        except Exception as e:
            raise ReplayFailureError(token, str(e)) from e

        logger.info(f"Redirecting (preserve method) to execute original action: {redirect_url}")
        return response
