"""Confirmation page routes

GET renders the confirmation screen for a token; POST reads the user's
choice and either returns them to where they came from or replays the
original request.
"""
from typing import Optional
from urllib.parse import urlsplit
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from src.api.dependencies import get_config, get_redirector, get_service, get_templates
from src.api.models import ConfirmationChoiceForm
from src.confirmation import (
    ConfirmationContext,
    ConfirmationDisplayModel,
    ConfirmationService,
    MissingTokenError,
    NoSelectionError,
    ReplayRedirector,
    TokenNotFoundError,
)
from src.utils.config import ConfirmationConfig

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_return_url(return_url: Optional[str]) -> str:
    """Reduce a stored return URL to a same-origin path and query

    Absolute and protocol-relative URLs keep only their path and query, so
    the stored value can never send the user to another host.
    """
    if not return_url or not return_url.strip():
        return "/"

    parts = urlsplit(return_url.strip())
    path = parts.path or "/"
    if not path.startswith("/") or path.startswith("//") or path.startswith("/\\"):
        return "/"
    return f"{path}?{parts.query}" if parts.query else path


class ConfirmationPageController:
    """AwaitingToken -> AwaitingChoice -> Replayed | Declined | Error"""

    def __init__(
        self,
        service: ConfirmationService,
        redirector: ReplayRedirector,
        templates: Jinja2Templates,
        config: ConfirmationConfig,
    ):
        self._service = service
        self._redirector = redirector
        self._templates = templates
        self._config = config

    def error_redirect(self) -> RedirectResponse:
        return RedirectResponse(self._config.error_page_path, status_code=303)

    def render(
        self,
        request: Request,
        model: ConfirmationDisplayModel,
        error_message: Optional[str] = None,
    ) -> Response:
        return self._templates.TemplateResponse(
            request,
            "confirmation.html",
            {
                "model": model,
                "error_message": error_message,
                "form_action": self._config.confirmation_page_path,
            },
        )

    async def on_get(self, request: Request, token: Optional[str]) -> Response:
        try:
            model = await self._load_display_model(token)
        except (MissingTokenError, TokenNotFoundError) as e:
            logger.warning(f"Cannot display confirmation page: {e}")
            return self.error_redirect()

        logger.info(f"Displaying confirmation page for token {token}")
        return self.render(request, model)

    async def on_post(self, request: Request) -> Response:
        form = ConfirmationChoiceForm.from_form(await request.form())
        token = form.confirmation_token
        context = None

        try:
            context = await self._load_context(token)
            confirmed = self._read_choice(form)
            consumed = await self._service.consume_confirmation(token)
            if consumed is None:
                # resolved by a concurrent request between lookup and consume
                raise TokenNotFoundError(token)
        except (MissingTokenError, TokenNotFoundError) as e:
            logger.warning(f"Cannot apply confirmation choice: {e}")
            return self.error_redirect()
        except NoSelectionError:
            # no decision yet, the token stays valid
            model = self._service.build_display_model(context)
            logger.warning(f"Confirmation posted without a selection for token {token}")
            return self.render(request, model, error_message=model.required_message)

        if not confirmed:
            destination = normalize_return_url(consumed.request.return_url)
            logger.info(f"User cancelled confirmation; local redirect to {destination}")
            return RedirectResponse(destination, status_code=303)

        try:
            return await self._redirector.redirect(token, consumed.request)
        except Exception as e:
            logger.error(
                f"Failed to execute original action for confirmation token {token}: {e}",
                exc_info=True,
            )
            return self.error_redirect()

    async def _load_context(self, token: Optional[str]) -> ConfirmationContext:
        if not token:
            raise MissingTokenError("Confirmation token is required")
        context = await self._service.get_confirmation(token)
        if context is None:
            raise TokenNotFoundError(token)
        return context

    async def _load_display_model(self, token: Optional[str]) -> ConfirmationDisplayModel:
        if not token:
            raise MissingTokenError("Confirmation token is required")
        model = await self._service.prepare_display_model(token)
        if model is None:
            raise TokenNotFoundError(token)
        return model

    @staticmethod
    def _read_choice(form: ConfirmationChoiceForm) -> bool:
        choice = form.choice()
        if choice is None:
            raise NoSelectionError("Select yes or no")
        return choice


def get_controller(
    service: ConfirmationService = Depends(get_service),
    redirector: ReplayRedirector = Depends(get_redirector),
    templates: Jinja2Templates = Depends(get_templates),
    config: ConfirmationConfig = Depends(get_config),
) -> ConfirmationPageController:
    return ConfirmationPageController(service, redirector, templates, config)


@router.get("")
async def show_confirmation(
    request: Request,
    token: Optional[str] = None,
    controller: ConfirmationPageController = Depends(get_controller),
):
    """Render the confirmation screen for ``token``"""
    return await controller.on_get(request, token)


@router.post("")
async def submit_confirmation(
    request: Request,
    controller: ConfirmationPageController = Depends(get_controller),
):
    """Apply the user's yes/no choice"""
    return await controller.on_post(request)
