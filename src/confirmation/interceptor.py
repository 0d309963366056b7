"""Upstream side of the confirmation flow

A page handler that wants a "are you sure?" step calls
``ConfirmationInterceptor.intercept`` first. Forms opt in per handler with
hidden fields, normally rendered by the ``confirmation_button`` macro in
``src/api/templates/macros.html``:

    <button name="handler" value="Delete">Delete</button>
    <input type="hidden" name="confirmation-check-Delete" value="true" />
    <input type="hidden" name="confirmation-display-fields-Delete" value="name,email" />
    <input type="hidden" name="confirmation-title-Delete" value="Delete this contributor?" />
    <input type="hidden" name="confirmation-requiredMessage-Delete" value="Select yes to delete" />
    <input type="hidden" name="confirmation-action-Delete" value="/Contributors/Delete" />
    <input type="hidden" name="confirmation-return-Delete" value="/Contributors" />
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.datastructures import FormData

from .exceptions import InvalidConfirmationRequestError
from .models import ConfirmationRequest, FormValue
from .service import ConfirmationService

logger = logging.getLogger(__name__)

META_PREFIX = "confirmation-"


@dataclass
class ConfirmationButtonInfo:
    """The clicked button that asked for confirmation"""
    handler: str
    display_fields: List[str] = field(default_factory=list)


def is_confirmed_replay(request: Request) -> bool:
    """True when the request is the replay of an already confirmed action"""
    return request.query_params.get("confirmed") == "true"


def read_confirmed_form_data(request: Request) -> Optional[Dict[str, Any]]:
    """Form data handed over by the confirmation page, available to this request only"""
    flash = getattr(request.state, "confirmed_form_data", None)
    if not flash:
        return None
    return flash.get("form_data")


def find_confirmation_button(form: FormData) -> Optional[ConfirmationButtonInfo]:
    handler = form.get("handler")
    if not isinstance(handler, str) or not handler:
        return None

    if form.get(f"{META_PREFIX}check-{handler}") != "true":
        return None

    raw_fields = form.get(f"{META_PREFIX}display-fields-{handler}") or ""
    display_fields = [f.strip() for f in str(raw_fields).split(",") if f.strip()]
    return ConfirmationButtonInfo(handler=handler, display_fields=display_fields)


def extract_form_data(form: FormData) -> Dict[str, FormValue]:
    """Submitted fields in order, without the confirmation meta fields"""
    form_data: Dict[str, FormValue] = {}

    for key in dict.fromkeys(form.keys()):
        if key.startswith(META_PREFIX):
            continue

        values = [v for v in form.getlist(key) if isinstance(v, str)]
        if not values:
            # file uploads cannot be replayed
            logger.debug(f"Skipping non-text form field {key}")
            continue
        form_data[key] = values[0] if len(values) == 1 else values

    logger.debug(f"Extracted {len(form_data)} form fields for confirmation")
    return form_data


def _meta_value(form: FormData, name: str, handler: str) -> Optional[str]:
    value = form.get(f"{META_PREFIX}{name}-{handler}")
    if not isinstance(value, str) or not value.strip():
        return None
    # guard against CSV joining from repeated inputs
    return value.split(",")[0].strip() if name in ("action", "return") else value.strip()


class ConfirmationInterceptor:
    """Diverts a POST that needs confirmation to the confirmation page"""

    def __init__(self, service: ConfirmationService, confirmation_page_path: str = "/Confirmation"):
        self._service = service
        self._confirmation_page_path = confirmation_page_path

    async def intercept(self, request: Request) -> Optional[RedirectResponse]:
        """Return a redirect to the confirmation page, or None to let the handler run"""
        if request.method != "POST":
            return None

        if is_confirmed_replay(request):
            logger.info("Skipping confirmation interception - this is a confirmed action")
            return None

        content_type = request.headers.get("content-type", "")
        if not content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            return None

        form = await request.form()
        info = find_confirmation_button(form)
        if info is None:
            return None

        logger.info(
            f"Intercepting form submission for confirmation - Handler: {info.handler}, "
            f"DisplayFields: {','.join(info.display_fields)}"
        )

        current_url = request.url.path
        if request.url.query:
            current_url = f"{current_url}?{request.url.query}"

        confirmation_request = ConfirmationRequest(
            original_page_path=_meta_value(form, "action", info.handler) or request.url.path,
            original_handler=info.handler,
            original_form_data=extract_form_data(form),
            display_fields=info.display_fields,
            return_url=_meta_value(form, "return", info.handler) or current_url,
            title=_meta_value(form, "title", info.handler),
            required_message=_meta_value(form, "requiredMessage", info.handler),
        )

        try:
            token = await self._service.create_confirmation(confirmation_request)
        except InvalidConfirmationRequestError as e:
            logger.error(f"Failed to create confirmation for handler {info.handler}: {e}")
            return None

        logger.info(f"Redirecting to confirmation page with token {token}")
        return RedirectResponse(
            f"{self._confirmation_page_path}?{urlencode({'token': token})}",
            status_code=303,
        )
