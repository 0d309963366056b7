"""Two-phase confirmation and deferred-action replay

Lets a page handler ask the user to confirm before an action runs, then
resumes the original request (method and body included) only if the user
agrees.

Usage:
    ```python
    from src.confirmation import ConfirmationRequest, get_confirmation_service

    service = get_confirmation_service()

    # Upstream handler: park the request and send the user to the confirmation page
    token = await service.create_confirmation(
        ConfirmationRequest(
            original_page_path="/Forms/Submit",
            original_handler="Submit",
            original_form_data={"name": "Alice"},
            return_url="/Forms/Edit",
        )
    )

    # Confirmation page
    model = await service.prepare_display_model(token)
    context = await service.consume_confirmation(token)
    ```
"""

from .models import (
    ConfirmationContext,
    ConfirmationDisplayModel,
    ConfirmationRequest,
    FormValue,
)
from .storage import (
    ConfirmationStore,
    InMemoryConfirmationStore,
)
from .sql_storage import SqlConfirmationStore
from .display import ConfirmationDataFormatter
from .flash import FlashStore
from .replay import ReplayRedirector, build_replay_url
from .service import (
    ConfirmationService,
    build_store,
    get_confirmation_service,
    reset_confirmation_service,
)
from .interceptor import (
    ConfirmationInterceptor,
    is_confirmed_replay,
    read_confirmed_form_data,
)
from .exceptions import (
    ConfirmationError,
    ConfirmationStoreError,
    InvalidConfirmationRequestError,
    MissingTokenError,
    NoSelectionError,
    ReplayFailureError,
    TokenNotFoundError,
)

__all__ = [
    # models
    "ConfirmationContext",
    "ConfirmationDisplayModel",
    "ConfirmationRequest",
    "FormValue",
    # storage
    "ConfirmationStore",
    "InMemoryConfirmationStore",
    "SqlConfirmationStore",
    # service
    "ConfirmationDataFormatter",
    "ConfirmationService",
    "build_store",
    "get_confirmation_service",
    "reset_confirmation_service",
    # replay
    "FlashStore",
    "ReplayRedirector",
    "build_replay_url",
    "ConfirmationInterceptor",
    "is_confirmed_replay",
    "read_confirmed_form_data",
    # exceptions
    "ConfirmationError",
    "ConfirmationStoreError",
    "InvalidConfirmationRequestError",
    "MissingTokenError",
    "NoSelectionError",
    "ReplayFailureError",
    "TokenNotFoundError",
]
