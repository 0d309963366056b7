"""Confirmation service

ConfirmationService owns the confirmation lifecycle:
1. Mint a token for a pending request
2. Build the display model for the confirmation page
3. Look up a pending confirmation without consuming it
4. Consume it exactly once when the user decides
"""

from typing import Optional
from datetime import timedelta
import logging
import secrets

from src.utils.config import ConfirmationConfig

from .display import ConfirmationDataFormatter
from .exceptions import InvalidConfirmationRequestError
from .models import (
    DEFAULT_REQUIRED_MESSAGE,
    DEFAULT_TITLE,
    ConfirmationContext,
    ConfirmationDisplayModel,
    ConfirmationRequest,
    utcnow,
)
from .storage import Clock, ConfirmationStore, InMemoryConfirmationStore

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_token() -> str:
    """Cryptographically secure token, hex encoded so it is safe in URLs and WAF rules"""
    return secrets.token_hex(TOKEN_BYTES)


class ConfirmationService:
    """Two-phase confirmation service

    Lookup (``get_confirmation`` / ``prepare_display_model``) and consumption
    (``clear_confirmation`` / ``consume_confirmation``) are separate so a POST
    can branch on the user's choice and then consume exactly once.

    Example:
        ```python
        service = ConfirmationService(InMemoryConfirmationStore())

        token = await service.create_confirmation(
            ConfirmationRequest(
                original_page_path="/Forms/Submit",
                original_handler="Submit",
                original_form_data={"name": "Alice"},
                return_url="/Forms/Edit",
            )
        )

        model = await service.prepare_display_model(token)
        context = await service.consume_confirmation(token)
        ```
    """

    def __init__(
        self,
        store: Optional[ConfirmationStore] = None,
        default_ttl_seconds: int = 600,
        formatter: Optional[ConfirmationDataFormatter] = None,
        clock: Clock = utcnow,
    ):
        """
        Args:
            store: storage backend, in-memory by default
            default_ttl_seconds: token lifetime when the caller gives none
            formatter: display data formatter
            clock: time source, shared with the default store
        """
        self._clock = clock
        self._store = store or InMemoryConfirmationStore(clock=clock)
        self._default_ttl = default_ttl_seconds
        self._formatter = formatter or ConfirmationDataFormatter()

    @property
    def store(self) -> ConfirmationStore:
        return self._store

    async def create_confirmation(
        self,
        request: ConfirmationRequest,
        ttl_seconds: Optional[int] = None,
    ) -> str:
        """Store a new pending confirmation

        Args:
            request: snapshot of the request to resume, with its display metadata
            ttl_seconds: custom lifetime

        Returns:
            The token to put in the confirmation page URL

        Raises:
            InvalidConfirmationRequestError: page path or handler is empty, or the TTL is not positive
        """
        if not request.original_page_path or not request.original_page_path.strip():
            raise InvalidConfirmationRequestError("original_page_path is required")
        if not request.original_handler or not request.original_handler.strip():
            raise InvalidConfirmationRequestError("original_handler is required")

        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise InvalidConfirmationRequestError(f"ttl must be positive, got {ttl}")

        token = generate_token()
        now = self._clock()
        stored_request = request.model_copy(
            update={"confirmation_token": token, "created_at": now},
            deep=True,
        )

        context = ConfirmationContext(
            token=token,
            request=stored_request,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl),
        )
        await self._store.put(context)

        logger.info(
            f"Created confirmation with token {token} for handler {request.original_handler}"
        )
        return token

    async def get_confirmation(self, token: str) -> Optional[ConfirmationContext]:
        """Look up a pending confirmation without consuming it

        Returns None for missing, expired or already consumed tokens.
        """
        if not token:
            return None

        context = await self._store.get(token)
        if context is None:
            logger.warning(f"Confirmation token {token} not found or expired")
        return context

    async def prepare_display_model(self, token: str) -> Optional[ConfirmationDisplayModel]:
        """Build the confirmation page model, or None if the token is not usable"""
        context = await self.get_confirmation(token)
        if context is None:
            return None
        return self.build_display_model(context)

    def build_display_model(self, context: ConfirmationContext) -> ConfirmationDisplayModel:
        request = context.request
        form_data = request.model_copy(deep=True).original_form_data

        return ConfirmationDisplayModel(
            title=request.title if request.title and request.title.strip() else DEFAULT_TITLE,
            required_message=(
                request.required_message
                if request.required_message and request.required_message.strip()
                else DEFAULT_REQUIRED_MESSAGE
            ),
            display_data=self._formatter.format_display_data(form_data, request.display_fields),
            return_url=request.return_url,
            confirmation_token=context.token,
            original_action_url=f"{request.original_page_path}?handler={request.original_handler}",
            original_form_data=form_data,
        )

    async def clear_confirmation(self, token: str) -> None:
        """Consume a token; unknown or already cleared tokens are ignored"""
        if not token:
            return
        await self._store.remove(token)
        logger.info(f"Cleared confirmation token {token}")

    async def consume_confirmation(self, token: str) -> Optional[ConfirmationContext]:
        """Atomically take a pending confirmation

        Of several concurrent callers for one token, only one gets the context;
        the others get None.
        """
        if not token:
            return None

        context = await self._store.consume(token)
        if context is None:
            logger.warning(f"Confirmation token {token} was already consumed or expired")
        else:
            logger.info(f"Consumed confirmation token {token}")
        return context

    async def is_valid_token(self, token: str) -> bool:
        return await self.get_confirmation(token) is not None

    async def cleanup_expired(self) -> int:
        return await self._store.cleanup_expired()


def build_store(config: ConfirmationConfig, clock: Clock = utcnow) -> ConfirmationStore:
    """Create the store selected by configuration"""
    if config.store_backend == "sql":
        from src.db import create_db_engine
        from .sql_storage import SqlConfirmationStore

        return SqlConfirmationStore(create_db_engine(config.database_url), clock=clock)
    return InMemoryConfirmationStore(clock=clock)


# Process-wide instance
_confirmation_service: Optional[ConfirmationService] = None


def get_confirmation_service(config: Optional[ConfirmationConfig] = None) -> ConfirmationService:
    """Return the ConfirmationService singleton"""
    global _confirmation_service

    if _confirmation_service is None:
        config = config or ConfirmationConfig.from_env()
        _confirmation_service = ConfirmationService(
            store=build_store(config),
            default_ttl_seconds=config.ttl_seconds,
        )
        logger.info(f"ConfirmationService initialised with {config.store_backend} store")

    return _confirmation_service


def reset_confirmation_service() -> None:
    """Drop the singleton (tests)"""
    global _confirmation_service
    _confirmation_service = None
