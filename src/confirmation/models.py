"""Confirmation data models"""

from typing import Dict, List, Optional, Union
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

# A submitted form value: single field or repeated field
FormValue = Union[str, List[str]]

DEFAULT_TITLE = "Confirm your action"
DEFAULT_REQUIRED_MESSAGE = "Select yes if you want to continue"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfirmationRequest(BaseModel):
    """Snapshot of an inbound request waiting for user confirmation

    The form data is kept exactly as received; the resumed handler is the one
    that validates it.
    """

    model_config = ConfigDict(populate_by_name=True)

    confirmation_token: str = Field(default="", alias="confirmationToken")
    original_page_path: str = Field(default="", alias="originalPagePath", description="Page to resume")
    original_handler: str = Field(default="", alias="originalHandler", description="Handler to invoke on that page")
    original_form_data: Dict[str, FormValue] = Field(default_factory=dict, alias="originalFormData")
    display_fields: List[str] = Field(default_factory=list, alias="displayFields")
    title: Optional[str] = None
    required_message: Optional[str] = Field(default=None, alias="requiredMessage")
    return_url: str = Field(default="", alias="returnUrl", description="Where to go if the user declines")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")


class ConfirmationContext(BaseModel):
    """A pending confirmation as held by the store"""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    request: ConfirmationRequest
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    expires_at: datetime = Field(..., alias="expiresAt")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at


class ConfirmationDisplayModel(BaseModel):
    """Read-only projection of a context for the confirmation page"""

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    required_message: str = DEFAULT_REQUIRED_MESSAGE
    # label -> formatted value, in display order
    display_data: Dict[str, str] = Field(default_factory=dict)
    return_url: str = ""
    confirmation_token: str = ""
    original_action_url: str = ""
    original_form_data: Dict[str, FormValue] = Field(default_factory=dict)
