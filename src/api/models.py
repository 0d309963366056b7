"""Form models for the confirmation page"""
from typing import Optional

from pydantic import BaseModel
from starlette.datastructures import FormData


class ConfirmationChoiceForm(BaseModel):
    """POST body of the confirmation page"""
    confirmation_token: str = ""
    confirmed: Optional[str] = None

    @classmethod
    def from_form(cls, form: FormData) -> "ConfirmationChoiceForm":
        token = form.get("ConfirmationToken") or form.get("token") or ""
        confirmed = form.get("Confirmed")
        return cls(
            confirmation_token=token.strip() if isinstance(token, str) else "",
            confirmed=confirmed if isinstance(confirmed, str) else None,
        )

    def choice(self) -> Optional[bool]:
        """True / False for an explicit choice, None when nothing valid was selected"""
        if self.confirmed is None:
            return None
        value = self.confirmed.strip().lower()
        if value == "true":
            return True
        if value == "false":
            return False
        return None
