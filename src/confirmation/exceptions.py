"""Confirmation flow exceptions"""


class ConfirmationError(Exception):
    """Base class for confirmation flow errors"""
    pass


class InvalidConfirmationRequestError(ConfirmationError):
    """The pending request cannot be resumed (no page path or handler)"""
    pass


class MissingTokenError(ConfirmationError):
    """No token was supplied"""
    pass


class TokenNotFoundError(ConfirmationError):
    """Token is unknown, expired or already consumed"""

    def __init__(self, token: str):
        super().__init__(f"Confirmation token {token} not found")
        self.token = token


class NoSelectionError(ConfirmationError):
    """The user submitted the confirmation form without choosing yes or no"""
    pass


class ReplayFailureError(ConfirmationError):
    """The confirmed action could not be handed back to its handler"""

    def __init__(self, token: str, reason: str = ""):
        super().__init__(f"Failed to replay confirmed action for token {token}: {reason}")
        self.token = token


class ConfirmationStoreError(ConfirmationError):
    """Persistence backend is unavailable"""
    pass
