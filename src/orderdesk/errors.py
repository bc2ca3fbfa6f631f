"""
orderdesk.errors

Domain error taxonomy shared by the auth, access and API layers.

Responsibilities:
- Carry an HTTP status and a short human message per error category.
- Keep the detailed reason of authentication failures server-side only.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
)


class AppError(Exception):
    status_code: int = HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class BadRequest(AppError):
    status_code = HTTP_400_BAD_REQUEST


class Unauthorized(AppError):
    """
    Credential missing, malformed, expired or forged.

    `message` is the reason (logged); callers only ever see `public_message`.
    """

    status_code = HTTP_401_UNAUTHORIZED

    @property
    def public_message(self) -> str:
        return "Unauthorized"


class NotFound(AppError):
    # Also used for resources owned by someone else; never a 403.
    status_code = HTTP_404_NOT_FOUND


# --- Module Notes -----------------------------------------------------------
# HTTP mapping lives in `orderdesk.api.errors.register_error_handlers`.
