"""
Signup verification.

Validates the signup payload, asks the CAPTCHA provider for a verdict and
turns the verdict into a SignupResponse. Every failure is raised as an
AppError and rendered by the global exception handler.
"""

from __future__ import annotations

from errors import CaptchaRejectedError, ValidationError
from infrastructure.captcha.protocol import CaptchaProvider
from schemas.dto.requests.signup import SignupRequest
from schemas.dto.responses.signup import SignupResponse
from shared.logging import get_logger

log = get_logger(__name__)

TOKEN_REQUIRED_MESSAGE = "recaptchaToken is required"
CREDENTIALS_REQUIRED_MESSAGE = "email and password are required."
SIGNUP_SUCCESS_MESSAGE = "Congratulations! We think you are human."


class SignupService:
    def __init__(self, captcha: CaptchaProvider) -> None:
        self._captcha = captcha

    @staticmethod
    def validate(request: SignupRequest) -> None:
        """Check required fields; the token is checked before the credentials."""
        if not request.recaptcha_token:
            raise ValidationError(TOKEN_REQUIRED_MESSAGE, field="recaptchaToken")
        if not request.email or not request.password:
            raise ValidationError(
                CREDENTIALS_REQUIRED_MESSAGE,
                field="password" if request.email else "email",
            )

    async def signup(self, request: SignupRequest) -> SignupResponse:
        self.validate(request)

        outcome = await self._captcha.verify(request.recaptcha_token)
        if not outcome.success:
            raise CaptchaRejectedError(
                outcome.error_message, details=outcome.error_codes
            )

        # The user is verified at this point; persisting them is out of scope.
        email = request.email
        log.info(
            "signup_verified",
            email_domain=email.split("@")[1] if "@" in email else "unknown",
            hostname=outcome.hostname,
            score=outcome.score,
            action=outcome.action,
        )
        return SignupResponse(status_code=201, message=SIGNUP_SUCCESS_MESSAGE)
