"""Google reCAPTCHA implementation of CaptchaProvider.

- async httpx via HttpClient; the timeout is owned by the HttpClient
- secret and verify URL are injected, never read from the environment here
- any failure to obtain a verdict raises CaptchaUnavailableError
"""

import httpx

from errors import CaptchaUnavailableError
from infrastructure.http_client import HttpClient
from schemas.models.captcha import VerificationOutcome
from shared.logging import get_logger

log = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

# reCAPTCHA's own code for a request sent without a secret
MISSING_SECRET_CODE = "missing-input-secret"


class RecaptchaProvider:
    def __init__(
        self,
        secret: str,
        http_client: HttpClient,
        verify_url: str = RECAPTCHA_VERIFY_URL,
    ) -> None:
        self._secret = secret
        self._http = http_client
        self._verify_url = verify_url

    async def verify(self, token: str) -> VerificationOutcome:
        if not self._secret:
            log.warning("recaptcha_secret_not_configured")
            return VerificationOutcome.model_validate(
                {"success": False, "error-codes": [MISSING_SECRET_CODE]}
            )

        try:
            response = await self._http.post(
                self._verify_url,
                data={"secret": self._secret, "response": token},
            )
        except httpx.HTTPError as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            raise CaptchaUnavailableError(details=type(e).__name__) from e

        if not response.is_success:
            log.error(
                "recaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise CaptchaUnavailableError(details=response.status_code)

        try:
            outcome = VerificationOutcome.model_validate(response.json())
        except ValueError as e:  # bad JSON or a body pydantic rejects
            log.error(
                "recaptcha_unreadable_response",
                error_type=type(e).__name__,
                response_text=response.text[:200],
            )
            raise CaptchaUnavailableError(details="unreadable_response") from e

        if not outcome.success:
            log.warning("recaptcha_verification_failed", error_codes=outcome.error_codes)
        return outcome
