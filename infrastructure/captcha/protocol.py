"""CaptchaProvider protocol — services depend on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.captcha import VerificationOutcome


class CaptchaProvider(Protocol):
    async def verify(self, token: str) -> VerificationOutcome:
        """Return the provider's verdict for ``token``.

        Raises CaptchaUnavailableError when no verdict could be obtained.
        """
        ...
