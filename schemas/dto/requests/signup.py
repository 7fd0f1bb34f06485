"""
Request DTO for the signup endpoint.

SignupRequest — POST /signup

All fields are optional at the schema level: whether a field is present is
the handler's concern, and it reports missing fields in a fixed order.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignupRequest(BaseModel):
    """Request body for POST /signup.

    Only the wire name ``recaptchaToken`` is read; it is exposed as
    ``recaptcha_token``. Empty strings and non-string values count as absent.
    """

    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    password: Optional[str] = None
    recaptcha_token: Optional[str] = Field(default=None, alias="recaptchaToken")

    @field_validator("email", "password", "recaptcha_token", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or v == "":
            return None
        return v

    @classmethod
    def from_payload(cls, payload: Any) -> "SignupRequest":
        """Build from a decoded JSON body; anything but an object is empty."""
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)
