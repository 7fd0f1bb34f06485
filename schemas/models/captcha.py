"""
Verdict returned by a CAPTCHA verification service.

Mirrors the reCAPTCHA ``siteverify`` reply. The hyphenated ``error-codes``
key is exposed as ``error_codes``; the v3-only ``score`` / ``action`` fields
are optional.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VerificationOutcome(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = False
    error_codes: list[str] = Field(default_factory=list, alias="error-codes")

    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    score: Optional[float] = None
    action: Optional[str] = None

    @field_validator("error_codes", mode="before")
    @classmethod
    def _normalise_codes(cls, v: Any) -> Any:
        # Upstream may omit the key or send null on failure
        if v is None:
            return []
        if isinstance(v, list):
            return [str(code) for code in v]
        return v

    @property
    def error_message(self) -> str:
        """Error codes joined with ``.``, in the order the upstream sent them."""
        return ".".join(self.error_codes)
