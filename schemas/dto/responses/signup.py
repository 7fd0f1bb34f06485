"""
Response DTOs for the signup endpoint.

SignupResponse   — outcome of POST /signup (status code + message)
MessageResponse  — the JSON body actually sent, for every status
"""

from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """``{"message": ...}`` body shared by success and error responses."""

    message: str


class SignupResponse(BaseModel):
    """Result of a successful signup, before serialisation."""

    status_code: int
    message: str

    def body(self) -> dict:
        return MessageResponse(message=self.message).model_dump()
