"""
Signup endpoint.

POST /signup — verifies the client's reCAPTCHA token and reports the result.
Rules:
- missing recaptchaToken → 400
- missing email or password → 400
- verification service unreachable → 500 (generic message)
- verification service says "not human" → 500 (its error codes, joined by ".")
- verified → 201
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from dependencies import get_signup_service
from schemas.dto.requests.signup import SignupRequest
from schemas.dto.responses.signup import MessageResponse
from services.signup_service import SignupService
from shared.ip_utils import get_client_ip
from shared.logging import get_logger, hash_ip

router = APIRouter(tags=["signup"])
log = get_logger(__name__)


@router.post(
    "/signup",
    status_code=201,
    response_model=MessageResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
async def signup(
    request: Request,
    service: SignupService = Depends(get_signup_service),
) -> JSONResponse:
    # A body that is not a JSON object is treated as an empty payload
    try:
        payload = await request.json()
    except ValueError:
        payload = {}

    log.debug("signup_requested", ip_hash=hash_ip(get_client_ip(request)))
    result = await service.signup(SignupRequest.from_payload(payload))
    return JSONResponse(status_code=result.status_code, content=result.body())
