"""FastAPI router for OTP issuance.

Exposes ``POST /auth/{actor_type}/otp/generate``. The response is the same
whether or not an identity exists for the identifier.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ...issuance import OtpIssuanceService

GENERATE_RESPONSE_MESSAGE = (
    "If an account exists with this identifier, an OTP will be sent to the user"
)


class OtpGenerateRequest(BaseModel):
    """Request body for OTP generation."""

    identifier: str = Field(min_length=1)


class OtpGenerateResponse(BaseModel):
    message: str = GENERATE_RESPONSE_MESSAGE


def create_otp_router(
    issuance_service: OtpIssuanceService,
    *,
    prefix: str = "",
    tags: list[str] | None = None,
) -> APIRouter:
    """Create a router issuing OTP codes.

    Args:
        issuance_service: Service that looks the identifier up and issues codes.
        prefix: Optional router prefix.
        tags: OpenAPI tags (defaults to ``["otp"]``).

    Returns:
        APIRouter with the generate route.

    Example:
        ```python
        from fastapi import FastAPI
        from cqrs_ddd_otp.contrib.fastapi import create_otp_router

        app = FastAPI()
        app.include_router(create_otp_router(OtpIssuanceService(provider, store)))
        ```
    """
    router = APIRouter(prefix=prefix, tags=list(tags or ["otp"]))

    @router.post("/auth/{actor_type}/otp/generate", response_model=OtpGenerateResponse)
    async def generate_otp(
        actor_type: str, body: OtpGenerateRequest
    ) -> OtpGenerateResponse:
        await issuance_service.generate(body.identifier, actor_type=actor_type)
        return OtpGenerateResponse()

    return router


__all__: list[str] = [
    "GENERATE_RESPONSE_MESSAGE",
    "OtpGenerateRequest",
    "OtpGenerateResponse",
    "create_otp_router",
]
