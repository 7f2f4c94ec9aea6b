"""FastAPI integration for cqrs-ddd-otp."""

from .router import GENERATE_RESPONSE_MESSAGE, OtpGenerateRequest, create_otp_router

__all__: list[str] = [
    "GENERATE_RESPONSE_MESSAGE",
    "OtpGenerateRequest",
    "create_otp_router",
]
