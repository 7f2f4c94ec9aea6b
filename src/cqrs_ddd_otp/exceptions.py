"""OTP-related exceptions.

All OTP errors inherit from OtpError. Expected authentication outcomes are
NOT exceptions: the provider reports them through AuthenticationResponse.
These exceptions cover collaborator boundaries (identity store, cache) and
misconfiguration.
"""

from __future__ import annotations

from typing import Any

# ═══════════════════════════════════════════════════════════════
# BASE OTP ERROR
# ═══════════════════════════════════════════════════════════════


class OtpError(Exception):
    """Root exception for the cqrs-ddd-otp package."""


class OtpDomainError(OtpError):
    """Base class for OTP domain errors."""


class OtpInfrastructureError(OtpError):
    """Base class for OTP infrastructure errors (stores, caches)."""


# ═══════════════════════════════════════════════════════════════
# DOMAIN ERRORS
# ═══════════════════════════════════════════════════════════════


class IdentityNotFoundError(OtpDomainError):
    """Raised by identity stores when no identity matches a lookup.

    This is the only store error that triggers create-on-register.
    """

    def __init__(self, entity_id: str, message: str | None = None) -> None:
        self.entity_id = entity_id
        super().__init__(message or "Auth identity not found")


class InvalidSecretError(OtpDomainError):
    """Raised when an OTP secret is missing or cannot be decoded."""


# ═══════════════════════════════════════════════════════════════
# INFRASTRUCTURE ERRORS
# ═══════════════════════════════════════════════════════════════


class IdentityStoreError(OtpInfrastructureError):
    """Raised by identity stores for failures other than not-found.

    The provider turns it into an opaque UPSTREAM_ERROR result during
    registration, carrying this exception's message.
    """


class OtpCacheError(OtpInfrastructureError):
    """Raised when the verification cache cannot be reached."""


# ═══════════════════════════════════════════════════════════════
# CONFIGURATION ERRORS
# ═══════════════════════════════════════════════════════════════


class OtpConfigurationError(OtpError):
    """Raised when OTP options fail validation.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    @classmethod
    def from_pydantic(cls, exc: Any) -> OtpConfigurationError:
        """Build from a pydantic ``ValidationError``."""
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ("__root__",)))
            msg = error.get("msg", "validation error")
            errors.setdefault(loc or "__root__", []).append(msg)
        return cls(errors)


__all__: list[str] = [
    # Base
    "OtpError",
    "OtpDomainError",
    "OtpInfrastructureError",
    # Domain
    "IdentityNotFoundError",
    "InvalidSecretError",
    # Infrastructure
    "IdentityStoreError",
    "OtpCacheError",
    # Configuration
    "OtpConfigurationError",
]
