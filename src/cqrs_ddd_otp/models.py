"""Value objects exchanged between the OTP provider and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

OTP_PROVIDER = "otp"
OTP_RETURN_KEY = "otp_generated"


# ═══════════════════════════════════════════════════════════════
# IDENTITIES
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ProviderIdentity:
    """Binding between an auth identity and one auth provider.

    Attributes:
        entity_id: External identifier (email, phone, username).
        provider: Provider name, ``"otp"`` for this package.
        provider_metadata: Provider-private data (holds ``otp_secret``
            in primary mode). Never exposed to clients.
        user_metadata: Externally known attributes (``email``, ``phone``...).
        id: Binding id assigned by the identity store.
    """

    entity_id: str
    provider: str = OTP_PROVIDER
    provider_metadata: dict[str, Any] = field(default_factory=dict)
    user_metadata: dict[str, Any] = field(default_factory=dict)
    id: str | None = None


@dataclass(frozen=True)
class AuthIdentity:
    """An authenticable principal owned by the identity store.

    Attributes:
        id: Internal identity id. Also the cache key suffix for issued codes.
        provider_identities: Bindings to auth providers.
        app_metadata: Application data; actor types are keys
            (e.g. ``{"customer": "cus_123"}``).
    """

    id: str
    provider_identities: list[ProviderIdentity] = field(default_factory=list)
    app_metadata: dict[str, Any] = field(default_factory=dict)

    def provider_identity(self, provider: str = OTP_PROVIDER) -> ProviderIdentity | None:
        """Return the first binding for ``provider``, if any."""
        for binding in self.provider_identities:
            if binding.provider == provider:
                return binding
        return None

    def has_actor_type(self, actor_type: str) -> bool:
        return self.app_metadata.get(actor_type) is not None


@dataclass(frozen=True)
class IdentityFilter:
    """Lookup criteria passed to an identity store.

    Attributes:
        entity_id: The external identifier to match.
        provider: Restrict to bindings of this provider.
        actor_type: Require ``app_metadata[actor_type]`` on the identity.
        identifier_key: Also match bindings whose ``user_metadata[identifier_key]``
            equals ``entity_id`` (secondary mode).
    """

    entity_id: str
    provider: str | None = None
    actor_type: str | None = None
    identifier_key: str | None = None


# ═══════════════════════════════════════════════════════════════
# AUTHENTICATION INPUT / RESPONSE
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AuthenticationInput:
    """Validated request payload forwarded by the transport layer.

    Attributes:
        body: ``{"identifier": ...}`` to request a code, or
            ``{"identifier": ..., "otp": ...}`` to verify one.
        actor_type: Actor type from the route (``customer``, ``user``...).
    """

    body: dict[str, Any] = field(default_factory=dict)
    actor_type: str | None = None

    @property
    def identifier(self) -> str | None:
        return _non_empty(self.body.get("identifier"))

    @property
    def otp(self) -> str | None:
        return _non_empty(self.body.get("otp"))


def _non_empty(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    text = str(value)
    return text if text else None


class AuthErrorCode(Enum):
    """Discriminator for failed authentication results."""

    MISSING_IDENTIFIER = "missing_identifier"
    MISSING_IDENTIFIER_OR_OTP = "missing_identifier_or_otp"
    INVALID_REQUEST = "invalid_request"
    INVALID_OTP = "invalid_otp"
    IDENTITY_CREATION_FAILED = "identity_creation_failed"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class AuthenticationResponse:
    """Outcome of register/authenticate.

    Attributes:
        success: Whether the step succeeded.
        auth_identity: The identity on successful verify/register.
        error: Human-readable error on failure.
        error_code: Machine-readable error on failure.
        location: ``"otp_generated"`` when a code was (or appears to have
            been) issued.
    """

    success: bool
    auth_identity: AuthIdentity | None = None
    error: str | None = None
    error_code: AuthErrorCode | None = None
    location: str | None = None

    @classmethod
    def ok(cls, auth_identity: AuthIdentity) -> AuthenticationResponse:
        return cls(success=True, auth_identity=auth_identity)

    @classmethod
    def otp_generated(cls) -> AuthenticationResponse:
        return cls(success=True, location=OTP_RETURN_KEY)

    @classmethod
    def failure(cls, code: AuthErrorCode, error: str) -> AuthenticationResponse:
        return cls(success=False, error=error, error_code=code)


__all__: list[str] = [
    "OTP_PROVIDER",
    "OTP_RETURN_KEY",
    "ProviderIdentity",
    "AuthIdentity",
    "IdentityFilter",
    "AuthenticationInput",
    "AuthErrorCode",
    "AuthenticationResponse",
]
