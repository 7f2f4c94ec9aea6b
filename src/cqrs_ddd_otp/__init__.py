"""CQRS-DDD OTP Package

Passwordless and second-factor authentication with short-lived
one-time passwords.

Codes are derived with HMAC-SHA1 over a time-window counter, stored in a
verification cache under ``totp:<identity id>`` and consumed on first
successful verification. Delivery is left to whoever listens for the
``otp.generated`` event.

Usage:
    ```python
    from cqrs_ddd_otp import (
        AuthenticationInput,
        OtpAuthProvider,
        RedisCacheService,
        resolve_options,
    )

    provider = OtpAuthProvider(
        cache=RedisCacheService(redis),
        options=resolve_options({"mode": "main", "ttl": 300}),
        event_emitter=emitter,
    )

    response = await provider.authenticate(
        AuthenticationInput(body={"identifier": "user@example.com", "otp": "643084"}),
        identity_store,
    )
    if response.success:
        print(response.auth_identity.id)
    ```

Submodules:
    - `cache`: In-memory and Redis verification caches
    - `observability`: Prometheus metrics and OpenTelemetry spans
    - `contrib.fastapi`: Router for ``POST /auth/{actor_type}/otp/generate``
"""

from __future__ import annotations

# Cache
from .cache import InMemoryCacheService, RedisCacheService

# Configuration
from .config import OtpMode, OtpOptions, SecondaryKeySource, resolve_options

# Events
from .events import EmittedEvent, InMemoryEventEmitter, OtpEvents, OtpGeneratedEvent

# Exceptions
from .exceptions import (
    IdentityNotFoundError,
    IdentityStoreError,
    InvalidSecretError,
    OtpCacheError,
    OtpConfigurationError,
    OtpDomainError,
    OtpError,
    OtpInfrastructureError,
)

# Identity store
from .identity import InMemoryAuthIdentityStore

# Issuance
from .issuance import OtpIssuanceService

# Models
from .models import (
    OTP_PROVIDER,
    OTP_RETURN_KEY,
    AuthenticationInput,
    AuthenticationResponse,
    AuthErrorCode,
    AuthIdentity,
    IdentityFilter,
    ProviderIdentity,
)

# Ports
from .ports import (
    IAtomicConsumeCapability,
    IAuthIdentityStore,
    ICacheService,
    IEventEmitter,
    IOtpAuthProvider,
)

# Provider
from .provider import CACHE_KEY_PREFIX, OtpAuthProvider

# Code generation
from .totp import (
    decode_otp_secret,
    generate_otp_secret,
    generate_totp,
    window_counter,
)

__all__: list[str] = [
    # Cache
    "InMemoryCacheService",
    "RedisCacheService",
    # Configuration
    "OtpMode",
    "OtpOptions",
    "SecondaryKeySource",
    "resolve_options",
    # Events
    "OtpEvents",
    "OtpGeneratedEvent",
    "EmittedEvent",
    "InMemoryEventEmitter",
    # Exceptions
    "OtpError",
    "OtpDomainError",
    "OtpInfrastructureError",
    "OtpConfigurationError",
    "IdentityNotFoundError",
    "InvalidSecretError",
    "IdentityStoreError",
    "OtpCacheError",
    # Identity store
    "InMemoryAuthIdentityStore",
    # Issuance
    "OtpIssuanceService",
    # Models
    "OTP_PROVIDER",
    "OTP_RETURN_KEY",
    "ProviderIdentity",
    "AuthIdentity",
    "IdentityFilter",
    "AuthenticationInput",
    "AuthErrorCode",
    "AuthenticationResponse",
    # Ports
    "ICacheService",
    "IAtomicConsumeCapability",
    "IAuthIdentityStore",
    "IEventEmitter",
    "IOtpAuthProvider",
    # Provider
    "CACHE_KEY_PREFIX",
    "OtpAuthProvider",
    # Code generation
    "window_counter",
    "generate_totp",
    "generate_otp_secret",
    "decode_otp_secret",
]
