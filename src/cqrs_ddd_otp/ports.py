"""OTP ports (protocols).

These protocols define the collaborators the OTP provider depends on and
the capability the provider itself exposes. All ports use
@runtime_checkable for isinstance checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import (
        AuthenticationInput,
        AuthenticationResponse,
        AuthIdentity,
        IdentityFilter,
    )


# ═══════════════════════════════════════════════════════════════
# VERIFICATION CACHE PORTS
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class ICacheService(Protocol):
    """Protocol for the volatile store holding issued codes.

    The cache is the single source of truth for "is this code still
    valid and unused". Implementations must honour per-key expiry.
    """

    async def get(self, key: str) -> Any | None:
        """Retrieve a value by key.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None if missing or expired.
        """
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value, overwriting any previous one.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live in seconds (optional).
        """
        ...

    async def invalidate(self, key: str) -> None:
        """Delete a value by key. Missing keys are ignored.

        Args:
            key: Cache key.
        """
        ...


@runtime_checkable
class IAtomicConsumeCapability(Protocol):
    """Optional capability: atomic compare-and-invalidate.

    Caches that implement it let the provider verify a code without a
    get-then-invalidate race between two concurrent verifications.
    """

    async def consume(self, key: str, expected: Any) -> bool:
        """Delete ``key`` only if it currently holds ``expected``.

        Args:
            key: Cache key.
            expected: Value the key must hold.

        Returns:
            True if the value matched and was deleted.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# IDENTITY STORE PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IAuthIdentityStore(Protocol):
    """Protocol for the identity-storage collaborator.

    The OTP provider only reads identities and, on registration,
    requests creation of new ones.
    """

    async def retrieve(self, criteria: IdentityFilter) -> AuthIdentity:
        """Retrieve the identity matching ``criteria``.

        Args:
            criteria: Lookup criteria.

        Returns:
            The matching identity.

        Raises:
            IdentityNotFoundError: No identity matches.
            IdentityStoreError: Any other storage failure.
        """
        ...

    async def create(
        self,
        entity_id: str,
        *,
        provider_metadata: dict[str, Any] | None = None,
    ) -> AuthIdentity | None:
        """Create an identity bound to the OTP provider.

        Args:
            entity_id: External identifier for the new binding.
            provider_metadata: Provider-private metadata (secret in primary mode).

        Returns:
            The created identity, or None if creation failed silently.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# EVENT EMITTER PORT
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IEventEmitter(Protocol):
    """Protocol for the notification/event collaborator.

    The OTP package produces codes; delivering them to users (email, SMS)
    is entirely the emitter's responsibility.
    """

    async def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event.

        Args:
            event_name: Event name (e.g. ``"otp.generated"``).
            payload: Event data.
        """
        ...


# ═══════════════════════════════════════════════════════════════
# AUTH PROVIDER CAPABILITY
# ═══════════════════════════════════════════════════════════════


@runtime_checkable
class IOtpAuthProvider(Protocol):
    """Capability exposed to the auth module hosting the provider."""

    @property
    def metadata_key(self) -> str:
        """Key of the secret inside provider metadata."""
        ...

    async def register(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        """Register an identifier, creating its identity if needed."""
        ...

    async def authenticate(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        """Issue or verify a code for an identifier."""
        ...


__all__: list[str] = [
    "ICacheService",
    "IAtomicConsumeCapability",
    "IAuthIdentityStore",
    "IEventEmitter",
    "IOtpAuthProvider",
]
