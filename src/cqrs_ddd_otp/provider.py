"""OTP authentication provider.

Registers identifiers and drives the two-phase OTP exchange:
``{identifier}`` issues a code, ``{identifier, otp}`` verifies it.
Issued codes live only in the verification cache under ``totp:<identity id>``;
the provider itself is stateless and safe to share across requests.
"""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

from .config import OtpOptions, SecondaryKeySource
from .events import OtpEvents, OtpGeneratedEvent
from .exceptions import IdentityNotFoundError, IdentityStoreError, InvalidSecretError
from .models import (
    OTP_PROVIDER,
    AuthenticationInput,
    AuthenticationResponse,
    AuthErrorCode,
    AuthIdentity,
    IdentityFilter,
)
from .observability import OtpMetrics, OtpTracing
from .ports import IAtomicConsumeCapability, IOtpAuthProvider
from .totp import decode_otp_secret, generate_otp_secret, generate_totp

if TYPE_CHECKING:
    from .ports import IAuthIdentityStore, ICacheService, IEventEmitter

CACHE_KEY_PREFIX = "totp:"


class OtpAuthProvider(IOtpAuthProvider):
    """OTP auth provider for primary and secondary mode.

    Primary mode: OTP owns identities. Registration stores a random secret
    in the provider metadata; codes are derived from it. Unknown identifiers
    get the same "otp_generated" answer as known ones.

    Secondary mode: OTP is an extra factor on identities owned by another
    provider. No secret is stored; the HMAC key is the identity id (or an
    ephemeral secret, see SecondaryKeySource). Both identifier and code are
    mandatory and every failure is reported as a generic "Invalid OTP".

    Example:
        ```python
        provider = OtpAuthProvider(
            cache=RedisCacheService(redis),
            options=resolve_options({"digits": 6, "ttl": 300}),
            event_emitter=my_emitter,
        )

        # Step 1: request a code (emitter delivers it)
        await provider.authenticate(
            AuthenticationInput(body={"identifier": "user@example.com"}),
            identity_store,
        )

        # Step 2: verify it
        response = await provider.authenticate(
            AuthenticationInput(body={"identifier": "user@example.com", "otp": "123456"}),
            identity_store,
        )
        ```
    """

    identifier = OTP_PROVIDER
    metadata_key = "otp_secret"

    def __init__(
        self,
        *,
        cache: ICacheService,
        options: OtpOptions,
        event_emitter: IEventEmitter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the OTP provider.

        Args:
            cache: Verification cache holding issued codes.
            options: Validated OTP options.
            event_emitter: Receives ``otp.generated`` for every issued code (optional).
            logger: Logger to use (defaults to ``cqrs_ddd.otp.provider``).
        """
        self._cache = cache
        self._options = options
        self._event_emitter = event_emitter
        self._logger = logger or logging.getLogger("cqrs_ddd.otp.provider")

    @property
    def options(self) -> OtpOptions:
        return self._options

    @staticmethod
    def cache_key(key: str) -> str:
        return f"{CACHE_KEY_PREFIX}{key}"

    # ── Code generation ──────────────────────────────────────────

    def generate_secret(self) -> str:
        """Generate a per-identity secret (64 hex chars)."""
        return generate_otp_secret()

    def generate_code(self, secret: bytes, *, at: float | None = None) -> str:
        """Derive a code for ``secret`` in the current TTL-sized window."""
        return generate_totp(secret, self._options.ttl, self._options.digits, at=at)

    def _signing_key(self, auth_identity: AuthIdentity) -> bytes:
        if self._options.is_primary:
            binding = auth_identity.provider_identity(self.identifier)
            metadata = binding.provider_metadata if binding else {}
            return decode_otp_secret(metadata.get(self.metadata_key))

        if self._options.secondary_key_source is SecondaryKeySource.EPHEMERAL:
            return decode_otp_secret(generate_otp_secret())
        return auth_identity.id.encode("utf-8")

    async def issue(self, auth_identity: AuthIdentity, identifier: str) -> str:
        """Issue a code for an identity.

        Overwrites any unconsumed code for the same identity and emits
        ``otp.generated`` when an emitter is configured.

        Args:
            auth_identity: The identity the code belongs to.
            identifier: External identifier the code will be delivered to.

        Returns:
            The issued code.

        Raises:
            InvalidSecretError: Primary mode and the identity has no usable secret.
        """
        with OtpTracing.span("issue", mode=self._options.mode.value):
            code = self.generate_code(self._signing_key(auth_identity))
            await self._cache.set(
                self.cache_key(auth_identity.id), code, self._options.ttl
            )

            if self._event_emitter is not None:
                event = OtpGeneratedEvent(identifier=identifier, code=code)
                await self._event_emitter.emit(
                    OtpEvents.OTP_GENERATED.value, event.to_payload()
                )

            return code

    # ── Verification ─────────────────────────────────────────────

    async def verify(self, key: str, provided_otp: str) -> bool:
        """Verify and consume a code.

        Args:
            key: Identity id the code was issued for.
            provided_otp: Code submitted by the user.

        Returns:
            True exactly once per issued code. A wrong code returns False
            and leaves the issued code usable until it expires.
        """
        cache_key = self.cache_key(key)

        if isinstance(self._cache, IAtomicConsumeCapability):
            return await self._cache.consume(cache_key, provided_otp)

        stored = await self._cache.get(cache_key)
        if stored is None:
            return False

        if not secrets.compare_digest(str(stored).encode(), provided_otp.encode()):
            return False

        await self._cache.invalidate(cache_key)
        return True

    # ── Auth provider capability ─────────────────────────────────

    async def authenticate(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        mode = self._options.mode.value
        with (
            OtpMetrics.operation("authenticate", mode=mode) as record,
            OtpTracing.span("authenticate", mode=mode) as span,
        ):
            if self._options.is_primary:
                response = await self._authenticate_primary(data, identity_store)
            else:
                response = await self._authenticate_secondary(data, identity_store)

            record.set_response(response)
            OtpTracing.set_outcome(
                span, response.success, None if response.success else record.result
            )
            return response

    async def _authenticate_primary(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        identifier = data.identifier
        if identifier is None:
            return AuthenticationResponse.failure(
                AuthErrorCode.MISSING_IDENTIFIER, "Identifier is required"
            )

        try:
            auth_identity = await identity_store.retrieve(
                IdentityFilter(entity_id=identifier, provider=self.identifier)
            )
        except IdentityNotFoundError:
            # Same answer as a successful issue: existence is not revealed
            self._logger.warning("No matching identity found")
            return AuthenticationResponse.otp_generated()

        otp = data.otp
        if otp is None:
            try:
                await self.issue(auth_identity, identifier)
            except InvalidSecretError:
                self._logger.warning(
                    "Auth identity %s has no usable OTP secret", auth_identity.id
                )
                return AuthenticationResponse.failure(
                    AuthErrorCode.INVALID_REQUEST, "Invalid request"
                )
            return AuthenticationResponse.otp_generated()

        if not await self.verify(auth_identity.id, otp):
            return AuthenticationResponse.failure(
                AuthErrorCode.INVALID_OTP, f"Invalid OTP for {identifier}"
            )

        return AuthenticationResponse.ok(auth_identity)

    async def _authenticate_secondary(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        identifier = data.identifier
        otp = data.otp
        if identifier is None or otp is None:
            return AuthenticationResponse.failure(
                AuthErrorCode.MISSING_IDENTIFIER_OR_OTP,
                "Identifier and OTP are required",
            )

        try:
            auth_identity = await identity_store.retrieve(
                IdentityFilter(
                    entity_id=identifier,
                    actor_type=data.actor_type,
                    identifier_key=self._options.identifier_key,
                )
            )
        except IdentityNotFoundError:
            self._logger.warning("No matching identity found")
            return AuthenticationResponse.failure(
                AuthErrorCode.INVALID_OTP, "Invalid OTP"
            )
        except IdentityStoreError as e:
            self._logger.error("Auth identity lookup failed: %s", e)
            return AuthenticationResponse.failure(
                AuthErrorCode.INVALID_OTP, "Invalid OTP"
            )

        if not await self.verify(auth_identity.id, otp):
            return AuthenticationResponse.failure(
                AuthErrorCode.INVALID_OTP, "Invalid OTP"
            )

        return AuthenticationResponse.ok(auth_identity)

    async def register(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        mode = self._options.mode.value
        with (
            OtpMetrics.operation("register", mode=mode) as record,
            OtpTracing.span("register", mode=mode) as span,
        ):
            response = await self._register(data, identity_store)
            record.set_response(response)
            OtpTracing.set_outcome(
                span, response.success, None if response.success else record.result
            )
            return response

    async def _register(
        self,
        data: AuthenticationInput,
        identity_store: IAuthIdentityStore,
    ) -> AuthenticationResponse:
        identifier = data.identifier
        if identifier is None:
            return AuthenticationResponse.failure(
                AuthErrorCode.MISSING_IDENTIFIER, "Identifier is required"
            )

        auth_identity: AuthIdentity | None
        try:
            auth_identity = await identity_store.retrieve(
                IdentityFilter(entity_id=identifier, provider=self.identifier)
            )
        except IdentityNotFoundError:
            auth_identity = await self._create_identity(identity_store, identifier)
        except IdentityStoreError as e:
            self._logger.error("Auth identity lookup failed: %s", e)
            return AuthenticationResponse.failure(AuthErrorCode.UPSTREAM_ERROR, str(e))

        if auth_identity is None:
            return AuthenticationResponse.failure(
                AuthErrorCode.IDENTITY_CREATION_FAILED, "Failed to create identity"
            )

        return AuthenticationResponse.ok(auth_identity)

    async def _create_identity(
        self,
        identity_store: IAuthIdentityStore,
        identifier: str,
    ) -> AuthIdentity | None:
        if self._options.is_primary:
            return await identity_store.create(
                identifier,
                provider_metadata={self.metadata_key: self.generate_secret()},
            )
        return await identity_store.create(identifier)


__all__: list[str] = [
    "CACHE_KEY_PREFIX",
    "OtpAuthProvider",
]
