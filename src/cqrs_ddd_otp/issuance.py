"""OTP issuance service.

Sequences "look up identity → generate code → emit ``otp.generated``"
for a raw identifier. This is what the transport layer calls when a client
asks for a code; it never tells the caller whether the identifier exists.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import (
    IdentityNotFoundError,
    InvalidSecretError,
    OtpInfrastructureError,
)
from .models import IdentityFilter
from .observability import OtpMetrics

if TYPE_CHECKING:
    from .ports import IAuthIdentityStore
    from .provider import OtpAuthProvider


class OtpIssuanceService:
    """Issue codes for identifiers in primary or secondary mode.

    Primary mode looks the identifier up among OTP bindings. Secondary
    mode looks it up among all bindings (matching ``identifier_key``) and,
    when an actor type is given, only on identities registered for it.

    Example:
        ```python
        issuance = OtpIssuanceService(provider, identity_store)

        await issuance.generate("user@example.com", actor_type="customer")
        ```
    """

    def __init__(
        self,
        provider: OtpAuthProvider,
        identity_store: IAuthIdentityStore,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.identity_store = identity_store
        self._logger = logger or logging.getLogger("cqrs_ddd.otp.issuance")

    def _criteria(self, identifier: str, actor_type: str | None) -> IdentityFilter:
        options = self.provider.options
        if options.is_primary:
            return IdentityFilter(entity_id=identifier, provider=self.provider.identifier)
        return IdentityFilter(
            entity_id=identifier,
            actor_type=actor_type,
            identifier_key=options.identifier_key,
        )

    async def generate(self, identifier: str, *, actor_type: str | None = None) -> None:
        """Issue a code for ``identifier`` if a matching identity exists.

        Infrastructure failures while issuing are logged and not raised, so a
        known identifier fails the same way an unknown one does.

        Args:
            identifier: External identifier (email, phone...).
            actor_type: Actor type from the request route (secondary mode filter).
        """
        with OtpMetrics.operation(
            "generate", mode=self.provider.options.mode.value
        ) as record:
            try:
                auth_identity = await self.identity_store.retrieve(
                    self._criteria(identifier, actor_type)
                )
            except IdentityNotFoundError:
                self._logger.warning("No matching identity found, no OTP issued")
                record.result = "not_found"
                return

            try:
                await self.provider.issue(auth_identity, identifier)
            except InvalidSecretError:
                self._logger.warning(
                    "Auth identity %s has no usable OTP secret, no OTP issued",
                    auth_identity.id,
                )
                record.result = "invalid_secret"
            except OtpInfrastructureError:
                self._logger.exception(
                    "Issuing OTP for auth identity %s failed", auth_identity.id
                )
                record.result = "error"


__all__: list[str] = ["OtpIssuanceService"]
