"""In-memory identity store for development and testing.

WARNING: This implementation is NOT suitable for production use.
The application provides an IAuthIdentityStore backed by its auth module.
"""

from __future__ import annotations

import uuid
from typing import Any

from .exceptions import IdentityNotFoundError
from .models import OTP_PROVIDER, AuthIdentity, IdentityFilter, ProviderIdentity
from .ports import IAuthIdentityStore


class InMemoryAuthIdentityStore(IAuthIdentityStore):
    """In-memory identity store for TESTING ONLY.

    Example:
        ```python
        store = InMemoryAuthIdentityStore()

        # Identity owned by another provider, usable in secondary mode
        store.add(AuthIdentity(
            id="auth_1",
            provider_identities=[
                ProviderIdentity(entity_id="user@example.com", provider="emailpass"),
            ],
            app_metadata={"customer": "cus_1"},
        ))
        ```
    """

    def __init__(self, provider: str = OTP_PROVIDER) -> None:
        self._provider = provider
        self._identities: dict[str, AuthIdentity] = {}

    @property
    def identities(self) -> list[AuthIdentity]:
        return list(self._identities.values())

    def add(self, identity: AuthIdentity) -> AuthIdentity:
        """Seed an existing identity."""
        self._identities[identity.id] = identity
        return identity

    async def retrieve(self, criteria: IdentityFilter) -> AuthIdentity:
        for identity in self._identities.values():
            if criteria.actor_type and not identity.has_actor_type(criteria.actor_type):
                continue
            if any(_matches(b, criteria) for b in identity.provider_identities):
                return identity
        raise IdentityNotFoundError(criteria.entity_id)

    async def create(
        self,
        entity_id: str,
        *,
        provider_metadata: dict[str, Any] | None = None,
    ) -> AuthIdentity | None:
        identity_id = f"authid_{uuid.uuid4().hex}"
        binding = ProviderIdentity(
            entity_id=entity_id,
            provider=self._provider,
            provider_metadata=dict(provider_metadata or {}),
            id=f"provid_{uuid.uuid4().hex}",
        )
        return self.add(AuthIdentity(id=identity_id, provider_identities=[binding]))

    def clear_all(self) -> None:
        self._identities.clear()


def _matches(binding: ProviderIdentity, criteria: IdentityFilter) -> bool:
    if criteria.provider and binding.provider != criteria.provider:
        return False
    if binding.entity_id == criteria.entity_id:
        return True
    if criteria.identifier_key:
        return binding.user_metadata.get(criteria.identifier_key) == criteria.entity_id
    return False


__all__: list[str] = ["InMemoryAuthIdentityStore"]
