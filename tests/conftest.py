"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from cqrs_ddd_otp import (
    AuthIdentity,
    InMemoryAuthIdentityStore,
    InMemoryCacheService,
    InMemoryEventEmitter,
    OtpAuthProvider,
    OtpOptions,
    ProviderIdentity,
    resolve_options,
)

# 32 zero bytes, hex encoded: the regression fixture secret
ZERO_SECRET = "00" * 32

# Window [1699999800, 1700000100) for ttl=300
FIXED_TIME = 1700000000.0


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests that require external services",
    )


@pytest.fixture
def cache() -> InMemoryCacheService:
    return InMemoryCacheService()


@pytest.fixture
def emitter() -> InMemoryEventEmitter:
    return InMemoryEventEmitter()


@pytest.fixture
def identity_store() -> InMemoryAuthIdentityStore:
    return InMemoryAuthIdentityStore()


@pytest.fixture
def primary_options() -> OtpOptions:
    return resolve_options({"mode": "main", "digits": 6, "ttl": 300})


@pytest.fixture
def secondary_options() -> OtpOptions:
    return resolve_options({"mode": "secondary", "digits": 6, "ttl": 300})


@pytest.fixture
def primary_provider(
    cache: InMemoryCacheService,
    primary_options: OtpOptions,
    emitter: InMemoryEventEmitter,
) -> OtpAuthProvider:
    return OtpAuthProvider(cache=cache, options=primary_options, event_emitter=emitter)


@pytest.fixture
def secondary_provider(
    cache: InMemoryCacheService,
    secondary_options: OtpOptions,
    emitter: InMemoryEventEmitter,
) -> OtpAuthProvider:
    return OtpAuthProvider(
        cache=cache, options=secondary_options, event_emitter=emitter
    )


@pytest.fixture
def otp_identity(identity_store: InMemoryAuthIdentityStore) -> AuthIdentity:
    """Primary-mode identity whose OTP binding holds the zero secret."""
    return identity_store.add(
        AuthIdentity(
            id="authid_primary",
            provider_identities=[
                ProviderIdentity(
                    entity_id="user@example.com",
                    provider="otp",
                    provider_metadata={"otp_secret": ZERO_SECRET},
                    id="provid_primary",
                )
            ],
        )
    )


@pytest.fixture
def customer_identity(identity_store: InMemoryAuthIdentityStore) -> AuthIdentity:
    """Identity owned by another provider and registered as a customer."""
    return identity_store.add(
        AuthIdentity(
            id="authid_customer",
            provider_identities=[
                ProviderIdentity(
                    entity_id="user@example.com",
                    provider="emailpass",
                    user_metadata={"email": "user@example.com"},
                    id="provid_customer",
                )
            ],
            app_metadata={"customer": "cus_123"},
        )
    )
