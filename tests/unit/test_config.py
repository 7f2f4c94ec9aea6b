"""Tests for OTP options."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cqrs_ddd_otp.config import (
    OtpMode,
    OtpOptions,
    SecondaryKeySource,
    resolve_options,
)
from cqrs_ddd_otp.exceptions import OtpConfigurationError, OtpError


class TestOtpOptions:
    def test_defaults(self) -> None:
        options = resolve_options()

        assert options.digits == 6
        assert options.ttl == 300
        assert options.mode is OtpMode.PRIMARY
        assert options.identifier_key == "email"
        assert options.secondary_key_source is SecondaryKeySource.IDENTITY_ID
        assert options.is_primary

    def test_overrides_merge_over_defaults(self) -> None:
        options = resolve_options({"digits": 8, "mode": "secondary"})

        assert options.digits == 8
        assert options.ttl == 300
        assert options.mode is OtpMode.SECONDARY
        assert not options.is_primary

    def test_none_values_fall_back_to_defaults(self) -> None:
        options = resolve_options({"digits": None, "ttl": None})

        assert options.digits == 6
        assert options.ttl == 300

    def test_primary_alias(self) -> None:
        assert resolve_options({"mode": "primary"}).mode is OtpMode.PRIMARY
        assert resolve_options({"mode": "main"}).mode is OtpMode.PRIMARY

    def test_camel_case_keys(self) -> None:
        options = resolve_options(
            {"identifierKey": "phone", "secondaryKeySource": "ephemeral"}
        )

        assert options.identifier_key == "phone"
        assert options.secondary_key_source is SecondaryKeySource.EPHEMERAL

    def test_options_are_frozen(self) -> None:
        options = OtpOptions()

        with pytest.raises(ValidationError):
            options.digits = 8  # type: ignore[misc]


class TestInvalidOptions:
    @pytest.mark.parametrize("digits", [0, 10])
    def test_digits_out_of_range(self, digits: int) -> None:
        with pytest.raises(OtpConfigurationError) as exc_info:
            resolve_options({"digits": digits})

        assert "digits" in exc_info.value.errors

    def test_non_positive_ttl(self) -> None:
        with pytest.raises(OtpConfigurationError) as exc_info:
            resolve_options({"ttl": 0})

        assert "ttl" in exc_info.value.errors

    def test_unknown_mode(self) -> None:
        with pytest.raises(OtpConfigurationError) as exc_info:
            resolve_options({"mode": "tertiary"})

        assert "mode" in exc_info.value.errors

    def test_unknown_option(self) -> None:
        with pytest.raises(OtpConfigurationError) as exc_info:
            resolve_options({"length": 6})

        assert "length" in exc_info.value.errors

    def test_configuration_error_is_otp_error(self) -> None:
        with pytest.raises(OtpError):
            resolve_options({"ttl": -5})
