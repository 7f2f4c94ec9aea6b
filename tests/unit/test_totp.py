"""Tests for time-windowed code generation and secret handling."""

from __future__ import annotations

import pytest

from cqrs_ddd_otp.exceptions import InvalidSecretError
from cqrs_ddd_otp.totp import (
    decode_otp_secret,
    generate_otp_secret,
    generate_totp,
    window_counter,
)

ZERO_KEY = bytes(32)
FIXED_TIME = 1700000000.0


class TestWindowCounter:
    def test_counter_for_fixed_time(self) -> None:
        assert window_counter(300, at=FIXED_TIME) == 5666666

    def test_counter_boundaries(self) -> None:
        assert window_counter(300, at=1699999800.0) == 5666666
        assert window_counter(300, at=1700000099.999) == 5666666
        assert window_counter(300, at=1700000100.0) == 5666667

    @pytest.mark.parametrize("window", [0, -1])
    def test_non_positive_window_raises(self, window: int) -> None:
        with pytest.raises(ValueError, match="window_seconds"):
            window_counter(window, at=FIXED_TIME)


class TestGenerateTotp:
    """Test code derivation."""

    def test_regression_fixture(self) -> None:
        """Zero secret, 6 digits, 300s window at t=1700000000."""
        assert generate_totp(ZERO_KEY, 300, 6, at=FIXED_TIME) == "643084"

    def test_regression_fixture_eight_digits(self) -> None:
        assert generate_totp(ZERO_KEY, 300, 8, at=FIXED_TIME) == "77643084"

    def test_next_window_regression_fixture(self) -> None:
        assert generate_totp(ZERO_KEY, 300, 6, at=1700000100.0) == "140952"
        assert generate_totp(ZERO_KEY, 300, 8, at=1700000100.0) == "29140952"

    @pytest.mark.parametrize("digits", range(1, 10))
    def test_code_has_exact_digit_count(self, digits: int) -> None:
        code = generate_totp(ZERO_KEY, 300, digits, at=FIXED_TIME)

        assert len(code) == digits
        assert code.isdigit()

    def test_shorter_code_is_suffix_of_longer(self) -> None:
        """Codes are the low decimal digits of the same truncated value."""
        code9 = generate_totp(ZERO_KEY, 300, 9, at=FIXED_TIME)
        code6 = generate_totp(ZERO_KEY, 300, 6, at=FIXED_TIME)

        assert code9.endswith(code6)

    def test_constant_within_window(self) -> None:
        start = generate_totp(ZERO_KEY, 300, 6, at=1699999800.0)
        end = generate_totp(ZERO_KEY, 300, 6, at=1700000099.0)

        assert start == end == "643084"

    def test_differs_across_adjacent_windows(self) -> None:
        assert generate_totp(ZERO_KEY, 300, 6, at=FIXED_TIME) != generate_totp(
            ZERO_KEY, 300, 6, at=FIXED_TIME + 300
        )

    def test_differs_across_secrets(self) -> None:
        other = bytes.fromhex("01" * 32)

        assert generate_totp(ZERO_KEY, 300, 6, at=FIXED_TIME) != generate_totp(
            other, 300, 6, at=FIXED_TIME
        )

    def test_defaults_to_current_time(self) -> None:
        code = generate_totp(ZERO_KEY, 300, 6)
        assert len(code) == 6

    @pytest.mark.parametrize("digits", [0, 10, -3])
    def test_digits_out_of_range_raises(self, digits: int) -> None:
        with pytest.raises(ValueError, match="digits"):
            generate_totp(ZERO_KEY, 300, digits, at=FIXED_TIME)


class TestSecrets:
    """Test secret generation and decoding."""

    def test_generated_secret_is_64_hex_chars(self) -> None:
        secret = generate_otp_secret()

        assert len(secret) == 64
        assert len(bytes.fromhex(secret)) == 32

    def test_generated_secrets_are_unique(self) -> None:
        secrets = {generate_otp_secret() for _ in range(50)}
        assert len(secrets) == 50

    def test_decode_round_trip(self) -> None:
        assert decode_otp_secret("00" * 32) == ZERO_KEY

    @pytest.mark.parametrize("value", [None, ""])
    def test_decode_missing_secret_raises(self, value: str | None) -> None:
        with pytest.raises(InvalidSecretError, match="missing"):
            decode_otp_secret(value)

    def test_decode_non_hex_raises(self) -> None:
        with pytest.raises(InvalidSecretError, match="not valid hex"):
            decode_otp_secret("test-secret")
