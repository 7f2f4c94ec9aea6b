"""OTP configuration.

OtpOptions is built once at startup and passed explicitly into the
provider and the issuance service. There is no process-wide default
lookup: callers that only have a partial mapping use resolve_options().
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import OtpConfigurationError


class OtpMode(str, Enum):
    """How the OTP provider relates to identity ownership.

    PRIMARY: OTP is the main auth provider; it creates identities and stores
        a per-identity secret.
    SECONDARY: OTP is an extra factor on identities owned by another
        provider (e.g. email/password).
    """

    PRIMARY = "main"
    SECONDARY = "secondary"


class SecondaryKeySource(str, Enum):
    """Where secondary mode takes its HMAC key from.

    IDENTITY_ID: the internal identity id, no stored secret.
    EPHEMERAL: a fresh random secret per issued code, never stored.
    """

    IDENTITY_ID = "identity_id"
    EPHEMERAL = "ephemeral"


class OtpOptions(BaseModel):
    """Validated OTP options.

    Attributes:
        digits: Number of digits in a code (1-9).
        ttl: Code time-to-live in seconds. Also the generation window.
        mode: Primary or secondary mode.
        identifier_key: Attribute used as lookup identifier in secondary mode.
        secondary_key_source: HMAC key policy for secondary mode.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    digits: int = Field(default=6, ge=1, le=9)
    ttl: int = Field(default=300, gt=0)  # 5 minutes
    mode: OtpMode = OtpMode.PRIMARY
    identifier_key: str = Field(
        default="email",
        min_length=1,
        validation_alias=AliasChoices("identifier_key", "identifierKey"),
    )
    secondary_key_source: SecondaryKeySource = Field(
        default=SecondaryKeySource.IDENTITY_ID,
        validation_alias=AliasChoices("secondary_key_source", "secondaryKeySource"),
    )

    @field_validator("mode", mode="before")
    @classmethod
    def _accept_primary_alias(cls, value: Any) -> Any:
        if isinstance(value, str) and value.lower() == "primary":
            return OtpMode.PRIMARY
        return value

    @property
    def is_primary(self) -> bool:
        return self.mode is OtpMode.PRIMARY


def resolve_options(overrides: Mapping[str, Any] | None = None) -> OtpOptions:
    """Merge caller-supplied options over the defaults and validate them.

    Keys may use either snake_case or the camelCase plugin spelling
    (``identifierKey``). ``None`` values are ignored so that partially
    filled settings objects fall back to defaults.

    Raises:
        OtpConfigurationError: If any option is invalid.
    """
    data = {k: v for k, v in (overrides or {}).items() if v is not None}
    try:
        return OtpOptions.model_validate(data)
    except PydanticValidationError as exc:
        raise OtpConfigurationError.from_pydantic(exc) from exc


__all__: list[str] = [
    "OtpMode",
    "SecondaryKeySource",
    "OtpOptions",
    "resolve_options",
]
