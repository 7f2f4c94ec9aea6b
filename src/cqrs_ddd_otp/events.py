"""Events emitted by the OTP provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .ports import IEventEmitter

logger = logging.getLogger(__name__)


class OtpEvents(Enum):
    """OTP event names.

    Event naming follows the pattern: `otp.<action>`
    """

    OTP_GENERATED = "otp.generated"


@dataclass(frozen=True)
class OtpGeneratedEvent:
    """Payload of ``otp.generated``.

    Subscribers deliver ``code`` to ``identifier`` over their channel.

    Attributes:
        identifier: The external identifier the code was requested for.
        code: The issued code.
    """

    identifier: str
    code: str

    def to_payload(self) -> dict[str, Any]:
        return {"identifier": self.identifier, "code": self.code}


@dataclass
class EmittedEvent:
    """Record of an emitted event for test assertions."""

    name: str
    payload: dict[str, Any]


class InMemoryEventEmitter(IEventEmitter):
    """
    Test double (Fake) that stores emitted events in a list for assertions.
    """

    def __init__(self) -> None:
        self.emitted: list[EmittedEvent] = []

    async def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        logger.debug("Recorded event %s", event_name)
        self.emitted.append(EmittedEvent(event_name, dict(payload)))

    def events_named(self, event_name: str) -> list[EmittedEvent]:
        return [e for e in self.emitted if e.name == event_name]

    def clear(self) -> None:
        self.emitted.clear()


__all__: list[str] = [
    "OtpEvents",
    "OtpGeneratedEvent",
    "EmittedEvent",
    "InMemoryEventEmitter",
]
