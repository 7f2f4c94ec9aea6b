"""OTP tracing helpers for OpenTelemetry integration.

Usage:
    ```python
    from cqrs_ddd_otp.observability import OtpTracing

    with OtpTracing.span("verify", mode="main") as span:
        valid = await provider.verify(identity_id, code)
    ```
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

_logger = logging.getLogger(__name__)

# Try to import OpenTelemetry (optional dependency)
try:
    from opentelemetry import trace
    from opentelemetry.trace import Status, StatusCode

    HAS_OTEL = True
except ImportError:
    HAS_OTEL = False
    trace = None
    Status = None
    StatusCode = None


class _TracerRegistry:
    """Lazy tracer initialization."""

    def __init__(self) -> None:
        self._tracer = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        if HAS_OTEL and trace:
            self._tracer = trace.get_tracer("cqrs-ddd-otp")
        self._initialized = True

    @property
    def tracer(self) -> Any:
        self._ensure_initialized()
        return self._tracer


_registry = _TracerRegistry()


class OtpTracing:
    """OTP tracing helpers for OpenTelemetry.

    Span attributes never include codes or secrets.
    """

    @staticmethod
    @contextmanager
    def span(
        operation: str,
        *,
        mode: str = "unknown",
        attributes: dict[str, Any] | None = None,
    ) -> Generator[Any, None, None]:
        """Context manager for a traced OTP operation.

        Args:
            operation: Operation name (register, authenticate, issue).
            mode: OTP mode value.
            attributes: Additional span attributes.

        Yields:
            Span object or None if tracing disabled.
        """
        tracer = _registry.tracer
        if not tracer:
            yield None
            return

        with tracer.start_as_current_span(f"otp.{operation}") as span:
            try:
                span.set_attribute("otp.operation", operation)
                span.set_attribute("otp.mode", mode)

                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, str(value))

                yield span

            except Exception as e:
                if Status and StatusCode:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                raise

    @staticmethod
    def set_outcome(span: Any, success: bool, error_code: str | None = None) -> None:
        """Record the operation outcome on a span."""
        if not span:
            return
        span.set_attribute("otp.success", success)
        if error_code:
            span.set_attribute("otp.error_code", error_code)


__all__: list[str] = [
    "OtpTracing",
    "HAS_OTEL",
]
