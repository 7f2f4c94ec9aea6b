"""OTP metrics helpers for Prometheus integration.

Usage:
    ```python
    from cqrs_ddd_otp.observability import OtpMetrics

    with OtpMetrics.operation("authenticate", mode="main") as record:
        response = await provider.authenticate(data, store)
        record.set_response(response)
    ```
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Generator

    from ..models import AuthenticationResponse


@dataclass
class OperationRecord:
    """Mutable outcome of a timed operation.

    ``result`` defaults to ``success``; an exception escaping the block
    turns it into ``error``.
    """

    result: str = "success"

    def set_response(self, response: AuthenticationResponse) -> None:
        if response.success:
            self.result = "success"
        elif response.error_code is not None:
            self.result = response.error_code.value
        else:
            self.result = "failure"


class _OtpMetricsRegistry:
    """Registry for OTP Prometheus metrics.

    Lazily initializes Prometheus metrics on first use.
    """

    def __init__(self) -> None:
        self._histogram: Any = None
        self._counter: Any = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return

        try:
            from prometheus_client import Counter, Histogram

            self._histogram = Histogram(
                "otp_operation_duration_seconds",
                "OTP operation duration",
                ["operation", "mode"],
            )
            self._counter = Counter(
                "otp_operations_total",
                "OTP operation count",
                ["operation", "mode", "result"],
            )
        except ImportError:
            _logger.debug("prometheus_client not available, metrics disabled")

        self._initialized = True

    @property
    def histogram(self) -> Any:
        self._ensure_initialized()
        return self._histogram

    @property
    def counter(self) -> Any:
        self._ensure_initialized()
        return self._counter


# Global registry instance
_registry = _OtpMetricsRegistry()


class OtpMetrics:
    """OTP metrics helpers.

    Integrates with Prometheus when available, no-op otherwise.
    """

    @staticmethod
    @contextmanager
    def operation(
        operation: str,
        *,
        mode: str = "unknown",
    ) -> Generator[OperationRecord, None, None]:
        """Context manager for timing an OTP operation.

        Args:
            operation: Operation name (register, authenticate, verify, issue).
            mode: OTP mode value.

        Yields:
            OperationRecord the caller may update with the outcome.
        """
        record = OperationRecord()
        start = time.monotonic()

        try:
            yield record
        except Exception:
            record.result = "error"
            raise
        finally:
            duration = time.monotonic() - start

            if _registry.histogram:
                try:
                    _registry.histogram.labels(
                        operation=operation,
                        mode=mode,
                    ).observe(duration)
                except Exception:
                    _logger.debug("Failed to record histogram")

            if _registry.counter:
                try:
                    _registry.counter.labels(
                        operation=operation,
                        mode=mode,
                        result=record.result,
                    ).inc()
                except Exception:
                    _logger.debug("Failed to record counter")


__all__: list[str] = [
    "OperationRecord",
    "OtpMetrics",
]
