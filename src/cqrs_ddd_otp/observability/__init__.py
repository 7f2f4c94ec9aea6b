"""OTP observability helpers for metrics and tracing.

Both integrate with Prometheus and OpenTelemetry when installed
(``pip install cqrs-ddd-otp[observability]``) and are no-ops otherwise.
"""

from __future__ import annotations

from .metrics import OperationRecord, OtpMetrics
from .tracing import HAS_OTEL, OtpTracing

__all__: list[str] = [
    # Metrics
    "OperationRecord",
    "OtpMetrics",
    # Tracing
    "OtpTracing",
    "HAS_OTEL",
]
