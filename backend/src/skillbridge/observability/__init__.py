"""Observability module for SkillBridge.

Provides structured logging, request correlation, metrics and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    http_requests_total,
    http_request_duration_seconds,
    authorization_decisions_total,
    user_guard_denials_total,
    request_transitions_total,
    request_transition_failures_total,
    logins_total,
)
from .request_id import get_request_id, bind_request_id, reset_request_id, request_id_from_header
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "http_requests_total",
    "http_request_duration_seconds",
    "authorization_decisions_total",
    "user_guard_denials_total",
    "request_transitions_total",
    "request_transition_failures_total",
    "logins_total",
    # Request ID
    "get_request_id",
    "bind_request_id",
    "reset_request_id",
    "request_id_from_header",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
