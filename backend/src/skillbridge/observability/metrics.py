"""Prometheus metrics for SkillBridge.

Defines operational counters for the access pipeline, the user-mutation
guard and the request workflow.
"""

from prometheus_client import Counter, Histogram

# HTTP surface, labelled by route template
http_requests_total = Counter(
    "skillbridge_http_requests_total",
    "HTTP requests served",
    ["method", "route", "status_code"]
)

http_request_duration_seconds = Histogram(
    "skillbridge_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route"]
)

# Access pipeline
authorization_decisions_total = Counter(
    "skillbridge_authorization_decisions_total",
    "Access pipeline decisions",
    ["outcome", "reason"]  # outcome: allow|deny, reason: none|Unauthenticated|InsufficientRole|...
)

# Role-hierarchy guard
user_guard_denials_total = Counter(
    "skillbridge_user_guard_denials_total",
    "User mutations rejected by the role-hierarchy guard",
    ["reason"]
)

# Request workflow
request_transitions_total = Counter(
    "skillbridge_request_transitions_total",
    "Request workflow transitions",
    ["kind", "event"]  # kind: talent|opportunity, event: create|edit|withdraw|accept|decline
)

request_transition_failures_total = Counter(
    "skillbridge_request_transition_failures_total",
    "Rejected request workflow operations",
    ["event", "error"]
)

# Authentication
logins_total = Counter(
    "skillbridge_logins_total",
    "Login attempts",
    ["outcome"]  # outcome: success|failed
)
