"""Prometheus metric inventory.

Every metric the service exports is declared here; the modules that own the
behaviour import and update them.

  Counter    only goes up (requests served, registrations attempted)
  Gauge      goes up and down (requests in flight)
  Histogram  bucketed observations, from which Prometheus derives
           percentiles (request latency, hashing cost)

Prometheus scrapes GET /metrics; see accounts_service/api/metrics_endpoint.py.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP (MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Argon2 dominates /accounts and /sessions, so the upper buckets matter
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Account operations
# ---------------------------------------------------------------------------

ACCOUNT_REGISTRATIONS = Counter(
    "account_registrations_total",
    "Registration attempts by outcome",
    ["outcome"],  # created | already_exists
)

SESSION_ATTEMPTS = Counter(
    "session_attempts_total",
    "Credential authentication attempts by outcome",
    ["outcome"],  # issued | invalid_credentials
)

PASSWORD_HASH_SECONDS = Histogram(
    "password_hash_seconds",
    "Time spent computing Argon2 password hashes",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
