"""Prometheus metrics for TokenLens.

Defines operational counters exposed on /metrics.
"""

from prometheus_client import Counter

auth_logins_total = Counter(
    "tokenlens_auth_logins_total",
    "Login attempts",
    ["outcome"]  # success|failure
)

token_settings_upserts_total = Counter(
    "tokenlens_token_settings_upserts_total",
    "Token settings writes",
    ["operation"]  # created|updated
)

plan_reorders_total = Counter(
    "tokenlens_plan_reorders_total",
    "Plan reorder requests",
    ["outcome"]  # success|invalid|error
)

tenant_access_denied_total = Counter(
    "tokenlens_tenant_access_denied_total",
    "Tenant-scoped lookups that returned 404",
    ["resource"]
)
