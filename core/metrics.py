"""
Prometheus metrics for the license validation service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Validation metrics
validations_total = Counter(
    "license_validations_total",
    "Total license validation attempts",
    ["outcome", "reason"],
)

capacity_rejections_total = Counter(
    "license_capacity_rejections_total",
    "Validations or identity patches rejected by the capacity policy",
    ["kind"],
)

# License lifecycle metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["product_id"],
)

licenses_renewed_total = Counter(
    "licenses_renewed_total",
    "Total licenses renewed",
)

license_status_changes_total = Counter(
    "license_status_changes_total",
    "Total administrative license status overwrites",
    ["status"],
)

licenses_deleted_total = Counter(
    "licenses_deleted_total",
    "Total licenses deleted",
)

blacklist_changes_total = Counter(
    "blacklist_changes_total",
    "Total blacklist modifications",
    ["action"],
)

# Record store metrics
record_store_transform_duration_seconds = Histogram(
    "record_store_transform_duration_seconds",
    "Time spent inside an atomic collection transform",
    ["collection"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Outbound integration metrics
webhook_deliveries_total = Counter(
    "webhook_deliveries_total",
    "Total webhook notification attempts",
    ["result"],
)

geolocation_lookups_total = Counter(
    "geolocation_lookups_total",
    "Total IP geolocation lookups",
    ["result"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
