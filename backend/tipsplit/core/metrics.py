"""
Prometheus metrics for the calculator, its HTTP surface and its database
"""
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Histogram,
                               generate_latest)

# HTTP; errors are the 4xx/5xx values of status_code
http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)
http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

# Database, labelled by SQL verb and table
db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation', 'table']
)
db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation', 'table'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

# Calculator
calculations_created_total = Counter(
    'calculations_created_total',
    'Total number of stored tip calculations'
)
calculation_validation_failures_total = Counter(
    'calculation_validation_failures_total',
    'Rejected calculation submissions, one increment per invalid field',
    ['field']
)
admin_logins_total = Counter(
    'admin_logins_total',
    'Admin login attempts',
    ['result']  # success | failure
)


def get_metrics() -> bytes:
    """Render all registered metrics in Prometheus text format"""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
