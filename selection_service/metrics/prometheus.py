# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metric objects for the selection service.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "selection_requests_total",
    "Total HTTP requests to the selection service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "selection_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "selection_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
TURN_ORDERS_COMPUTED = Counter(
    "selection_turn_orders_computed_total",
    "Total turn orders computed",
    ["algorithm"],
)
TURN_ORDER_DURATION = Histogram(
    "selection_turn_order_duration_seconds",
    "Time to resolve members and compute a turn order",
    ["algorithm"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
UNKNOWN_ALGORITHM_FALLBACKS = Counter(
    "selection_unknown_algorithm_total",
    "Unrecognized algorithm identifiers that fell back to manual order",
)
TURN_ORDER_INVARIANT_VIOLATIONS = Counter(
    "selection_turn_order_invariant_violations_total",
    "Turn orders that were not a permutation of the requested members",
    ["algorithm"],
)
HISTORY_RECORDS_SAVED = Counter(
    "selection_history_records_saved_total",
    "Completed selection processes archived to rotation history",
    ["algorithm"],
)
NOTIFICATIONS_SENT = Counter(
    "selection_notifications_sent_total",
    "Total notifications sent",
    ["channel"],
)
