from prometheus_client import Counter, Histogram

# status is the HTTP status code, or "error" when no response was received
REQUESTS = Counter(
    "objstore_requests_total",
    "Total object storage requests",
    ["operation", "status"],
)

LATENCY = Histogram(
    "objstore_request_duration_seconds",
    "Object storage request latency in seconds",
    ["operation"],
)
