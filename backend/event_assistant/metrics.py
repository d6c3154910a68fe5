from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "event_assistant_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "event_assistant_request_latency_seconds", "Latency of HTTP requests", ["method", "path"]
)

# Application-level domain metrics
ANALYZE_COUNT = Counter(
    "event_assistant_analyze_total", "Text extraction requests", ["outcome"]
)
ANALYZE_DURATION = Histogram(
    "event_assistant_analyze_duration_seconds", "Latency of text extraction"
)
CREATE_EVENT_COUNT = Counter(
    "event_assistant_create_event_total", "Calendar event creation requests", ["outcome"]
)
CREATE_EVENT_DURATION = Histogram(
    "event_assistant_create_event_duration_seconds", "Latency of calendar event creation"
)
