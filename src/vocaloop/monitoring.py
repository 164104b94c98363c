"""Monitoring configuration for VocaLoop."""
from prometheus_client import Counter, Histogram, start_http_server

# Study metrics
answers_total = Counter(
    "vocaloop_answers_total",
    "Total number of scored quiz answers",
    ["quiz_type", "outcome"],
)

study_breaks = Counter(
    "vocaloop_study_breaks_total",
    "Number of times a study break was suggested",
)

sessions_started = Counter(
    "vocaloop_sessions_started_total",
    "Total number of study sessions started",
    ["quiz_type"],
)

sessions_completed = Counter(
    "vocaloop_sessions_completed_total",
    "Total number of study sessions answered to the end",
    ["quiz_type"],
)

learning_rate_delta = Histogram(
    "vocaloop_learning_rate_delta",
    "Change of a word's learning rate per scored answer",
    ["outcome"],
    buckets=[-30, -20, -10, -5, 0, 5, 10, 15, 20, 25],
)

# Word management metrics
words_added = Counter(
    "vocaloop_words_added_total",
    "Total number of words added",
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
