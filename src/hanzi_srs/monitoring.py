"""Monitoring configuration for the flashcard backend."""
from prometheus_client import Counter, start_http_server

# Review metrics
reviews_submitted = Counter(
    "hanzi_srs_reviews_submitted_total",
    "Total number of reviews submitted",
    ["quality"],
)

# Selection metrics
words_selected = Counter(
    "hanzi_srs_words_selected_total",
    "Total number of next-word selections",
    ["source"],  # due, new, random, none
)

# Settings metrics
range_updates = Counter(
    "hanzi_srs_range_updates_total",
    "Total number of study range updates",
)

# Corpus metrics
words_imported = Counter(
    "hanzi_srs_words_imported_total",
    "Total number of words upserted from the corpus file",
)

# Database metrics
db_errors = Counter(
    "hanzi_srs_db_errors_total",
    "Total number of database errors",
    ["operation_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
