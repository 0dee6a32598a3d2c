"""Prometheus metrics for command throughput, internal errors and reply delivery"""

from prometheus_client import Counter, Histogram

# Command metrics
command_counter = Counter(
    "ledger_bot_commands_total",
    "Commands processed",
    ["command", "outcome"],  # outcome: ok | rejected | error
)

internal_error_counter = Counter(
    "ledger_bot_internal_errors_total",
    "Persistence or unexpected failures while handling a command",
    ["operation"],
)

# Reply delivery metrics
reply_latency_histogram = Histogram(
    "telegram_reply_latency_seconds",
    "Bot API sendMessage response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

reply_failure_counter = Counter(
    "telegram_reply_failures_total",
    "Failed reply deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)

KNOWN_COMMANDS = frozenset({
    "ingreso",
    "gasto",
    "balance",
    "filtro_balance",
    "filtro_tx",
    "cierre",
    "tarjeta",
    "tarjeta_balance",
})


def record_command(command: str, outcome: str) -> None:
    """Count a processed command; free-text commands collapse into one label"""
    label = command if command in KNOWN_COMMANDS else "unknown"
    command_counter.labels(command=label, outcome=outcome).inc()
