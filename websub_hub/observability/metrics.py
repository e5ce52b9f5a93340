"""Prometheus metrics for the hub.

Tracks verification outcomes, publish outcomes and per-subscriber deliveries.
"""

from prometheus_client import Counter, Gauge, Histogram

VERIFICATIONS = Counter(
    "websub_hub_verifications_total",
    "Intent verification attempts",
    labelnames=["mode", "outcome"],
)

PUBLISHES = Counter(
    "websub_hub_publishes_total",
    "Publish requests by outcome",
    labelnames=["outcome"],
)

DELIVERIES = Counter(
    "websub_hub_deliveries_total",
    "Content deliveries to subscriber callbacks",
    labelnames=["outcome"],
)

DELIVERY_LATENCY = Histogram(
    "websub_hub_delivery_latency_seconds",
    "Latency of a single delivery including retries",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

DELIVERIES_IN_FLIGHT = Gauge(
    "websub_hub_deliveries_in_flight",
    "Deliveries dispatched but not yet finished",
)
