"""
Prometheus metrics for reconciliation and statement rendering.
"""

from prometheus_client import REGISTRY, Counter, Histogram


def _existing(name: str):
    return REGISTRY._names_to_collectors.get(name)


try:
    RECORDS_DIFFED = Counter(
        "tablesync_records_diffed_total",
        "Records classified by reconciliation",
        ["table", "kind"],  # added, deleted, edited, unchanged
        registry=REGISTRY
    )
except ValueError:
    # Metric already registered, get existing one
    RECORDS_DIFFED = _existing("tablesync_records_diffed_total")

try:
    RECONCILE_TIME = Histogram(
        "tablesync_reconcile_seconds",
        "Time to reconcile two record collections",
        ["table"],
        buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300],
        registry=REGISTRY
    )
except ValueError:
    RECONCILE_TIME = _existing("tablesync_reconcile_seconds")

try:
    RENDER_TIME = Histogram(
        "tablesync_render_seconds",
        "Time to render a diff result into statements",
        ["table", "dialect"],
        buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5],
        registry=REGISTRY
    )
except ValueError:
    RENDER_TIME = _existing("tablesync_render_seconds")

try:
    STATEMENTS_RENDERED = Counter(
        "tablesync_statements_rendered_total",
        "Statements emitted by the renderer",
        ["table", "dialect", "statement"],  # insert, delete, update
        registry=REGISTRY
    )
except ValueError:
    STATEMENTS_RENDERED = _existing("tablesync_statements_rendered_total")
