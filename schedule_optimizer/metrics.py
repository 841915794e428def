from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors on re-import during test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


OPTIMIZATIONS_TOTAL = get_or_create_metric(
    "schedule_optimizations_total",
    "Total schedule optimization calls",
    Counter,
    labelnames=["status"],
)

OPTIMIZATION_SECONDS = get_or_create_metric(
    "schedule_optimization_seconds",
    "Schedule optimization latency",
    Histogram,
    buckets=[0.1, 0.5, 1, 2, 5, 10],
)

TASKS_SCHEDULED_TOTAL = get_or_create_metric(
    "schedule_tasks_scheduled_total", "Total tasks placed by the optimizer", Counter
)

CONFLICTS_TOTAL = get_or_create_metric(
    "schedule_conflicts_total", "Conflicts reported in optimized schedules", Counter, labelnames=["type"]
)
