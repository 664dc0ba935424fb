"""
Centralized Prometheus metrics for the Task Insights service.

Exposed on /metrics next to the per-route metrics of prometheus_flask_exporter.
"""

from prometheus_client import Counter, Histogram, Info

service_info = Info('task_insights', 'Task Insights service information')

ANALYSIS_REQUESTS = Counter(
    'task_insights_analysis_requests_total',
    'Analytics requests by analyzer',
    ['analysis_type']
)

ANALYSIS_ERRORS = Counter(
    'task_insights_analysis_errors_total',
    'Failed analytics requests by analyzer and exception type',
    ['analysis_type', 'error_type']
)

ANALYSIS_DURATION = Histogram(
    'task_insights_analysis_duration_seconds',
    'Time spent computing an analytics result',
    ['analysis_type'],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

TASKS_ANALYZED = Histogram(
    'task_insights_snapshot_tasks',
    'Number of task records per analyzed snapshot',
    buckets=(0, 10, 25, 50, 100, 250, 500, 1000)
)

PRODUCTIVITY_SCORE = Histogram(
    'task_insights_productivity_score',
    'Distribution of computed productivity scores',
    buckets=(40, 50, 60, 70, 80, 90, 100)
)
