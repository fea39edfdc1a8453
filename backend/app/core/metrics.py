"""Prometheus counters for the analysis endpoint (exposed at /metrics)."""

from prometheus_client import Counter

ANALYSES_TOTAL = Counter(
    "health_analyses_total",
    "Completed health analyses by BMI category",
    ["bmi_category"],
)
REJECTIONS_TOTAL = Counter(
    "health_analysis_rejections_total",
    "Analysis requests rejected by input validation",
)
FAILURES_TOTAL = Counter(
    "health_analysis_failures_total",
    "Analysis requests that failed with an unexpected error",
)
