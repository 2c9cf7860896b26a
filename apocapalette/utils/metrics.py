"""
Apocapalette Metrics
Request counters and latency samples for the /metrics endpoint.

Only the API layer records here; the token, contrast and mood services never
touch this module. Latency samples per endpoint are kept in a ring buffer of
config.METRICS_MAX_SAMPLES entries, so a long-running process reports
percentiles over its most recent requests.
"""
import time
from collections import Counter, deque
from threading import Lock
from typing import Any, Deque, Dict, Optional

import numpy as np

from apocapalette.config import config


class MetricsCollector:
    """Thread-safe counters and bounded latency windows."""

    def __init__(self, max_samples: Optional[int] = None):
        self.max_samples = max_samples or config.METRICS_MAX_SAMPLES
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._latencies: Dict[str, Deque[float]] = {}
        self._started = time.time()

    def record_request(self, endpoint: str, elapsed_ms: float):
        """Count one served request and keep its latency."""
        with self._lock:
            self._counters["requests_total"] += 1
            self._counters[f"requests_total_{endpoint}"] += 1
            window = self._latencies.get(endpoint)
            if window is None:
                window = self._latencies[endpoint] = deque(maxlen=self.max_samples)
            window.append(elapsed_ms)

    def record_failure(self, kind: str):
        """Count one rejected or failed request by error kind."""
        with self._lock:
            self._counters[f"failed_total_{kind}"] += 1

    def record_contrast_fallback(self):
        """Count one contrast walk that ended on black or white."""
        with self._lock:
            self._counters["contrast_fallback_total"] += 1

    def record_relaxed_slots(self, count: int):
        """Count mood slots that were placed without full hue separation."""
        if count <= 0:
            return
        with self._lock:
            self._counters["mood_relaxed_slots_total"] += count

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Latency summary per endpoint over the retained window.

        Returns:
            Mapping of "<endpoint>_duration_ms" to count, mean, min, max,
            p50 and p95 in milliseconds
        """
        with self._lock:
            windows = {endpoint: np.array(samples) for endpoint, samples in self._latencies.items() if samples}

        stats = {}
        for endpoint, samples in windows.items():
            p50, p95 = np.percentile(samples, [50, 95])
            stats[f"{endpoint}_duration_ms"] = {
                "count": int(samples.size),
                "mean": float(samples.mean()),
                "min": float(samples.min()),
                "max": float(samples.max()),
                "p50": float(p50),
                "p95": float(p95),
            }
        return stats

    def get_summary(self) -> Dict[str, Any]:
        """Payload served by GET /metrics."""
        return {
            "uptime_seconds": time.time() - self._started,
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
        }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._latencies.clear()
            self._started = time.time()


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics_instance() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    if _metrics is not None:
        _metrics.reset()
