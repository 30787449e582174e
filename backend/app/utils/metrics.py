"""
Palette Service Metrics
In-process counters and latency samples, exposed on /metrics.
"""
import time
from collections import Counter, defaultdict, deque
from threading import Lock
from typing import Any, Deque, Dict, Optional

import numpy as np

# Latency samples kept per stage; older samples are discarded
TIMING_WINDOW = 1000


class MetricsCollector:
    """Thread-safe counters and per-stage timings for palette extraction."""

    def __init__(self, timing_window: int = TIMING_WINDOW):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._timings: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=timing_window))
        self._start_time = time.time()

    def increment_counter(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def increment_request_count(self, strategy: str):
        """Count one successful extraction, overall and for its strategy."""
        with self._lock:
            self._counters["palette_requests_total"] += 1
            self._counters[f"palette_strategy_total_{strategy}"] += 1

    def increment_failure_count(self, error_type: str):
        """Count one failed extraction, overall and for its error type."""
        with self._lock:
            self._counters["palette_failed_total"] += 1
            self._counters[f"palette_failed_total_{error_type}"] += 1

    def record_timing(self, stage: str, duration_ms: float):
        """Record one latency sample for a stage (fetch, decode, extract_*, total)."""
        with self._lock:
            self._timings[f"{stage}_duration_ms"].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Count, mean, min, max, p50 and p95 over the retained samples of each stage."""
        with self._lock:
            samples = {name: list(values) for name, values in self._timings.items() if values}

        stats = {}
        for name, values in samples.items():
            arr = np.asarray(values, dtype=np.float64)
            p50, p95 = np.percentile(arr, [50, 95])
            stats[name] = {
                "count": int(arr.size),
                "mean": float(arr.mean()),
                "min": float(arr.min()),
                "max": float(arr.max()),
                "p50": float(p50),
                "p95": float(p95)
            }
        return stats

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": time.time() - self._start_time,
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats()
        }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._start_time = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create the process-wide collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset the process-wide collector (used by tests)."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
