"""Prometheus 메트릭"""
import time
from contextlib import contextmanager
from prometheus_client import Counter, Histogram

REQUESTS_TOTAL = Counter(
    "filepress_requests_total",
    "처리 요청 수",
    ["operation", "outcome"],
)

PROCESSING_SECONDS = Histogram(
    "filepress_processing_seconds",
    "백엔드 처리 시간",
    ["operation"],
)

BYTES_SAVED_TOTAL = Counter(
    "filepress_bytes_saved_total",
    "압축으로 절약된 바이트",
    ["operation"],
)


def record_outcome(operation: str, outcome: str):
    """요청 결과 기록 (success / client_error / error)"""
    REQUESTS_TOTAL.labels(operation=operation, outcome=outcome).inc()


def record_saved_bytes(operation: str, original_size: int, result_size: int):
    saved = original_size - result_size
    if saved > 0:
        BYTES_SAVED_TOTAL.labels(operation=operation).inc(saved)


@contextmanager
def track_processing(operation: str):
    """처리 시간 측정"""
    started = time.perf_counter()
    try:
        yield
    finally:
        PROCESSING_SECONDS.labels(operation=operation).observe(time.perf_counter() - started)
