import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram


TRANSFERS_TOTAL = Counter(
    "transfers_total",
    "Total number of transfer transactions",
    ["outcome"],
)

TRANSACTION_ROLLBACKS_TOTAL = Counter(
    "transaction_rollbacks_total",
    "Total number of rolled back transactions",
    ["reason"],
)

TRANSFER_DURATION_SECONDS = Histogram(
    "transfer_duration_seconds",
    "Transfer transaction duration",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


P = ParamSpec("P")
R = TypeVar("R")


def track_transfer_duration(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            duration = time.perf_counter() - start
            TRANSFER_DURATION_SECONDS.observe(duration)

    return wrapper
