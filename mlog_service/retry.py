from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Type, TypeVar

import aiohttp

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_delay_seconds: float = 0.5
    max_delay_seconds: float = 5.0
    backoff_multiplier: float = 2.0
    jitter_ratio: float = 0.2


# 只重试网络层瞬时错误；上游返回的 4xx/5xx 由调用方处理
_DEFAULT_RETRIABLE: tuple[Type[BaseException], ...] = (
    asyncio.TimeoutError,
    TimeoutError,
    aiohttp.ClientConnectionError,
    ConnectionError,
)


def is_retriable_exception(exc: BaseException) -> bool:
    return isinstance(exc, _DEFAULT_RETRIABLE)


async def async_retry(
    func: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    should_retry: Optional[Callable[[BaseException], bool]] = None,
) -> T:
    if policy.max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")

    predicate = should_retry or is_retriable_exception
    attempt = 1
    delay = float(policy.initial_delay_seconds)

    while True:
        try:
            return await func()
        except Exception as exc:
            if attempt >= policy.max_attempts or not predicate(exc):
                raise

            jitter = delay * float(policy.jitter_ratio)
            sleep_for = max(0.0, min(float(policy.max_delay_seconds), delay + random.uniform(-jitter, jitter)))
            logger.warning("Attempt %d/%d failed (%s), retrying in %.2fs", attempt, policy.max_attempts, exc, sleep_for)
            await asyncio.sleep(sleep_for)

            attempt += 1
            delay = min(float(policy.max_delay_seconds), delay * float(policy.backoff_multiplier))
