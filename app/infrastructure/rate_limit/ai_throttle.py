import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict

logger = logging.getLogger(__name__)

# Spacing entries are pruned once the table grows past this size
MAX_TRACKED_KEYS = 1024


class AICallThrottle:
    """Spaces out a caller's AI calls and backs off after provider rate limits.

    Calls sharing a ``key`` start at least ``min_interval`` seconds apart;
    different keys never wait on each other. Rate limits are counted for the
    whole process because they apply to the shared API keys: after
    ``max_rate_limit_hits`` of them the AI path is skipped for
    ``cooldown_seconds``, and a successful call resets the count.
    """

    def __init__(
        self,
        min_interval: float,
        max_rate_limit_hits: int,
        cooldown_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.min_interval = min_interval
        self.max_rate_limit_hits = max_rate_limit_hits
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._sleep = sleep
        self._next_slot: Dict[str, float] = {}
        self._hits = 0
        self._cooldown_until = 0.0

    @property
    def rate_limit_hits(self) -> int:
        return self._hits

    def available(self) -> bool:
        if self._hits < self.max_rate_limit_hits:
            return True
        if self._clock() < self._cooldown_until:
            return False
        logger.info("AI cool-down elapsed, re-enabling AI calls")
        self._hits = 0
        return True

    async def wait_turn(self, key: str) -> None:
        now = self._clock()
        if len(self._next_slot) > MAX_TRACKED_KEYS:
            self._prune(now)
        # The slot is reserved before sleeping so a concurrent call with the same key queues behind it
        start = max(now, self._next_slot.get(key, now))
        self._next_slot[key] = start + self.min_interval
        remaining = start - now
        if remaining > 0:
            logger.debug(f"Waiting {remaining:.1f}s before next AI call for {key}")
            await self._sleep(remaining)

    def _prune(self, now: float) -> None:
        self._next_slot = {k: slot for k, slot in self._next_slot.items() if slot > now}

    def record_success(self) -> None:
        self._hits = 0

    def record_rate_limit(self) -> None:
        self._hits += 1
        if self._hits >= self.max_rate_limit_hits:
            self._cooldown_until = self._clock() + self.cooldown_seconds
            logger.warning(f"AI rate limit reached, skipping AI for {self.cooldown_seconds:.0f}s")
