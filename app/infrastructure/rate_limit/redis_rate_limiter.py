import redis

from ...application.ports.rate_limiter import RateLimiter


class RedisRateLimiter(RateLimiter):
    """Fixed-window counter shared by every worker that points at the same Redis."""

    def __init__(self, url: str, prefix: str = "irepair:rl:") -> None:
        self.client = redis.Redis.from_url(url)
        self.prefix = prefix

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        counter = f"{self.prefix}{key}:{window_seconds}"
        pipe = self.client.pipeline()
        # Only the first hit of a window creates the key and its expiry
        pipe.set(counter, 0, ex=window_seconds, nx=True)
        pipe.incr(counter, 1)
        _, count = pipe.execute()
        return int(count) <= int(max_requests)
