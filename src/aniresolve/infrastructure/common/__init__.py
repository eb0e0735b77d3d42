from .rate_limiter import HostRateLimiter, TokenBucket
from .retry_transport import RetryPolicy, RetryTransport

__all__ = ["HostRateLimiter", "RetryPolicy", "RetryTransport", "TokenBucket"]
