from .retry import RetryPolicy, backoff_delay_ms, send_with_retry

__all__ = [
    "RetryPolicy",
    "backoff_delay_ms",
    "send_with_retry",
]
