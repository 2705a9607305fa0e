"""Retry policy for failed task attempts.

The limit lives on each task as ``max_retry``:

==============  ==========================================
``max_retry``   behaviour after a failed attempt
==============  ==========================================
``< 0``         retry forever
``0``           single attempt, never retried
``n > 0``       retried until ``retry_count`` reaches ``n``
==============  ==========================================

Example:
    >>> should_retry(retry_count=0, max_retry=3)
    True
    >>> should_retry(retry_count=3, max_retry=3)
    False
    >>> should_retry(retry_count=1000, max_retry=UNLIMITED_RETRIES)
    True
"""

UNLIMITED_RETRIES = -1
NO_RETRY = 0


def should_retry(retry_count: int, max_retry: int) -> bool:
    """Check if another attempt is allowed after a failure."""
    if max_retry < 0:
        return True
    return retry_count < max_retry


def total_attempts(max_retry: int) -> int | None:
    """Upper bound on attempts for ``max_retry``; None when unlimited."""
    if max_retry < 0:
        return None
    return max_retry + 1
