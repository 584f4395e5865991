"""Bounded retry with backoff"""

from gusto_contractor.utils.timing import SYSTEM_CLOCK


class RetryPolicy:
    """Max attempts plus an exponential backoff schedule between them"""

    def __init__(self, max_attempts=3, base_ms=300, multiplier=1.5):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.base_ms = base_ms
        self.multiplier = multiplier

    def backoff_ms(self, attempt):
        """Delay after a failed attempt (1-based)"""
        return int(self.base_ms * (self.multiplier ** (attempt - 1)))

    def schedule(self):
        """Delays slept between attempts, in order"""
        return [self.backoff_ms(a) for a in range(1, self.max_attempts)]

    def __repr__(self):
        return (
            f"RetryPolicy(max_attempts={self.max_attempts}, "
            f"base_ms={self.base_ms}, multiplier={self.multiplier})"
        )


def retry_until(action, policy, clock=None):
    """
    Run action(attempt) until it returns True or the policy is exhausted.

    Exceptions raised by action propagate; callers that want a failed
    attempt to count as a miss should catch inside the action.

    Returns: (succeeded: bool, attempts: int)
    """
    clock = clock or SYSTEM_CLOCK
    for attempt in range(1, policy.max_attempts + 1):
        if action(attempt):
            return (True, attempt)
        if attempt < policy.max_attempts:
            clock.sleep(policy.backoff_ms(attempt) / 1000)
    return (False, policy.max_attempts)
