"""Timing utilities"""

import random
import time


class Clock:
    """Wall clock. Every wait in the bot goes through one of these."""

    def now(self):
        return time.monotonic()

    def sleep(self, seconds):
        if seconds > 0:
            time.sleep(seconds)

    def pause(self, min_ms, max_ms):
        """Random human-like delay"""
        self.sleep(random.uniform(min_ms, max_ms) / 1000)


SYSTEM_CLOCK = Clock()


def human_delay(min_ms=300, max_ms=800, clock=None):
    """Random human-like delay"""
    (clock or SYSTEM_CLOCK).pause(min_ms, max_ms)


def wait_until(predicate, timeout_ms, interval_ms=250, clock=None):
    """
    Poll predicate() until it returns truthy or timeout_ms elapses.

    Returns the last predicate value (falsy on timeout). The predicate is
    always evaluated at least once, and once more right at the deadline.
    """
    clock = clock or SYSTEM_CLOCK
    deadline = clock.now() + timeout_ms / 1000
    while True:
        value = predicate()
        if value:
            return value
        remaining = deadline - clock.now()
        if remaining <= 0:
            return value
        clock.sleep(min(interval_ms / 1000, remaining))
