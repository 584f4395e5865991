"""Verified cell reads and writes through the Name Box"""

import re

import gusto_contractor.config as config
from gusto_contractor.reasoning.normalize import same_value
from gusto_contractor.utils.logging import log
from gusto_contractor.utils.retry import RetryPolicy, retry_until
from gusto_contractor.utils.timing import SYSTEM_CLOCK

_CELL_REF_RE = re.compile(r"^\$?[A-Za-z]{1,3}\$?\d{1,7}$")


class CellNavigationError(Exception):
    """Go-to-cell did not land on the requested cell"""


def cell_ref(column, row):
    return f"{column.upper()}{row}"


def looks_like_address(value):
    return bool(_CELL_REF_RE.match((value or "").strip()))


class CellIO:
    """
    read/write/write_fast against a SheetSurface.

    Every operation starts with escape() so the grid is in ready mode, then
    addresses the cell through go_to(); the landing address is checked and
    navigation is retried once before CellNavigationError.
    """

    def __init__(self, surface, clock=None, policy=None):
        self.surface = surface
        self.clock = clock or SYSTEM_CLOCK
        self.policy = policy or RetryPolicy(max_attempts=3, base_ms=300, multiplier=1.5)

    def _pause(self, key):
        timing = config.TIMING
        self.clock.pause(timing[f"{key}_min"], timing[f"{key}_max"])

    def _focus(self, ref):
        for attempt in (1, 2):
            self.surface.escape()
            self._pause("action")
            self.surface.go_to(ref)
            self._pause("cell_settle")
            landed = self.surface.current_address()
            if same_value(landed, ref):
                return
            log("warn", f"Go to {ref} landed on '{landed}' (attempt {attempt}/2)")
        raise CellNavigationError(f"Could not navigate to cell {ref}")

    def read(self, column, row):
        ref = cell_ref(column, row)
        self._focus(ref)

        value = self.surface.read_display().strip()
        if value and looks_like_address(value) and self._is_echo(value, ref):
            # Formula bar not refreshed yet; Name Box text leaked through
            self._pause("cell_settle")
            value = self.surface.read_display().strip()
            if self._is_echo(value, ref):
                log("warn", f"Cell {ref} only echoed its address, treating as empty")
                value = ""

        log("data", f"Cell {ref} = \"{value}\"")
        return value

    def _is_echo(self, value, ref):
        return same_value(value, ref) or same_value(value, self.surface.current_address())

    def write(self, column, row, text, max_retries=None):
        """
        Replace the cell with text and read it back.

        Returns True once the read-back matches (case-insensitive). After
        max_retries mismatches it logs and returns False; it never raises
        for a failed verification.
        """
        ref = cell_ref(column, row)
        policy = self.policy
        if max_retries is not None:
            # Always at least one attempt
            policy = RetryPolicy(max(1, max_retries), policy.base_ms, policy.multiplier)

        def attempt(n):
            log("data", f"Writing \"{text}\" to cell {ref} (attempt {n}/{policy.max_attempts})")
            try:
                self._type_and_commit(ref, text)
                actual = self.read(column, row)
            except CellNavigationError as e:
                log("warn", f"{e} (attempt {n}/{policy.max_attempts})")
                return False
            if same_value(actual, text):
                log("ok", f"Verified \"{text}\" in {ref}")
                return True
            log(
                "warn",
                f"Write verification failed for {ref}: expected \"{text}\", "
                f"got \"{actual}\" (attempt {n}/{policy.max_attempts})",
            )
            return False

        ok, attempts = retry_until(attempt, policy, self.clock)
        if not ok:
            log("err", f"Failed to write \"{text}\" to {ref} after {attempts} attempts")
        return ok

    def write_fast(self, column, row, text):
        """Type and commit without reading back - callers must not rely on it"""
        ref = cell_ref(column, row)
        log("data", f"Writing \"{text}\" to cell {ref} (unverified)")
        self._type_and_commit(ref, text)

    def _type_and_commit(self, ref, text):
        self._focus(ref)
        self.surface.type_text(text)
        self.surface.commit()
        self._pause("commit_settle")
