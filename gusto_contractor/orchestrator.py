"""
Row loops for the submission run and the verification run.

Rows are handled one at a time in ascending order against a single
browser: the sheet tab is brought forward for every read/write and the
Gusto tab for every workflow or lookup. A row that fails is recorded and
the loop moves on; nothing here aborts a batch.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import gusto_contractor.config as config
from gusto_contractor.models import Verdict
from gusto_contractor.reasoning.names import parse_full_name
from gusto_contractor.utils.logging import TIMEZONE, format_elapsed_time, log, log_result
from gusto_contractor.utils.timing import SYSTEM_CLOCK

# Row outcomes
CACHED = "CACHED"
SKIPPED = "SKIPPED"
EMPTY = "EMPTY"
DRY_RUN = "DRY_RUN"
SUCCESS = "SUCCESS"
FAILED = "FAILED"
WRITE_FAILED = "WRITE_FAILED"
ERROR = "ERROR"
VERIFIED_YES = "YES"
VERIFIED_NO = "NO"
NOT_FOUND = "NOT_FOUND"


@dataclass
class RunOptions:
    start_row: int = 2
    end_row: Optional[int] = None
    dry_run: bool = False
    use_cache: bool = True

    @classmethod
    def single(cls, row, **kwargs):
        return cls(start_row=row, end_row=row, **kwargs)


@dataclass
class RunSummary:
    processed: int = 0
    skipped: int = 0
    cached: int = 0
    failed: int = 0
    write_failures: int = 0
    errors: List[dict] = field(default_factory=list)
    records: List[dict] = field(default_factory=list)
    rows_seen: List[int] = field(default_factory=list)


@dataclass
class VerificationSummary:
    verified: int = 0
    not_verified: int = 0
    skipped: int = 0
    cached: int = 0
    not_found: int = 0
    errors: List[dict] = field(default_factory=list)
    rows_seen: List[int] = field(default_factory=list)


class _RowLoop:
    def __init__(self, sheet, cache=None, clock=None, max_empty_rows=None):
        self.sheet = sheet
        self.cache = cache
        self.clock = clock or SYSTEM_CLOCK
        self.max_empty_rows = (
            config.DELAYS["max_empty_rows"] if max_empty_rows is None else max_empty_rows
        )

    def rows(self, options):
        """Yield row numbers; the caller reports empties through self.consecutive_empty"""
        self.consecutive_empty = 0
        row = options.start_row
        while True:
            if options.end_row is not None and row > options.end_row:
                return
            if options.end_row is None and self.consecutive_empty >= self.max_empty_rows:
                log(
                    "info",
                    f"Stopping: {self.max_empty_rows} consecutive empty rows detected "
                    f"at row {row - self.max_empty_rows}",
                )
                return
            yield row
            row += 1

    def cached(self, row, options):
        if not options.use_cache or self.cache is None:
            return None
        return self.cache.get(row)

    def remember(self, row, **fields):
        if self.cache is not None:
            self.cache.set(row, **fields)

    def focus_sheet(self):
        self.sheet.bring_to_front()
        self.clock.pause(config.TIMING["focus_min"], config.TIMING["focus_max"])


class RowProcessor(_RowLoop):
    """Submission run: sheet row -> Gusto add-contractor flow -> sheet status"""

    def __init__(
        self,
        sheet,
        form_page,
        machine,
        cache=None,
        clock=None,
        max_empty_rows=None,
        result_log=None,
        delays=None,
    ):
        super().__init__(sheet, cache, clock, max_empty_rows)
        self.form_page = form_page
        self.machine = machine
        self.result_log = result_log
        self.delays = dict(config.DELAYS, **(delays or {}))

    def run(self, options):
        summary = RunSummary()
        for row in self.rows(options):
            summary.rows_seen.append(row)
            start = self.clock.now()
            try:
                outcome = self.process_row(row, options, summary)
            except Exception as e:
                outcome = ERROR
                summary.failed += 1
                summary.errors.append({"row": row, "name": "", "errors": [str(e)], "steps_completed": []})
                log("err", f"Row {row}: error -- {e}")
                self._record(summary, row, "", ERROR, str(e), (), start)

            self.consecutive_empty = self.consecutive_empty + 1 if outcome == EMPTY else 0

            if outcome == SUCCESS:
                self._pace(summary)
        return summary

    def process_row(self, row, options, summary):
        cached = self.cached(row, options)
        if cached is None and self.cache is not None:
            # A submission whose marker never landed holds even with the cache off
            entry = self.cache.get(row)
            if entry and entry.get("marker_pending"):
                cached = entry
        if cached and cached.get("sent") is True:
            log("info", f"Row {row}: cached as already sent ({cached.get('name') or 'unknown'}), skipping")
            if cached.get("marker_pending") and not options.dry_run:
                self.retry_marker(row)
            summary.cached += 1
            return CACHED

        log("info", f"--- Row {row} ---")
        start = self.clock.now()
        self.focus_sheet()

        if self.sheet.is_row_completed(row):
            self.remember(row, sent=True)
            summary.skipped += 1
            return SKIPPED

        contractor = self.sheet.read_contractor_row(row)
        if contractor is None:
            log("warn", f"Row {row}: empty or missing data, skipping")
            self.remember(row, sent=False, empty=True)
            summary.skipped += 1
            return EMPTY

        # Name cached for the verification run
        self.remember(row, name=contractor.full_name, empty=False)
        log("data", f"Contractor: {contractor.display_name} <{contractor.email}>")

        if options.dry_run:
            log("info", f"[DRY RUN] Would process {contractor.display_name} -- skipping Gusto steps")
            summary.processed += 1
            self._record(summary, row, contractor.full_name, DRY_RUN, "", (), start)
            return DRY_RUN

        self.form_page.bring_to_front()
        self.clock.pause(config.TIMING["focus_min"], config.TIMING["focus_max"])
        run = self.machine.run(contractor)

        if not run.success:
            summary.failed += 1
            summary.errors.append(
                {
                    "row": row,
                    "name": run.name,
                    "errors": run.errors,
                    "steps_completed": run.steps_completed,
                    "failed_step": run.failed_step,
                }
            )
            log("err", f"Row {row}: FAILED -- {'; '.join(run.errors)}")
            log("err", f"  Steps completed before failure: {', '.join(run.steps_completed) or '(none)'}")
            self._record(summary, row, contractor.full_name, FAILED, "; ".join(run.errors), run.steps_completed, start)
            return FAILED

        self.focus_sheet()
        if not self.sheet.mark_row_completed(row):
            # Submitted in Gusto but the sheet did not take the marker. The
            # submission is cached so a later pass only retries the marker.
            self.remember(row, sent=True, name=contractor.full_name, marker_pending=True)
            summary.write_failures += 1
            reason = f"Submitted, but could not verify \"{self.sheet.status_value}\" in the status column"
            summary.errors.append(
                {"row": row, "name": run.name, "errors": [reason], "steps_completed": run.steps_completed}
            )
            log("err", f"Row {row}: {reason}")
            self._record(summary, row, contractor.full_name, WRITE_FAILED, reason, run.steps_completed, start)
            return WRITE_FAILED

        self.remember(row, sent=True, name=contractor.full_name)
        summary.processed += 1
        log("ok", f"Row {row}: DONE -- {contractor.display_name}")
        self._record(summary, row, contractor.full_name, SUCCESS, "", run.steps_completed, start)
        return SUCCESS

    def retry_marker(self, row):
        """Write the done marker for a row already submitted in Gusto"""
        self.focus_sheet()
        if self.sheet.mark_row_completed(row):
            self.remember(row, marker_pending=False)
            log("ok", f"Row {row}: status marker written on retry")
        else:
            log("warn", f"Row {row}: status marker still not verified, fix it by hand")

    def _pace(self, summary):
        between = self.delays["between_contractors"]
        if between > 0:
            log("info", f"Cooling down {between / 1000:g}s before next contractor...")
            self.clock.sleep(between / 1000)

        batch_size = self.delays["batch_size"]
        if batch_size and summary.processed % batch_size == 0:
            pause = self.delays["batch_pause"]
            log(
                "info",
                f"=== Batch pause: {summary.processed} contractors done, resting {pause / 1000:g}s ===",
            )
            self.clock.sleep(pause / 1000)

    def _record(self, summary, row, name, status, reason, steps, start):
        elapsed = self.clock.now() - start
        summary.records.append(
            {
                "timestamp": datetime.now(TIMEZONE).isoformat(),
                "row": row,
                "name": name,
                "result": status,
                "reason": reason,
                "steps_completed": list(steps),
                "elapsed_seconds": round(elapsed, 1),
            }
        )
        log("info", f"Row time: {format_elapsed_time(elapsed)}")
        log_result(self.result_log, row, name, status, reason, steps)


class VerificationProcessor(_RowLoop):
    """Verification run: sheet row -> onboarding/roster lookup -> YES / NO column"""

    def __init__(self, sheet, reconciler, cache=None, clock=None, max_empty_rows=None, result_log=None):
        super().__init__(sheet, cache, clock, max_empty_rows)
        self.reconciler = reconciler
        self.result_log = result_log

    def run(self, options):
        summary = VerificationSummary()
        for row in self.rows(options):
            summary.rows_seen.append(row)
            try:
                outcome = self.process_row(row, options, summary)
            except Exception as e:
                outcome = ERROR
                summary.errors.append({"row": row, "error": str(e)})
                log("err", f"Row {row}: error -- {e}")
                log_result(self.result_log, row, "", ERROR, str(e))

            self.consecutive_empty = self.consecutive_empty + 1 if outcome == EMPTY else 0
        return summary

    def process_row(self, row, options, summary):
        cached = self.cached(row, options) or {}

        if cached.get("completed") == "yes":
            log("info", f"Row {row}: cached as complete ({cached.get('name')}), skipping")
            summary.cached += 1
            return CACHED
        if cached.get("sent") is False:
            log("info", f"Row {row}: cached as not sent, skipping")
            summary.cached += 1
            return EMPTY if cached.get("empty") else CACHED

        log("info", f"--- Row {row} ---")
        self.focus_sheet()

        if cached.get("sent") is True:
            sent_value = self.sheet.status_value
        else:
            sent_value = self.sheet.read_status(row)

        if not self.sheet.is_done(sent_value):
            log("info", f"Row {row}: status = \"{sent_value}\" (not \"{self.sheet.status_value}\"), skipping")
            self.remember(row, sent=False, empty=not sent_value)
            summary.skipped += 1
            return EMPTY if not sent_value else SKIPPED

        completed_value = cached.get("completed_raw") or self.sheet.read_verification(row)
        if completed_value and completed_value.strip().lower() == "yes":
            log("info", f"Row {row}: verification column already \"{completed_value}\", skipping")
            self.remember(row, sent=True, completed="yes", completed_raw=completed_value)
            summary.skipped += 1
            return SKIPPED

        full_name = cached.get("name") or self.sheet.read_full_name(row)
        if not full_name:
            log("warn", f"Row {row}: no name found, skipping")
            self.remember(row, sent=True, empty=True)
            summary.skipped += 1
            return EMPTY

        first_name, last_name = parse_full_name(full_name)
        log("data", f"Row {row}: \"{full_name}\" -> first=\"{first_name}\" last=\"{last_name}\"")
        self.remember(row, sent=True, name=full_name)

        if options.dry_run:
            log("info", f"[DRY RUN] Would check verification for {first_name} {last_name}")
            summary.skipped += 1
            return DRY_RUN

        verdict = self.reconciler.resolve(first_name, last_name)

        if verdict is Verdict.UNRESOLVED:
            summary.not_found += 1
            log("warn", f"Row {row}: \"{first_name} {last_name}\" not found on Gusto, leaving blank")
            log_result(self.result_log, row, full_name, NOT_FOUND)
            return NOT_FOUND

        value = self.sheet.verification_value(verdict is Verdict.YES)
        self.focus_sheet()
        self.sheet.write_verification(row, value)
        log("ok", f"Row {row}: wrote \"{value}\" to col {self.sheet.columns['verification']}")

        self.remember(
            row,
            completed_raw=value,
            completed="yes" if verdict is Verdict.YES else "no",
        )
        if verdict is Verdict.YES:
            summary.verified += 1
        else:
            summary.not_verified += 1
        log_result(self.result_log, row, full_name, VERIFIED_YES if verdict is Verdict.YES else VERIFIED_NO)
        return verdict.value
