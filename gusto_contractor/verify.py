#!/usr/bin/env python3
"""
Gusto Contractor Automator - verification run

For every row marked as sent, looks the person up on the Gusto onboarding
view (100% -> YES, otherwise NO) and falls back to the people roster
(listed -> YES). People found on neither view are left blank.

Needs three tabs open in the automation Chrome: the sheet, Gusto
/people/onboarding and Gusto /people/all.
"""

import sys
import traceback

import gusto_contractor.config as config
from gusto_contractor.browser.page import PageDriver
from gusto_contractor.browser.session import connect_browser, disconnect, find_tab, print_tabs
from gusto_contractor.main import build_parser, configure, open_cache, options_from_args, print_banner
from gusto_contractor.orchestrator import VerificationProcessor
from gusto_contractor.sheets.cells import CellIO
from gusto_contractor.sheets.rows import ContractorSheet
from gusto_contractor.sheets.surface import SheetSurface
from gusto_contractor.utils.logging import log
from gusto_contractor.verification.reconciler import VerificationReconciler

VERIFY_EPILOG = """
Examples:
  gusto-verify --row 5            # Check a single row
  gusto-verify -s 2 -e 40         # Check rows 2 through 40
  gusto-verify -s 2 --dry-run     # Parse names without looking anything up
  gusto-verify --sheet-b          # Verify the Sheet B profile
"""


def print_summary(summary):
    print()
    log("info", "========================================")
    log("info", " Verification Complete")
    log("info", "========================================")
    log("info", f"Verified (YES):     {summary.verified}")
    log("info", f"Not verified (NO):  {summary.not_verified}")
    log("info", f"Not found:          {summary.not_found}")
    log("info", f"Skipped:            {summary.skipped}")
    log("info", f"Cached:             {summary.cached}")

    if summary.errors:
        log("err", f"Errors: {len(summary.errors)}")
        for e in summary.errors:
            log("err", f"  Row {e['row']}: {e['error']}")


def run(args):
    profile = configure(args)
    options = options_from_args(args)

    session = connect_browser(config.CDP_URL)
    cache = None
    try:
        _, browser = session
        if args.list_tabs:
            print_tabs(browser)
            return 0

        print_banner("Gusto Verification Checker", profile, options)

        sheet_tab = find_tab(browser, profile["url_fragment"])
        onboarding_tab = find_tab(browser, config.GUSTO["onboarding_fragment"])
        roster_tab = find_tab(browser, config.GUSTO["roster_fragment"])
        log("ok", "All tabs found. Starting verification...")
        print()

        cache = open_cache(args)
        sheet = ContractorSheet(CellIO(SheetSurface(sheet_tab)), profile)
        reconciler = VerificationReconciler(PageDriver(onboarding_tab), PageDriver(roster_tab))
        processor = VerificationProcessor(sheet, reconciler, cache=cache, result_log=config.RESULT_LOG)
        summary = processor.run(options)

        print_summary(summary)
        return 0
    finally:
        if cache is not None:
            cache.close()
        disconnect(session)


def main(argv=None):
    parser = build_parser(
        "Gusto Verification Checker - write YES/NO for contractors sent to Gusto",
        VERIFY_EPILOG,
        "Read rows and parse names but don't search Gusto or write results",
    )
    args = parser.parse_args(argv)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        log("warn", "Interrupted - cache holds every fact recorded so far")
        sys.exit(130)
    except Exception as e:
        log("err", f"Fatal error: {e}")
        log("err", traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
