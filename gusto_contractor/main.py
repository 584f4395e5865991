#!/usr/bin/env python3
"""
Gusto Contractor Automator - submission run

Reads contractors from the Google Sheet, adds each one in Gusto, and marks
the row as sent. Attaches to the automation Chrome started with
--remote-debugging-port; both tabs must already be open and logged in.
"""

import argparse
import sys
import traceback

import gusto_contractor.config as config
from gusto_contractor.browser.page import PageDriver
from gusto_contractor.browser.session import connect_browser, disconnect, find_tab, print_tabs
from gusto_contractor.orchestrator import RowProcessor, RunOptions
from gusto_contractor.sheets.cells import CellIO
from gusto_contractor.sheets.rows import ContractorSheet
from gusto_contractor.sheets.surface import SheetSurface
from gusto_contractor.state.cache import JsonFileStore, RowCache
from gusto_contractor.utils.logging import log, write_csv_summary
from gusto_contractor.workflow.machine import WorkflowStateMachine

SUBMIT_EPILOG = """
Examples:
  gusto-contractor --row 2              # Test with just row 2
  gusto-contractor -s 2 -e 5            # Process rows 2 through 5
  gusto-contractor -s 2 -e 3 --dry-run  # Read rows 2-3 without submitting
  gusto-contractor -s 2                 # Process rows 2+ until empty rows
  gusto-contractor --sheet-b -s 10      # Same, against the Sheet B profile
"""


def build_parser(description, epilog, dry_run_help):
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    parser.add_argument("--start-row", "-s", type=int, default=2, help="First row to process (default: 2)")
    parser.add_argument("--end-row", "-e", type=int, help="Last row to process (default: stop at empty rows)")
    parser.add_argument("--row", "-r", type=int, help="Process a single row only")
    parser.add_argument("--dry-run", "-d", action="store_true", help=dry_run_help)
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore cached row data and re-read everything from Sheets",
    )
    parser.add_argument(
        "--reset-cache",
        action="store_true",
        help="Clear the active profile's cached rows before starting",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(config.SHEET_PROFILES),
        default=config.DEFAULT_PROFILE,
        help="Sheet profile (default: %(default)s)",
    )
    parser.add_argument(
        "--sheet-b",
        dest="profile",
        action="store_const",
        const="b",
        help="Shortcut for --profile b",
    )
    parser.add_argument(
        "--speed",
        choices=sorted(config.TIMING_PROFILES),
        default="default",
        help="Timing profile for typing and clicks",
    )
    parser.add_argument("--list-tabs", action="store_true", help="List open Chrome tabs and exit")
    return parser


def options_from_args(args):
    options = RunOptions(
        start_row=args.start_row,
        end_row=args.end_row,
        dry_run=args.dry_run,
        use_cache=not args.no_cache,
    )
    if args.row:
        options.start_row = args.row
        options.end_row = args.row
    return options


def configure(args):
    """Apply speed mode and return the active sheet profile"""
    config.SPEED_MODE = args.speed
    config.TIMING = config.get_active_timing()
    return config.get_profile(args.profile)


def open_cache(args):
    cache = RowCache(JsonFileStore(config.CACHE_FILE), args.profile).open()
    if args.reset_cache:
        log("warn", f"Resetting cached rows for profile '{args.profile}'")
        cache.reset()
    return cache


def print_banner(title, profile, options):
    log("info", "========================================")
    log("info", f" {title}")
    log("info", "========================================")
    log("info", f"Sheet: {profile['name']}")
    log(
        "info",
        f"Config: startRow={options.start_row}, endRow={options.end_row or 'auto'}, "
        f"dryRun={options.dry_run}, cache={options.use_cache}, "
        f"statusCol={profile['columns']['status']}, statusVal=\"{profile['status_value']}\"",
    )


def print_summary(summary):
    print()
    log("info", "========================================")
    log("info", " Run Complete")
    log("info", "========================================")
    log("info", f"Processed: {summary.processed}")
    log("info", f"Skipped:   {summary.skipped}")
    log("info", f"Cached:    {summary.cached}")
    log("info", f"Failed:    {summary.failed}")
    log("info", f"Unverified writes: {summary.write_failures}")

    if summary.errors:
        log("err", "Failed rows:")
        for e in summary.errors:
            completed = ", ".join(e.get("steps_completed") or []) or "(none)"
            log("err", f"  Row {e['row']} ({e['name']}): {'; '.join(e['errors'])} [completed: {completed}]")


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

        print_banner("Gusto Contractor Automator", profile, options)

        # Setup failures end the run before any row is touched
        sheet_tab = find_tab(browser, profile["url_fragment"])
        gusto_tab = find_tab(browser, config.GUSTO["url_fragment"])
        log("ok", "Both tabs found. Starting automation...")
        print()

        cache = open_cache(args)
        sheet = ContractorSheet(CellIO(SheetSurface(sheet_tab)), profile)
        form_page = PageDriver(gusto_tab)
        processor = RowProcessor(
            sheet,
            form_page,
            WorkflowStateMachine(form_page),
            cache=cache,
            result_log=config.RESULT_LOG,
        )
        summary = processor.run(options)

        print_summary(summary)
        csv_filename = write_csv_summary(summary.records, config.RESULTS_DIR)
        if csv_filename:
            log("info", f"CSV summary written to: {csv_filename}")
        return 0
    finally:
        if cache is not None:
            cache.close()
        disconnect(session)


def main(argv=None):
    parser = build_parser(
        "Gusto Contractor Automator - add contractors from the sheet to Gusto",
        SUBMIT_EPILOG,
        "Read data from the sheet but don't submit in Gusto",
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
