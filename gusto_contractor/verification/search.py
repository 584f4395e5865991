"""Search-box lookups on the Gusto people views"""

import re

import gusto_contractor.config as config
from gusto_contractor.reasoning.normalize import normalize_text
from gusto_contractor.utils.logging import log

SEARCH_INPUT_SELECTORS = (
    'input[type="search"]',
    'input[placeholder*="Search" i]',
    'input[aria-label*="search" i]',
)

ROSTER_ROW_SELECTORS = (
    "tr",
    '[role="row"]',
    '[data-testid*="person"], [data-testid*="employee"], [data-testid*="member"]',
    "a",
)

ONBOARDING_ROW_SELECTORS = ("tr", '[role="row"]', '[role="listitem"]', "li")

PAGE_CELL_SELECTORS = ("body",)

_PERCENT_RE = re.compile(r"^(\d{1,3})%$")


class SearchInputNotFoundError(Exception):
    pass


def has_no_results(body_text):
    return any(
        re.search(pattern, body_text, re.IGNORECASE)
        for pattern in config.VERIFICATION["no_results_patterns"]
    )


def search_on_page(page, name, clock):
    """Clear the view's search box, type the name, wait for results to settle"""
    selector = page.find_first(SEARCH_INPUT_SELECTORS)
    if selector is None:
        raise SearchInputNotFoundError(f"Search input not found on {page.url}")

    timing = config.TIMING
    page.type_into(selector, name, delay_ms=timing["type_min"])
    clock.sleep(config.VERIFICATION["search_settle"] / 1000)
    page.wait_for_stable_dom(
        config.VERIFICATION["search_idle"], config.VERIFICATION["search_idle_cap"]
    )


def _rows_matching(rows, name):
    needle = normalize_text(name)
    return [r for r in rows if needle in normalize_text(r.get("text", ""))]


def _percent_in(cells):
    for cell in cells:
        match = _PERCENT_RE.match((cell or "").strip())
        if match:
            return int(match.group(1))
    return None


def is_found_on_roster(page, name, clock):
    """Person listed on /people/all after searching"""
    log("step", f"  Searching {page.url} for \"{name}\"")
    search_on_page(page, name, clock)

    if has_no_results(page.body_text()):
        found = False
    else:
        found = bool(_rows_matching(page.snapshot_rows(ROSTER_ROW_SELECTORS), name))

    log("data", f"  Roster result: {'FOUND' if found else 'NOT FOUND'}")
    return found


def get_onboarding_progress(page, name, clock):
    """
    Search /people/onboarding. Returns (found, progress).

    progress is the NN% shown in the person's row, or None when the person
    is on the page but no percentage could be read.
    """
    log("step", f"  Searching {page.url} for \"{name}\"")
    search_on_page(page, name, clock)

    body = page.body_text()
    if has_no_results(body):
        log("data", "  Onboarding result: NOT FOUND (no results)")
        return (False, None)

    matches = _rows_matching(page.snapshot_rows(ONBOARDING_ROW_SELECTORS), name)
    for row in matches:
        progress = _percent_in(row.get("cells", []))
        if progress is not None:
            log("data", f"  Onboarding result: FOUND, progress={progress}%")
            return (True, progress)

    if normalize_text(name) in normalize_text(body):
        # Filtered list shows one person; a lone percentage belongs to them
        progress = None
        for row in page.snapshot_rows(PAGE_CELL_SELECTORS):
            progress = _percent_in(row.get("cells", []))
            if progress is not None:
                break
        log("data", f"  Onboarding result: FOUND, progress={progress if progress is not None else '?'}%")
        return (True, progress)

    log("data", "  Onboarding result: NOT FOUND")
    return (False, None)
