"""Keyboard interactions"""

import random

import gusto_contractor.config as config
from gusto_contractor.utils.logging import log
from gusto_contractor.utils.timing import human_delay
from gusto_contractor.workflow.errors import StepError

MONTH_SELECTORS = 'input[aria-label="Month (mm)"], input[placeholder="mm"]'
DAY_SELECTORS = 'input[aria-label="Day (dd)"], input[placeholder="dd"]'
YEAR_SELECTORS = 'input[aria-label="Year (yyyy)"], input[placeholder="yyyy"]'
SINGLE_DATE_SELECTORS = 'input[name="startDate"], input[name*="date" i]'


def _type_delay():
    timing = config.TIMING
    return random.randint(timing["type_min"], timing["type_max"])


def fill_text_field(page, selector, value, label="field", clock=None):
    """Clear by triple-click + Backspace, then type like a person"""
    if not page.exists(selector):
        raise StepError(f"{label} field not found ({selector})")
    log("step", f"  {label}: \"{value}\"")
    page.type_into(selector, value, delay_ms=_type_delay())
    human_delay(config.TIMING["action_min"], config.TIMING["action_max"], clock)


def fill_date(page, date, clock=None):
    """
    Fill a {month, day, year} date.

    Prefers the three-part mm / dd / yyyy inputs; falls back to a single
    combined date input. Neither present is a step failure.
    """
    log("step", f"  Date: {date['month']}/{date['day']}/{date['year']}")

    if all(page.exists(s) for s in (MONTH_SELECTORS, DAY_SELECTORS, YEAR_SELECTORS)):
        log("step", "  Using separate mm/dd/yyyy fields")
        fill_text_field(page, MONTH_SELECTORS, date["month"], "Month", clock)
        fill_text_field(page, DAY_SELECTORS, date["day"], "Day", clock)
        fill_text_field(page, YEAR_SELECTORS, date["year"], "Year", clock)
        return "split"

    if page.exists(SINGLE_DATE_SELECTORS):
        log("step", "  Using single start date field")
        fill_text_field(
            page,
            SINGLE_DATE_SELECTORS,
            f"{date['month']}/{date['day']}/{date['year']}",
            "Start date",
            clock,
        )
        return "single"

    raise StepError("No date inputs found on role page")
