"""Failure diagnostics for the Gusto tab"""

from gusto_contractor.utils.logging import log


def page_preview(page, limit=300):
    text = page.body_text()[:limit * 2]
    return text.replace("\n", " | ")[:limit]


def dump_page_state(page):
    """Log URL, heading and a text preview. Best effort - never raises."""
    try:
        log("data", f"  Page URL: {page.url}")
        log("data", f"  Page title: {page.heading()}")
        log("data", f"  Page text preview: {page_preview(page)}")
    except Exception as e:
        log("warn", f"  Could not dump page state: {e}")
