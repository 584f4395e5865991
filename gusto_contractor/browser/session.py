"""Browser session management"""

from playwright.sync_api import sync_playwright

from gusto_contractor.utils.logging import log


class TabNotFoundError(Exception):
    pass


def connect_browser(cdp_url):
    """
    Attach to the already-running automation Chrome.
    Returns (playwright, browser); nothing is launched or logged into here.
    """
    log("info", f"Connecting to Chrome at {cdp_url} ...")
    p = sync_playwright().start()
    try:
        browser = p.chromium.connect_over_cdp(cdp_url)
    except Exception:
        p.stop()
        raise
    log("ok", "Connected to Chrome")
    return p, browser


def list_tabs(browser):
    return [page for context in browser.contexts for page in context.pages]


def find_tab(browser, url_fragment):
    """First open tab whose URL contains url_fragment"""
    pages = list_tabs(browser)
    log("info", f"Found {len(pages)} open tabs, searching for \"{url_fragment}\" ...")
    for page in pages:
        if url_fragment in page.url:
            log("ok", f"Matched tab: {page.url[:100]}")
            return page
    raise TabNotFoundError(
        f"No tab found matching \"{url_fragment}\". Make sure the tab is open in Chrome."
    )


def print_tabs(browser):
    for i, page in enumerate(list_tabs(browser), 1):
        print(f"  {i:>2}. {page.url}")


def disconnect(session):
    """Drop the CDP connection; Chrome and its tabs stay open"""
    p, browser = session
    try:
        browser.close()
    finally:
        p.stop()
    log("info", "Disconnected from Chrome (browser remains open)")
