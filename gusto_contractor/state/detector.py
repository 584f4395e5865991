"""Page readiness detection"""

import gusto_contractor.config as config
from gusto_contractor.reasoning.normalize import normalize_text
from gusto_contractor.utils.timing import wait_until
from gusto_contractor.workflow.errors import PageNotReadyError

LOADING = "LOADING"
NO_ACTION = "NO_ACTION"
READY = "READY"

# Links such as "Send feedback" in the sidebar never signal a ready form
READY_ROLES = ("button", "submit")


def detect_page_state(page):
    """
    Detect whether a Gusto form page can take input - NO ACTIONS, only detection

    READY needs both:
    1. no loading indicator text in the page body
    2. a visible button whose text carries a continue/send affordance
    """
    body = page.body_text()
    if config.WORKFLOW["loading_text"] in body:
        return LOADING

    phrases = [normalize_text(p) for p in config.WORKFLOW["ready_phrases"]]
    for control in page.controls():
        if not control.visible or control.role not in READY_ROLES:
            continue
        text = normalize_text(control.text)
        if any(p in text for p in phrases):
            return READY

    return NO_ACTION


def wait_until_ready(page, timeout_ms=None, clock=None, poll_ms=None):
    """Poll detect_page_state until READY; PageNotReadyError on timeout"""
    timeout_ms = config.WORKFLOW["ready_timeout"] if timeout_ms is None else timeout_ms
    poll_ms = config.WORKFLOW["ready_poll"] if poll_ms is None else poll_ms

    last_state = [None]

    def ready():
        last_state[0] = detect_page_state(page)
        return last_state[0] == READY

    if not wait_until(ready, timeout_ms, poll_ms, clock):
        raise PageNotReadyError(
            f"Page not ready after {timeout_ms / 1000:.0f}s (state: {last_state[0]})"
        )
