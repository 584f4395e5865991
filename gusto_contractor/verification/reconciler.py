"""Onboarding view first, roster second, one verdict out"""

from gusto_contractor.models import Verdict
from gusto_contractor.utils.logging import log
from gusto_contractor.utils.timing import SYSTEM_CLOCK
from gusto_contractor.verification.search import get_onboarding_progress, is_found_on_roster


class VerificationReconciler:
    """
    resolve(first, last) -> Verdict

    onboarding view: found at 100% -> YES, found otherwise -> NO
    roster view:     found         -> YES
    neither:         UNRESOLVED (caller writes nothing)
    """

    def __init__(self, onboarding_page, roster_page, clock=None):
        self.onboarding_page = onboarding_page
        self.roster_page = roster_page
        self.clock = clock or SYSTEM_CLOCK

    def _focus(self, page):
        page.bring_to_front()
        self.clock.pause(30, 50)

    def resolve(self, first_name, last_name):
        name = f"{first_name} {last_name}".strip()
        log("info", f"Checking verification for \"{name}\"")

        self._focus(self.onboarding_page)
        found, progress = get_onboarding_progress(self.onboarding_page, name, self.clock)
        if found:
            if progress == 100:
                log("ok", f"  \"{name}\" onboarding at 100% -> yes")
                return Verdict.YES
            shown = "?" if progress is None else progress
            log("info", f"  \"{name}\" onboarding at {shown}% -> no")
            return Verdict.NO

        self._focus(self.roster_page)
        if is_found_on_roster(self.roster_page, name, self.clock):
            log("ok", f"  \"{name}\" found on roster -> yes")
            return Verdict.YES

        log("warn", f"  \"{name}\" not found on either view -> unresolved")
        return Verdict.UNRESOLVED
