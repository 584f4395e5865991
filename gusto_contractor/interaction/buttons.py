"""Button discovery and activation"""

from dataclasses import dataclass
from typing import Any, Optional

from gusto_contractor.reasoning.normalize import contains_all, normalize_text
from gusto_contractor.utils.logging import log
from gusto_contractor.workflow.errors import ControlNotFoundError


@dataclass
class Control:
    """A clickable element as seen on the page"""

    text: str
    role: str = "button"  # button | submit | link
    enabled: bool = True
    visible: bool = True
    marker: str = ""  # data-testid or similar structural hook
    handle: Any = None

    @property
    def usable(self):
        return self.visible and self.enabled


class ByText:
    """Any phrase group whose words all appear in the control text"""

    def __init__(self, *phrase_groups):
        self.phrase_groups = [
            (group,) if isinstance(group, str) else tuple(group)
            for group in phrase_groups
        ]

    def find(self, controls):
        # Groups are ordered by preference: "send invitation" before "send"
        for group in self.phrase_groups:
            for control in controls:
                if control.usable and contains_all(control.text, group):
                    return control
        return None

    def __repr__(self):
        return "ByText(" + " | ".join("+".join(g) for g in self.phrase_groups) + ")"


class ByRole:
    def __init__(self, role):
        self.role = role

    def find(self, controls):
        for control in controls:
            if control.usable and control.role == self.role:
                return control
        return None

    def __repr__(self):
        return f"ByRole({self.role})"


class ByMarker:
    def __init__(self, marker):
        self.marker = marker

    def find(self, controls):
        for control in controls:
            if control.usable and normalize_text(self.marker) in normalize_text(control.marker):
                return control
        return None

    def __repr__(self):
        return f"ByMarker({self.marker})"


class ControlLocator:
    """Tries each strategy in order against the page's current controls"""

    def __init__(self, *strategies, label=""):
        self.strategies = strategies
        self.label = label or " / ".join(repr(s) for s in strategies)

    def locate(self, page) -> Optional[Control]:
        controls = page.controls()
        for strategy in self.strategies:
            control = strategy.find(controls)
            if control is not None:
                return control
        return None

    def require(self, page):
        control = self.locate(page)
        if control is None:
            raise ControlNotFoundError(f"{self.label} button not found")
        return control


def commit_locator(*phrase_groups, label=""):
    """Visible-text match first, then any submit-type button"""
    return ControlLocator(ByText(*phrase_groups), ByRole("submit"), label=label)


def text_locator(*phrase_groups, label=""):
    return ControlLocator(ByText(*phrase_groups), label=label)


def click_control(page, locator):
    """Locate and click; returns the clicked Control"""
    control = locator.require(page)
    log("step", f"  Clicking \"{control.text or control.role}\"")
    page.click_control(control)
    return control
