# Shared fakes: a clock, a Sheets grid, the Gusto add-person flow and the people views
import re

import pytest

import gusto_contractor.config as config
from gusto_contractor.interaction.buttons import Control
from gusto_contractor.interaction.keyboard import (
    DAY_SELECTORS,
    MONTH_SELECTORS,
    SINGLE_DATE_SELECTORS,
    YEAR_SELECTORS,
)
from gusto_contractor.sheets.cells import CellIO
from gusto_contractor.sheets.rows import ContractorSheet
from gusto_contractor.state.cache import MemoryStore, RowCache
from gusto_contractor.workflow.steps import (
    EMAIL_SELECTOR,
    FIRST_NAME_SELECTOR,
    LAST_NAME_SELECTOR,
    WORKER_TYPE_SELECTOR,
)

GUSTO_BASE = config.GUSTO["base_url"]
WORKER_TYPE = WORKER_TYPE_SELECTOR.format(worker_type=config.GUSTO["worker_type"])
FIXED_LABEL = 'label[for="wage-fixed"]'


class FakeClock:
    """Virtual time: sleep() and pause() advance now() instantly"""

    def __init__(self):
        self.t = 0.0
        self.sleeps = []
        self.pauses = 0

    def now(self):
        return self.t

    def sleep(self, seconds):
        if seconds > 0:
            self.sleeps.append(round(seconds, 6))
            self.t += seconds

    def pause(self, min_ms, max_ms):
        self.pauses += 1
        self.t += min_ms / 1000


def _next_row(ref):
    match = re.match(r"^([A-Z]+)(\d+)$", ref)
    return f"{match.group(1)}{int(match.group(2)) + 1}"


class FakeSheetSurface:
    """
    Grid with a Name Box, a formula bar and ready/edit modes.

    stuck:           refs whose commits are silently rejected
    dropped_commits: {ref: n} first n commits to ref are lost
    echo_reads:      {ref: n} first n formula-bar reads show the address
    stale_jumps:     next n go_to() calls leave the selection where it was
    always_stale:    go_to() never moves the selection
    """

    def __init__(
        self,
        cells=None,
        stuck=(),
        dropped_commits=None,
        echo_reads=None,
        stale_jumps=0,
        always_stale=False,
    ):
        self.cells = {k.upper(): v for k, v in (cells or {}).items()}
        self.stuck = {r.upper() for r in stuck}
        self.dropped_commits = dict(dropped_commits or {})
        self.echo_reads = dict(echo_reads or {})
        self.stale_jumps = stale_jumps
        self.always_stale = always_stale
        self.selected = "A1"
        self.editing = False
        self.buffer = ""
        self.go_to_calls = []
        self.commits = []
        self.fronts = 0
        self.escapes = 0

    def bring_to_front(self):
        self.fronts += 1

    def escape(self):
        self.escapes += 1
        self.editing = False
        self.buffer = ""

    def go_to(self, ref):
        self.go_to_calls.append(ref)
        if self.always_stale:
            return
        if self.stale_jumps:
            self.stale_jumps -= 1
            return
        self.selected = ref.upper()

    def current_address(self):
        return self.selected

    def read_display(self):
        if self.echo_reads.get(self.selected):
            self.echo_reads[self.selected] -= 1
            return self.selected
        return self.cells.get(self.selected, "")

    def type_text(self, text, delay_ms=None):
        if not self.editing:
            # Ready mode: the first keystroke replaces the cell
            self.editing = True
            self.buffer = ""
        self.buffer += text

    def commit(self):
        ref = self.selected
        if self.editing:
            if self.dropped_commits.get(ref):
                self.dropped_commits[ref] -= 1
            elif ref not in self.stuck:
                self.cells[ref] = self.buffer
                self.commits.append((ref, self.buffer))
        self.editing = False
        self.buffer = ""
        self.selected = _next_row(ref)

    def touched_rows(self):
        return sorted({int(re.sub(r"^[A-Z]+", "", ref)) for ref in self.go_to_calls})


def make_sheet(surface, clock, profile_key="a"):
    return ContractorSheet(CellIO(surface, clock=clock), config.get_profile(profile_key))


def gusto_page(path, title, fields=(), controls=(("Save and continue", "button"),), labels=None, loading=False):
    return {
        "url": GUSTO_BASE + path,
        "title": title,
        "fields": set(fields),
        "controls": [tuple(c) for c in controls],
        "labels": dict(labels or {}),
        "loading": loading,
    }


def gusto_flow(
    date_fields=(MONTH_SELECTORS, DAY_SELECTORS, YEAR_SELECTORS),
    wage_labels=None,
    compensation_controls=(("Save and continue", "button"),),
    compensation_loading=False,
    review_controls=(("Save and continue", "button"),),
):
    """Basics -> role -> compensation -> review -> onboarding -> contact -> invite -> roster"""
    return [
        gusto_page(
            "/people/add_team_member/basics",
            "Add a team member",
            fields=(FIRST_NAME_SELECTOR, LAST_NAME_SELECTOR, EMAIL_SELECTOR, WORKER_TYPE),
            controls=(("Cancel", "link", False), ("Save and continue", "button")),
        ),
        gusto_page("/people/add_team_member/role", "Role details", fields=date_fields),
        gusto_page(
            "/people/add_team_member/compensation",
            "Compensation",
            controls=compensation_controls,
            labels={"fixed": FIXED_LABEL} if wage_labels is None else wage_labels,
            loading=compensation_loading,
        ),
        gusto_page("/people/add_team_member/review", "Review and finalize", controls=review_controls),
        gusto_page(
            "/people/add_team_member/onboarding",
            "Contractor onboarding",
            controls=(("Continue", "button"),),
        ),
        gusto_page("/people/add_team_member/contact_details", "Contact details"),
        gusto_page(
            "/people/add_team_member/send_invitation",
            "Invite to Gusto",
            controls=(("Back", "button", False), ("Send invitation", "submit")),
        ),
        gusto_page("/people/all", "Team members", controls=()),
    ]


class FakeFormPage:
    """The Gusto tab. Every control marked as advancing moves to the next page."""

    def __init__(self, pages=None):
        self.pages = gusto_flow() if pages is None else pages
        self.index = None
        self.forms = []
        self.clicked = []
        self.visits = []
        self.fronts = 0

    @property
    def current(self):
        return None if self.index is None else self.pages[self.index]

    @property
    def url(self):
        return GUSTO_BASE + "/dashboard" if self.index is None else self.current["url"]

    @property
    def typed(self):
        return self.forms[-1] if self.forms else {}

    @property
    def invitations_sent(self):
        return self.clicked.count("Send invitation")

    def bring_to_front(self):
        self.fronts += 1

    def goto(self, url, timeout_ms=20000):
        self.visits.append(url)
        for i, page in enumerate(self.pages):
            if page["url"] == url:
                self.index = i
                self.forms.append({})
                return
        raise RuntimeError(f"No page at {url}")

    def wait_for_selector(self, selector, timeout_ms=10000):
        return self.exists(selector)

    def body_text(self):
        page = self.current
        if page is None:
            return "Dashboard"
        if page["loading"]:
            return f"{page['title']}\nLoading..."
        return "\n".join([page["title"]] + [c[0] for c in page["controls"]])

    def heading(self):
        return self.current["title"] if self.current else "Dashboard"

    def controls(self):
        if self.current is None:
            return []
        found = []
        for entry in self.current["controls"]:
            text, role = entry[0], entry[1]
            advances = entry[2] if len(entry) > 2 else True
            found.append(Control(text=text, role=role, handle="advance" if advances else None))
        return found

    def click_control(self, control):
        self.clicked.append(control.text)
        if control.handle == "advance":
            self.index += 1

    def click(self, selector):
        if not self.exists(selector):
            raise RuntimeError(f"Nothing to click at {selector}")
        self.clicked.append(selector)

    def exists(self, selector):
        page = self.current
        if page is None:
            return False
        return selector in page["fields"] or selector in page["labels"].values()

    def find_first(self, selectors):
        for selector in selectors:
            if self.exists(selector):
                return selector
        return None

    def type_into(self, selector, text, delay_ms=None):
        if selector not in self.current["fields"]:
            raise RuntimeError(f"No field {selector}")
        self.typed[selector] = text

    def label_selector_for(self, text, input_type="radio"):
        return self.current["labels"].get(text.lower())

    def wait_for_stable_dom(self, idle_ms=300, cap_ms=8000):
        pass


class FakePeoplePage:
    """
    A Gusto people view with a search box.

    people maps a display name to the progress text shown in its row
    ("100%", "40%") or None when the row carries no percentage.
    """

    def __init__(self, path, people=None, has_search=True, rows_visible=True):
        self._url = GUSTO_BASE + path
        self.people = dict(people or {})
        self.has_search = has_search
        self.rows_visible = rows_visible
        self.query = ""
        self.searches = []
        self.fronts = 0

    @property
    def url(self):
        return self._url

    def bring_to_front(self):
        self.fronts += 1

    def find_first(self, selectors):
        return selectors[0] if self.has_search else None

    def type_into(self, selector, text, delay_ms=None):
        self.query = text
        self.searches.append(text)

    def wait_for_stable_dom(self, idle_ms=300, cap_ms=8000):
        pass

    def _rows(self):
        q = self.query.lower()
        rows = []
        for name, progress in self.people.items():
            if q in name.lower():
                cells = [name, "Contractor"] + ([progress] if progress else [])
                rows.append({"text": " ".join(cells), "cells": cells})
        return rows

    def body_text(self):
        rows = self._rows()
        if not rows:
            return "Team members\nNo people found"
        return "Team members\n" + "\n".join(r["text"] for r in rows)

    def snapshot_rows(self, selectors):
        rows = self._rows()
        if tuple(selectors) == ("body",):
            return [{"text": self.body_text(), "cells": [c for r in rows for c in r["cells"]]}]
        return rows if self.rows_visible else []


class FakeTab:
    def __init__(self, url):
        self.url = url


class FakeContext:
    def __init__(self, pages):
        self.pages = pages


class FakeBrowser:
    def __init__(self, urls):
        self.contexts = [FakeContext([FakeTab(u) for u in urls])]
        self.closed = False

    def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    def stop(self):
        self.stopped = True


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache():
    return RowCache(MemoryStore(), "a").open()


@pytest.fixture(autouse=True)
def default_timing(monkeypatch):
    """Every test starts on the default timing profile"""
    monkeypatch.setattr(config, "SPEED_MODE", "default")
    monkeypatch.setattr(config, "TIMING", config.TIMING_PROFILES["default"])
