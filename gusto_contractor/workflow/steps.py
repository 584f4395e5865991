"""The eight Gusto add-contractor pages, in order"""

from enum import Enum

import gusto_contractor.config as config
from gusto_contractor.debug.page_dump import page_preview
from gusto_contractor.interaction.buttons import (
    ByText,
    ByRole,
    ControlLocator,
    click_control,
    commit_locator,
    text_locator,
)
from gusto_contractor.interaction.keyboard import fill_date, fill_text_field
from gusto_contractor.utils.logging import log
from gusto_contractor.workflow.errors import StepError

FIRST_NAME_SELECTOR = 'input[name="firstName"]'
LAST_NAME_SELECTOR = 'input[name="lastName"]'
EMAIL_SELECTOR = 'input[name="email"]'
WORKER_TYPE_SELECTOR = 'input[name="workerType"][value="{worker_type}"]'

SAVE_AND_CONTINUE = commit_locator(("save", "continue"), label="Save and continue")
CONTINUE = commit_locator("continue", label="Continue")
SEND_INVITATION = ControlLocator(
    ByText("send invitation", "send"), ByRole("submit"), label="Send invitation"
)


class WorkflowState(Enum):
    NAVIGATE_TO_FORM = "navigate_add_person"
    FILL_BASICS = "basics_form"
    SET_START_DATE = "role_start_date"
    SELECT_COMPENSATION = "compensation"
    SUBMIT_REVIEW = "review"
    COMPLETE_ONBOARDING = "onboarding"
    SUBMIT_CONTACT_DETAILS = "contact_details"
    SEND_INVITATION = "send_invitation"
    DONE = "done"
    FAILED = "failed"


class Step:
    """
    One page of the flow.

    wait_ready: poll for the ready condition before touching the page
    action:     field interactions, action(page, contractor, clock)
    commit:     ControlLocator for the button that moves to the next page
    """

    def __init__(self, state, title, action=None, commit=None, wait_ready=True):
        self.state = state
        self.title = title
        self.action = action
        self.commit = commit
        self.wait_ready = wait_ready

    @property
    def name(self):
        return self.state.value

    def __repr__(self):
        return f"Step({self.name})"


def add_person_url():
    return config.GUSTO["base_url"] + config.GUSTO["add_person_path"]


def navigate_to_add_person(page, contractor, clock):
    page.goto(add_person_url(), timeout_ms=config.WORKFLOW["navigation_timeout"])
    if not page.wait_for_selector(
        FIRST_NAME_SELECTOR, timeout_ms=config.WORKFLOW["first_field_timeout"]
    ):
        raise StepError("Add Person basics form did not load (no first name field)")
    log("ok", "  On Add Person basics form")


def fill_basics_form(page, contractor, clock):
    # First name only - middle names never go into Gusto
    fill_text_field(page, FIRST_NAME_SELECTOR, contractor.first_name, "First name", clock)
    fill_text_field(page, LAST_NAME_SELECTOR, contractor.last_name, "Last name", clock)

    worker_type = WORKER_TYPE_SELECTOR.format(worker_type=config.GUSTO["worker_type"])
    if not page.exists(worker_type):
        raise StepError("Contractor (Individual) worker type option not found")
    log("step", "  Selecting: Contractor (Individual)")
    page.click(worker_type)

    fill_text_field(page, EMAIL_SELECTOR, contractor.email, "Email", clock)


def fill_role_start_date(page, contractor, clock):
    fill_date(page, config.GUSTO["contract_start_date"], clock)


def select_compensation(page, contractor, clock):
    wage_type = config.GUSTO["wage_type"]
    log("data", f"  Page text: {page_preview(page)}")

    label = page.label_selector_for(wage_type, "radio")
    if label:
        # Clicking the label fires the radio's change handlers
        page.click(label)
        log("ok", f"  Selected {wage_type} payment type")
        return

    log("warn", f"  Could not find {wage_type} radio, trying text match")
    click_control(page, text_locator(wage_type, label=wage_type))


def log_page(page, contractor, clock):
    log("data", f"  Page: {page_preview(page, 200)}")


STEPS = (
    Step(
        WorkflowState.NAVIGATE_TO_FORM,
        "Navigating to Add Person",
        action=navigate_to_add_person,
        wait_ready=False,
    ),
    Step(
        WorkflowState.FILL_BASICS,
        "Filling Basics form",
        action=fill_basics_form,
        commit=SAVE_AND_CONTINUE,
    ),
    Step(
        WorkflowState.SET_START_DATE,
        "Setting contract start date",
        action=fill_role_start_date,
        commit=SAVE_AND_CONTINUE,
    ),
    Step(
        WorkflowState.SELECT_COMPENSATION,
        "Selecting compensation type",
        action=select_compensation,
        commit=SAVE_AND_CONTINUE,
    ),
    Step(
        WorkflowState.SUBMIT_REVIEW,
        "Review / Finalize page",
        action=log_page,
        commit=SAVE_AND_CONTINUE,
    ),
    Step(
        WorkflowState.COMPLETE_ONBOARDING,
        "Onboarding page",
        action=log_page,
        commit=CONTINUE,
    ),
    Step(
        WorkflowState.SUBMIT_CONTACT_DETAILS,
        "Contact details page",
        action=log_page,
        commit=SAVE_AND_CONTINUE,
    ),
    Step(
        WorkflowState.SEND_INVITATION,
        "Sending invitation",
        action=log_page,
        commit=SEND_INVITATION,
    ),
)
