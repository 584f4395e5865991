"""Drives one contractor through the add-person flow"""

import gusto_contractor.config as config
from gusto_contractor.debug.page_dump import dump_page_state
from gusto_contractor.interaction.buttons import click_control
from gusto_contractor.models import WorkflowRun
from gusto_contractor.state.detector import wait_until_ready
from gusto_contractor.utils.logging import log
from gusto_contractor.utils.timing import SYSTEM_CLOCK, wait_until
from gusto_contractor.workflow.steps import STEPS, WorkflowState


class WorkflowStateMachine:
    """
    Strictly ordered, no skipping, no going back.

    A step that raises moves the machine to FAILED and ends the run; the
    failure is returned in the WorkflowRun, never retried here. The form
    keeps server-side state, so re-running a half-finished submission is
    left to the operator.
    """

    def __init__(self, page, clock=None, steps=STEPS):
        self.page = page
        self.clock = clock or SYSTEM_CLOCK
        self.steps = steps
        self.state = None

    def run(self, contractor):
        run = WorkflowRun(name=contractor.display_name)
        total = len(self.steps)
        start = self.clock.now()
        log("info", f"=== Starting contractor workflow for: {run.name} (row {contractor.row}) ===")

        for index, step in enumerate(self.steps, 1):
            self.state = step.state
            log("step", f"Step {index}: {step.title}")
            try:
                self._execute(step, contractor)
            except Exception as e:
                self.state = WorkflowState.FAILED
                run.elapsed = self.clock.now() - start
                run.failed_step = step.name
                run.failed_step_index = index
                run.errors.append(str(e) or e.__class__.__name__)
                log(
                    "err",
                    f"=== FAILED on {run.name} after {run.elapsed:.1f}s "
                    f"at step {index} ({step.name}): {run.errors[-1]} ===",
                )
                log("err", f"  Completed steps: {', '.join(run.steps_completed) or '(none)'}")
                dump_page_state(self.page)
                return run

            run.steps_completed.append(step.name)

        self.state = WorkflowState.DONE
        run.success = True
        run.elapsed = self.clock.now() - start
        log(
            "ok",
            f"=== Completed {run.name} in {run.elapsed:.1f}s "
            f"({len(run.steps_completed)}/{total} steps) ===",
        )
        return run

    def _execute(self, step, contractor):
        if step.wait_ready:
            wait_until_ready(self.page, clock=self.clock)
            self.clock.pause(config.TIMING["action_min"], config.TIMING["action_max"])

        if step.action is not None:
            step.action(self.page, contractor, self.clock)

        if step.commit is not None:
            self._submit_and_wait(step)
            log("ok", f"  {step.title} done")

    def _submit_and_wait(self, step):
        before = self.page.url
        click_control(self.page, step.commit)

        # Navigation or the fixed timeout, whichever comes first
        wait_until(
            lambda: self.page.url != before,
            config.WORKFLOW["navigation_timeout"],
            config.WORKFLOW["navigation_poll"],
            self.clock,
        )
        self.page.wait_for_stable_dom(
            config.WORKFLOW["settle_idle"], config.WORKFLOW["settle_cap"]
        )
        log("data", f"  Navigated to: {self.page.url}")
