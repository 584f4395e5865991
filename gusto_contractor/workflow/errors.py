"""Step failures"""


class StepError(Exception):
    """A workflow step could not complete; the row is failed, never retried in-run"""


class PageNotReadyError(StepError):
    pass


class ControlNotFoundError(StepError):
    pass
