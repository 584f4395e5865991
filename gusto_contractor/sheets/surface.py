"""Google Sheets tab as a keyboard-driven grid"""

from playwright.sync_api import Error as PlaywrightError

# Name Box: the cell-reference input left of the formula bar
NAME_BOX_SELECTOR = "#t-name-box"

# Formula bar content is the authoritative display of the selected cell
READ_FORMULA_BAR_JS = """() => {
    const bar = document.querySelector('#t-formula-bar-input .cell-input')
        || document.querySelector('.cell-input')
        || document.querySelector('[aria-label="Formula input"]');
    if (!bar) return '';
    return bar.textContent || bar.value || '';
}"""


class SheetSurface:
    """
    Primitive operations on the Sheets tab used by CellIO.

    The grid has two modes: ready (selection) and edit. Typing in ready mode
    replaces the cell and keeps data validation; typing in edit mode inserts
    into the existing text. Callers press escape() before anything else.
    """

    def __init__(self, page, type_delay_ms=15):
        self.page = page
        self.type_delay_ms = type_delay_ms

    def bring_to_front(self):
        self.page.bring_to_front()

    def escape(self):
        self.page.keyboard.press("Escape")

    def go_to(self, cell_ref):
        try:
            self.page.click(NAME_BOX_SELECTOR, timeout=2000)
        except PlaywrightError:
            # Name Box not clickable (overlay, focus trap) - Go To Range dialog
            self.page.keyboard.press("Control+g")
        self.page.keyboard.press("ControlOrMeta+a")
        self.page.keyboard.type(cell_ref, delay=self.type_delay_ms)
        self.page.keyboard.press("Enter")

    def current_address(self):
        try:
            return self.page.locator(NAME_BOX_SELECTOR).input_value(timeout=2000).strip()
        except PlaywrightError:
            return ""

    def read_display(self):
        return self.page.evaluate(READ_FORMULA_BAR_JS) or ""

    def type_text(self, text, delay_ms=None):
        self.page.keyboard.type(
            text, delay=self.type_delay_ms if delay_ms is None else delay_ms
        )

    def commit(self):
        self.page.keyboard.press("Enter")
