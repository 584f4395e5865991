"""Playwright page wrapped in the operations the workflow and verifier use"""

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from gusto_contractor.interaction.buttons import Control

CONTROL_SELECTOR = 'button, a[role="button"], a, input[type="submit"]'

BODY_TEXT_JS = "() => document.body ? document.body.innerText || '' : ''"

HEADING_JS = """() => {
    const h = document.querySelector('h1, h2, h3');
    return (h && h.textContent.trim()) || document.title;
}"""

# Resolves once no mutation has been seen for idleMs, or after capMs regardless
STABLE_DOM_JS = """([idleMs, capMs]) => new Promise((resolve) => {
    let timer;
    const done = () => { observer.disconnect(); resolve(); };
    const observer = new MutationObserver(() => {
        clearTimeout(timer);
        timer = setTimeout(done, idleMs);
    });
    observer.observe(document.body, { childList: true, subtree: true, attributes: true });
    timer = setTimeout(done, idleMs);
    setTimeout(done, capMs);
})"""

LABEL_FOR_TEXT_JS = """([needle, inputType]) => {
    const visible = (el) => el && el.offsetParent !== null;
    const inputs = [...document.querySelectorAll(`input[type="${inputType}"]`)];
    for (const input of inputs) {
        if (!input.id) continue;
        const label = document.querySelector(`label[for="${input.id}"]`);
        if (label && label.textContent.toLowerCase().includes(needle)) return input.id;
    }
    const labels = [...document.querySelectorAll('label')];
    const label = labels.find(l => visible(l) && l.htmlFor && l.textContent.toLowerCase().includes(needle));
    return label ? label.htmlFor : null;
}"""

ROW_SNAPSHOT_JS = """(selectors) => {
    const seen = new Set();
    const rows = [];
    for (const sel of selectors) {
        for (const el of document.querySelectorAll(sel)) {
            if (seen.has(el)) continue;
            seen.add(el);
            const cells = [...el.querySelectorAll('span, div, p, td')]
                .map(c => (c.textContent || '').trim())
                .filter(t => t.length > 0 && t.length < 40);
            rows.push({ text: (el.textContent || '').trim(), cells });
        }
    }
    return rows;
}"""


class PageDriver:
    def __init__(self, page, type_delay_ms=15):
        self.page = page
        self.type_delay_ms = type_delay_ms

    @property
    def url(self):
        return self.page.url

    def bring_to_front(self):
        self.page.bring_to_front()

    def goto(self, url, timeout_ms=20000):
        self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    def wait_for_selector(self, selector, timeout_ms=10000):
        """True once selector is visible, False on timeout"""
        try:
            self.page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
            return True
        except PlaywrightTimeout:
            return False

    def body_text(self):
        return self.page.evaluate(BODY_TEXT_JS) or ""

    def heading(self):
        return self.page.evaluate(HEADING_JS) or ""

    def controls(self):
        """Visible buttons/links in document order"""
        found = []
        locator = self.page.locator(CONTROL_SELECTOR)
        for i in range(locator.count()):
            el = locator.nth(i)
            try:
                if not el.is_visible():
                    continue
                tag = el.evaluate("el => el.tagName").lower()
                kind = (el.get_attribute("type") or "").lower()
                role = "submit" if kind == "submit" else ("link" if tag == "a" else "button")
                text = (el.text_content() or el.get_attribute("value") or "").strip()
                found.append(
                    Control(
                        text=text,
                        role=role,
                        enabled=el.is_enabled(),
                        visible=True,
                        marker=el.get_attribute("data-testid") or "",
                        handle=el,
                    )
                )
            except PlaywrightError:
                # Detached mid-scan by a re-render
                continue
        return found

    def click_control(self, control):
        control.handle.click()

    def click(self, selector):
        self.page.click(selector)

    def exists(self, selector):
        locator = self.page.locator(selector)
        return locator.count() > 0 and locator.first.is_visible()

    def find_first(self, selectors):
        """First selector with a visible match, or None"""
        for selector in selectors:
            if self.exists(selector):
                return selector
        return None

    def type_into(self, selector, text, delay_ms=None):
        """Select-all by triple click, delete, then type character by character"""
        target = self.page.locator(selector).first
        target.click(click_count=3)
        self.page.keyboard.press("Backspace")
        target.press_sequentially(
            text, delay=self.type_delay_ms if delay_ms is None else delay_ms
        )

    def label_selector_for(self, text, input_type="radio"):
        """Selector of the label whose text contains text, or None"""
        input_id = self.page.evaluate(LABEL_FOR_TEXT_JS, [text.lower(), input_type])
        if not input_id:
            return None
        return f'label[for="{input_id}"]'

    def wait_for_stable_dom(self, idle_ms=300, cap_ms=8000):
        self.page.evaluate(STABLE_DOM_JS, [idle_ms, cap_ms])

    def snapshot_rows(self, selectors):
        return self.page.evaluate(ROW_SNAPSHOT_JS, list(selectors)) or []
