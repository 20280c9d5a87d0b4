"""Playwright-backed document: snapshots the live dialog and writes back by element id"""

import logging

from playwright.sync_api import Error as PlaywrightError

from linkedin_autoapply.browser.dom import ELEMENT_ID_ATTR, ElementSnapshot
from linkedin_autoapply.interaction.buttons import click_element, click_first_suggestion, close_modal
from linkedin_autoapply.interaction.keyboard import keyboard_fill_input, keyboard_press
from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)

DIALOG_SELECTORS = [
    '[role="dialog"]',
    '.artdeco-modal',
    '.jobs-easy-apply-modal',
]

CAPTURED_ATTRIBUTES = [
    "id", "name", "type", "for", "class", "role", "title", "value",
    "aria-label", "aria-disabled", "aria-invalid", "placeholder",
    "disabled", "readonly", "required",
    "data-test-form-element", "data-test-form-element-label",
    "data-test-text-entity-list-form-title",
]

# Serializes every visible dialog-like container into a plain tree and stamps
# each element with an id so later writes can find it again.
SNAPSHOT_SCRIPT = """
([selectors, attrNames, idAttr]) => {
    let counter = window.__autoapplyCounter || 0;
    const SKIP = new Set(['SCRIPT', 'STYLE', 'SVG', 'svg', 'NOSCRIPT', 'TEMPLATE']);
    const clean = (s) => (s || '').replace(/\\s+/g, ' ').trim();

    const visible = (el) => {
        const r = el.getBoundingClientRect();
        const s = window.getComputedStyle(el);
        return r.width > 0 && r.height > 0 && s.visibility !== 'hidden' && s.display !== 'none';
    };

    const ancestorLabel = (el) => {
        let cur = el.parentElement;
        for (let depth = 0; cur && depth < 5; depth++) {
            const label = cur.querySelector(':scope > label, :scope > legend');
            if (label && clean(label.textContent)) return clean(label.textContent);
            cur = cur.parentElement;
        }
        return '';
    };

    const serialize = (el) => {
        if (!el.getAttribute(idAttr)) {
            counter += 1;
            el.setAttribute(idAttr, 'aa-' + counter);
        }
        const tag = el.tagName.toLowerCase();
        const attributes = {};
        for (const name of attrNames) {
            const value = el.getAttribute(name);
            if (value !== null) attributes[name] = value;
        }
        attributes[idAttr] = el.getAttribute(idAttr);

        if (tag === 'input' || tag === 'textarea' || tag === 'select') {
            attributes.value = el.value == null ? '' : String(el.value);
            delete attributes.disabled;
            delete attributes.readonly;
            if (el.disabled) attributes.disabled = 'true';
            if (el.readOnly) attributes.readonly = 'true';
            if (el.checked) attributes.checked = 'true';
            if (el.labels && el.labels.length) {
                attributes['data-autoapply-label'] = clean(el.labels[0].textContent);
            }
            const around = ancestorLabel(el);
            if (around) attributes['data-autoapply-ancestor-label'] = around;
        } else if (tag === 'option') {
            attributes.value = el.value;
            if (el.selected) attributes.selected = 'true';
        } else if (tag === 'button' && el.disabled) {
            attributes.disabled = 'true';
        }

        const children = [];
        for (const child of el.children) {
            if (!SKIP.has(child.tagName)) children.push(serialize(child));
        }
        return {tag, text: clean(el.innerText || el.textContent).slice(0, 4000), attributes, children};
    };

    const found = new Set();
    for (const selector of selectors) {
        document.querySelectorAll(selector).forEach((el) => { if (visible(el)) found.add(el); });
    }
    const ordered = Array.from(found).sort((a, b) =>
        (a.compareDocumentPosition(b) & Node.DOCUMENT_POSITION_FOLLOWING) ? -1 : 1);
    const result = ordered.map(serialize);
    window.__autoapplyCounter = counter;
    return result;
}
"""


class PlaywrightFieldControl:
    def __init__(self, page, snapshot, locator, timing):
        self.page = page
        self.snapshot = snapshot
        self.locator = locator
        self.timing = timing

    def _inner(self, css, tags):
        # Bare controls are their own group
        if self.snapshot.tag in tags:
            return self.locator.first
        return self.locator.locator(css).first

    def type_text(self, value):
        target = self._inner(
            "input:not([type=hidden]):not([type=radio]):not([type=checkbox]), textarea",
            ("input", "textarea"),
        )
        keyboard_fill_input(self.page, target, value, self.timing)

    def pick_suggestion(self, timeout_ms):
        return click_first_suggestion(self.page, timeout_ms)

    def press(self, key):
        keyboard_press(self.page, key, self.timing)

    def select_option(self, index):
        select = self._inner("select", ("select",))
        select.select_option(index=index)
        human_delay(self.timing.get("dropdown_close_min", 300), self.timing.get("dropdown_close_max", 500))

    def check_radio(self, index):
        radio = self.locator.locator('input[type="radio"]').nth(index)
        radio_id = radio.get_attribute("id")
        # LinkedIn hides the inputs behind styled labels
        if radio_id:
            label = self.page.locator(f'label[for="{radio_id}"]')
            if label.count() > 0:
                label.first.click()
                human_delay(self.timing.get("post_input_min", 200), self.timing.get("post_input_max", 400))
                return
        radio.check(force=True)
        human_delay(self.timing.get("post_input_min", 200), self.timing.get("post_input_max", 400))


class PlaywrightCheckboxControl:
    def __init__(self, page, snapshot, locator, timing):
        self.page = page
        self.snapshot = snapshot
        self.locator = locator
        self.timing = timing

    def click(self):
        checkbox_id = self.snapshot.attr("id")
        if checkbox_id:
            label = self.page.locator(f'label[for="{checkbox_id}"]')
            if label.count() > 0:
                label.first.click()
                human_delay(self.timing.get("post_input_min", 200), self.timing.get("post_input_max", 400))
                return
        self.locator.first.click(force=True)
        human_delay(self.timing.get("post_input_min", 200), self.timing.get("post_input_max", 400))


class PlaywrightDocument:
    """DialogDocument over a live Playwright page"""

    def __init__(self, page, timing=None):
        self.page = page
        self.timing = timing or {}

    def _locate(self, snapshot):
        return self.page.locator(f'[{ELEMENT_ID_ATTR}="{snapshot.element_id}"]')

    def current_url(self):
        return self.page.url

    def dialog_snapshots(self):
        try:
            data = self.page.evaluate(
                SNAPSHOT_SCRIPT, [DIALOG_SELECTORS, CAPTURED_ATTRIBUTES, ELEMENT_ID_ATTR]
            )
        except PlaywrightError as e:
            # Navigation mid-evaluate destroys the execution context
            log.warning("Dialog snapshot failed: %s", e)
            return []
        return [ElementSnapshot.from_dict(item) for item in data or []]

    def page_text(self):
        return self.page.inner_text("body")

    def field_control(self, group):
        return PlaywrightFieldControl(self.page, group, self._locate(group), self.timing)

    def checkbox_control(self, checkbox):
        return PlaywrightCheckboxControl(self.page, checkbox, self._locate(checkbox), self.timing)

    def click(self, element):
        label = " ".join(element.text.split()) or element.attr("aria-label") or element.tag
        return click_element(self.page, self._locate(element), label, self.timing)

    def settle(self):
        human_delay(self.timing.get("settle_min", 2000), self.timing.get("settle_max", 3000))

    def close_dialog(self):
        return close_modal(self.page, self.timing)

    def go_back(self):
        try:
            self.page.go_back(wait_until="domcontentloaded")
        except PlaywrightError as e:
            log.warning("Could not navigate back: %s", e)
        human_delay(1000, 2000)
