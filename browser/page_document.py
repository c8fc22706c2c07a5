"""
Live-page document backend (Playwright sync API).

Same surface as browser.dom.SnapshotDocument, so the form analyzer and the
autofill engine run unchanged against a real browser tab. Writes go through
the native `value` setter of the element's prototype so React/Vue controlled
inputs see the change, and every write refuses to touch a detached node.
"""

import logging
from typing import List, Optional

from playwright.sync_api import ElementHandle, Page

from .dom import SelectOption

logger = logging.getLogger(__name__)


TAG_NAME_JS = "el => el.tagName.toLowerCase()"

LABEL_TEXTS_JS = """
el => {
    const clean = (label) => {
        const clone = label.cloneNode(true);
        clone.querySelectorAll('input, select, textarea').forEach((c) => c.remove());
        return (clone.textContent || '').replace(/\\s+/g, ' ').trim();
    };
    const labels = [];
    if (el.id) {
        el.ownerDocument.querySelectorAll('label').forEach((label) => {
            if (label.htmlFor === el.id) labels.push(label);
        });
    }
    const wrapping = el.closest('label');
    if (wrapping && !labels.includes(wrapping)) labels.push(wrapping);
    return labels.map(clean).filter(Boolean);
}
"""

OPTIONS_JS = """
el => el.tagName.toLowerCase() === 'select'
    ? Array.from(el.options).map((o) => ({value: o.value, text: o.text, selected: o.selected}))
    : []
"""

VALUE_JS = "el => el.value"

SET_VALUE_JS = """
(el, value) => {
    if (!el.isConnected) throw new Error('element is detached from the document');
    const descriptor = Object.getOwnPropertyDescriptor(Object.getPrototypeOf(el), 'value');
    if (descriptor && descriptor.set) {
        descriptor.set.call(el, value);
    } else {
        el.value = value;
    }
}
"""

DISPATCH_JS = """
(el, type) => {
    if (!el.isConnected) throw new Error('element is detached from the document');
    el.dispatchEvent(new Event(type, {bubbles: true}));
}
"""

ADD_CLASS_JS = "(el, name) => el.classList.add(name)"

REMOVE_CLASS_LATER_JS = """
(el, args) => { setTimeout(() => el.classList.remove(args.name), args.delay); }
"""

SCROLL_JS = """
el => {
    if (!el.isConnected) throw new Error('element is detached from the document');
    el.scrollIntoView({behavior: 'smooth', block: 'center'});
}
"""

ENSURE_STYLE_JS = """
(args) => {
    if (document.getElementById(args.id)) return false;
    const style = document.createElement('style');
    style.id = args.id;
    style.textContent = args.css;
    (document.head || document.documentElement).appendChild(style);
    return true;
}
"""

HAS_STYLE_JS = "id => !!document.getElementById(id)"


class PageElement:
    """Wrapper around a Playwright ElementHandle."""

    def __init__(self, page: Page, handle: ElementHandle):
        self.page = page
        self.handle = handle
        self._tag_name = None

    def __eq__(self, other):
        return isinstance(other, PageElement) and other.handle is self.handle

    def __hash__(self):
        return id(self.handle)

    def __repr__(self):
        return f"<PageElement {self.tag_name} id={self.get_attribute('id')!r}>"

    @property
    def tag_name(self) -> str:
        if self._tag_name is None:
            self._tag_name = self.handle.evaluate(TAG_NAME_JS)
        return self._tag_name

    def get_attribute(self, name: str) -> Optional[str]:
        return self.handle.get_attribute(name)

    @property
    def type(self) -> str:
        if self.tag_name == "textarea":
            return "textarea"
        if self.tag_name == "select":
            return "select-multiple" if self.get_attribute("multiple") is not None else "select-one"
        return (self.get_attribute("type") or "text").strip().lower()

    @property
    def disabled(self) -> bool:
        return self.get_attribute("disabled") is not None

    def text_content(self) -> str:
        return self.handle.text_content() or ""

    def label_texts(self) -> List[str]:
        return list(self.handle.evaluate(LABEL_TEXTS_JS) or [])

    def options(self) -> List[SelectOption]:
        raw = self.handle.evaluate(OPTIONS_JS) or []
        return [
            SelectOption(value=o.get("value", ""), text=o.get("text", ""), selected=bool(o.get("selected")))
            for o in raw
        ]

    @property
    def value(self) -> str:
        return self.handle.evaluate(VALUE_JS) or ""

    def set_value(self, value: str):
        self.handle.evaluate(SET_VALUE_JS, value)

    def dispatch_event(self, event_type: str):
        self.handle.evaluate(DISPATCH_JS, event_type)

    def add_class(self, name: str):
        self.handle.evaluate(ADD_CLASS_JS, name)

    def remove_class_later(self, name: str, delay_ms: int):
        self.handle.evaluate(REMOVE_CLASS_LATER_JS, {"name": name, "delay": delay_ms})

    def scroll_into_view(self):
        self.handle.evaluate(SCROLL_JS)


class PageDocument:
    """Document view over a live Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    def query_selector(self, selector: str) -> Optional[PageElement]:
        handle = self.page.query_selector(selector)
        return PageElement(self.page, handle) if handle else None

    def query_selector_all(self, selector: str) -> List[PageElement]:
        return [PageElement(self.page, handle) for handle in self.page.query_selector_all(selector)]

    @property
    def title(self) -> str:
        return self.page.title() or ""

    def html(self) -> str:
        return self.page.content()

    def has_style(self, style_id: str) -> bool:
        return bool(self.page.evaluate(HAS_STYLE_JS, style_id))

    def ensure_style(self, style_id: str, css: str) -> bool:
        injected = bool(self.page.evaluate(ENSURE_STYLE_JS, {"id": style_id, "css": css}))
        if injected:
            logger.debug(f"Injected style #{style_id} into {self.page.url}")
        return injected
