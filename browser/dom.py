"""
In-memory document backend built on BeautifulSoup.

Gives a parsed HTML snapshot the small slice of DOM behaviour the form
analyzer, the autofill engine and the posting extractor need:
- CSS queries, attributes, text content, <label> association
- control values (input / textarea / select)
- event listeners with bubbling dispatch
- a timer queue for deferred work (highlight removal)
- <style> injection

The live-browser counterpart is browser.page_document.PageDocument.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

CONTROL_TAGS = ["input", "select", "textarea"]


class DetachedElementError(RuntimeError):
    """Raised when writing to an element that was removed from its document."""


@dataclass
class DomEvent:
    type: str
    target: "SnapshotElement"
    bubbles: bool = True


@dataclass(frozen=True)
class SelectOption:
    value: str
    text: str
    selected: bool = False


def _collapse(text: str) -> str:
    return " ".join((text or "").split())


def _text_without_controls(tag) -> str:
    """Rendered text of a container, ignoring nested form controls."""
    clone = copy.copy(tag)
    for control in clone.find_all(CONTROL_TAGS):
        control.decompose()
    return _collapse(clone.get_text())


def _option_text(option) -> str:
    return _collapse(option.get_text())


def _option_value(option) -> str:
    # <option> without a value attribute submits its text
    if option.has_attr("value"):
        return option["value"]
    return _option_text(option)


class SnapshotElement:
    """Wrapper around one bs4 Tag living in a SnapshotDocument."""

    def __init__(self, document: "SnapshotDocument", tag):
        self.document = document
        self.tag = tag

    def __eq__(self, other):
        return isinstance(other, SnapshotElement) and other.tag is self.tag

    def __hash__(self):
        return id(self.tag)

    def __repr__(self):
        return f"<SnapshotElement {self.tag_name} id={self.get_attribute('id')!r} name={self.get_attribute('name')!r}>"

    # ---- read access ----

    @property
    def tag_name(self) -> str:
        return self.tag.name.lower()

    def get_attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if isinstance(value, list):
            # multi-valued attributes (class, rel)
            return " ".join(value)
        return value

    @property
    def type(self) -> str:
        if self.tag_name == "textarea":
            return "textarea"
        if self.tag_name == "select":
            return "select-multiple" if self.tag.has_attr("multiple") else "select-one"
        return (self.get_attribute("type") or "text").strip().lower()

    @property
    def disabled(self) -> bool:
        return self.tag.has_attr("disabled")

    @property
    def is_connected(self) -> bool:
        return any(parent is self.document.soup for parent in self.tag.parents)

    def text_content(self) -> str:
        return self.tag.get_text()

    def label_texts(self) -> List[str]:
        """Texts of associated labels: label[for=id] first, then a wrapping label."""
        labels = []
        element_id = self.get_attribute("id")
        if element_id:
            labels.extend(self.document.soup.find_all("label", attrs={"for": element_id}))

        wrapping = self.tag.find_parent("label")
        if wrapping is not None and not any(wrapping is label for label in labels):
            labels.append(wrapping)

        texts = []
        for label in labels:
            text = _text_without_controls(label)
            if text:
                texts.append(text)
        return texts

    def options(self) -> List[SelectOption]:
        if self.tag_name != "select":
            return []
        return [
            SelectOption(
                value=_option_value(option),
                text=_option_text(option),
                selected=option.has_attr("selected"),
            )
            for option in self.tag.find_all("option")
        ]

    @property
    def value(self) -> str:
        if self.tag_name == "textarea":
            return self.tag.get_text()
        if self.tag_name == "select":
            options = self.options()
            for option in options:
                if option.selected:
                    return option.value
            if self.tag.has_attr("value"):
                return self.tag["value"]
            return options[0].value if options else ""
        return self.get_attribute("value") or ""

    def has_class(self, name: str) -> bool:
        return name in self.tag.get("class", [])

    # ---- write access ----

    def _require_connected(self, action: str):
        if not self.is_connected:
            raise DetachedElementError(f"cannot {action}: {self!r} is no longer in the document")

    def set_value(self, value: str):
        """
        Assign a control value.

        For <select>, the option whose value equals `value` becomes the only
        selected one; without such an option the raw string is stored as the
        control's value.
        """
        self._require_connected("set value")

        if self.tag_name == "textarea":
            self.tag.string = value
        elif self.tag_name == "select":
            matched = False
            for option in self.tag.find_all("option"):
                if not matched and _option_value(option) == value:
                    option["selected"] = ""
                    matched = True
                elif option.has_attr("selected"):
                    del option["selected"]
            if matched:
                if self.tag.has_attr("value"):
                    del self.tag["value"]
            else:
                self.tag["value"] = value
        else:
            self.tag["value"] = value

    def dispatch_event(self, event_type: str, bubbles: bool = True):
        self._require_connected(f"dispatch {event_type}")
        self.document.dispatch(DomEvent(type=event_type, target=self, bubbles=bubbles))

    def add_class(self, name: str):
        classes = list(self.tag.get("class", []))
        if name not in classes:
            self.tag["class"] = classes + [name]

    def remove_class(self, name: str):
        # Works on detached tags too
        classes = [c for c in self.tag.get("class", []) if c != name]
        if classes:
            self.tag["class"] = classes
        elif self.tag.has_attr("class"):
            del self.tag["class"]

    def remove_class_later(self, name: str, delay_ms: int):
        self.document.set_timeout(lambda: self.remove_class(name), delay_ms)

    def scroll_into_view(self):
        self._require_connected("scroll into view")
        self.document.scrolled.append(self)

    def remove(self):
        """Detach the element from its document."""
        self.tag.extract()


class SnapshotDocument:
    """
    Parsed HTML page.

    Usage:
        doc = SnapshotDocument(html)
        doc.add_event_listener(doc.query_selector("#email"), "change", on_change)
        result = autofill_form(doc, profile)
        doc.run_timers()
        filled_html = doc.html()
    """

    def __init__(self, html: str = ""):
        self.soup = BeautifulSoup(html or "", "html.parser")
        self._listeners = []
        self._timers = []
        self.scrolled: List[SnapshotElement] = []

    def _wrap(self, tag) -> SnapshotElement:
        return SnapshotElement(self, tag)

    def query_selector(self, selector: str) -> Optional[SnapshotElement]:
        tag = self.soup.select_one(selector)
        return self._wrap(tag) if tag is not None else None

    def query_selector_all(self, selector: str) -> List[SnapshotElement]:
        return [self._wrap(tag) for tag in self.soup.select(selector)]

    @property
    def title(self) -> str:
        tag = self.soup.find("title")
        return _collapse(tag.get_text()) if tag is not None else ""

    def html(self) -> str:
        return str(self.soup)

    # ---- styles ----

    def has_style(self, style_id: str) -> bool:
        return self.soup.find(attrs={"id": style_id}) is not None

    def ensure_style(self, style_id: str, css: str) -> bool:
        """Append <style id=style_id> to <head> unless present. True if injected."""
        if self.has_style(style_id):
            return False
        style = self.soup.new_tag("style", attrs={"id": style_id})
        style.string = css
        self._head().append(style)
        logger.debug(f"Injected style #{style_id}")
        return True

    def _head(self):
        head = self.soup.find("head")
        if head is None:
            head = self.soup.new_tag("head")
            html = self.soup.find("html")
            if html is not None:
                html.insert(0, head)
            else:
                self.soup.insert(0, head)
        return head

    # ---- events ----

    def add_event_listener(self, target, event_type: str, callback: Callable[[DomEvent], None]):
        """Listen on an element, or on the whole document when target is None / self."""
        node = self.soup if target is None or target is self else target.tag
        self._listeners.append((node, event_type, callback))

    def dispatch(self, event: DomEvent):
        path = [event.target.tag]
        if event.bubbles:
            path.extend(event.target.tag.parents)
        for node in path:
            for listener_node, event_type, callback in list(self._listeners):
                if listener_node is node and event_type == event.type:
                    callback(event)

    # ---- timers ----

    def set_timeout(self, callback: Callable[[], None], delay_ms: int):
        self._timers.append((delay_ms, callback))

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def run_timers(self) -> int:
        """Run every queued callback in delay order. Returns how many ran."""
        timers = sorted(self._timers, key=lambda timer: timer[0])
        self._timers = []
        for _, callback in timers:
            callback()
        return len(timers)
