"""
Tests for the BeautifulSoup document backend.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser.dom import DetachedElementError, SnapshotDocument


# ============ Query Tests ============

class TestQueries:
    """Tests for selectors and element identity."""

    def test_query_selector_missing(self):
        doc = SnapshotDocument("<p>hi</p>")
        assert doc.query_selector("input") is None
        assert doc.query_selector_all("input") == []

    def test_wrappers_compare_by_node(self):
        doc = SnapshotDocument('<input id="a"><input id="b">')
        first = doc.query_selector("#a")

        assert first == doc.query_selector("#a")
        assert first != doc.query_selector("#b")
        assert len({first, doc.query_selector("#a")}) == 1

    def test_title_whitespace_collapsed(self):
        doc = SnapshotDocument("<title>\n  Engineer   at Acme \n</title>")
        assert doc.title == "Engineer at Acme"

    def test_no_title(self):
        assert SnapshotDocument("<p>x</p>").title == ""


# ============ Control Tests ============

class TestControls:
    """Tests for control types and values."""

    def test_types(self):
        doc = SnapshotDocument(
            '<input id="a"><input id="b" type="EMAIL"><textarea id="c"></textarea>'
            '<select id="d"></select><select id="e" multiple></select>'
        )
        assert [doc.query_selector(f"#{i}").type for i in "abcde"] == [
            "text",
            "email",
            "textarea",
            "select-one",
            "select-multiple",
        ]

    def test_select_value_defaults_to_first_option(self):
        doc = SnapshotDocument("<select><option>One</option><option>Two</option></select>")
        assert doc.query_selector("select").value == "One"

    def test_select_value_prefers_selected_option(self):
        doc = SnapshotDocument('<select><option value="1">One</option><option value="2" selected>Two</option></select>')
        assert doc.query_selector("select").value == "2"

    def test_option_without_value_uses_text(self):
        doc = SnapshotDocument("<select><option> New   York </option></select>")
        [option] = doc.query_selector("select").options()
        assert option.value == "New York"
        assert option.text == "New York"

    def test_set_value_input(self):
        doc = SnapshotDocument('<input name="email" value="old">')
        element = doc.query_selector("input")

        element.set_value("new@example.com")

        assert element.value == "new@example.com"
        assert 'value="new@example.com"' in doc.html()

    def test_set_value_select_clears_other_options(self):
        doc = SnapshotDocument('<select><option value="a" selected>A</option><option value="b">B</option></select>')
        select = doc.query_selector("select")

        select.set_value("b")

        assert [(o.value, o.selected) for o in select.options()] == [("a", False), ("b", True)]

    def test_multi_valued_attribute(self):
        doc = SnapshotDocument('<input class="x y">')
        assert doc.query_selector("input").get_attribute("class") == "x y"

    def test_label_texts_skip_nested_controls(self):
        doc = SnapshotDocument(
            '<label>Country <select><option>France</option></select></label>'
        )
        assert doc.query_selector("select").label_texts() == ["Country"]


# ============ Detached Element Tests ============

class TestDetachedElements:
    """Writes to removed elements fail loudly."""

    @pytest.fixture
    def detached(self):
        doc = SnapshotDocument('<form><input name="email"></form>')
        element = doc.query_selector("input")
        element.remove()
        return element

    def test_is_connected(self, detached):
        assert detached.is_connected is False

    def test_set_value_raises(self, detached):
        with pytest.raises(DetachedElementError):
            detached.set_value("x")

    def test_dispatch_raises(self, detached):
        with pytest.raises(DetachedElementError):
            detached.dispatch_event("change")

    def test_scroll_raises(self, detached):
        with pytest.raises(DetachedElementError):
            detached.scroll_into_view()

    def test_class_changes_allowed(self, detached):
        detached.add_class("flash")
        detached.remove_class("flash")
        assert not detached.has_class("flash")


# ============ Event Tests ============

class TestEvents:
    """Tests for listener dispatch."""

    def test_bubbles_to_ancestors_and_document(self):
        doc = SnapshotDocument('<form id="f"><div><input name="email"></div></form>')
        element = doc.query_selector("input")
        order = []
        doc.add_event_listener(element, "input", lambda e: order.append("element"))
        doc.add_event_listener(doc.query_selector("#f"), "input", lambda e: order.append("form"))
        doc.add_event_listener(None, "input", lambda e: order.append("document"))

        element.dispatch_event("input")

        assert order == ["element", "form", "document"]

    def test_non_bubbling_event(self):
        doc = SnapshotDocument('<form><input></form>')
        seen = []
        doc.add_event_listener(doc, "focus", lambda e: seen.append(e.type))

        doc.query_selector("input").dispatch_event("focus", bubbles=False)

        assert seen == []

    def test_event_type_filter(self):
        doc = SnapshotDocument("<input>")
        element = doc.query_selector("input")
        seen = []
        doc.add_event_listener(element, "change", lambda e: seen.append(e.type))

        element.dispatch_event("input")

        assert seen == []

    def test_listener_sees_target(self):
        doc = SnapshotDocument('<input name="city">')
        targets = []
        doc.add_event_listener(None, "change", lambda e: targets.append(e.target))

        doc.query_selector("input").dispatch_event("change")

        assert targets == [doc.query_selector("input")]


# ============ Style And Timer Tests ============

class TestStylesAndTimers:
    """Tests for style injection and deferred callbacks."""

    def test_ensure_style_once(self):
        doc = SnapshotDocument("<html><head></head><body></body></html>")

        assert doc.ensure_style("s1", ".a {}") is True
        assert doc.ensure_style("s1", ".a {}") is False
        assert doc.has_style("s1")
        assert doc.soup.head.find("style")["id"] == "s1"

    def test_ensure_style_creates_head(self):
        doc = SnapshotDocument("<input>")

        doc.ensure_style("s1", ".a {}")

        assert doc.soup.find("head").find("style") is not None

    def test_timers_run_in_delay_order(self):
        doc = SnapshotDocument("")
        ran = []
        doc.set_timeout(lambda: ran.append("late"), 500)
        doc.set_timeout(lambda: ran.append("early"), 10)

        assert doc.pending_timers == 2
        assert doc.run_timers() == 2
        assert ran == ["early", "late"]
        assert doc.pending_timers == 0

    def test_remove_class_later(self):
        doc = SnapshotDocument('<input class="keep flash">')
        element = doc.query_selector("input")

        element.remove_class_later("flash", 1000)
        assert element.has_class("flash")

        doc.run_timers()
        assert not element.has_class("flash")
        assert element.has_class("keep")
