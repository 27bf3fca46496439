"""
Unit Tests for Style Manager
============================

Tests for selector resolution, declaration merging, inline styles and
CSS/SCSS output generation.
"""

import pytest
from unittest.mock import Mock

from template_engine.core.extensions.base import StylePlugin
from template_engine.core.rendering.styles import (
    StyleManager,
    camel_to_kebab,
    format_at_rule,
    merge_style_records,
)
from template_engine.models.schemas import ElementNode, RenderOptions, TextNode, parse_nodes

from tests.utils.assertions import assert_css_block
from tests.utils.data_generators import TemplateDataGenerator
from tests.utils.helpers import style_options


def styled(tag: str = "div", css_class: str = "", **styles) -> ElementNode:
    attributes = {"styles": styles}
    if css_class:
        attributes["class"] = css_class
    return ElementNode(tag=tag, attributes=attributes)


class TestStyleHelpers:
    """Test style helper functions."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("backgroundColor", "background-color"),
            ("fontSize", "font-size"),
            ("color", "color"),
            ("gridTemplate2Columns", "grid-template2-columns"),
        ],
    )
    def test_camel_to_kebab(self, name, expected):
        """Test camelCase property conversion."""
        assert camel_to_kebab(name) == expected

    def test_format_at_rule_adds_parentheses(self):
        """Test bare media queries are wrapped in parentheses."""
        assert format_at_rule("@media max-width: 768px") == "@media (max-width: 768px)"
        assert format_at_rule("@media (min-width: 1px)") == "@media (min-width: 1px)"
        assert format_at_rule("@supports (display: grid)") == "@supports (display: grid)"

    def test_merge_nested_one_level(self):
        """Test nested mappings merge while flat keys are replaced."""
        existing = {"color": "red", ":hover": {"color": "blue"}}
        merged = merge_style_records(existing, {"color": "green", ":hover": {"fontWeight": "bold"}})

        assert merged == {"color": "green", ":hover": {"color": "blue", "fontWeight": "bold"}}
        assert existing == {"color": "red", ":hover": {"color": "blue"}}


class TestProcessNode:
    """Test style collection."""

    def test_selector_from_first_class(self):
        """Test the first class name becomes the selector."""
        manager = StyleManager()
        manager.process_node(styled(css_class="btn primary", color="red"))

        assert manager.processed_styles == {".btn": {"color": "red"}}

    def test_selector_from_class_name(self):
        """Test className is used when class is absent."""
        manager = StyleManager()
        node = ElementNode(tag="div", attributes={"className": "card", "styles": {"margin": 0}})
        manager.process_node(node)

        assert ".card" in manager.processed_styles

    def test_untitled_selector(self):
        """Test nodes without a class use the untitled selector."""
        manager = StyleManager()
        manager.process_node(styled(color="red"))

        assert manager.processed_styles == {".untitled-element": {"color": "red"}}

    def test_nodes_without_structured_styles_are_skipped(self):
        """Test string styles and non-elements are not collected."""
        manager = StyleManager()
        manager.process_node(ElementNode(tag="div", attributes={"styles": "color: red"}))
        manager.process_node(ElementNode(tag="div"))
        manager.process_node(TextNode(content="text"))

        assert manager.has_styles() is False

    def test_same_selector_merges_last_write_wins(self):
        """Test declarations for one selector merge in visitation order."""
        manager = StyleManager()
        manager.process_node(styled(css_class="btn", color="red", margin="0"))
        manager.process_node(styled(css_class="btn", color="blue"))

        assert manager.processed_styles[".btn"] == {"color": "blue", "margin": "0"}

    def test_processing_twice_is_idempotent(self):
        """Test processing the same node twice yields the same CSS as once."""
        node = parse_nodes(TemplateDataGenerator.generate_styled_button())[0]
        options = RenderOptions(styles=style_options("css"))

        once = StyleManager()
        once.process_node(node)
        twice = StyleManager()
        twice.process_node(node)
        twice.process_node(node)

        assert once.generate_output(options) == twice.generate_output(options)

    def test_plugins_observe_processed_nodes(self):
        """Test style plugins are notified for each processed node."""
        plugin = Mock(spec=StylePlugin)
        manager = StyleManager([plugin])
        node = styled(css_class="btn", color="red")

        manager.process_node(node)
        manager.process_node(ElementNode(tag="span"))

        plugin.on_process_node.assert_called_once_with(node)

    def test_process_tree_visits_nested_nodes(self):
        """Test every child list is visited."""
        tree = parse_nodes(
            [
                {
                    "tag": "div",
                    "attributes": {"class": "outer", "styles": {"color": "red"}},
                    "children": [
                        {
                            "type": "if",
                            "condition": "x",
                            "then": [{"tag": "p", "attributes": {"class": "inner", "styles": {"margin": 0}}}],
                        }
                    ],
                }
            ]
        )
        manager = StyleManager()
        manager.process_tree(tree)

        assert list(manager.processed_styles) == [".outer", ".inner"]


class TestInlineStyles:
    """Test inline style text."""

    def test_flat_properties_only(self):
        """Test nested keys are excluded and names are kebab-cased."""
        node = parse_nodes(TemplateDataGenerator.generate_styled_button())[0]

        assert StyleManager().get_inline_styles(node) == "background-color: blue; font-size: 16px"

    def test_none_without_structured_styles(self):
        """Test None is returned when no structured styles exist."""
        manager = StyleManager()

        assert manager.get_inline_styles(ElementNode(tag="div")) is None
        assert manager.get_inline_styles(ElementNode(tag="div", attributes={"styles": "color: red"})) is None


class TestGenerateOutput:
    """Test aggregated style output."""

    @pytest.fixture
    def manager(self):
        """Style manager with the styled button collected."""
        manager = StyleManager()
        manager.process_node(parse_nodes(TemplateDataGenerator.generate_styled_button())[0])
        return manager

    def test_css_skips_nested_keys(self, manager):
        """Test CSS emits one flat block per selector."""
        css = manager.generate_output(RenderOptions(styles=style_options("css")))

        assert css == ".btn {\n  background-color: blue;\n  font-size: 16px;\n}"

    def test_css_multiple_selectors(self, manager):
        """Test blocks are separated by blank lines in insertion order."""
        manager.process_node(styled(css_class="card", padding="4px"))
        css = manager.generate_output(RenderOptions(styles=style_options("css")))

        assert_css_block(css, ".btn", ["background-color: blue;"])
        assert_css_block(css, ".card", ["padding: 4px;"])
        assert css.index(".btn") < css.index(".card")
        assert "\n\n" in css

    def test_css_omits_selectors_with_only_nested_keys(self):
        """Test selectors without flat declarations produce no CSS block."""
        manager = StyleManager()
        manager.process_node(ElementNode(tag="a", attributes={"class": "link", "styles": {":hover": {"color": "red"}}}))

        assert manager.generate_output(RenderOptions(styles=style_options("css"))) == ""

    def test_scss_nests_pseudo_and_media(self, manager):
        """Test SCSS emits nested pseudo-selector and media blocks."""
        scss = manager.generate_output(RenderOptions(styles=style_options("scss")))

        assert scss == (
            ".btn {\n"
            "  background-color: blue;\n"
            "  font-size: 16px;\n"
            "  &:hover {\n"
            "    background-color: navy;\n"
            "  }\n"
            "  @media (max-width: 768px) {\n"
            "    font-size: 14px;\n"
            "  }\n"
            "}"
        )

    def test_inline_output_is_empty(self, manager):
        """Test inline mode produces no style text."""
        assert manager.generate_output(RenderOptions(styles=style_options("inline"))) == ""

    def test_minified_css(self, manager):
        """Test minified CSS collapses rules onto one line."""
        css = manager.generate_output(RenderOptions(styles=style_options("css", minify=True)))

        assert css == ".btn{background-color:blue;font-size:16px;}"

    def test_minified_scss(self, manager):
        """Test minified SCSS keeps nested blocks on one line."""
        scss = manager.generate_output(RenderOptions(styles=style_options("scss", minify=True)))

        assert scss == (
            ".btn{background-color:blue;font-size:16px;"
            "&:hover{background-color:navy;}"
            "@media (max-width: 768px){font-size:14px;}}"
        )

    def test_scss_appends_plugin_output(self):
        """Test non-empty plugin output is concatenated after SCSS blocks."""
        plugin = Mock(spec=StylePlugin)
        plugin.generate_styles.return_value = ".extra {\n  color: red;\n}"
        empty = Mock(spec=StylePlugin)
        empty.generate_styles.return_value = None

        manager = StyleManager([plugin, empty])
        manager.process_node(styled(css_class="btn", color="blue"))
        tree = [ElementNode(tag="div")]
        options = RenderOptions(styles=style_options("scss"))

        scss = manager.generate_output(options, tree)

        assert scss == ".btn {\n  color: blue;\n}\n\n.extra {\n  color: red;\n}"
        plugin.generate_styles.assert_called_once_with(manager.processed_styles, options, tree)

    def test_css_does_not_call_plugins(self):
        """Test plugin style generation only applies to SCSS."""
        plugin = Mock(spec=StylePlugin)
        manager = StyleManager([plugin])
        manager.process_node(styled(css_class="btn", color="blue"))

        manager.generate_output(RenderOptions(styles=style_options("css")))

        plugin.generate_styles.assert_not_called()
