"""
Unit Tests for Vue Extension
============================

Tests for Vue option defaults, bindings, directives and single-file
component generation.
"""

from pathlib import Path

from template_engine.extensions.vue import vue_attribute_formatter, vue_prop_type
from template_engine.models.schemas import ComponentMetadata, RenderOptions, parse_nodes

from tests.utils.data_generators import TemplateDataGenerator
from tests.utils.helpers import element


class TestVueOptions:
    """Test option defaults supplied by the Vue extension."""

    def test_defaults(self, vue_extension):
        """Test Vue-specific defaults."""
        options = vue_extension.options_handler(RenderOptions(), RenderOptions())

        assert options.file_extension == ".vue"
        assert options.output_dir == Path("dist/vue")
        assert options.formatter is None
        assert options.component_name == "UntitledComponent"
        assert options.attribute_formatter is vue_attribute_formatter

    def test_component_name_from_metadata(self, vue_extension):
        """Test the component metadata name is used when no name was given."""
        user_options = RenderOptions(component=ComponentMetadata(name="profile"))

        assert vue_extension.options_handler(RenderOptions(), user_options).component_name == "profile"


class TestVueHelpers:
    """Test Vue helper functions."""

    def test_attribute_formatter(self):
        """Test static and bound attribute syntax."""
        assert vue_attribute_formatter("id", "main", False) == ' id="main"'
        assert vue_attribute_formatter("title", "label", True) == ' :title="label"'

    def test_prop_types(self):
        """Test prop type mapping."""
        assert vue_prop_type("string") == "String"
        assert vue_prop_type(" Number ") == "Number"
        assert vue_prop_type("Date") == "null"


class TestVueNodeHandler:
    """Test node rewriting from Vue extension data."""

    def test_merges_bindings_and_tag(self, vue_extension):
        """Test attributes and bindings merge and the tag is replaced."""
        node = parse_nodes(
            [
                {
                    "tag": "button",
                    "extensions": {
                        "vue": {
                            "attributes": {"type": "button"},
                            "expressionAttributes": {"disabled": "isBusy"},
                            "tag": "BaseButton",
                        }
                    },
                }
            ]
        )[0]

        result = vue_extension.node_handler(node, [])

        assert result.attributes == {"type": "button"}
        assert result.expression_attributes == {"disabled": "isBusy"}
        assert result.tag == "BaseButton"


class TestVueSyntaxHandlers:
    """Test conditional and iteration directives."""

    def test_conditional(self, vue_extension):
        """Test v-if and v-else wrappers."""
        node = parse_nodes([{"type": "if", "condition": "ok", "then": []}])[0]

        assert vue_extension.conditional_handler(node, "yes", "no", RenderOptions()) == (
            '<template v-if="ok">yes</template><template v-else>no</template>'
        )
        assert vue_extension.conditional_handler(node, "yes", None, RenderOptions()) == (
            '<template v-if="ok">yes</template>'
        )

    def test_iteration(self, vue_extension):
        """Test v-for with index and key."""
        node = parse_nodes([{"type": "for", "items": "rows", "item": "row", "index": "i", "key": "row.id"}])[0]

        assert vue_extension.iteration_handler(node, "<tr></tr>", RenderOptions()) == (
            '<template v-for="(row, i) in rows" :key="row.id"><tr></tr></template>'
        )

    def test_iteration_without_index(self, vue_extension):
        """Test v-for with only an item binding."""
        node = parse_nodes([{"type": "for", "items": "rows"}])[0]

        assert vue_extension.iteration_handler(node, "x", RenderOptions()) == (
            '<template v-for="item in rows">x</template>'
        )


class TestVueComponent:
    """Test single-file component generation."""

    async def test_minimal_component(self, renderer, vue_extension, simple_template):
        """Test the SFC wrapper without metadata."""
        markup = await renderer.render(
            simple_template, RenderOptions(extensions=[vue_extension], name="user-card")
        )

        assert markup == (
            "<template>\n"
            '<div class="container">Hello, World!</div>\n'
            "</template>\n"
            "\n"
            "<script>\n"
            "export default {\n"
            "  name: 'user-card',\n"
            "};\n"
            "</script>\n"
        )

    async def test_component_with_metadata(self, renderer, vue_extension):
        """Test imports, props and TypeScript script language."""
        component = ComponentMetadata(
            name="user-card",
            props={"title": "string", "count": "number"},
            imports=["import Avatar from './Avatar.vue';"],
            typescript=True,
        )
        options = RenderOptions(extensions=[vue_extension], component=component)

        markup = await renderer.render([element("span")], options)

        assert markup == (
            "<template>\n"
            "<span></span>\n"
            "</template>\n"
            "\n"
            '<script lang="ts">\n'
            "import Avatar from './Avatar.vue';\n"
            "\n"
            "export default {\n"
            "  name: 'user-card',\n"
            "  props: {\n"
            "    title: { type: String },\n"
            "    count: { type: Number },\n"
            "  },\n"
            "};\n"
            "</script>\n"
        )

    async def test_component_extension_config(self, renderer, vue_extension):
        """Test Vue settings from component metadata reach the SFC wrapper."""
        component = ComponentMetadata(
            name="counter",
            extensions={"vue": {"scriptLang": "ts", "script": "data() { return { n: 0 }; },"}},
        )
        options = RenderOptions(extensions=[vue_extension], component=component)

        markup = await renderer.render([element("span")], options)

        assert '<script lang="ts">\n' in markup
        assert "  data() { return { n: 0 }; },\n};\n" in markup

    async def test_logic_directives(self, renderer, vue_extension):
        """Test logic nodes render as template directives."""
        markup = await renderer.render(
            TemplateDataGenerator.generate_logic_template(), RenderOptions(extensions=[vue_extension])
        )

        assert (
            '<!-- List --><template v-if="items.length > 0"><ul>'
            '<template v-for="(item, i) in items" :key="item.id"><li>Item</li></template>'
            "</ul></template><template v-else><p>Empty</p></template>"
        ) in markup

    async def test_writes_vue_file(self, renderer, vue_extension, simple_template, output_dir):
        """Test the component is written with the .vue extension."""
        options = RenderOptions(
            extensions=[vue_extension], name="card", write_output_file=True, output_dir=output_dir
        )

        result = await renderer.render_artifacts(simple_template, options)

        assert result.written_files == [output_dir / "card.vue"]
