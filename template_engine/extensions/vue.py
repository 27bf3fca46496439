"""
Vue Extension
=============

Render templates as Vue single-file components: ``:attr`` bindings,
``v-if``/``v-else`` and ``v-for`` on ``<template>`` wrappers, and an SFC
wrapper rendered with Jinja2.
"""

from pathlib import Path
from typing import Any, List, Optional

import jinja2

from template_engine.core.extensions.base import Extension
from template_engine.models.schemas import (
    BaseNode,
    ElementNode,
    ForNode,
    IfNode,
    RenderOptions,
    default_attribute_formatter,
)


DEFAULT_COMPONENT_NAME = "UntitledComponent"

PROP_TYPES = {
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "object": "Object",
    "array": "Array",
    "function": "Function",
}

SFC_TEMPLATE = """\
<template>
{{ markup }}
</template>

<script{% if script_lang %} lang="{{ script_lang }}"{% endif %}>
{% for statement in imports %}
{{ statement }}
{% endfor %}
{% if imports %}

{% endif %}
export default {
  name: '{{ name }}',
{% if props %}
  props: {
{% for prop, prop_type in props %}
    {{ prop }}: { type: {{ prop_type }} },
{% endfor %}
  },
{% endif %}
{% if script %}
{{ script }}
{% endif %}
};
</script>
"""

_env = jinja2.Environment(
    loader=jinja2.DictLoader({"component.vue": SFC_TEMPLATE}),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def vue_attribute_formatter(attribute: str, value: Any, is_expression: bool = False) -> str:
    """Format expressions as ``:name="expr"`` bindings."""
    if is_expression:
        return f' :{attribute}="{value}"'
    return default_attribute_formatter(attribute, value, False)


def vue_prop_type(type_name: str) -> str:
    """Map a prop type string to a Vue runtime type."""
    return PROP_TYPES.get(type_name.strip().lower(), "null")


class VueExtension(Extension):
    """Vue single-file component renderer."""

    key = "vue"
    is_renderer = True

    def options_handler(self, defaults: RenderOptions, user_options: RenderOptions) -> RenderOptions:
        component_name = user_options.component.name if user_options.component else None
        return defaults.model_copy(
            update={
                "attribute_formatter": vue_attribute_formatter,
                "component_name": user_options.component_name
                or user_options.name
                or component_name
                or DEFAULT_COMPONENT_NAME,
                "file_extension": ".vue",
                "output_dir": Path("dist/vue"),
                "formatter": None,
            }
        )

    def node_handler(self, node: BaseNode, ancestors: List[BaseNode]) -> BaseNode:
        data = node.extension_data(self.key)
        if data is None or not isinstance(node, ElementNode):
            return node

        if data.get("attributes"):
            node.attributes = {**node.attributes, **data["attributes"]}
        if data.get("expressionAttributes"):
            node.expression_attributes = {**node.expression_attributes, **data["expressionAttributes"]}
        if data.get("tag"):
            self.logger.debug("Overriding tag", tag=node.tag, override=data["tag"])
            node.tag = data["tag"]

        return node

    def conditional_handler(
        self, node: BaseNode, then_text: str, else_text: Optional[str], options: RenderOptions
    ) -> str:
        condition = node.condition if isinstance(node, IfNode) else ""
        output = f'<template v-if="{condition}">{then_text}</template>'
        if else_text is not None:
            output += f"<template v-else>{else_text}</template>"
        return output

    def iteration_handler(self, node: BaseNode, body_text: str, options: RenderOptions) -> str:
        if not isinstance(node, ForNode):
            return body_text

        binding = f"({node.item}, {node.index})" if node.index else node.item
        key = f' :key="{node.key}"' if node.key else ""
        return f'<template v-for="{binding} in {node.items}"{key}>{body_text}</template>'

    def root_handler(self, serialized_output: str, options: RenderOptions) -> str:
        component = options.component
        name = options.component_name or options.name or DEFAULT_COMPONENT_NAME
        self.logger.info("Generating Vue component", component=name)

        props = [(prop, vue_prop_type(type_name)) for prop, type_name in (component.props if component else {}).items()]
        script_lang = self.component_option(options, "script_lang")
        if script_lang is None and component and component.typescript:
            script_lang = "ts"
        script = (
            self.component_option(options, "script_content")
            or self.component_option(options, "script")
            or (component.script if component else None)
        )

        template = _env.get_template("component.vue")
        return template.render(
            markup=serialized_output.strip(),
            script_lang=script_lang,
            imports=component.imports if component else [],
            name=name,
            props=props,
            script="\n".join(f"  {line}" for line in script.strip().split("\n")) if script else "",
        ).strip() + "\n"
