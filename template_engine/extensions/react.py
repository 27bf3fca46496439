"""
React Extension
===============

Render templates as React function components: JSX attribute syntax,
``className``/``onClick`` normalization, JSX comments, conditionals and
``map`` iterations, and a component module wrapper rendered with Jinja2.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

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


DEFAULT_IMPORT = "import React from 'react';"
DEFAULT_COMPONENT_NAME = "UntitledComponent"

COMPONENT_TEMPLATE = """\
{{ imports }}

{% if props_interface %}
{{ props_interface }}

{% endif %}
{{ declaration }}
{% if script %}
{{ script }}

{% endif %}
  return (
{{ body }}
  );
}

{% if export_type == "named" %}
export { {{ name }} };
{% else %}
export default {{ name }};
{% endif %}
"""

_INTERFACE_NAME = re.compile(r"interface\s+(\w+)")

_env = jinja2.Environment(
    loader=jinja2.DictLoader({"component.jsx": COMPONENT_TEMPLATE}),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def jsx_attribute_formatter(attribute: str, value: Any, is_expression: bool = False) -> str:
    """Format static attributes as ``name="value"`` and expressions as ``name={expr}``."""
    if is_expression:
        return f" {attribute}={{{value}}}"
    return default_attribute_formatter(attribute, value, False)


def sanitize_component_name(name: str) -> str:
    """Turn ``my-button`` into ``MyButton``."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("-") if part)


def indent_lines(text: str, width: int) -> str:
    return "\n".join(f"{' ' * width}{line}" if line else line for line in text.split("\n"))


class ReactExtension(Extension):
    """React function component renderer."""

    key = "react"
    is_renderer = True

    def options_handler(self, defaults: RenderOptions, user_options: RenderOptions) -> RenderOptions:
        if "file_extension" in user_options.model_fields_set:
            file_extension = user_options.file_extension
        else:
            file_extension = ".jsx"

        return defaults.model_copy(
            update={
                "attribute_formatter": jsx_attribute_formatter,
                "component_name": self.resolve_name(user_options),
                "file_extension": file_extension,
                "output_dir": Path("dist/react"),
                "prefer_self_closing_tags": True,
                "formatter": None,
            }
        )

    def resolve_name(self, options: RenderOptions) -> str:
        """Component name from options, then component metadata."""
        component_name = options.component.name if options.component else None
        return options.component_name or options.name or component_name or DEFAULT_COMPONENT_NAME

    def node_handler(self, node: BaseNode, ancestors: List[BaseNode]) -> BaseNode:
        data = node.extension_data(self.key)
        if data is None or not isinstance(node, ElementNode):
            return node

        self.logger.debug("Processing React node data", tag=node.tag)
        expression_overrides = data.get("expressionAttributes") or {}

        attributes = dict(node.attributes)
        if "class" in attributes:
            attributes["className"] = attributes.pop("class")
        if "onclick" in attributes:
            handler = attributes.pop("onclick")
            # An explicit onClick expression replaces the native handler
            if not expression_overrides.get("onClick"):
                attributes["onClick"] = handler

        if data.get("attributes"):
            attributes.update(data["attributes"])
        node.attributes = attributes

        if expression_overrides:
            node.expression_attributes = dict(expression_overrides)

        if data.get("tag"):
            self.logger.debug("Overriding tag", tag=node.tag, override=data["tag"])
            node.tag = data["tag"]

        return node

    def comment_handler(self, content: str, options: RenderOptions) -> str:
        return f"{{/* {content} */}}"

    def conditional_handler(
        self, node: BaseNode, then_text: str, else_text: Optional[str], options: RenderOptions
    ) -> str:
        condition = node.condition if isinstance(node, IfNode) else ""
        then_branch = then_text or "null"
        if else_text is not None:
            return f"{{{condition} ? ({then_branch}) : ({else_text or 'null'})}}"
        return f"{{{condition} && ({then_branch})}}"

    def iteration_handler(self, node: BaseNode, body_text: str, options: RenderOptions) -> str:
        if not isinstance(node, ForNode):
            return body_text

        params = f"{node.item}, {node.index}" if node.index else node.item
        body = body_text
        if node.key:
            body = f"<React.Fragment key={{{node.key}}}>{body_text}</React.Fragment>"
        return f"{{{node.items}.map(({params}) => ({body}))}}"

    def props_interface(self, name: str, options: RenderOptions) -> Dict[str, str]:
        """
        Resolve the TypeScript props interface and type name.

        Returns:
            Dict with ``interface`` text (possibly empty) and ``type`` name
        """
        explicit = self.component_option(options, "props_interface")
        if explicit:
            match = _INTERFACE_NAME.search(explicit)
            return {"interface": explicit.strip(), "type": match.group(1) if match else "any"}

        props = options.component.props if options.component else {}
        if not props:
            return {"interface": "", "type": "any"}

        type_name = f"{name}Props"
        entries = "\n".join(f"  {key}?: {value};" for key, value in props.items())
        return {"interface": f"interface {type_name} {{\n{entries}\n}}", "type": type_name}

    def root_handler(self, serialized_output: str, options: RenderOptions) -> str:
        name = sanitize_component_name(self.resolve_name(options))
        component = options.component
        typescript = options.file_extension == ".tsx" or bool(component and component.typescript)
        self.logger.info("Generating React component", component=name, typescript=typescript)

        imports = self.component_option(options, "import_statements") or (component.imports if component else None)
        props_arg = options.option("props", "props")

        interface = {"interface": "", "type": "any"}
        if typescript:
            interface = self.props_interface(name, options)
            declaration = f"const {name}: React.FC<{interface['type']}> = ({props_arg}) => {{"
        else:
            declaration = f"function {name}({props_arg}) {{"

        script = self.component_option(options, "script_content") or self.component_option(options, "script")
        if not script:
            script = component.script if component and component.script else ""

        template = _env.get_template("component.jsx")
        return template.render(
            imports="\n".join(imports) if imports else DEFAULT_IMPORT,
            props_interface=interface["interface"],
            declaration=declaration,
            script=indent_lines(script.strip(), 2) if script else "",
            body=indent_lines(serialized_output, 4),
            export_type=self.component_option(options, "export_type", "default"),
            name=name,
        ).strip() + "\n"
