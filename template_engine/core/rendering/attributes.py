"""
Attribute Rendering
===================

Serialize element attributes through the configured attribute formatter.
"""

from typing import Any

from template_engine.core.rendering.styles import StyleManager
from template_engine.models.schemas import ElementNode, RenderOptions


STYLES_ATTRIBUTE = "styles"


def is_attribute_value(value: Any) -> bool:
    """Only scalar values are serialized as static attributes."""
    return isinstance(value, (str, int, float, bool))


def render_attributes(node: ElementNode, options: RenderOptions, style_manager: StyleManager) -> str:
    """
    Serialize static then expression attributes of an element.

    In inline style mode the ``styles`` attribute becomes ``style``; a
    structured ``styles`` mapping is never serialized in other modes.

    Args:
        node: Rewritten element node
        options: Resolved render options
        style_manager: Style manager for inline style text

    Returns:
        Concatenated formatter output
    """
    formatter = options.attribute_formatter
    inline = options.styles.output_format == "inline"
    parts = []

    for name, value in node.attributes.items():
        if name == STYLES_ATTRIBUTE and inline:
            style_text = value if isinstance(value, str) else style_manager.get_inline_styles(node)
            if style_text:
                parts.append(formatter("style", style_text, False))
        elif is_attribute_value(value):
            parts.append(formatter(name, value, False))

    for name, value in node.expression_attributes.items():
        parts.append(formatter(name, value, True))

    return "".join(parts)
