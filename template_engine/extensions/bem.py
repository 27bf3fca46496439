"""
BEM Extension
=============

Derive Block-Element-Modifier class names for element nodes, inheriting the
block from the nearest ancestor that declares one, and emit a nested SCSS
selector tree for BEM-annotated styles.
"""

from typing import Any, Dict, List, Optional

from template_engine.core.extensions.base import Extension, StylePlugin
from template_engine.core.rendering.styles import camel_to_kebab
from template_engine.models.schemas import BaseNode, ElementNode, RenderOptions


BEM_KEYS = ("block", "element", "modifier", "modifiers")
UNTITLED_BLOCK = "untitled-block"
UNTITLED_ELEMENT = "untitled-element"


def node_options(
    block: Optional[str] = None,
    element: Optional[str] = None,
    modifier: Optional[str] = None,
    modifiers: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build node fields carrying BEM extension data.

    Returns:
        ``{"extensions": {"bem": {...}}}`` with only the given keys, or an
        empty dict when nothing was given
    """
    data: Dict[str, Any] = {}
    if block:
        data["block"] = block
    if element:
        data["element"] = element
    if modifier:
        data["modifier"] = modifier
    if modifiers:
        data["modifiers"] = list(modifiers)
    return {"extensions": {"bem": data}} if data else {}


def get_bem_data(node: BaseNode) -> Dict[str, Any]:
    """BEM data from ``extensions.bem`` with top-level shortcuts as fallback."""
    data = dict(node.extension_data(BemExtension.key) or {})
    for key in BEM_KEYS:
        if data.get(key) is None:
            value = node.get_extra(key)
            if value is not None:
                data[key] = value
    return data


def has_bem_data(data: Dict[str, Any]) -> bool:
    """Whether any block, element or modifier is declared."""
    return any(data.get(key) for key in BEM_KEYS)


def get_block(node: BaseNode) -> Optional[str]:
    """The block a node declares itself, if any."""
    return get_bem_data(node).get("block") or None


def get_modifiers(data: Dict[str, Any]) -> List[str]:
    """``modifiers`` then ``modifier``, de-duplicated with order kept."""
    modifiers = data.get("modifiers") or []
    if isinstance(modifiers, str):
        modifiers = [modifiers]
    modifiers = list(modifiers)
    if data.get("modifier"):
        modifiers.append(data["modifier"])
    return list(dict.fromkeys(modifiers))


class BemStylePlugin(StylePlugin):
    """Emit a nested SCSS tree for BEM-annotated node styles."""

    def __init__(self, extension: "BemExtension") -> None:
        self.extension = extension

    def on_process_node(self, node: BaseNode) -> None:
        self.extension.logger.debug("Processing styles", tag=getattr(node, "tag", None))

    def generate_styles(
        self,
        collected_styles: Dict[str, Dict[str, Any]],
        options: RenderOptions,
        full_tree: Optional[List[BaseNode]] = None,
    ) -> Optional[str]:
        if options.styles.output_format != "scss" or not full_tree:
            return None

        selector_tree: Dict[str, Dict[str, Any]] = {}
        for node in full_tree:
            self._traverse(node, None, selector_tree)

        if not selector_tree:
            return None

        self.extension.logger.debug("Generated BEM selector tree", blocks=list(selector_tree))
        return "\n\n".join(
            self._format_scss(block, tree) for block, tree in selector_tree.items() if tree
        ) or None

    def _traverse(
        self, node: BaseNode, block: Optional[str], selector_tree: Dict[str, Dict[str, Any]]
    ) -> None:
        data = get_bem_data(node) if isinstance(node, ElementNode) else {}
        styles = node.attributes.get("styles") if isinstance(node, ElementNode) else None
        if not isinstance(styles, dict):
            styles = None

        if has_bem_data(data) and not node.get_extra("ignoreBem"):
            block_name = data.get("block") or block or UNTITLED_BLOCK
            block_tree = selector_tree.setdefault(block_name, {})
            modifiers = get_modifiers(data)
            separator = self.extension.modifier_separator

            target = block_tree
            if data.get("element"):
                target = block_tree.setdefault(
                    f"&{self.extension.element_separator}{data['element']}", {}
                )

            if modifiers:
                for modifier in modifiers:
                    target[f"&{separator}{modifier}"] = dict(styles or {})
            elif styles:
                target.update(styles)

            block = block_name

        for children in node.child_lists():
            for child in children:
                self._traverse(child, block, selector_tree)

    def _format_scss(self, block: str, tree: Dict[str, Any], indent: int = 0) -> str:
        lines = [f"{' ' * indent}.{block} {{"]
        lines.extend(self._format_body(tree, indent + 2))
        lines.append(f"{' ' * indent}}}")
        return "\n".join(lines)

    def _format_body(self, tree: Dict[str, Any], indent: int) -> List[str]:
        lines: List[str] = []
        for key, value in tree.items():
            if isinstance(value, dict):
                if not value:
                    continue
                selector = f"&{key}" if key.startswith(":") else key
                lines.append(f"{' ' * indent}{selector} {{")
                lines.extend(self._format_body(value, indent + 2))
                lines.append(f"{' ' * indent}}}")
            else:
                lines.append(f"{' ' * indent}{camel_to_kebab(key)}: {value};")
        return lines


class BemExtension(Extension):
    """Block-Element-Modifier class naming."""

    key = "bem"

    def __init__(
        self, verbose: bool = False, element_separator: str = "__", modifier_separator: str = "--"
    ) -> None:
        super().__init__(verbose)
        self.element_separator = element_separator
        self.modifier_separator = modifier_separator
        self.style_plugin = BemStylePlugin(self)

    def get_bem_classes(
        self,
        block: Optional[str],
        element: Optional[str],
        modifiers: List[str],
        inherited_block: Optional[str] = None,
    ) -> List[str]:
        """
        Build BEM class names.

        Args:
            block: Block the node declares itself
            element: Element name
            modifiers: Modifier names
            inherited_block: Block of the nearest ancestor declaring one

        Returns:
            Root class followed by one modifier class per modifier
        """
        block_to_use = block or inherited_block or UNTITLED_BLOCK
        if element:
            root = f"{block_to_use}{self.element_separator}{element}"
        elif block:
            root = block_to_use
        else:
            root = f"{block_to_use}{self.element_separator}{UNTITLED_ELEMENT}"

        return [root] + [f"{root}{self.modifier_separator}{modifier}" for modifier in modifiers]

    def find_inherited_block(self, ancestors: List[BaseNode]) -> Optional[str]:
        """Block of the nearest ancestor that declares one."""
        for ancestor in reversed(ancestors):
            block = get_block(ancestor)
            if block:
                return block
        return None

    def node_handler(self, node: BaseNode, ancestors: List[BaseNode]) -> BaseNode:
        if not isinstance(node, ElementNode):
            return node
        if node.get_extra("ignoreBem"):
            self.logger.debug("Node ignored due to ignoreBem flag", tag=node.tag)
            return node

        data = get_bem_data(node)
        if not has_bem_data(data):
            return node

        inherited_block = self.find_inherited_block(ancestors)
        classes = self.get_bem_classes(
            data.get("block"), data.get("element"), get_modifiers(data), inherited_block
        )

        existing = node.attributes.get("class")
        existing_classes = existing.split() if isinstance(existing, str) else []
        merged = list(dict.fromkeys(classes + existing_classes))

        node.attributes = {**node.attributes, "class": " ".join(merged)}
        self.logger.debug("Applied BEM classes", tag=node.tag, classes=merged)
        return node
