"""
Style Manager
=============

Collects per-node style declarations into per-selector records and emits
aggregated CSS, SCSS or inline style text.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from template_engine.config.logging import get_logger
from template_engine.core.extensions.base import StylePlugin
from template_engine.models.schemas import BaseNode, ElementNode, RenderOptions

logger = get_logger(__name__)


StyleRecord = Dict[str, Any]

NESTED_PREFIXES = ("&", ":", "@")
UNTITLED_SELECTOR = ".untitled-element"

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def camel_to_kebab(name: str) -> str:
    """Convert a camelCase property name to kebab-case."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


def is_nested_key(key: str) -> bool:
    """Whether a style key holds a nested pseudo-selector or at-rule mapping."""
    return key.startswith(NESTED_PREFIXES)


def format_at_rule(key: str) -> str:
    """Normalize ``@media max-width: 768px`` to ``@media (max-width: 768px)``."""
    name, _, query = key.partition(" ")
    query = query.strip()
    if name == "@media" and query and not query.startswith("("):
        return f"{name} ({query})"
    return key


def merge_style_records(existing: StyleRecord, new_styles: Mapping[str, Any]) -> StyleRecord:
    """Merge declarations; nested mappings merge one level deep, later writes win."""
    merged: StyleRecord = dict(existing)
    for key, value in new_styles.items():
        if is_nested_key(key) and isinstance(value, Mapping):
            current = merged.get(key)
            nested = dict(current) if isinstance(current, Mapping) else {}
            nested.update(value)
            merged[key] = nested
        else:
            merged[key] = value
    return merged


class StyleManager:
    """Per-render style collector."""

    def __init__(self, plugins: Optional[Sequence[StylePlugin]] = None) -> None:
        self.plugins: List[StylePlugin] = list(plugins or [])
        self.processed_styles: Dict[str, StyleRecord] = {}
        self.logger: Any = logger.bind(component="style_manager")  # structlog.BoundLoggerBase

    @staticmethod
    def structured_styles(node: BaseNode) -> Optional[Mapping[str, Any]]:
        """The node's ``styles`` attribute when it is a mapping."""
        if not isinstance(node, ElementNode):
            return None
        styles = node.attributes.get("styles")
        return styles if isinstance(styles, Mapping) else None

    @staticmethod
    def get_selector(node: BaseNode) -> str:
        """Selector from the first class name, else the untitled selector."""
        attributes = getattr(node, "attributes", None) or {}
        class_value = attributes.get("class") or attributes.get("className")
        if isinstance(class_value, str):
            classes = class_value.split()
            if classes:
                return f".{classes[0]}"
        return UNTITLED_SELECTOR

    def has_styles(self) -> bool:
        """Whether any declarations were collected."""
        return bool(self.processed_styles)

    def process_node(self, node: BaseNode) -> None:
        """
        Collect a node's structured styles.

        Args:
            node: Rewritten node; nodes without a ``styles`` mapping are skipped
        """
        styles = self.structured_styles(node)
        if styles is None:
            return

        selector = self.get_selector(node)

        for plugin in self.plugins:
            plugin.on_process_node(node)

        existing = self.processed_styles.get(selector, {})
        self.processed_styles[selector] = merge_style_records(existing, styles)
        self.logger.debug("Processed styles", selector=selector)

    def process_tree(self, nodes: Sequence[BaseNode]) -> None:
        """Process every node of a tree, parents before children."""
        for node in nodes:
            self.process_node(node)
            for children in node.child_lists():
                self.process_tree(children)

    def get_inline_styles(self, node: BaseNode) -> Optional[str]:
        """
        Inline style text for a node.

        Returns:
            ``prop: value; ...`` for the node's flat properties, or None when
            the node declared no structured styles
        """
        styles = self.structured_styles(node)
        if styles is None:
            return None

        return "; ".join(
            f"{camel_to_kebab(key)}: {value}"
            for key, value in styles.items()
            if not is_nested_key(key)
        )

    def generate_output(
        self, options: RenderOptions, full_tree: Optional[List[BaseNode]] = None
    ) -> str:
        """
        Emit aggregated style text.

        Args:
            options: Resolved render options
            full_tree: Rewritten node tree, passed to extension style plugins

        Returns:
            Style text for the configured output format
        """
        output_format = options.styles.output_format
        minify = options.styles.minify

        if output_format == "inline":
            return ""

        if output_format == "css":
            return self._join_blocks(
                [
                    self._format_block(selector, self._declarations(record, 1, minify), 0, minify)
                    for selector, record in self.processed_styles.items()
                    if any(not is_nested_key(key) for key in record)
                ],
                minify,
            )

        if output_format == "scss":
            blocks = [
                self._format_block(selector, self._scss_body(record, 1, minify), 0, minify)
                for selector, record in self.processed_styles.items()
                if record
            ]
            for plugin in self.plugins:
                extra = plugin.generate_styles(self.processed_styles, options, full_tree)
                if extra:
                    self.logger.debug("Appending extension styles", plugin=type(plugin).__name__)
                    blocks.append(extra)
            return self._join_blocks(blocks, minify)

        raise ValueError(f"Unsupported style output format: {output_format}")

    def _declarations(self, record: Mapping[str, Any], depth: int, minify: bool) -> List[str]:
        indent = "" if minify else "  " * depth
        separator = ":" if minify else ": "
        return [
            f"{indent}{camel_to_kebab(key)}{separator}{value};"
            for key, value in record.items()
            if not is_nested_key(key)
        ]

    def _scss_body(self, record: Mapping[str, Any], depth: int, minify: bool) -> List[str]:
        lines = self._declarations(record, depth, minify)
        for key, value in record.items():
            if not is_nested_key(key) or not isinstance(value, Mapping):
                continue
            if key.startswith(":"):
                nested_selector = f"&{key}"
            elif key.startswith("@"):
                nested_selector = format_at_rule(key)
            else:
                nested_selector = key
            lines.append(
                self._format_block(
                    nested_selector, self._declarations(value, depth + 1, minify), depth, minify
                )
            )
        return lines

    @staticmethod
    def _format_block(selector: str, lines: List[str], depth: int, minify: bool) -> str:
        if minify:
            return f"{selector}{{{''.join(lines)}}}"
        indent = "  " * depth
        body = "\n".join(lines)
        return f"{indent}{selector} {{\n{body}\n{indent}}}"

    @staticmethod
    def _join_blocks(blocks: List[str], minify: bool) -> str:
        return ("\n" if minify else "\n\n").join(block for block in blocks if block)
