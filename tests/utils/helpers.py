"""
Test Helpers
============

Helper functions for common testing operations.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from template_engine.core.extensions.base import Extension
from template_engine.models.schemas import StyleOptions


def style_options(output_format: str, minify: bool = False) -> StyleOptions:
    """Build style options."""
    return StyleOptions(output_format=output_format, minify=minify)


def write_source(directory: Path, relative: str, content: str) -> Path:
    """Write a template source file, creating parent directories."""
    path = directory / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def read_outputs(directory: Path) -> Dict[str, str]:
    """Map relative output paths to their content."""
    return {
        str(path.relative_to(directory)): path.read_text(encoding="utf-8")
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def text_node(content: str) -> Dict[str, Any]:
    """Raw text node."""
    return {"type": "text", "content": content}


def element(tag: str, *children: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    """Raw element node."""
    node: Dict[str, Any] = {"tag": tag, **fields}
    if children:
        node["children"] = list(children)
    return node


class RecordingExtension(Extension):
    """Extension that records hook calls and optionally rewrites the tag."""

    def __init__(self, key: str, tag: str = "", log: Optional[List[str]] = None) -> None:
        self.key = key
        super().__init__()
        self.tag = tag
        self.log = log if log is not None else []

    def node_handler(self, node, ancestors):
        self.log.append(f"{self.key}:{node.node_kind}")
        if self.tag and hasattr(node, "tag"):
            node.tag = self.tag
        return node

    def root_handler(self, serialized_output, options):
        self.log.append(f"{self.key}:root")
        return f"[{self.key}]{serialized_output}"
