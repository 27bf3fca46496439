"""
Extension Pipeline
==================

Ordered composition of extension hooks for one render pass: option
resolution, per-node overrides and handlers, and root post-processing.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from template_engine.config.logging import get_logger
from template_engine.config.settings import get_settings
from template_engine.core.extensions.base import Extension, StylePlugin
from template_engine.models.schemas import BaseNode, RenderOptions, StyleOptions

logger = get_logger(__name__)


IGNORE_KEY = "ignore"


class ExtensionPipeline:
    """Applies the hooks of an ordered extension list."""

    def __init__(self, extensions: Optional[Sequence[Extension]] = None) -> None:
        self.extensions: List[Extension] = list(extensions or [])
        self.logger: Any = logger.bind(component="pipeline")  # structlog.BoundLoggerBase

    @property
    def style_plugins(self) -> List[StylePlugin]:
        """Style plugins in registration order."""
        return [ext.style_plugin for ext in self.extensions if ext.style_plugin is not None]

    def default_options(self, user_options: RenderOptions) -> RenderOptions:
        """Build the baseline options from settings."""
        settings = get_settings()
        return RenderOptions(
            name=user_options.name,
            filename=user_options.name or settings.default_filename,
            file_extension=settings.default_file_extension,
            output_dir=settings.default_output_dir,
            extensions=list(self.extensions),
            styles=StyleOptions(output_format=settings.default_style_format),
            formatter=settings.default_formatter,
        )

    def resolve_options(self, user_options: Optional[RenderOptions] = None) -> RenderOptions:
        """
        Resolve options for a root render.

        Settings defaults are passed through every ``options_handler`` in
        registration order; values the caller set explicitly win last.

        Args:
            user_options: Caller-supplied options

        Returns:
            Fully resolved RenderOptions
        """
        user_options = user_options or RenderOptions()
        merged = self.default_options(user_options)

        for extension in self.extensions:
            if extension.options_handler is not None:
                merged = extension.options_handler(merged, user_options)

        explicit = user_options.explicit_values()
        self.logger.debug(
            "Resolved render options",
            explicit=sorted(explicit),
            extensions=[ext.key for ext in self.extensions],
        )
        return merged.model_copy(update=explicit)

    def apply_overrides(self, node: BaseNode, data: Dict[str, Any]) -> BaseNode:
        """Copy extension data onto fields the node already carries."""
        for key, value in data.items():
            if key == IGNORE_KEY:
                continue
            if node.has_field(key):
                node.set_field(key, value)
        return node

    def apply_node_hooks(self, node: BaseNode, ancestors: List[BaseNode]) -> Optional[BaseNode]:
        """
        Run overrides and node handlers for every extension in order.

        Args:
            node: Node to rewrite (already a per-render copy)
            ancestors: Rewritten ancestors, root first

        Returns:
            Rewritten node, or None when an extension marked it ignored
        """
        current = node
        for extension in self.extensions:
            data = current.extension_data(extension.key)
            if data:
                current = self.apply_overrides(current, data)
                if data.get(IGNORE_KEY):
                    self.logger.debug("Node ignored", extension=extension.key, kind=current.node_kind)
                    return None

            if extension.node_handler is not None:
                current = extension.node_handler(current, ancestors)

        return current

    def apply_root_hooks(self, output: str, options: RenderOptions) -> str:
        """Chain every root handler over the serialized output."""
        for extension in self.extensions:
            if extension.root_handler is not None:
                self.logger.debug("Applying root handler", extension=extension.key)
                output = extension.root_handler(output, options)
        return output

    def find_handler(self, name: str) -> Optional[Callable[..., str]]:
        """Return the named syntax handler of the last extension providing it."""
        for extension in reversed(self.extensions):
            handler = getattr(extension, name, None)
            if handler is not None:
                return handler
        return None
