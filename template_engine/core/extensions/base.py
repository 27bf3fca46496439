"""
Extension Contract
==================

Base classes for render extensions. An extension is a capability set: every
hook is optional and defaults to ``None`` so the pipeline can dispatch by
checking which hooks a given extension provides.
"""

from typing import Any, Callable, Dict, List, Optional

from template_engine.config.logging import get_logger
from template_engine.models.schemas import BaseNode, RenderOptions

logger = get_logger(__name__)


OptionsHandler = Callable[[RenderOptions, RenderOptions], RenderOptions]
NodeHandler = Callable[[BaseNode, List[BaseNode]], BaseNode]
RootHandler = Callable[[str, RenderOptions], str]
CommentHandler = Callable[[str, RenderOptions], str]
ConditionalHandler = Callable[[BaseNode, str, Optional[str], RenderOptions], str]
IterationHandler = Callable[[BaseNode, str, RenderOptions], str]


class StylePlugin:
    """Style hooks an extension can attach to the style manager."""

    def on_process_node(self, node: BaseNode) -> None:
        """Observe a node the style manager is processing."""
        return None

    def generate_styles(
        self,
        collected_styles: Dict[str, Dict[str, Any]],
        options: RenderOptions,
        full_tree: Optional[List[BaseNode]] = None,
    ) -> Optional[str]:
        """Contribute extra style text, or None for nothing."""
        return None


class Extension:
    """
    Base class for render extensions.

    Subclasses set ``key`` and define any subset of the hook methods below as
    regular methods. Hooks left as ``None`` are skipped by the pipeline.

    Hooks:
        options_handler(defaults, user_options) -> RenderOptions
        node_handler(node, ancestors) -> node
        root_handler(serialized_output, options) -> str
        comment_handler(content, options) -> str
        conditional_handler(node, then_text, else_text, options) -> str
        iteration_handler(node, body_text, options) -> str
    """

    key: str = ""
    is_renderer: bool = False

    options_handler: Optional[OptionsHandler] = None
    node_handler: Optional[NodeHandler] = None
    root_handler: Optional[RootHandler] = None
    comment_handler: Optional[CommentHandler] = None
    conditional_handler: Optional[ConditionalHandler] = None
    iteration_handler: Optional[IterationHandler] = None
    style_plugin: Optional[StylePlugin] = None

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self.logger: Any = logger.bind(extension=self.key)  # structlog.BoundLoggerBase

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"

    def component_option(self, options: RenderOptions, name: str, default: Any = None) -> Any:
        """
        Resolve a component option for this extension.

        Explicit option values win, then ``component.extensions[<key>]``
        (snake_case or camelCase), then ``default``.
        """
        value = options.option(name)
        if value is not None:
            return value

        config = options.component.extensions.get(self.key, {}) if options.component else {}
        head, *rest = name.split("_")
        for config_key in (name, head + "".join(part.capitalize() for part in rest)):
            if config.get(config_key) is not None:
                return config[config_key]
        return default
