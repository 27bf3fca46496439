"""
Template Renderer
=================

Recursive renderer that turns template node trees into markup. Every node
passes through the extension pipeline before it is serialized; at root
completion the rewritten tree is fed to the style manager, root handlers
post-process the markup, and artifacts are optionally written to disk.
"""

import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from template_engine.config.logging import get_logger
from template_engine.config.settings import get_settings
from template_engine.core.extensions.pipeline import ExtensionPipeline
from template_engine.core.rendering.attributes import render_attributes
from template_engine.core.rendering.formatter import format_code
from template_engine.core.rendering.output import (
    output_file_path,
    style_file_path,
    write_output_file,
)
from template_engine.core.rendering.styles import StyleManager
from template_engine.models.schemas import (
    BaseNode,
    CommentNode,
    ElementNode,
    ForNode,
    FragmentNode,
    IfNode,
    RenderOptions,
    RenderResult,
    SlotNode,
    TextNode,
    parse_nodes,
)

logger = get_logger(__name__)


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

NodeInput = Union[BaseNode, Dict[str, Any]]
Rendered = Tuple[str, BaseNode]


class RenderPass:
    """State owned by a single root render call."""

    def __init__(self, pipeline: ExtensionPipeline, options: RenderOptions) -> None:
        self.pipeline = pipeline
        self.options = options
        self.style_manager = StyleManager(pipeline.style_plugins)
        self.comment_handler: Optional[Callable[..., str]] = pipeline.find_handler("comment_handler")
        self.conditional_handler: Optional[Callable[..., str]] = pipeline.find_handler(
            "conditional_handler"
        )
        self.iteration_handler: Optional[Callable[..., str]] = pipeline.find_handler(
            "iteration_handler"
        )


class TemplateRenderer:
    """Render template node trees through an extension pipeline."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.logger: Any = logger.bind(component="renderer")  # structlog.BoundLoggerBase

    async def render(
        self, nodes: Sequence[NodeInput], options: Optional[RenderOptions] = None
    ) -> str:
        """
        Render nodes to markup.

        Args:
            nodes: Template nodes (models or raw JSON-like dicts)
            options: Caller options; resolved once for the whole pass

        Returns:
            Markup after root handlers
        """
        result = await self.render_artifacts(nodes, options)
        return result.markup

    async def render_artifacts(
        self, nodes: Sequence[NodeInput], options: Optional[RenderOptions] = None
    ) -> RenderResult:
        """
        Render nodes and return every artifact of the pass.

        Args:
            nodes: Template nodes (models or raw JSON-like dicts)
            options: Caller options

        Returns:
            RenderResult with markup, style text and written paths

        Raises:
            OutputWriteError: If writing is enabled and fails
            FormatterError: If the configured formatter is unknown
        """
        start_time = time.time()
        user_options = options or RenderOptions()

        pipeline = ExtensionPipeline(user_options.extensions)
        resolved = pipeline.resolve_options(user_options)
        render_pass = RenderPass(pipeline, resolved)

        self.logger.info(
            "Starting template render",
            extensions=[ext.key for ext in pipeline.extensions],
            style_format=resolved.styles.output_format,
        )

        # Work on copies so caller trees are never mutated
        source = [node.model_copy(deep=True) for node in parse_nodes(list(nodes))]
        markup, tree = self._render_nodes(source, [], render_pass)

        style_manager = render_pass.style_manager
        style_manager.process_tree(tree)
        styles = style_manager.generate_output(resolved, tree) if style_manager.has_styles() else ""

        markup = pipeline.apply_root_hooks(markup, resolved)

        written_files: List[Path] = []
        if resolved.write_output_file:
            written_files = await self._write_artifacts(markup, styles, resolved)

        self.logger.info(
            "Template render completed",
            length=len(markup),
            has_styles=bool(styles),
            written=[str(path) for path in written_files],
            duration=time.time() - start_time,
        )

        return RenderResult(
            markup=markup,
            styles=styles,
            style_format=resolved.styles.output_format,
            written_files=written_files,
        )

    def _render_nodes(
        self, nodes: Sequence[BaseNode], ancestors: List[BaseNode], render_pass: RenderPass
    ) -> Tuple[str, List[BaseNode]]:
        """Render a node list, returning markup and the rewritten nodes."""
        parts: List[str] = []
        rewritten: List[BaseNode] = []

        for node in nodes:
            processed = render_pass.pipeline.apply_node_hooks(node, ancestors)
            if processed is None:
                continue

            text, tree_node = self._render_node(processed, ancestors, render_pass)
            parts.append(text)
            rewritten.append(tree_node)

        return "".join(parts), rewritten

    def _render_node(
        self, node: BaseNode, ancestors: List[BaseNode], render_pass: RenderPass
    ) -> Rendered:
        """Serialize one rewritten node."""
        self.logger.debug("Rendering node", kind=node.node_kind, depth=len(ancestors))
        chain = ancestors + [node]

        if isinstance(node, ElementNode):
            return self._render_element(node, chain, render_pass)
        if isinstance(node, TextNode):
            return node.content, node
        if isinstance(node, CommentNode):
            return self._render_comment(node, render_pass), node
        if isinstance(node, FragmentNode):
            inner, children = self._render_nodes(node.children, chain, render_pass)
            return inner, node.model_copy(update={"children": children})
        if isinstance(node, SlotNode):
            return self._render_slot(node, chain, render_pass)
        if isinstance(node, IfNode):
            return self._render_conditional(node, chain, render_pass)
        if isinstance(node, ForNode):
            return self._render_iteration(node, chain, render_pass)

        self.logger.warning("Skipping unsupported node", node_type=type(node).__name__)
        return "", node

    def _render_element(
        self, node: ElementNode, chain: List[BaseNode], render_pass: RenderPass
    ) -> Rendered:
        options = render_pass.options
        attributes = render_attributes(node, options, render_pass.style_manager)

        self_closing = node.self_closing or options.prefer_self_closing_tags or node.tag in VOID_ELEMENTS
        if self_closing and not node.children:
            return f"<{node.tag}{attributes} />", node

        inner, children = self._render_nodes(node.children or [], chain, render_pass)
        if node.children:
            node = node.model_copy(update={"children": children})
        return f"<{node.tag}{attributes}>{inner}</{node.tag}>", node

    def _render_comment(self, node: CommentNode, render_pass: RenderPass) -> str:
        if render_pass.comment_handler is not None:
            return render_pass.comment_handler(node.content, render_pass.options)
        return f"<!-- {node.content} -->"

    def _render_slot(self, node: SlotNode, chain: List[BaseNode], render_pass: RenderPass) -> Rendered:
        content = render_pass.options.slots.get(node.name) if node.name else None
        if content:
            self.logger.debug("Filling slot", slot=node.name)
            nodes = [child.model_copy(deep=True) for child in content]
        elif node.fallback:
            nodes = node.fallback
        else:
            return "", FragmentNode()

        inner, children = self._render_nodes(nodes, chain, render_pass)
        return inner, FragmentNode(children=children)

    def _render_conditional(
        self, node: IfNode, chain: List[BaseNode], render_pass: RenderPass
    ) -> Rendered:
        then_text, then_nodes = self._render_nodes(node.then, chain, render_pass)
        else_text: Optional[str] = None
        else_nodes: Optional[List[BaseNode]] = None
        if node.else_ is not None:
            else_text, else_nodes = self._render_nodes(node.else_, chain, render_pass)

        tree_node = node.model_copy(update={"then": then_nodes, "else_": else_nodes})
        if render_pass.conditional_handler is not None:
            return (
                render_pass.conditional_handler(node, then_text, else_text, render_pass.options),
                tree_node,
            )
        return then_text, tree_node

    def _render_iteration(
        self, node: ForNode, chain: List[BaseNode], render_pass: RenderPass
    ) -> Rendered:
        body_text, children = self._render_nodes(node.children, chain, render_pass)
        tree_node = node.model_copy(update={"children": children})
        if render_pass.iteration_handler is not None:
            return render_pass.iteration_handler(node, body_text, render_pass.options), tree_node
        return body_text, tree_node

    async def _write_artifacts(self, markup: str, styles: str, options: RenderOptions) -> List[Path]:
        """Format and write markup, then the style file when there is one."""
        filename = options.filename or options.name or self.settings.default_filename
        written: List[Path] = []

        text = markup
        if options.formatter:
            text = await format_code(markup, options.formatter)

        markup_path = output_file_path(options.output_dir, filename, options.file_extension)
        written.append(await write_output_file(text, markup_path))

        style_path = style_file_path(options.output_dir, filename, options.styles.output_format)
        if style_path is not None and styles:
            written.append(await write_output_file(styles, style_path))

        return written


async def render_template(
    nodes: Sequence[NodeInput], options: Optional[RenderOptions] = None
) -> str:
    """
    Render template nodes to markup.

    Args:
        nodes: Template nodes
        options: Render options

    Returns:
        Rendered markup
    """
    renderer = TemplateRenderer()
    return await renderer.render(nodes, options)
