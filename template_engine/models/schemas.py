"""
Pydantic Models and Schemas
===========================

Core data models for template trees, render options, loader results and
render artifacts. Node models accept the camelCase JSON keys used by template
sources and expose snake_case attributes.
"""

from typing import Optional, List, Dict, Any, Union, Literal, Callable, ClassVar
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter
from typing_extensions import Annotated


StyleOutputFormat = Literal["inline", "css", "scss"]

AttributeFormatter = Callable[[str, Any, bool], str]


# Node Models
class BaseNode(BaseModel):
    """Fields and helpers shared by every template node case."""

    node_kind: ClassVar[str] = ""

    extensions: Dict[str, Any] = Field(
        default_factory=dict, description="Extension-private data keyed by extension identifier"
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow", validate_assignment=True)

    @classmethod
    def field_name_for(cls, key: str) -> Optional[str]:
        """Resolve a JSON key or attribute name to a declared field name."""
        for name, info in cls.model_fields.items():
            if key == name or key == info.alias:
                return name
        return None

    def has_field(self, key: str) -> bool:
        """Whether the node explicitly carries the given top-level field."""
        name = self.field_name_for(key)
        if name is not None:
            return name in self.model_fields_set
        return self.model_extra is not None and key in self.model_extra

    def set_field(self, key: str, value: Any) -> None:
        """Assign a top-level field by JSON key or attribute name."""
        name = self.field_name_for(key)
        if name is not None:
            setattr(self, name, value)
        elif self.model_extra is not None:
            self.model_extra[key] = value

    def get_extra(self, key: str, default: Any = None) -> Any:
        """Read an undeclared top-level key (e.g. BEM shortcuts)."""
        if self.model_extra is None:
            return default
        return self.model_extra.get(key, default)

    def extension_data(self, key: str) -> Optional[Dict[str, Any]]:
        """Extension-private data for ``key`` or None."""
        data = self.extensions.get(key)
        return data if isinstance(data, dict) else None

    def child_lists(self) -> List[List["Node"]]:
        """Every child list this node renders, in render order."""
        return []


class ElementNode(BaseNode):
    """Element with a tag, attributes and optional children."""

    node_kind: ClassVar[str] = "element"

    type: Optional[Literal["element"]] = None
    tag: str = Field(..., min_length=1, description="Tag name")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Static attributes")
    expression_attributes: Dict[str, Any] = Field(
        default_factory=dict, alias="expressionAttributes", description="Dynamic bindings"
    )
    self_closing: bool = Field(False, alias="selfClosing")
    children: Optional[List["Node"]] = None

    def child_lists(self) -> List[List["Node"]]:
        return [self.children] if self.children else []


class TextNode(BaseNode):
    """Literal text content."""

    node_kind: ClassVar[str] = "text"

    type: Literal["text"] = "text"
    content: str = ""


class SlotNode(BaseNode):
    """Named insertion point resolved against the slot map at render time."""

    node_kind: ClassVar[str] = "slot"

    type: Literal["slot"] = "slot"
    name: str = ""
    fallback: Optional[List["Node"]] = None

    def child_lists(self) -> List[List["Node"]]:
        return [self.fallback] if self.fallback else []


class FragmentNode(BaseNode):
    """Children without a wrapping tag."""

    node_kind: ClassVar[str] = "fragment"

    type: Literal["fragment"] = "fragment"
    children: List["Node"] = Field(default_factory=list)

    def child_lists(self) -> List[List["Node"]]:
        return [self.children]


class CommentNode(BaseNode):
    """Comment content."""

    node_kind: ClassVar[str] = "comment"

    type: Literal["comment"] = "comment"
    content: str = ""


class IfNode(BaseNode):
    """Conditional with an opaque condition expression."""

    node_kind: ClassVar[str] = "if"

    type: Literal["if"] = "if"
    condition: str = ""
    then: List["Node"] = Field(default_factory=list)
    else_: Optional[List["Node"]] = Field(None, alias="else")

    def child_lists(self) -> List[List["Node"]]:
        return [self.then, self.else_ or []]


class ForNode(BaseNode):
    """Loop over an opaque items expression."""

    node_kind: ClassVar[str] = "for"

    type: Literal["for"] = "for"
    items: str = ""
    item: str = "item"
    index: Optional[str] = None
    key: Optional[str] = None
    children: List["Node"] = Field(default_factory=list)

    def child_lists(self) -> List[List["Node"]]:
        return [self.children]


def get_node_kind(value: Any) -> Optional[str]:
    """Discriminate raw or constructed nodes: ``type`` wins, else ``tag`` means element."""
    if isinstance(value, dict):
        node_type = value.get("type")
        if node_type is None and "tag" in value:
            return "element"
        return node_type
    return getattr(value, "node_kind", None)


Node = Annotated[
    Union[
        Annotated[ElementNode, Tag("element")],
        Annotated[TextNode, Tag("text")],
        Annotated[SlotNode, Tag("slot")],
        Annotated[FragmentNode, Tag("fragment")],
        Annotated[CommentNode, Tag("comment")],
        Annotated[IfNode, Tag("if")],
        Annotated[ForNode, Tag("for")],
    ],
    Discriminator(get_node_kind),
]

# Update forward references
ElementNode.model_rebuild()
SlotNode.model_rebuild()
FragmentNode.model_rebuild()
IfNode.model_rebuild()
ForNode.model_rebuild()

NodeList = List[Node]

_node_list_adapter: TypeAdapter[List[Any]] = TypeAdapter(NodeList)


def parse_nodes(data: Any) -> List[BaseNode]:
    """Validate a raw JSON-like list into node models."""
    return _node_list_adapter.validate_python(data)


def dump_nodes(nodes: List[BaseNode]) -> List[Dict[str, Any]]:
    """Serialize nodes back to their JSON shape."""
    return [node.model_dump(by_alias=True, exclude_unset=True) for node in nodes]


# Component Models
class ComponentMetadata(BaseModel):
    """Component metadata carried by an extended template."""

    name: Optional[str] = Field(None, description="Component name")
    props: Dict[str, str] = Field(default_factory=dict, description="Prop name to type map")
    imports: List[str] = Field(default_factory=list, description="Import statements")
    script: Optional[str] = Field(None, description="Extra script content")
    typescript: bool = Field(False, description="Emit TypeScript where supported")
    extensions: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Per-extension component configuration"
    )


class ExtendedTemplate(BaseModel):
    """Template node list plus optional component metadata."""

    version: Optional[str] = Field(None, description="Template format version")
    component: Optional[ComponentMetadata] = None
    template: List[Node] = Field(default_factory=list, description="Template nodes")


# Rendering Models
class StyleOptions(BaseModel):
    """Style output configuration."""

    output_format: StyleOutputFormat = Field("css", alias="outputFormat")
    minify: bool = Field(False, description="Collapse rules onto single lines")

    model_config = ConfigDict(populate_by_name=True)


def default_attribute_formatter(attribute: str, value: Any, is_expression: bool = False) -> str:
    """Format an attribute as `` name="value"``."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f' {attribute}="{value}"'


class RenderOptions(BaseModel):
    """Options for one render pass.

    Undeclared keys are kept so extensions can read their own options
    (e.g. ``export_type`` for React, ``scoped`` for Vue) via :meth:`option`.
    """

    name: Optional[str] = Field(None, description="Template name")
    filename: Optional[str] = Field(None, description="Output base name")
    component_name: Optional[str] = Field(None, alias="componentName")
    file_extension: str = Field(".html", alias="fileExtension")
    output_dir: Path = Field(Path("dist"), alias="outputDir")
    extensions: List[Any] = Field(default_factory=list, description="Ordered active extensions")
    attribute_formatter: AttributeFormatter = Field(
        default=default_attribute_formatter, alias="attributeFormatter"
    )
    styles: StyleOptions = Field(default_factory=StyleOptions)
    slots: Dict[str, NodeList] = Field(default_factory=dict, description="Slot name to nodes")
    prefer_self_closing_tags: bool = Field(False, alias="preferSelfClosingTags")
    write_output_file: bool = Field(False, alias="writeOutputFile")
    formatter: Optional[str] = Field("html", description="Formatter for written markup")
    verbose: bool = False
    component: Optional[ComponentMetadata] = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True, extra="allow")

    def option(self, key: str, default: Any = None) -> Any:
        """Read an extension-specific option."""
        if self.model_extra is None:
            return default
        return self.model_extra.get(key, default)

    def explicit_values(self) -> Dict[str, Any]:
        """Values the caller set explicitly, including extension-specific keys."""
        values = {name: getattr(self, name) for name in self.model_fields_set}
        values.update(self.model_extra or {})
        return values


class RenderResult(BaseModel):
    """Artifacts of one render pass."""

    markup: str = Field(..., description="Serialized markup after root handlers")
    styles: str = Field("", description="Aggregated style text")
    style_format: StyleOutputFormat = Field("css", description="Style output format")
    written_files: List[Path] = Field(default_factory=list, description="Paths written")


# Parsing Results
class ParseResult(BaseModel):
    """Result of a template source parsing operation."""

    success: bool = Field(..., description="Whether parsing succeeded")
    template: Optional[ExtendedTemplate] = Field(None, description="Parsed template")
    errors: List[str] = Field(default_factory=list, description="Parsing errors")
    warnings: List[str] = Field(default_factory=list, description="Parsing warnings")
    processing_time: Optional[float] = Field(None, description="Parsing time in seconds")
