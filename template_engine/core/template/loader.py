"""
Template Loader
===============

Load template sources into node models. Sources are JSON or YAML and hold
either a bare node list or an extended template object with component
metadata. Structure is validated with Cerberus schemas before the node
models are built.
"""

from typing import Dict, List, Any, Optional, Tuple, Union
from pathlib import Path
import json
import time
from abc import ABC, abstractmethod

import aiofiles
import yaml  # type: ignore[import-untyped]
from cerberus import Validator  # type: ignore[import-untyped]
from pydantic import ValidationError

from template_engine.config.logging import get_logger
from template_engine.core.errors import TemplateNotFoundError, TemplateSourceError
from template_engine.models.schemas import ExtendedTemplate, ParseResult

logger = get_logger(__name__)


NODE_TYPES = ("element", "text", "slot", "fragment", "comment", "if", "for")
LEAF_TYPES = ("text", "comment")
CHILD_KEYS = ("children", "then", "else", "fallback")

SOURCE_SUFFIXES = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


class TemplateValidator:
    """Template source validation using Cerberus schemas."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="validator")  # structlog.BoundLoggerBase
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        self.component_schema = {
            "name": {"type": "string", "nullable": True},
            "props": {"type": "dict", "valuesrules": {"type": "string"}},
            "imports": {"type": "list", "schema": {"type": "string"}},
            "script": {"type": "string", "nullable": True},
            "typescript": {"type": "boolean"},
            "extensions": {"type": "dict", "valuesrules": {"type": "dict"}},
        }

        self.node_schema = {
            "type": {"type": "string", "allowed": list(NODE_TYPES)},
            "tag": {"type": "string", "empty": False},
            "attributes": {"type": "dict"},
            "expressionAttributes": {"type": "dict"},
            "selfClosing": {"type": "boolean"},
            "content": {"type": "string"},
            "name": {"type": "string"},
            "condition": {"type": "string"},
            "items": {"type": "string"},
            "item": {"type": "string"},
            "index": {"type": "string", "nullable": True},
            "key": {"type": "string", "nullable": True},
            "extensions": {"type": "dict"},
            "children": {"type": "list"},
            "then": {"type": "list"},
            "else": {"type": "list", "nullable": True},
            "fallback": {"type": "list", "nullable": True},
        }

        self.document_schema: Dict[str, Any] = {
            "version": {"type": ["string", "number"], "nullable": True},
            "component": {"type": "dict", "schema": self.component_schema, "nullable": True},
            "template": {"type": "list", "required": True},
        }

    def validate_document(self, data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate template document structure.

        Args:
            data: Extended template data

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        validator = Validator(self.document_schema)  # type: ignore[misc]
        validator.allow_unknown = True  # type: ignore[attr-defined]

        is_valid = validator.validate(data)  # type: ignore[misc]
        errors: List[str] = []
        warnings: List[str] = []

        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))  # type: ignore[attr-defined]

        for i, node in enumerate(data.get("template") or []):
            node_errors, node_warnings = self._validate_node(node, f"template[{i}]")
            errors.extend(node_errors)
            warnings.extend(node_warnings)

        return is_valid and not errors, errors, warnings

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            for error in error_info if isinstance(error_info, list) else [error_info]:
                if isinstance(error, dict):
                    formatted_errors.extend(self._format_validation_errors(error, current_path))
                else:
                    formatted_errors.append(f"{current_path}: {error}")

        return formatted_errors

    def _validate_node(self, node: Any, path: str) -> Tuple[List[str], List[str]]:
        """Validate one node and its child lists."""
        errors: List[str] = []
        warnings: List[str] = []

        if not isinstance(node, dict):
            errors.append(f"{path}: Node must be an object, got {type(node).__name__}")
            return errors, warnings

        validator = Validator(self.node_schema)  # type: ignore[misc]
        validator.allow_unknown = True  # type: ignore[attr-defined]
        if not validator.validate(node):  # type: ignore[misc]
            errors.extend(self._format_validation_errors(validator.errors, path))  # type: ignore[attr-defined]
            return errors, warnings

        node_type = node.get("type")
        if node_type is None and "tag" not in node:
            errors.append(f"{path}: Node must declare a 'tag' or a 'type'")
        elif node_type == "element" and "tag" not in node:
            errors.append(f"{path}: Element node requires a 'tag'")
        elif node_type not in (None, "element") and "tag" in node:
            warnings.append(f"{path}: 'tag' is ignored on '{node_type}' nodes")

        if node_type in LEAF_TYPES and node.get("children"):
            warnings.append(f"{path}: '{node_type}' nodes cannot have children")

        for child_key in CHILD_KEYS:
            for i, child in enumerate(node.get(child_key) or []):
                child_errors, child_warnings = self._validate_node(child, f"{path}.{child_key}[{i}]")
                errors.extend(child_errors)
                warnings.extend(child_warnings)

        return errors, warnings


class BaseTemplateParser(ABC):
    """Abstract base class for template source parsers."""

    parser_name = ""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(parser=self.parser_name)  # structlog.BoundLoggerBase
        self.validator = TemplateValidator()

    @abstractmethod
    def load(self, content: str) -> Any:
        """Deserialize raw source content."""
        pass

    async def parse(self, content: str) -> ParseResult:
        """
        Parse template source content.

        Args:
            content: Raw source content

        Returns:
            ParseResult containing the parsed template or errors
        """
        start_time = time.time()

        try:
            self.logger.debug("Parsing template source")
            raw_data = self.load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            error_msg = self._syntax_error_message(e)
            self.logger.error("Template parsing failed", error=error_msg)
            return ParseResult(
                success=False, errors=[error_msg], processing_time=time.time() - start_time
            )

        if isinstance(raw_data, list):
            raw_data = {"template": raw_data}
        elif not isinstance(raw_data, dict):
            return ParseResult(
                success=False,
                errors=[
                    f"Template source must be a node list or an object, got {type(raw_data).__name__}"
                ],
                processing_time=time.time() - start_time,
            )

        is_valid, errors, warnings = self.validator.validate_document(raw_data)
        if not is_valid:
            self.logger.warning("Template validation failed", error_count=len(errors))
            return ParseResult(
                success=False,
                errors=errors,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        try:
            template = ExtendedTemplate.model_validate(raw_data)
        except ValidationError as e:
            return ParseResult(
                success=False,
                errors=[
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        return ParseResult(
            success=True,
            template=template,
            warnings=warnings,
            processing_time=time.time() - start_time,
        )

    def _syntax_error_message(self, error: Exception) -> str:
        return f"Invalid {self.parser_name.upper()} syntax: {error}"


class JSONTemplateParser(BaseTemplateParser):
    """JSON template source parser."""

    parser_name = "json"

    def load(self, content: str) -> Any:
        return json.loads(content)

    def _syntax_error_message(self, error: Exception) -> str:
        if isinstance(error, json.JSONDecodeError):
            return f"Invalid JSON syntax at line {error.lineno}, column {error.colno}: {error.msg}"
        return super()._syntax_error_message(error)


class YAMLTemplateParser(BaseTemplateParser):
    """YAML template source parser."""

    parser_name = "yaml"

    def load(self, content: str) -> Any:
        return yaml.safe_load(content)


class TemplateParserFactory:
    """Factory for creating template parsers based on content type."""

    _parsers = {
        "json": JSONTemplateParser,
        "yaml": YAMLTemplateParser,
    }

    @classmethod
    def create_parser(cls, parser_type: str) -> BaseTemplateParser:
        """
        Create a template parser instance.

        Args:
            parser_type: Type of parser ("json", "yaml")

        Returns:
            Template parser instance

        Raises:
            ValueError: If parser type is not supported
        """
        if parser_type not in cls._parsers:
            raise ValueError(f"Unsupported parser type: {parser_type}")

        return cls._parsers[parser_type]()

    @classmethod
    def detect_parser_type(cls, content: str) -> str:
        """
        Detect parser type from content.

        Args:
            content: Raw source content

        Returns:
            Detected parser type
        """
        content = content.strip()
        if content.startswith(("{", "[")):
            return "json"
        elif content.startswith(("---", "- ")) or "\n-" in content[:100]:
            return "yaml"
        else:
            try:
                json.loads(content)
                return "json"
            except json.JSONDecodeError:
                return "yaml"


async def parse_template(content: str, parser_type: Optional[str] = None) -> ParseResult:
    """
    Parse template source content using the appropriate parser.

    Args:
        content: Raw source content
        parser_type: Optional parser type override

    Returns:
        ParseResult containing the parsed template or errors
    """
    if not content or not content.strip():
        return ParseResult(success=False, errors=["Empty template source provided"], processing_time=0.0)

    if not parser_type:
        parser_type = TemplateParserFactory.detect_parser_type(content)

    try:
        parser = TemplateParserFactory.create_parser(parser_type)
    except ValueError as e:
        return ParseResult(success=False, errors=[str(e)], processing_time=0.0)

    return await parser.parse(content)


def parser_type_for_path(path: Union[str, Path]) -> Optional[str]:
    """Parser type implied by a file suffix, or None to auto-detect."""
    return SOURCE_SUFFIXES.get(Path(path).suffix.lower())


async def load_template(path: Union[str, Path]) -> ParseResult:
    """
    Read and parse a template source file.

    Args:
        path: Source file path

    Returns:
        ParseResult for the file content

    Raises:
        TemplateNotFoundError: If the file does not exist
        TemplateSourceError: If the file cannot be read
    """
    path = Path(path)
    if not path.is_file():
        logger.error("Template source not found", path=str(path))
        raise TemplateNotFoundError(f"Template source not found: {path}", {"path": str(path)})

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read template source", path=str(path), error=str(e))
        raise TemplateSourceError(f"Failed to read {path}: {e}", {"path": str(path)}) from e

    return await parse_template(content, parser_type_for_path(path))
