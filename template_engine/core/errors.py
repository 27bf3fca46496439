"""
Engine Errors
=============

Exception hierarchy shared by the loader, extension registry, renderer and
output collaborators.
"""

from typing import Any, Dict, List, Optional


class TemplateEngineError(Exception):
    """Base exception for all template engine failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ExtensionNotFoundError(TemplateEngineError):
    """Raised when requested extension identifiers are not registered."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__(
            f"One or more specified extensions could not be loaded: {', '.join(missing)}",
            {"missing": missing},
        )
        self.missing = missing


class TemplateSourceError(TemplateEngineError):
    """Raised when a template source cannot be read."""

    pass


class TemplateNotFoundError(TemplateSourceError):
    """Raised when a template source path does not exist."""

    pass


class OutputWriteError(TemplateEngineError):
    """Raised when rendered output cannot be written."""

    pass


class FormatterError(TemplateEngineError):
    """Raised when code formatting fails or the formatter is unknown."""

    pass
