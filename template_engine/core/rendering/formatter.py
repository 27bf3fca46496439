"""
Code Formatter
==============

Pretty-print rendered markup before it is written.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Type

from bs4 import BeautifulSoup

from template_engine.config.logging import get_logger
from template_engine.core.errors import FormatterError

logger = get_logger(__name__)


class BaseCodeFormatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    async def format(self, text: str) -> str:
        """Return formatted text."""
        pass


class HTMLCodeFormatter(BaseCodeFormatter):
    """BeautifulSoup-based HTML pretty-printer."""

    async def format(self, text: str) -> str:
        soup = BeautifulSoup(text, "html.parser")
        return soup.prettify()


class CodeFormatterFactory:
    """Factory for creating code formatters by parser identifier."""

    _formatters: Dict[str, Type[BaseCodeFormatter]] = {
        "html": HTMLCodeFormatter,
    }

    @classmethod
    def available(cls) -> List[str]:
        """Supported parser identifiers."""
        return sorted(cls._formatters)

    @classmethod
    def create_formatter(cls, parser: str) -> BaseCodeFormatter:
        """
        Create a formatter instance.

        Args:
            parser: Parser identifier (e.g. "html")

        Returns:
            Formatter instance

        Raises:
            FormatterError: If the parser identifier is not supported
        """
        if parser not in cls._formatters:
            raise FormatterError(
                f"Unsupported formatter: {parser}", {"available": cls.available()}
            )

        return cls._formatters[parser]()


async def format_code(text: str, parser: str) -> str:
    """
    Format code with the formatter registered for ``parser``.

    Args:
        text: Code to format
        parser: Parser identifier

    Returns:
        Formatted code

    Raises:
        FormatterError: If the parser is unknown or formatting fails
    """
    formatter = CodeFormatterFactory.create_formatter(parser)
    try:
        return await formatter.format(text)
    except Exception as e:
        logger.error("Formatting failed", parser=parser, error=str(e))
        raise FormatterError(f"Formatting failed for {parser}: {e}") from e
