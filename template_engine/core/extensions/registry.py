"""
Extension Registry
==================

Maps extension identifiers to extension classes and builds ordered
extension lists for a render pass.
"""

from typing import Dict, Iterable, List, Type

from template_engine.config.logging import get_logger
from template_engine.core.errors import ExtensionNotFoundError
from template_engine.core.extensions.base import Extension
from template_engine.extensions.bem import BemExtension
from template_engine.extensions.react import ReactExtension
from template_engine.extensions.vue import VueExtension

logger = get_logger(__name__)


class ExtensionRegistry:
    """Factory for creating extensions by identifier."""

    _extensions: Dict[str, Type[Extension]] = {
        "bem": BemExtension,
        "react": ReactExtension,
        "vue": VueExtension,
    }

    @classmethod
    def register(cls, name: str, extension_class: Type[Extension]) -> None:
        """Register an extension class under ``name``."""
        cls._extensions[name] = extension_class

    @classmethod
    def available(cls) -> List[str]:
        """Registered extension identifiers."""
        return sorted(cls._extensions)

    @classmethod
    def create_extension(cls, name: str, verbose: bool = False) -> Extension:
        """
        Create an extension instance.

        Args:
            name: Extension identifier
            verbose: Verbose logging for the extension

        Returns:
            Extension instance

        Raises:
            ExtensionNotFoundError: If the identifier is not registered
        """
        if name not in cls._extensions:
            raise ExtensionNotFoundError([name])

        return cls._extensions[name](verbose=verbose)

    @classmethod
    def create_extensions(cls, names: Iterable[str], verbose: bool = False) -> List[Extension]:
        """
        Create an ordered extension list, validating every identifier first.

        Args:
            names: Extension identifiers in registration order
            verbose: Verbose logging for the extensions

        Returns:
            Extension instances in the requested order

        Raises:
            ExtensionNotFoundError: Naming every unknown identifier
        """
        names = list(names)
        missing = [name for name in names if name not in cls._extensions]
        if missing:
            logger.error("Unknown extensions requested", missing=missing, available=cls.available())
            raise ExtensionNotFoundError(missing)

        extensions = [cls._extensions[name](verbose=verbose) for name in names]

        renderers = [ext.key for ext in extensions if ext.is_renderer]
        if len(renderers) > 1:
            logger.warning(
                "Multiple renderer extensions requested; output may be inconsistent",
                renderers=renderers,
            )

        return extensions


def create_extensions(names: Iterable[str], verbose: bool = False) -> List[Extension]:
    """Create extensions by identifier using the default registry."""
    return ExtensionRegistry.create_extensions(names, verbose=verbose)
