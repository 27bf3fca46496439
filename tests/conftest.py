"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides testing settings, renderer instances, and sample template trees.
"""

import logging
import os
import pytest
from pathlib import Path
from typing import Any, Dict, Generator, List

os.environ.setdefault("TEMPLATE_ENGINE_ENVIRONMENT", "testing")

from pydantic_settings import SettingsConfigDict

# Import application modules
import template_engine.config.settings as settings_module
from template_engine.config.settings import Settings
from template_engine.core.rendering.renderer import TemplateRenderer
from template_engine.extensions.bem import BemExtension
from template_engine.extensions.react import ReactExtension
from template_engine.extensions.vue import VueExtension

from tests.utils.data_generators import TemplateDataGenerator


# Test settings override
class UnitTestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="TEMPLATE_ENGINE_")


@pytest.fixture(scope="session")
def test_settings() -> UnitTestSettings:
    """Test settings fixture."""
    return UnitTestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: UnitTestSettings) -> Generator[UnitTestSettings, None, None]:
    """Override application settings for testing."""
    original = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = original


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Restore root logger handlers a test reconfigured (e.g. CLI ``-v``)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def renderer() -> TemplateRenderer:
    """Template renderer instance."""
    return TemplateRenderer()


@pytest.fixture
def bem_extension() -> BemExtension:
    """BEM extension instance."""
    return BemExtension()


@pytest.fixture
def react_extension() -> ReactExtension:
    """React extension instance."""
    return ReactExtension()


@pytest.fixture
def vue_extension() -> VueExtension:
    """Vue extension instance."""
    return VueExtension()


@pytest.fixture
def simple_template() -> List[Dict[str, Any]]:
    """Simple div with text."""
    return TemplateDataGenerator.generate_simple_div()


@pytest.fixture
def styled_template() -> List[Dict[str, Any]]:
    """Template with structured styles."""
    return TemplateDataGenerator.generate_styled_button()


@pytest.fixture
def bem_template() -> List[Dict[str, Any]]:
    """BEM card template."""
    return TemplateDataGenerator.generate_bem_card()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Output directory for written artifacts."""
    return tmp_path / "dist"
