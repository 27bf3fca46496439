"""
Template Engine
===============

Render abstract, JSON-serializable template trees into markup, framework
component source and stylesheet text through a pluggable extension pipeline.

This package provides:
- Node models for template trees and render options
- An ordered extension pipeline with option, node and root hooks
- Style aggregation to CSS, SCSS or inline styles
- BEM, React and Vue extensions
- A command-line interface for rendering template sources to disk
"""

__version__ = "1.0.0"
__author__ = "Template Engine Team"
