"""
Core Engine
===========

Core modules for loading, transforming and rendering template trees.

Modules:
- errors: Exception hierarchy
- extensions: Extension contract, pipeline and registry
- rendering: Renderer, attributes, styles, formatting and output
- template: Template source loading and validation
"""
