"""
Test Suite
==========

Test suite matching the template_engine/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Load, render and write pipelines across components
"""
