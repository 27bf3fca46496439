"""
Template Source Module
=====================

Template source loading, format detection and structural validation.

Components:
- loader: JSON/YAML parsing and Cerberus validation
"""
