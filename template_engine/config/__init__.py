"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Engine settings and rendering defaults
- logging: Structured logging configuration
"""
