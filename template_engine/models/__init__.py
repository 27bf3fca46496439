"""
Data Models
===========

Pydantic data models for template trees and render configuration.

Models:
- schemas: Template nodes, render options, parse and render results
"""
