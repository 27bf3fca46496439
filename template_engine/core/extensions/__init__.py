"""
Extension Module
================

Extension contract and hook composition.

Components:
- base: Extension and style plugin base classes
- pipeline: Ordered option, node and root hook composition
- registry: Extension identifiers to classes
"""
