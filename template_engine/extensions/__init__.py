"""
Extensions
==========

Concrete render extensions.

Extensions:
- bem: Block-Element-Modifier class naming and SCSS selector trees
- react: React function components
- vue: Vue single-file components
"""
