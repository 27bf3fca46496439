"""
Rendering Module
===============

Template tree rendering and output.

Components:
- renderer: Recursive tree renderer
- attributes: Attribute serialization
- styles: Style collection and CSS/SCSS/inline output
- formatter: Markup pretty-printing
- output: Writing rendered files
"""
