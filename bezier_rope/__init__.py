"""
Bezier Rope
===========
Interactive cubic Bezier "rope" whose two inner control points hang on
spring-dampers pulled by pointer or tilt input.

A small physics + curve sampling core with a pluggable renderer.
"""

__version__ = "0.1.0"
__author__ = "Bezier Rope Developers"
