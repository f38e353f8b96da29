"""
Code Generator Module for Python Client Generation

This module renders USOS API method references into Python modules
using Jinja2 templates.
"""

from .template_engine import GeneratedItems, PythonCodeGenerator, PythonTemplateEngine

__all__ = [
    "GeneratedItems",
    "PythonCodeGenerator",
    "PythonTemplateEngine",
]
