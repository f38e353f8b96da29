"""
USOS API Client Generator

A Jinja2-based generator that produces Python client modules from the
self-describing USOS API reference (``services/apiref``).
"""

from .generator import GeneratedItems, PythonCodeGenerator, PythonTemplateEngine
from .reference import InvalidReferenceError, MethodReference, ModuleItems
from .traversal import ReferenceTraversal

__all__ = [
    "GeneratedItems",
    "InvalidReferenceError",
    "MethodReference",
    "ModuleItems",
    "PythonCodeGenerator",
    "PythonTemplateEngine",
    "ReferenceTraversal",
]
