"""
USOS API Reference Module

This module provides the data model of the API's self-describing
documentation, used as the input of client generation.
"""

from .method_reference import (
    Argument,
    AuthRequirements,
    Deprecated,
    InvalidReferenceError,
    MethodReference,
    ResultField,
    SignatureRequirement,
)
from .module_items import ModuleItem, ModuleItemKind, ModuleItems

__all__ = [
    "Argument",
    "AuthRequirements",
    "Deprecated",
    "InvalidReferenceError",
    "MethodReference",
    "ModuleItem",
    "ModuleItemKind",
    "ModuleItems",
    "ResultField",
    "SignatureRequirement",
]
