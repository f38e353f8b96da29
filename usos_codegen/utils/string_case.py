"""
String case conversion utilities for Python client generation.

This module provides the string case conversions used to turn USOS API
method and module paths into Python identifiers, with keyword handling.

Based on https://github.com/okunishinishi/python-stringcase
with additional Python-specific naming conventions.
"""

import keyword
import re
from collections.abc import Callable
from typing import Final

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[\-\.\s/]")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z])([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUMERIC_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")
_REPEATED_UNDERSCORE_PATTERN: Final = re.compile(r"_{2,}")

# Names that would shadow what generated modules rely on
RESERVED_NAMES: Final = frozenset({"client", "consumer_key", "token", "data", "cls"})


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Safely convert a string, returning empty string if input is None or empty."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Convert string into snake_case.

    Handles various formats including camelCase with acronyms and
    slash-separated API paths.

    Args:
        string: String to convert.

    Returns:
        Snake case string.

    Examples:
        >>> snakecase("HelloWorld")
        'hello_world'
        >>> snakecase("apisrv/now")
        'apisrv_now'
        >>> snakecase("getHTTPResponse")
        'get_http_response'
    """

    def _snakecase(s: str) -> str:
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        return _REPEATED_UNDERSCORE_PATTERN.sub("_", s).lower()

    return _convert_if_not_empty(string, _snakecase)


def pascalcase(string: str | None) -> str:
    """Convert string into PascalCase.

    Args:
        string: String to convert.

    Returns:
        PascalCase string.

    Examples:
        >>> pascalcase("hello_world")
        'HelloWorld'
        >>> pascalcase("apisrv/consumer")
        'ApisrvConsumer'
    """

    def _pascalcase(s: str) -> str:
        return "".join(word.capitalize() for word in snakecase(s).split("_"))

    return _convert_if_not_empty(string, _pascalcase)


def normalize_python_identifier(name: str | None) -> str:
    """Normalize name to be a valid Python identifier.

    - Replaces invalid characters with underscores
    - Ensures it doesn't start with a digit

    Examples:
        >>> normalize_python_identifier("123invalid")
        '_123invalid'
        >>> normalize_python_identifier("valid@name")
        'valid_name'
    """

    def _normalize(s: str) -> str:
        normalized = _NON_ALPHANUMERIC_PATTERN.sub("_", s)
        if normalized and normalized[0].isdigit():
            normalized = f"_{normalized}"
        return normalized

    return _convert_if_not_empty(name, _normalize)


def is_python_keyword(name: str) -> bool:
    """Check if a name is a Python keyword, soft keywords included."""
    return keyword.iskeyword(name) or keyword.issoftkeyword(name)


def escape_python_keyword(name: str) -> str:
    """Append an underscore to keywords and reserved names.

    Examples:
        >>> escape_python_keyword("from")
        'from_'
        >>> escape_python_keyword("name")
        'name'
    """
    return f"{name}_" if is_python_keyword(name) or name in RESERVED_NAMES else name


def python_identifier(name: str | None) -> str:
    """snake_case, normalized and keyword-escaped identifier for ``name``."""
    return escape_python_keyword(normalize_python_identifier(snakecase(name)))
