"""
Jinja2 filters for Python code generation.

USOS API documentation is HTML-formatted; these filters turn it into plain
docstring text and render Python literals and annotations.
"""

from __future__ import annotations

import html
import re
import textwrap
from typing import Final

from usos_codegen.reference import SignatureRequirement

# Documentation patterns
_HTML_BREAK_PATTERN: Final = re.compile(r"<\s*(br|/p|/div|/ul|/ol)\s*/?\s*>", re.IGNORECASE)
_HTML_LIST_ITEM_PATTERN: Final = re.compile(r"<\s*li[^>]*>", re.IGNORECASE)
_HTML_TAG_PATTERN: Final = re.compile(r"<[^>]+>")
_INLINE_WHITESPACE_PATTERN: Final = re.compile(r"[ \t\r\f\v]+")
_BLANK_LINES_PATTERN: Final = re.compile(r"\n{3,}")

DOCSTRING_WIDTH: Final = 88


def strip_html(text: object) -> str:
    """Convert HTML-formatted documentation to plain text.

    Line-breaking tags become newlines, list items become ``- `` bullets,
    other tags are dropped and entities are unescaped.

    Example:
        >>> strip_html("Returns <b>true</b> if the user&#39;s ID is valid.")
        "Returns true if the user's ID is valid."
    """
    if not text:
        return ""

    text = _HTML_BREAK_PATTERN.sub("\n", str(text))
    text = _HTML_LIST_ITEM_PATTERN.sub("\n- ", text)
    text = html.unescape(_HTML_TAG_PATTERN.sub("", text))

    lines = (_INLINE_WHITESPACE_PATTERN.sub(" ", line).strip() for line in text.split("\n"))
    return _BLANK_LINES_PATTERN.sub("\n\n", "\n".join(lines)).strip()


def _escape_docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def python_docstring(text: str | None, indent: int = 0, width: int = DOCSTRING_WIDTH) -> str:
    """Format documentation as the wrapped body of a docstring.

    Args:
        text: HTML or plain text to format.
        indent: Number of spaces prepended to every line but the first.
        width: Maximum line width, indentation included.

    Returns:
        Text safe to place between triple quotes.
    """
    plain = _escape_docstring(strip_html(text))
    if not plain:
        return ""

    wrapped: list[str] = []
    for line in plain.split("\n"):
        if not line:
            wrapped.append("")
            continue
        subsequent = "  " if line.startswith("- ") else ""
        wrapped.extend(textwrap.wrap(line, width=max(width - indent, 20), subsequent_indent=subsequent))

    prefix = " " * indent
    return f"\n{prefix}".join(wrapped).replace(f"\n{prefix}\n", "\n\n")


def docstring_line(text: object) -> str:
    """Single-line plain text for a short docstring."""
    return _escape_docstring(" ".join(strip_html(text).split()))


def python_string_literal(text: str) -> str:
    """Format text as a double-quoted Python string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def requirement_annotation(requirement: SignatureRequirement, type_name: str) -> str:
    """Annotation, and default if any, of a credential parameter.

    Example:
        >>> requirement_annotation(SignatureRequirement.OPTIONAL, "AccessToken")
        'AccessToken | None = None'
    """
    if requirement is SignatureRequirement.REQUIRED:
        return type_name
    return f"{type_name} | None = None"


FILTERS = {
    "strip_html": strip_html,
    "python_docstring": python_docstring,
    "docstring_line": docstring_line,
    "python_string_literal": python_string_literal,
    "requirement_annotation": requirement_annotation,
}
