"""Helpers for the non-JSON formats used by the USOS API."""

from __future__ import annotations

from dataclasses import dataclass, field

from usos_core.errors import ParseError

PARAM_SEPARATOR = "&"
KEY_VALUE_SEPARATOR = "="
FIELD_SEPARATOR = "|"


def parse_ampersand_params(text: str) -> dict[str, str]:
    """Parse an ``&``-separated list of ``key=value`` pairs.

    This is the body format of the OAuth token endpoints. Values are taken
    verbatim, no URL decoding is applied. Empty segments (leading, trailing
    or doubled ``&``) are skipped; a repeated key keeps its last value.

    Args:
        text: The response body.

    Returns:
        Mapping of keys to values.

    Raises:
        ParseError: If a segment has no ``=``, more than one ``=``, or an empty key.

    Examples:
        >>> parse_ampersand_params("a=b&c=d")
        {'a': 'b', 'c': 'd'}
        >>> parse_ampersand_params("&a=&")
        {'a': ''}
    """
    result: dict[str, str] = {}

    for segment in text.split(PARAM_SEPARATOR):
        if not segment:
            continue

        key, sep, value = segment.partition(KEY_VALUE_SEPARATOR)
        if not sep or not key or KEY_VALUE_SEPARATOR in value:
            raise ParseError(f"Invalid ampersand params syntax in segment {segment!r}: {text!r}")

        result[key] = value

    return result


@dataclass(frozen=True)
class Field:
    """A single entry of a ``fields`` selector, optionally with subfields."""

    name: str
    subfields: tuple[Field, ...] = field(default_factory=tuple)

    @classmethod
    def one(cls, name: str) -> Field:
        return cls(name)

    @classmethod
    def nested(cls, name: str, subfields: list[Field]) -> Field:
        return cls(name, tuple(subfields))

    def __str__(self) -> str:
        if not self.subfields:
            return self.name
        return f"{self.name}[{format_selector_fields(self.subfields)}]"


def format_selector_fields(fields: list[Field] | tuple[Field, ...]) -> str:
    """Render fields in the selector syntax, e.g. ``a|b[c|d]|e``."""
    return FIELD_SEPARATOR.join(str(f) for f in fields)
