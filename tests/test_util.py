import pytest

from usos_core.errors import ParseError
from usos_core.util import Field, format_selector_fields, parse_ampersand_params


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", {}),
        ("a=b", {"a": "b"}),
        ("abc123=abc123", {"abc123": "abc123"}),
        ("a=b&c=d", {"a": "b", "c": "d"}),
        ("a=b&a=c", {"a": "c"}),
        ("a=b&", {"a": "b"}),
        ("&a=b", {"a": "b"}),
        ("&a=b&c=d&", {"a": "b", "c": "d"}),
        ("a=b&&c=d", {"a": "b", "c": "d"}),
        ("a=", {"a": ""}),
    ],
)
def test_parse_ampersand_params(text: str, expected: dict[str, str]) -> None:
    assert parse_ampersand_params(text) == expected


@pytest.mark.parametrize("text", ["a==b", "a=b=c&b=c", "=b", "abc"])
def test_parse_ampersand_params_fails(text: str) -> None:
    with pytest.raises(ParseError):
        parse_ampersand_params(text)


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ([], ""),
        ([Field.one("a")], "a"),
        ([Field.one("a"), Field.one("b")], "a|b"),
        ([Field.nested("a", [Field.one("b"), Field.one("c")])], "a[b|c]"),
        ([Field.nested("a", [Field.one("b")]), Field.one("c")], "a[b]|c"),
        ([Field.one("a"), Field.nested("b", [Field.one("c"), Field.one("d")]), Field.one("e")], "a|b[c|d]|e"),
    ],
)
def test_format_selector_fields(fields: list[Field], expected: str) -> None:
    assert format_selector_fields(fields) == expected


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"a": "b"},
        {"oauth_token": "", "oauth_token_secret": ""},
        {"oauth_token": "abc", "oauth_token_secret": "s3cr3t", "oauth_callback_confirmed": "true"},
        {"key with spaces": "value%20encoded", "ł": "ó"},
        {f"key{i}": f"value{i}" if i % 3 else "" for i in range(50)},
    ],
)
def test_parse_ampersand_params_round_trip(params: dict[str, str]) -> None:
    text = "&".join(f"{key}={value}" for key, value in params.items())

    assert parse_ampersand_params(text) == params
