import pytest

from usos_core.keys import ConsumerKey
from usos_core.params import Params, into_param_string
from usos_core.scopes import Scope, Scopes


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (Scope.STUDIES, "studies"),
        (["a", "b"], "a|b"),
        (("a", 1), "a|1"),
        ({"b", "a"}, "a|b"),
        (Scopes([Scope.STUDIES, Scope.GRADES]), "grades|studies"),
    ],
)
def test_into_param_string(value: object, expected: str) -> None:
    assert into_param_string(value) == expected


def test_iterates_in_key_order() -> None:
    params = Params([("c", "3"), ("a", "1"), ("b", "2")])

    assert list(params) == ["a", "b", "c"]
    assert params.to_pairs() == [("a", "1"), ("b", "2"), ("c", "3")]


def test_values_are_converted_on_assignment() -> None:
    params = Params()
    params["flag"] = True

    assert params["flag"] == "true"


def test_none_values_are_skipped() -> None:
    params = Params({"a": "1", "b": None})

    assert dict(params) == {"a": "1"}


def test_add_is_chainable() -> None:
    params = Params().add("b", 2).add("a", "x").add("c", None)

    assert dict(params) == {"a": "x", "b": "2"}


class TestFromValue:
    def test_returns_existing_params(self) -> None:
        params = Params({"a": "b"})
        assert Params.from_value(params) is params

    def test_iterable_of_pairs(self) -> None:
        assert dict(Params.from_value([("key", "value"), ("other", None)])) == {"key": "value"}

    def test_none_is_empty(self) -> None:
        assert len(Params.from_value(None)) == 0

    def test_mapping(self) -> None:
        assert dict(Params.from_value({"x": 1, "y": None})) == {"x": "1"}


def test_sign_in_place(consumer: ConsumerKey) -> None:
    params = Params({"a": "b"})

    signed = params.sign("POST", "https://usos.example.edu/services/apisrv/now", consumer)

    assert signed is params
    assert {"oauth_consumer_key", "oauth_nonce", "oauth_signature", "oauth_timestamp"} <= set(params)


def test_to_query_is_canonical() -> None:
    assert Params({"b": "x y", "a": "1"}).to_query() == "a=1&b=x%20y"
