import json

import pytest

from usos_core.api_errors import (
    ErrorKind,
    Language,
    LanguageDictionary,
    Reason,
    UserMessages,
    UsosApiError,
    describe_reason,
)
from usos_core.scopes import Scope

FULL_ERROR = {
    "message": "Parameter 'term_id' is invalid.",
    "error": "param_invalid",
    "param_name": "term_id",
    "reason": "scope_missing",
    "missing_scopes": ["grades", "future_scope"],
    "user_messages": {
        "generic_message": {"pl": "Niepoprawny semestr.", "en": "Invalid term."},
        "fields": {"term_id": {"pl": "Nie ma takiego semestru.", "en": "No such term."}},
    },
}


def test_from_body_full_envelope() -> None:
    error = UsosApiError.from_body(json.dumps(FULL_ERROR))

    assert error is not None
    assert error.message == "Parameter 'term_id' is invalid."
    assert error.kind is ErrorKind.PARAM_INVALID
    assert error.param_name == "term_id"
    assert error.reason is Reason.SCOPE_MISSING
    assert error.missing_scopes == [Scope.GRADES, "future_scope"]
    assert error.user_messages is not None
    assert error.user_messages.generic_message is not None
    assert error.user_messages.generic_message.polish == "Niepoprawny semestr."
    assert error.user_messages.fields["term_id"].english == "No such term."


@pytest.mark.parametrize("body", ["not json", "[1, 2]", '{"error": "param_missing"}', ""])
def test_from_body_returns_none_for_other_bodies(body: str) -> None:
    assert UsosApiError.from_body(body) is None


@pytest.mark.parametrize(
    ("data", "expected_missing_scopes"),
    [
        ({"message": "x", "user_messages": {"fields": ["a"]}}, None),
        ({"message": "x", "user_messages": {"fields": None, "generic_message": "plain"}}, None),
        ({"message": "x", "missing_scopes": 5}, None),
        ({"message": "x", "missing_scopes": "grades"}, None),
        ({"message": "x", "missing_scopes": ["grades", 7]}, [Scope.GRADES, "7"]),
    ],
)
def test_unexpected_field_shapes_are_ignored(data: dict, expected_missing_scopes: list | None) -> None:
    error = UsosApiError.from_body(json.dumps(data))

    assert error is not None
    assert error.message == "x"
    assert error.missing_scopes == expected_missing_scopes
    if error.user_messages is not None:
        assert error.user_messages.fields == {}
        assert error.user_messages.generic_message is None


def test_non_string_kind_and_reason_are_kept_as_text() -> None:
    error = UsosApiError.from_dict({"message": "x", "error": 42, "reason": ["scope_missing"]})

    assert error.kind is None
    assert error.raw_kind == "42"
    assert error.reason == "['scope_missing']"


def test_from_dict_requires_message() -> None:
    with pytest.raises(KeyError):
        UsosApiError.from_dict({"error": "param_missing"})


def test_unknown_kind_is_kept_raw() -> None:
    error = UsosApiError.from_dict({"message": "Nope.", "error": "brand_new_kind"})

    assert error.kind is None
    assert error.raw_kind == "brand_new_kind"
    assert error.describe_kind() == "brand_new_kind"


def test_describe_kind_lists_context() -> None:
    error = UsosApiError.from_dict(FULL_ERROR)

    assert error.describe_kind() == (
        "Parameter is invalid Parameter: 'term_id' "
        "Reason: access token does not contain some of the required scopes"
    )


def test_str() -> None:
    lines = str(UsosApiError.from_dict(FULL_ERROR)).split("\n")

    assert lines[0] == "Parameter 'term_id' is invalid."
    assert lines[1].startswith("Kind: Parameter is invalid")
    assert lines[2] == "Missing scopes: 'grades', 'future_scope'"
    assert lines[3] == "User messages: Invalid term."
    assert lines[4:] == ["Field errors:", "\t'term_id': No such term."]


def test_str_with_message_only() -> None:
    assert str(UsosApiError(message="Internal error.")) == "Internal error."


def test_describe_reason_custom() -> None:
    assert describe_reason("custom_reason") == "custom_reason"
    assert describe_reason(Reason.SECURE_REQUIRED) == "secure connection (SSL) is required"


class TestLanguageDictionary:
    def test_prefers_english(self) -> None:
        assert str(LanguageDictionary({"pl": "Cześć", "en": "Hello"})) == "Hello"

    def test_falls_back_to_polish(self) -> None:
        assert str(LanguageDictionary({"pl": "Cześć"})) == "Cześć"

    def test_get_by_language(self) -> None:
        dictionary = LanguageDictionary.from_dict({"pl": "Cześć", "en": None})
        assert dictionary.get(Language.POLISH) == "Cześć"
        assert dictionary.english is None


def test_user_messages_without_generic_message() -> None:
    messages = UserMessages.from_dict({"fields": {"email": {"en": "Invalid email."}}})

    assert messages.generic_message is None
    assert str(messages) == "Field errors:\n\t'email': Invalid email."
