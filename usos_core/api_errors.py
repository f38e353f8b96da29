"""
USOS API error envelope.

Error responses of the USOS API carry a JSON object with a developer-facing
``message`` and, optionally, an error code, a reason, user-facing messages in
several languages and the list of missing scopes. See
https://apps.usos.pwr.edu.pl/developers/api/definitions/errors/ for details.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from usos_core.scopes import Scope, parse_scope

logger = logging.getLogger(__name__)


class Language(str, Enum):
    """Languages of user-friendly messages."""

    POLISH = "pl"
    ENGLISH = "en"

    def __str__(self) -> str:
        return self.value


class ErrorKind(str, Enum):
    """Error codes the USOS API can send in the ``error`` key."""

    METHOD_FORBIDDEN = "method_forbidden"
    PARAM_MISSING = "param_missing"
    PARAM_INVALID = "param_invalid"
    PARAM_FORBIDDEN = "param_forbidden"
    FIELD_NOT_FOUND = "field_not_found"
    FIELD_INVALID = "field_invalid"
    FIELD_FORBIDDEN = "field_forbidden"
    OBJECT_NOT_FOUND = "object_not_found"
    OBJECT_INVALID = "object_invalid"
    OBJECT_FORBIDDEN = "object_forbidden"


class Reason(str, Enum):
    """Standard values of the ``reason`` key. Methods may define custom ones."""

    CONSUMER_MISSING = "consumer_missing"
    USER_MISSING = "user_missing"
    SECURE_REQUIRED = "secure_required"
    TRUSTED_REQUIRED = "trusted_required"
    SCOPE_MISSING = "scope_missing"
    IMPERSONATE_REQUIRED = "impersonate_required"


_REASON_DESCRIPTIONS: Final = {
    Reason.CONSUMER_MISSING: "consumer signature is missing",
    Reason.USER_MISSING: "user's access token is required",
    Reason.SECURE_REQUIRED: "secure connection (SSL) is required",
    Reason.TRUSTED_REQUIRED: "only administrative consumers are allowed",
    Reason.SCOPE_MISSING: "access token does not contain some of the required scopes",
    Reason.IMPERSONATE_REQUIRED: (
        "`as_user_id` parameter was used with a method which you do not have administrative access to"
    ),
}

_KIND_DESCRIPTIONS: Final = {
    ErrorKind.METHOD_FORBIDDEN: "Method is forbidden",
    ErrorKind.PARAM_MISSING: "Parameter is missing",
    ErrorKind.PARAM_INVALID: "Parameter is invalid",
    ErrorKind.PARAM_FORBIDDEN: "Parameter is forbidden",
    ErrorKind.FIELD_NOT_FOUND: "Field not found",
    ErrorKind.FIELD_INVALID: "Field is invalid",
    ErrorKind.FIELD_FORBIDDEN: "Field is forbidden",
    ErrorKind.OBJECT_NOT_FOUND: "Object not found",
    ErrorKind.OBJECT_INVALID: "Object is invalid",
    ErrorKind.OBJECT_FORBIDDEN: "Object is forbidden",
}


def describe_reason(reason: Reason | str) -> str:
    """Human-readable description of a reason code; custom reasons are returned as-is."""
    if isinstance(reason, Reason):
        return _REASON_DESCRIPTIONS[reason]
    return reason


def _parse_reason(value: object) -> Reason | str | None:
    if value is None:
        return None
    try:
        return Reason(str(value))
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class LanguageDictionary:
    """Human-readable text in multiple languages."""

    translations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LanguageDictionary:
        return cls({str(lang): str(text) for lang, text in data.items() if text is not None})

    def get(self, language: Language | str) -> str | None:
        return self.translations.get(str(language))

    @property
    def polish(self) -> str | None:
        return self.get(Language.POLISH)

    @property
    def english(self) -> str | None:
        return self.get(Language.ENGLISH)

    def __str__(self) -> str:
        return self.english or self.polish or ""


@dataclass(frozen=True)
class UserMessages:
    """Messages intended for the end user.

    ``fields`` maps the names of parameters that failed validation to their
    messages. The keys usually match method parameters, but not always.
    """

    generic_message: LanguageDictionary | None = None
    fields: dict[str, LanguageDictionary] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserMessages:
        generic = data.get("generic_message")
        fields = data.get("fields")
        if not isinstance(fields, dict):
            fields = {}
        return cls(
            generic_message=LanguageDictionary.from_dict(generic) if isinstance(generic, dict) else None,
            fields={name: LanguageDictionary.from_dict(msg) for name, msg in fields.items() if isinstance(msg, dict)},
        )

    def __str__(self) -> str:
        parts = []
        if self.generic_message is not None:
            parts.append(str(self.generic_message))
        if self.fields:
            lines = "\n".join(f"\t'{name}': {message}" for name, message in self.fields.items())
            parts.append(f"Field errors:\n{lines}")
        return "\n".join(parts)


@dataclass(frozen=True)
class UsosApiError:
    """Standardized error object sent by the USOS API."""

    message: str
    kind: ErrorKind | None = None
    raw_kind: str | None = None
    reason: Reason | str | None = None
    user_messages: UserMessages | None = None
    param_name: str | None = None
    field_name: str | None = None
    method_name: str | None = None
    missing_scopes: list[Scope | str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UsosApiError:
        """Build an error from the decoded JSON envelope.

        Raises:
            KeyError: If the required ``message`` key is absent.
        """
        raw_kind = data.get("error")
        if raw_kind is not None:
            raw_kind = str(raw_kind)
        try:
            kind = ErrorKind(raw_kind) if raw_kind is not None else None
        except ValueError:
            kind = None

        user_messages = data.get("user_messages")
        missing_scopes = data.get("missing_scopes")

        return cls(
            message=str(data["message"]),
            kind=kind,
            raw_kind=raw_kind,
            reason=_parse_reason(data.get("reason")),
            user_messages=UserMessages.from_dict(user_messages) if isinstance(user_messages, dict) else None,
            param_name=data.get("param_name"),
            field_name=data.get("field_name"),
            method_name=data.get("method_name"),
            missing_scopes=[parse_scope(str(s)) for s in missing_scopes] if isinstance(missing_scopes, list) else None,
        )

    @classmethod
    def from_body(cls, body: str | bytes) -> UsosApiError | None:
        """Parse a raw response body, returning ``None`` if it is not an error envelope."""
        try:
            data = json.loads(body)
        except ValueError:
            return None
        if not isinstance(data, dict) or "message" not in data:
            return None
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.debug("Ignoring malformed error envelope: %s", e)
            return None

    def describe_kind(self) -> str | None:
        """One-line description of the error code and its context keys."""
        if self.kind is None:
            return self.raw_kind

        parts = [_KIND_DESCRIPTIONS[self.kind]]
        if self.param_name:
            parts.append(f"Parameter: '{self.param_name}'")
        if self.field_name:
            parts.append(f"Field: '{self.field_name}'")
        if self.method_name:
            parts.append(f"Method: '{self.method_name}'")
        if self.reason is not None:
            parts.append(f"Reason: {describe_reason(self.reason)}")
        return " ".join(parts)

    def __str__(self) -> str:
        lines = [self.message]
        kind = self.describe_kind()
        if kind:
            lines.append(f"Kind: {kind}")
        if self.missing_scopes:
            lines.append("Missing scopes: " + ", ".join(f"'{scope}'" for scope in self.missing_scopes))
        if self.user_messages is not None:
            lines.append(f"User messages: {self.user_messages}")
        return "\n".join(lines)
