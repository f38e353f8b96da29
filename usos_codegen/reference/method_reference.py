"""
USOS API Method Reference Model

This module parses the self-describing documentation returned by
``services/apiref/method`` into dataclasses, and derives the Python names
used by the generated client.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Final

from usos_codegen.utils.string_case import pascalcase, python_identifier
from usos_core.errors import ParseError
from usos_core.scopes import Scope, parse_scope

SERVICES_PREFIX: Final = "services/"

# Arguments handled by the client itself rather than by generated code
OMITTED_ARG_NAMES: Final = frozenset({"format", "callback"})


class InvalidReferenceError(ParseError):
    """Raised when a method reference lacks a required key or has an invalid value."""


class SignatureRequirement(str, Enum):
    """Whether a consumer key or an access token is needed to call a method."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    IGNORED = "ignored"

    def __str__(self) -> str:
        return self.value


def _require(data: dict[str, Any], key: str, context: str) -> Any:  # noqa: ANN401
    try:
        return data[key]
    except (KeyError, TypeError):
        raise InvalidReferenceError(f"{context} is missing the '{key}' key") from None


def _requirement(data: dict[str, Any], key: str, context: str) -> SignatureRequirement:
    value = _require(data, key, context)
    try:
        return SignatureRequirement(value)
    except ValueError:
        raise InvalidReferenceError(f"{context} has an invalid '{key}' requirement: {value!r}") from None


@dataclass
class AuthRequirements:
    """Authentication requirements of a method."""

    consumer: SignatureRequirement
    token: SignatureRequirement
    administrative_only: bool = False
    ssl_required: bool = False
    scopes: list[Scope | str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthRequirements:
        context = "auth_options"
        return cls(
            consumer=_requirement(data, "consumer", context),
            token=_requirement(data, "token", context),
            administrative_only=bool(data.get("administrative_only", False)),
            ssl_required=bool(data.get("ssl_required", False)),
            scopes=[parse_scope(name) for name in data.get("scopes") or []],
        )

    @property
    def signed(self) -> bool:
        """True if requests may carry an OAuth signature."""
        return self.consumer is not SignatureRequirement.IGNORED

    @property
    def accepts_token(self) -> bool:
        return self.token is not SignatureRequirement.IGNORED


@dataclass
class Argument:
    """Represents a method argument."""

    name: str
    is_required: bool
    is_deprecated: bool = False
    default_value: str | None = None
    """``None`` if the argument has no default value."""
    description: str = ""
    python_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.python_name = python_identifier(self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Argument:
        name = _require(data, "name", "argument")
        context = f"argument '{name}'"
        return cls(
            name=name,
            is_required=bool(_require(data, "is_required", context)),
            is_deprecated=bool(data.get("is_deprecated", False)),
            default_value=data.get("default_value"),
            description=data.get("description") or "",
        )

    @property
    def is_omitted(self) -> bool:
        return self.name in OMITTED_ARG_NAMES


@dataclass
class ResultField:
    """A field of the method result, in either the primary or the secondary section."""

    name: str
    description: str = ""
    is_primary: bool = False
    is_secondary: bool = False
    python_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.python_name = python_identifier(self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResultField:
        return cls(
            name=_require(data, "name", "result field"),
            description=data.get("description") or "",
            is_primary=bool(data.get("is_primary", False)),
            is_secondary=bool(data.get("is_secondary", False)),
        )


@dataclass
class Deprecated:
    deprecated_by: str | None = None
    present_until: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Deprecated:
        return cls(deprecated_by=data.get("deprecated_by"), present_until=data.get("present_until"))


@dataclass
class MethodReference:
    """Documentation of a single USOS API method."""

    name: str
    short_name: str
    description: str
    brief_description: str
    ref_url: str
    auth_options: AuthRequirements
    arguments: list[Argument] = field(default_factory=list)
    returns: str = ""
    errors: str = ""
    result_fields: list[ResultField] = field(default_factory=list)
    beta: bool = False
    deprecated: Deprecated | None = None
    """``None`` for methods that are not deprecated."""
    admin_access: bool | None = None
    """Only present when the reference request was signed with a consumer key."""
    is_internal: bool = False
    python_function_name: str = field(init=False)
    output_class_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.python_function_name = python_identifier(self.short_name)
        self.output_class_name = f"{pascalcase(self.api_path)}Output"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodReference:
        """Build a reference from the decoded ``services/apiref/method`` response.

        Raises:
            InvalidReferenceError: If a required key is absent or has an invalid value.
        """
        if not isinstance(data, dict):
            raise InvalidReferenceError(f"Method reference must be an object, got {type(data).__name__}")

        name = _require(data, "name", "method reference")
        context = f"method reference '{name}'"
        deprecated = data.get("deprecated")

        return cls(
            name=name,
            short_name=data.get("short_name") or name.rsplit("/", 1)[-1],
            description=data.get("description") or "",
            brief_description=data.get("brief_description") or "",
            ref_url=data.get("ref_url") or "",
            auth_options=AuthRequirements.from_dict(_require(data, "auth_options", context)),
            arguments=[Argument.from_dict(arg) for arg in data.get("arguments") or []],
            returns=data.get("returns") or "",
            errors=data.get("errors") or "",
            result_fields=[ResultField.from_dict(f) for f in data.get("result_fields") or []],
            beta=bool(data.get("beta", False)),
            deprecated=Deprecated.from_dict(deprecated) if deprecated else None,
            admin_access=data.get("admin_access"),
            is_internal=bool(data.get("is_internal", False)),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> list[MethodReference]:
        """Load references saved as JSON, either a single object or a list of them."""
        with Path(path).open(encoding="utf-8") as f:
            data = json.load(f)
        items = data if isinstance(data, list) else [data]
        return [cls.from_dict(item) for item in items]

    @property
    def api_path(self) -> str:
        """Method path without the ``services/`` prefix, e.g. ``apisrv/now``."""
        return self.name[len(SERVICES_PREFIX) :] if self.name.startswith(SERVICES_PREFIX) else self.name

    @property
    def module_parts(self) -> list[str]:
        """Python module names leading to this method's module, the method itself included."""
        return [python_identifier(part) for part in self.api_path.split("/") if part]

    @property
    def generated_arguments(self) -> list[Argument]:
        """Arguments exposed by generated functions."""
        return [arg for arg in self.arguments if not arg.is_omitted and not arg.is_deprecated]
