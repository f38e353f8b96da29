"""
USOS API module tree, as listed by ``services/apiref/module``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from usos_codegen.reference.method_reference import InvalidReferenceError


class ModuleItemKind(Enum):
    MODULE = "module"
    ENDPOINT = "endpoint"


@dataclass(frozen=True)
class ModuleItem:
    kind: ModuleItemKind
    name: str
    """Full path, e.g. ``services/apisrv/now``."""

    @classmethod
    def module(cls, name: str) -> ModuleItem:
        return cls(ModuleItemKind.MODULE, name)

    @classmethod
    def endpoint(cls, name: str) -> ModuleItem:
        return cls(ModuleItemKind.ENDPOINT, name)

    @property
    def short_name(self) -> str:
        return self.name.rstrip("/").rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return f"{self.kind.value.capitalize()}: {self.name}"


@dataclass(frozen=True)
class ModuleItems:
    """Direct children of a module: submodules first, then methods."""

    name: str
    items: tuple[ModuleItem, ...]

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> ModuleItems:
        """Build the listing from the decoded ``services/apiref/module`` response.

        Raises:
            InvalidReferenceError: If the response has no ``submodules`` or ``methods`` list.
        """
        try:
            submodules = data["submodules"]
            methods = data["methods"]
        except (KeyError, TypeError):
            raise InvalidReferenceError(f"Module listing of '{name}' must contain 'submodules' and 'methods'") from None

        modules = (ModuleItem.module(item) for item in submodules)
        endpoints = (ModuleItem.endpoint(item) for item in methods)
        return cls(name=name, items=(*modules, *endpoints))

    def __iter__(self) -> Iterator[ModuleItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, path: object) -> bool:
        return any(item.name == path for item in self.items)

    def kind_of(self, path: str) -> ModuleItemKind | None:
        """Kind of the child at ``path``, ``None`` if it is not listed."""
        return next((item.kind for item in self.items if item.name == path), None)
