"""
Traversal of the USOS API module tree.

Starting from any module or method path, :class:`ReferenceTraversal` fetches
module listings and method references depth-first, in the order the API lists
them, pausing between method fetches to stay gentle on the server.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Final

from usos_codegen.reference import (
    InvalidReferenceError,
    MethodReference,
    ModuleItem,
    ModuleItemKind,
    ModuleItems,
)
from usos_codegen.reference.method_reference import SERVICES_PREFIX
from usos_core.services import get_method_reference, get_module_info

if TYPE_CHECKING:
    from usos_core.client import UsosClient

logger = logging.getLogger(__name__)

REQUEST_DELAY: Final = 0.1
ROOT_MODULE: Final = "services"


def normalize_path(path: str) -> str:
    """Full API path of ``path``, e.g. ``apisrv/now`` becomes ``services/apisrv/now``."""
    path = path.strip().strip("/")
    if path != ROOT_MODULE and not path.startswith(SERVICES_PREFIX):
        path = f"{SERVICES_PREFIX}{path}"
    return path


class ReferenceTraversal:
    """Fetches method references below the given module paths.

    Args:
        client: Client of the USOS installation to document.
        request_delay: Seconds to wait after each method reference request.
        sleep: Function used to wait, replaceable in tests.
    """

    def __init__(
        self,
        client: UsosClient,
        request_delay: float = REQUEST_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.request_delay = request_delay
        self._sleep = sleep
        self.modules_seen: set[str] = set()

    def fetch_method(self, path: str) -> MethodReference:
        reference = MethodReference.from_dict(get_method_reference(self.client, path))
        logger.info("%s: fetched", path)
        if self.request_delay > 0:
            self._sleep(self.request_delay)
        return reference

    def fetch_module(self, path: str) -> ModuleItems:
        listing = ModuleItems.from_dict(path, get_module_info(self.client, path))
        logger.debug("%s: %d items", path, len(listing))
        return listing

    def resolve(self, path: str) -> ModuleItem:
        """Determine whether ``path`` is a module or a method, using its parent's listing.

        Raises:
            InvalidReferenceError: If the parent module does not list ``path``.
        """
        path = normalize_path(path)
        if path == ROOT_MODULE:
            return ModuleItem.module(path)

        parent = path.rsplit("/", 1)[0]
        kind = self.fetch_module(parent).kind_of(path)
        if kind is None:
            raise InvalidReferenceError(f"'{path}' is not listed in module '{parent}'")
        return ModuleItem(kind, path)

    def walk(self, item: ModuleItem) -> Iterator[MethodReference]:
        """Yield the reference of every method at or below ``item``, depth-first."""
        if item.kind is ModuleItemKind.ENDPOINT:
            yield self.fetch_method(item.name)
            return

        self.modules_seen.add(item.name)
        for child in self.fetch_module(item.name):
            yield from self.walk(child)

    def collect(self, paths: Iterable[str]) -> list[MethodReference]:
        """Fetch the references below all ``paths``; a method reached twice is kept once."""
        references: dict[str, MethodReference] = {}
        for path in paths:
            for reference in self.walk(self.resolve(path)):
                references.setdefault(reference.name, reference)
        return list(references.values())
