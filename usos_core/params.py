"""
Request parameters.

:class:`Params` is a mutable mapping of parameter names to string values that
always iterates in lexicographic key order. The signer and the form/query
serializer see the parameters in the same order, which keeps the signature
computed locally identical to the one the server recomputes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from usos_core.scopes import Scopes

if TYPE_CHECKING:
    from usos_core.auth import AccessToken, OAuthRequestToken
    from usos_core.keys import ConsumerKey

LIST_SEPARATOR = "|"


def into_param_string(value: Any) -> str:  # noqa: ANN401
    """Convert a Python value to its USOS API parameter representation.

    Examples:
        >>> into_param_string(True)
        'true'
        >>> into_param_string(["a", "b"])
        'a|b'
        >>> into_param_string(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return into_param_string(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Scopes):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return LIST_SEPARATOR.join(into_param_string(item) for item in items)
    return str(value)


class Params(MutableMapping[str, str]):
    """Ordered set of request parameters."""

    def __init__(self, pairs: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None) -> None:
        self._data: dict[str, str] = {}
        if pairs is None:
            return
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        for key, value in items:
            self.add(key, value)

    @classmethod
    def from_value(cls, value: Params | Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> Params:
        """Convert ``value`` to :class:`Params`.

        An existing :class:`Params` is returned as-is so it can be signed in
        place. Entries whose value is ``None`` are skipped.
        """
        if isinstance(value, Params):
            return value
        return cls(value)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:  # noqa: ANN401
        self._data[str(key)] = into_param_string(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Params({dict(self.items())!r})"

    def add(self, key: str, value: Any) -> Params:  # noqa: ANN401
        """Set a parameter and return the builder; ``None`` values are skipped."""
        if value is not None:
            self[key] = value
        return self

    def to_query(self) -> str:
        """Canonical, percent-encoded query string."""
        from usos_core.oauth1 import to_query

        return to_query(self)

    def to_pairs(self) -> list[tuple[str, str]]:
        """Parameters as ``(key, value)`` pairs in canonical order, for the HTTP transport."""
        return list(self.items())

    def sign(
        self,
        method: str,
        uri: str,
        consumer: ConsumerKey,
        token: AccessToken | OAuthRequestToken | None = None,
    ) -> Params:
        """Sign the parameter set in place, see :func:`usos_core.oauth1.authorize`."""
        from usos_core.oauth1 import authorize

        return authorize(method, uri, consumer, token, self)
