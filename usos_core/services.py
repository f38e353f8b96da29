"""
Hand-written wrappers of a few USOS API methods.

These cover the server information and API reference modules, which the
token tooling and the code generator rely on. Everything else is meant to be
generated with ``usos_codegen``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Final

from usos_core.errors import ParseError
from usos_core.util import Field, format_selector_fields

if TYPE_CHECKING:
    from usos_core.auth import AccessToken
    from usos_core.client import UsosClient
    from usos_core.keys import ConsumerKey

DATE_TIME_FORMAT: Final = "%Y-%m-%d %H:%M:%S"
PRECISE_DATE_TIME_FORMAT: Final = "%Y-%m-%d %H:%M:%S.%f"

CONSUMER_FIELDS: Final = (
    Field.one("name"),
    Field.one("url"),
    Field.one("email"),
    Field.one("date_registered"),
    Field.one("administrative_methods"),
    Field.one("token_scopes"),
)


def parse_datetime(value: str, fmt: str = DATE_TIME_FORMAT) -> datetime:
    """Parse a USOS date/time string.

    Raises:
        ParseError: If ``value`` does not match ``fmt``.
    """
    try:
        return datetime.strptime(value, fmt)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid date time {value!r}: {e}") from e


def get_server_time(client: UsosClient) -> datetime:
    """services/apisrv/now

    Consumer: ignored. Token: ignored.
    """
    body = client.builder("apisrv/now", method="GET").request_json()
    return parse_datetime(body, PRECISE_DATE_TIME_FORMAT)


def get_consumer_info(
    client: UsosClient,
    consumer: ConsumerKey,
    token: AccessToken | None = None,
    fields: str | list[Field] | tuple[Field, ...] = CONSUMER_FIELDS,
) -> dict[str, Any]:
    """services/apisrv/consumer

    Consumer: required. Token: optional.
    """
    if not isinstance(fields, str):
        fields = format_selector_fields(fields)

    return (
        client.builder("apisrv/consumer", method="GET")
        .payload({"fields": fields})
        .auth(consumer, token)
        .request_json()
    )


def get_module_info(client: UsosClient, name: str) -> dict[str, Any]:
    """services/apiref/module: submodules and methods of an API module."""
    return client.builder("apiref/module", method="GET").payload({"name": name}).request_json()


def get_method_reference(client: UsosClient, name: str) -> dict[str, Any]:
    """services/apiref/method: self-describing documentation of an API method."""
    return client.builder("apiref/method", method="GET").payload({"name": name}).request_json()
