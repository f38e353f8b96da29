"""
HTTP client for the USOS API.

:class:`UsosClient` owns the HTTP session and the base URL. It is built once by
the application and passed to every operation that talks to the API.
:class:`UsosRequestBuilder` assembles a single, optionally signed, request and
:func:`classify_response` maps the response status to the error hierarchy in
:mod:`usos_core.errors`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Final

import requests

from usos_core import __version__
from usos_core.api_errors import UsosApiError
from usos_core.errors import (
    HttpError,
    ParseError,
    TransportError,
    UnauthorizedError,
    UnexpectedError,
    UnknownMethodError,
)
from usos_core.params import Params

if TYPE_CHECKING:
    from usos_core.auth import AccessToken, OAuthRequestToken
    from usos_core.keys import ConsumerKey

logger = logging.getLogger(__name__)

SERVICES_PREFIX: Final = "services/"
USER_AGENT: Final = f"usos-core/{__version__}"


class UsosUri:
    """Default USOS installation."""

    DOMAIN: Final = "apps.usos.pwr.edu.pl"

    @classmethod
    def origin(cls) -> str:
        return f"https://{cls.DOMAIN}/"

    @classmethod
    def with_path(cls, path: str) -> str:
        return f"{cls.origin()}{path.lstrip('/')}"


def classify_response(response: requests.Response, uri: str) -> requests.Response:
    """Map the status of a USOS API response to a result or an exception.

    * 1xx raises :class:`UnexpectedError`, the API never sends these.
    * 2xx and 3xx are returned; redirects are left for the caller.
    * 404 raises :class:`UnknownMethodError`, 401 :class:`UnauthorizedError`,
      any other 4xx/5xx :class:`HttpError`. The structured error envelope is
      attached when the body parses, the raw body otherwise.

    Args:
        response: The response to classify.
        uri: URI of the request, used in diagnostics.

    Returns:
        The response, for 2xx and 3xx statuses.
    """
    status = response.status_code

    if status < HTTPStatus.OK:
        raise UnexpectedError(f"Status codes 100-199 are unexpected, got {status} from {uri}")

    if status < HTTPStatus.BAD_REQUEST:
        return response

    body = response.text
    api_error = UsosApiError.from_body(body)
    logger.debug("%s responded with %d: %s", uri, status, api_error or body)

    if status == HTTPStatus.NOT_FOUND:
        raise UnknownMethodError(uri, api_error, body)
    if status == HTTPStatus.UNAUTHORIZED:
        raise UnauthorizedError(api_error, body)
    raise HttpError(status, api_error, body)


class UsosClient:
    """Connection to a USOS API installation.

    Args:
        base_url: Origin of the installation, e.g. ``https://apps.usos.pwr.edu.pl/``.
        session: HTTP session to use; a new one is created if omitted.
        timeout: Timeout passed to the transport, ``None`` for its default.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        base_url = base_url or UsosUri.origin()
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self._session = session

    def __repr__(self) -> str:
        return f"UsosClient({self._base_url!r})"

    def __enter__(self) -> UsosClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def close(self) -> None:
        self._session.close()

    def url_for(self, path: str) -> str:
        """Absolute URL of ``path`` relative to the base URL."""
        return f"{self._base_url}{path.lstrip('/')}"

    def service_url(self, path: str) -> str:
        """Absolute URL of an API method; the ``services/`` prefix is optional."""
        path = path.lstrip("/")
        if not path.startswith(SERVICES_PREFIX):
            path = f"{SERVICES_PREFIX}{path}"
        return self.url_for(path)

    def builder(self, path: str, method: str = "POST") -> UsosRequestBuilder:
        """Start building a request to the API method at ``path``."""
        return UsosRequestBuilder(self, self.service_url(path), method)

    def send(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
        """Send a raw request. Redirects are not followed.

        Raises:
            TransportError: If no response was received.
        """
        logger.debug("%s %s", method, url)
        try:
            return self._session.request(method, url, allow_redirects=False, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e


class UsosRequestBuilder:
    """Fluent builder of a single USOS API request.

    Example:
        >>> response = (
        ...     client.builder("apisrv/consumer", method="GET")
        ...     .payload({"fields": "name|email"})
        ...     .auth(consumer_key)
        ...     .request_json()
        ... )
    """

    def __init__(self, client: UsosClient, uri: str, method: str = "POST") -> None:
        self._client = client
        self._uri = uri
        self._method = method.upper()
        self._payload = Params()
        self._consumer: ConsumerKey | None = None
        self._token: AccessToken | OAuthRequestToken | None = None

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def method(self) -> str:
        return self._method

    def payload(self, payload: Params | Mapping[str, Any] | None) -> UsosRequestBuilder:
        """Set the request parameters. ``None`` values are not sent."""
        self._payload = Params.from_value(payload)
        return self

    def auth(
        self,
        consumer: ConsumerKey | None,
        token: AccessToken | OAuthRequestToken | None = None,
    ) -> UsosRequestBuilder:
        """Sign the request with ``consumer`` and, if given, ``token``.

        Passing ``None`` as the consumer leaves the request unsigned.
        """
        self._consumer = consumer
        self._token = token
        return self

    def build_params(self) -> Params:
        """The parameters that will be sent, signed if credentials were attached."""
        if self._consumer is None:
            return self._payload
        return self._payload.sign(self._method, self._uri, self._consumer, self._token)

    def request(self) -> requests.Response:
        """Send the request and classify the response, see :func:`classify_response`."""
        pairs = self.build_params().to_pairs()
        if self._method in ("GET", "HEAD", "DELETE"):
            response = self._client.send(self._method, self._uri, params=pairs)
        else:
            response = self._client.send(self._method, self._uri, data=pairs)
        return classify_response(response, self._uri)

    def request_text(self) -> str:
        return self.request().text

    def request_json(self) -> Any:  # noqa: ANN401
        """Send the request and decode the JSON body.

        Raises:
            ParseError: If the body is not valid JSON.
        """
        response = self.request()
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {self._uri}: {e}") from e
