"""
OAuth 1.0a token acquisition.

The flow has two network steps with a user interaction in between::

    NO_TOKEN --acquire_request_token--> REQUEST_TOKEN_OBTAINED
             --(user authorizes, verifier delivered out-of-band)-->
             --acquire_access_token--> ACCESS_TOKEN_OBTAINED

The verifier is either passed to the callback URL by USOS, or shown to the
user as a PIN after visiting :func:`authorization_url` when the callback is
``oob``. Either way it is an input to :func:`acquire_access_token`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import TYPE_CHECKING, Final
from urllib.parse import urlencode

from usos_core.errors import HttpError, ParseError, UnexpectedError
from usos_core.keys import Secret
from usos_core.scopes import Scope, Scopes
from usos_core.util import parse_ampersand_params

if TYPE_CHECKING:
    from collections.abc import Iterable

    from usos_core.client import UsosClient, UsosRequestBuilder
    from usos_core.keys import ConsumerKey

logger = logging.getLogger(__name__)

OOB_CALLBACK: Final = "oob"
REQUEST_TOKEN_PATH: Final = "services/oauth/request_token"
ACCESS_TOKEN_PATH: Final = "services/oauth/access_token"
AUTHORIZE_PATH: Final = "services/oauth/authorize"


@dataclass(frozen=True)
class AccessToken:
    """Token identifying an authorized user within the application's context.

    Its lifetime is controlled by USOS; this package neither persists nor
    refreshes it.
    """

    token: str
    secret: Secret

    def __post_init__(self) -> None:
        if not isinstance(self.secret, Secret):
            object.__setattr__(self, "secret", Secret(self.secret))


@dataclass(frozen=True)
class OAuthRequestToken:
    """Short-lived token that can only be traded for an :class:`AccessToken`."""

    token: str
    secret: Secret

    def __post_init__(self) -> None:
        if not isinstance(self.secret, Secret):
            object.__setattr__(self, "secret", Secret(self.secret))


def _take(params: dict[str, str], key: str) -> str:
    try:
        return params.pop(key)
    except KeyError:
        raise ParseError(f"Token response is missing the '{key}' key") from None


def _token_response(builder: UsosRequestBuilder) -> dict[str, str]:
    """Send a token request and parse its ``&``-separated body.

    Redirects pass :func:`~usos_core.client.classify_response`, but a token
    endpoint only answers with a token body on success.
    """
    response = builder.request()
    if not HTTPStatus.OK <= response.status_code < HTTPStatus.MULTIPLE_CHOICES:
        raise HttpError(response.status_code, None, response.text)
    return parse_ampersand_params(response.text)


def acquire_request_token(
    client: UsosClient,
    consumer: ConsumerKey,
    callback: str | None = None,
    scopes: Scopes | Iterable[Scope | str] = (),
) -> OAuthRequestToken:
    """Obtain a request token, the first step of the flow.

    Args:
        client: Client of the USOS installation.
        consumer: The application's consumer key.
        callback: URL USOS redirects the user to after authorization;
            ``oob`` (a PIN is shown instead) when omitted.
        scopes: Scopes to request.

    Raises:
        HttpError: If the API rejected the request, e.g. due to an invalid consumer key,
            or answered with any other non-2xx status.
        ParseError: If the response lacks one of the expected keys.
    """
    scopes = scopes if isinstance(scopes, Scopes) else Scopes(scopes)
    params = _token_response(
        client.builder(REQUEST_TOKEN_PATH)
        .payload({"oauth_callback": callback or OOB_CALLBACK, "scopes": scopes})
        .auth(consumer)
    )
    token = _take(params, "oauth_token")
    secret = _take(params, "oauth_token_secret")
    _take(params, "oauth_callback_confirmed")

    logger.debug("Obtained request token %s", token)
    return OAuthRequestToken(token=token, secret=Secret(secret))


def authorization_url(client: UsosClient, request_token: OAuthRequestToken) -> str:
    """URL the user visits to authorize the application."""
    return f"{client.url_for(AUTHORIZE_PATH)}?{urlencode({'oauth_token': request_token.token})}"


def acquire_access_token(
    client: UsosClient,
    consumer: ConsumerKey,
    request_token: OAuthRequestToken,
    verifier: str,
) -> AccessToken:
    """Trade an authorized request token and its verifier for an access token.

    Raises:
        HttpError: If the API rejected the request, e.g. due to a wrong verifier, or
            answered with any other non-2xx status.
        ParseError: If the response lacks one of the expected keys.
    """
    params = _token_response(
        client.builder(ACCESS_TOKEN_PATH)
        .payload({"oauth_verifier": verifier})
        .auth(consumer, request_token)
    )
    token = _take(params, "oauth_token")
    secret = _take(params, "oauth_token_secret")

    logger.debug("Obtained access token %s", token)
    return AccessToken(token=token, secret=Secret(secret))


class FlowState(Enum):
    NO_TOKEN = "no_token"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    ACCESS_TOKEN_OBTAINED = "access_token_obtained"


class TokenAcquisitionFlow:
    """One run of the token acquisition flow.

    The request token is discarded as soon as it has been traded, so it
    cannot be used twice. Start a new flow to obtain another access token.
    """

    def __init__(self, client: UsosClient, consumer: ConsumerKey) -> None:
        self._client = client
        self._consumer = consumer
        self._request_token: OAuthRequestToken | None = None
        self._access_token: AccessToken | None = None
        self._state = FlowState.NO_TOKEN

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def access_token(self) -> AccessToken | None:
        return self._access_token

    def _expect(self, state: FlowState) -> None:
        if self._state is not state:
            raise UnexpectedError(f"Token flow is in state {self._state.value}, expected {state.value}")

    def start(self, callback: str | None = None, scopes: Scopes | Iterable[Scope | str] = ()) -> str:
        """Obtain a request token and return the authorization URL for the user."""
        self._expect(FlowState.NO_TOKEN)
        self._request_token = acquire_request_token(self._client, self._consumer, callback, scopes)
        self._state = FlowState.REQUEST_TOKEN_OBTAINED
        return authorization_url(self._client, self._request_token)

    def complete(self, verifier: str) -> AccessToken:
        """Exchange the request token for an access token using ``verifier``."""
        self._expect(FlowState.REQUEST_TOKEN_OBTAINED)

        access_token = acquire_access_token(self._client, self._consumer, self._request_token, verifier)
        self._request_token = None
        self._access_token = access_token
        self._state = FlowState.ACCESS_TOKEN_OBTAINED
        return access_token
