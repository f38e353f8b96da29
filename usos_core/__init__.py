"""
USOS API client

OAuth 1.0a signed access to the REST API of the USOS university information
system, together with the token acquisition flow and consumer key tooling.
"""

__version__ = "0.1.0"

from .auth import (  # noqa: E402
    AccessToken,
    FlowState,
    OAuthRequestToken,
    TokenAcquisitionFlow,
    acquire_access_token,
    acquire_request_token,
    authorization_url,
)
from .client import UsosClient, UsosRequestBuilder, UsosUri, classify_response  # noqa: E402
from .errors import (  # noqa: E402
    ConfigurationError,
    HttpError,
    ParseError,
    TransportError,
    UnauthorizedError,
    UnexpectedError,
    UnknownMethodError,
    UsosClientError,
)
from .keys import ConsumerKey, Secret  # noqa: E402
from .oauth1 import authorize  # noqa: E402
from .params import Params  # noqa: E402
from .scopes import Scope, Scopes  # noqa: E402

__all__ = [
    "AccessToken",
    "ConfigurationError",
    "ConsumerKey",
    "FlowState",
    "HttpError",
    "OAuthRequestToken",
    "Params",
    "ParseError",
    "Scope",
    "Scopes",
    "Secret",
    "TokenAcquisitionFlow",
    "TransportError",
    "UnauthorizedError",
    "UnexpectedError",
    "UnknownMethodError",
    "UsosClient",
    "UsosClientError",
    "UsosRequestBuilder",
    "UsosUri",
    "acquire_access_token",
    "acquire_request_token",
    "authorization_url",
    "authorize",
    "classify_response",
]
