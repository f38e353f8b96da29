"""
OAuth 1.0a request signing.

Implements the HMAC-SHA1 signature method from OAuth Core 1.0a as used by the
USOS API. The same code signs requests of the hand-written client, of the
token acquisition flow, and of the client stubs produced by ``usos_codegen``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import string
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import quote

from usos_core.params import Params

if TYPE_CHECKING:
    from usos_core.auth import AccessToken, OAuthRequestToken
    from usos_core.keys import ConsumerKey

logger = logging.getLogger(__name__)

NONCE_LENGTH: Final = 32
OAUTH_VERSION: Final = "1.0"
SIGNATURE_METHOD: Final = "HMAC-SHA1"

_NONCE_ALPHABET: Final = string.ascii_letters + string.digits


def percent_encode(value: str | bytes) -> str:
    """Percent-encode everything except the RFC 3986 unreserved characters.

    OAuth Core 1.0, section 5.1 requires this strict variant: only ASCII
    letters, digits and ``-._~`` pass through, every other byte of the UTF-8
    representation becomes ``%XX`` with uppercase hex digits.

    Examples:
        >>> percent_encode("a b&c")
        'a%20b%26c'
        >>> percent_encode("(!*')")
        '%28%21%2A%27%29'
    """
    return quote(value, safe="")


def to_query(params: Mapping[str, str]) -> str:
    """Build the canonical query string of a parameter set.

    Keys and values are encoded independently, joined with ``=``, the
    resulting tokens are sorted by their own string value and joined with
    ``&``. The output does not depend on insertion order.
    """
    pairs = [f"{percent_encode(key)}={percent_encode(value)}" for key, value in params.items()]
    pairs.sort()
    return "&".join(pairs)


def gen_signature(
    method: str,
    uri: str,
    query: str,
    consumer_secret: str,
    token_secret: str | None = None,
) -> str:
    """Compute the HMAC-SHA1 signature of a request.

    Args:
        method: HTTP method, e.g. ``"POST"``.
        uri: Base URI of the request, without the query string.
        query: Canonical query string, see :func:`to_query`.
        consumer_secret: Secret of the consumer key.
        token_secret: Secret of the token, ``None`` before a token exists.

    Returns:
        Base64-encoded signature.
    """
    base = "&".join((percent_encode(method.upper()), percent_encode(uri), percent_encode(query)))
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"

    digest = hmac.new(key.encode("utf-8"), base.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    """Random alphanumeric string used as ``oauth_nonce``."""
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


def authorize(
    method: str,
    uri: str,
    consumer: ConsumerKey,
    token: AccessToken | OAuthRequestToken | None = None,
    params: Params | Mapping[str, Any] | None = None,
) -> Params:
    """Add the OAuth 1.0a authorization parameters to a request.

    The consumer key, a fresh nonce and timestamp, the signature method,
    the version and (if present) the token are inserted into ``params``.
    The whole set, caller parameters included, is then signed and
    ``oauth_signature`` is added last.

    A :class:`Params` argument is signed in place and returned; any other
    value is converted first. The result must be sent unchanged, in the form
    body or the query string, to exactly ``uri``.

    Args:
        method: HTTP method of the request.
        uri: URI of the request, without the query string.
        consumer: The application's consumer key.
        token: Token of the user, or the request token during the access
            token exchange.
        params: Request parameters.

    Returns:
        The signed parameter set.
    """
    params = Params.from_value(params)
    params.pop("oauth_signature", None)

    params["oauth_consumer_key"] = consumer.key
    params["oauth_nonce"] = generate_nonce()
    params["oauth_signature_method"] = SIGNATURE_METHOD
    params["oauth_timestamp"] = str(int(time.time()))
    if token is not None:
        params["oauth_token"] = token.token
    params["oauth_version"] = OAUTH_VERSION

    signature = gen_signature(
        method,
        uri,
        to_query(params),
        consumer.secret.expose_secret(),
        token.secret.expose_secret() if token is not None else None,
    )
    params["oauth_signature"] = signature

    logger.debug("Signed %s %s with %d parameters", method.upper(), uri, len(params))
    return params
