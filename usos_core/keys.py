"""
Consumer keys.

A consumer key identifies the calling application. It is created from the
environment or registered with the USOS API, and is immutable afterwards, so
a single instance can be shared by any number of concurrent signing calls.
"""

from __future__ import annotations

import hmac
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from usos_core.client import classify_response
from usos_core.errors import ConfigurationError, ParseError, UnexpectedError

if TYPE_CHECKING:
    from usos_core.client import UsosClient

logger = logging.getLogger(__name__)

CONSUMER_KEY_NAME: Final = "USOS_CONSUMER_KEY"
CONSUMER_SECRET_NAME: Final = "USOS_CONSUMER_SECRET"
CONSUMER_KEY_OWNER: Final = "USOS_CONSUMER_EMAIL"

CSRF_COOKIE_NAME: Final = "csrftoken"
EXPORT_FILE_SUFFIX: Final = "_consumer_key.env"
EXPORT_TIMESTAMP_FORMAT: Final = "%Y-%m-%d_%H-%M"

_REDACTED: Final = "**********"


class Secret:
    """Confidential string that is never shown by ``str()`` or ``repr()``.

    The raw value is only available through :meth:`expose_secret`.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str | Secret) -> None:
        self._value = value.expose_secret() if isinstance(value, Secret) else str(value)

    def expose_secret(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Secret('{_REDACTED}')"

    def __str__(self) -> str:
        return _REDACTED

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return hmac.compare_digest(self._value.encode("utf-8"), other._value.encode("utf-8"))

    def __hash__(self) -> int:
        return hash(self._value)


@dataclass(frozen=True)
class ConsumerKey:
    """Key and secret of a registered application."""

    key: str
    secret: Secret
    owner: str | None = None
    """Developer email, informational only."""

    def __post_init__(self) -> None:
        if not isinstance(self.secret, Secret):
            object.__setattr__(self, "secret", Secret(self.secret))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ConsumerKey:
        """Read the consumer key from environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``.

        Raises:
            ConfigurationError: If the key or the secret variable is absent.
        """
        environ = os.environ if environ is None else environ

        try:
            key = environ[CONSUMER_KEY_NAME]
            secret = environ[CONSUMER_SECRET_NAME]
        except KeyError as e:
            raise ConfigurationError(e.args[0]) from None

        return cls(key=key, secret=Secret(secret), owner=environ.get(CONSUMER_KEY_OWNER) or None)

    @classmethod
    def generate(
        cls,
        client: UsosClient,
        app_name: str,
        email: str,
        website_url: str | None = None,
    ) -> ConsumerKey:
        """Register a new consumer key with the USOS API.

        This modifies remote resources: it submits the developer registration
        form at ``{base_url}developers/submit``.

        Raises:
            ParseError: If the registration page did not set a CSRF cookie.
            HttpError: If the registration request was rejected.
            UnexpectedError: If the registration status is not ``success``.
        """
        developers_url = client.url_for("developers/")
        response = classify_response(client.send("GET", developers_url), developers_url)

        csrf_token = response.cookies.get(CSRF_COOKIE_NAME)
        if not csrf_token:
            raise ParseError(f"CSRF token cookie '{CSRF_COOKIE_NAME}' expected but not found")

        form = {"appname": app_name, "email": email}
        if website_url is not None:
            form["appurl"] = website_url

        submit_url = client.url_for("developers/submit")
        headers = {
            "Cookie": f"{CSRF_COOKIE_NAME}={csrf_token}",
            "Host": urlsplit(client.base_url).netloc,
            "Origin": client.base_url,
            "Referer": developers_url,
            "X-CSRFToken": csrf_token,
        }
        response = classify_response(client.send("POST", submit_url, data=form, headers=headers), submit_url)

        registration = response.json()
        if registration.get("status") != "success":
            raise UnexpectedError(
                f"Registering the consumer key failed. Registration status: {registration.get('status')!r}"
            )

        logger.info("Registered consumer key for %s", email)
        return cls(
            key=registration["consumer_key"],
            secret=Secret(registration["consumer_secret"]),
            owner=email,
        )

    def revoke(self, client: UsosClient) -> None:
        """Revoke this key. USOS follows up with a confirmation email to the owner.

        Raises:
            HttpError: If the API rejected the request.
        """
        client.builder("oauth/revoke_consumer_key").payload(
            {"consumer_key": self.key, "consumer_secret": self.secret.expose_secret()}
        ).request()
        logger.info("Requested revocation of consumer key %s", self.key)

    def save_to_file(self, directory: str | Path = ".", now: datetime | None = None) -> Path:
        """Write the key to a ``.env`` file, e.g. ``2024-09-03_11-50_consumer_key.env``.

        This exposes the consumer secret on disk.

        Returns:
            Path of the written file.
        """
        now = now or datetime.now(timezone.utc)
        path = Path(directory) / f"{now.strftime(EXPORT_TIMESTAMP_FORMAT)}{EXPORT_FILE_SUFFIX}"
        path.write_text(
            f"{CONSUMER_KEY_NAME}={self.key}\n"
            f"{CONSUMER_SECRET_NAME}={self.secret.expose_secret()}\n"
            f"{CONSUMER_KEY_OWNER}={self.owner or ''}\n",
            encoding="utf-8",
        )
        return path
