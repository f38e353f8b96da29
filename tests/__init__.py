"""Shared test data and helpers."""

from __future__ import annotations

import json
from typing import Any

import requests

BASE_URL = "https://usos.example.edu/"


def make_response(
    status_code: int = 200,
    body: str = "",
    *,
    json_body: Any = None,  # noqa: ANN401
    cookies: dict[str, str] | None = None,
) -> requests.Response:
    """Build a real response object without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if json_body is not None:
        body = json.dumps(json_body)
        response.headers["Content-Type"] = "application/json"
    response._content = body.encode("utf-8")  # noqa: SLF001
    response.encoding = "utf-8"
    response.url = BASE_URL
    for name, value in (cookies or {}).items():
        response.cookies.set(name, value)
    return response


CONSUMER_REFERENCE: dict[str, Any] = {
    "name": "services/apisrv/consumer",
    "short_name": "consumer",
    "description": "<p>Returns information on the <b>Consumer</b> which signed the request.</p>",
    "brief_description": "Get information on the Consumer",
    "ref_url": "https://usos.example.edu/developers/api/services/apisrv/#consumer",
    "auth_options": {
        "consumer": "required",
        "token": "optional",
        "administrative_only": False,
        "ssl_required": False,
        "scopes": [],
    },
    "arguments": [
        {
            "name": "fields",
            "is_required": False,
            "is_deprecated": False,
            "default_value": "name|url",
            "description": "Selector of result fields you are interested in.",
        },
        {
            "name": "format",
            "is_required": False,
            "is_deprecated": False,
            "default_value": "json",
            "description": "Response format.",
        },
        {
            "name": "callback",
            "is_required": False,
            "is_deprecated": False,
            "default_value": None,
            "description": "JSONP callback.",
        },
        {
            "name": "legacy",
            "is_required": False,
            "is_deprecated": True,
            "default_value": None,
            "description": "No longer used.",
        },
    ],
    "returns": "A dictionary of selected fields.",
    "errors": "",
    "result_fields": [
        {"name": "name", "description": "Name of the Consumer.", "is_primary": True, "is_secondary": False},
        {"name": "url", "description": "", "is_primary": True, "is_secondary": False},
        {"name": "email", "description": "Contact email.", "is_primary": False, "is_secondary": True},
    ],
    "beta": False,
    "deprecated": None,
    "admin_access": None,
    "is_internal": False,
}

NOW_REFERENCE: dict[str, Any] = {
    "name": "services/apisrv/now",
    "short_name": "now",
    "description": "Returns the current date and time.",
    "brief_description": "Get current time",
    "ref_url": "",
    "auth_options": {
        "consumer": "ignored",
        "token": "ignored",
        "administrative_only": False,
        "ssl_required": False,
        "scopes": [],
    },
    "arguments": [],
    "returns": "",
    "errors": "",
    "result_fields": [],
    "beta": False,
    "deprecated": None,
    "admin_access": None,
    "is_internal": False,
}
