from unittest.mock import Mock

import pytest
import requests

from usos_core.auth import AccessToken
from usos_core.client import UsosClient
from usos_core.keys import ConsumerKey, Secret

from . import BASE_URL


@pytest.fixture
def session() -> Mock:
    """HTTP session whose responses are set per test."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session: Mock) -> UsosClient:
    return UsosClient(BASE_URL, session=session)


@pytest.fixture
def consumer() -> ConsumerKey:
    return ConsumerKey(key="consumer-key", secret=Secret("consumer-secret"), owner="dev@example.edu")


@pytest.fixture
def access_token() -> AccessToken:
    return AccessToken(token="access-token", secret=Secret("access-secret"))
