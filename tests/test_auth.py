"""Tests for request signing and refresh-on-401 behavior."""

import threading
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from rides.auth import CredentialsAuthenticator, ServerTokenAuthenticator
from rides.config import MAX_RETRIES, USER_AGENT
from rides.core.configuration import SessionConfiguration
from rides.core.exceptions import AccessTokenRefreshError


class RotatingCredential:
    """Credential stub whose refresh swaps in the next token."""

    def __init__(self, *tokens):
        self._tokens = list(tokens)
        self.access_token = self._tokens.pop(0)
        self.refresh_calls = 0

    def refresh_token(self):
        self.refresh_calls += 1
        self.access_token = self._tokens.pop(0)
        return True


class FailingCredential:
    access_token = "expired"

    def refresh_token(self):
        raise AccessTokenRefreshError("Unable to refresh token", "invalid_grant")


@pytest.fixture
def config():
    return SessionConfiguration(
        client_id="client-1", server_token="srv-token", locale="fr_FR"
    )


def _client(auth, statuses, headers=None):
    """Client whose transport answers with the given status codes in order."""
    requests = []
    statuses = list(statuses)

    def handler(request):
        requests.append(request)
        status = statuses.pop(0) if statuses else 200
        return httpx.Response(status, headers=headers or {}, json={})

    client = httpx.Client(
        base_url="https://api.uber.com",
        auth=auth,
        transport=httpx.MockTransport(handler),
    )
    return client, requests


def test_adds_standard_headers(config):
    auth = CredentialsAuthenticator(config, RotatingCredential("tok"))
    client, requests = _client(auth, [200])
    client.get("/v1.2/products")
    assert requests[0].headers["Accept-Language"] == "fr"
    assert requests[0].headers["X-Uber-User-Agent"] == USER_AGENT


def test_sign_request_replaces_existing_header(config):
    auth = CredentialsAuthenticator(config, RotatingCredential("tok"))
    request = httpx.Request(
        "GET", "https://api.uber.com/v1.2/me", headers={"Authorization": "Basic abc"}
    )
    auth.sign_request(request)
    assert request.headers.get_list("Authorization") == ["Bearer tok"]


def test_refreshes_and_retries_on_401(config):
    credential = RotatingCredential("old", "new")
    client, requests = _client(CredentialsAuthenticator(config, credential), [401, 200])
    response = client.get("/v1.2/me")

    assert response.status_code == 200
    assert credential.refresh_calls == 1
    assert [r.headers["Authorization"] for r in requests] == [
        "Bearer old",
        "Bearer new",
    ]


def test_missing_scopes_401_is_not_retried(config):
    credential = RotatingCredential("old", "new")
    client, requests = _client(
        CredentialsAuthenticator(config, credential),
        [401],
        headers={"X-Uber-Missing-Scopes": "request"},
    )
    response = client.get("/v1.2/me")

    assert response.status_code == 401
    assert credential.refresh_calls == 0
    assert len(requests) == 1


def test_gives_up_after_max_retries(config):
    credential = RotatingCredential("t0", "t1", "t2", "t3", "t4")
    client, requests = _client(
        CredentialsAuthenticator(config, credential), [401] * 10
    )
    response = client.get("/v1.2/me")

    assert response.status_code == 401
    assert len(requests) == MAX_RETRIES
    assert credential.refresh_calls == MAX_RETRIES - 1


def test_stale_signature_is_resigned_without_refresh(config):
    credential = RotatingCredential("new")
    auth = CredentialsAuthenticator(config, credential)
    request = httpx.Request(
        "GET", "https://api.uber.com/v1.2/me", headers={"Authorization": "Bearer old"}
    )
    retry = auth.refresh(httpx.Response(401, request=request))

    assert credential.refresh_calls == 0
    assert retry.headers["Authorization"] == "Bearer new"


def test_refresh_failure_propagates(config):
    client, _ = _client(CredentialsAuthenticator(config, FailingCredential()), [401])
    with pytest.raises(AccessTokenRefreshError):
        client.get("/v1.2/me")


def test_server_token_is_not_refreshed(config):
    auth = ServerTokenAuthenticator(config)
    client, requests = _client(auth, [401, 200])
    response = client.get("/v1.2/products")

    assert auth.refreshable is False
    assert response.status_code == 401
    assert len(requests) == 1
    assert requests[0].headers["Authorization"] == "Token srv-token"
    assert auth.refresh(response) is None


def test_concurrent_401s_refresh_once(config):
    workers = 5
    credential = RotatingCredential("old", "new")
    auth = CredentialsAuthenticator(config, credential)
    # Every request signed with the old token is held until all have been sent
    barrier = threading.Barrier(workers, timeout=5)
    retried = []
    lock = threading.Lock()

    def handler(request):
        value = request.headers["Authorization"]
        if value == "Bearer old":
            barrier.wait()
            return httpx.Response(401, json={})
        with lock:
            retried.append(value)
        return httpx.Response(200, json={})

    def fetch(_):
        with httpx.Client(
            base_url="https://api.uber.com",
            auth=auth,
            transport=httpx.MockTransport(handler),
        ) as client:
            return client.get("/v1.2/me").status_code

    with ThreadPoolExecutor(max_workers=workers) as pool:
        statuses = list(pool.map(fetch, range(workers)))

    assert statuses == [200] * workers
    assert credential.refresh_calls == 1
    assert retried == ["Bearer new"] * workers
