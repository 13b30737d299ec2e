"""HTTPX authenticators that sign Rides API requests."""

import logging
import threading
from typing import Generator, Optional

import httpx

from rides.config import (
    HEADER_ACCEPT_LANGUAGE,
    HEADER_AUTHORIZATION,
    HEADER_MISSING_SCOPES,
    HEADER_USER_AGENT,
    MAX_RETRIES,
    USER_AGENT,
)
from rides.core.configuration import SessionConfiguration
from rides.credentials import Credential

__all__ = [
    "Authenticator",
    "CredentialsAuthenticator",
    "ServerTokenAuthenticator",
]

logger = logging.getLogger(__name__)


class Authenticator(httpx.Auth):
    """Base HTTPX Auth class for Rides API requests."""

    def __init__(self, configuration: SessionConfiguration) -> None:
        self._configuration = configuration

    @property
    def configuration(self) -> SessionConfiguration:
        """Configuration providing the signing information."""
        return self._configuration

    @property
    def refreshable(self) -> bool:
        """Whether a 401 can be answered by refreshing and retrying."""
        return False

    def sign_request(self, request: httpx.Request) -> None:
        """Set the Authorization header, replacing any existing value."""
        request.headers[HEADER_AUTHORIZATION] = self._authorization()

    def refresh(self, response: httpx.Response) -> Optional[httpx.Request]:
        """Return the failed request re-signed, or None if it cannot be."""
        return None

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[HEADER_ACCEPT_LANGUAGE] = self._configuration.language
        request.headers[HEADER_USER_AGENT] = USER_AGENT
        self.sign_request(request)
        response = yield request

        attempts = 1
        while response.status_code == 401 and self._can_retry(response, attempts):
            retry = self.refresh(response)
            if retry is None:
                return
            attempts += 1
            logger.debug("Retrying %s %s (attempt %d)", retry.method, retry.url, attempts)
            response = yield retry

    def _can_retry(self, response: httpx.Response, attempts: int) -> bool:
        # The API reports missing scopes as 401s; a new token will not help
        if HEADER_MISSING_SCOPES in response.headers:
            return False
        return self.refreshable and attempts < MAX_RETRIES

    def _authorization(self) -> str:
        """Build the Authorization header value. To be implemented by subclasses."""
        raise NotImplementedError


class CredentialsAuthenticator(Authenticator):
    """Bearer-token authentication backed by a refreshable OAuth2 credential."""

    def __init__(
        self, configuration: SessionConfiguration, credential: Credential
    ) -> None:
        super().__init__(configuration)
        self._credential = credential
        self._lock = threading.Lock()

    @property
    def credential(self) -> Credential:
        """Credential supplying the bearer token."""
        return self._credential

    @property
    def refreshable(self) -> bool:
        return True

    def refresh(self, response: httpx.Response) -> Optional[httpx.Request]:
        with self._lock:
            if self._signed_by_old_token(response.request):
                # Another request refreshed the credential in the meantime
                logger.debug("Request was signed with a stale token, re-signing")
            else:
                self._credential.refresh_token()
            return self._resign(response.request)

    def _resign(self, request: httpx.Request) -> httpx.Request:
        retry = httpx.Request(
            request.method,
            request.url,
            headers=request.headers,
            stream=request.stream,
            extensions=request.extensions,
        )
        self.sign_request(retry)
        return retry

    def _signed_by_old_token(self, request: httpx.Request) -> bool:
        value = request.headers.get(HEADER_AUTHORIZATION)
        return value is not None and value != self._authorization()

    def _authorization(self) -> str:
        return f"Bearer {self._credential.access_token}"


class ServerTokenAuthenticator(Authenticator):
    """Static server-token authentication. Never refreshes."""

    def __init__(self, configuration: SessionConfiguration) -> None:
        if not configuration.server_token:
            raise ValueError("A server token must be set on the configuration.")
        super().__init__(configuration)

    def _authorization(self) -> str:
        return f"Token {self._configuration.server_token}"
