"""OAuth2 access tokens and refreshable credentials."""

import logging
import threading
import time
from typing import FrozenSet, Optional, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rides.config import EXPIRY_BUFFER, TOKEN_PATH
from rides.core.configuration import SessionConfiguration
from rides.core.exceptions import AccessTokenRefreshError
from rides.scopes import Scope

__all__ = [
    "AccessToken",
    "Credential",
    "OAuth2Credential",
]

logger = logging.getLogger(__name__)


class AccessToken(BaseModel):
    """An OAuth2 token response from the Rides login service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    refresh_token: Optional[str] = None
    scopes: FrozenSet[Scope] = Field(default_factory=frozenset, alias="scope")

    @field_validator("scopes", mode="before")
    @classmethod
    def _parse_scopes(cls, value):
        # Token responses carry scopes as a space-delimited string
        if isinstance(value, str):
            return Scope.parse(value)
        if isinstance(value, int):
            return Scope.from_bits(value)
        return value


@runtime_checkable
class Credential(Protocol):
    """Anything that can yield a current access token and refresh itself."""

    @property
    def access_token(self) -> Optional[str]: ...

    def refresh_token(self) -> bool: ...


class OAuth2Credential:
    """
    Refreshable credential backed by an :class:`AccessToken`.

    Refreshing exchanges the token's refresh token at the login host's token
    endpoint using the configuration's client ID and secret.
    """

    def __init__(
        self,
        configuration: SessionConfiguration,
        token: AccessToken,
        token_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.configuration = configuration
        self.token_url = token_url or f"{configuration.login_host}{TOKEN_PATH}"
        # Optional HTTP client, mostly for tests; module-level httpx otherwise
        self._client = client
        self._lock = threading.Lock()
        self._set_token(token)

    @property
    def token(self) -> AccessToken:
        """Current token, replaced on every refresh."""
        return self._token

    @property
    def access_token(self) -> Optional[str]:
        """Raw access token sent as the bearer value."""
        return self._token.access_token

    @property
    def expired(self) -> bool:
        """Whether the token is past its expiry, less the clock-skew buffer."""
        return time.time() >= self._expires_at

    def _set_token(self, token: AccessToken) -> None:
        self._token = token
        self._expires_at = time.time() + float(token.expires_in) - EXPIRY_BUFFER

    def refresh_token(self) -> bool:
        """
        Exchange the refresh token for a new access token.

        Returns:
            True once the new token is in place.

        Raises:
            AccessTokenRefreshError: If no refresh token is held or the token
                                     endpoint rejects the grant
                                     or answers with a malformed token.
        """
        with self._lock:
            current = self._token
            if not current.refresh_token:
                raise AccessTokenRefreshError("No refresh token available")

            data: dict[str, str] = {
                "grant_type": "refresh_token",
                "refresh_token": current.refresh_token,
                "client_id": self.configuration.client_id,
            }
            if self.configuration.client_secret:
                data["client_secret"] = self.configuration.client_secret

            post = self._client.post if self._client is not None else httpx.post
            resp = post(self.token_url, data=data)
            if resp.status_code != 200:
                raise AccessTokenRefreshError("Unable to refresh token", resp.text)

            try:
                new_token = AccessToken.model_validate(resp.json())
            except (ValueError, ValidationError) as exc:
                raise AccessTokenRefreshError(
                    "Unable to refresh token", resp.text
                ) from exc
            # Servers may omit the refresh token when it is not rotated
            if new_token.refresh_token is None:
                new_token = new_token.model_copy(
                    update={"refresh_token": current.refresh_token}
                )
            self._set_token(new_token)
            logger.debug("Refreshed access token for client %s", data["client_id"])
            return True
