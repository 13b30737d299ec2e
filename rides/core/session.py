"""
Sessions describe how a client authenticates its requests to the Rides API.

Authentication happens through either an OAuth2 credential or a server token,
exactly one of which backs a session. The two modes are separate types joined
by the :data:`Session` union; there is no mode flag to get wrong.
"""

from typing import ClassVar, Literal, Union

from rides.auth import CredentialsAuthenticator, ServerTokenAuthenticator
from rides.core.configuration import SessionConfiguration
from rides.credentials import Credential

__all__ = [
    "CredentialsSession",
    "ServerTokenSession",
    "Session",
]


class _ReadOnly:
    """Rejects attribute assignment once the session is constructed."""

    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")


class CredentialsSession(_ReadOnly):
    """
    Session authenticated through a refreshable OAuth2 credential.

    The session keeps references to ``configuration`` and ``credential``
    (not copies) and owns the :class:`CredentialsAuthenticator` built from
    them. Nothing is fetched over the network at construction.
    """

    __slots__ = ("_configuration", "_credential", "_authenticator")

    kind: ClassVar[Literal["credentials"]] = "credentials"

    def __init__(
        self, configuration: SessionConfiguration, credential: Credential
    ) -> None:
        """
        Args:
            configuration: Connection parameters.
            credential: Credential used to access and refresh the token.

        Raises:
            ValueError: If either argument is None.
        """
        if configuration is None:
            raise ValueError("A session configuration is required.")
        if credential is None:
            raise ValueError("An OAuth 2.0 credential is required.")
        object.__setattr__(self, "_configuration", configuration)
        object.__setattr__(self, "_credential", credential)
        object.__setattr__(
            self, "_authenticator", CredentialsAuthenticator(configuration, credential)
        )

    @property
    def configuration(self) -> SessionConfiguration:
        """Connection parameters the session was built with."""
        return self._configuration

    @property
    def credential(self) -> Credential:
        """Credential backing the bearer token."""
        return self._credential

    @property
    def authenticator(self) -> CredentialsAuthenticator:
        """Authenticator that signs requests for this session."""
        return self._authenticator

    def __repr__(self) -> str:
        return f"CredentialsSession(client_id={self._configuration.client_id!r})"


class ServerTokenSession(_ReadOnly):
    """Session authenticated through the configuration's static server token."""

    __slots__ = ("_configuration", "_authenticator")

    kind: ClassVar[Literal["server_token"]] = "server_token"

    def __init__(self, configuration: SessionConfiguration) -> None:
        if configuration is None:
            raise ValueError("A session configuration is required.")
        object.__setattr__(self, "_configuration", configuration)
        object.__setattr__(
            self, "_authenticator", ServerTokenAuthenticator(configuration)
        )

    @property
    def configuration(self) -> SessionConfiguration:
        """Connection parameters, including the server token."""
        return self._configuration

    @property
    def authenticator(self) -> ServerTokenAuthenticator:
        """Authenticator that signs requests for this session."""
        return self._authenticator

    def __repr__(self) -> str:
        return f"ServerTokenSession(client_id={self._configuration.client_id!r})"


Session = Union[CredentialsSession, ServerTokenSession]
