"""Connection parameters shared by every Rides API session."""

import os
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from rides.config import (
    DEFAULT_DOMAIN,
    DEFAULT_LOCALE,
    PRODUCTION_SUB_DOMAIN,
    SANDBOX_SUB_DOMAIN,
)
from rides.scopes import Scope


class Environment(Enum):
    """A Rides API environment, identified by its host sub-domain."""

    PRODUCTION = PRODUCTION_SUB_DOMAIN
    SANDBOX = SANDBOX_SUB_DOMAIN

    @property
    def sub_domain(self) -> str:
        return self.value


class EndpointRegion(Enum):
    DEFAULT = DEFAULT_DOMAIN

    @property
    def domain(self) -> str:
        return self.value


class SessionConfiguration(BaseModel):
    """
    Immutable description of how to reach and identify with the Rides API.

    Use ``model_copy(update={...})`` to derive a modified configuration.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1, description="Registered client ID")
    client_secret: Optional[str] = Field(
        None, description="Client secret; leave unset for public clients"
    )
    server_token: Optional[str] = Field(
        None, description="Static server token for server-token sessions"
    )
    redirect_uri: Optional[str] = None
    environment: Environment = Environment.PRODUCTION
    endpoint_region: EndpointRegion = EndpointRegion.DEFAULT
    scopes: FrozenSet[Scope] = Field(default_factory=frozenset)
    custom_scopes: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Scopes the application is explicitly whitelisted for",
    )
    locale: str = DEFAULT_LOCALE

    @property
    def endpoint_host(self) -> str:
        """Base URL of the API, e.g. ``https://api.uber.com``."""
        return f"https://{self.environment.sub_domain}.{self.endpoint_region.domain}"

    @property
    def login_host(self) -> str:
        return f"https://auth.{self.endpoint_region.domain}"

    @property
    def language(self) -> str:
        """Language part of the locale, sent as ``Accept-Language``."""
        return self.locale.replace("-", "_").split("_")[0]

    @classmethod
    def from_env(
        cls,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        server_token: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        environment: Optional[str] = None,
        locale: Optional[str] = None,
        **kwargs,
    ) -> "SessionConfiguration":
        """
        Build a configuration from arguments and environment variables.

        Values are resolved in the following order of preference:
        1. Direct function arguments.
        2. Environment variables:
           - RIDES_CLIENT_ID
           - RIDES_CLIENT_SECRET
           - RIDES_SERVER_TOKEN
           - RIDES_REDIRECT_URI
           - RIDES_ENVIRONMENT ("production" or "sandbox")
           - RIDES_LOCALE
        3. Default values.

        Remaining keyword arguments (``scopes``, ``custom_scopes``, ...) are
        passed through unchanged.

        Raises:
            ValueError: If no client ID is available, or the environment name
                        is not recognised.
        """
        final_client_id = client_id or os.getenv("RIDES_CLIENT_ID")
        if not final_client_id:
            raise ValueError(
                "Client ID must be provided either as an argument "
                "or via the RIDES_CLIENT_ID environment variable."
            )

        env_name = environment or os.getenv("RIDES_ENVIRONMENT") or "production"
        try:
            final_environment = Environment[env_name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown environment {env_name!r}; "
                "expected 'production' or 'sandbox'."
            ) from None

        return cls(
            client_id=final_client_id,
            client_secret=client_secret or os.getenv("RIDES_CLIENT_SECRET"),
            server_token=server_token or os.getenv("RIDES_SERVER_TOKEN"),
            redirect_uri=redirect_uri or os.getenv("RIDES_REDIRECT_URI"),
            environment=final_environment,
            locale=locale or os.getenv("RIDES_LOCALE") or DEFAULT_LOCALE,
            **kwargs,
        )
