"""RidesClient for interacting with the Rides API synchronously."""

from typing import List, Optional

import httpx

from rides.config import DEFAULT_TIMEOUT
from rides.core.configuration import SessionConfiguration
from rides.core.exceptions import RidesAPIError
from rides.core.models import Product, ProductsResponse, UserProfile
from rides.core.session import CredentialsSession, ServerTokenSession, Session
from rides.credentials import Credential


class RidesClient:
    """Synchronous client for the Rides API."""

    def __init__(
        self,
        session: Session,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize RidesClient from a session, with an optional HTTPX
        client (for testing)."""
        if session is None:
            raise ValueError("A session is required.")
        self.session = session
        self.base_url = session.configuration.endpoint_host
        self.timeout = timeout
        if client is not None:
            # Use provided HTTP client (user is responsible for auth)
            self.client = client
        else:
            self.client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                auth=session.authenticator,
            )

    @classmethod
    def with_credential(
        cls,
        configuration: SessionConfiguration,
        credential: Credential,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "RidesClient":
        """Construct a RidesClient authenticated by an OAuth2 credential."""
        return cls(CredentialsSession(configuration, credential), timeout=timeout)

    @classmethod
    def with_server_token(
        cls,
        configuration: SessionConfiguration,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "RidesClient":
        """Construct a RidesClient authenticated by the configuration's
        server token."""
        return cls(ServerTokenSession(configuration), timeout=timeout)

    def get_products(self, latitude: float, longitude: float) -> List[Product]:
        """List the products available at a location."""
        response = self.client.get(
            "/v1.2/products",
            params={"latitude": latitude, "longitude": longitude},
        )
        if response.status_code != 200:
            raise RidesAPIError(response)
        return ProductsResponse.model_validate(response.json()).products

    def get_user_profile(self) -> UserProfile:
        """Fetch the profile of the authenticated user."""
        response = self.client.get("/v1.2/me")
        if response.status_code != 200:
            raise RidesAPIError(response)
        return UserProfile.model_validate(response.json())

    def close(self) -> None:
        """Close underlying HTTP connection."""
        self.client.close()

    def __enter__(self) -> "RidesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
