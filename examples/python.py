#!/usr/bin/env python3
import os

from rides.core.client import RidesClient
from rides.core.configuration import SessionConfiguration
from rides.credentials import AccessToken, OAuth2Credential


def demonstrate_credentials_session():
    """
    Demonstrates fetching the user profile through a credentials session.

    This script expects the following environment variables to be set:
    - RIDES_CLIENT_ID: Your application's client ID.
    - RIDES_CLIENT_SECRET: Your application's client secret.
    - RIDES_ACCESS_TOKEN: A user access token.
    - RIDES_REFRESH_TOKEN (Optional): Refresh token used when the access
      token expires.
    - RIDES_ENVIRONMENT (Optional): "production" (default) or "sandbox".
    """
    print("Rides SDK Credentials Session Demonstration")
    print("-------------------------------------------\n")

    access_token = os.getenv("RIDES_ACCESS_TOKEN")
    if not access_token:
        print("Error: RIDES_ACCESS_TOKEN environment variable is not set.")
        print("Please set it before running the script.")
        return

    try:
        config = SessionConfiguration.from_env()
    except ValueError as exc:
        print(f"Error: {exc}")
        return

    print(f"Using Client ID: {config.client_id[:4]}****")
    print(f"Endpoint: {config.endpoint_host}\n")

    credential = OAuth2Credential(
        config,
        AccessToken(
            access_token=access_token,
            refresh_token=os.getenv("RIDES_REFRESH_TOKEN"),
        ),
    )

    with RidesClient.with_credential(config, credential) as client:
        profile = client.get_user_profile()

    print("User profile:")
    print(profile)


if __name__ == "__main__":
    demonstrate_credentials_session()
