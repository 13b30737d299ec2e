"""Exceptions raised by the Rides SDK."""


class RidesError(Exception):
    """Base class for errors raised by this library."""


class RidesAPIError(RidesError):
    """Represents an error returned by the Rides API."""

    def __init__(self, response):
        self.status_code = response.status_code
        try:
            detail = response.json()
        except ValueError:
            detail = response.text
        super().__init__(f"Status code: {self.status_code}, Detail: {detail}")
        self.detail = detail


class AuthError(RidesError):
    """Raised when an access token cannot be obtained."""


class AccessTokenRefreshError(AuthError):
    """Raised when the token endpoint rejects a refresh-token grant."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message if body is None else f"{message}: {body}")
        self.body = body
