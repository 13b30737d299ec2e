"""Configuration for the Rides SDK."""

__version__ = "0.1.0"

DEFAULT_DOMAIN = "uber.com"
PRODUCTION_SUB_DOMAIN = "api"
SANDBOX_SUB_DOMAIN = "sandbox-api"
TOKEN_PATH = "/oauth/v2/token"
DEFAULT_LOCALE = "en_US"
DEFAULT_TIMEOUT = 30.0  # seconds

HEADER_AUTHORIZATION = "Authorization"
HEADER_ACCEPT_LANGUAGE = "Accept-Language"
HEADER_USER_AGENT = "X-Uber-User-Agent"
HEADER_MISSING_SCOPES = "X-Uber-Missing-Scopes"
USER_AGENT = f"Python Rides SDK v{__version__}"

# Total attempts for a single request, including the original one.
MAX_RETRIES = 3
# Seconds shaved off a token's lifetime to account for clock skew
EXPIRY_BUFFER = 60.0
