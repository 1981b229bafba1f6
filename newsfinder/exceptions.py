class AuthenticationError(Exception):
    """Raised when the News API rejects the configured key."""


class IntegrationError(Exception):
    """Raised when the News API call fails or returns something unusable."""


class RateLimitError(Exception):
    """Raised when the News API rate limit is hit."""


class InvalidQueryError(Exception):
    """Raised when the search query string cannot be turned into a SearchQuery."""
