"""Custom exceptions for the GA4 audit services."""
from typing import Optional


class InvalidInputError(ValueError):
    """Raised when a request is missing required fields or carries bad values."""


class InvalidUrlError(InvalidInputError):
    """Raised when a URL cannot be normalized into an absolute http(s) URL."""

    def __init__(self, url: str, reason: str = "is not a valid http(s) URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"'{url}' {reason}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class UpstreamApiError(Exception):
    """Raised when Google or the rendering proxy answers with a non-2xx status."""

    def __init__(self, service: str, status_code: int, body: Optional[str] = None):
        self.service = service
        self.status_code = int(status_code)
        self.body = body
        super().__init__(f"{service} returned HTTP {status_code}")
