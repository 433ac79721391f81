import time
from typing import Callable, Optional

import requests

from ga4audit.domain.http_response import HttpResponse
from ga4audit.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for fetching web pages.

    Requires http_client callable for dependency injection so tests can run
    without the network and the HTTP library stays swappable.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: float = 8):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str, params: Optional[dict] = None, timeout: Optional[float] = None) -> HttpResponse:
        """Fetch URL and return response with status code, body text, Content-Type and duration."""
        headers = {"User-Agent": self.user_agent}
        kwargs = {"headers": headers, "timeout": timeout if timeout is not None else self.timeout}
        if params:
            kwargs["params"] = params
        started = time.monotonic()
        try:
            resp = self.http_client(url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e
        elapsed_ms = int((time.monotonic() - started) * 1000)

        # Extract Content-Type if response has headers; let real exceptions bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        return HttpResponse(resp.status_code, resp.text, ct, elapsed_ms)
