from __future__ import annotations

from typing import Protocol

from ga4audit.domain.http_response import HttpResponse
from ga4audit.exceptions import HttpFetchError


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response.

    Implementations: plain HTTP (server-rendered HTML only) and the
    headless-rendering proxy (JavaScript executed before the HTML is returned).
    """

    method: str

    def fetch(self, url: str) -> HttpResponse: ...


class HttpServiceFetcher:
    method = "direct-http"

    def __init__(self, http_service):
        self._http_service = http_service

    def fetch(self, url: str) -> HttpResponse:
        return self._http_service.fetch(url)


class RenderingProxyFetcher:
    """Fetch rendered HTML through a ScrapingBee-style rendering API.

    The proxy is called as `GET <api_url>?api_key=...&url=...&render_js=true`
    and answers with the target page's HTML. Its status code is the proxy's,
    which mirrors the target's on success and reports quota/auth problems
    otherwise.
    """

    method = "rendering-proxy"

    def __init__(self, http_service, api_url: str, api_key: str, render_js: bool = True):
        if not api_key:
            raise ValueError("api_key is required for the rendering proxy")
        self._http_service = http_service
        self._api_url = api_url
        self._api_key = api_key
        self._render_js = render_js

    def fetch(self, url: str) -> HttpResponse:
        params = {
            "api_key": self._api_key,
            "url": url,
            "render_js": "true" if self._render_js else "false",
        }
        try:
            return self._http_service.fetch(self._api_url, params=params)
        except HttpFetchError as e:
            # transport errors echo the request URL, which carries the key
            message = str(e.original).replace(self._api_key, "***")
            raise HttpFetchError(url, RuntimeError(message)) from None
