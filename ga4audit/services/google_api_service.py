import logging
from typing import Callable, Iterator, Optional

import requests

from ga4audit.exceptions import HttpFetchError, UpstreamApiError

logger = logging.getLogger(__name__)


class GoogleApiService:
    """
    Thin JSON client for Google REST APIs authenticated with a caller's OAuth token.

    Requires http_request callable (requests.request signature) for dependency
    injection so tests can run without the network.
    """

    def __init__(self, http_request: Callable, user_agent: str, timeout: float = 8):
        self.http_request = http_request
        self.user_agent = user_agent
        self.timeout = timeout

    def _call(self, method: str, url: str, access_token: str, service: str, **kwargs) -> dict:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        try:
            resp = self.http_request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning("%s %s -> HTTP %s", method, url, resp.status_code)
            raise UpstreamApiError(service, resp.status_code, resp.text or None)
        if not resp.text:
            return {}
        try:
            return resp.json()
        except ValueError:
            logger.warning("%s %s -> HTTP %s with a non-JSON body", method, url, resp.status_code)
            raise UpstreamApiError(service, resp.status_code, resp.text[:500])

    def get_json(self, url: str, access_token: str, params: Optional[dict] = None, service: str = "Google API") -> dict:
        kwargs = {"params": params} if params else {}
        return self._call("GET", url, access_token, service, **kwargs)

    def post_json(self, url: str, access_token: str, body: dict, service: str = "Google API") -> dict:
        return self._call("POST", url, access_token, service, json=body)

    def iter_pages(
        self,
        url: str,
        access_token: str,
        items_key: str,
        params: Optional[dict] = None,
        service: str = "Google API",
    ) -> Iterator[dict]:
        """Yield every item of a paginated list endpoint, following nextPageToken."""
        query = dict(params or {})
        while True:
            data = self.get_json(url, access_token, params=dict(query), service=service)
            for item in data.get(items_key, []) or []:
                yield item
            token = data.get("nextPageToken")
            if not token:
                return
            query["pageToken"] = token
