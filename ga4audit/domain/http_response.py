from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from an HTTP fetch, direct or through the rendering proxy."""
    status_code: int
    text: str
    content_type: Optional[str] = None
    elapsed_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return 200 <= int(self.status_code) < 300
