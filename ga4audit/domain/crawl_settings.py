from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_COMMON_PATHS = (
    "/about",
    "/contact",
    "/services",
    "/products",
    "/blog",
    "/pricing",
    "/shop",
    "/faq",
)

DEFAULT_ASSET_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico", ".bmp", ".tif", ".tiff",
    ".css", ".js", ".mjs", ".map", ".json", ".xml", ".rss", ".txt",
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".mp3", ".mp4", ".wav", ".avi", ".mov", ".webm", ".ogg",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".csv",
    ".zip", ".rar", ".gz", ".tar", ".7z", ".exe", ".dmg", ".apk",
)


@dataclass(frozen=True)
class CrawlSettings:
    """Tunables for the site-wide crawl.

    Defaults match the hosted analyzer; a YAML crawl profile may override any
    field by name.
    """

    common_paths: tuple[str, ...] = DEFAULT_COMMON_PATHS
    asset_extensions: tuple[str, ...] = DEFAULT_ASSET_EXTENSIONS
    max_links_per_page: int = 25
    queue_soft_cap: int = 200
    # pages early in the crawl that yield fewer than `fallback_link_threshold`
    # new links get the common paths injected
    fallback_page_window: int = 3
    fallback_link_threshold: int = 3
    untagged_page_limit: int = 20
    default_max_pages: int = 50
    max_pages_limit: int = 100

    def clamp_max_pages(self, requested: Optional[int]) -> int:
        if requested is None:
            requested = self.default_max_pages
        return max(1, min(int(requested), self.max_pages_limit))

    def with_overrides(self, data: Optional[dict[str, Any]]) -> "CrawlSettings":
        if not data:
            return self
        known = {f.name for f in dataclasses.fields(self)}
        changes: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if key in ("common_paths", "asset_extensions"):
                if isinstance(value, str):
                    value = [value]
                value = tuple(str(v) for v in value)
            else:
                value = int(value)
            changes[key] = value
        return dataclasses.replace(self, **changes)
