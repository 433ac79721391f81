import logging
import os
from typing import Optional

import yaml

from ga4audit.domain.crawl_settings import CrawlSettings

logger = logging.getLogger(__name__)


def load_crawl_profile(path: Optional[str]) -> dict:
    """Load a YAML crawl profile and return its mapping (empty when no path is given).

    Recognized keys match CrawlSettings fields, for example:

      common_paths: [/about, /contact, /team]
      asset_extensions: [.pdf, .zip]
      max_links_per_page: 40
      queue_soft_cap: 300
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Crawl profile %s not found; using defaults", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Crawl profile {path} must be a mapping")
    return data


def build_crawl_settings(
    profile_path: Optional[str] = None,
    max_pages_limit: int = 100,
    default_max_pages: int = 50,
    max_links_per_page: int = 25,
    queue_soft_cap: int = 200,
) -> CrawlSettings:
    """Environment limits first, then any crawl-profile overrides on top."""
    settings = CrawlSettings(
        max_pages_limit=max_pages_limit,
        default_max_pages=default_max_pages,
        max_links_per_page=max_links_per_page,
        queue_soft_cap=queue_soft_cap,
    )
    profile = load_crawl_profile(profile_path)
    if profile:
        logger.info("Applying crawl profile %s", profile_path)
    return settings.with_overrides(profile)
