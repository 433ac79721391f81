"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from ga4audit import config as env
from ga4audit.configs import build_crawl_settings
from ga4audit.services.crawl_executor import CrawlExecutor
from ga4audit.services.crawl_policy import CrawlPolicy
from ga4audit.services.crawl_report_builder import CrawlReportBuilder
from ga4audit.services.fetcher import HttpServiceFetcher
from ga4audit.services.fetcher_factory import FetcherFactory, make_proxy_fetcher
from ga4audit.services.ga4_admin_client import GA4AdminClient
from ga4audit.services.ga4_audit_service import GA4AuditService
from ga4audit.services.google_api_service import GoogleApiService
from ga4audit.services.google_auth_service import GoogleAuthService
from ga4audit.services.http_service import HttpService
from ga4audit.services.link_extractor import LinkExtractor
from ga4audit.services.page_analyzer import PageAnalyzer
from ga4audit.services.tag_detector import TagDetector


# Environment variables used by the container (read via `ga4audit.config` helpers).
#
# USER_AGENT (str, default: "GA4Audit/0.1")
#   User-Agent header for page fetches and Google API calls.
#
# HTTP_TIMEOUT (int seconds, default: 8)
#   Timeout for every outbound request. There are no retries.
#
# RENDER_API_URL (str, default: "https://app.scrapingbee.com/api/v1/")
# RENDER_API_KEY (str | optional)
#   Headless-rendering proxy. Without a key pages are fetched directly, so
#   tags injected by JavaScript are not seen.
#
# GA4AUDIT_MAX_PAGES_LIMIT (int, default: 100)
# GA4AUDIT_DEFAULT_MAX_PAGES (int, default: 50)
#   Upper bound and default for the sitewide crawl page budget.
#
# GA4AUDIT_MAX_LINKS_PER_PAGE (int, default: 25)
# GA4AUDIT_QUEUE_SOFT_CAP (int, default: 200)
#   Link discovery limits.
#
# GA4AUDIT_CRAWL_PROFILE (str path | optional)
#   YAML file overriding crawl settings (common paths, asset extensions, limits).
#
# HOST (str, default: "0.0.0.0")
# PORT (int, default: 8000)
#   Bind address for the API server.
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", "GA4Audit/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 8),
    "RENDER_API_URL": env.get_str_env("RENDER_API_URL", "https://app.scrapingbee.com/api/v1/"),
    "RENDER_API_KEY": env.get_optional_str_env("RENDER_API_KEY"),
    "GA4AUDIT_MAX_PAGES_LIMIT": env.get_int_env("GA4AUDIT_MAX_PAGES_LIMIT", 100),
    "GA4AUDIT_DEFAULT_MAX_PAGES": env.get_int_env("GA4AUDIT_DEFAULT_MAX_PAGES", 50),
    "GA4AUDIT_MAX_LINKS_PER_PAGE": env.get_int_env("GA4AUDIT_MAX_LINKS_PER_PAGE", 25),
    "GA4AUDIT_QUEUE_SOFT_CAP": env.get_int_env("GA4AUDIT_QUEUE_SOFT_CAP", 200),
    "GA4AUDIT_CRAWL_PROFILE": env.get_optional_str_env("GA4AUDIT_CRAWL_PROFILE"),
    "HOST": env.get_str_env("HOST", "0.0.0.0"),
    "PORT": env.get_int_env("PORT", 8000),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the GA4 audit service."""

    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    page_fetcher = providers.Singleton(
        HttpServiceFetcher,
        http_service=http_service,
    )

    proxy_fetcher = providers.Singleton(
        make_proxy_fetcher,
        http_service=http_service,
        api_url=config.RENDER_API_URL,
        api_key=config.RENDER_API_KEY,
    )

    fetcher_factory = providers.Singleton(
        FetcherFactory,
        http_fetcher=page_fetcher,
        proxy_fetcher=proxy_fetcher,
    )

    crawl_settings = providers.Singleton(
        build_crawl_settings,
        profile_path=config.GA4AUDIT_CRAWL_PROFILE,
        max_pages_limit=config.GA4AUDIT_MAX_PAGES_LIMIT.as_(int),
        default_max_pages=config.GA4AUDIT_DEFAULT_MAX_PAGES.as_(int),
        max_links_per_page=config.GA4AUDIT_MAX_LINKS_PER_PAGE.as_(int),
        queue_soft_cap=config.GA4AUDIT_QUEUE_SOFT_CAP.as_(int),
    )

    tag_detector = providers.Singleton(TagDetector)

    link_extractor = providers.Singleton(LinkExtractor)

    crawl_policy = providers.Singleton(
        CrawlPolicy,
        settings=crawl_settings,
    )

    report_builder = providers.Singleton(
        CrawlReportBuilder,
        untagged_page_limit=crawl_settings.provided.untagged_page_limit,
    )

    crawl_executor = providers.Factory(
        CrawlExecutor,
        fetcher_factory=fetcher_factory,
        tag_detector=tag_detector,
        link_extractor=link_extractor,
        crawl_policy=crawl_policy,
        report_builder=report_builder,
        settings=crawl_settings,
    )

    page_analyzer = providers.Factory(
        PageAnalyzer,
        fetcher_factory=fetcher_factory,
        tag_detector=tag_detector,
    )

    google_api_service = providers.Singleton(
        GoogleApiService,
        http_request=providers.Object(requests.request),
        user_agent=config.USER_AGENT.as_(str),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    google_auth_service = providers.Singleton(
        GoogleAuthService,
        api_service=google_api_service,
    )

    ga4_admin_client = providers.Singleton(
        GA4AdminClient,
        api_service=google_api_service,
    )

    ga4_audit_service = providers.Factory(
        GA4AuditService,
        auth_service=google_auth_service,
        admin_client=ga4_admin_client,
    )
