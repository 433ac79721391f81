"""
Tests for run.py main() with an injected container.
"""
from unittest.mock import Mock, patch

from run import main
from ga4audit.container import Container
from ga4audit.services.crawl_executor import CrawlExecutor
from ga4audit.services.ga4_audit_service import GA4AuditService
from ga4audit.services.page_analyzer import PageAnalyzer


def test_container_creates_services():
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.RENDER_API_KEY.from_value(None)

    assert container.http_service().user_agent == "TestBot/1.0"
    assert isinstance(container.crawl_executor(), CrawlExecutor)
    assert isinstance(container.page_analyzer(), PageAnalyzer)
    assert isinstance(container.ga4_audit_service(), GA4AuditService)
    # no rendering key: the proxy slot falls back to direct fetches
    assert container.fetcher_factory().default() is container.page_fetcher()


def test_crawl_profile_flows_into_settings(tmp_path):
    profile = tmp_path / "crawl.yml"
    profile.write_text("common_paths: [/team]\n")
    container = Container()
    container.config.GA4AUDIT_CRAWL_PROFILE.from_value(str(profile))
    assert container.crawl_settings().common_paths == ("/team",)


def test_main_accepts_injected_container():
    container = Container()
    container.config.HOST.from_value("127.0.0.1")
    container.config.PORT.from_value(9123)
    container.ga4_audit_service.override(Mock())

    with patch('run.uvicorn.run') as mock_uvicorn:
        main(container=container)

    assert mock_uvicorn.called
    _, kwargs = mock_uvicorn.call_args
    assert kwargs == {"host": "127.0.0.1", "port": 9123}
