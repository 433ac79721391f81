"""Domain objects for the GA4 audit service - explicit re-exports to satisfy linters."""
from .page_result import PageResult as PageResult
from .page_result import TagSignals as TagSignals
from .crawl_state import CrawlState as CrawlState
from .crawl_report import CrawlReport as CrawlReport
from .crawl_report import CrawlSummary as CrawlSummary
from .crawl_settings import CrawlSettings as CrawlSettings
from .ga4_audit import GA4Audit as GA4Audit
from .score import ScoreReport as ScoreReport
from .score import Suggestion as Suggestion

__all__ = [
    "PageResult",
    "TagSignals",
    "CrawlState",
    "CrawlReport",
    "CrawlSummary",
    "CrawlSettings",
    "GA4Audit",
    "ScoreReport",
    "Suggestion",
]
