from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

DETECTION_DIRECT = "direct"
DETECTION_INFERRED = "inferred"
DETECTION_NONE = "none"


@dataclass(frozen=True)
class TagSignals:
    """Analytics tag signatures found in one HTML document.

    GA4 presence is reported with a confidence because GTM containers usually
    load the GA4 config tag at runtime, where the measurement ID is invisible
    in the served HTML.
    """

    gtm_containers: tuple[str, ...] = ()
    ga4_properties: tuple[str, ...] = ()
    has_data_layer: bool = False
    references_google_analytics: bool = False
    references_tag_manager: bool = False
    ga4_detection: str = DETECTION_NONE
    ga4_confidence: float = 0.0

    @property
    def gtm_found(self) -> bool:
        return len(self.gtm_containers) > 0

    @property
    def ga4_found(self) -> bool:
        return self.ga4_detection != DETECTION_NONE

    @property
    def tagged(self) -> bool:
        return self.gtm_found or self.ga4_found


@dataclass(frozen=True)
class PageResult:
    url: str
    status: str
    signals: TagSignals = field(default_factory=TagSignals)
    error: Optional[str] = None
    response_time_ms: Optional[int] = None

    @classmethod
    def success(cls, url: str, signals: TagSignals, response_time_ms: Optional[int] = None) -> "PageResult":
        return cls(url=url, status=STATUS_SUCCESS, signals=signals, response_time_ms=response_time_ms)

    @classmethod
    def failure(cls, url: str, error: str, response_time_ms: Optional[int] = None) -> "PageResult":
        return cls(url=url, status=STATUS_ERROR, error=error, response_time_ms=response_time_ms)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @property
    def gtm_found(self) -> bool:
        return self.ok and self.signals.gtm_found

    @property
    def ga4_found(self) -> bool:
        return self.ok and self.signals.ga4_found

    def to_dict(self) -> dict:
        d = {
            "url": self.url,
            "status": self.status,
            "gtmFound": self.gtm_found,
            "ga4Found": self.ga4_found,
            "gtmContainers": list(self.signals.gtm_containers),
            "ga4Properties": list(self.signals.ga4_properties),
            "ga4Detection": self.signals.ga4_detection,
            "ga4Confidence": self.signals.ga4_confidence,
        }
        if self.error is not None:
            d["error"] = self.error
        if self.response_time_ms is not None:
            d["responseTime"] = self.response_time_ms
        return d
