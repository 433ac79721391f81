"""Typed GA4 property audit, validated once where it enters the system.

Every nested section has an empty default so a partially fetched audit still
validates; absent data reads as "not configured".
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

FOURTEEN_MONTHS = "FOURTEEN_MONTHS"
GOOGLE_SIGNALS_ENABLED = "GOOGLE_SIGNALS_ENABLED"


class AuditModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null and missing are the same thing for the audit
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PropertySettings(AuditModel):
    name: str = ""
    display_name: str = ""
    time_zone: Optional[str] = None
    currency_code: Optional[str] = None
    industry_category: Optional[str] = None


class WebStreamData(AuditModel):
    default_uri: str = ""
    measurement_id: Optional[str] = None


class CrossDomainSettings(AuditModel):
    domains: list[str] = Field(default_factory=list)


class DataStream(AuditModel):
    name: str = ""
    display_name: str = ""
    type: str = ""
    web_stream_data: Optional[WebStreamData] = None
    cross_domain_settings: Optional[CrossDomainSettings] = None
    session_timeout: Optional[int] = None

    @property
    def stream_id(self) -> str:
        return self.name.rsplit("/", 1)[-1] if self.name else ""

    @property
    def is_web(self) -> bool:
        return self.type == "WEB_DATA_STREAM" or self.web_stream_data is not None


class KeyEvent(AuditModel):
    event_name: str = ""
    create_time: Optional[str] = None
    counting_method: Optional[str] = None


class CustomDimension(AuditModel):
    display_name: str = ""
    parameter_name: str = ""
    scope: str = ""
    description: Optional[str] = None


class CustomMetric(AuditModel):
    display_name: str = ""
    parameter_name: str = ""
    scope: str = ""
    measurement_unit: Optional[str] = None
    description: Optional[str] = None


class EnhancedMeasurementSettings(AuditModel):
    stream_enabled: bool = False
    scrolls_enabled: Optional[bool] = None
    outbound_clicks_enabled: Optional[bool] = None
    site_search_enabled: Optional[bool] = None
    video_engagement_enabled: Optional[bool] = None
    file_downloads_enabled: Optional[bool] = None
    form_interactions_enabled: Optional[bool] = None
    page_changes_enabled: Optional[bool] = None
    search_query_parameter: Optional[str] = None


class EnhancedMeasurement(AuditModel):
    stream_id: str = ""
    stream_name: str = ""
    settings: EnhancedMeasurementSettings = Field(default_factory=EnhancedMeasurementSettings)


class SearchConsoleDataStatus(AuditModel):
    is_linked: bool = False
    has_data: bool = False
    last_data_date: Optional[str] = None
    total_clicks: int = 0
    total_impressions: int = 0
    organic_impressions: int = 0
    link_details: list[dict[str, Any]] = Field(default_factory=list)


class GoogleSignals(AuditModel):
    state: Optional[str] = None


class DataRetention(AuditModel):
    event_data_retention: Optional[str] = None
    user_data_retention: Optional[str] = None


class AttributionSettings(AuditModel):
    reporting_attribution_model: Optional[str] = None
    acquisition_conversion_event_lookback_window: Optional[str] = None
    other_conversion_event_lookback_window: Optional[str] = None
    ads_web_conversion_data_export_scope: Optional[str] = None

    @property
    def is_data_driven(self) -> bool:
        return bool(self.reporting_attribution_model) and "DATA_DRIVEN" in self.reporting_attribution_model


class UserInfo(AuditModel):
    email: str = ""
    name: str = ""


class GA4Audit(AuditModel):
    property_settings: PropertySettings = Field(default_factory=PropertySettings, alias="property")
    data_streams: list[DataStream] = Field(default_factory=list)
    key_events: list[KeyEvent] = Field(default_factory=list)
    custom_dimensions: list[CustomDimension] = Field(default_factory=list)
    custom_metrics: list[CustomMetric] = Field(default_factory=list)
    enhanced_measurement: list[EnhancedMeasurement] = Field(default_factory=list)
    search_console_data_status: SearchConsoleDataStatus = Field(default_factory=SearchConsoleDataStatus)
    google_ads_links: list[dict[str, Any]] = Field(default_factory=list)
    big_query_links: list[dict[str, Any]] = Field(default_factory=list)
    google_signals: GoogleSignals = Field(default_factory=GoogleSignals)
    data_retention: DataRetention = Field(default_factory=DataRetention)
    attribution: AttributionSettings = Field(default_factory=AttributionSettings)
    data_filters: list[dict[str, Any]] = Field(default_factory=list)
    data_quality: dict[str, Any] = Field(default_factory=dict)
    user_info: Optional[UserInfo] = None

    @classmethod
    def parse(cls, data: Any) -> "GA4Audit":
        if isinstance(data, cls):
            return data
        return cls.model_validate(data or {})

    def has_custom_dimension(self, *parameter_names: str) -> bool:
        wanted = set(parameter_names)
        return any(d.parameter_name in wanted for d in self.custom_dimensions)

    def enhanced_measurement_enabled(self) -> bool:
        return any(em.settings.stream_enabled for em in self.enhanced_measurement)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
