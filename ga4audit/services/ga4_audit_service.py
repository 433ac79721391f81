import logging
import re
from typing import Callable, List, TypeVar

from ga4audit.domain.ga4_audit import DataStream, GA4Audit
from ga4audit.exceptions import HttpFetchError, InvalidInputError, InvalidUrlError, UpstreamApiError
from ga4audit.services.config_scorer import score_audit
from ga4audit.services.data_quality import summarize_data_quality
from ga4audit.services.pii_detector import detect_pii
from ga4audit.services.search_analyzer import analyze_search
from ga4audit.services.traffic_analyzer import analyze_traffic
from ga4audit.services.url_normalizer import hostname_of, normalize_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROPERTY_ID_RE = re.compile(r"^(?:properties/)?(\d+)$")
# statuses the Data API uses when Search Console metrics are unavailable
_SEARCH_CONSOLE_UNLINKED = (400, 403)


def parse_property_id(raw) -> str:
    match = _PROPERTY_ID_RE.match(str(raw).strip()) if raw is not None else None
    if not match:
        raise InvalidInputError(f"Invalid propertyId: {raw!r}")
    return match.group(1)


def _id_from_name(name: str) -> str:
    return name.rsplit("/", 1)[-1] if name else ""


def _stream_hosts(streams: List[dict]) -> List[str]:
    """Hostnames of the web streams' default URIs."""
    hosts = []
    for raw in streams:
        web = DataStream.model_validate(raw).web_stream_data
        if web is None or not web.default_uri:
            continue
        try:
            host = hostname_of(normalize_url(web.default_uri))
        except InvalidUrlError:
            continue
        if host not in hosts:
            hosts.append(host)
    return hosts


class GA4AuditService:
    """Lists a user's GA4 properties or assembles and scores one property's audit."""

    def __init__(
        self,
        auth_service,
        admin_client,
        pii_detector: Callable = detect_pii,
        search_analyzer: Callable = analyze_search,
        traffic_analyzer: Callable = analyze_traffic,
    ):
        self.auth_service = auth_service
        self.admin = admin_client
        self.pii_detector = pii_detector
        self.search_analyzer = search_analyzer
        self.traffic_analyzer = traffic_analyzer

    def run(self, access_token: str, property_id=None) -> dict:
        user = self.auth_service.validate_token(access_token)
        token = access_token.strip()
        if property_id is None or str(property_id).strip() == "":
            return self.list_properties(token, user)
        return self.audit_property(token, parse_property_id(property_id), user)

    def list_properties(self, token: str, user) -> dict:
        properties = []
        for account in self.admin.list_account_summaries(token):
            account_name = account.get("displayName", "")
            account_id = _id_from_name(account.get("account", ""))
            for prop in account.get("propertySummaries", []) or []:
                name = prop.get("property", "")
                properties.append({
                    "name": name,
                    "propertyId": _id_from_name(name),
                    "displayName": prop.get("displayName", ""),
                    "accountName": account_name,
                    "accountId": account_id,
                })
        logger.info("Found %d GA4 properties", len(properties))
        return {"type": "property_list", "properties": properties, "userInfo": user.model_dump()}

    def _optional(self, section: str, fn: Callable[[], T], default: T) -> T:
        try:
            return fn()
        except (UpstreamApiError, HttpFetchError) as e:
            logger.warning("Could not fetch %s: %s", section, e)
            return default

    def collect(self, token: str, property_id: str) -> dict:
        """Fetch every audit section; only the property itself is required."""
        admin = self.admin
        prop = admin.get_property(token, property_id)

        streams = self._optional("data streams", lambda: admin.list_data_streams(token, property_id), [])
        enhanced = []
        for raw in streams:
            stream = DataStream.model_validate(raw)
            if not stream.is_web or not stream.stream_id:
                continue
            settings = self._optional(
                f"enhanced measurement for stream {stream.stream_id}",
                lambda: admin.get_enhanced_measurement(token, property_id, stream.stream_id),
                None,
            )
            if settings is not None:
                enhanced.append({
                    "streamId": stream.stream_id,
                    "streamName": stream.display_name,
                    "settings": settings,
                })

        page_rows = self._optional("page paths", lambda: admin.page_path_rows(token, property_id), None)
        search_events = self._optional("search events", lambda: admin.search_event_count(token, property_id), None)
        search_terms = self._optional("search terms", lambda: admin.search_term_rows(token, property_id), None)
        traffic_rows = self._optional("traffic sources", lambda: admin.traffic_source_rows(token, property_id), None)

        pii = self.pii_detector(page_rows) if page_rows is not None else None
        search = None
        if not (page_rows is None and search_events is None and search_terms is None):
            search = self.search_analyzer(search_events or 0, search_terms or [], page_rows or [])
        traffic = None
        if traffic_rows is not None:
            traffic = self.traffic_analyzer(traffic_rows, _stream_hosts(streams))
        data_quality = summarize_data_quality(pii, search, traffic)

        return {
            "property": prop,
            "dataStreams": streams,
            "keyEvents": self._optional("key events", lambda: admin.list_key_events(token, property_id), []),
            "customDimensions": self._optional(
                "custom dimensions", lambda: admin.list_custom_dimensions(token, property_id), []
            ),
            "customMetrics": self._optional(
                "custom metrics", lambda: admin.list_custom_metrics(token, property_id), []
            ),
            "enhancedMeasurement": enhanced,
            "searchConsoleDataStatus": self.search_console_status(token, property_id),
            "googleAdsLinks": self._optional(
                "Google Ads links", lambda: admin.list_google_ads_links(token, property_id), []
            ),
            "bigQueryLinks": self._optional(
                "BigQuery links", lambda: admin.list_bigquery_links(token, property_id), []
            ),
            "googleSignals": self._optional(
                "Google Signals settings", lambda: admin.get_google_signals(token, property_id), {}
            ),
            "dataRetention": self._optional(
                "data retention", lambda: admin.get_data_retention(token, property_id), {}
            ),
            "attribution": self._optional(
                "attribution settings", lambda: admin.get_attribution_settings(token, property_id), {}
            ),
            "dataFilters": self._optional("data filters", lambda: admin.list_data_filters(token, property_id), []),
            "dataQuality": data_quality,
        }

    def search_console_status(self, token: str, property_id: str) -> dict:
        try:
            clicks, impressions = self.admin.search_console_totals(token, property_id)
        except UpstreamApiError as e:
            if e.status_code not in _SEARCH_CONSOLE_UNLINKED:
                logger.warning("Could not fetch Search Console status: %s", e)
            return {"isLinked": False, "hasData": False}
        except HttpFetchError as e:
            logger.warning("Could not fetch Search Console status: %s", e)
            return {"isLinked": False, "hasData": False}
        return {
            "isLinked": True,
            "hasData": clicks + impressions > 0,
            "totalClicks": clicks,
            "totalImpressions": impressions,
            "organicImpressions": impressions,
        }

    def audit_property(self, token: str, property_id: str, user=None) -> dict:
        raw = self.collect(token, property_id)
        if user is not None:
            raw["userInfo"] = user.model_dump()
        audit = GA4Audit.parse(raw)
        report = score_audit(audit)
        logger.info("Audited property %s: score %s (%s)", property_id, report.score, report.status)
        result = {"type": "property_audit", "propertyId": property_id}
        result.update(audit.to_dict())
        result.update(report.to_dict())
        return result
