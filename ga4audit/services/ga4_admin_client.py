"""GA4 Admin API (v1beta / v1alpha) and Data API calls used by the property audit."""
from typing import Callable, List, Sequence, Tuple

ADMIN_V1BETA = "https://analyticsadmin.googleapis.com/v1beta"
ADMIN_V1ALPHA = "https://analyticsadmin.googleapis.com/v1alpha"
DATA_V1BETA = "https://analyticsdata.googleapis.com/v1beta"

ADMIN_SERVICE = "GA4 Admin API"
DATA_SERVICE = "GA4 Data API"

PAGE_SIZE = 200
PAGE_ROW_LIMIT = 1000
SEARCH_TERM_LIMIT = 100
TRAFFIC_SOURCE_LIMIT = 100
SEARCH_EVENT = "view_search_results"


def _dimension(values: Sequence[dict], index: int) -> str:
    if len(values) <= index:
        return ""
    return values[index].get("value", "") or ""


def _metric(values: Sequence[dict], index: int, cast: Callable = int):
    """Metric `index` of a report row; missing or unparsable values read as 0."""
    if len(values) <= index:
        return cast(0)
    try:
        return cast(float(values[index].get("value", 0) or 0))
    except (TypeError, ValueError):
        return cast(0)


class GA4AdminClient:
    def __init__(self, api_service):
        self.api = api_service

    def _list(self, url: str, token: str, items_key: str) -> List[dict]:
        return list(self.api.iter_pages(url, token, items_key, params={"pageSize": PAGE_SIZE}, service=ADMIN_SERVICE))

    def _get(self, url: str, token: str) -> dict:
        return self.api.get_json(url, token, service=ADMIN_SERVICE)

    def list_account_summaries(self, token: str) -> List[dict]:
        return self._list(f"{ADMIN_V1BETA}/accountSummaries", token, "accountSummaries")

    def get_property(self, token: str, property_id: str) -> dict:
        return self._get(f"{ADMIN_V1BETA}/properties/{property_id}", token)

    def list_data_streams(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1BETA}/properties/{property_id}/dataStreams", token, "dataStreams")

    def list_key_events(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1BETA}/properties/{property_id}/keyEvents", token, "keyEvents")

    def list_custom_dimensions(self, token: str, property_id: str) -> List[dict]:
        return self._list(
            f"{ADMIN_V1BETA}/properties/{property_id}/customDimensions", token, "customDimensions"
        )

    def list_custom_metrics(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1BETA}/properties/{property_id}/customMetrics", token, "customMetrics")

    def list_google_ads_links(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1BETA}/properties/{property_id}/googleAdsLinks", token, "googleAdsLinks")

    def get_data_retention(self, token: str, property_id: str) -> dict:
        return self._get(f"{ADMIN_V1BETA}/properties/{property_id}/dataRetentionSettings", token)

    def list_bigquery_links(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1ALPHA}/properties/{property_id}/bigQueryLinks", token, "bigqueryLinks")

    def get_attribution_settings(self, token: str, property_id: str) -> dict:
        return self._get(f"{ADMIN_V1ALPHA}/properties/{property_id}/attributionSettings", token)

    def get_google_signals(self, token: str, property_id: str) -> dict:
        return self._get(f"{ADMIN_V1ALPHA}/properties/{property_id}/googleSignalsSettings", token)

    def list_data_filters(self, token: str, property_id: str) -> List[dict]:
        return self._list(f"{ADMIN_V1ALPHA}/properties/{property_id}/dataFilters", token, "dataFilters")

    def get_enhanced_measurement(self, token: str, property_id: str, stream_id: str) -> dict:
        return self._get(
            f"{ADMIN_V1ALPHA}/properties/{property_id}/dataStreams/{stream_id}/enhancedMeasurementSettings",
            token,
        )

    def run_report(self, token: str, property_id: str, body: dict) -> dict:
        return self.api.post_json(
            f"{DATA_V1BETA}/properties/{property_id}:runReport", token, body, service=DATA_SERVICE
        )

    def _rows(self, token: str, property_id: str, body: dict) -> List[dict]:
        return self.run_report(token, property_id, body).get("rows", []) or []

    def search_console_totals(self, token: str, property_id: str) -> Tuple[int, int]:
        """Organic Google Search clicks and impressions over the last 28 days.

        The Data API rejects these metrics with HTTP 400 when no Search
        Console link exists.
        """
        rows = self._rows(token, property_id, {
            "dateRanges": [{"startDate": "28daysAgo", "endDate": "yesterday"}],
            "metrics": [{"name": "organicGoogleSearchClicks"}, {"name": "organicGoogleSearchImpressions"}],
        })
        clicks = impressions = 0
        for row in rows:
            values = row.get("metricValues") or []
            clicks += _metric(values, 0)
            impressions += _metric(values, 1)
        return clicks, impressions

    def page_path_rows(self, token: str, property_id: str) -> List[Tuple[str, int]]:
        """(page path + query string, page views) for the most viewed URLs of the last 30 days."""
        rows = self._rows(token, property_id, {
            "dimensions": [{"name": "pagePathPlusQueryString"}],
            "metrics": [{"name": "screenPageViews"}],
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "limit": PAGE_ROW_LIMIT,
            "orderBys": [{"metric": {"metricName": "screenPageViews"}, "desc": True}],
        })
        return [
            (_dimension(row.get("dimensionValues") or [], 0), _metric(row.get("metricValues") or [], 0))
            for row in rows
        ]

    def search_event_count(self, token: str, property_id: str) -> int:
        """Number of view_search_results events over the last 30 days."""
        rows = self._rows(token, property_id, {
            "dimensions": [{"name": "eventName"}],
            "metrics": [{"name": "eventCount"}],
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "dimensionFilter": {"filter": {
                "fieldName": "eventName",
                "stringFilter": {"value": SEARCH_EVENT, "matchType": "EXACT"},
            }},
        })
        return sum(_metric(row.get("metricValues") or [], 0) for row in rows)

    def search_term_rows(self, token: str, property_id: str) -> List[Tuple[str, int]]:
        """(search term, users) captured by site search tracking over the last 30 days."""
        rows = self._rows(token, property_id, {
            "dimensions": [{"name": "searchTerm"}],
            "metrics": [{"name": "totalUsers"}],
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "limit": SEARCH_TERM_LIMIT,
        })
        return [
            (_dimension(row.get("dimensionValues") or [], 0), _metric(row.get("metricValues") or [], 0))
            for row in rows
        ]

    def traffic_source_rows(self, token: str, property_id: str) -> List[dict]:
        """Session source/medium breakdown for the last 30 days, busiest first."""
        rows = self._rows(token, property_id, {
            "dimensions": [{"name": "sessionSource"}, {"name": "sessionMedium"}],
            "metrics": [{"name": "sessions"}, {"name": "bounceRate"}, {"name": "averageSessionDuration"}],
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "orderBys": [{"metric": {"metricName": "sessions"}, "desc": True}],
            "limit": TRAFFIC_SOURCE_LIMIT,
        })
        sources = []
        for row in rows:
            dims = row.get("dimensionValues") or []
            values = row.get("metricValues") or []
            sources.append({
                "source": _dimension(dims, 0),
                "medium": _dimension(dims, 1),
                "sessions": _metric(values, 0),
                "bounceRate": _metric(values, 1, float),
                "avgSessionDuration": _metric(values, 2, float),
            })
        return sources
