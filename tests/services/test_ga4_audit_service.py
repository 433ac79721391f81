import json
from unittest.mock import Mock

import pytest

from ga4audit.domain.ga4_audit import UserInfo
from ga4audit.exceptions import InvalidInputError, UpstreamApiError
from ga4audit.services.ga4_admin_client import GA4AdminClient
from ga4audit.services.ga4_audit_service import GA4AuditService, parse_property_id
from ga4audit.services.google_api_service import GoogleApiService
from ga4audit.services.google_auth_service import GoogleAuthService


def _auth():
    auth = Mock()
    auth.validate_token.return_value = UserInfo(email="owner@example.com", name="Owner")
    return auth


def _admin():
    admin = Mock()
    admin.get_property.return_value = {
        "name": "properties/123", "displayName": "Shop", "timeZone": "UTC", "currencyCode": "USD",
    }
    admin.list_data_streams.return_value = [
        {"name": "properties/123/dataStreams/77", "type": "WEB_DATA_STREAM", "displayName": "Web",
         "webStreamData": {"defaultUri": "https://www.shop.test"}},
        {"name": "properties/123/dataStreams/78", "type": "IOS_APP_DATA_STREAM", "displayName": "iOS"},
    ]
    admin.get_enhanced_measurement.return_value = {"streamEnabled": True}
    admin.list_key_events.return_value = []
    admin.list_custom_dimensions.return_value = []
    admin.list_custom_metrics.return_value = []
    admin.list_google_ads_links.return_value = []
    admin.list_bigquery_links.return_value = []
    admin.get_google_signals.return_value = {"state": "GOOGLE_SIGNALS_ENABLED"}
    admin.get_data_retention.return_value = {"eventDataRetention": "TWO_MONTHS"}
    admin.get_attribution_settings.return_value = {"reportingAttributionModel": "CROSS_CHANNEL_DATA_DRIVEN"}
    admin.list_data_filters.return_value = []
    admin.search_console_totals.return_value = (10, 200)
    admin.page_path_rows.return_value = [("/a?email=a@b.co", 3)]
    admin.search_event_count.return_value = 0
    admin.search_term_rows.return_value = []
    admin.traffic_source_rows.return_value = [
        {"source": "paypal.com", "medium": "referral", "sessions": 4, "bounceRate": 0.4, "avgSessionDuration": 20.0},
        {"source": "checkout.shop.test", "medium": "referral", "sessions": 9, "bounceRate": 0.3,
         "avgSessionDuration": 80.0},
        {"source": "google", "medium": "organic", "sessions": 90, "bounceRate": 0.5, "avgSessionDuration": 60.0},
    ]
    return admin


@pytest.mark.parametrize("raw, expected", [("123", "123"), (123, "123"), ("properties/456", "456"), (" 7 ", "7")])
def test_parse_property_id(raw, expected):
    assert parse_property_id(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "properties/", "12a", None])
def test_parse_property_id_rejects_garbage(raw):
    with pytest.raises(InvalidInputError):
        parse_property_id(raw)


def test_without_property_id_lists_properties():
    admin = Mock()
    admin.list_account_summaries.return_value = [{
        "account": "accounts/9", "displayName": "Acme",
        "propertySummaries": [
            {"property": "properties/1", "displayName": "Acme Web"},
            {"property": "properties/2", "displayName": "Acme App"},
        ],
    }, {"account": "accounts/10", "displayName": "Empty"}]
    result = GA4AuditService(_auth(), admin).run("tok")

    assert result["type"] == "property_list"
    assert result["properties"][1] == {
        "name": "properties/2", "propertyId": "2", "displayName": "Acme App",
        "accountName": "Acme", "accountId": "9",
    }
    assert result["userInfo"]["email"] == "owner@example.com"


def test_property_audit_is_assembled_and_scored():
    admin = _admin()
    result = GA4AuditService(_auth(), admin).run("tok", "properties/123")

    assert result["type"] == "property_audit"
    assert result["propertyId"] == "123"
    assert result["property"]["displayName"] == "Shop"
    assert result["enhancedMeasurement"][0]["streamId"] == "77"
    admin.get_enhanced_measurement.assert_called_once_with("tok", "123", "77")
    assert result["searchConsoleDataStatus"]["isLinked"] is True
    assert result["searchConsoleDataStatus"]["hasData"] is True
    assert result["dataQuality"]["piiAnalysis"]["hasPII"] is True
    ids = {s["id"] for s in result["suggestions"]}
    assert {"keyEvents", "dataRetention", "googleAds"} <= ids
    assert "attribution" not in ids
    assert 0 <= result["configScore"] <= 100
    assert result["scoreStatus"]


def test_failed_optional_section_reads_as_not_configured():
    admin = _admin()
    admin.list_google_ads_links.side_effect = UpstreamApiError("GA4 Admin API", 403, "denied")
    admin.page_path_rows.side_effect = UpstreamApiError("GA4 Data API", 500)
    result = GA4AuditService(_auth(), admin).run("tok", "123")
    assert result["googleAdsLinks"] == []
    assert "piiAnalysis" not in result["dataQuality"]


def test_search_console_unlinked_on_400():
    admin = _admin()
    admin.search_console_totals.side_effect = UpstreamApiError("GA4 Data API", 400, "incompatible")
    result = GA4AuditService(_auth(), admin).run("tok", "123")
    assert result["searchConsoleDataStatus"]["isLinked"] is False
    assert "searchConsole" in {s["id"] for s in result["suggestions"]}


def test_property_fetch_failure_propagates():
    admin = _admin()
    admin.get_property.side_effect = UpstreamApiError("GA4 Admin API", 404, "not found")
    with pytest.raises(UpstreamApiError):
        GA4AuditService(_auth(), admin).run("tok", "123")


def test_invalid_token_stops_before_admin_calls():
    auth = Mock()
    auth.validate_token.side_effect = UpstreamApiError("Google OAuth", 401)
    admin = _admin()
    with pytest.raises(UpstreamApiError):
        GA4AuditService(auth, admin).run("bad", "123")
    admin.get_property.assert_not_called()


def test_data_quality_combines_all_analyses():
    result = GA4AuditService(_auth(), _admin()).run("tok", "123")
    quality = result["dataQuality"]

    assert quality["piiAnalysis"]["severity"] == "critical"
    assert quality["searchAnalysis"]["status"] == "none"
    traffic = quality["trafficAnalysis"]
    assert [s["source"] for s in traffic["unwantedReferrals"]["sources"]] == ["paypal.com"]
    # the web stream's own host shows up as a referral
    assert [s["source"] for s in traffic["crossDomainIssues"]["sources"]] == ["checkout.shop.test"]
    assert quality["dataQualityScore"] == 100 - 25 - 20 - 10
    assert quality["criticalIssues"] == 2
    assert quality["warnings"] == 1
    assert quality["summary"]["status"] == "critical"


def test_failed_data_quality_reports_are_left_out():
    admin = _admin()
    admin.traffic_source_rows.side_effect = UpstreamApiError("GA4 Data API", 429)
    admin.search_event_count.side_effect = UpstreamApiError("GA4 Data API", 500)
    result = GA4AuditService(_auth(), admin).run("tok", "123")
    quality = result["dataQuality"]
    assert "trafficAnalysis" not in quality
    assert quality["searchAnalysis"]["hasSearchEvents"] is False
    assert quality["dataQualityScore"] == 75


class _Response:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)


def test_non_json_optional_section_reads_as_not_configured():
    def transport(method, url, **kwargs):
        if "googleAdsLinks" in url:
            return _Response(200, "<html>gateway hiccup</html>")
        if url.endswith("/userinfo"):
            return _Response(200, json.dumps({"email": "owner@example.com"}))
        if url.endswith("/properties/1"):
            return _Response(200, json.dumps({"name": "properties/1", "displayName": "Site"}))
        return _Response(200, "{}")

    api = GoogleApiService(transport, user_agent="TestAgent")
    service = GA4AuditService(GoogleAuthService(api), GA4AdminClient(api))
    result = service.run("tok", "1")

    assert result["googleAdsLinks"] == []
    assert result["property"]["displayName"] == "Site"
    assert "googleAds" in {s["id"] for s in result["suggestions"]}
