from unittest.mock import Mock

from ga4audit.services.ga4_admin_client import ADMIN_V1ALPHA, ADMIN_V1BETA, DATA_V1BETA, GA4AdminClient


def test_list_endpoints_page_through_results():
    api = Mock()
    api.iter_pages.return_value = iter([{"eventName": "purchase"}])
    client = GA4AdminClient(api)
    assert client.list_key_events("tok", "123") == [{"eventName": "purchase"}]
    args, kwargs = api.iter_pages.call_args
    assert args == (f"{ADMIN_V1BETA}/properties/123/keyEvents", "tok", "keyEvents")
    assert kwargs["params"] == {"pageSize": 200}


def test_bigquery_links_use_alpha_api():
    api = Mock()
    api.iter_pages.return_value = iter([])
    GA4AdminClient(api).list_bigquery_links("tok", "123")
    assert api.iter_pages.call_args.args[0] == f"{ADMIN_V1ALPHA}/properties/123/bigQueryLinks"
    assert api.iter_pages.call_args.args[2] == "bigqueryLinks"


def test_enhanced_measurement_path():
    api = Mock()
    api.get_json.return_value = {"streamEnabled": True}
    assert GA4AdminClient(api).get_enhanced_measurement("tok", "1", "55") == {"streamEnabled": True}
    assert api.get_json.call_args.args[0] == (
        f"{ADMIN_V1ALPHA}/properties/1/dataStreams/55/enhancedMeasurementSettings"
    )


def test_search_console_totals_sums_rows():
    api = Mock()
    api.post_json.return_value = {"rows": [{"metricValues": [{"value": "12"}, {"value": "340"}]}]}
    assert GA4AdminClient(api).search_console_totals("tok", "9") == (12, 340)
    assert api.post_json.call_args.args[0] == f"{DATA_V1BETA}/properties/9:runReport"


def test_search_console_totals_without_rows():
    api = Mock()
    api.post_json.return_value = {}
    assert GA4AdminClient(api).search_console_totals("tok", "9") == (0, 0)


def test_page_path_rows():
    api = Mock()
    api.post_json.return_value = {"rows": [
        {"dimensionValues": [{"value": "/a?email=x@y.z"}], "metricValues": [{"value": "7"}]},
        {"dimensionValues": [{"value": "/b"}], "metricValues": [{"value": "3"}]},
    ]}
    rows = GA4AdminClient(api).page_path_rows("tok", "9")
    assert rows == [("/a?email=x@y.z", 7), ("/b", 3)]
    body = api.post_json.call_args.args[2]
    assert body["dimensions"] == [{"name": "pagePathPlusQueryString"}]
    assert body["limit"] == 1000


def test_search_console_totals_tolerates_missing_values():
    api = Mock()
    api.post_json.return_value = {"rows": [
        {"metricValues": [{}, {"value": "40"}]},
        {"metricValues": [{"value": "3"}]},
        {},
    ]}
    assert GA4AdminClient(api).search_console_totals("tok", "9") == (3, 40)


def test_search_event_count_filters_on_search_event():
    api = Mock()
    api.post_json.return_value = {"rows": [
        {"dimensionValues": [{"value": "view_search_results"}], "metricValues": [{"value": "57"}]},
    ]}
    assert GA4AdminClient(api).search_event_count("tok", "9") == 57
    body = api.post_json.call_args.args[2]
    assert body["dimensionFilter"]["filter"]["stringFilter"]["value"] == "view_search_results"


def test_search_event_count_without_rows():
    api = Mock()
    api.post_json.return_value = {}
    assert GA4AdminClient(api).search_event_count("tok", "9") == 0


def test_search_term_rows():
    api = Mock()
    api.post_json.return_value = {"rows": [
        {"dimensionValues": [{"value": "boots"}], "metricValues": [{"value": "12"}]},
    ]}
    assert GA4AdminClient(api).search_term_rows("tok", "9") == [("boots", 12)]
    body = api.post_json.call_args.args[2]
    assert body["dimensions"] == [{"name": "searchTerm"}]
    assert body["limit"] == 100


def test_traffic_source_rows():
    api = Mock()
    api.post_json.return_value = {"rows": [{
        "dimensionValues": [{"value": "paypal.com"}, {"value": "referral"}],
        "metricValues": [{"value": "14"}, {"value": "0.25"}, {"value": "61.5"}],
    }]}
    assert GA4AdminClient(api).traffic_source_rows("tok", "9") == [{
        "source": "paypal.com",
        "medium": "referral",
        "sessions": 14,
        "bounceRate": 0.25,
        "avgSessionDuration": 61.5,
    }]
    body = api.post_json.call_args.args[2]
    assert body["orderBys"] == [{"metric": {"metricName": "sessions"}, "desc": True}]
