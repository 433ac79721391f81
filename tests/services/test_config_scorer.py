from ga4audit.domain.ga4_audit import GA4Audit
from ga4audit.services.config_scorer import SCORING_RULES, ScoreRule, score_audit, score_status


def _well_configured():
    return {
        "property": {"timeZone": "Europe/Amsterdam", "currencyCode": "EUR", "industryCategory": "SHOPPING"},
        "dataStreams": [{"name": "properties/1/dataStreams/2", "type": "WEB_DATA_STREAM"}],
        "keyEvents": [{"eventName": "purchase"}],
        "enhancedMeasurement": [{"streamId": "2", "settings": {
            "streamEnabled": True, "formInteractionsEnabled": True, "videoEngagementEnabled": True,
        }}],
        "customDimensions": [
            {"parameterName": "form_id"}, {"parameterName": "video_percent"},
        ],
        "customMetrics": [{"parameterName": "order_margin"}],
        "googleAdsLinks": [{"customerId": "123"}],
        "searchConsoleDataStatus": {"isLinked": True, "hasData": True},
        "bigQueryLinks": [{"project": "projects/1"}],
        "dataRetention": {"eventDataRetention": "FOURTEEN_MONTHS"},
        "attribution": {"reportingAttributionModel": "PAID_AND_ORGANIC_CHANNELS_DATA_DRIVEN"},
    }


def test_well_configured_property_scores_100():
    report = score_audit(_well_configured())
    assert report.score == 100
    assert report.status == "OPTIMAL"
    assert report.suggestions == ()


def test_missing_key_events_retention_and_ads_scenario():
    audit = _well_configured()
    audit["keyEvents"] = []
    audit["dataRetention"] = {"eventDataRetention": "TWO_MONTHS"}
    audit["googleAdsLinks"] = []
    report = score_audit(audit)

    assert report.score <= 45
    ids = {s.rule_id for s in report.suggestions}
    assert {"keyEvents", "dataRetention", "googleAds"} <= ids
    assert all(s.importance == "critical" for s in report.suggestions)
    assert len(report.groups["critical"]) == 3


def test_empty_audit_clamps_to_zero():
    report = score_audit({})
    assert report.score == 0
    assert report.status == "CRITICAL ISSUES"
    assert sum(s.points for s in report.suggestions) < -100


def test_score_never_exceeds_bounds_with_custom_rules():
    bonus = ScoreRule(id="x", label="x", category="c", importance="optional", points=-500,
                      applies=lambda a: True, suggestion="x")
    assert score_audit({}, rules=(bonus,)).score == 0
    assert score_audit(_well_configured(), rules=()).score == 100


def test_scoring_is_deterministic():
    audit = GA4Audit.parse({"keyEvents": [{"eventName": "a"}, {"eventName": "b"}, {"eventName": "c"}]})
    assert score_audit(audit) == score_audit(audit)


def test_suggestions_sorted_worst_first_and_stable():
    report = score_audit({})
    points = [s.points for s in report.suggestions]
    assert points == sorted(points)
    assert report.suggestions[0].rule_id == "dataStreams"
    five_pointers = [s.rule_id for s in report.suggestions if s.points == -5]
    assert five_pointers == ["industryCategory", "customDimensions", "customMetrics", "searchConsole", "bigQuery"]


def test_too_many_key_events_uses_moderate_rule():
    audit = _well_configured()
    audit["keyEvents"] = [{"eventName": n} for n in ("purchase", "sign_up", "lead", "call")]
    report = score_audit(audit)
    assert report.score == 90
    (suggestion,) = report.suggestions
    assert suggestion.importance == "moderate"
    assert "4 key events" in suggestion.suggestion


def test_search_console_linked_without_data():
    audit = _well_configured()
    audit["searchConsoleDataStatus"] = {"isLinked": True, "hasData": False}
    (suggestion,) = score_audit(audit).suggestions
    assert suggestion.rule_id == "searchConsole"
    assert "no organic data" in suggestion.suggestion


def test_form_and_video_parameters_only_checked_when_enabled():
    audit = _well_configured()
    audit["customDimensions"] = [{"parameterName": "plan"}]
    ids = [s.rule_id for s in score_audit(audit).suggestions]
    assert "formParameters" in ids and "videoParameters" in ids

    audit["enhancedMeasurement"] = [{"streamId": "2", "settings": {"streamEnabled": True}}]
    ids = [s.rule_id for s in score_audit(audit).suggestions]
    assert "formParameters" not in ids and "videoParameters" not in ids


def test_groups_cover_every_tier():
    groups = score_audit({}).to_dict()["suggestionGroups"]
    assert list(groups) == ["critical", "important", "moderate", "optional"]


def test_score_status_thresholds():
    assert score_status(90) == "OPTIMAL"
    assert score_status(75) == "GOOD"
    assert score_status(60) == "NEEDS ATTENTION"
    assert score_status(59) == "CRITICAL ISSUES"


def test_rule_table_points_are_deductions():
    assert all(rule.points < 0 for rule in SCORING_RULES)
