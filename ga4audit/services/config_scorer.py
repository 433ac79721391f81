"""Declarative scoring of a GA4 property configuration.

Each ScoreRule inspects the typed audit and, when it finds a problem, deducts
a fixed number of points and contributes one suggestion. `score_audit` is a
pure function of its input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from ga4audit.domain.ga4_audit import FOURTEEN_MONTHS, GA4Audit
from ga4audit.domain.score import IMPORTANCE_TIERS, ScoreReport, Suggestion

MAX_SCORE = 100

FORM_PARAMETERS = ("form_id", "form_name")
VIDEO_PARAMETERS = ("video_percent", "video_duration")


@dataclass(frozen=True)
class ScoreRule:
    id: str
    label: str
    category: str
    importance: str
    points: int
    applies: Callable[[GA4Audit], bool]
    suggestion: Union[str, Callable[[GA4Audit], str]]

    def deduction(self, audit: GA4Audit) -> int:
        return self.points if self.applies(audit) else 0

    def suggestion_text(self, audit: GA4Audit) -> str:
        if callable(self.suggestion):
            return self.suggestion(audit)
        return self.suggestion


def _form_interactions_on(audit: GA4Audit) -> bool:
    return any(em.settings.form_interactions_enabled for em in audit.enhanced_measurement)


def _video_engagement_on(audit: GA4Audit) -> bool:
    return any(em.settings.video_engagement_enabled for em in audit.enhanced_measurement)


SCORING_RULES: tuple[ScoreRule, ...] = (
    ScoreRule(
        id="timezone",
        label="Timezone configuration",
        category="propertySettings",
        importance="critical",
        points=-15,
        applies=lambda a: not a.property_settings.time_zone,
        suggestion="Set the correct timezone in Admin > Property Settings for accurate timing.",
    ),
    ScoreRule(
        id="currency",
        label="Currency configuration",
        category="propertySettings",
        importance="important",
        points=-10,
        applies=lambda a: not a.property_settings.currency_code,
        suggestion="Set the correct currency in Admin > Property Settings for accurate revenue tracking.",
    ),
    ScoreRule(
        id="industryCategory",
        label="Industry category",
        category="propertySettings",
        importance="moderate",
        points=-5,
        applies=lambda a: a.property_settings.industry_category in (None, "", "INDUSTRY_CATEGORY_UNSPECIFIED"),
        suggestion="Set the industry category in Admin > Property Settings for relevant benchmarks.",
    ),
    ScoreRule(
        id="dataRetention",
        label="Data retention settings",
        category="dataCollection",
        importance="critical",
        points=-15,
        applies=lambda a: a.data_retention.event_data_retention != FOURTEEN_MONTHS,
        suggestion="Set event data retention to 14 months for maximum data availability.",
    ),
    ScoreRule(
        id="dataStreams",
        label="Data streams setup",
        category="dataCollection",
        importance="critical",
        points=-25,
        applies=lambda a: not a.data_streams,
        suggestion="Configure at least one data stream to collect data.",
    ),
    ScoreRule(
        id="keyEvents",
        label="Key events configuration",
        category="events",
        importance="critical",
        points=-20,
        applies=lambda a: not a.key_events,
        suggestion="Configure 1-2 key events for conversion tracking.",
    ),
    ScoreRule(
        id="keyEvents",
        label="Key events configuration",
        category="events",
        importance="moderate",
        points=-10,
        applies=lambda a: len(a.key_events) > 2,
        suggestion=lambda a: (
            f"{len(a.key_events)} key events are marked; consider focusing on 1-2 primary key events."
        ),
    ),
    ScoreRule(
        id="enhancedMeasurement",
        label="Enhanced measurement",
        category="dataCollection",
        importance="important",
        points=-10,
        applies=lambda a: not a.enhanced_measurement_enabled(),
        suggestion="Enable enhanced measurement for automatic event tracking.",
    ),
    ScoreRule(
        id="customDimensions",
        label="Custom dimensions",
        category="customDefinitions",
        importance="moderate",
        points=-5,
        applies=lambda a: not a.custom_dimensions,
        suggestion="Add custom dimensions to track business-specific data.",
    ),
    ScoreRule(
        id="customMetrics",
        label="Custom metrics",
        category="customDefinitions",
        importance="optional",
        points=-5,
        applies=lambda a: not a.custom_metrics,
        suggestion="Add custom metrics to measure business-specific values.",
    ),
    ScoreRule(
        id="googleAds",
        label="Google Ads integration",
        category="integrations",
        importance="critical",
        points=-20,
        applies=lambda a: not a.google_ads_links,
        suggestion="Link Google Ads for conversion tracking and audience insights.",
    ),
    ScoreRule(
        id="searchConsole",
        label="Search Console integration",
        category="integrations",
        importance="moderate",
        points=-5,
        applies=lambda a: not (a.search_console_data_status.is_linked and a.search_console_data_status.has_data),
        suggestion=lambda a: (
            "Search Console is linked but no organic data is arriving; check the linked site and stream."
            if a.search_console_data_status.is_linked
            else "Connect Search Console for organic search performance insights."
        ),
    ),
    ScoreRule(
        id="bigQuery",
        label="BigQuery integration",
        category="integrations",
        importance="optional",
        points=-5,
        applies=lambda a: not a.big_query_links,
        suggestion="Connect BigQuery for advanced analysis and data exports (free tier available).",
    ),
    ScoreRule(
        id="attribution",
        label="Attribution model",
        category="attribution",
        importance="important",
        points=-10,
        applies=lambda a: not a.attribution.is_data_driven,
        suggestion="Switch the reporting attribution model to data-driven for fairer channel credit.",
    ),
    ScoreRule(
        id="formParameters",
        label="Form interaction parameters",
        category="customDefinitions",
        importance="important",
        points=-10,
        applies=lambda a: _form_interactions_on(a) and not a.has_custom_dimension(*FORM_PARAMETERS),
        suggestion="Register form_id and form_name as custom dimensions to report on form interactions.",
    ),
    ScoreRule(
        id="videoParameters",
        label="Video engagement parameters",
        category="customDefinitions",
        importance="optional",
        points=-5,
        applies=lambda a: _video_engagement_on(a) and not a.has_custom_dimension(*VIDEO_PARAMETERS),
        suggestion="Register video_percent and video_duration as custom dimensions to report on video engagement.",
    ),
)


def score_status(score: int) -> str:
    if score >= 90:
        return "OPTIMAL"
    if score >= 75:
        return "GOOD"
    if score >= 60:
        return "NEEDS ATTENTION"
    return "CRITICAL ISSUES"


def group_suggestions(suggestions) -> dict:
    return {tier: tuple(s for s in suggestions if s.importance == tier) for tier in IMPORTANCE_TIERS}


def score_audit(audit, rules=SCORING_RULES) -> ScoreReport:
    audit = GA4Audit.parse(audit)
    total = MAX_SCORE
    suggestions = []
    for rule in rules:
        points = rule.deduction(audit)
        if points == 0:
            continue
        total += points
        suggestions.append(
            Suggestion(
                rule_id=rule.id,
                label=rule.label,
                suggestion=rule.suggestion_text(audit),
                importance=rule.importance,
                category=rule.category,
                points=points,
            )
        )
    # sorted() is stable, so equal deductions keep table order
    ordered = tuple(sorted(suggestions, key=lambda s: s.points))
    score = max(0, min(MAX_SCORE, total))
    return ScoreReport(score=score, status=score_status(score), suggestions=ordered, groups=group_suggestions(ordered))
