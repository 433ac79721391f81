"""Combines the PII, site search and traffic source analyses into one data quality verdict."""
from typing import Optional, Tuple

from ga4audit.services.search_analyzer import STATUS_MISSED_OPPORTUNITY, STATUS_NEEDS_CONFIG

PII_PENALTIES = {"critical": 25, "high": 15}
PII_OTHER_PENALTY = 5
UNWANTED_REFERRAL_PENALTY = 20
CROSS_DOMAIN_PENALTY = 10
SEARCH_PENALTIES = {STATUS_MISSED_OPPORTUNITY: 10, STATUS_NEEDS_CONFIG: 15}


def _detected(traffic: Optional[dict], key: str) -> bool:
    return bool(traffic and traffic.get(key, {}).get("detected"))


def data_quality_score(
    pii: Optional[dict] = None,
    search: Optional[dict] = None,
    traffic: Optional[dict] = None,
) -> Tuple[int, int, int]:
    """Return (score, critical issues, warnings); analyses that could not run count as clean."""
    score = 100
    critical = warnings = 0

    if pii and pii.get("hasPII"):
        severity = pii.get("severity")
        score -= PII_PENALTIES.get(severity, PII_OTHER_PENALTY)
        if severity == "critical":
            critical += 1
        elif severity == "high":
            warnings += 1

    if _detected(traffic, "unwantedReferrals"):
        score -= UNWANTED_REFERRAL_PENALTY
        critical += 1
    if _detected(traffic, "crossDomainIssues"):
        score -= CROSS_DOMAIN_PENALTY
        warnings += 1

    if search and search.get("status") in SEARCH_PENALTIES:
        score -= SEARCH_PENALTIES[search["status"]]
        warnings += 1

    return max(0, score), critical, warnings


def summarize_data_quality(
    pii: Optional[dict] = None,
    search: Optional[dict] = None,
    traffic: Optional[dict] = None,
) -> dict:
    score, critical, warnings = data_quality_score(pii, search, traffic)
    if critical:
        summary = {"status": "critical", "message": f"{critical} critical data quality issue(s) found"}
    elif warnings:
        summary = {"status": "warning", "message": f"{warnings} data quality warning(s) found"}
    else:
        summary = {"status": "good", "message": "Data quality checks passed"}

    result = {"dataQualityScore": score, "criticalIssues": critical, "warnings": warnings, "summary": summary}
    for key, analysis in (("piiAnalysis", pii), ("searchAnalysis", search), ("trafficAnalysis", traffic)):
        if analysis is not None:
            result[key] = analysis
    return result
