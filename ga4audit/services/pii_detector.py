import re
from typing import Iterable, List, NamedTuple, Tuple

SEVERITY_WEIGHTS = {"critical": 10, "high": 5, "medium": 2}
MAX_SAMPLES_PER_TYPE = 3
SAMPLE_URL_LENGTH = 100
ADMIN_PATH = "Admin > Data Settings > Data Collection > Data redaction"


class PiiPattern(NamedTuple):
    pii_type: str
    pattern: re.Pattern
    severity: str
    description: str


def _param(names: str, value: str) -> re.Pattern:
    return re.compile(r"(?:[?&]|^)([^=&?]*(?:" + names + r")[^=&?]*)=(" + value + r")", re.IGNORECASE)


PII_PATTERNS: Tuple[PiiPattern, ...] = (
    PiiPattern("email", _param(r"email|e-?mail|user-?email", r"[^&]*@[^&]*"), "critical",
               "Email addresses in URL parameters"),
    PiiPattern("phone", _param(
        r"phone|tel|mobile|cell",
        r"[^&]*(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}[^&]*",
    ), "critical", "Phone numbers in URL parameters"),
    PiiPattern("ssn", _param(r"ssn|social|security", r"[^&]*\d{3}-?\d{2}-?\d{4}[^&]*"), "critical",
               "Social Security Numbers in URL parameters"),
    PiiPattern("creditCard", _param(
        r"card|cc|credit",
        r"[^&]*(?:4\d{3}|5[1-5]\d{2}|3[47]\d{2}|6011)[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}[^&]*",
    ), "critical", "Credit card numbers in URL parameters"),
    PiiPattern("userId", _param(r"user[-_]?id|customer[-_]?id|member[-_]?id|uid", r"[^&]*\d+[^&]*"), "high",
               "User/Customer IDs in URL parameters"),
    PiiPattern("names", _param(r"first[-_]?name|last[-_]?name|full[-_]?name|fname|lname|name", r"[^&]{2,}"),
               "high", "Personal names in URL parameters"),
    PiiPattern("addresses", _param(r"address|street|zip|postal|city", r"[^&]{5,}"), "medium",
               "Address information in URL parameters"),
)


def _truncate(url: str) -> str:
    return url[:SAMPLE_URL_LENGTH] + "..." if len(url) > SAMPLE_URL_LENGTH else url


def detect_pii(rows: Iterable[Tuple[str, int]], patterns: Tuple[PiiPattern, ...] = PII_PATTERNS) -> dict:
    """Scan (page path + query string, page views) rows for personal data in URL parameters.

    Findings record the parameter name and URL; matched values are not copied
    into the result.
    """
    findings: dict = {"critical": [], "high": [], "medium": []}
    samples: dict = {}
    checked = 0
    affected = 0
    affected_views = 0

    for url, views in rows:
        checked += 1
        url_has_pii = False
        for p in patterns:
            matches = p.pattern.findall(url)
            if not matches:
                continue
            url_has_pii = True
            for parameter, _value in matches:
                findings[p.severity].append({
                    "type": p.pii_type,
                    "parameter": parameter,
                    "url": _truncate(url),
                    "pageViews": views,
                    "description": p.description,
                })
            bucket: List[dict] = samples.setdefault(p.pii_type, [])
            if len(bucket) < MAX_SAMPLES_PER_TYPE:
                bucket.append({"url": _truncate(url), "pageViews": views})
        if url_has_pii:
            affected += 1
            affected_views += views

    severity_score = sum(len(findings[s]) * w for s, w in SEVERITY_WEIGHTS.items())
    severity = next((s for s in ("critical", "high", "medium") if findings[s]), "none")
    instances = sum(len(v) for v in findings.values())
    if severity_score > 0:
        recommendation = (
            "URGENT: Configure data redaction in Admin > Data Settings > Data Collection. "
            f"Found {instances} PII instances across {affected} URLs."
        )
    else:
        recommendation = "No PII detected in URL parameters."

    return {
        "hasPII": severity != "none",
        "severity": severity,
        "severityScore": severity_score,
        "totalUrlsChecked": checked,
        "totalAffectedUrls": affected,
        "totalPageViews": affected_views,
        "findings": findings,
        "sampleUrls": samples,
        "recommendation": recommendation,
        "adminPath": ADMIN_PATH,
    }
