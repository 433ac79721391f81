import logging
import re
from typing import Dict, List

from ga4audit.exceptions import UpstreamApiError
from ga4audit.services.url_normalizer import normalize_url

logger = logging.getLogger(__name__)

ECOMMERCE_EVENTS = ("purchase", "add_to_cart", "view_item", "begin_checkout")
_LINKER_DOMAINS_RE = re.compile(r"""['"]domains['"]?\s*:\s*\[([^\]]*)\]""")
_QUOTED_RE = re.compile(r"""['"]([^'"]+)['"]""")

STATUS_COMPLETE = "complete"
STATUS_INCOMPLETE = "incomplete"


def _item(done: bool, value: str, recommendation: str) -> dict:
    return {
        "status": STATUS_COMPLETE if done else STATUS_INCOMPLETE,
        "value": value,
        "recommendation": recommendation,
    }


def _linker_domains(html: str) -> List[str]:
    domains: List[str] = []
    for block in _LINKER_DOMAINS_RE.findall(html):
        for d in _QUOTED_RE.findall(block):
            if d not in domains:
                domains.append(d)
    return domains


class PageAnalyzer:
    """Single-page tag analysis with a flat configuration checklist."""

    def __init__(self, fetcher_factory, tag_detector):
        self.fetcher_factory = fetcher_factory
        self.tag_detector = tag_detector

    def analyze(self, url: str) -> dict:
        target = normalize_url(url)
        fetcher = self.fetcher_factory.default()
        response = fetcher.fetch(target)
        if not response.ok:
            raise UpstreamApiError(fetcher.method, response.status_code, response.text[:500] or None)

        html = response.text or ""
        signals = self.tag_detector.detect(html)
        checks = self.run_checks(html)
        cross_domain = {"enabled": checks["cross_domain"], "domains": _linker_domains(html)}
        logger.info(
            "Analyzed %s: %d GTM container(s), ga4=%s",
            target, len(signals.gtm_containers), signals.ga4_detection,
        )
        return {
            "domain": target,
            "gtmContainers": list(signals.gtm_containers),
            "ga4Properties": list(signals.ga4_properties),
            "ga4Detection": signals.ga4_detection,
            "ga4Confidence": signals.ga4_confidence,
            "currentSetup": {
                "gtmInstalled": signals.gtm_found,
                "ga4Connected": signals.ga4_found,
                "enhancedEcommerce": checks["ecommerce"],
                "serverSideTracking": False,
                "crossDomainTracking": cross_domain,
                "consentMode": checks["consent_mode"],
                "debugMode": checks["debug_mode"],
            },
            "configurationAudit": self.configuration_audit(checks),
            "recommendations": self.recommendations(signals, checks),
            "analysisMethod": fetcher.method,
        }

    def run_checks(self, html: str) -> Dict[str, bool]:
        return {
            "consent_mode": "consent" in html or "ad_storage" in html,
            "cross_domain": "linker" in html or "cross_domain" in html,
            "google_ads": "AW-" in html,
            "debug_mode": "debug_mode" in html,
            "ecommerce": any(e in html for e in ECOMMERCE_EVENTS),
            "user_id": "user_id" in html,
        }

    def configuration_audit(self, checks: Dict[str, bool]) -> dict:
        # property-level settings are not visible in page HTML
        return {
            "propertySettings": {
                "timezone": _item(False, "Not visible from page", "Set to business timezone"),
                "currency": _item(False, "Not visible from page", "Set to business currency"),
            },
            "dataCollection": {
                "consentMode": _item(
                    checks["consent_mode"],
                    "Detected" if checks["consent_mode"] else "Not detected",
                    "Implement Consent Mode v2",
                ),
                "crossDomain": _item(
                    checks["cross_domain"],
                    "Configured" if checks["cross_domain"] else "Not configured",
                    "Configure cross-domain tracking",
                ),
                "userId": _item(
                    checks["user_id"],
                    "Sent" if checks["user_id"] else "Not sent",
                    "Send user_id for signed-in users",
                ),
                "debugMode": _item(
                    not checks["debug_mode"],
                    "Enabled" if checks["debug_mode"] else "Disabled",
                    "Keep debug_mode off in production",
                ),
            },
            "events": {
                "ecommerceEvents": _item(
                    checks["ecommerce"],
                    "Detected" if checks["ecommerce"] else "Not detected",
                    "Track view_item, add_to_cart and purchase",
                ),
                "keyEvents": _item(False, "Not visible from page", "Mark 1-2 primary key events"),
            },
            "integrations": {
                "googleAds": _item(
                    checks["google_ads"],
                    "Tag detected" if checks["google_ads"] else "Not detected",
                    "Link Google Ads for conversion tracking",
                ),
                "searchConsole": _item(False, "Not visible from page", "Link for organic search data"),
                "bigQuery": _item(False, "Not visible from page", "Consider for advanced analysis"),
            },
        }

    def recommendations(self, signals, checks: Dict[str, bool]) -> List[str]:
        recs = []
        if not signals.gtm_found:
            recs.append("Install Google Tag Manager container")
        if not signals.ga4_found:
            recs.append("Configure Google Analytics 4 property")
        elif not signals.ga4_properties:
            recs.append("Verify the GA4 configuration tag in GTM; no measurement ID is visible in the page")
        if not checks["cross_domain"]:
            recs.append("Set up cross-domain tracking if needed")
        if not checks["consent_mode"]:
            recs.append("Implement Consent Mode v2 for privacy compliance")
        if checks["debug_mode"]:
            recs.append("Disable debug mode in production")
        if not checks["ecommerce"]:
            recs.append("Enable Enhanced Ecommerce tracking")
        return recs
