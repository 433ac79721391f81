from typing import Iterable, List, Sequence

REFERRAL = "referral"
TOP_REFERRALS = 10

PAYMENT_PROCESSORS = (
    "paypal.com", "stripe.com", "square.com", "checkout.com",
    "authorize.net", "braintreepayments.com", "dwolla.com",
    "affirm.com", "klarna.com", "afterpay.com", "sezzle.com",
    "shop.app", "shopify.com", "amazon.com", "ebay.com",
)

# Used only when the property's own hosts are unknown.
SELF_REFERRAL_PREFIXES = ("www.", "shop.", "blog.", "app.", "portal.")
SELF_REFERRAL_MAX_BOUNCE = 0.1
SELF_REFERRAL_MIN_SESSIONS = 5

ADMIN_PATHS = {
    "referralExclusions": "Admin > Data Settings > Data Collection > Configure tag settings > Unwanted referrals",
    "crossDomainSetup": "Admin > Data Streams > [Stream] > Configure tag settings > Cross-domain tracking",
}


def _bare(host: str) -> str:
    host = host.strip().lower()
    return host[4:] if host.startswith("www.") else host


def _belongs_to(source: str, domain: str) -> bool:
    source = _bare(source)
    return source == domain or source.endswith("." + domain)


def is_payment_processor(source: str) -> bool:
    return any(_belongs_to(source, processor) for processor in PAYMENT_PROCESSORS)


def is_self_referral(row: dict, own_domains: Sequence[str]) -> bool:
    """Whether a referral row looks like the site referring to itself.

    With known hosts (web stream URIs) only those and their subdomains count;
    without them, subdomain prefixes and near-zero bounce rates are the signal.
    """
    source = row.get("source", "")
    if own_domains:
        return any(_belongs_to(source, _bare(d)) for d in own_domains if d)
    if source.lower().startswith(SELF_REFERRAL_PREFIXES):
        return True
    return row.get("bounceRate", 1.0) < SELF_REFERRAL_MAX_BOUNCE and row.get("sessions", 0) > SELF_REFERRAL_MIN_SESSIONS


def _finding(rows: List[dict], found: str, clean: str) -> dict:
    return {
        "detected": bool(rows),
        "count": len(rows),
        "sources": rows,
        "totalSessions": sum(r.get("sessions", 0) for r in rows),
        "recommendation": found if rows else clean,
    }


def analyze_traffic(sources: Iterable[dict], own_domains: Sequence[str] = ()) -> dict:
    """Flag referral rows that break session attribution: payment processors
    and the site's own hosts (missing cross-domain or exclusion setup)."""
    referrals = [s for s in sources if s.get("medium") == REFERRAL]
    unwanted = [s for s in referrals if is_payment_processor(s.get("source", ""))]
    self_referrals = [s for s in referrals if s not in unwanted and is_self_referral(s, own_domains)]

    return {
        "unwantedReferrals": _finding(
            unwanted,
            f"{len(unwanted)} payment processor(s) appear as referrals. Add them to the unwanted referrals list.",
            "No payment processor referrals detected",
        ),
        "crossDomainIssues": _finding(
            self_referrals,
            "Possible cross-domain tracking gaps. Check whether these are your own domains: "
            + ", ".join(s.get("source", "") for s in self_referrals),
            "No obvious cross-domain tracking issues detected",
        ),
        "referralAnalysis": {
            "totalReferralSources": len(referrals),
            "totalReferralSessions": sum(s.get("sessions", 0) for s in referrals),
            "topReferrals": referrals[:TOP_REFERRALS],
        },
        "adminPaths": dict(ADMIN_PATHS),
    }
