import re
from typing import Iterable, List, NamedTuple, Tuple
from urllib.parse import unquote

TOP_TERMS = 10
MAX_MISSED_PATTERNS = 20
SAMPLE_URL_LENGTH = 100
ADMIN_PATH = "Admin > Data Streams > [Stream] > Enhanced measurement > Site search"
NOT_SET = "(not set)"

STATUS_OPTIMAL = "optimal"
STATUS_PARTIAL = "partial"
STATUS_NEEDS_CONFIG = "needs_config"
STATUS_MISSED_OPPORTUNITY = "missed_opportunity"
STATUS_NONE = "none"


class SearchPattern(NamedTuple):
    parameter: str
    pattern: re.Pattern
    category: str


def _query(name: str) -> re.Pattern:
    return re.compile(r"[?&](" + re.escape(name) + r")=([^&#]+)", re.IGNORECASE)


def _path(segment: str) -> re.Pattern:
    return re.compile(r"/" + segment + r"/([^/?&#]+)", re.IGNORECASE)


# Enhanced measurement already reads q, s, search, query and keyword.
SEARCH_PATTERNS: Tuple[SearchPattern, ...] = (
    SearchPattern("search_term", _query("search_term"), "custom"),
    SearchPattern("searchterm", _query("searchterm"), "custom"),
    SearchPattern("search-term", _query("search-term"), "hyphenated"),
    SearchPattern("kw", _query("kw"), "abbreviated"),
    SearchPattern("k", _query("k"), "abbreviated"),
    SearchPattern("word", _query("word"), "alternative"),
    SearchPattern("find", _query("find"), "alternative"),
    SearchPattern("lookup", _query("lookup"), "alternative"),
    SearchPattern("filter", _query("filter"), "filtering"),
    SearchPattern("criteria", _query("criteria"), "advanced"),
    SearchPattern("product_search", _query("product_search"), "ecommerce"),
    SearchPattern("item_search", _query("item_search"), "ecommerce"),
    SearchPattern("catalog_search", _query("catalog_search"), "ecommerce"),
    SearchPattern("wp_search", _query("wp_search"), "wordpress"),
    SearchPattern("drupal_search", _query("drupal_search"), "drupal"),
    SearchPattern("shopify_search", _query("shopify_search"), "shopify"),
    SearchPattern("path_search", _path("search"), "path_based"),
    SearchPattern("search_path", _path("find"), "path_based"),
    SearchPattern("lookup_path", _path("lookup"), "path_based"),
)


def _truncate(url: str) -> str:
    return url[:SAMPLE_URL_LENGTH] + "..." if len(url) > SAMPLE_URL_LENGTH else url


def find_missed_searches(url_rows: Iterable[Tuple[str, int]], patterns=SEARCH_PATTERNS) -> List[dict]:
    """Occurrences of search parameters that site search tracking does not read by default."""
    missed = []
    for url, views in url_rows:
        for p in patterns:
            for match in p.pattern.finditer(url):
                value = unquote(match.group(match.lastindex)).strip()
                if not value or value == NOT_SET:
                    continue
                missed.append({
                    "parameter": p.parameter,
                    "value": value,
                    "url": _truncate(url),
                    "views": views,
                    "category": p.category,
                })
    return missed


def _group_by_parameter(missed: List[dict]) -> List[dict]:
    grouped: dict = {}
    for item in missed:
        entry = grouped.setdefault(item["parameter"], {
            "parameter": item["parameter"],
            "totalViews": 0,
            "category": item["category"],
            "occurrences": 0,
        })
        entry["totalViews"] += item["views"]
        entry["occurrences"] += 1
    return sorted(grouped.values(), key=lambda e: e["totalViews"], reverse=True)


def _status(has_events: bool, has_terms: bool, custom_params: List[dict]) -> Tuple[str, str]:
    names = ", ".join(p["parameter"] for p in custom_params[:3])
    n = len(custom_params)
    if has_terms and not custom_params:
        return STATUS_OPTIMAL, "Search tracking is working; search terms are being captured."
    if has_terms:
        return STATUS_PARTIAL, (
            f"GA4 captures search terms, but {n} custom search parameter(s) may not be tracked: {names}"
        )
    if has_events and custom_params:
        return STATUS_NEEDS_CONFIG, (
            f"Search events are recorded without search terms. Found {n} custom parameter(s): {names}. "
            "Configure Enhanced Measurement or add custom tracking."
        )
    if custom_params:
        return STATUS_MISSED_OPPORTUNITY, (
            f"Found {n} search parameter(s) that are not tracked: {names}. "
            "Set up Enhanced Measurement site search or a custom event."
        )
    if has_events:
        return STATUS_PARTIAL, (
            "Search events are recorded without search terms; check the site search query parameters."
        )
    return STATUS_NONE, "No search activity detected. This is expected if the site has no search."


def analyze_search(
    search_event_count: int,
    search_terms: Iterable[Tuple[str, int]],
    url_rows: Iterable[Tuple[str, int]],
) -> dict:
    """Judge the site search setup from view_search_results events, captured
    search terms and search parameters seen in page URLs."""
    terms = sorted(
        ({"term": term, "users": users} for term, users in search_terms if term and term != NOT_SET),
        key=lambda t: t["users"],
        reverse=True,
    )
    missed = find_missed_searches(url_rows)
    custom_params = _group_by_parameter(missed)
    has_events = search_event_count > 0
    status, recommendation = _status(has_events, bool(terms), custom_params)

    suggestions = []
    if custom_params:
        suggestions = [
            "Add custom parameters to Enhanced Measurement site search: "
            + ", ".join(p["parameter"] for p in custom_params[:5]),
            "Or create custom events to track these search parameters",
            "Consider registering search_term as a custom dimension for custom parameters",
        ]

    return {
        "hasSearchEvents": has_events,
        "searchEventCount": search_event_count,
        "hasSearchTerms": bool(terms),
        "searchTermsCount": len(terms),
        "topSearchTerms": terms[:TOP_TERMS],
        "customSearchParams": custom_params,
        "missedSearchPatterns": missed[:MAX_MISSED_PATTERNS],
        "totalCustomSearchActivity": sum(item["views"] for item in missed),
        "status": status,
        "recommendation": recommendation,
        "adminPath": ADMIN_PATH,
        "configurationSuggestions": suggestions,
    }
