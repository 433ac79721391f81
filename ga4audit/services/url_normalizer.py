import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from ga4audit.exceptions import InvalidUrlError

logger = logging.getLogger(__name__)

_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:", "sms:", "ftp:")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_HOMEPAGE_PATHS = ("", "/index.html", "/index.htm", "/index.php", "/home")


def normalize_url(url: str) -> str:
    """Return scheme://host[:port]/path with query, fragment and trailing slashes removed.

    A missing scheme defaults to https. Raises InvalidUrlError when no host
    can be found or the scheme is not http(s).
    """
    if url is None or not str(url).strip():
        raise InvalidUrlError(str(url), "is empty")
    raw = str(url).strip()
    if "://" not in raw and not raw.startswith("//"):
        raw = "https://" + raw
    elif raw.startswith("//"):
        raw = "https:" + raw

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        raise InvalidUrlError(url, f"could not be parsed: {e}") from e

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise InvalidUrlError(url, f"has unsupported scheme {parts.scheme!r}")
    host = (parts.hostname or "").lower()
    if not host:
        raise InvalidUrlError(url, "has no host")

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"

    path = parts.path.rstrip("/")
    return urlunsplit((scheme, netloc, path, "", ""))


def resolve_link(href: Optional[str], base_url: str) -> Optional[str]:
    """Resolve `href` against `base_url` and normalize it; None when unusable."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#"):
        return None
    if href.lower().startswith(_SKIPPED_SCHEMES):
        return None
    try:
        return normalize_url(urljoin(base_url, href))
    except (InvalidUrlError, ValueError):
        logger.debug("Dropping malformed link %r on %s", href, base_url)
        return None


def _strip_www(host: str) -> str:
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def hostname_of(url: str) -> str:
    return _strip_www(urlsplit(url).hostname or "")


def is_same_site(url: str, hostname: str) -> bool:
    """Same hostname, ignoring a leading www."""
    try:
        return hostname_of(url) == _strip_www(hostname)
    except ValueError:
        return False


def looks_like_homepage(url: str) -> bool:
    try:
        path = urlsplit(url).path.rstrip("/").lower()
    except ValueError:
        return False
    return path in _HOMEPAGE_PATHS
