from unittest.mock import Mock

from bs4 import BeautifulSoup

from ga4audit.services.link_extractor import LinkExtractor


def test_extract_links_resolves_normalizes_and_dedups():
    html = """
    <a href="/about/">About</a>
    <a href="/about?ref=footer">About again</a>
    <a href="https://example.com/contact#form">Contact</a>
    <map><area href="/pricing" alt="Pricing"></map>
    <a href="mailto:hi@example.com">Mail</a>
    <a href="#top">Top</a>
    """
    links = LinkExtractor().extract_links("https://example.com/", html)
    assert links == [
        "https://example.com/about",
        "https://example.com/contact",
        "https://example.com/pricing",
    ]


def test_regex_fallback_finds_hrefs_outside_anchors():
    html = """<script type="text/template"><a href='/templated-page'>x</a></script>
    <div data-x='1' href="/odd-markup"></div>"""
    links = LinkExtractor().extract_links("https://example.com", html)
    assert "https://example.com/templated-page" in links
    assert "https://example.com/odd-markup" in links


def test_extract_links_keeps_external_links_for_policy_to_filter():
    links = LinkExtractor().extract_links("https://example.com", '<a href="https://other.test/x">x</a>')
    assert links == ["https://other.test/x"]


def test_uses_injected_parser():
    parser = Mock(side_effect=lambda html: BeautifulSoup(html, "html.parser"))
    LinkExtractor(parser_fn=parser).extract_links("https://example.com", "<a href='/a'>a</a>")
    parser.assert_called_once()
