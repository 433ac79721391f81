from ga4audit.services.pii_detector import detect_pii


def test_clean_urls():
    result = detect_pii([("/products?page=2", 100), ("/about", 50)])
    assert result["hasPII"] is False
    assert result["severity"] == "none"
    assert result["severityScore"] == 0
    assert result["totalUrlsChecked"] == 2
    assert result["totalAffectedUrls"] == 0


def test_email_in_query_is_critical():
    result = detect_pii([("/signup?email=jane@example.com&step=2", 40)])
    assert result["hasPII"] is True
    assert result["severity"] == "critical"
    assert result["severityScore"] == 10
    finding = result["findings"]["critical"][0]
    assert finding["type"] == "email"
    assert finding["parameter"] == "email"
    assert "value" not in finding
    assert result["totalPageViews"] == 40


def test_severity_score_weights():
    rows = [
        ("/account?user_id=12345", 10),
        ("/checkout?zip=90210-1234", 5),
    ]
    result = detect_pii(rows)
    assert result["severity"] == "high"
    assert len(result["findings"]["high"]) == 1
    assert len(result["findings"]["medium"]) == 1
    assert result["severityScore"] == 5 + 2
    assert result["totalAffectedUrls"] == 2
    assert result["totalPageViews"] == 15


def test_sample_urls_limited_and_truncated():
    long_tail = "x" * 200
    rows = [(f"/p{i}?email=a{i}@example.com&t={long_tail}", 1) for i in range(5)]
    result = detect_pii(rows)
    samples = result["sampleUrls"]["email"]
    assert len(samples) == 3
    assert all(len(s["url"]) == 103 for s in samples)
    assert result["adminPath"].startswith("Admin > Data Settings")
