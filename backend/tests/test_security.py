"""
Tests for CORS origin patterns.
"""

import re

from app.core.security import exact_origins, origin_regex

PATTERNS = ["https://*.n8n.io", "https://n8n.io", "http://localhost:3000"]


class TestOriginPatterns:

    def test_exact_origins(self):
        assert exact_origins(PATTERNS) == ["https://n8n.io", "http://localhost:3000"]

    def test_wildcard_matches_subdomains(self):
        pattern = re.compile(origin_regex(PATTERNS))
        assert pattern.match("https://app.n8n.io")
        assert pattern.match("https://a.b.n8n.io")

    def test_wildcard_rejects_lookalikes(self):
        pattern = re.compile(origin_regex(PATTERNS))
        assert not pattern.match("https://n8n.io.evil.com")
        assert not pattern.match("https://evil.com/.n8n.io")
        assert not pattern.match("http://app.n8n.io")

    def test_no_wildcards(self):
        assert origin_regex(["http://localhost:3000"]) is None
