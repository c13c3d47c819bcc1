"""Tests for website and LinkedIn URL validation."""

from __future__ import annotations

import pytest

from aigos.urls import (
    InvalidUrlError,
    base_url,
    is_linkedin_company_url,
    is_valid_url,
    normalize_linkedin_url,
    normalize_website_url,
)


class TestIsValidUrl:
    @pytest.mark.parametrize(
        "url",
        ["https://stripe.com", "http://example.com/about", "https://sub.example.co.uk:8443/x?q=1"],
    )
    def test_accepts_http_urls(self, url: str) -> None:
        assert is_valid_url(url)

    @pytest.mark.parametrize(
        "url",
        ["not a url", "ftp://example.com", "https://", "stripe.com", "https://exa mple.com"],
    )
    def test_rejects_malformed(self, url: str) -> None:
        assert not is_valid_url(url)


class TestLinkedInCompanyUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://linkedin.com/company/stripe",
            "https://www.linkedin.com/company/stripe/",
            "https://www.linkedin.com/company/stripe/about",
        ],
    )
    def test_accepts_company_pages(self, url: str) -> None:
        assert is_linkedin_company_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "http://linkedin.com/company/stripe",
            "https://linkedin.com/in/someone",
            "https://linkedin.com/company/",
            "https://evil-linkedin.com/company/stripe",
            "https://uk.linkedin.com/company/stripe",
        ],
    )
    def test_rejects_everything_else(self, url: str) -> None:
        assert not is_linkedin_company_url(url)


class TestNormalizeWebsiteUrl:
    def test_adds_https_scheme(self) -> None:
        assert normalize_website_url("stripe.com") == "https://stripe.com"

    def test_trims_whitespace(self) -> None:
        assert normalize_website_url("  https://stripe.com  ") == "https://stripe.com"

    def test_keeps_http(self) -> None:
        assert normalize_website_url("http://example.com") == "http://example.com"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("HTTPS://Stripe.com", "https://stripe.com"),
            ("Http://Example.com/About", "http://example.com/About"),
            ("STRIPE.COM", "https://stripe.com"),
        ],
    )
    def test_scheme_and_host_are_case_insensitive(self, raw: str, expected: str) -> None:
        assert normalize_website_url(raw) == expected

    def test_other_schemes_are_rejected_not_prefixed(self) -> None:
        with pytest.raises(InvalidUrlError):
            normalize_website_url("FTP://example.com")

    @pytest.mark.parametrize("raw", [None, "", "   ", "not a url"])
    def test_rejects_missing_or_malformed(self, raw: str | None) -> None:
        with pytest.raises(InvalidUrlError, match="A valid websiteUrl is required"):
            normalize_website_url(raw)

    def test_invalid_url_error_is_value_error(self) -> None:
        assert issubclass(InvalidUrlError, ValueError)


class TestNormalizeLinkedInUrl:
    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_blank_means_absent(self, raw: str | None) -> None:
        assert normalize_linkedin_url(raw) is None

    def test_adds_scheme(self) -> None:
        assert normalize_linkedin_url("linkedin.com/company/stripe") == (
            "https://linkedin.com/company/stripe"
        )

    def test_uppercase_scheme_and_host(self) -> None:
        assert normalize_linkedin_url("HTTPS://WWW.LinkedIn.com/company/stripe") == (
            "https://www.linkedin.com/company/stripe"
        )

    def test_rejects_personal_profile(self) -> None:
        with pytest.raises(InvalidUrlError, match="LinkedIn company page"):
            normalize_linkedin_url("https://linkedin.com/in/patrick")


class TestBaseUrl:
    def test_strips_path_and_query(self) -> None:
        assert base_url("https://stripe.com/pricing?x=1#top") == "https://stripe.com"

    def test_keeps_port(self) -> None:
        assert base_url("http://localhost:3000/about") == "http://localhost:3000"
