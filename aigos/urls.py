"""Website and LinkedIn URL validation.

Runs before any network call: a research request with a malformed URL is
rejected at the boundary and never reaches the scraper or the model.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

_SCHEMES = ("http", "https")
_LINKEDIN_HOSTS = ("linkedin.com", "www.linkedin.com")
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


class InvalidUrlError(ValueError):
    """A website or LinkedIn URL failed validation."""


def _with_scheme(raw: str) -> str:
    """Default a missing scheme to https; lowercase the scheme and host."""
    url = raw.strip()
    if not _SCHEME_PREFIX.match(url):
        url = f"https://{url}"
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    return urlunsplit(parts._replace(scheme=parts.scheme.lower(), netloc=parts.netloc.lower()))


def is_valid_url(value: str) -> bool:
    """True for absolute http/https URLs with a host."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if parts.scheme not in _SCHEMES or not parts.hostname:
        return False
    return " " not in parts.netloc


def is_linkedin_company_url(value: str) -> bool:
    """True only for ``https://(www.)linkedin.com/company/<slug>``."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if parts.scheme != "https" or parts.hostname not in _LINKEDIN_HOSTS:
        return False
    if not parts.path.startswith("/company/"):
        return False
    slug = parts.path[len("/company/") :].strip("/")
    return bool(slug)


def normalize_website_url(raw: str | None) -> str:
    """Trim, default the scheme to https and validate.

    Raises:
        InvalidUrlError: if the value is empty or not an http/https URL.
    """
    if raw is None or not raw.strip():
        raise InvalidUrlError("A valid websiteUrl is required")
    url = _with_scheme(raw)
    if not is_valid_url(url):
        raise InvalidUrlError("A valid websiteUrl is required")
    return url


def normalize_linkedin_url(raw: str | None) -> str | None:
    """Normalize an optional LinkedIn company URL; blank input means absent."""
    if raw is None or not raw.strip():
        return None
    url = _with_scheme(raw)
    if not is_linkedin_company_url(url):
        raise InvalidUrlError(
            "linkedinUrl must be a valid LinkedIn company page URL "
            "(e.g., https://linkedin.com/company/acme)"
        )
    return url


def base_url(url: str) -> str:
    """Reduce *url* to ``scheme://host[:port]``."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"
