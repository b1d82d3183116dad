"""URL and host helpers."""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import urlparse

import idna
import tldextract

from ..enums import InputType

URL_PATTERN = re.compile(r"https?://[^\s<>\"{}|\\^\[\]`]+", re.IGNORECASE)
IPV4_PATTERN = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$")
HOST_PATTERN = re.compile(r"^[\w.-]+$")
HEADER_PATTERN = re.compile(r"^(from|subject|to|reply-to):", re.IGNORECASE | re.MULTILINE)

MAX_EXTRACTED_URLS = 20

# Bundled public-suffix snapshot only; never fetch the list over the network.
_tld_extract = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())


def ensure_url(value: str) -> str:
    """Prefix ``http://`` when the value carries no scheme."""
    raw = (value or "").strip()
    if not raw:
        return ""
    return raw if "://" in raw else f"http://{raw}"


def is_ip_literal(host: str) -> bool:
    """Dotted-quad IPv4 or (optionally bracketed) IPv6 literal."""
    if not host:
        return False
    if IPV4_PATTERN.match(host):
        return True
    candidate = host[1:-1] if host.startswith("[") and host.endswith("]") else host
    if ":" not in candidate:
        return False
    try:
        ipaddress.IPv6Address(candidate)
    except ValueError:
        return False
    return True


def is_valid_host(host: str) -> bool:
    return bool(host) and (is_ip_literal(host) or bool(HOST_PATTERN.match(host)))


def decode_label(label: str) -> str:
    """Decode a punycode (``xn--``) label, returning it unchanged on failure."""
    if not label.startswith("xn--"):
        return label
    try:
        decoded = idna.decode(label)
    except (idna.IDNAError, UnicodeError):
        return label
    return decoded or label


def registered_domain(value: str) -> str:
    """Return the registrable domain for a host, URL or email address (best-effort)."""
    raw = (value or "").strip().lower()
    if "@" in raw and "://" not in raw:
        raw = raw.rsplit("@", 1)[1]
    if not raw:
        return ""
    try:
        host = urlparse(ensure_url(raw)).hostname or raw
    except ValueError:
        host = raw
    extracted = _tld_extract(host)
    if extracted.domain and extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}"
    return host


def extract_urls(text: str, limit: int = MAX_EXTRACTED_URLS) -> list[str]:
    """Extract http(s) URLs from free text, stripping trailing punctuation."""
    urls = (match.rstrip(".,;!?)") for match in URL_PATTERN.findall(text or ""))
    return list(dict.fromkeys(url for url in urls if url))[:limit]


def detect_input_type(text: str) -> InputType:
    """Classify a scan input as a URL, an email, or free text."""
    raw = (text or "").strip()
    if not raw:
        return InputType.TEXT
    if HEADER_PATTERN.search(raw):
        return InputType.EMAIL
    if any(ch.isspace() for ch in raw):
        return InputType.TEXT
    try:
        host = urlparse(ensure_url(raw)).hostname or ""
    except ValueError:
        return InputType.TEXT
    if is_ip_literal(host) or ("." in host.strip(".") and is_valid_host(host)):
        return InputType.URL
    return InputType.TEXT
