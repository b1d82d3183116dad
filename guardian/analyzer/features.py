"""URL feature extraction for the heuristic scorer."""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import parse_qsl, urlparse

from ..config import HeuristicTables
from ..utils.domains import decode_label, ensure_url, is_ip_literal, is_valid_host
from ..utils.text import homoglyph_variants, shannon_entropy, similarity
from .models import UrlFeatures

logger = logging.getLogger(__name__)

DIGIT_RE = re.compile(r"\d")
SPECIAL_CHAR_RE = re.compile(r"[^a-zA-Z0-9/:.-]")
ENCODED_CHAR_RE = re.compile(r"%[0-9a-fA-F]{2}")
WORD_RE = re.compile(r"[^\W\d_]+")
TOKEN_SPLIT_RE = re.compile(r"[-_]+")

ENCODED_CHAR_THRESHOLD = 3
HOMOGLYPH_SIMILARITY_THRESHOLD = 0.8
STANDARD_PORTS = {80, 443}


class FeatureExtractor:
    """Decomposes URL-like strings into a fixed feature record."""

    def __init__(self, tables: Optional[HeuristicTables] = None):
        self.tables = tables or HeuristicTables.default()

    def extract(self, raw_input: str) -> UrlFeatures:
        """Extract features from ``raw_input``. Never raises.

        Input that does not parse as a URL (after prefixing ``http://`` when no
        scheme is given) yields the fallback record: only length, entropy and
        symbol counts are measured and ``domain`` is the raw input.
        """
        raw = raw_input or ""
        if raw.strip().lower().startswith("data:"):
            return self._fallback(raw, has_data_uri=True)

        try:
            parsed = urlparse(ensure_url(raw))
            host = (parsed.hostname or "").lower()
            port = parsed.port
        except ValueError as exc:
            logger.warning("Falling back to raw features for %r: %s", raw[:200], exc)
            return self._fallback(raw)

        labels = [label for label in host.split(".") if label]
        if not labels or not is_valid_host(host):
            logger.warning("Falling back to raw features for %r: no usable host", raw[:200])
            return self._fallback(raw)

        tld = labels[-1]
        domain = ".".join(labels[-2:])
        subdomain = ".".join(labels[:-2])
        lower_url = raw.lower()
        length = len(raw)

        homoglyph_score, brand_score, brand = self._brand_similarity(domain.split(".")[0])

        return UrlFeatures(
            url=raw,
            length=length,
            entropy=shannon_entropy(raw),
            dot_count=raw.count("."),
            dash_count=raw.count("-"),
            underscore_count=raw.count("_"),
            at_symbol_count=raw.count("@"),
            slash_count=raw.count("/"),
            domain=domain,
            query_param_count=len(parse_qsl(parsed.query, keep_blank_values=True)),
            has_fragment=bool(parsed.fragment),
            subdomain_depth=len(subdomain.split(".")) if subdomain else 0,
            path_depth=len([segment for segment in parsed.path.split("/") if segment]),
            has_ip_address=is_ip_literal(host),
            has_https=parsed.scheme == "https",
            has_suspicious_tld=tld in self.tables.suspicious_tlds,
            has_suspicious_keywords=any(kw in lower_url for kw in self.tables.suspicious_keywords),
            has_encoded_chars=len(ENCODED_CHAR_RE.findall(raw)) > ENCODED_CHAR_THRESHOLD,
            has_data_uri=False,
            has_port_in_url=port is not None and port not in STANDARD_PORTS,
            tld=tld,
            subdomain=subdomain,
            digit_ratio=len(DIGIT_RE.findall(raw)) / length,
            special_char_ratio=len(SPECIAL_CHAR_RE.findall(raw)) / length,
            longest_word_length=max((len(w) for w in WORD_RE.findall(domain)), default=0),
            homoglyph_score=homoglyph_score,
            brand_similarity_score=brand_score,
            matched_brand=brand,
        )

    def _brand_similarity(self, label: str) -> tuple[float, float, Optional[str]]:
        """Score a domain label against the brand list.

        Returns ``(homoglyph_score, brand_similarity_score, matched_brand)``.
        The label and each of its ``-``/``_`` tokens are compared after
        homoglyph normalisation; a candidate only counts toward the homoglyph
        score when normalisation changed it.
        """
        decoded = decode_label(label)
        candidates = [decoded]
        tokens = [t for t in TOKEN_SPLIT_RE.split(decoded) if t]
        if len(tokens) > 1:
            candidates.extend(tokens)

        best_similarity = 0.0
        best_brand: Optional[str] = None
        homoglyph_score = 0.0
        for candidate in candidates:
            original = candidate.lower()
            for variant in homoglyph_variants(candidate, self.tables.homoglyphs):
                changed = variant != original
                for brand in self.tables.brands:
                    sim = similarity(variant, brand)
                    if sim > best_similarity:
                        best_similarity = sim
                        best_brand = brand
                    if changed and sim > HOMOGLYPH_SIMILARITY_THRESHOLD:
                        homoglyph_score = max(homoglyph_score, sim)

        return homoglyph_score, best_similarity, best_brand

    def _fallback(self, raw: str, has_data_uri: bool = False) -> UrlFeatures:
        return UrlFeatures(
            url=raw,
            length=len(raw),
            entropy=shannon_entropy(raw),
            dot_count=raw.count("."),
            dash_count=raw.count("-"),
            underscore_count=raw.count("_"),
            at_symbol_count=raw.count("@"),
            slash_count=raw.count("/"),
            domain=raw,
            has_data_uri=has_data_uri,
        )


DEFAULT_EXTRACTOR = FeatureExtractor()


def extract_url_features(raw_input: str) -> UrlFeatures:
    """Extract features with the default tables."""
    return DEFAULT_EXTRACTOR.extract(raw_input)
