"""Ordered rule table for heuristic URL scoring.

Rules are evaluated top to bottom and every rule that matches contributes its
weight. Rules sharing an ``exclusive_group`` behave like an if/elif chain: the
first match in the group wins and later members are skipped. Table order is
also display order for indicators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from .models import ScoredIndicator, UrlFeatures

Predicate = Callable[[UrlFeatures], bool]
Label = Union[str, Callable[[UrlFeatures], str]]


@dataclass(frozen=True)
class HeuristicRule:
    """A single ``(predicate, weight, label)`` check."""

    name: str
    weight: int
    label: Label
    predicate: Predicate
    exclusive_group: Optional[str] = None

    def matches(self, features: UrlFeatures) -> bool:
        return bool(self.predicate(features))

    def indicator(self, features: UrlFeatures) -> ScoredIndicator:
        label = self.label(features) if callable(self.label) else self.label
        return ScoredIndicator(weight=self.weight, label=label)


def _brand_lookalike(f: UrlFeatures) -> bool:
    return (
        f.brand_similarity_score > 0.85
        and f.matched_brand is not None
        and f.matched_brand not in f.domain
    )


def _lookalike_with_lure(f: UrlFeatures) -> bool:
    return (f.homoglyph_score > 0.8 or _brand_lookalike(f)) and f.has_suspicious_keywords


URL_RULES: tuple[HeuristicRule, ...] = (
    HeuristicRule("ip_host", 20, "IP-based domain detected", lambda f: f.has_ip_address),
    HeuristicRule("no_https", 12, "Non-HTTPS connection", lambda f: not f.has_https),
    HeuristicRule(
        "suspicious_tld", 15, lambda f: f"Suspicious TLD (.{f.tld})", lambda f: f.has_suspicious_tld
    ),
    HeuristicRule(
        "suspicious_keywords", 14, "Suspicious keywords in URL", lambda f: f.has_suspicious_keywords
    ),
    HeuristicRule("percent_encoding", 8, "Excessive percent-encoding", lambda f: f.has_encoded_chars),
    HeuristicRule("data_uri", 25, "Data URI scheme detected", lambda f: f.has_data_uri),
    HeuristicRule("non_standard_port", 10, "Non-standard port in URL", lambda f: f.has_port_in_url),
    HeuristicRule("at_sign", 20, "At-sign (@) in URL", lambda f: f.at_symbol_count > 0),
    HeuristicRule(
        "deep_subdomains",
        15,
        "Excessive subdomain depth",
        lambda f: f.subdomain_depth >= 4,
        exclusive_group="subdomains",
    ),
    HeuristicRule(
        "multiple_subdomains",
        6,
        "Multiple subdomains",
        lambda f: f.subdomain_depth >= 2,
        exclusive_group="subdomains",
    ),
    HeuristicRule("long_url", 8, "Unusually long URL", lambda f: f.length > 100),
    HeuristicRule("high_entropy", 10, "High URL entropy (randomised)", lambda f: f.entropy > 4.5),
    HeuristicRule("digit_ratio", 8, "High digit ratio in URL", lambda f: f.digit_ratio > 0.3),
    HeuristicRule("dashes", 6, "Excessive dashes in domain", lambda f: f.dash_count > 4),
    HeuristicRule("dots", 6, "Excessive dots in URL", lambda f: f.dot_count > 6),
    HeuristicRule("query_params", 5, "Many query parameters", lambda f: f.query_param_count > 5),
    HeuristicRule(
        "homoglyph",
        22,
        "Homoglyph brand impersonation detected",
        lambda f: f.homoglyph_score > 0.8,
        exclusive_group="lookalike",
    ),
    HeuristicRule(
        "brand_similarity",
        18,
        "Brand name similarity in domain",
        _brand_lookalike,
        exclusive_group="lookalike",
    ),
    HeuristicRule("deep_path", 4, "Deep URL path structure", lambda f: f.path_depth > 6),
    # Not part of the base table above: an extra bump when a lookalike host
    # also carries credential-lure keywords. Kept last so it never reorders
    # the base indicators.
    HeuristicRule(
        "lookalike_with_lure",
        12,
        "Brand lookalike combined with credential lure",
        _lookalike_with_lure,
    ),
)


def evaluate_rules(
    features: UrlFeatures, rules: tuple[HeuristicRule, ...] = URL_RULES
) -> list[ScoredIndicator]:
    """Run ``rules`` in order and return the indicators that fired."""
    fired: list[ScoredIndicator] = []
    settled_groups: set[str] = set()
    for rule in rules:
        if rule.exclusive_group and rule.exclusive_group in settled_groups:
            continue
        if not rule.matches(features):
            continue
        if rule.exclusive_group:
            settled_groups.add(rule.exclusive_group)
        fired.append(rule.indicator(features))
    return fired
