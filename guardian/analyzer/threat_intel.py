"""Threat intelligence results as consumed by risk fusion.

Lookups against VirusTotal, Google Safe Browsing, WHOIS and IP geolocation
happen outside this package. This module holds their typed results and the
pure aggregation that turns them into one reputation verdict.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from ..utils.payloads import pick, string_tuple

logger = logging.getLogger(__name__)

# VirusTotal positives at which a URL counts as known malicious
KNOWN_MALICIOUS_POSITIVES = 3
NEW_DOMAIN_DAYS = 30
VERY_NEW_DOMAIN_DAYS = 7


@dataclass(frozen=True)
class VirusTotalResult:
    """Result from VirusTotal."""
    positives: int = 0
    total: int = 0
    scan_date: Optional[str] = None
    permalink: Optional[str] = None
    detected_engines: tuple[str, ...] = ()


@dataclass(frozen=True)
class SafeBrowsingResult:
    """Result from Google Safe Browsing."""
    is_malicious: bool = False
    threat_types: tuple[str, ...] = ()
    platform_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class WhoisResult:
    """Registration data for the scanned domain."""
    domain_name: str = ""
    registrar: str = ""
    created_date: Optional[str] = None
    updated_date: Optional[str] = None
    expires_date: Optional[str] = None
    age_in_days: Optional[int] = None
    registrant_country: Optional[str] = None
    name_servers: tuple[str, ...] = ()


@dataclass(frozen=True)
class GeoIpResult:
    """Hosting location of the scanned host."""
    ip: str = ""
    country: str = ""
    country_code: str = ""
    city: str = ""
    org: str = ""
    asn: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    is_tor: bool = False
    is_proxy: bool = False
    is_hosting: bool = False


@dataclass(frozen=True)
class ThreatIntelResult:
    """Combined result from all threat intelligence sources."""

    known_malicious: bool = False
    reputation_score: int = 100  # 0-100, 100 = clean
    virus_total: Optional[VirusTotalResult] = None
    safe_browsing: Optional[SafeBrowsingResult] = None
    whois: Optional[WhoisResult] = None
    geo_ip: Optional[GeoIpResult] = None
    sources: tuple[str, ...] = field(default_factory=tuple)
    processing_ms: float = 0.0

    @property
    def vt_positives(self) -> int:
        return self.virus_total.positives if self.virus_total else 0

    @property
    def safe_browsing_flagged(self) -> bool:
        return bool(self.safe_browsing and self.safe_browsing.is_malicious)

    @property
    def domain_age_days(self) -> Optional[int]:
        return self.whois.age_in_days if self.whois else None

    @classmethod
    def from_components(
        cls,
        virus_total: Optional[VirusTotalResult] = None,
        safe_browsing: Optional[SafeBrowsingResult] = None,
        whois: Optional[WhoisResult] = None,
        geo_ip: Optional[GeoIpResult] = None,
        processing_ms: float = 0.0,
    ) -> "ThreatIntelResult":
        """Aggregate individual lookups into one reputation verdict."""
        flagged = bool(safe_browsing and safe_browsing.is_malicious)
        known_malicious = (virus_total.positives if virus_total else 0) >= KNOWN_MALICIOUS_POSITIVES or flagged

        reputation = 100
        if virus_total:
            ratio = virus_total.positives / virus_total.total if virus_total.total > 0 else 0.0
            reputation -= int(ratio * 50 + 0.5)
        if flagged:
            reputation -= 40
        age = whois.age_in_days if whois else None
        if age is not None and age < NEW_DOMAIN_DAYS:
            reputation -= 15
        if age is not None and age < VERY_NEW_DOMAIN_DAYS:
            reputation -= 10
        reputation = max(0, reputation)

        sources: list[str] = []
        if virus_total:
            sources.append("VirusTotal")
        if safe_browsing:
            sources.append("GoogleSafeBrowsing")
        if whois:
            sources.append("WHOIS")
        if geo_ip:
            sources.append("IPGeolocation")

        logger.debug(
            "Threat intel aggregated: known_malicious=%s reputation=%s sources=%s",
            known_malicious,
            reputation,
            sources,
        )
        return cls(
            known_malicious=known_malicious,
            reputation_score=reputation,
            virus_total=virus_total,
            safe_browsing=safe_browsing,
            whois=whois,
            geo_ip=geo_ip,
            sources=tuple(sources),
            processing_ms=processing_ms,
        )

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["ThreatIntelResult"]:
        """Coerce an aggregator payload; ``None`` when it is not a mapping."""
        if not isinstance(payload, Mapping):
            logger.warning("Discarding threat intel payload of type %s", type(payload).__name__)
            return None

        vt = _section(payload, "virusTotal", "virus_total")
        gsb = _section(payload, "safeBrowsing", "safe_browsing")
        whois = _section(payload, "whois")
        geo = _section(payload, "geoIp", "geo_ip")

        return cls(
            known_malicious=bool(pick(payload, "knownMalicious", "known_malicious", default=False)),
            reputation_score=int(max(0, min(100, _int(pick(payload, "reputationScore", "reputation_score"), 100)))),
            virus_total=VirusTotalResult(
                positives=max(0, _int(vt.get("positives"), 0)),
                total=max(0, _int(vt.get("total"), 0)),
                scan_date=vt.get("scanDate") or vt.get("scan_date"),
                permalink=vt.get("permalink"),
                detected_engines=string_tuple(pick(vt, "detectedEngines", "detected_engines")),
            ) if vt is not None else None,
            safe_browsing=SafeBrowsingResult(
                is_malicious=bool(pick(gsb, "isMalicious", "is_malicious", default=False)),
                threat_types=string_tuple(pick(gsb, "threatTypes", "threat_types")),
                platform_types=string_tuple(pick(gsb, "platformTypes", "platform_types")),
            ) if gsb is not None else None,
            whois=WhoisResult(
                domain_name=str(pick(whois, "domainName", "domain_name", default="") or ""),
                registrar=str(whois.get("registrar") or ""),
                created_date=pick(whois, "createdDate", "created_date"),
                updated_date=pick(whois, "updatedDate", "updated_date"),
                expires_date=pick(whois, "expiresDate", "expires_date"),
                age_in_days=_optional_int(pick(whois, "ageInDays", "age_in_days")),
                registrant_country=pick(whois, "registrantCountry", "registrant_country"),
                name_servers=string_tuple(pick(whois, "nameServers", "name_servers")),
            ) if whois is not None else None,
            geo_ip=GeoIpResult(
                ip=str(geo.get("ip") or ""),
                country=str(geo.get("country") or ""),
                country_code=str(pick(geo, "countryCode", "country_code", default="") or ""),
                city=str(geo.get("city") or ""),
                org=str(geo.get("org") or ""),
                asn=str(geo.get("asn") or ""),
                is_tor=bool(pick(geo, "isTor", "is_tor", default=False)),
                is_proxy=bool(pick(geo, "isProxy", "is_proxy", default=False)),
                is_hosting=bool(pick(geo, "isHosting", "is_hosting", default=False)),
            ) if geo is not None else None,
            sources=string_tuple(payload.get("sources")),
            processing_ms=float(_int(pick(payload, "processingMs", "processing_ms"), 0)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def _section(payload: Mapping[str, Any], *keys: str) -> Optional[Mapping[str, Any]]:
    value = pick(payload, *keys)
    return value if isinstance(value, Mapping) else None


def _int(raw: Any, default: int) -> int:
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default


def _optional_int(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return None
