"""Analyzer data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Optional

from ..enums import AttackCategory, InputType, RiskTier

if TYPE_CHECKING:
    from .semantic import LlmAnalysisResult
    from .threat_intel import ThreatIntelResult


@dataclass(frozen=True)
class UrlFeatures:
    """Lexical and structural decomposition of a URL-like string."""

    url: str
    length: int
    entropy: float
    dot_count: int
    dash_count: int
    underscore_count: int
    at_symbol_count: int
    slash_count: int
    domain: str

    query_param_count: int = 0
    has_fragment: bool = False
    subdomain_depth: int = 0
    path_depth: int = 0

    has_ip_address: bool = False
    has_https: bool = False
    has_suspicious_tld: bool = False
    has_suspicious_keywords: bool = False
    has_encoded_chars: bool = False
    has_data_uri: bool = False
    has_port_in_url: bool = False

    tld: str = ""
    subdomain: str = ""

    digit_ratio: float = 0.0
    special_char_ratio: float = 0.0
    longest_word_length: int = 0

    # Look-alike analysis of the first domain label
    homoglyph_score: float = 0.0
    brand_similarity_score: float = 0.0
    matched_brand: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScoredIndicator:
    """One triggered heuristic rule."""

    weight: int
    label: str


@dataclass(frozen=True)
class MlAnalysisResult:
    """Output of the heuristic URL scorer."""

    features: UrlFeatures
    risk_score: int
    confidence: float
    indicators: tuple[str, ...] = ()
    model_version: str = ""
    processing_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "features": self.features.to_dict(),
            "risk_score": self.risk_score,
            "confidence": self.confidence,
            "indicators": list(self.indicators),
            "model_version": self.model_version,
            "processing_ms": self.processing_ms,
        }


@dataclass(frozen=True)
class FusionBreakdown:
    """Per-source scores that went into a fusion decision."""

    ml_score: int = 0
    llm_score: int = 0
    threat_intel_score: int = 0


@dataclass(frozen=True)
class RiskFusionResult:
    """Unified, explainable verdict built from up to three signal sources.

    ``ml_weight``/``llm_weight``/``threat_intel_weight`` publish the nominal
    policy weights. They are not renormalised when a source is absent.
    """

    unified_risk_score: int
    tier: RiskTier
    confidence: float
    ml_weight: float
    llm_weight: float
    threat_intel_weight: float
    breakdown: FusionBreakdown = field(default_factory=FusionBreakdown)
    top_indicators: tuple[str, ...] = ()
    attack_category: AttackCategory = AttackCategory.UNKNOWN
    recommendation: str = ""

    @property
    def per_source_weights(self) -> dict[str, float]:
        return {
            "ml": self.ml_weight,
            "llm": self.llm_weight,
            "threat_intel": self.threat_intel_weight,
        }

    def to_dict(self) -> dict:
        return {
            "unified_risk_score": self.unified_risk_score,
            "tier": self.tier.value,
            "confidence": self.confidence,
            "ml_weight": self.ml_weight,
            "llm_weight": self.llm_weight,
            "threat_intel_weight": self.threat_intel_weight,
            "breakdown": asdict(self.breakdown),
            "top_indicators": list(self.top_indicators),
            "attack_category": self.attack_category.value,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ScanResult:
    """Envelope for one scan, as handed to the persistence layer."""

    scan_id: str
    input: str
    input_type: InputType
    timestamp: str
    fusion: RiskFusionResult
    ml: Optional[MlAnalysisResult] = None
    llm: Optional[LlmAnalysisResult] = None
    threat_intel: Optional[ThreatIntelResult] = None
    processing_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "scan_id": self.scan_id,
            "input": self.input,
            "input_type": self.input_type.value,
            "timestamp": self.timestamp,
            "ml": self.ml.to_dict() if self.ml else None,
            "llm": self.llm.to_dict() if self.llm else None,
            "threat_intel": self.threat_intel.to_dict() if self.threat_intel else None,
            "fusion": self.fusion.to_dict(),
            "processing_ms": self.processing_ms,
        }
