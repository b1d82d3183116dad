"""Risk fusion engine.

Combines the heuristic URL score, the semantic (LLM) score and the threat
intelligence reputation into one tiered, explainable verdict.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..config import Config
from ..enums import AttackCategory, RiskTier
from .models import FusionBreakdown, MlAnalysisResult, RiskFusionResult
from .semantic import LlmAnalysisResult
from .threat_intel import ThreatIntelResult

logger = logging.getLogger(__name__)

MAX_TOP_INDICATORS = 10
NEW_DOMAIN_DAYS = 30


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tier_for_score(
    score: float,
    confirmed: int = 80,
    high_risk: int = 60,
    suspicious: int = 35,
) -> RiskTier:
    """Map a unified score to a tier (inclusive lower bounds)."""
    if score >= confirmed:
        return RiskTier.CONFIRMED_PHISHING
    if score >= high_risk:
        return RiskTier.HIGH_RISK
    if score >= suspicious:
        return RiskTier.SUSPICIOUS
    return RiskTier.SAFE


def build_recommendation(tier: RiskTier, category: AttackCategory) -> str:
    if tier is RiskTier.CONFIRMED_PHISHING:
        subject = category.display_name if category.is_known else "resource"
        return (
            f"BLOCK IMMEDIATELY. This {subject} has been classified as a confirmed phishing "
            "attempt. Do not interact with this content and report it to your security team."
        )
    if tier is RiskTier.HIGH_RISK:
        return (
            "Exercise extreme caution. Multiple high-risk indicators detected. Avoid entering "
            "credentials or sensitive information. Report to your security team for further "
            "investigation."
        )
    if tier is RiskTier.SUSPICIOUS:
        return (
            "Proceed with caution. Several suspicious indicators were found. Verify the "
            "authenticity of this resource through official channels before interacting."
        )
    return "No significant threats detected. Standard security practices apply."


class RiskFusionEngine:
    """Fuses independently computed risk signals into a unified verdict."""

    DEFAULT_SCORING = {
        "ml_weight": 0.35,
        "llm_weight": 0.35,
        "threat_intel_weight": 0.30,
        "known_malicious_floor": 90,
        "safe_browsing_floor": 85,
        "vt_positives_threshold": 5,
        "vt_positives_floor": 80,
        "tier_confirmed": 80,
        "tier_high_risk": 60,
        "tier_suspicious": 35,
        "threat_intel_confidence": 0.9,
        "default_confidence": 0.5,
    }

    def __init__(
        self,
        scoring_weights: dict | None = None,
        enable_ml: bool = True,
        enable_llm: bool = True,
        enable_threat_intel: bool = True,
    ):
        self.scoring = dict(self.DEFAULT_SCORING)
        if scoring_weights:
            self.scoring.update(scoring_weights)
        self.enable_ml = enable_ml
        self.enable_llm = enable_llm
        self.enable_threat_intel = enable_threat_intel

    @classmethod
    def from_config(cls, config: Config, scoring_weights: dict | None = None) -> "RiskFusionEngine":
        """Engine that ignores the sources switched off in ``config``."""
        return cls(
            scoring_weights=scoring_weights,
            enable_ml=config.enable_ml,
            enable_llm=config.enable_llm,
            enable_threat_intel=config.enable_threat_intel,
        )

    def fuse(
        self,
        ml: Optional[MlAnalysisResult] = None,
        llm: Optional[LlmAnalysisResult] = None,
        threat_intel: Optional[ThreatIntelResult] = None,
    ) -> RiskFusionResult:
        """Fuse whichever sources are present. Never raises."""
        s = self.scoring

        # Disabled sources are treated as absent
        ml = ml if self.enable_ml else None
        llm = llm if self.enable_llm else None
        threat_intel = threat_intel if self.enable_threat_intel else None

        ml_score = float(ml.risk_score) if ml else 0.0
        llm_score = float(llm.semantic_risk_score) if llm else 0.0
        reputation = threat_intel.reputation_score if threat_intel else 100
        ti_score = 100.0 - (100 if reputation is None else reputation)

        # Renormalise over present sources so a missing one does not pull toward safe
        weighted_sum = 0.0
        total_weight = 0.0
        if ml:
            weighted_sum += ml_score * s["ml_weight"]
            total_weight += s["ml_weight"]
        if llm:
            weighted_sum += llm_score * s["llm_weight"]
            total_weight += s["llm_weight"]
        if threat_intel:
            weighted_sum += ti_score * s["threat_intel_weight"]
            total_weight += s["threat_intel_weight"]
        score = weighted_sum / total_weight if total_weight > 0 else 0.0

        # Hard overrides are floors, never additive
        if threat_intel:
            if threat_intel.known_malicious:
                score = max(score, s["known_malicious_floor"])
            if threat_intel.safe_browsing_flagged:
                score = max(score, s["safe_browsing_floor"])
            if threat_intel.vt_positives >= s["vt_positives_threshold"]:
                score = max(score, s["vt_positives_floor"])

        unified = round_half_up(max(0.0, min(100.0, score)))
        tier = tier_for_score(
            unified,
            confirmed=s["tier_confirmed"],
            high_risk=s["tier_high_risk"],
            suspicious=s["tier_suspicious"],
        )

        category = AttackCategory.coerce(llm.attack_category) if llm else AttackCategory.UNKNOWN
        if not category.is_known:
            category = AttackCategory.UNKNOWN

        result = RiskFusionResult(
            unified_risk_score=unified,
            tier=tier,
            confidence=self._confidence(ml, llm, threat_intel),
            ml_weight=s["ml_weight"],
            llm_weight=s["llm_weight"],
            threat_intel_weight=s["threat_intel_weight"],
            breakdown=FusionBreakdown(
                ml_score=round_half_up(ml_score),
                llm_score=round_half_up(llm_score),
                threat_intel_score=round_half_up(ti_score),
            ),
            top_indicators=self._top_indicators(ml, llm, threat_intel),
            attack_category=category,
            recommendation=build_recommendation(tier, category),
        )
        logger.debug(
            "Fusion result: score=%s tier=%s confidence=%s sources=%s",
            result.unified_risk_score,
            result.tier.value,
            result.confidence,
            [name for name, present in (("ml", ml), ("llm", llm), ("threat_intel", threat_intel)) if present],
        )
        return result

    def _confidence(
        self,
        ml: Optional[MlAnalysisResult],
        llm: Optional[LlmAnalysisResult],
        threat_intel: Optional[ThreatIntelResult],
    ) -> float:
        s = self.scoring
        confidences: list[float] = []
        if ml:
            confidences.append(ml.confidence)
        if llm:
            confidences.append(llm.confidence)
        if threat_intel:
            confidences.append(s["threat_intel_confidence"] if threat_intel.sources else s["default_confidence"])
        if not confidences:
            return s["default_confidence"]
        return math.floor(sum(confidences) / len(confidences) * 100 + 0.5) / 100

    @staticmethod
    def _top_indicators(
        ml: Optional[MlAnalysisResult],
        llm: Optional[LlmAnalysisResult],
        threat_intel: Optional[ThreatIntelResult],
    ) -> tuple[str, ...]:
        indicators: list[str] = []
        if ml:
            indicators.extend(ml.indicators)
        if llm:
            indicators.extend(llm.indicators)
        if threat_intel:
            if threat_intel.safe_browsing_flagged:
                indicators.append("Listed in Google Safe Browsing")
            vt = threat_intel.virus_total
            if vt and vt.positives > 0:
                indicators.append(f"VirusTotal: {vt.positives}/{vt.total} engines flagged")
            age = threat_intel.domain_age_days
            if age is not None and age < NEW_DOMAIN_DAYS:
                indicators.append(f"Newly registered domain ({age} days old)")
        return tuple(dict.fromkeys(indicators))[:MAX_TOP_INDICATORS]


DEFAULT_ENGINE = RiskFusionEngine()


def fuse_risk_scores(
    ml: Optional[MlAnalysisResult] = None,
    llm: Optional[LlmAnalysisResult] = None,
    threat_intel: Optional[ThreatIntelResult] = None,
) -> RiskFusionResult:
    """Fuse with the default policy."""
    return DEFAULT_ENGINE.fuse(ml, llm, threat_intel)
