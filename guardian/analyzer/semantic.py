"""Semantic (LLM) layer result as consumed by risk fusion.

The provider call itself lives outside this package; this module only turns
its JSON verdict into a typed, range-checked value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..enums import AttackCategory, UrgencyLevel
from ..utils.payloads import pick, string_tuple

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _number(raw: Any, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if value != value:  # NaN
        return default
    return value


@dataclass(frozen=True)
class LlmAnalysisResult:
    """Semantic verdict for a piece of content."""

    semantic_risk_score: float
    attack_category: AttackCategory = AttackCategory.UNKNOWN
    confidence: float = 0.5
    indicators: tuple[str, ...] = ()
    reasoning: str = ""
    urgency_level: UrgencyLevel = UrgencyLevel.NONE
    brands_mentioned: tuple[str, ...] = ()
    credential_harvesting_detected: bool = False
    processing_ms: float = 0.0
    model_used: str = ""

    @classmethod
    def from_dict(
        cls, payload: Any, *, model_used: str = "", processing_ms: float = 0.0
    ) -> Optional["LlmAnalysisResult"]:
        """Coerce a provider payload; ``None`` when it is not a mapping."""
        if not isinstance(payload, Mapping):
            logger.warning("Discarding semantic payload of type %s", type(payload).__name__)
            return None

        raw_category = pick(payload, "attackCategory", "attack_category")
        category = AttackCategory.coerce(raw_category)
        if raw_category is not None and category is AttackCategory.UNKNOWN and str(raw_category).upper() != "UNKNOWN":
            logger.warning("Unknown attack category %r coerced to UNKNOWN", raw_category)

        raw_urgency = pick(payload, "urgencyLevel", "urgency_level")
        urgency = UrgencyLevel.coerce(raw_urgency)
        if raw_urgency is not None and urgency is UrgencyLevel.NONE and str(raw_urgency).upper() != "NONE":
            logger.warning("Unknown urgency level %r coerced to NONE", raw_urgency)

        return cls(
            semantic_risk_score=_clamp(
                _number(pick(payload, "semanticRiskScore", "semantic_risk_score"), 0.0), 0.0, 100.0
            ),
            attack_category=category,
            confidence=_clamp(_number(payload.get("confidence"), 0.5), 0.0, 1.0),
            indicators=string_tuple(payload.get("indicators")),
            reasoning=str(payload.get("reasoning") or "No reasoning provided"),
            urgency_level=urgency,
            brands_mentioned=string_tuple(pick(payload, "brandsMentioned", "brands_mentioned")),
            credential_harvesting_detected=bool(
                pick(payload, "credentialHarvestingDetected", "credential_harvesting_detected", default=False)
            ),
            processing_ms=processing_ms,
            model_used=model_used,
        )

    def to_dict(self) -> dict:
        return {
            "semantic_risk_score": self.semantic_risk_score,
            "attack_category": self.attack_category.value,
            "confidence": self.confidence,
            "indicators": list(self.indicators),
            "reasoning": self.reasoning,
            "urgency_level": self.urgency_level.value,
            "brands_mentioned": list(self.brands_mentioned),
            "credential_harvesting_detected": self.credential_harvesting_detected,
            "processing_ms": self.processing_ms,
            "model_used": self.model_used,
        }
