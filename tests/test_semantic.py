"""Tests for semantic result coercion."""

import pytest

from guardian.analyzer.semantic import LlmAnalysisResult
from guardian.enums import AttackCategory, UrgencyLevel


class TestLlmAnalysisResult:
    """Test coercion of provider payloads."""

    def test_camel_case_payload(self):
        result = LlmAnalysisResult.from_dict(
            {
                "semanticRiskScore": 87,
                "attackCategory": "CREDENTIAL_HARVESTING",
                "confidence": 0.92,
                "indicators": ["Requests password", "Spoofed sender"],
                "reasoning": "Asks the user to log in via an unofficial link.",
                "urgencyLevel": "HIGH",
                "brandsMentioned": ["PayPal"],
                "credentialHarvestingDetected": True,
            },
            model_used="gpt-4o",
            processing_ms=812.0,
        )
        assert result.semantic_risk_score == 87
        assert result.attack_category is AttackCategory.CREDENTIAL_HARVESTING
        assert result.confidence == pytest.approx(0.92)
        assert result.indicators == ("Requests password", "Spoofed sender")
        assert result.urgency_level is UrgencyLevel.HIGH
        assert result.brands_mentioned == ("PayPal",)
        assert result.credential_harvesting_detected is True
        assert result.model_used == "gpt-4o"
        assert result.processing_ms == pytest.approx(812.0)

    def test_snake_case_payload(self):
        result = LlmAnalysisResult.from_dict(
            {"semantic_risk_score": 20, "attack_category": "reward baiting", "urgency_level": "low"}
        )
        assert result.semantic_risk_score == 20
        assert result.attack_category is AttackCategory.REWARD_BAITING
        assert result.urgency_level is UrgencyLevel.LOW

    def test_values_are_clamped(self):
        result = LlmAnalysisResult.from_dict({"semanticRiskScore": 140, "confidence": 2})
        assert result.semantic_risk_score == 100
        assert result.confidence == 1.0

        result = LlmAnalysisResult.from_dict({"semanticRiskScore": -3, "confidence": -1})
        assert result.semantic_risk_score == 0
        assert result.confidence == 0.0

    def test_defaults(self):
        result = LlmAnalysisResult.from_dict({})
        assert result.semantic_risk_score == 0
        assert result.confidence == pytest.approx(0.5)
        assert result.attack_category is AttackCategory.UNKNOWN
        assert result.urgency_level is UrgencyLevel.NONE
        assert result.reasoning == "No reasoning provided"

    def test_garbage_numbers(self):
        result = LlmAnalysisResult.from_dict({"semanticRiskScore": "high", "confidence": float("nan")})
        assert result.semantic_risk_score == 0
        assert result.confidence == pytest.approx(0.5)

    def test_unknown_category(self, caplog):
        with caplog.at_level("WARNING"):
            result = LlmAnalysisResult.from_dict({"attackCategory": "SPAM", "urgencyLevel": "EXTREME"})
        assert result.attack_category is AttackCategory.UNKNOWN
        assert result.urgency_level is UrgencyLevel.NONE
        assert "coerced to UNKNOWN" in caplog.text
        assert "coerced to NONE" in caplog.text

    def test_non_list_indicators(self):
        result = LlmAnalysisResult.from_dict({"indicators": "not a list"})
        assert result.indicators == ()

    def test_non_mapping(self):
        assert LlmAnalysisResult.from_dict(["not", "a", "mapping"]) is None
        assert LlmAnalysisResult.from_dict(None) is None

    def test_to_dict(self):
        data = LlmAnalysisResult.from_dict({"attackCategory": "PHISHING", "urgencyLevel": "MEDIUM"}).to_dict()
        assert data["attack_category"] == "PHISHING"
        assert data["urgency_level"] == "MEDIUM"
        assert data["indicators"] == []
