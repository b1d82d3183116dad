"""Global pytest configuration."""

from __future__ import annotations

import pytest

from guardian.analyzer.features import FeatureExtractor
from guardian.analyzer.fusion import RiskFusionEngine
from guardian.analyzer.heuristics import HeuristicScorer
from guardian.analyzer.models import MlAnalysisResult, UrlFeatures
from guardian.analyzer.semantic import LlmAnalysisResult
from guardian.config import HeuristicTables


@pytest.fixture
def tables() -> HeuristicTables:
    return HeuristicTables.default()


@pytest.fixture
def extractor(tables) -> FeatureExtractor:
    return FeatureExtractor(tables)


@pytest.fixture
def scorer(tables) -> HeuristicScorer:
    return HeuristicScorer(tables)


@pytest.fixture
def engine() -> RiskFusionEngine:
    return RiskFusionEngine()


def make_ml_result(
    risk_score: int = 0,
    confidence: float = 0.5,
    indicators: tuple[str, ...] = (),
) -> MlAnalysisResult:
    """Create an MlAnalysisResult for testing."""
    features = UrlFeatures(
        url="https://example.com",
        length=19,
        entropy=3.5,
        dot_count=1,
        dash_count=0,
        underscore_count=0,
        at_symbol_count=0,
        slash_count=2,
        domain="example.com",
    )
    return MlAnalysisResult(
        features=features,
        risk_score=risk_score,
        confidence=confidence,
        indicators=indicators,
        model_version="test",
    )


def make_llm_result(
    score: float = 0.0,
    category: str = "UNKNOWN",
    confidence: float = 0.5,
    indicators: tuple[str, ...] = (),
) -> LlmAnalysisResult:
    """Create an LlmAnalysisResult for testing."""
    result = LlmAnalysisResult.from_dict(
        {
            "semanticRiskScore": score,
            "attackCategory": category,
            "confidence": confidence,
            "indicators": list(indicators),
        },
        model_used="test-model",
    )
    assert result is not None
    return result
