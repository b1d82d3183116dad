"""Analyzer modules for Guardian."""

from .email import EmailAnalysisRequest, EmailAnalysisResult, analyse_email
from .features import FeatureExtractor, extract_url_features
from .fusion import RiskFusionEngine, fuse_risk_scores
from .heuristics import HeuristicScorer, analyse_url
from .models import MlAnalysisResult, RiskFusionResult, ScanResult, UrlFeatures
from .semantic import LlmAnalysisResult
from .threat_intel import ThreatIntelResult

__all__ = [
    "EmailAnalysisRequest",
    "EmailAnalysisResult",
    "analyse_email",
    "FeatureExtractor",
    "extract_url_features",
    "RiskFusionEngine",
    "fuse_risk_scores",
    "HeuristicScorer",
    "analyse_url",
    "MlAnalysisResult",
    "RiskFusionResult",
    "ScanResult",
    "UrlFeatures",
    "LlmAnalysisResult",
    "ThreatIntelResult",
]
