"""Heuristic URL risk scoring."""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..config import Config, HeuristicTables
from ..constants import MODEL_VERSION
from .features import FeatureExtractor
from .heuristic_rules import URL_RULES, HeuristicRule, evaluate_rules
from .models import MlAnalysisResult, ScoredIndicator, UrlFeatures

logger = logging.getLogger(__name__)

MAX_SCORE = 100
MAX_CONFIDENCE = 0.98
BASE_CONFIDENCE = 0.5
CONFIDENCE_PER_INDICATOR = 0.06


class HeuristicScorer:
    """Scores URLs for phishing likelihood from lexical/structural features."""

    def __init__(
        self,
        tables: Optional[HeuristicTables] = None,
        rules: tuple[HeuristicRule, ...] = URL_RULES,
        extractor: Optional[FeatureExtractor] = None,
    ):
        self.extractor = extractor or FeatureExtractor(tables)
        self.rules = rules

    @classmethod
    def from_config(cls, config: Config) -> "HeuristicScorer":
        """Scorer over the tables loaded into ``config`` (heuristics.yaml overrides)."""
        return cls(config.tables)

    def score(self, features: UrlFeatures) -> tuple[list[ScoredIndicator], int]:
        """Return fired indicators in rule order and the capped score."""
        indicators = evaluate_rules(features, self.rules)
        raw_score = sum(indicator.weight for indicator in indicators)
        return indicators, min(MAX_SCORE, raw_score)

    def analyse(self, url: str) -> MlAnalysisResult:
        """Extract features from ``url`` and score them. Never raises."""
        started = time.perf_counter()
        logger.debug("Heuristic analysis start: %s", url)

        features = self.extractor.extract(url)
        indicators, risk_score = self.score(features)
        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + CONFIDENCE_PER_INDICATOR * len(indicators))

        processing_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "Heuristic analysis done: %s score=%s indicators=%s",
            url,
            risk_score,
            len(indicators),
        )
        return MlAnalysisResult(
            features=features,
            risk_score=risk_score,
            confidence=confidence,
            indicators=tuple(indicator.label for indicator in indicators),
            model_version=MODEL_VERSION,
            processing_ms=processing_ms,
        )


DEFAULT_SCORER = HeuristicScorer()


def analyse_url(url: str, scorer: Optional[HeuristicScorer] = None) -> MlAnalysisResult:
    """Heuristic analysis of ``url`` with the default tables unless a scorer is given."""
    return (scorer or DEFAULT_SCORER).analyse(url)
