"""Shared scan enums."""

from __future__ import annotations

from enum import Enum
from typing import Any


class RiskTier(str, Enum):
    """Unified risk tier, ordered from least to most severe."""

    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    HIGH_RISK = "HIGH_RISK"
    CONFIRMED_PHISHING = "CONFIRMED_PHISHING"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_ORDER = (
    RiskTier.SAFE,
    RiskTier.SUSPICIOUS,
    RiskTier.HIGH_RISK,
    RiskTier.CONFIRMED_PHISHING,
)


class AttackCategory(str, Enum):
    """Attack category reported by the semantic layer."""

    NONE = "NONE"
    PHISHING = "PHISHING"
    CREDENTIAL_HARVESTING = "CREDENTIAL_HARVESTING"
    URGENCY_MANIPULATION = "URGENCY_MANIPULATION"
    AUTHORITY_IMPERSONATION = "AUTHORITY_IMPERSONATION"
    BRAND_IMPERSONATION = "BRAND_IMPERSONATION"
    REWARD_BAITING = "REWARD_BAITING"
    FEAR_COERCION = "FEAR_COERCION"
    MALWARE_DISTRIBUTION = "MALWARE_DISTRIBUTION"
    SOCIAL_ENGINEERING = "SOCIAL_ENGINEERING"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def coerce(cls, value: Any) -> "AttackCategory":
        """Map an upstream value onto the closed set, UNKNOWN when unrecognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            try:
                return cls(key)
            except ValueError:
                pass
        return cls.UNKNOWN

    @property
    def is_known(self) -> bool:
        return self not in (AttackCategory.NONE, AttackCategory.UNKNOWN)

    @property
    def display_name(self) -> str:
        return self.value.lower().replace("_", " ")


class UrgencyLevel(str, Enum):
    """Urgency level detected by the semantic layer."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def coerce(cls, value: Any) -> "UrgencyLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return cls.NONE


class InputType(str, Enum):
    """Kind of input submitted for a scan."""

    URL = "URL"
    EMAIL = "EMAIL"
    TEXT = "TEXT"
