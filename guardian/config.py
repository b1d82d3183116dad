"""Configuration management for Guardian."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_BRANDS,
    DEFAULT_HOMOGLYPHS,
    DEFAULT_SUSPICIOUS_KEYWORDS,
    DEFAULT_SUSPICIOUS_TLDS,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class HeuristicTables:
    """Lookup tables consumed by feature extraction and scoring.

    Built once at startup and shared by reference; every container is
    immutable so extractors and scorers stay safe to call concurrently.
    """

    brands: tuple[str, ...] = DEFAULT_BRANDS
    suspicious_keywords: tuple[str, ...] = DEFAULT_SUSPICIOUS_KEYWORDS
    suspicious_tlds: frozenset[str] = DEFAULT_SUSPICIOUS_TLDS
    homoglyphs: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_HOMOGLYPHS))
    )

    @classmethod
    def default(cls) -> "HeuristicTables":
        return cls()

    @classmethod
    def build(
        cls,
        brands=None,
        suspicious_keywords=None,
        suspicious_tlds=None,
        homoglyphs=None,
    ) -> "HeuristicTables":
        """Build tables from plain collections, falling back to defaults."""
        return cls(
            brands=tuple(b.lower() for b in brands) if brands else DEFAULT_BRANDS,
            suspicious_keywords=(
                tuple(k.lower() for k in suspicious_keywords)
                if suspicious_keywords
                else DEFAULT_SUSPICIOUS_KEYWORDS
            ),
            suspicious_tlds=(
                frozenset(t.lower().lstrip(".") for t in suspicious_tlds)
                if suspicious_tlds
                else DEFAULT_SUSPICIOUS_TLDS
            ),
            homoglyphs=MappingProxyType(
                {sub: tuple(canon) for sub, canon in homoglyphs.items()}
                if homoglyphs
                else dict(DEFAULT_HOMOGLYPHS)
            ),
        )


@dataclass
class Config:
    """Application configuration loaded from environment."""

    log_level: str = "INFO"
    config_dir: Path = field(default_factory=lambda: Path("./config"))

    # Signal sources
    enable_ml: bool = True
    enable_llm: bool = True
    enable_threat_intel: bool = True

    # Email analysis
    email_max_url_scans: int = 5

    tables: HeuristicTables = field(default_factory=HeuristicTables.default)

    def __post_init__(self):
        self.config_dir = Path(self.config_dir)
        self.log_level = (self.log_level or "INFO").upper()


def _load_heuristics(config_dir: Path) -> dict:
    """Load table overrides from config/heuristics.yaml (optional)."""
    path = Path(config_dir or ".") / "heuristics.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse heuristics.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring heuristics.yaml: expected a mapping, got %s", type(data).__name__)
        return {}

    def _coerce_strings(raw) -> list[str]:
        items: list[str] = []
        for entry in raw or []:
            if not isinstance(entry, (str, int)):
                continue
            value = str(entry).strip().lower()
            if value:
                items.append(value)
        return items

    def _coerce_homoglyphs(raw) -> dict[str, tuple[str, ...]]:
        table: dict[str, tuple[str, ...]] = {}
        if not isinstance(raw, dict):
            return table
        for sub, canon in raw.items():
            sub = str(sub)
            if len(sub) != 1:
                continue
            if isinstance(canon, str):
                canon = [canon]
            letters = tuple(str(c).lower() for c in canon or [] if str(c).strip())
            if letters:
                table[sub] = letters
        return table

    overrides = {
        "brands": _coerce_strings(data.get("brands")),
        "suspicious_keywords": _coerce_strings(data.get("suspicious_keywords")),
        "suspicious_tlds": _coerce_strings(data.get("suspicious_tlds")),
        "homoglyphs": _coerce_homoglyphs(data.get("homoglyphs")),
    }
    loaded = {key: value for key, value in overrides.items() if value}
    if loaded:
        logger.info("Loaded heuristic overrides from %s: %s", path, sorted(loaded))
    return loaded


def load_tables(config_dir: Optional[Path] = None) -> HeuristicTables:
    """Build heuristic tables, applying config/heuristics.yaml when present."""
    return HeuristicTables.build(**_load_heuristics(Path(config_dir or "./config")))


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def load_config() -> Config:
    """Load configuration from environment variables."""
    load_dotenv()

    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))
    return Config(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        config_dir=config_dir,
        enable_ml=_env_flag("ENABLE_ML"),
        enable_llm=_env_flag("ENABLE_LLM"),
        enable_threat_intel=_env_flag("ENABLE_THREAT_INTEL"),
        email_max_url_scans=int(os.getenv("EMAIL_MAX_URL_SCANS", "5")),
        tables=load_tables(config_dir),
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []
    if config.log_level not in LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {config.log_level!r}")
    if not (config.enable_ml or config.enable_llm or config.enable_threat_intel):
        errors.append("At least one of ENABLE_ML, ENABLE_LLM, ENABLE_THREAT_INTEL must be true")
    if config.email_max_url_scans <= 0:
        errors.append("EMAIL_MAX_URL_SCANS must be positive")
    if not config.tables.brands:
        errors.append("Brand table is empty")
    return errors


def configure_logging(level: str = "INFO") -> None:
    """Install the process-wide log format. Call once from the host at startup."""
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
