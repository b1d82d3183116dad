"""Email analysis built on URL scoring and risk fusion.

Semantic and threat-intel verdicts for the email and its links are supplied
by the caller; nothing here touches the network.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping, Optional

from ..config import Config
from ..enums import InputType
from ..utils.domains import extract_urls, registered_domain
from .fusion import DEFAULT_ENGINE, RiskFusionEngine, build_recommendation, round_half_up, tier_for_score
from .heuristics import DEFAULT_SCORER, HeuristicScorer
from .models import RiskFusionResult, ScanResult
from .semantic import LlmAnalysisResult
from .threat_intel import ThreatIntelResult

logger = logging.getLogger(__name__)

URGENT_SUBJECT_WORDS = (
    "urgent",
    "action required",
    "immediate",
    "suspended",
    "verify now",
    "limited time",
    "alert",
)
CREDENTIAL_PATTERNS = (
    re.compile(r"enter.+password", re.I),
    re.compile(r"confirm.+credential", re.I),
    re.compile(r"provide.+account.+detail", re.I),
    re.compile(r"click.+here.+login", re.I),
    re.compile(r"verify.+identity", re.I),
)
GENERIC_GREETING = re.compile(r"dear (customer|user|member|account ?holder|valued)", re.I)
DISPLAY_NAME_RE = re.compile(r"^(.+?)\s*<([^>]+)>$")
FREE_MAIL_PROVIDERS = ("gmail", "yahoo", "hotmail", "outlook", "proton")
BODY_BRANDS = ("paypal", "amazon", "apple", "microsoft", "google", "netflix", "bank", "chase", "wellsfargo")
DISPLAY_NAME_BRANDS = ("paypal", "amazon", "apple", "google", "microsoft", "netflix", "facebook")
MAX_EXCLAMATIONS = 5
DEFAULT_MAX_URL_SCANS = 5

# Email score lift from its worst link
LINK_LIFT_TRIGGER = 80
LINK_LIFT_FLOOR = 70


@dataclass(frozen=True)
class EmailAnalysisRequest:
    subject: str
    body: str
    sender: str
    recipient_count: Optional[int] = None
    attachments: tuple[str, ...] = ()
    extracted_urls: tuple[str, ...] = ()

    @property
    def full_text(self) -> str:
        return f"Subject: {self.subject}\nFrom: {self.sender}\n\n{self.body}"


@dataclass(frozen=True)
class EmailMetadata:
    subject: str
    sender: str
    extracted_urls: tuple[str, ...] = ()
    attachment_count: int = 0
    spoofing_indicators: tuple[str, ...] = ()
    header_anomalies: tuple[str, ...] = ()


@dataclass(frozen=True)
class EmailAnalysisResult:
    scan: ScanResult
    email_metadata: EmailMetadata
    url_results: tuple[ScanResult, ...] = field(default_factory=tuple)

    @property
    def fusion(self) -> RiskFusionResult:
        return self.scan.fusion

    def to_dict(self) -> dict:
        data = self.scan.to_dict()
        meta = self.email_metadata
        data["email_metadata"] = {
            "subject": meta.subject,
            "sender": meta.sender,
            "extracted_urls": list(meta.extracted_urls),
            "attachment_count": meta.attachment_count,
            "spoofing_indicators": list(meta.spoofing_indicators),
            "header_anomalies": list(meta.header_anomalies),
        }
        data["url_results"] = [item.to_dict() for item in self.url_results]
        return data


def _sender_domain(sender: str) -> str:
    match = DISPLAY_NAME_RE.match(sender.strip())
    address = match.group(2) if match else sender
    return address.rsplit("@", 1)[1].strip().lower() if "@" in address else ""


def detect_spoofing_indicators(sender: str, body: str, subject: str) -> list[str]:
    """Content-level social-engineering cues in an email."""
    indicators: list[str] = []
    body_lower = body.lower()
    sender_domain = _sender_domain(sender)

    if "reply to" in body_lower and (not sender_domain or sender_domain not in body_lower):
        indicators.append("Reply-To address mismatch detected")

    if any(word in subject.lower() for word in URGENT_SUBJECT_WORDS):
        indicators.append("Urgency cue in subject line")

    if any(pattern.search(body) for pattern in CREDENTIAL_PATTERNS):
        indicators.append("Credential request language detected in body")

    if GENERIC_GREETING.search(body):
        indicators.append("Generic/impersonal greeting (not addressed by name)")

    if any(brand in body_lower for brand in BODY_BRANDS) and any(
        provider in sender_domain for provider in FREE_MAIL_PROVIDERS
    ):
        indicators.append("Impersonation: brand name in body but email from free provider")

    if body.count("!") > MAX_EXCLAMATIONS:
        indicators.append("Excessive exclamation marks (urgency manipulation)")

    return indicators


def detect_header_anomalies(sender: str) -> list[str]:
    """Sender-format anomalies such as brand display names on foreign domains."""
    anomalies: list[str] = []
    if "@" not in sender:
        anomalies.append("Invalid sender format")

    match = DISPLAY_NAME_RE.match(sender.strip())
    if match:
        display_name = match.group(1).lower().replace('"', "").replace("'", "")
        sending_domain = registered_domain(match.group(2))
        for brand in DISPLAY_NAME_BRANDS:
            if brand in display_name and brand not in sending_domain:
                anomalies.append(
                    f'Display name "{match.group(1)}" does not match actual sending domain'
                )
                break
    return anomalies


def _lift_for_links(fusion: RiskFusionResult, url_results: list[ScanResult], engine: RiskFusionEngine) -> RiskFusionResult:
    max_url_score = max((item.fusion.unified_risk_score for item in url_results), default=0)
    if max_url_score <= fusion.unified_risk_score:
        return fusion

    lifted = round_half_up((fusion.unified_risk_score + max_url_score) / 2)
    if max_url_score >= LINK_LIFT_TRIGGER and lifted < LINK_LIFT_FLOOR:
        lifted = LINK_LIFT_FLOOR

    s = engine.scoring
    tier = tier_for_score(
        lifted,
        confirmed=s["tier_confirmed"],
        high_risk=s["tier_high_risk"],
        suspicious=s["tier_suspicious"],
    )
    return replace(
        fusion,
        unified_risk_score=lifted,
        tier=tier,
        recommendation=build_recommendation(tier, fusion.attack_category),
    )


def analyse_email(
    request: EmailAnalysisRequest,
    semantic: Optional[LlmAnalysisResult] = None,
    url_semantics: Optional[Mapping[str, LlmAnalysisResult]] = None,
    url_intel: Optional[Mapping[str, ThreatIntelResult]] = None,
    max_url_scans: Optional[int] = None,
    scorer: Optional[HeuristicScorer] = None,
    engine: Optional[RiskFusionEngine] = None,
    config: Optional[Config] = None,
) -> EmailAnalysisResult:
    """Analyse an email and the first ``max_url_scans`` links it carries.

    When ``config`` is given it supplies the link budget, the heuristic tables
    and the enabled sources; explicit ``max_url_scans``/``scorer``/``engine``
    arguments still win.
    """
    started = time.perf_counter()
    if config is not None:
        scorer = scorer or HeuristicScorer.from_config(config)
        engine = engine or RiskFusionEngine.from_config(config)
        if max_url_scans is None:
            max_url_scans = config.email_max_url_scans
    scorer = scorer or DEFAULT_SCORER
    engine = engine or DEFAULT_ENGINE
    if max_url_scans is None:
        max_url_scans = DEFAULT_MAX_URL_SCANS
    url_semantics = url_semantics or {}
    url_intel = url_intel or {}
    scan_id = str(uuid.uuid4())

    logger.info("Email analysis start: %s sender=%s subject=%s", scan_id, request.sender, request.subject[:80])

    urls = list(request.extracted_urls) or extract_urls(request.body)
    spoofing = detect_spoofing_indicators(request.sender, request.body, request.subject)
    anomalies = detect_header_anomalies(request.sender)

    url_results: list[ScanResult] = []
    for url in urls[: max(0, max_url_scans)]:
        url_started = time.perf_counter()
        ml = scorer.analyse(url)
        llm = url_semantics.get(url)
        ti = url_intel.get(url)
        url_results.append(
            ScanResult(
                scan_id=str(uuid.uuid4()),
                input=url,
                input_type=InputType.URL,
                timestamp=datetime.now(timezone.utc).isoformat(),
                fusion=engine.fuse(ml, llm, ti),
                ml=ml,
                llm=llm,
                threat_intel=ti,
                processing_ms=(time.perf_counter() - url_started) * 1000,
            )
        )

    fusion = _lift_for_links(engine.fuse(None, semantic, None), url_results, engine)

    result = EmailAnalysisResult(
        scan=ScanResult(
            scan_id=scan_id,
            input=request.full_text[:500],
            input_type=InputType.EMAIL,
            timestamp=datetime.now(timezone.utc).isoformat(),
            fusion=fusion,
            llm=semantic,
            processing_ms=(time.perf_counter() - started) * 1000,
        ),
        email_metadata=EmailMetadata(
            subject=request.subject,
            sender=request.sender,
            extracted_urls=tuple(urls),
            attachment_count=len(request.attachments),
            spoofing_indicators=tuple(spoofing),
            header_anomalies=tuple(anomalies),
        ),
        url_results=tuple(url_results),
    )
    logger.info(
        "Email analysis done: %s score=%s tier=%s",
        scan_id,
        fusion.unified_risk_score,
        fusion.tier.value,
    )
    return result
