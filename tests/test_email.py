"""Tests for email analysis."""

import pytest

from conftest import make_llm_result
from guardian.analyzer.email import (
    EmailAnalysisRequest,
    analyse_email,
    detect_header_anomalies,
    detect_spoofing_indicators,
)
from guardian.analyzer.threat_intel import ThreatIntelResult
from guardian.config import Config, HeuristicTables
from guardian.enums import InputType, RiskTier

LURE_URL = "https://paypa1-secure.tk/login"
HELP_URL = "http://example.com/help"


@pytest.fixture
def phishing_email() -> EmailAnalysisRequest:
    return EmailAnalysisRequest(
        subject="URGENT: Your account has been suspended",
        sender="PayPal Support <alerts@gmail.com>",
        body=(
            "Dear customer,\n\n"
            "We noticed unusual activity on your PayPal account. "
            f"Please verify your identity at {LURE_URL}. "
            f"You can also read {HELP_URL}.\n\n"
            "Act now!!!!!!"
        ),
        attachments=("invoice.pdf",),
    )


class TestSpoofingIndicators:
    def test_phishing_cues(self, phishing_email):
        indicators = detect_spoofing_indicators(
            phishing_email.sender, phishing_email.body, phishing_email.subject
        )
        assert indicators == [
            "Urgency cue in subject line",
            "Credential request language detected in body",
            "Generic/impersonal greeting (not addressed by name)",
            "Impersonation: brand name in body but email from free provider",
            "Excessive exclamation marks (urgency manipulation)",
        ]

    def test_plain_email(self):
        indicators = detect_spoofing_indicators(
            "Alice <alice@example.com>", "Hi Bob, lunch on Friday?", "Lunch"
        )
        assert indicators == []

    def test_reply_to_mismatch(self):
        indicators = detect_spoofing_indicators(
            "billing@example.com", "Please reply to accounts@other.net with details.", "Invoice"
        )
        assert "Reply-To address mismatch detected" in indicators


class TestHeaderAnomalies:
    def test_brand_display_name_on_free_mail(self):
        anomalies = detect_header_anomalies("PayPal Support <alerts@gmail.com>")
        assert anomalies == ['Display name "PayPal Support" does not match actual sending domain']

    def test_brand_display_name_on_brand_domain(self):
        assert detect_header_anomalies("PayPal <service@paypal.com>") == []

    def test_brand_subdomain_sender(self):
        assert detect_header_anomalies("Amazon <no-reply@mail.amazon.co.uk>") == []

    def test_invalid_sender(self):
        assert detect_header_anomalies("paypal") == ["Invalid sender format"]


class TestAnalyseEmail:
    def test_extracts_and_scores_links(self, phishing_email):
        result = analyse_email(phishing_email)
        assert result.email_metadata.extracted_urls == (LURE_URL, HELP_URL)
        assert [item.input for item in result.url_results] == [LURE_URL, HELP_URL]
        assert result.url_results[0].fusion.unified_risk_score == 63
        assert result.url_results[0].input_type is InputType.URL
        assert result.email_metadata.attachment_count == 1

    def test_link_lifts_email_score(self, phishing_email):
        result = analyse_email(phishing_email)
        # no semantic verdict: email score 0, worst link 63
        assert result.fusion.unified_risk_score == 32
        assert result.fusion.tier is RiskTier.SAFE

    def test_malicious_link_floor(self, phishing_email):
        intel = {LURE_URL: ThreatIntelResult(known_malicious=True, reputation_score=10, sources=("VirusTotal",))}
        result = analyse_email(phishing_email, url_intel=intel)
        assert result.url_results[0].fusion.unified_risk_score == 90
        assert result.fusion.unified_risk_score == 70
        assert result.fusion.tier is RiskTier.HIGH_RISK
        assert result.fusion.recommendation.startswith("Exercise extreme caution")

    def test_semantic_verdict_dominates(self, phishing_email):
        semantic = make_llm_result(90, "CREDENTIAL_HARVESTING", confidence=0.9)
        result = analyse_email(phishing_email, semantic=semantic)
        assert result.fusion.unified_risk_score == 90
        assert result.fusion.tier is RiskTier.CONFIRMED_PHISHING
        assert "credential harvesting" in result.fusion.recommendation
        assert result.scan.llm is semantic

    def test_max_url_scans(self, phishing_email):
        result = analyse_email(phishing_email, max_url_scans=1)
        assert len(result.url_results) == 1
        assert len(result.email_metadata.extracted_urls) == 2

    def test_explicit_urls(self, phishing_email):
        request = EmailAnalysisRequest(
            subject=phishing_email.subject,
            sender=phishing_email.sender,
            body=phishing_email.body,
            extracted_urls=(HELP_URL,),
        )
        result = analyse_email(request)
        assert [item.input for item in result.url_results] == [HELP_URL]

    def test_no_links(self):
        request = EmailAnalysisRequest(subject="Lunch", sender="alice@example.com", body="Friday?")
        result = analyse_email(request)
        assert result.url_results == ()
        assert result.fusion.unified_risk_score == 0
        assert result.fusion.tier is RiskTier.SAFE

    def test_scan_envelope(self, phishing_email):
        result = analyse_email(phishing_email)
        assert result.scan.input_type is InputType.EMAIL
        assert result.scan.input.startswith("Subject: URGENT")
        assert result.scan.scan_id != result.url_results[0].scan_id

    def test_long_email_input_is_truncated(self):
        request = EmailAnalysisRequest(subject="Hi", sender="a@example.com", body="x" * 2000)
        assert len(analyse_email(request).scan.input) == 500

    def test_to_dict(self, phishing_email):
        data = analyse_email(phishing_email).to_dict()
        assert data["input_type"] == "EMAIL"
        assert data["email_metadata"]["sender"] == phishing_email.sender
        assert len(data["url_results"]) == 2
        assert data["url_results"][0]["ml"]["risk_score"] == 63
        assert data["llm"] is None


class TestAnalyseEmailWithConfig:
    def test_link_budget_from_config(self, phishing_email):
        result = analyse_email(phishing_email, config=Config(email_max_url_scans=1))
        assert len(result.url_results) == 1

    def test_explicit_budget_wins(self, phishing_email):
        result = analyse_email(phishing_email, max_url_scans=2, config=Config(email_max_url_scans=1))
        assert len(result.url_results) == 2

    def test_tables_from_config(self, phishing_email):
        config = Config(tables=HeuristicTables.build(brands=["contoso"]))
        result = analyse_email(phishing_email, config=config)
        assert "Homoglyph brand impersonation detected" not in result.url_results[0].ml.indicators

    def test_disabled_semantic_layer(self, phishing_email):
        semantic = make_llm_result(90, "CREDENTIAL_HARVESTING")
        result = analyse_email(phishing_email, semantic=semantic, config=Config(enable_llm=False))
        # only the lifted link score remains
        assert result.fusion.unified_risk_score == 32
