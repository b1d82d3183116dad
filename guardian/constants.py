"""Default heuristic tables for Guardian.

These are the built-in values; config/heuristics.yaml can override any of them
without touching code (see guardian.config).
"""

MODEL_VERSION = "1.0.0"

# TLDs that correlate with abuse (free/cheap registrations, bulk registrars)
DEFAULT_SUSPICIOUS_TLDS: frozenset[str] = frozenset(
    {
        "tk",
        "ml",
        "ga",
        "cf",
        "gq",
        "pw",
        "cc",
        "xyz",
        "top",
        "club",
        "online",
        "site",
        "website",
        "store",
        "tech",
        "info",
        "biz",
        "work",
        "rest",
        "kim",
        "country",
        "stream",
        "download",
        "racing",
        "review",
        "trade",
        "accountant",
        "science",
        "date",
        "faith",
        "loan",
    }
)

DEFAULT_SUSPICIOUS_KEYWORDS: tuple[str, ...] = (
    "login",
    "signin",
    "sign-in",
    "account",
    "verify",
    "verification",
    "secure",
    "security",
    "update",
    "confirm",
    "password",
    "credential",
    "banking",
    "paypal",
    "amazon",
    "apple",
    "microsoft",
    "google",
    "netflix",
    "facebook",
    "instagram",
    "invoice",
    "payment",
    "reset",
    "support",
    "helpdesk",
    "customer",
    "service",
    "wallet",
    "crypto",
    "prize",
    "winner",
    "lucky",
    "free",
    "gift",
    "claim",
    "reward",
)

DEFAULT_BRANDS: tuple[str, ...] = (
    "paypal",
    "amazon",
    "apple",
    "microsoft",
    "google",
    "facebook",
    "instagram",
    "netflix",
    "linkedin",
    "twitter",
    "dropbox",
    "github",
    "gmail",
    "outlook",
    "yahoo",
    "bankofamerica",
    "chase",
    "wellsfargo",
    "citibank",
    "barclays",
    "hsbc",
    "dhl",
    "fedex",
    "ups",
)

# Substitute character -> candidate canonical letters. Ambiguous substitutes
# list every letter they commonly stand in for.
DEFAULT_HOMOGLYPHS: dict[str, tuple[str, ...]] = {
    "0": ("o",),
    "1": ("l", "i"),
    "3": ("e",),
    "4": ("a",),
    "5": ("s",),
    "7": ("t",),
    "9": ("g",),
    "@": ("a",),
    "$": ("s",),
    "+": ("t",),
    "!": ("i",),
    # Cyrillic
    "а": ("a",),
    "е": ("e",),
    "о": ("o",),
    "р": ("p",),
    "с": ("c",),
    "у": ("y",),
    "х": ("x",),
    "ѕ": ("s",),
    "і": ("i",),
    "ј": ("j",),
    "ԁ": ("d",),
    # Greek
    "α": ("a",),
    "ε": ("e",),
    "ι": ("i",),
    "ο": ("o",),
    "ς": ("s",),
    "ɑ": ("a",),
    "ɡ": ("g",),
}
