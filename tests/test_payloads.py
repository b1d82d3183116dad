"""Tests for upstream payload helpers."""

from guardian.utils.payloads import pick, string_tuple


class TestPick:
    def test_first_present_key_wins(self):
        payload = {"reputationScore": 40, "reputation_score": 90}
        assert pick(payload, "reputationScore", "reputation_score") == 40
        assert pick(payload, "reputation_score", "reputationScore") == 90

    def test_present_none_is_returned(self):
        assert pick({"ageInDays": None}, "ageInDays", "age_in_days", default=7) is None

    def test_default(self):
        assert pick({}, "a", "b") is None
        assert pick({}, "a", default=False) is False


class TestStringTuple:
    def test_list(self):
        assert string_tuple(["a", 1, None]) == ("a", "1")

    def test_non_sequence(self):
        assert string_tuple("abc") == ()
        assert string_tuple(None) == ()
