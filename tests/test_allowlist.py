"""Test suite for allowlist normalization and membership."""

import pytest

from fragword.verifiers import Allowlist, Run, normalize_word, is_valid, are_all_valid


class TestNormalizeWord:
    """Test cases for word normalization."""

    def test_trims_and_lowercases(self):
        """Surrounding whitespace is trimmed and case folded."""
        assert normalize_word("  Cat ") == "cat"

    @pytest.mark.parametrize("raw", ["c4t", "it's", "ice cream", "", "   ", "-"])
    def test_rejects_non_letters(self, raw):
        """Anything other than letters normalizes to the empty string."""
        assert normalize_word(raw) == ""

    def test_rejects_non_strings(self):
        """Non-string input never raises."""
        assert normalize_word(None) == ""
        assert normalize_word(42) == ""


class TestBuild:
    """Test cases for building an allowlist."""

    def test_malformed_entries_are_dropped(self):
        """Entries failing normalization are silently dropped."""
        allow = Allowlist.build(["Cat", " dog ", "c4t", "", "  ", "it's"])
        assert allow.words() == ["cat", "dog"]

    def test_duplicates_collapse(self):
        """Case and whitespace variants collapse to one entry."""
        allow = Allowlist.build(["cat", "CAT", " Cat"])
        assert len(allow) == 1

    def test_empty_list(self):
        """An empty word list builds an empty allowlist."""
        allow = Allowlist.build([])
        assert len(allow) == 0
        assert not allow.contains("a")


class TestContains:
    """Test cases for membership tests."""

    def setup_method(self):
        self.allow = Allowlist.build(["cat", "a", "ago"])

    def test_normalizes_query(self):
        """Queries are normalized like the list."""
        assert self.allow.contains("CAT")
        assert self.allow.contains(" cat ")
        assert "Ago" in self.allow

    def test_missing_word(self):
        """Unknown words are not members."""
        assert not self.allow.contains("dog")

    def test_malformed_query(self):
        """Malformed input is simply not found."""
        assert not self.allow.contains("")
        assert not self.allow.contains("c a t")
        assert not self.allow.contains(None)

    def test_contains_all_runs(self):
        """Every run text must be a member."""
        good = [Run("cat", 0, 0, 'H', 2), Run("a", 1, 1, 'V', 1)]
        bad = good + [Run("az", 0, 1, 'V', 2)]
        assert self.allow.contains_all_runs(good)
        assert not self.allow.contains_all_runs(bad)
        assert self.allow.contains_all_runs([])

    def test_helpers(self):
        """Module-level helpers delegate to the allowlist."""
        assert is_valid("cat", self.allow)
        assert not are_all_valid([Run("dog", 0, 0, 'H', 2)], self.allow)


class TestMutation:
    """Test cases for adding and removing words."""

    def test_add_and_remove(self):
        """Words can be added and removed, normalized either way."""
        allow = Allowlist.build(["cat"])
        allow.add("DOG").add(["emu", "3x"])
        assert allow.words() == ["cat", "dog", "emu"]
        allow.remove(["Cat", "nope"])
        assert allow.words() == ["dog", "emu"]
