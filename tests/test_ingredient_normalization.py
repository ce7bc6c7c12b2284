"""Unit tests for ingredient identity normalization."""

from mealplanner.normalize import (
    NormalizationKey,
    normalization_key,
    normalize_for_matching,
    normalize_text,
)


class TestNormalizationKey:
    """Tests for the grocery aggregation key."""

    def test_trims_and_lowercases(self):
        """Name and unit are trimmed and lower-cased."""
        assert normalization_key("  Tomato ", " Cup") == NormalizationKey("tomato", "cup")

    def test_missing_unit_stays_none(self):
        """A missing unit is not turned into an empty string."""
        key = normalization_key("Salt", None)
        assert key.unit is None
        assert key != normalization_key("Salt", "")

    def test_no_plural_stripping(self):
        """Plural units and names are distinct keys."""
        assert normalization_key("egg", "cup") != normalization_key("eggs", "cups")

    def test_normalize_text(self):
        assert normalize_text("\tOlive Oil \n") == "olive oil"


class TestNormalizeForMatching:
    """Tests for the looser recommendation matching form."""

    def test_ies_becomes_y(self):
        assert normalize_for_matching("Berries") == "berry"

    def test_es_is_stripped(self):
        assert normalize_for_matching("tomatoes") == "tomato"

    def test_trailing_s_is_stripped(self):
        assert normalize_for_matching(" Carrots ") == "carrot"

    def test_double_s_is_kept(self):
        assert normalize_for_matching("grass") == "grass"

    def test_singular_unchanged(self):
        assert normalize_for_matching("Onion") == "onion"

    def test_es_rule_is_naive(self):
        """The "es" rule applies to any word ending in "es", so "cheeses" misses "cheese"."""
        assert normalize_for_matching("cheeses") == "chees"
        assert normalize_for_matching("cheese") == "cheese"
