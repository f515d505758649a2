import pytest

from services.resolution import Resolution, normalize_resolution


@pytest.mark.unit
class TestNormalizeResolution:
    @pytest.mark.parametrize("hint", ["1k", "1K", " 1K ", "1", "1x"])
    def test_one_k_variants(self, hint):
        assert normalize_resolution(hint) is Resolution.ONE_K

    @pytest.mark.parametrize("hint", ["2k", "2K", " 2K ", "2", "2048"])
    def test_two_k_variants(self, hint):
        assert normalize_resolution(hint) is Resolution.TWO_K

    @pytest.mark.parametrize("hint", ["4k", "4K", "\t4K\n", "4", "4x"])
    def test_four_k_variants(self, hint):
        assert normalize_resolution(hint) is Resolution.FOUR_K

    @pytest.mark.parametrize("hint", ["", None, "8K", "K", "hd", "  ", "0.5K"])
    def test_unrecognized_defaults_to_one_k(self, hint):
        assert normalize_resolution(hint) is Resolution.ONE_K

    def test_non_string_hint_is_stringified(self):
        assert normalize_resolution(4) is Resolution.FOUR_K

    def test_value_is_plain_string(self):
        assert normalize_resolution("2k").value == "2K"
        assert normalize_resolution("2k") == "2K"
