"""party モジュールのユニットテスト."""

import pytest

from ffmeta.assembler import assemble
from ffmeta.models import JobRecord
from ffmeta.party import PartyError, estimate_party, validate_party

BOSS_URL = "https://www.fflogs.com/zone/statistics/68?class=Any&dataset=50&boss=97"

ROWS = [
    JobRecord("Black Mage", "31,000", "1"),
    JobRecord("Samurai", "30,000", "1"),
    JobRecord("Dragoon", "29,000", "1"),
    JobRecord("Machinist", "28,000", "1"),
    JobRecord("Dark Knight", "24,000", "1"),
    JobRecord("Gunbreaker", "24,000", "1"),
    JobRecord("White Mage", "18,000", "1"),
    JobRecord("Scholar", "17,000", "1"),
]
STANDARD_PARTY = [
    "Dark Knight", "gunbreaker", "White Mage", "Scholar",
    "Black Mage", "Samurai", "Dragoon", "Machinist",
]
TOTAL = 201_000


@pytest.fixture
def boss_result():
    return assemble(68, "Brute Abominator", ROWS, boss_id=97, url=BOSS_URL)


class TestEstimateParty:
    """estimate_party のテスト."""

    def test_meets_threshold(self, boss_result):
        estimate = estimate_party(boss_result, STANDARD_PARTY, TOTAL)

        assert estimate.total_dps == TOTAL
        assert estimate.meets
        assert estimate.standard
        assert estimate.members[1].job == "Gunbreaker"

    def test_below_threshold(self, boss_result):
        body = estimate_party(boss_result, STANDARD_PARTY, "210000").to_dict()

        assert body["meets"] is False
        assert body["margin"] == -9_000
        assert body["roles"] == {"melee": 2, "caster": 1, "ranged": 1, "tank": 2, "healer": 2}

    def test_non_standard_composition(self, boss_result):
        party = ["Samurai"] * 6 + ["White Mage", "Scholar"]
        estimate = estimate_party(boss_result, party, 1)

        assert not estimate.standard
        assert estimate.total_dps == 6 * 30_000 + 35_000

    def test_wrong_size(self, boss_result):
        with pytest.raises(PartyError, match="exactly 8"):
            estimate_party(boss_result, STANDARD_PARTY[:7], TOTAL)

    def test_unknown_job(self, boss_result):
        party = STANDARD_PARTY[:7] + ["Bard"]
        with pytest.raises(PartyError, match="Bard"):
            estimate_party(boss_result, party, TOTAL)

    @pytest.mark.parametrize("threshold", [0, -5, "abc", None, "nan", "inf", float("-inf")])
    def test_invalid_threshold(self, boss_result, threshold):
        with pytest.raises(PartyError):
            estimate_party(boss_result, STANDARD_PARTY, threshold)

    def test_zone_result_rejected(self):
        result = assemble(68, "", ROWS, url="https://www.fflogs.com/zone/statistics/68?class=Any&dataset=50")
        with pytest.raises(PartyError, match="boss-specific"):
            estimate_party(result, STANDARD_PARTY, TOTAL)


class TestValidateParty:
    """validate_party のテスト (結果データに依存しない検査)."""

    def test_valid(self):
        jobs, threshold = validate_party(list(STANDARD_PARTY), "20000")

        assert jobs == list(STANDARD_PARTY)
        assert threshold == 20_000.0

    def test_jobs_not_list(self):
        with pytest.raises(PartyError, match="jobs must be a list"):
            validate_party(None, 1)

    def test_wrong_size(self):
        with pytest.raises(PartyError, match="exactly 8"):
            validate_party(list(STANDARD_PARTY)[:7], 1)

    @pytest.mark.parametrize("threshold", ["nan", "inf", "-inf"])
    def test_non_finite_threshold(self, threshold):
        with pytest.raises(PartyError, match="Invalid threshold"):
            validate_party(list(STANDARD_PARTY), threshold)
