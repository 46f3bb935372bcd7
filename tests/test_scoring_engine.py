"""
Unit tests for the crop suitability scoring engine
"""

import pytest

from conftest import make_snapshot
from cropfit.core.errors import InsufficientInputData, InvalidInput
from cropfit.models.crop import CropProfile, Season, WaterRequirement
from cropfit.models.crop_history import HistoricalRecord, QualityGrade
from cropfit.models.crop_recommendation import RiskLevel
from cropfit.models.environment import SoilTexture
from cropfit.services import scoring_engine
from cropfit.services.crop_knowledge_base import (
    CROP_KNOWLEDGE_BASE,
    GENERIC_BEST_PRACTICES,
    get_crop_profile,
)


def _record(crop, yield_per_hectare=None, quality=None, year=2023):
    return HistoricalRecord(
        farmer_id="farmer-1",
        crop_name=crop,
        season=Season.RABI,
        year=year,
        yield_per_hectare=yield_per_hectare,
        quality=quality,
    )


def _by_crop(recommendations):
    return {rec.crop: rec for rec in recommendations}


class TestEndToEndScenario:
    """Rabi season at Ludhiana with loamy, near-neutral soil."""

    def test_wheat_scores_full_marks(self):
        snapshot = make_snapshot(soil_ph=6.8, humidity=65, temperature=20, organic_matter=3.5)

        result = scoring_engine.score(snapshot, "rabi", 2, [])
        wheat = _by_crop(result)["Wheat"]

        assert wheat.suitability == 100
        assert wheat.expected_yield == 4.25
        assert wheat.variety == "Durum"
        assert wheat.profitability == 113000
        assert wheat.risk_level == RiskLevel.LOW

    def test_ties_keep_knowledge_base_order(self):
        result = scoring_engine.score(make_snapshot(), Season.RABI, 2, [])

        assert [rec.crop for rec in result] == ["Wheat", "Corn", "Barley", "Mustard", "Gram"]
        assert all(rec.suitability == 100 for rec in result)


class TestSeasonFilter:
    @pytest.mark.parametrize("season", list(Season))
    def test_only_season_eligible_crops_are_returned(self, season):
        result = scoring_engine.score(make_snapshot(), season, 1.5, [])

        eligible = {crop.name for crop in CROP_KNOWLEDGE_BASE if season in crop.seasons}
        assert {rec.crop for rec in result} <= eligible
        assert len(result) == len(eligible)

    def test_no_matching_crop_gives_empty_list(self):
        wheat = get_crop_profile("wheat")

        result = scoring_engine.score(make_snapshot(), "kharif", 1, [], knowledge_base=(wheat,))

        assert result == []


class TestSuitability:
    def test_kharif_ranking(self):
        snapshot = make_snapshot(temperature=30, humidity=65)

        result = scoring_engine.score(snapshot, "kharif", 2, [])

        assert [(rec.crop, rec.suitability) for rec in result] == [
            ("Corn", 100),
            ("Soybean", 100),
            ("Moong", 100),
            ("Rice", 90),
            ("Cotton", 75),
        ]

    def test_all_factors_missed(self):
        rice = get_crop_profile("Rice")
        snapshot = make_snapshot(
            soil_texture=SoilTexture.SANDY, temperature=5, humidity=40, soil_ph=8.2
        )

        assert scoring_engine.suitability_score(rice, snapshot, 0.5) == 15 + 10 + 10 + 8 + 5

    def test_temperature_range_is_inclusive(self):
        wheat = get_crop_profile("Wheat")

        assert scoring_engine.suitability_score(wheat, make_snapshot(temperature=15), 2) == 100
        assert scoring_engine.suitability_score(wheat, make_snapshot(temperature=25), 2) == 100
        assert scoring_engine.suitability_score(wheat, make_snapshot(temperature=25.1), 2) == 85

    def test_ph_range_is_inclusive(self):
        wheat = get_crop_profile("Wheat")

        assert scoring_engine.suitability_score(wheat, make_snapshot(soil_ph=6.0), 2) == 100
        assert scoring_engine.suitability_score(wheat, make_snapshot(soil_ph=7.5), 2) == 100
        assert scoring_engine.suitability_score(wheat, make_snapshot(soil_ph=7.6), 2) == 93

    @pytest.mark.parametrize(
        "requirement,humidity,expected",
        [
            (WaterRequirement.HIGH, 71, 20),
            (WaterRequirement.HIGH, 70, 10),
            (WaterRequirement.MEDIUM, 51, 20),
            (WaterRequirement.MEDIUM, 50, 10),
            (WaterRequirement.LOW, 5, 20),
        ],
    )
    def test_water_sub_score(self, requirement, humidity, expected):
        crop = get_crop_profile("Wheat").model_copy(update={"water_requirement": requirement})

        total = scoring_engine.suitability_score(crop, make_snapshot(humidity=humidity), 2)

        assert total == 80 + expected

    def test_small_farm_gets_half_size_weight(self):
        wheat = get_crop_profile("Wheat")

        assert scoring_engine.suitability_score(wheat, make_snapshot(), 0.99) == 95
        assert scoring_engine.suitability_score(wheat, make_snapshot(), 1) == 100

    def test_scores_always_within_bounds(self):
        for texture in SoilTexture:
            for temperature in (-5, 12, 28, 45):
                for humidity in (10, 55, 90):
                    for ph in (4.5, 6.5, 9.0):
                        snapshot = make_snapshot(
                            soil_texture=texture,
                            temperature=temperature,
                            humidity=humidity,
                            soil_ph=ph,
                        )
                        for season in Season:
                            for rec in scoring_engine.score(snapshot, season, 0.4, []):
                                assert 0 <= rec.suitability <= 100


class TestSorting:
    def test_sorted_descending(self):
        snapshot = make_snapshot(temperature=33, humidity=45, soil_texture=SoilTexture.CLAY)

        result = scoring_engine.score(snapshot, "kharif", 3, [])
        scores = [rec.suitability for rec in result]

        assert scores == sorted(scores, reverse=True)

    def test_stable_for_equal_scores(self):
        base = get_crop_profile("Wheat")
        crops = tuple(base.model_copy(update={"name": name}) for name in ("Zeta", "Alpha", "Mid"))

        result = scoring_engine.score(make_snapshot(), "rabi", 2, [], knowledge_base=crops)

        assert [rec.crop for rec in result] == ["Zeta", "Alpha", "Mid"]


class TestExpectedYield:
    def test_no_adjustments(self):
        wheat = get_crop_profile("Wheat")
        snapshot = make_snapshot(soil_ph=8.0, humidity=55, organic_matter=2.0)

        assert scoring_engine.expected_yield(wheat, snapshot) == 3.2

    def test_history_is_averaged_with_adjusted_baseline(self):
        wheat = get_crop_profile("Wheat")
        history = [
            _record("Wheat", 5.0),
            _record("wheat", 3.0, year=2022),
            _record("Wheat", None, year=2021),
            _record("Rice", 9.0),
        ]

        # (4.2504 + 4.0) / 2
        assert scoring_engine.expected_yield(wheat, make_snapshot(), history) == 4.13

    def test_history_without_yields_is_ignored(self):
        wheat = get_crop_profile("Wheat")

        result = scoring_engine.expected_yield(wheat, make_snapshot(), [_record("Wheat")])

        assert result == 4.25


class TestProfitability:
    def test_negative_profit_is_reported(self):
        assert scoring_engine.profitability(1, 1, 100, 5000) == -4900

    def test_rounds_to_whole_units(self):
        assert scoring_engine.profitability(1.333, 1, 1000, 0) == 1333
        assert scoring_engine.profitability(2.5, 1, 1, 0) == 3

    def test_loss_making_crop_stays_in_output(self):
        loss_crop = CropProfile(
            name="Saffron Trial",
            varieties=("Kashmiri",),
            water_requirement=WaterRequirement.LOW,
            soil_preference=(SoilTexture.LOAMY,),
            temperature_range=(0, 30),
            seasons=(Season.RABI,),
            profit_margin=0.1,
            base_yield=0.01,
            market_price=100,
            production_cost=5000,
        )

        result = scoring_engine.score(
            make_snapshot(soil_ph=8.0, humidity=40, organic_matter=1.0),
            "rabi",
            1,
            [],
            knowledge_base=(loss_crop,),
        )

        assert len(result) == 1
        assert result[0].profitability == -4999


class TestRisk:
    @pytest.mark.parametrize(
        "score,level",
        [
            (0, RiskLevel.LOW),
            (1, RiskLevel.MEDIUM),
            (2, RiskLevel.MEDIUM),
            (3, RiskLevel.HIGH),
            (4, RiskLevel.HIGH),
        ],
    )
    def test_thresholds(self, score, level):
        assert scoring_engine.risk_level(score) == level

    def test_score_zero(self):
        wheat = get_crop_profile("Wheat")
        assert scoring_engine.risk_score(wheat, make_snapshot(), []) == 0

    def test_score_one_volatile_crop(self):
        soybean = get_crop_profile("Soybean")
        assert scoring_engine.risk_score(soybean, make_snapshot(), []) == 1

    def test_score_two_heat_stress(self):
        wheat = get_crop_profile("Wheat")
        snapshot = make_snapshot(temperature=40)

        assert scoring_engine.risk_score(wheat, snapshot, []) == 2
        result = _by_crop(scoring_engine.score(snapshot, "rabi", 2, []))
        assert result["Wheat"].risk_level == RiskLevel.MEDIUM

    def test_score_three_cold_and_volatile(self):
        soybean = get_crop_profile("Soybean")
        assert scoring_engine.risk_score(soybean, make_snapshot(temperature=9), []) == 3

    def test_score_four_heat_and_poor_history(self):
        wheat = get_crop_profile("Wheat")
        history = [_record("Wheat", 2.0, QualityGrade.POOR), _record("Wheat", 3.0, QualityGrade.GOOD)]

        assert scoring_engine.risk_score(wheat, make_snapshot(temperature=40), history) == 4

    def test_score_five_is_high(self):
        history = [
            _record("Cotton", 1.0, QualityGrade.POOR),
            _record("Cotton", 1.2, QualityGrade.POOR, year=2022),
        ]
        snapshot = make_snapshot(temperature=40)

        cotton = get_crop_profile("Cotton")
        assert scoring_engine.risk_score(cotton, snapshot, history) == 5
        result = _by_crop(scoring_engine.score(snapshot, "kharif", 2, history))
        assert result["Cotton"].risk_level == RiskLevel.HIGH

    def test_poor_share_must_exceed_thirty_percent(self):
        wheat = get_crop_profile("Wheat")
        history = [_record("Wheat", 3.0, QualityGrade.POOR, year=2010 + i) for i in range(3)]
        history += [_record("Wheat", 3.0, QualityGrade.GOOD, year=2013 + i) for i in range(7)]

        assert scoring_engine.risk_score(wheat, make_snapshot(), history) == 0

    def test_volatile_set_is_configurable(self):
        wheat = get_crop_profile("Wheat")
        soybean = get_crop_profile("Soybean")

        assert scoring_engine.risk_score(wheat, make_snapshot(), [], ["Wheat"]) == 1
        assert scoring_engine.risk_score(soybean, make_snapshot(), [], ["Wheat"]) == 0


class TestReasonsAndPractices:
    def test_all_reasons_in_order(self):
        result = _by_crop(scoring_engine.score(make_snapshot(), "rabi", 2, []))

        assert result["Wheat"].reasons == [
            "Excellent soil compatibility with loamy soil",
            "Favorable humidity levels for growth",
            "High overall suitability score based on environmental factors",
        ]

    def test_no_reasons_when_conditions_fail(self):
        snapshot = make_snapshot(soil_texture=SoilTexture.SANDY, humidity=40)

        result = _by_crop(scoring_engine.score(snapshot, "kharif", 2, []))

        assert result["Rice"].suitability == 75
        assert result["Rice"].reasons == []

    def test_best_practices_lookup_and_fallback(self):
        result = _by_crop(scoring_engine.score(make_snapshot(), "rabi", 2, []))

        assert result["Wheat"].best_practices[0] == "Sow at optimal time (November-December)"
        assert result["Barley"].best_practices == GENERIC_BEST_PRACTICES


class TestInputsAndDeterminism:
    def test_missing_snapshot(self):
        with pytest.raises(InsufficientInputData):
            scoring_engine.score(None, "rabi", 2, [])

    @pytest.mark.parametrize("season", ["monsoon", "", "RABI"])
    def test_unknown_season(self, season):
        with pytest.raises(InvalidInput):
            scoring_engine.score(make_snapshot(), season, 2, [])

    @pytest.mark.parametrize("size", [0, -1, float("nan"), float("inf")])
    def test_bad_farm_size(self, size):
        with pytest.raises(InvalidInput):
            scoring_engine.score(make_snapshot(), "rabi", size, [])

    def test_identical_inputs_give_identical_output(self):
        snapshot = make_snapshot(temperature=31, humidity=72)
        history = [_record("Rice", 4.0, QualityGrade.POOR)]

        first = scoring_engine.score(snapshot, "kharif", 1.7, history)
        second = scoring_engine.score(snapshot, "kharif", 1.7, history)

        assert [rec.model_dump_json() for rec in first] == [
            rec.model_dump_json() for rec in second
        ]

    def test_history_is_not_mutated(self):
        history = [_record("Wheat", 3.0, QualityGrade.POOR)]
        before = [record.model_dump() for record in history]

        scoring_engine.score(make_snapshot(), "rabi", 2, history)

        assert [record.model_dump() for record in history] == before
