"""
Crop suitability scoring.

Turns an environmental snapshot, a season, a farm size and the farmer's crop
history into a ranked list of crop recommendations. Everything here is a pure
function of its arguments: no I/O, no clock, no randomness, so results can be
recomputed and compared byte for byte.
"""

import math
from typing import Iterable, List, Optional, Sequence, Union

from cropfit.core.config import settings
from cropfit.core.errors import InsufficientInputData, InvalidInput
from cropfit.models.crop import CropProfile, Season, WaterRequirement
from cropfit.models.crop_history import HistoricalRecord, QualityGrade
from cropfit.models.crop_recommendation import CropRecommendation, RiskLevel
from cropfit.models.environment import EnvironmentalSnapshot

from .crop_knowledge_base import CROP_KNOWLEDGE_BASE, get_best_practices

SOIL_WEIGHT = 30
TEMPERATURE_WEIGHT = 25
WATER_WEIGHT = 20
CHEMISTRY_WEIGHT = 15
FARM_SIZE_WEIGHT = 10
MAX_SUITABILITY = 100

# Partial credit awarded when a factor is not met.
SOIL_FALLBACK = 15
TEMPERATURE_FALLBACK = 10
WATER_FALLBACK = 10
CHEMISTRY_FALLBACK = 8
FARM_SIZE_FALLBACK = 5

OPTIMAL_PH = (6.0, 7.5)
MIN_VIABLE_FARM_HECTARES = 1

PH_YIELD_FACTOR = 1.10
HUMIDITY_YIELD_FACTOR = 1.05
ORGANIC_MATTER_YIELD_FACTOR = 1.15
HUMID_THRESHOLD = 60
ORGANIC_MATTER_THRESHOLD = 3

HEAT_STRESS_TEMPERATURE = 35
COLD_STRESS_TEMPERATURE = 10
POOR_HISTORY_SHARE = 0.3
HIGH_RISK_SCORE = 3
MEDIUM_RISK_SCORE = 1

HIGH_SUITABILITY_REASON_THRESHOLD = 80


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _ph_in_range(ph: float) -> bool:
    return OPTIMAL_PH[0] <= ph <= OPTIMAL_PH[1]


def _records_for(crop: CropProfile, history: Iterable[HistoricalRecord]) -> List[HistoricalRecord]:
    name = crop.name.lower()
    return [record for record in history if record.crop_name.lower() == name]


def _water_is_adequate(requirement: WaterRequirement, humidity: float) -> bool:
    if requirement == WaterRequirement.HIGH:
        return humidity > 70
    if requirement == WaterRequirement.MEDIUM:
        return humidity > 50
    return True


def suitability_score(
    crop: CropProfile, snapshot: EnvironmentalSnapshot, farm_size_hectares: float
) -> int:
    score = 0

    if snapshot.soil_texture in crop.soil_preference:
        score += SOIL_WEIGHT
    else:
        score += SOIL_FALLBACK

    low, high = crop.temperature_range
    if low <= snapshot.temperature <= high:
        score += TEMPERATURE_WEIGHT
    else:
        score += TEMPERATURE_FALLBACK

    if _water_is_adequate(crop.water_requirement, snapshot.humidity):
        score += WATER_WEIGHT
    else:
        score += WATER_FALLBACK

    if _ph_in_range(snapshot.soil_ph):
        score += CHEMISTRY_WEIGHT
    else:
        score += CHEMISTRY_FALLBACK

    if farm_size_hectares >= MIN_VIABLE_FARM_HECTARES:
        score += FARM_SIZE_WEIGHT
    else:
        score += FARM_SIZE_FALLBACK

    return min(score, MAX_SUITABILITY)


def expected_yield(
    crop: CropProfile,
    snapshot: EnvironmentalSnapshot,
    history: Sequence[HistoricalRecord] = (),
) -> float:
    """
    Baseline yield adjusted for soil and weather, in tonnes per hectare.

    When the farmer has recorded yields for this crop, the result is the plain
    mean of the adjusted baseline and their average recorded yield.
    """
    value = crop.base_yield
    if _ph_in_range(snapshot.soil_ph):
        value *= PH_YIELD_FACTOR
    if snapshot.humidity > HUMID_THRESHOLD:
        value *= HUMIDITY_YIELD_FACTOR
    if snapshot.organic_matter > ORGANIC_MATTER_THRESHOLD:
        value *= ORGANIC_MATTER_YIELD_FACTOR

    yields = [
        record.yield_per_hectare
        for record in _records_for(crop, history)
        if record.yield_per_hectare is not None
    ]
    if yields:
        value = (value + sum(yields) / len(yields)) / 2

    return _round_half_up(value, 2)


def profitability(
    crop_yield: float, farm_size_hectares: float, market_price: float, production_cost: float
) -> int:
    revenue = crop_yield * farm_size_hectares * market_price
    cost = production_cost * farm_size_hectares
    return int(_round_half_up(revenue - cost))


def risk_score(
    crop: CropProfile,
    snapshot: EnvironmentalSnapshot,
    history: Sequence[HistoricalRecord] = (),
    volatile_crops: Optional[Iterable[str]] = None,
) -> int:
    score = 0

    if (
        snapshot.temperature > HEAT_STRESS_TEMPERATURE
        or snapshot.temperature < COLD_STRESS_TEMPERATURE
    ):
        score += 2

    records = _records_for(crop, history)
    if records:
        poor = sum(1 for record in records if record.quality == QualityGrade.POOR)
        if poor > len(records) * POOR_HISTORY_SHARE:
            score += 2

    if volatile_crops is None:
        volatile_crops = settings.MARKET_VOLATILE_CROPS
    if crop.name.lower() in {name.lower() for name in volatile_crops}:
        score += 1

    return score


def risk_level(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _reasons(crop: CropProfile, snapshot: EnvironmentalSnapshot, suitability: int) -> List[str]:
    reasons = []
    if snapshot.soil_texture in crop.soil_preference:
        reasons.append(f"Excellent soil compatibility with {snapshot.soil_texture.value} soil")
    if snapshot.humidity > HUMID_THRESHOLD:
        reasons.append("Favorable humidity levels for growth")
    if suitability > HIGH_SUITABILITY_REASON_THRESHOLD:
        reasons.append("High overall suitability score based on environmental factors")
    return reasons


def _validate_inputs(
    snapshot: Optional[EnvironmentalSnapshot],
    season: Union[Season, str],
    farm_size_hectares: float,
) -> Season:
    if snapshot is None:
        raise InsufficientInputData("An environmental snapshot is required for scoring")
    try:
        season = Season(season)
    except ValueError as e:
        raise InvalidInput(f"Unknown season '{season}'") from e
    if not isinstance(farm_size_hectares, (int, float)) or not (
        math.isfinite(farm_size_hectares) and farm_size_hectares > 0
    ):
        raise InvalidInput(f"Farm size must be positive, got {farm_size_hectares}")
    return season


def score(
    snapshot: Optional[EnvironmentalSnapshot],
    season: Union[Season, str],
    farm_size_hectares: float,
    history: Optional[Sequence[HistoricalRecord]] = None,
    *,
    knowledge_base: Sequence[CropProfile] = CROP_KNOWLEDGE_BASE,
    volatile_crops: Optional[Iterable[str]] = None,
) -> List[CropRecommendation]:
    """
    Scores every crop grown in ``season`` and ranks them.

    Args:
        snapshot: Environmental readings for the farm.
        season: Season tag, crops outside it are never returned.
        farm_size_hectares: Positive farm size.
        history: The farmer's past crop records, may be empty.
        knowledge_base: Crops to consider, in tie-breaking order.
        volatile_crops: Crop names carrying market risk. Defaults to settings.

    Returns:
        Recommendations sorted by suitability, highest first. Crops with equal
        suitability keep their knowledge base order.

    Raises:
        InsufficientInputData: ``snapshot`` is None.
        InvalidInput: unknown season or non-positive farm size.
    """
    season = _validate_inputs(snapshot, season, farm_size_hectares)
    history = list(history or [])
    if volatile_crops is not None:
        volatile_crops = list(volatile_crops)

    recommendations: List[CropRecommendation] = []
    for crop in knowledge_base:
        if season not in crop.seasons:
            continue

        suitability = suitability_score(crop, snapshot, farm_size_hectares)
        crop_yield = expected_yield(crop, snapshot, history)
        recommendations.append(
            CropRecommendation(
                crop=crop.name,
                variety=crop.default_variety,
                suitability=suitability,
                expected_yield=crop_yield,
                profitability=profitability(
                    crop_yield, farm_size_hectares, crop.market_price, crop.production_cost
                ),
                risk_level=risk_level(risk_score(crop, snapshot, history, volatile_crops)),
                reasons=_reasons(crop, snapshot, suitability),
                best_practices=get_best_practices(crop.name),
            )
        )

    # sorted() is stable, ties keep knowledge base order.
    return sorted(recommendations, key=lambda rec: rec.suitability, reverse=True)
