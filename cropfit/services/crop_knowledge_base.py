from typing import Dict, List, Tuple

from cropfit.models.crop import CropProfile, Season, WaterRequirement
from cropfit.models.environment import SoilTexture

# Yields in t/ha, prices in ₹/t, production costs in ₹/ha.
CROP_KNOWLEDGE_BASE: Tuple[CropProfile, ...] = (
    CropProfile(
        name="Rice",
        varieties=("Basmati", "Jasmine", "Arborio"),
        water_requirement=WaterRequirement.HIGH,
        soil_preference=(SoilTexture.CLAY, SoilTexture.LOAMY),
        temperature_range=(20, 35),
        seasons=(Season.KHARIF,),
        profit_margin=0.25,
        base_yield=4.5,
        market_price=20000,
        production_cost=25000,
    ),
    CropProfile(
        name="Wheat",
        varieties=("Durum", "Hard Red", "Soft White"),
        water_requirement=WaterRequirement.MEDIUM,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.CLAY_LOAM),
        temperature_range=(15, 25),
        seasons=(Season.RABI,),
        profit_margin=0.3,
        base_yield=3.2,
        market_price=18000,
        production_cost=20000,
    ),
    CropProfile(
        name="Corn",
        varieties=("Sweet Corn", "Dent Corn", "Flint Corn"),
        water_requirement=WaterRequirement.MEDIUM,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.SANDY_LOAM),
        temperature_range=(18, 32),
        seasons=(Season.KHARIF, Season.RABI),
        profit_margin=0.28,
        base_yield=5.8,
        market_price=15000,
        production_cost=22000,
    ),
    CropProfile(
        name="Soybean",
        varieties=("Glycine Max", "Edamame"),
        water_requirement=WaterRequirement.MEDIUM,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.CLAY_LOAM),
        temperature_range=(20, 30),
        seasons=(Season.KHARIF,),
        profit_margin=0.35,
        base_yield=2.1,
        market_price=35000,
        production_cost=18000,
    ),
    CropProfile(
        name="Cotton",
        varieties=("Pima", "Upland", "Organic"),
        water_requirement=WaterRequirement.HIGH,
        soil_preference=(SoilTexture.SANDY_LOAM, SoilTexture.CLAY_LOAM),
        temperature_range=(25, 35),
        seasons=(Season.KHARIF,),
        profit_margin=0.4,
        base_yield=1.8,
        market_price=45000,
        production_cost=30000,
    ),
    CropProfile(
        name="Barley",
        varieties=("RD 2552", "DWRB 101"),
        water_requirement=WaterRequirement.LOW,
        soil_preference=(SoilTexture.SANDY_LOAM, SoilTexture.LOAMY),
        temperature_range=(12, 25),
        seasons=(Season.RABI,),
        profit_margin=0.22,
        base_yield=2.9,
        market_price=17000,
        production_cost=16000,
    ),
    CropProfile(
        name="Mustard",
        varieties=("Pusa Bold", "RH 749"),
        water_requirement=WaterRequirement.LOW,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.SANDY_LOAM),
        temperature_range=(10, 25),
        seasons=(Season.RABI,),
        profit_margin=0.3,
        base_yield=1.5,
        market_price=52000,
        production_cost=18000,
    ),
    CropProfile(
        name="Gram",
        varieties=("JG 11", "Pusa 372"),
        water_requirement=WaterRequirement.LOW,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.CLAY_LOAM, SoilTexture.SANDY_LOAM),
        temperature_range=(15, 30),
        seasons=(Season.RABI,),
        profit_margin=0.32,
        base_yield=1.2,
        market_price=54000,
        production_cost=17000,
    ),
    CropProfile(
        name="Moong",
        varieties=("Pusa Vishal", "SML 668"),
        water_requirement=WaterRequirement.LOW,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.SANDY_LOAM),
        temperature_range=(25, 35),
        seasons=(Season.ZAID, Season.KHARIF),
        profit_margin=0.27,
        base_yield=0.9,
        market_price=72000,
        production_cost=20000,
    ),
    CropProfile(
        name="Watermelon",
        varieties=("Sugar Baby", "Arka Manik"),
        water_requirement=WaterRequirement.MEDIUM,
        soil_preference=(SoilTexture.SANDY, SoilTexture.SANDY_LOAM),
        temperature_range=(24, 35),
        seasons=(Season.ZAID,),
        profit_margin=0.35,
        base_yield=25.0,
        market_price=8000,
        production_cost=90000,
    ),
    CropProfile(
        name="Sugarcane",
        varieties=("Co 0238", "Co 86032"),
        water_requirement=WaterRequirement.HIGH,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.CLAY_LOAM),
        temperature_range=(20, 35),
        seasons=(Season.ANNUAL,),
        profit_margin=0.3,
        base_yield=70.0,
        market_price=3400,
        production_cost=150000,
    ),
    CropProfile(
        name="Banana",
        varieties=("Grand Naine", "Robusta"),
        water_requirement=WaterRequirement.HIGH,
        soil_preference=(SoilTexture.LOAMY, SoilTexture.CLAY_LOAM, SoilTexture.SILT_LOAM),
        temperature_range=(15, 35),
        seasons=(Season.PERENNIAL,),
        profit_margin=0.38,
        base_yield=40.0,
        market_price=12000,
        production_cost=250000,
    ),
)

BEST_PRACTICES: Dict[str, List[str]] = {
    "Rice": [
        "Maintain water level at 2-5 cm during vegetative stage",
        "Apply nitrogen in 3 splits",
        "Use certified seeds for better yield",
    ],
    "Wheat": [
        "Sow at optimal time (November-December)",
        "Maintain proper row spacing (20-23 cm)",
        "Apply balanced fertilization",
    ],
    "Corn": [
        "Plant at 60cm x 20cm spacing",
        "Ensure adequate drainage",
        "Monitor for pest attacks regularly",
    ],
    "Soybean": [
        "Inoculate seeds with Rhizobium",
        "Maintain soil pH between 6.0-7.0",
        "Practice crop rotation",
    ],
    "Cotton": [
        "Use drip irrigation for water efficiency",
        "Monitor for bollworm attacks",
        "Maintain plant population of 1-1.5 lakh/hectare",
    ],
    "Mustard": [
        "Thin plants to 10-15 cm spacing three weeks after sowing",
        "Apply sulphur along with basal fertilizer",
        "Watch for aphids from flowering onwards",
    ],
    "Sugarcane": [
        "Plant three-budded setts treated with fungicide",
        "Earth up at 90 and 120 days after planting",
        "Irrigate at 7-10 day intervals in summer",
    ],
}

GENERIC_BEST_PRACTICES: List[str] = [
    "Follow recommended spacing",
    "Apply balanced fertilization",
    "Monitor for pests and diseases",
]


def get_best_practices(crop_name: str) -> List[str]:
    return list(BEST_PRACTICES.get(crop_name, GENERIC_BEST_PRACTICES))


def get_crop_profile(crop_name: str) -> CropProfile:
    for crop in CROP_KNOWLEDGE_BASE:
        if crop.name.lower() == crop_name.lower():
            return crop
    raise KeyError(crop_name)
