from typing import Optional

from fastapi import APIRouter, Query

from cropfit.models.environment import (
    EnvironmentalSnapshot,
    SatelliteData,
    SoilData,
    WeatherData,
    make_coordinate,
)
from cropfit.services.environment_service import fetch_environmental_snapshot
from cropfit.services.satellite_service import get_satellite_data
from cropfit.services.soilgrids_service import get_soil_data
from cropfit.services.weather_service import get_weather_data

router = APIRouter(prefix="/environment", tags=["Environment"])


@router.get("/weather", response_model=WeatherData)
async def get_weather(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
):
    """
    Get current weather and a short forecast for a location.
    """
    coordinate = make_coordinate(lat, lon)
    return await get_weather_data(coordinate.latitude, coordinate.longitude)


@router.get("/soil", response_model=SoilData)
async def get_soil(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
):
    """
    Get topsoil properties and texture class for a location.
    """
    coordinate = make_coordinate(lat, lon)
    return await get_soil_data(coordinate.latitude, coordinate.longitude)


@router.get("/satellite", response_model=SatelliteData)
async def get_satellite(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    start_date: Optional[str] = Query(None, description="Start of observation window"),
    end_date: Optional[str] = Query(None, description="End of observation window"),
):
    """
    Get vegetation index and soil moisture readings for a location.
    """
    coordinate = make_coordinate(lat, lon)
    return await get_satellite_data(
        coordinate.latitude, coordinate.longitude, start_date, end_date
    )


@router.get("/snapshot", response_model=EnvironmentalSnapshot)
async def get_snapshot(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    include_satellite: bool = Query(False),
):
    """
    Get the combined readings used for crop scoring. Unavailable providers
    are replaced by defaults and reported in ``provenance``.
    """
    coordinate = make_coordinate(lat, lon)
    return await fetch_environmental_snapshot(coordinate, include_satellite=include_satellite)
