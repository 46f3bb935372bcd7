import pytest

from cropfit.core.config import settings
from cropfit.models.environment import DataKind, DataSource, EnvironmentalSnapshot, SoilTexture
from cropfit.services import cache as cache_module
from cropfit.services.cache import InMemoryResultCache


@pytest.fixture(autouse=True)
def fast_upstream(monkeypatch):
    """No real sleeping between retries, fresh process cache per test."""
    monkeypatch.setattr(settings, "UPSTREAM_BACKOFF_SECONDS", 0)
    monkeypatch.setattr(settings, "UPSTREAM_MAX_ATTEMPTS", 3)
    monkeypatch.setattr(cache_module, "_cache", InMemoryResultCache())


def make_snapshot(**overrides) -> EnvironmentalSnapshot:
    values = dict(
        temperature=20.0,
        humidity=65.0,
        wind_speed=2.0,
        soil_ph=6.8,
        organic_matter=3.5,
        nitrogen=1.2,
        soil_texture=SoilTexture.LOAMY,
        provenance={DataKind.WEATHER: DataSource.LIVE, DataKind.SOIL: DataSource.LIVE},
    )
    values.update(overrides)
    return EnvironmentalSnapshot(**values)


@pytest.fixture
def snapshot_factory():
    return make_snapshot


def forecast_payload(temp: float = 22.5, humidity: int = 64, entries: int = 9) -> dict:
    items = []
    for index in range(entries):
        items.append(
            {
                "dt": 1718000000 + index * 10800,
                "main": {
                    "temp": temp + index,
                    "feels_like": temp + index,
                    "temp_min": temp + index - 1,
                    "temp_max": temp + index + 1,
                    "pressure": 1008,
                    "humidity": humidity,
                },
                "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
                "wind": {"speed": 3.4, "deg": 220},
                "pop": 0.4,
                "rain": {"3h": 1.25} if index % 2 else None,
                "dt_txt": f"2024-06-10 {index * 3 % 24:02d}:00:00",
            }
        )
    return {"list": items, "city": {"id": 1264527, "name": "Ludhiana", "country": "IN"}}


def soilgrids_payload(ph=68, soc=200, nitrogen=150, sand=400, clay=200) -> dict:
    def layer(name, d_factor, mean):
        return {
            "name": name,
            "unit_measure": {"d_factor": d_factor},
            "depths": [
                {"label": "0-5cm", "values": {"mean": mean}},
                {"label": "5-15cm", "values": {"mean": None}},
            ],
        }

    return {
        "type": "Feature",
        "properties": {
            "layers": [
                layer("phh2o", 10, ph),
                layer("soc", 10, soc),
                layer("nitrogen", 100, nitrogen),
                layer("sand", 10, sand),
                layer("clay", 10, clay),
            ]
        },
    }
