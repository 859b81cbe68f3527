from __future__ import annotations

import pytest
from pydantic import ValidationError

from owm.models import CurrentWeather, ErrorResponse, Forecast, Precipitation, Sys, WeatherAggregate


PISA = {
    "coord": {"lon": 10.41, "lat": 43.71},
    "weather": [{"id": 801, "main": "Clouds", "description": "few clouds", "icon": "02d"}],
    "base": "stations",
    "main": {
        "temp": 18.3,
        "feels_like": 17.9,
        "temp_min": 16.1,
        "temp_max": 19.4,
        "pressure": 1016,
        "humidity": 72,
        "grnd_level": 1012,
    },
    "visibility": 10000,
    "wind": {"speed": 3.6, "deg": 250, "gust": 5.1},
    "clouds": {"all": 20},
    "rain": {"1h": 0.25},
    "dt": 1700000000,
    "sys": {"type": 2, "id": 2004688, "country": "IT", "sunrise": 1699940000, "sunset": 1699976000},
    "timezone": 3600,
    "id": 6542122,
    "name": "Pisa",
    "cod": 200,
}


def dump(model) -> dict:
    return model.model_dump(by_alias=True, exclude_none=True)


def test_current_weather_fields():
    info = CurrentWeather.model_validate(PISA)

    assert info.coord.lon == 10.41
    assert info.coord.lat == 43.71
    assert info.name == "Pisa"
    assert info.temperature == 18.3
    assert info.description == "few clouds"
    assert info.main.humidity == 72
    assert info.wind.gust == 5.1
    assert info.rain.one_hour == 0.25
    assert info.rain.three_hours is None
    assert info.sys.type_ == 2
    assert info.sys.country == "IT"
    assert info.snow is None


def test_current_weather_encodes_back_to_wire_shape():
    info = CurrentWeather.model_validate(PISA)
    assert dump(info) == PISA
    assert CurrentWeather.model_validate(dump(info)) == info


def test_forecast_encodes_list_under_wire_name():
    payload = {
        "cod": "200",
        "message": 0,
        "cnt": 1,
        "list": [{"dt": 1700000000, "main": {"temp": 4.5}, "snow": {"3h": 1.5}, "sys": {"pod": "n"}}],
        "city": {"id": 6542122, "name": "Pisa", "population": 88000},
    }
    forecast = Forecast.model_validate(payload)

    assert forecast.entries[0].snow.three_hours == 1.5
    assert forecast.entries[0].sys.pod == "n"
    assert forecast.entries[0].description is None
    assert dump(forecast) == payload


def test_models_accept_python_field_names():
    assert Precipitation(three_hours=2.0).three_hours == 2.0
    assert dump(Sys(type_=1)) == {"type": 1}


def test_missing_fields_are_none():
    info = CurrentWeather.model_validate({})
    assert info.name is None
    assert info.temperature is None
    assert info.description is None
    assert dump(info) == {}

    assert Forecast.model_validate({}).entries == []


def test_cod_keeps_its_wire_type():
    assert CurrentWeather.model_validate({"cod": 200}).cod == 200
    assert WeatherAggregate.model_validate({"cod": "200", "list": []}).cod == "200"
    assert ErrorResponse.model_validate({"cod": 401, "message": "Invalid API key"}) == ErrorResponse(
        cod=401, message="Invalid API key"
    )


@pytest.mark.parametrize(
    "payload",
    [
        {"main": "warm"},
        {"weather": {"description": "clear sky"}},
        {"weather": ["clear sky"]},
        {"main": {"temp": "15"}},
        {"main": {"temp": True}},
        {"name": 42},
        {"main": {"pressure": 1013.7}},
        {"main": {"humidity": 55.5}},
        {"visibility": 9999.9},
    ],
)
def test_schema_mismatch_raises(payload):
    with pytest.raises(ValidationError):
        CurrentWeather.model_validate(payload)
