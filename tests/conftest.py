"""Shared fixtures for fluent-gwt tests."""
from __future__ import annotations

import pytest
from weather import StubWeatherProvider, WeatherApplication, WeatherInfrastructure, WeatherService

from fluent_gwt import FluentTest


@pytest.fixture
def weather_service() -> WeatherService:
    return WeatherService()


@pytest.fixture
def weather_app(weather_service: WeatherService) -> WeatherApplication:
    return WeatherApplication(weather_service)


@pytest.fixture
def infrastructure(weather_service: WeatherService, weather_app: WeatherApplication) -> WeatherInfrastructure:
    return WeatherInfrastructure(weather_service, weather_app)


@pytest.fixture
def fluent() -> FluentTest:
    """A bare orchestrator with the default policy."""
    return FluentTest("example")


@pytest.fixture
def london(weather_service: WeatherService) -> StubWeatherProvider:
    return StubWeatherProvider(weather_service).with_description("light rain").for_city("London")
