from datetime import datetime, timezone

import pytest

from farmwatch.domain.sensors import Sensor, SensorReading
from farmwatch.domain.threshold_policy import evaluate_reading, format_number
from farmwatch.enums import EventType, SensorType

TS = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _sensor(min_threshold=None, max_threshold=None, sensor_type=SensorType.TEMPERATURE):
    return Sensor(
        id=7,
        plantation_id=1,
        sensor_type=sensor_type,
        min_threshold=min_threshold,
        max_threshold=max_threshold,
    )


def _reading(value):
    return SensorReading(sensor_id=7, value=value, timestamp=TS)


def test_no_thresholds_never_produces_an_event():
    sensor = _sensor()
    for value in (-1000.0, 0.0, 25.0, 1e9):
        assert evaluate_reading(sensor, _reading(value)) is None


@pytest.mark.parametrize("value", [10.0, 30.0, 20.0])
def test_values_on_or_between_bounds_are_in_range(value):
    assert evaluate_reading(_sensor(10.0, 30.0), _reading(value)) is None


def test_below_minimum_description():
    draft = evaluate_reading(_sensor(10.0, 30.0), _reading(5.0))

    assert draft is not None
    assert draft.event_type == EventType.THRESHOLD_EXCEEDED
    assert draft.sensor_id == 7
    assert draft.actuator_id is None
    assert draft.description == (
        "Le capteur temperature a enregistré une valeur (5) inférieure au seuil minimum (10)"
    )


def test_above_maximum_description_with_plantation_name():
    draft = evaluate_reading(
        _sensor(max_threshold=100.0, sensor_type=SensorType.WATER_LEVEL),
        _reading(120.0),
        plantation_name="Champ Test",
    )

    assert draft.description == (
        'Le capteur waterLevel du champ "Champ Test" a enregistré une valeur (120) '
        "supérieure au seuil maximum (100)"
    )


def test_empty_plantation_name_is_omitted():
    draft = evaluate_reading(_sensor(10.0), _reading(5.0), plantation_name="")
    assert "du champ" not in draft.description


def test_minimum_is_checked_first_even_with_inverted_bounds():
    # min > max: a value below min is reported as below minimum
    draft = evaluate_reading(_sensor(50.0, 40.0), _reading(30.0))
    assert "inférieure au seuil minimum (50)" in draft.description


def test_only_min_threshold_ignores_large_values():
    assert evaluate_reading(_sensor(min_threshold=10.0), _reading(10_000.0)) is None


def test_decimal_values_are_not_rounded():
    draft = evaluate_reading(_sensor(min_threshold=10.5), _reading(9.25))
    assert "(9.25)" in draft.description
    assert "(10.5)" in draft.description


def test_negative_values():
    draft = evaluate_reading(_sensor(min_threshold=-10.0), _reading(-15.0))
    assert "(-15)" in draft.description
    assert "(-10)" in draft.description


@pytest.mark.parametrize(
    ("value", "expected"),
    [(10.0, "10"), (9.25, "9.25"), (-15.0, "-15"), (15000.0, "15000"), (7, "7")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
