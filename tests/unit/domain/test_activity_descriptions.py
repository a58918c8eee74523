from farmwatch.domain.activity import describe_actuator_change, describe_mode_change, describe_threshold_change
from farmwatch.domain.farm import Actuator, Plantation
from farmwatch.domain.sensors import Sensor
from farmwatch.enums import ActuatorStatus, PlantationMode, SensorType


def test_threshold_change_renders_missing_bounds():
    sensor = Sensor(id=1, plantation_id=1, sensor_type=SensorType.CO2_LEVEL, min_threshold=400.0)
    text = describe_threshold_change(sensor, "Champ Test")
    assert text == (
        'Les seuils du capteur co2Level du champ "Champ Test" ont été modifiés : '
        "minimum 400, maximum non défini"
    )


def test_actuator_change():
    actuator = Actuator(id=2, plantation_id=1, name="Pompe", actuator_type="water_pump")
    assert describe_actuator_change(actuator, ActuatorStatus.ACTIVE) == 'L\'actionneur "Pompe" a été activé'
    assert describe_actuator_change(actuator, ActuatorStatus.INACTIVE, "Nord").endswith("a été désactivé")


def test_mode_change():
    plantation = Plantation(id=1, name="Champ Test", owner_id=1)
    text = describe_mode_change(plantation, PlantationMode.AUTOMATIC, PlantationMode.MANUAL)
    assert text == 'Le mode de contrôle du champ "Champ Test" a été changé de automatique à manuel'
