import pytest

from farmwatch.domain.exceptions import NotFoundError
from farmwatch.enums import ActuatorStatus, EventType, PlantationMode


@pytest.fixture()
def plantation_id(seed):
    owner_id = seed.create_user(phone="+237699001122")
    return seed.create_plantation(owner_id, name="Champ Test")


def test_activating_an_actuator_notifies_owner(seed, plantation_id, farm_repo, farm_activity_service, notification_repo):
    actuator_id = seed.create_actuator(plantation_id)

    event = farm_activity_service.set_actuator_status(actuator_id, ActuatorStatus.ACTIVE)

    assert event.event_type == EventType.ACTUATOR_ACTIVATED
    assert event.actuator_id == actuator_id
    assert event.sensor_id is None
    assert farm_repo.get_actuator(actuator_id).status == ActuatorStatus.ACTIVE
    assert len(notification_repo.list_for_event(event.id)) == 2


def test_setting_the_same_status_is_a_no_op(seed, plantation_id, farm_activity_service):
    actuator_id = seed.create_actuator(plantation_id, status=ActuatorStatus.ACTIVE)
    assert farm_activity_service.set_actuator_status(actuator_id, "active") is None


def test_deactivating(seed, plantation_id, farm_activity_service):
    actuator_id = seed.create_actuator(plantation_id, status=ActuatorStatus.ACTIVE)
    event = farm_activity_service.set_actuator_status(actuator_id, ActuatorStatus.INACTIVE)
    assert event.event_type == EventType.ACTUATOR_DEACTIVATED


def test_unknown_actuator(farm_activity_service):
    with pytest.raises(NotFoundError):
        farm_activity_service.set_actuator_status(404, ActuatorStatus.ACTIVE)


def test_mode_change_event_has_no_device_reference(plantation_id, farm_repo, farm_activity_service):
    event = farm_activity_service.set_plantation_mode(plantation_id, PlantationMode.MANUAL)

    assert event.event_type == EventType.MODE_CHANGED
    assert event.sensor_id is None
    assert event.actuator_id is None
    assert "de automatique à manuel" in event.description
    assert farm_repo.get_plantation(plantation_id).mode == PlantationMode.MANUAL
    assert farm_activity_service.set_plantation_mode(plantation_id, "manual") is None
