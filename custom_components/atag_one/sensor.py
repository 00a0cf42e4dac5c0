from __future__ import annotations

from homeassistant.components.sensor import SensorEntity, SensorDeviceClass, SensorStateClass
from homeassistant.const import EntityCategory, UnitOfPressure, UnitOfTemperature, UnitOfTime
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.entity import DeviceInfo

from .const import DOMAIN, MANUFACTURER, MODEL

SENSORS = [
    ("room_temperature", "Room Temperature", "temperature"),
    ("outside_temperature", "Outside Temperature", "temperature"),
    ("dhw_setpoint", "DHW Setpoint", "temperature"),
    ("dhw_water_temperature", "DHW Water Temperature", "temperature"),
    ("ch_setpoint", "CH Setpoint", "temperature"),
    ("ch_water_temperature", "CH Water Temperature", "temperature"),
    ("ch_return_temperature", "CH Return Temperature", "temperature"),
    ("ch_water_pressure", "CH Water Pressure", "pressure"),
    ("burning_hours", "Burning Hours", "duration"),
    ("boiler_heating_for", "Boiler Heating For", None),
    ("latest_report_time", "Latest Report Time", None),
    ("connected_to", "Connected To", None),
    ("device_alias", "Device Alias", None),
]

_UNITS = {
    "temperature": UnitOfTemperature.CELSIUS,
    "pressure": UnitOfPressure.BAR,
    "duration": UnitOfTime.HOURS,
}

_DEVICE_CLASSES = {
    "temperature": SensorDeviceClass.TEMPERATURE,
    "pressure": SensorDeviceClass.PRESSURE,
    "duration": SensorDeviceClass.DURATION,
}


def device_info(device_id: str, alias: str | None) -> DeviceInfo:
    return DeviceInfo(
        identifiers={(DOMAIN, device_id)},
        name=alias or MODEL,
        manufacturer=MANUFACTURER,
        model=MODEL,
    )


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities):
    coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

    entities = [
        AtagOneSensor(coordinator, key, name, kind)
        for (key, name, kind) in SENSORS
    ]
    async_add_entities(entities)


class AtagOneSensor(CoordinatorEntity, SensorEntity):
    _attr_has_entity_name = True

    def __init__(self, coordinator, key: str, name: str, kind: str | None):
        super().__init__(coordinator)
        report = coordinator.data
        self._key = key
        self._attr_name = name
        self._attr_unique_id = f"{report.device_id}_{key}"
        self._attr_device_info = device_info(report.device_id, report.device_alias)
        self._attr_native_unit_of_measurement = _UNITS.get(kind)
        self._attr_device_class = _DEVICE_CLASSES.get(kind)
        if kind == "duration":
            self._attr_state_class = SensorStateClass.TOTAL_INCREASING
        elif kind is not None:
            self._attr_state_class = SensorStateClass.MEASUREMENT
        else:
            self._attr_entity_category = EntityCategory.DIAGNOSTIC

    @property
    def native_value(self):
        return getattr(self.coordinator.data, self._key, None)
