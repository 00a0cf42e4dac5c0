from __future__ import annotations

from homeassistant.components.binary_sensor import BinarySensorEntity
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry

from .const import DOMAIN
from .sensor import device_info


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities):
    coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    async_add_entities([AtagOneFlameSensor(coordinator)])


class AtagOneFlameSensor(CoordinatorEntity, BinarySensorEntity):
    _attr_has_entity_name = True
    _attr_name = "Flame"
    _attr_icon = "mdi:fire"

    def __init__(self, coordinator):
        super().__init__(coordinator)
        report = coordinator.data
        self._attr_unique_id = f"{report.device_id}_flame_status"
        self._attr_device_info = device_info(report.device_id, report.device_alias)

    @property
    def is_on(self) -> bool | None:
        # None when the report page did not show a flame status.
        return self.coordinator.data.flame_status
