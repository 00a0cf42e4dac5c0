from __future__ import annotations

from decimal import Decimal

from homeassistant.components.climate import ClimateEntity
from homeassistant.components.climate.const import HVACMode, HVACAction, ClimateEntityFeature
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.core import HomeAssistant, callback
from homeassistant.config_entries import ConfigEntry
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .api import AtagOneError, round_half
from .const import DOMAIN, TEMPERATURE_MAX, TEMPERATURE_MIN, TEMPERATURE_STEP
from .sensor import device_info


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities):
    data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([AtagOneClimate(data["coordinator"], data["client"])])


class AtagOneClimate(CoordinatorEntity, ClimateEntity):
    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_features = ClimateEntityFeature.TARGET_TEMPERATURE
    _attr_hvac_modes = [HVACMode.HEAT]
    _attr_hvac_mode = HVACMode.HEAT
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_min_temp = TEMPERATURE_MIN
    _attr_max_temp = TEMPERATURE_MAX
    _attr_target_temperature_step = TEMPERATURE_STEP

    def __init__(self, coordinator, client):
        super().__init__(coordinator)
        self._client = client
        report = coordinator.data
        self._attr_unique_id = f"{report.device_id}_climate"
        self._attr_device_info = device_info(report.device_id, report.device_alias)
        self._attr_target_temperature = None
        # Room temperature acknowledged by the last setpoint change, until the next poll.
        self._acknowledged = None

    @property
    def current_temperature(self) -> float | None:
        if self._acknowledged is not None:
            return self._acknowledged
        room = self.coordinator.data.room_temperature
        return float(room) if room is not None else None

    @property
    def hvac_action(self) -> HVACAction | None:
        flame = self.coordinator.data.flame_status
        if flame is None:
            return None
        return HVACAction.HEATING if flame else HVACAction.IDLE

    @callback
    def _handle_coordinator_update(self) -> None:
        self._acknowledged = None
        super()._handle_coordinator_update()

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        if hvac_mode != HVACMode.HEAT:
            raise HomeAssistantError(f"Unsupported HVAC mode: {hvac_mode}")

    async def async_set_temperature(self, **kwargs) -> None:
        if (temp := kwargs.get(ATTR_TEMPERATURE)) is None:
            return
        try:
            room = await self.hass.async_add_executor_job(self._client.set_temperature, temp)
        except AtagOneError as err:
            raise HomeAssistantError(f"Setting temperature failed: {err}") from err
        self._attr_target_temperature = float(round_half(Decimal(str(temp))))
        self._acknowledged = float(room)
        self.async_write_ha_state()
