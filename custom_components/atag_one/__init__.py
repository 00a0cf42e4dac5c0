from __future__ import annotations

import logging

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import HomeAssistantError

from .api import AtagOneClient, AtagOneError
from .const import (
    DOMAIN,
    CONF_EMAIL,
    CONF_PASSWORD,
    CONF_SCAN_INTERVAL,
    DEFAULT_SCAN_INTERVAL,
    DISCOVERY_TIMEOUT,
    PLATFORMS,
    SERVICE_DISCOVER,
)
from .coordinator import AtagOneCoordinator
from .discovery import discover

_LOGGER = logging.getLogger(__name__)

SERVICE_DISCOVER_SCHEMA = vol.Schema(
    {
        vol.Optional("timeout", default=DISCOVERY_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=1, max=120)
        ),
    }
)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    hass.data.setdefault(DOMAIN, {})

    email = entry.data[CONF_EMAIL]
    password = entry.data[CONF_PASSWORD]
    scan_interval = entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)

    client = AtagOneClient(email=email, password=password)
    coordinator = AtagOneCoordinator(hass, client, scan_interval=scan_interval)

    await coordinator.async_config_entry_first_refresh()

    hass.data[DOMAIN][entry.entry_id] = {
        "client": client,
        "coordinator": coordinator,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    async_register_services(hass)
    entry.async_on_unload(entry.add_update_listener(async_update_options))
    return True


def async_register_services(hass: HomeAssistant) -> None:
    async def handle_discover(call: ServiceCall) -> ServiceResponse:
        """Listen for a thermostat broadcast on the local network."""
        try:
            found = await hass.async_add_executor_job(discover, call.data["timeout"])
        except AtagOneError as err:
            raise HomeAssistantError(str(err)) from err
        if found is None:
            return {}
        return {"host": found.host, "device_id": found.device_id}

    if not hass.services.has_service(DOMAIN, SERVICE_DISCOVER):
        hass.services.async_register(
            DOMAIN,
            SERVICE_DISCOVER,
            handle_discover,
            schema=SERVICE_DISCOVER_SCHEMA,
            supports_response=SupportsResponse.ONLY,
        )


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        data = hass.data[DOMAIN].pop(entry.entry_id, None)
        if data:
            await hass.async_add_executor_job(data["client"].close)
    return unload_ok
