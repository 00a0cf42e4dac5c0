from __future__ import annotations

import logging

import voluptuous as vol
from homeassistant import config_entries

from .const import (
    DOMAIN,
    CONF_EMAIL,
    CONF_PASSWORD,
    CONF_SCAN_INTERVAL,
    DEFAULT_SCAN_INTERVAL,
)
from .api import AtagOneClient, AtagOneConnectionError, AtagOneError, AtagOneSessionError

_LOGGER = logging.getLogger(__name__)


def validate_login(email: str, password: str) -> str:
    """Log in with the given credentials and return the portal's device id."""
    client = AtagOneClient(email=email, password=password)
    try:
        return client.login()
    finally:
        client.close()


class AtagOneConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_user(self, user_input=None):
        errors = {}
        if user_input is not None:
            try:
                device_id = await self.hass.async_add_executor_job(
                    validate_login, user_input[CONF_EMAIL], user_input[CONF_PASSWORD]
                )
            except AtagOneSessionError:
                errors["base"] = "invalid_auth"
            except AtagOneConnectionError:
                errors["base"] = "cannot_connect"
            except AtagOneError:
                _LOGGER.exception("Unexpected portal response during login")
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(device_id)
                self._abort_if_unique_id_configured()
                return self.async_create_entry(title=device_id, data=user_input)

        schema = vol.Schema({
            vol.Required(CONF_EMAIL): str,
            vol.Required(CONF_PASSWORD): str,
        })

        return self.async_show_form(step_id="user", data_schema=schema, errors=errors)

    @staticmethod
    def async_get_options_flow(config_entry: config_entries.ConfigEntry):
        return AtagOneOptionsFlow(config_entry)


class AtagOneOptionsFlow(config_entries.OptionsFlow):
    def __init__(self, config_entry: config_entries.ConfigEntry):
        self._config_entry = config_entry

    async def async_step_init(self, user_input=None):
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        schema = vol.Schema({
            vol.Optional(
                CONF_SCAN_INTERVAL,
                default=self._config_entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL),
            ): vol.All(vol.Coerce(int), vol.Range(min=60)),
        })
        return self.async_show_form(step_id="init", data_schema=schema)
