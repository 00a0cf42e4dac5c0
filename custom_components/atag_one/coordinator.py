from __future__ import annotations

from datetime import timedelta
import logging

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.core import HomeAssistant

from .api import AtagOneClient, AtagOneDiagnostics, AtagOneError
from .const import DOMAIN, DEFAULT_SCAN_INTERVAL

_LOGGER = logging.getLogger(__name__)


class AtagOneCoordinator(DataUpdateCoordinator[AtagOneDiagnostics]):
    def __init__(self, hass: HomeAssistant, client: AtagOneClient, scan_interval: int | None = None) -> None:
        self.client = client
        interval = scan_interval or DEFAULT_SCAN_INTERVAL
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=interval),
        )

    def _fetch(self) -> AtagOneDiagnostics:
        self.client.ensure_login()
        return self.client.get_diagnostics()

    async def _async_update_data(self) -> AtagOneDiagnostics:
        try:
            return await self.hass.async_add_executor_job(self._fetch)
        except AtagOneError as err:
            _LOGGER.warning("Diagnostics update failed: %s", err)
            raise UpdateFailed(str(err)) from err
