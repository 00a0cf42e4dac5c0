from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import requests

from .const import (
    DIAGNOSTIC_FIELDS,
    HTTP_TIMEOUT,
    KIND_BOOL,
    KIND_DECIMAL,
    KIND_TEXT,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    URL_DEVICE_HOME,
    URL_DEVICE_SET_SETPOINT,
    URL_DIAGNOSTICS,
    URL_LOGIN,
)

_LOGGER = logging.getLogger(__name__)

TOKEN_FIELD = "__RequestVerificationToken"

# <input name="__RequestVerificationToken" type="hidden" value="lFVlMZlt2-YJKAwZ..." />
_TOKEN_RE = re.compile(r'name="__RequestVerificationToken"[^>]+ value="(.*?)"', re.S)
# <tr onclick="javascript:changeDeviceAndRedirect('/Home/Index/{0}','6808-1401-3109_15-30-001-544');">
_DEVICE_ID_RE = re.compile(r"[0-9]{4}-[0-9]{4}-[0-9]{4}_[0-9]{2}-[0-9]{2}-[0-9]{3}-[0-9]{3}", re.S)
# {\"ch_control_mode\":0,\"temp_influenced\":false,\"room_temp\":18.0,\"ch_mode_temp\":18.2, ...}
_ROOM_TEMP_RE = re.compile(r"room_temp.*?:([0-9\.]{1,4})", re.S)
# Portal pages redirect here once the session cookie has expired.
_LOGIN_FORM_RE = re.compile(r'<form[^>]+/Account/Login.*?name="Password"', re.S | re.I)

_ON_WORDS = ("aan", "on")


class AtagOneError(Exception):
    """Base exception for ATAG One portal errors."""


class AtagOneConnectionError(AtagOneError):
    """The portal could not be reached or answered with an HTTP error."""


class AtagOneSessionError(AtagOneError):
    """An expected page element (token or device id) is missing.

    Raised for bad credentials as well as for an unrecognised page layout;
    the portal gives no way to tell the two apart.
    """


class AtagOneNoDeviceError(AtagOneError):
    """An operation needs a device id but the client has not logged in."""


class AtagOneParseError(AtagOneError):
    """A value embedded in an otherwise successful response is missing or malformed."""


class AtagOneValidationError(AtagOneError, ValueError):
    """A requested temperature is not a usable number."""


class AtagOneTemperatureOutOfRange(AtagOneValidationError):
    """A requested temperature lies outside the range the device accepts."""

    def __init__(self, temperature, minimum=TEMPERATURE_MIN, maximum=TEMPERATURE_MAX):
        self.temperature = temperature
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Device temperature out of bounds: {temperature}. "
            f"Needs to be between {minimum} (inclusive) and {maximum} (inclusive)"
        )


@dataclass(frozen=True)
class AtagOneDiagnostics:
    """Snapshot of the portal's latest device report.

    Field order follows the report page. Every value except ``device_id``
    is ``None`` when the page did not carry it.
    """

    device_id: str
    device_alias: str | None = None
    latest_report_time: str | None = None
    connected_to: str | None = None
    burning_hours: Decimal | None = None
    boiler_heating_for: str | None = None
    flame_status: bool | None = None
    room_temperature: Decimal | None = None
    outside_temperature: Decimal | None = None
    dhw_setpoint: Decimal | None = None
    dhw_water_temperature: Decimal | None = None
    ch_setpoint: Decimal | None = None
    ch_water_temperature: Decimal | None = None
    ch_water_pressure: Decimal | None = None
    ch_return_temperature: Decimal | None = None

    def as_dict(self) -> dict:
        """Return the report keyed by the portal's camelCase names, in order."""
        return {_camel(k): v for k, v in asdict(self).items()}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# ----------------- extraction -----------------

def _match_label(html: str, labels) -> str | None:
    """Return the normalised value following the first label found in html.

    The report page renders each value as::

        <label class="col-xs-6 control-label">Apparaat alias</label>
        <div class="col-xs-6">
            <p class="form-control-static">CV-ketel</p>
        </div>
    """
    for label in labels:
        m = re.search(rf">{re.escape(label)}</label>.*?<p[^>]*>(.*?)<", html, flags=re.S | re.I)
        if not m:
            continue
        # Dutch decimal separator.
        value = m.group(1).replace(",", ".").strip()
        if value:
            return value
    return None


def extract_text(html: str, *labels: str) -> str | None:
    return _match_label(html, labels)


def extract_bool(html: str, *labels: str) -> bool | None:
    value = _match_label(html, labels)
    if value is None:
        return None
    return value.lower() in _ON_WORDS


def extract_decimal(html: str, *labels: str) -> Decimal | None:
    value = _match_label(html, labels)
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation as err:
        raise AtagOneParseError(f"Not a number for {labels[0]!r}: {value!r}") from err


_EXTRACTORS = {
    KIND_TEXT: extract_text,
    KIND_DECIMAL: extract_decimal,
    KIND_BOOL: extract_bool,
}


def extract_token(html: str) -> str | None:
    m = _TOKEN_RE.search(html)
    return m.group(1) if m else None


def extract_device_id(html: str) -> str | None:
    m = _DEVICE_ID_RE.search(html)
    return m.group(0) if m else None


def is_login_page(html: str) -> bool:
    return _LOGIN_FORM_RE.search(html) is not None


def extract_room_temperature(html: str) -> Decimal | None:
    """Read ``room_temp`` from the JSON fragment embedded in a setpoint reply."""
    m = _ROOM_TEMP_RE.search(html)
    if not m:
        return None
    try:
        return Decimal(m.group(1))
    except InvalidOperation as err:
        raise AtagOneParseError(f"Malformed room temperature: {m.group(1)!r}") from err


def round_half(value: Decimal) -> Decimal:
    """Round to the nearest half degree, halves rounding up."""
    try:
        return (value * 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 2
    except InvalidOperation as err:
        raise AtagOneValidationError(f"Temperature cannot be rounded: {value}") from err


def _to_decimal(value) -> Decimal:
    if isinstance(value, float) and not math.isfinite(value):
        raise AtagOneValidationError(f"Temperature has to be a numeric value: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as err:
        raise AtagOneValidationError(f"Temperature has to be a numeric value: {value!r}") from err
    if not number.is_finite():
        raise AtagOneValidationError(f"Temperature has to be a numeric value: {value!r}")
    return number


# ----------------- client -----------------

class AtagOneClient:
    def __init__(self, email: str, password: str, session: requests.Session | None = None):
        self.email = email
        self.password = password
        # Cookie jar for the portal session lives on the requests session.
        self.session = session or requests.Session()
        self.device_id: str | None = None

    def _get(self, url: str, **kwargs) -> str:
        try:
            r = self.session.get(url, timeout=HTTP_TIMEOUT, **kwargs)
            r.raise_for_status()
        except requests.RequestException as err:
            raise AtagOneConnectionError(f"GET {url} failed: {err}") from err
        return r.text

    def _post(self, url: str, data: dict) -> str:
        try:
            r = self.session.post(url, data=data, timeout=HTTP_TIMEOUT)
            r.raise_for_status()
        except requests.RequestException as err:
            raise AtagOneConnectionError(f"POST {url} failed: {err}") from err
        return r.text

    def _require_device(self) -> str:
        if not self.device_id:
            raise AtagOneNoDeviceError("No Device selected, login first.")
        return self.device_id

    def ensure_login(self) -> str:
        """Log in unless a device id has already been resolved."""
        if self.device_id:
            return self.device_id
        return self.login()

    def login(self) -> str:
        """Log in to the portal and select the first device found."""
        _LOGGER.debug("POST authentication data: %s", URL_LOGIN)
        # The login page hands out the session cookie and the first token.
        token = self.refresh_token(URL_LOGIN)

        html = self._post(
            URL_LOGIN,
            data={
                TOKEN_FIELD: token,
                "Email": self.email,
                "Password": self.password,
                "RememberMe": "false",
            },
        )
        device_id = extract_device_id(html)
        if not device_id:
            raise AtagOneSessionError("No Device ID found, cannot continue.")
        self.device_id = device_id
        _LOGGER.debug("Selected device %s", device_id)
        return device_id

    def refresh_token(self, url_template: str) -> str:
        """Fetch a page and return the anti-forgery token it carries.

        ``{device_id}`` in the template is replaced by the selected device,
        or dropped when none is selected yet.
        """
        url = url_template.replace("{device_id}", self.device_id or "")
        _LOGGER.debug("Fetching request verification token from %s", url)
        token = extract_token(self._get(url))
        if not token:
            raise AtagOneSessionError("No Request Verification Token received.")
        return token

    def get_diagnostics(self) -> AtagOneDiagnostics:
        device_id = self._require_device()
        _LOGGER.debug("GET diagnostics: %s?deviceId=%s", URL_DIAGNOSTICS, device_id)
        html = self._get(URL_DIAGNOSTICS, params={"deviceId": device_id})
        if is_login_page(html):
            # Forget the device so the next ensure_login starts a new session.
            self.device_id = None
            raise AtagOneSessionError("Portal session expired, login page returned.")

        values = {
            key: _EXTRACTORS[kind](html, *labels)
            for key, kind, *labels in DIAGNOSTIC_FIELDS
        }
        return AtagOneDiagnostics(device_id=device_id, **values)

    def set_temperature(self, temperature) -> Decimal:
        """Set the room setpoint and return the room temperature the portal reports."""
        requested = _to_decimal(temperature)
        if not TEMPERATURE_MIN <= requested <= TEMPERATURE_MAX:
            raise AtagOneTemperatureOutOfRange(requested)
        rounded = round_half(requested)
        if not TEMPERATURE_MIN <= rounded <= TEMPERATURE_MAX:
            raise AtagOneTemperatureOutOfRange(rounded)
        device_id = self._require_device()

        # Every page render issues a new token, fetch a fresh one.
        token = self.refresh_token(URL_DEVICE_HOME)

        url = f"{URL_DEVICE_SET_SETPOINT}/{device_id}?temperature={rounded:.1f}"
        _LOGGER.debug("POST setDeviceSetPoint: %s", url)
        html = self._post(url, data={TOKEN_FIELD: token})

        room = extract_room_temperature(html)
        if room is None:
            raise AtagOneParseError("Cannot read current room temperature.")
        return room

    def close(self):
        self.session.close()
