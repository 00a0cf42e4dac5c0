DOMAIN = "atag_one"

BASE = "https://portal.atag-one.com"
URL_LOGIN = f"{BASE}/Account/Login"
URL_DEVICE_HOME = f"{BASE}/Home/Index/{{device_id}}"
URL_DIAGNOSTICS = f"{BASE}/Device/LatestReport"
URL_DEVICE_SET_SETPOINT = f"{BASE}/Home/DeviceSetSetpoint"

HTTP_TIMEOUT = 15

DISCOVERY_PORT = 11000
DISCOVERY_PACKET_SIZE = 37
DISCOVERY_PREFIX = "ONE "
DISCOVERY_TIMEOUT = 30.0

CONF_EMAIL = "email"
CONF_PASSWORD = "password"
CONF_SCAN_INTERVAL = "scan_interval"

DEFAULT_SCAN_INTERVAL = 300

TEMPERATURE_MIN = 4
TEMPERATURE_MAX = 30
TEMPERATURE_STEP = 0.5

MANUFACTURER = "ATAG"
MODEL = "ATAG One"

PLATFORMS = ["sensor", "binary_sensor", "climate"]

SERVICE_DISCOVER = "discover"

KIND_TEXT = "text"
KIND_DECIMAL = "decimal"
KIND_BOOL = "bool"

# (attribute, kind, Dutch label, English label), in report order.
DIAGNOSTIC_FIELDS = [
    ("device_alias", KIND_TEXT, "Apparaat alias", "Device alias"),
    ("latest_report_time", KIND_TEXT, "Laatste rapportagetijd", "Latest report time"),
    ("connected_to", KIND_TEXT, "Verbonden met", "Connected to"),
    ("burning_hours", KIND_DECIMAL, "Branduren", "Burning hours"),
    ("boiler_heating_for", KIND_TEXT, "Ketel in bedrijf voor", "Boiler heating for"),
    ("flame_status", KIND_BOOL, "Brander status", "Flame status"),
    ("room_temperature", KIND_DECIMAL, "Kamertemperatuur", "Room temperature"),
    ("outside_temperature", KIND_DECIMAL, "Buitentemperatuur", "Outside temperature"),
    ("dhw_setpoint", KIND_DECIMAL, "Setpoint warmwater", "DHW setpoint"),
    ("dhw_water_temperature", KIND_DECIMAL, "Warmwatertemperatuur", "DHW water temperature"),
    ("ch_setpoint", KIND_DECIMAL, "Setpoint cv", "CH setpoint"),
    ("ch_water_temperature", KIND_DECIMAL, "CV-aanvoertemperatuur", "CH water temperature"),
    ("ch_water_pressure", KIND_DECIMAL, "CV-waterdruk", "CH water pressure"),
    ("ch_return_temperature", KIND_DECIMAL, "CV retourtemperatuur", "CH return temperature"),
]
