"""Pytest configuration and fixtures for ATAG One tests."""

from unittest.mock import Mock

import pytest
import requests

from custom_components.atag_one.const import (
    URL_DEVICE_HOME,
    URL_DEVICE_SET_SETPOINT,
    URL_DIAGNOSTICS,
    URL_LOGIN,
)

DEVICE_ID = "6808-1401-3109_15-30-001-544"
LOGIN_TOKEN = "lFVlMZlt2-YJKAwZWS_K_p3gsQWjZOvBNBZ3lM8io_nFGFL0oRsj4YwQ"
HOME_TOKEN = "q8Zt0HNJw4mGx1_home-page-token"


def _field(label: str, value: str) -> str:
    return (
        '<div class="form-group">\n'
        f'    <label class="col-xs-6 control-label">{label}</label>\n'
        '    <div class="col-xs-6">\n'
        f'        <p class="form-control-static">{value}</p>\n'
        "    </div>\n"
        "</div>\n"
    )


def _token_form(token: str) -> str:
    return (
        '<form action="/Home/Index" method="post">'
        f'<input name="__RequestVerificationToken" type="hidden" value="{token}" />'
        "</form>"
    )


def fake_response(text: str = "", error: Exception | None = None) -> Mock:
    """Create a response double exposing ``text`` and ``raise_for_status``."""
    response = Mock(spec=requests.Response)
    response.text = text
    response.raise_for_status = Mock(side_effect=error)
    return response


@pytest.fixture
def login_page_html() -> str:
    """Fixture providing the portal login page."""
    return (
        "<html><body><h1>Log in</h1>"
        '<form action="/Account/Login" method="post">'
        f'<input name="__RequestVerificationToken" type="hidden" value="{LOGIN_TOKEN}" />'
        '<input id="Email" name="Email" type="email" value="" />'
        '<input id="Password" name="Password" type="password" />'
        "</form></body></html>"
    )


@pytest.fixture
def login_result_html() -> str:
    """Fixture providing the page shown after a successful login."""
    return (
        "<html><body><table><tr onclick=\"javascript:changeDeviceAndRedirect("
        f"'/Home/Index/{{0}}','{DEVICE_ID}');\"><td>CV-ketel</td></tr></table></body></html>"
    )


@pytest.fixture
def device_home_html() -> str:
    """Fixture providing the device home page with a fresh token."""
    return f"<html><body>{_token_form(HOME_TOKEN)}</body></html>"


@pytest.fixture
def diagnostics_html() -> str:
    """Fixture providing a Dutch latest report page."""
    fields = [
        ("Apparaat alias", "CV-ketel"),
        ("Laatste rapportagetijd", "2016-01-12 20:15:03"),
        ("Verbonden met", "Thuisnetwerk"),
        ("Branduren", "1084"),
        ("Ketel in bedrijf voor", "3u 20m"),
        ("Brander status", "Aan"),
        ("Kamertemperatuur", "20,3"),
        ("Buitentemperatuur", "8,2"),
        ("Setpoint warmwater", "60,0"),
        ("Warmwatertemperatuur", "37,4"),
        ("Setpoint cv", "0,0"),
        ("CV-aanvoertemperatuur", "25,1"),
        ("CV-waterdruk", "1,8"),
        ("CV retourtemperatuur", "24,9"),
    ]
    body = "".join(_field(label, value) for label, value in fields)
    return f"<html><body><form class=\"form-horizontal\">\n{body}</form></body></html>"


@pytest.fixture
def setpoint_response_html() -> str:
    """Fixture providing the setpoint acknowledgement with an embedded state fragment."""
    return (
        '<script>var state = "{\\"ch_control_mode\\":0,\\"temp_influenced\\":false,'
        '\\"room_temp\\":18.0,\\"ch_mode_temp\\":18.2,\\"is_heating\\":true,'
        '\\"vacationPlanned\\":false,\\"outside_temp\\":null}";</script>'
    )


@pytest.fixture
def portal_session(
    login_page_html: str,
    login_result_html: str,
    device_home_html: str,
    diagnostics_html: str,
    setpoint_response_html: str,
) -> Mock:
    """Fixture providing a requests session double that serves the canned portal pages."""
    pages = {
        URL_LOGIN: login_page_html,
        URL_DEVICE_HOME.replace("{device_id}", DEVICE_ID): device_home_html,
        URL_DIAGNOSTICS: diagnostics_html,
    }
    posts = {
        URL_LOGIN: login_result_html,
        f"{URL_DEVICE_SET_SETPOINT}/{DEVICE_ID}": setpoint_response_html,
    }

    def _get(url, **kwargs):
        return fake_response(pages[url])

    def _post(url, data=None, **kwargs):
        return fake_response(posts[url.split("?")[0]])

    session = Mock(spec=requests.Session)
    session.get.side_effect = _get
    session.post.side_effect = _post
    return session
