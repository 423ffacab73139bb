"""Home control logic: lights, TV matrix, buzzer, status display and the web page."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from picohome.matrix import BLANK, SMILEY, LedMatrix
from picohome.ssd1306 import SSD1306

log = logging.getLogger(__name__)

ADC_MAX = 4095
_CONVERSION_FACTOR = 3.3 / (1 << 12)
_RESPONSE_LIMIT = 1023

_ROW_Y = (4, 20, 36, 52)
_ROW_LABELS = ("Luz 1 - ", "Luz 2 - ", "Luz 3 - ", "TV - ")
_LABEL_X = 4
_VALUE_X = 68
_TEXT_SCALE = 0.9

_STATUS_TEXT = {True: "ON", False: "OFF"}

_SOUND_REPEATS = 4
_SOUND_FREQUENCY = 1000
_SOUND_DURATION_MS = 1000
_SOUND_PAUSE = 1.0

_PAGE = (
    "HTTP/1.1 200 OK\r\n"
    "Content-Type: text/html\r\n"
    "\r\n"
    "<!DOCTYPE html><html><head><title>Controle</title><style>"
    "body{font-family:Arial;text-align:center;margin:15px}"
    ".btn{display:inline-block;padding:8px 12px;margin:4px;border:none;"
    "border-radius:4px;color:white;text-decoration:none;font-size:14px}"
    ".l1{background:#4CAF50}.l2{background:#F44336}.l3{background:#2196F3}"
    ".tv{background:#9C27B0}.som{background:#FF9800}.off{background:#607D8B}"
    "</style></head><body><h2>Controle Residencial</h2>"
    "<div><a href='/luz1_on' class='btn l1'>Luz 1 ON</a>"
    "<a href='/luz1_off' class='btn off'>OFF</a></div>"
    "<div><a href='/luz2_on' class='btn l2'>Luz 2 ON</a>"
    "<a href='/luz2_off' class='btn off'>OFF</a></div>"
    "<div><a href='/luz3_on' class='btn l3'>Luz 3 ON</a>"
    "<a href='/luz3_off' class='btn off'>OFF</a></div>"
    "<div><a href='/tv_on' class='btn tv'>TV ON</a>"
    "<a href='/tv_off' class='btn off'>OFF</a></div>"
    "<div><a href='/som_on' class='btn som'>Som ON</a></div>"
    "<p>Temp: {temperature:.2f}\u00b0C</p>"
    "</body></html>"
)


def temperature_from_adc(raw: int) -> float:
    """Convert a 12-bit reading of the on-chip sensor to degrees Celsius."""
    if not 0 <= raw <= ADC_MAX:
        raise ValueError(f"ADC reading must lie between 0 and {ADC_MAX}, got {raw!r}")
    return 27.0 - ((raw * _CONVERSION_FACTOR) - 0.706) / 0.001721


def render_page(temperature: float) -> str:
    """The full HTTP response carrying the control page."""
    # str.format would trip over the CSS braces, so substitute the one field directly.
    return _PAGE.replace("{temperature:.2f}", f"{temperature:.2f}")


class Led(Enum):
    ONBOARD = "onboard"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"


class Buzzer:
    """A passive buzzer driven by toggling a pin."""

    def __init__(
        self, pin_writer: Callable[[bool], None], sleeper: Callable[[float], None]
    ) -> None:
        self.pin_writer = pin_writer
        self.sleeper = sleeper

    def beep(self, frequency: int, duration_ms: int) -> None:
        """Square wave at ``frequency`` Hz for ``duration_ms`` milliseconds."""
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency!r}")
        if duration_ms < 0:
            raise ValueError(f"duration must not be negative, got {duration_ms!r}")
        pulse_us = (1_000_000 // frequency) // 2
        cycles = frequency * duration_ms // 1000
        for _ in range(cycles):
            self.pin_writer(True)
            self.sleeper(pulse_us / 1_000_000)
            self.pin_writer(False)
            self.sleeper(pulse_us / 1_000_000)


@dataclass
class HomeState:
    light1: bool = False
    light2: bool = False
    light3: bool = False
    tv: bool = False
    onboard_led: bool = False


class Controller:
    """Acts on web requests and keeps the status display current."""

    def __init__(
        self,
        display: SSD1306,
        matrix: LedMatrix,
        buzzer: Buzzer,
        leds: Callable[[Led, bool], None],
        sleeper: Callable[[float], None],
    ) -> None:
        self.display = display
        self.matrix = matrix
        self.buzzer = buzzer
        self.leds = leds
        self.sleeper = sleeper
        self.state = HomeState()
        for led in (Led.BLUE, Led.GREEN, Led.RED, Led.ONBOARD):
            leds(led, False)
        self._routes: dict[str, Callable[[], None]] = {
            "/luz3_on": lambda: self._set_light(3, Led.BLUE, True),
            "/luz3_off": lambda: self._set_light(3, Led.BLUE, False),
            "/luz1_on": lambda: self._set_light(1, Led.GREEN, True),
            "/luz1_off": lambda: self._set_light(1, Led.GREEN, False),
            "/luz2_on": lambda: self._set_light(2, Led.RED, True),
            "/luz2_off": lambda: self._set_light(2, Led.RED, False),
            "/on": lambda: self._set_onboard(True),
            "/off": lambda: self._set_onboard(False),
            "/tv_on": lambda: self._set_tv(True),
            "/tv_off": lambda: self._set_tv(False),
            "/som_on": self._sound,
        }

    def _set_light(self, number: int, led: Led, on: bool) -> None:
        self.leds(led, on)
        setattr(self.state, f"light{number}", on)

    def _set_onboard(self, on: bool) -> None:
        self.leds(Led.ONBOARD, on)
        self.state.onboard_led = on

    def _set_tv(self, on: bool) -> None:
        log.info("Command received: TV %s", _STATUS_TEXT[on])
        self.matrix.show_green(SMILEY if on else BLANK)
        self.state.tv = on

    def _sound(self) -> None:
        log.info("Activating sound")
        self.play_sound()

    def handle_request(self, request: str) -> str | None:
        """Carry out the first route found in the request; return its path."""
        for path, action in self._routes.items():
            if f"GET {path}" in request:
                action()
                return path
        return None

    def refresh_display(self) -> None:
        """Redraw the four status rows and send them to the display."""
        display = self.display
        display.divide_into_four_rows()
        values = (self.state.light1, self.state.light2, self.state.light3, self.state.tv)
        for label, y in zip(_ROW_LABELS, _ROW_Y):
            display.draw_string_scaled(label, _LABEL_X, y, _TEXT_SCALE)
        for on, y in zip(values, _ROW_Y):
            display.draw_string_scaled(_STATUS_TEXT[on], _VALUE_X, y, _TEXT_SCALE)
        display.send_data()

    def play_sound(self) -> None:
        """Beep four times, one second each, redrawing the display after each pause."""
        for _ in range(_SOUND_REPEATS):
            self.buzzer.beep(_SOUND_FREQUENCY, _SOUND_DURATION_MS)
            self.sleeper(_SOUND_PAUSE)
            self.refresh_display()

    def respond(self, request: str, raw_temperature: int) -> bytes:
        """Handle a request and build the response, capped like the device's buffer."""
        log.info("Request: %s", request)
        self.handle_request(request)
        temperature = temperature_from_adc(raw_temperature)
        return render_page(temperature).encode("utf-8")[:_RESPONSE_LIMIT]