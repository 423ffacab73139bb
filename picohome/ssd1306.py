"""Frame buffer and drawing routines for an SSD1306 OLED display on an I2C bus."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol

from picohome.font import ascii_glyph, compact_glyph

WIDTH = 128
HEIGHT = 64
DEFAULT_ADDRESS = 0x3C

_DATA_PREFIX = 0x40
_COMMAND_PREFIX = 0x80


class Command(IntEnum):
    """SSD1306 command opcodes."""

    SET_CONTRAST = 0x81
    SET_ENTIRE_ON = 0xA4
    SET_NORM_INV = 0xA6
    SET_DISP = 0xAE
    SET_MEM_ADDR = 0x20
    SET_COL_ADDR = 0x21
    SET_PAGE_ADDR = 0x22
    SET_DISP_START_LINE = 0x40
    SET_SEG_REMAP = 0xA0
    SET_MUX_RATIO = 0xA8
    SET_COM_OUT_DIR = 0xC0
    SET_DISP_OFFSET = 0xD3
    SET_COM_PIN_CFG = 0xDA
    SET_DISP_CLK_DIV = 0xD5
    SET_PRECHARGE = 0xD9
    SET_VCOM_DESEL = 0xDB
    SET_CHARGE_PUMP = 0x8D


class _Bus(Protocol):
    def write(self, address: int, data: bytes) -> None: ...


@dataclass
class MemoryBus:
    """An I2C bus that records every write instead of sending it."""

    writes: list[tuple[int, bytes]] = field(default_factory=list)

    def write(self, address: int, data: bytes) -> None:
        self.writes.append((address, bytes(data)))


def _u8(value: int) -> int:
    return value & 0xFF


def _scale_steps(scale: float) -> range:
    return range(max(0, math.ceil(scale)))


class SSD1306:
    """In-memory frame buffer of an SSD1306 in vertical addressing mode."""

    def __init__(
        self,
        bus: _Bus,
        width: int = WIDTH,
        height: int = HEIGHT,
        external_vcc: bool = False,
        address: int = DEFAULT_ADDRESS,
    ) -> None:
        self.bus = bus
        self.width = width
        self.height = height
        self.pages = height // 8
        self.external_vcc = external_vcc
        self.address = address
        self.buffer = bytearray(self.pages * self.width + 1)
        self.buffer[0] = _DATA_PREFIX

    # -- bus traffic -------------------------------------------------------

    def command(self, command: int) -> None:
        """Send a single command byte."""
        self.bus.write(self.address, bytes((_COMMAND_PREFIX, _u8(command))))

    def config(self) -> None:
        """Send the power-up configuration sequence."""
        for byte in (
            Command.SET_DISP | 0x00,
            Command.SET_MEM_ADDR,
            0x01,
            Command.SET_DISP_START_LINE | 0x00,
            Command.SET_SEG_REMAP | 0x01,
            Command.SET_MUX_RATIO,
            HEIGHT - 1,
            Command.SET_COM_OUT_DIR | 0x08,
            Command.SET_DISP_OFFSET,
            0x00,
            Command.SET_COM_PIN_CFG,
            0x12,
            Command.SET_DISP_CLK_DIV,
            0x80,
            Command.SET_PRECHARGE,
            0xF1,
            Command.SET_VCOM_DESEL,
            0x30,
            Command.SET_CONTRAST,
            0xFF,
            Command.SET_ENTIRE_ON,
            Command.SET_NORM_INV,
            Command.SET_CHARGE_PUMP,
            0x14,
            Command.SET_DISP | 0x01,
        ):
            self.command(byte)

    def send_data(self) -> None:
        """Set the full address window and send the whole frame buffer."""
        for byte in (
            Command.SET_COL_ADDR,
            0,
            self.width - 1,
            Command.SET_PAGE_ADDR,
            0,
            self.pages - 1,
        ):
            self.command(byte)
        self.bus.write(self.address, bytes(self.buffer))

    # -- pixels ------------------------------------------------------------

    def _locate(self, x: int, y: int) -> tuple[int, int]:
        x, y = _u8(x), _u8(y)
        index = (y >> 3) + (x << 3) + 1
        if index >= len(self.buffer):
            raise IndexError(f"pixel ({x}, {y}) lies outside the frame buffer")
        return index, 1 << (y & 0b111)

    def pixel(self, x: int, y: int, value: bool) -> None:
        """Set or clear one pixel; coordinates wrap like unsigned bytes."""
        index, bit = self._locate(x, y)
        if value:
            self.buffer[index] |= bit
        else:
            self.buffer[index] &= ~bit & 0xFF

    def get_pixel(self, x: int, y: int) -> bool:
        """Whether a pixel is lit in the frame buffer."""
        index, bit = self._locate(x, y)
        return bool(self.buffer[index] & bit)

    def fill(self, value: bool) -> None:
        for y in range(self.height):
            for x in range(self.width):
                self.pixel(x, y, value)

    # -- shapes ------------------------------------------------------------

    def rect(
        self, top: int, left: int, width: int, height: int, value: bool, fill: bool
    ) -> None:
        """Draw a rectangle outline, optionally filled."""
        right = left + width - 1
        bottom = top + height - 1
        for x in range(left, left + width):
            self.pixel(x, top, value)
            self.pixel(x, bottom, value)
        for y in range(top, top + height):
            self.pixel(left, y, value)
            self.pixel(right, y, value)
        if fill:
            for x in range(left + 1, right):
                for y in range(top + 1, bottom):
                    self.pixel(x, y, value)

    def line(self, x0: int, y0: int, x1: int, y1: int, value: bool) -> None:
        """Draw a straight line with Bresenham's algorithm."""
        x0, y0, x1, y1 = _u8(x0), _u8(y0), _u8(x1), _u8(y1)
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx - dy
        while True:
            self.pixel(x0, y0, value)
            if x0 == x1 and y0 == y1:
                break
            e2 = err * 2
            if e2 > -dy:
                err -= dy
                x0 = _u8(x0 + sx)
            if e2 < dx:
                err += dx
                y0 = _u8(y0 + sy)

    def hline(self, x0: int, x1: int, y: int, value: bool) -> None:
        for x in range(x0, x1 + 1):
            self.pixel(x, y, value)

    def vline(self, x: int, y0: int, y1: int, value: bool) -> None:
        for y in range(y0, y1 + 1):
            self.pixel(x, y, value)

    def draw_square(self, x: int, y: int) -> None:
        """Light an 8x8 block."""
        for i in range(8):
            for j in range(8):
                self.pixel(x + i, y + j, True)

    # -- text --------------------------------------------------------------

    def draw_char(self, char: str, x: int, y: int) -> None:
        """Draw a compact-font glyph, writing both lit and dark pixels of its cell."""
        for i, column in enumerate(compact_glyph(char)):
            for j in range(8):
                self.pixel(x + i, y + j, bool(column & (1 << j)))

    def draw_char_scaled(self, char: str, x: int, y: int, scale: float) -> None:
        """Draw an ASCII-font glyph scaled by ``scale``, lighting pixels only."""
        steps = _scale_steps(scale)
        for i, column in enumerate(ascii_glyph(char)):
            for j in range(8):
                if not column & (1 << j):
                    continue
                base_x = x + _u8(int(i * scale))
                base_y = y + _u8(int(j * scale))
                for dx in steps:
                    for dy in steps:
                        self.pixel(base_x + dx, base_y + dy, True)

    def draw_string_scaled(self, text: str, x: int, y: int, scale: float) -> None:
        """Draw text in the scaled ASCII font, wrapping at the right edge."""
        char_width = _u8(int(8 * scale))
        char_height = _u8(int(8 * scale))
        x, y = _u8(x), _u8(y)
        for char in text:
            self.draw_char_scaled(char, x, y, scale)
            x = _u8(x + char_width)
            if x + char_width >= self.width:
                x = 0
                y = _u8(y + char_height)
            if y + char_height >= self.height:
                break

    def draw_string(self, text: str, x: int, y: int) -> None:
        """Draw text in the compact font, wrapping at the right edge."""
        x, y = _u8(x), _u8(y)
        for char in text:
            self.draw_char(char, x, y)
            x = _u8(x + 8)
            if x + 8 >= self.width:
                x = 0
                y = _u8(y + 8)
            if y + 8 >= self.height:
                break

    # -- screens -----------------------------------------------------------

    def draw_ohmmeter_template(self) -> None:
        """Draw the ohmmeter screen layout and send it."""
        self.fill(False)
        self.rect(2, 2, self.width - 4, self.height - 4, True, False)
        self.draw_string("OHMIMETRO", 32, 8)
        self.hline(10, self.width - 10, 20, True)
        self.draw_string("RESISTOR:", 10, 30)
        self.draw_string("1.5K", 80, 30)
        self.hline(20, 40, 50, True)
        self.hline(85, 105, 50, True)
        self.rect(40, 45, 45, 10, True, False)
        self.vline(50, 45, 55, True)
        self.vline(60, 45, 55, True)
        self.vline(70, 45, 55, True)
        self.hline(10, self.width - 10, self.height - 15, True)
        self.draw_string("MEDIR", 50, self.height - 10)
        self.send_data()

    def draw_traffic_light_template(self) -> None:
        """Draw the traffic-light screen layout and send it."""
        self.fill(False)
        self.rect(3, 3, 122, 58, True, False)
        self.draw_string_scaled("Semaforo inteligente", 3, 6, 0.8)
        self.hline(10, 118, 16, True)
        self.hline(10, 118, 26, True)
        self.send_data()

    def divide_into_four_rows(self) -> None:
        """Clear the screen, frame it, split it into four rows and send it."""
        self.fill(False)
        self.rect(0, 0, self.width, self.height, True, False)
        spacing = self.height // 4
        for i in range(1, 4):
            self.hline(0, self.width - 1, i * spacing, True)
        self.send_data()