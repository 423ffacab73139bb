"""Colour encoding and drawing for the 5x5 WS2812 LED matrix."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

PIXELS = 25

V_SHAPE: tuple[float, ...] = (
    0.0, 0.0, 0.0, 0.0, 0.0,
    0.1, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 0.1, 0.0,
    0.0, 0.0, 0.1, 0.0, 0.1,
    0.0, 0.1, 0.0, 0.0, 0.0,
)

BLANK: tuple[float, ...] = (0.0,) * PIXELS

SMILEY: tuple[float, ...] = (
    0.0, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.1, 0.0, 0.1, 0.0,
    0.0, 0.0, 0.0, 0.0, 0.0,
    0.1, 0.0, 0.0, 0.0, 0.1,
    0.1, 0.1, 0.1, 0.1, 0.1,
)


def _channel(level: float) -> int:
    if not 0.0 <= level <= 1.0:
        raise ValueError(f"colour level must lie between 0 and 1, got {level!r}")
    return int(level * 255)


def matrix_rgb(b: float, r: float, g: float) -> int:
    """Pack blue, red and green levels (0..1) into one GRB word for the matrix."""
    return (_channel(g) << 24) | (_channel(r) << 16) | (_channel(b) << 8)


def _frame(pattern: Iterable[float], colour: Callable[[float], int]) -> list[int]:
    levels = tuple(pattern)
    if len(levels) != PIXELS:
        raise ValueError(f"a pattern holds {PIXELS} levels, got {len(levels)}")
    # The matrix is fed from the last pixel to the first.
    return [colour(level) for level in reversed(levels)]


def green_frame(pattern: Iterable[float]) -> list[int]:
    """Words that draw the pattern in green, in the order the matrix takes them."""
    return _frame(pattern, lambda level: matrix_rgb(0.0, 0.0, level))


def red_frame(pattern: Iterable[float]) -> list[int]:
    """Words that draw the pattern in red, in the order the matrix takes them."""
    return _frame(pattern, lambda level: matrix_rgb(0.0, level, 0.0))


class LedMatrix:
    """Pushes frames to the matrix one word at a time through ``sink``."""

    def __init__(self, sink: Callable[[int], None]) -> None:
        self.sink = sink

    def _push(self, frame: Sequence[int]) -> list[int]:
        for word in frame:
            self.sink(word)
        return list(frame)

    def show_green(self, pattern: Iterable[float]) -> list[int]:
        """Draw the pattern in green and return the words sent."""
        return self._push(green_frame(pattern))

    def show_red(self, pattern: Iterable[float]) -> list[int]:
        """Draw the pattern in red and return the words sent."""
        return self._push(red_frame(pattern))