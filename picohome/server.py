"""TCP server that exposes the home controller as a small web page."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from collections import deque
from contextlib import suppress

from picohome.controller import Buzzer, Controller, Led
from picohome.matrix import PIXELS, LedMatrix
from picohome.ssd1306 import SSD1306

log = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 80

# Reading at which the sensor sits near its 27 degree reference; there is no
# on-chip sensor to sample here.
_NOMINAL_RAW = 876
_REFRESH_INTERVAL = 0.05
_RECV_SIZE = 1460


class _LatestBus:
    """A bus that keeps only the most recent write."""

    def __init__(self) -> None:
        self.last: tuple[int, bytes] | None = None

    def write(self, address: int, data: bytes) -> None:
        self.last = (address, bytes(data))


def build_controller() -> Controller:
    """A controller wired to in-memory display, matrix, buzzer and LEDs."""
    display = SSD1306(_LatestBus())
    display.config()
    display.fill(False)
    display.send_data()
    matrix_words: deque[int] = deque(maxlen=PIXELS)
    buzzer_pin: list[bool] = [False]

    def write_pin(level: bool) -> None:
        buzzer_pin[0] = level

    leds: dict[Led, bool] = {}
    return Controller(
        display,
        LedMatrix(matrix_words.append),
        Buzzer(write_pin, time.sleep),
        leds.__setitem__,
        time.sleep,
    )


async def _refresh_loop(controller: Controller) -> None:
    while True:
        controller.refresh_display()
        await asyncio.sleep(_REFRESH_INTERVAL)


async def _handle(
    controller: Controller, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
) -> None:
    try:
        while data := await reader.read(_RECV_SIZE):
            request = data.decode("utf-8", errors="replace")
            writer.write(controller.respond(request, _NOMINAL_RAW))
            await writer.drain()
    except ConnectionError:
        pass
    finally:
        writer.close()
        with suppress(ConnectionError):
            await writer.wait_closed()


async def _run(controller: Controller, host: str, port: int) -> None:
    server = await asyncio.start_server(
        lambda reader, writer: _handle(controller, reader, writer), host, port
    )
    log.info("Server listening on port %d", port)
    refresher = asyncio.create_task(_refresh_loop(controller))
    try:
        async with server:
            await server.serve_forever()
    finally:
        refresher.cancel()
        with suppress(asyncio.CancelledError):
            await refresher


def serve(controller: Controller, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Serve the control page until interrupted; raises OSError if binding fails."""
    asyncio.run(_run(controller, host, port))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="picohome", description="Serve the home control page."
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    controller = build_controller()
    try:
        serve(controller, args.host, args.port)
    except OSError as error:
        print(f"Failed to bind TCP server to port {args.port}: {error}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())