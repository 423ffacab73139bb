# picohome

picohome is a small home-control web server. A browser shows a page of
buttons. Each button switches one of three lights, the board LED or a "TV",
or sounds a buzzer. The package keeps the state of the house in memory. It
draws the state on a model of a 128x64 SSD1306 OLED frame buffer, and it
draws the TV state as frames for a 5x5 RGB LED matrix.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
picohome
```

The command takes these options:

- `--host`: the address to listen on. The default is `0.0.0.0`.
- `--port`: the TCP port. The default is `80`.

If the server cannot bind the port, the command prints an error and exits
with status 1. Ctrl-C stops it.

Every request gets the control page back. The controller acts on the first
of these paths that appears in the request as `GET <path>`, checked in this
order:

| Path        | Effect                                   |
|-------------|------------------------------------------|
| `/luz3_on`  | Light 3 (blue LED) on                    |
| `/luz3_off` | Light 3 off                              |
| `/luz1_on`  | Light 1 (green LED) on                   |
| `/luz1_off` | Light 1 off                              |
| `/luz2_on`  | Light 2 (red LED) on                     |
| `/luz2_off` | Light 2 off                              |
| `/on`       | Board LED on                             |
| `/off`      | Board LED off                            |
| `/tv_on`    | Smiley drawn in green on the LED matrix  |
| `/tv_off`   | LED matrix cleared                       |
| `/som_on`   | Buzzer beeps four times                  |

The buzzer toggles its pin with real sleeps. A `/som_on` request therefore
takes about eight seconds, and the server answers nothing else while it
runs. While the server runs, the status display is redrawn every 50 ms.

## What the server does not do

The server drives no hardware. The display, the LED matrix, the LEDs and the
buzzer pin all exist only in memory. There is no temperature sensor. The page
always shows the temperature for a fixed reading of 876, which is about
27 °C.

## Using the library

### The display

`picohome.ssd1306.SSD1306(bus, width=128, height=64, external_vcc=False, address=0x3C)`
keeps the display's frame buffer in memory, in vertical addressing mode. It
sends commands and the buffer to `bus`. Any object with a
`write(address, data)` method will do. `MemoryBus` records every write in
its `writes` list:

```python
from picohome.ssd1306 import SSD1306, MemoryBus

bus = MemoryBus()
oled = SSD1306(bus)
oled.config()
oled.fill(False)
oled.draw_string_scaled("Luz 1 - ", 4, 4, 0.9)
oled.line(0, 0, 127, 63, True)
oled.send_data()
print(oled.get_pixel(0, 0))   # True
```

The pixel methods work like this:

- `pixel(x, y, value)` sets or clears one pixel.
- `get_pixel(x, y)` reads one pixel.
- `fill(value)` sets or clears every pixel.

Coordinates wrap like unsigned bytes. A pixel that falls outside the buffer
raises `IndexError`.

The shape methods are `rect(top, left, width, height, value, fill)`,
`line` (Bresenham), `hline`, `vline` and `draw_square`, which lights an 8x8
block.

There are two ways to draw text:

- `draw_char` and `draw_string` use the compact font. They write both the lit
  and the dark pixels of each 8x8 cell.
- `draw_char_scaled` and `draw_string_scaled` use the ASCII font scaled by a
  factor. They only light pixels.

Both string methods wrap at the right edge and stop at the bottom.

`config()` sends the power-up command sequence. `command(byte)` sends one
command. `send_data()` sets the full column and page window and then sends
the buffer. `Command` lists the command opcodes.

There are three ready-made screens: `draw_ohmmeter_template`,
`draw_traffic_light_template` and `divide_into_four_rows`. Each one clears
the buffer, draws its layout and sends it.

### The font tables

`picohome.font` holds two 8x8 bitmap fonts. Each glyph is eight column bytes.

- `compact_glyph(char)` covers letters and digits. Any other character gives
  a blank glyph.
- `ascii_glyph(char)` covers `' '` to `'~'`. Any other character gives the
  space glyph.

Both functions raise `TypeError` if they are not given a string. They raise
`ValueError` if the string is not a single character.

### The LED matrix

`picohome.matrix.matrix_rgb(b, r, g)` packs blue, red and green levels into
one GRB word. Each level must lie between 0.0 and 1.0, or `ValueError` is
raised. `green_frame(pattern)` and `red_frame(pattern)` turn a pattern of 25
levels into the 25 words of one frame, last pixel first. `LedMatrix(sink)`
passes each word of a frame to `sink`. Its `show_green` and `show_red`
methods return the words they sent. The module also defines the patterns
`V_SHAPE`, `SMILEY` and `BLANK`.

### The controller

`picohome.controller.Controller(display, matrix, buzzer, leds, sleeper)`
does the server's work with no network involved. `leds` is called as
`leds(Led.GREEN, True)` and so on, and `sleeper` takes seconds. Its state is
a `HomeState` with the fields `light1`, `light2`, `light3`, `tv` and
`onboard_led`.

- `handle_request(request)` carries out the first matching path and returns
  it. It returns `None` if no path matches.
- `respond(request, raw_temperature)` handles the request. It then returns
  the HTTP response, encoded as UTF-8 and cut to at most 1023 bytes.
- `refresh_display()` redraws the four status rows and sends them.
- `play_sound()` beeps four times at 1 kHz, for one second each. It pauses
  one second after each beep and redraws the display.

```python
from picohome.controller import Buzzer, Controller
from picohome.matrix import LedMatrix
from picohome.ssd1306 import SSD1306, MemoryBus

leds = {}
words = []
controller = Controller(
    SSD1306(MemoryBus()),
    LedMatrix(words.append),
    Buzzer(lambda level: None, lambda seconds: None),
    leds.__setitem__,
    lambda seconds: None,
)
reply = controller.respond("GET /luz1_on HTTP/1.1\r\n\r\n", 876)
print(controller.state.light1)   # True
```

The module also has these functions and classes:

- `temperature_from_adc(raw)` turns a 12-bit sensor reading (0 to 4095) into
  °C.
- `render_page(temperature)` builds the full HTTP response text.
- `Buzzer(pin_writer, sleeper).beep(frequency, duration_ms)` toggles a pin as
  a square wave.

### The server module

`picohome.server.build_controller()` returns a controller wired to the
in-memory parts. `serve(controller, host, port)` runs the asyncio server
until it is interrupted.