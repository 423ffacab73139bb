import pytest

from picohome.font import ascii_glyph, compact_glyph
from picohome.ssd1306 import HEIGHT, Command, MemoryBus, SSD1306


@pytest.fixture
def bus():
    return MemoryBus()


@pytest.fixture
def display(bus):
    return SSD1306(bus)


def lit(display):
    return {
        (x, y)
        for x in range(display.width)
        for y in range(display.height)
        if display.get_pixel(x, y)
    }


def glyph_pixels(glyph, x, y):
    return {(x + i, y + j) for i, column in enumerate(glyph) for j in range(8) if column >> j & 1}


def test_new_buffer_has_data_prefix_and_is_dark(display):
    assert display.buffer[0] == 0x40
    assert not any(display.buffer[1:])
    assert display.pages == display.height // 8
    assert len(display.buffer) == display.pages * display.width + 1
    assert lit(display) == set()


def test_command_writes_control_pair(display, bus):
    display.command(Command.SET_CONTRAST)
    assert bus.writes == [(0x3C, bytes([0x80, 0x81]))]


def test_custom_address_is_used(bus):
    display = SSD1306(bus, 128, 64, False, 0x3D)
    display.command(Command.SET_DISP)
    assert bus.writes == [(0x3D, bytes([0x80, 0xAE]))]


def test_config_sequence(display, bus):
    display.config()
    payloads = [data for _, data in bus.writes]
    assert all(len(p) == 2 and p[0] == 0x80 for p in payloads)
    commands = [p[1] for p in payloads]
    assert len(commands) == 25
    assert commands[0] == Command.SET_DISP
    assert commands[-1] == Command.SET_DISP | 0x01
    mux = commands.index(Command.SET_MUX_RATIO)
    assert commands[mux + 1] == HEIGHT - 1
    pump = commands.index(Command.SET_CHARGE_PUMP)
    assert commands[pump + 1] == 0x14


def test_send_data_sets_window_then_writes_buffer(display, bus):
    display.pixel(3, 4, True)
    display.send_data()
    assert len(bus.writes) == 7
    window = [data[1] for _, data in bus.writes[:6]]
    assert window == [
        Command.SET_COL_ADDR,
        0,
        display.width - 1,
        Command.SET_PAGE_ADDR,
        0,
        display.pages - 1,
    ]
    assert bus.writes[-1] == (0x3C, bytes(display.buffer))


@pytest.mark.parametrize("x, y", [(0, 0), (5, 3), (127, 63), (64, 32), (13, 47)])
def test_pixel_round_trip(display, x, y):
    display.pixel(x, y, True)
    assert display.get_pixel(x, y)
    assert lit(display) == {(x, y)}
    display.pixel(x, y, False)
    assert not display.get_pixel(x, y)
    assert lit(display) == set()


def test_pixel_layout_is_vertical_bytes(display):
    display.pixel(0, 0, True)
    assert display.buffer[1] == 0x01
    display.pixel(0, 7, True)
    assert display.buffer[1] == 0x81


def test_pixel_coordinates_wrap_like_bytes(display):
    display.pixel(256 + 5, 3, True)
    assert display.get_pixel(5, 3)


def test_pixel_outside_buffer_raises(display):
    with pytest.raises(IndexError):
        display.pixel(200, 0, True)
    with pytest.raises(IndexError):
        display.get_pixel(200, 0)


def test_fill_lights_and_clears_everything(display):
    display.fill(True)
    assert all(byte == 0xFF for byte in display.buffer[1:])
    assert len(lit(display)) == display.width * display.height
    display.fill(False)
    assert not any(display.buffer[1:])
    assert display.buffer[0] == 0x40


def test_rect_outline(display):
    top, left, width, height = 10, 20, 30, 15
    display.rect(top, left, width, height, True, False)
    right, bottom = left + width - 1, top + height - 1
    pixels = lit(display)
    for corner in [(left, top), (right, top), (left, bottom), (right, bottom)]:
        assert corner in pixels
    assert all(x in (left, right) or y in (top, bottom) for x, y in pixels)
    assert (left + 5, top + 5) not in pixels


def test_rect_filled(display):
    top, left, width, height = 4, 6, 9, 7
    display.rect(top, left, width, height, True, True)
    expected = {(x, y) for x in range(left, left + width) for y in range(top, top + height)}
    assert lit(display) == expected


def test_line_diagonal(display):
    display.line(0, 0, 5, 5, True)
    assert lit(display) == {(i, i) for i in range(6)}


def test_line_horizontal_matches_hline(bus):
    a = SSD1306(bus)
    b = SSD1306(bus)
    a.line(3, 9, 40, 9, True)
    b.hline(3, 40, 9, True)
    assert a.buffer == b.buffer


def test_line_vertical_matches_vline(bus):
    a = SSD1306(bus)
    b = SSD1306(bus)
    a.line(12, 2, 12, 50, True)
    b.vline(12, 2, 50, True)
    assert a.buffer == b.buffer


@pytest.mark.parametrize("x0, y0, x1, y1", [(10, 3, 40, 20), (40, 20, 10, 3), (5, 60, 9, 1)])
def test_line_is_connected_between_endpoints(display, x0, y0, x1, y1):
    display.line(x0, y0, x1, y1, True)
    pixels = lit(display)
    assert (x0, y0) in pixels and (x1, y1) in pixels
    assert len(pixels) == max(abs(x1 - x0), abs(y1 - y0)) + 1
    for x, y in pixels - {(x0, y0)}:
        assert any(abs(x - u) <= 1 and abs(y - v) <= 1 for u, v in pixels - {(x, y)})


@pytest.mark.parametrize("char", ["A", "7", "z"])
def test_draw_char_matches_compact_glyph(display, char):
    display.draw_char(char, 10, 20)
    assert lit(display) == glyph_pixels(compact_glyph(char), 10, 20)


def test_draw_char_clears_its_cell(display):
    display.fill(True)
    display.draw_char("!", 16, 8)
    pixels = lit(display)
    assert not any((16 + i, 8 + j) in pixels for i in range(8) for j in range(8))
    assert (15, 8) in pixels and (24, 8) in pixels


def test_draw_char_scaled_unit_matches_ascii_glyph(display):
    display.draw_char_scaled("R", 30, 10, 1.0)
    assert lit(display) == glyph_pixels(ascii_glyph("R"), 30, 10)


def test_draw_char_scaled_double_makes_blocks(display):
    glyph = ascii_glyph("I")
    display.draw_char_scaled("I", 0, 0, 2.0)
    pixels = lit(display)
    for x, y in glyph_pixels(glyph, 0, 0):
        for dx in range(2):
            for dy in range(2):
                assert (2 * x + dx, 2 * y + dy) in pixels
    assert len(pixels) == 4 * len(glyph_pixels(glyph, 0, 0))


def test_draw_char_scaled_never_clears(display):
    display.fill(True)
    display.draw_char_scaled("W", 20, 20, 1.0)
    assert len(lit(display)) == display.width * display.height


def test_draw_char_scaled_fraction_stays_in_cell(display):
    display.draw_char_scaled("M", 40, 30, 0.9)
    pixels = lit(display)
    assert pixels
    assert all(40 <= x < 48 and 30 <= y < 38 for x, y in pixels)


def test_draw_string_scaled_places_characters_side_by_side(bus):
    a = SSD1306(bus)
    b = SSD1306(bus)
    a.draw_string_scaled("Hi", 4, 4, 1.0)
    b.draw_char_scaled("H", 4, 4, 1.0)
    b.draw_char_scaled("i", 12, 4, 1.0)
    assert a.buffer == b.buffer


def test_draw_string_wraps_at_right_edge(display):
    display.draw_string("AB", 112, 0)
    expected = glyph_pixels(compact_glyph("A"), 112, 0) | glyph_pixels(compact_glyph("B"), 0, 8)
    assert lit(display) == expected


def test_draw_string_stops_at_bottom(display):
    display.draw_string("ABC", 0, 56)
    assert lit(display) == glyph_pixels(compact_glyph("A"), 0, 56)


def test_draw_square(display):
    display.draw_square(30, 40)
    assert lit(display) == {(30 + i, 40 + j) for i in range(8) for j in range(8)}


def test_divide_into_four_rows(display, bus):
    display.pixel(50, 5, True)
    display.divide_into_four_rows()
    pixels = lit(display)
    spacing = display.height // 4
    for row in (spacing, 2 * spacing, 3 * spacing, 0, display.height - 1):
        assert all((x, row) in pixels for x in range(display.width))
    assert (50, 5) not in pixels
    assert all((0, y) in pixels and (display.width - 1, y) in pixels for y in range(display.height))
    assert bus.writes[-1] == (0x3C, bytes(display.buffer))


def test_ohmmeter_template(display, bus):
    display.draw_ohmmeter_template()
    pixels = lit(display)
    assert (2, 2) in pixels
    assert (display.width - 3, display.height - 3) in pixels
    assert all((x, 20) in pixels for x in range(10, display.width - 9))
    assert all((50, y) in pixels for y in range(45, 56))
    assert bus.writes[-1] == (0x3C, bytes(display.buffer))


def test_traffic_light_template(display, bus):
    display.draw_traffic_light_template()
    pixels = lit(display)
    assert (3, 3) in pixels
    assert (3 + 122 - 1, 3 + 58 - 1) in pixels
    assert all((x, 16) in pixels and (x, 26) in pixels for x in range(10, 119))
    assert bus.writes[-1] == (0x3C, bytes(display.buffer))