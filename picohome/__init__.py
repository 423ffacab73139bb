"""Home-control web server with an in-memory SSD1306 display model, LED matrix frames and a buzzer."""

__version__ = "0.1.0"
__all__ = ["font", "ssd1306", "matrix", "controller", "server"]