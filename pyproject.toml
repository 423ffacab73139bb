[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picohome"
version = "0.1.0"
description = "A small home-control web server with an in-memory SSD1306 display model, LED matrix frames and a buzzer."
requires-python = ">=3.10"
dependencies = []
keywords = ["home-automation", "ssd1306", "oled", "led-matrix", "web-server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
picohome = "picohome.server:main"

[tool.hatch.build.targets.wheel]
packages = ["picohome"]

[tool.pytest.ini_options]
addopts = "-ra"
