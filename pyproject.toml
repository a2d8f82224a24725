[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smartchess"
version = "0.1.0"
description = "Rules engine, clock and game recorder for a sensor-driven chess board"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "board game", "chess clock", "pgn", "move validation", "checkmate"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["smartchess"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
